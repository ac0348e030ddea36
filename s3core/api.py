# -*- coding: utf-8 -*-
# MinIO Python Library for Amazon S3 Compatible Cloud Storage, (C)
# 2015-2026 MinIO, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# pylint: disable=too-many-lines,too-many-public-methods

"""
Simple Storage Service (aka S3) client to perform bucket and object
operations.
"""

from __future__ import absolute_import, annotations

import itertools
import os
from datetime import datetime, timedelta
from typing import BinaryIO, Iterable, Optional, TextIO
from urllib.parse import urlunsplit
from xml.etree import ElementTree as ET

import urllib3
from urllib3._collections import HTTPHeaderDict

try:
    from urllib3.response import BaseHTTPResponse  # type: ignore[attr-defined]
except ImportError:
    from urllib3.response import HTTPResponse as BaseHTTPResponse

from . import time
from .checksum import md5sum_hash
from .config import ClientConfig, new_http_client
from .credentials import Provider, StaticProvider
from .datatypes import (Bucket, ComposeSource, DeleteError, DeleteObject,
                        DeleteResult, ListAllMyBucketsResult,
                        ListMultipartUploadsResult, ListPartsResult, Object,
                        ObjectWriteResult, Part, Upload, delete_request_xml,
                        parse_list_objects, parse_xml)
from .download import ResumableDownloader
from .endpoint import BaseURL
from .error import ArgumentError, InvalidResponseError, S3Error
from .executor import HttpExecutor, Request
from .helpers import (MAX_DELETE_OBJECTS, HeaderValue, ProgressType,
                      QueryDict, check_bucket_name, check_object_name,
                      metadata_headers)
from .multipart import MultipartUploader, UploadSession
from .notification import EventStream
from .pagination import Page, PaginatedIterator
from .region import DEFAULT_REGION
from .signer import check_presign_expiry, presign_v4
from .xml import Element, SubElement, getbytes, localname

_DEFAULT_EXPIRY = timedelta(days=7)
_DEFAULT_EVENTS = (
    "s3:ObjectCreated:*", "s3:ObjectRemoved:*", "s3:ObjectAccessed:*",
)


class Client:
    """
    Simple Storage Service (aka S3) client to perform bucket and object
    operations.
    """
    _config: ClientConfig
    _executor: HttpExecutor
    _uploader: MultipartUploader

    def __init__(
            self,
            endpoint: str,
            access_key: Optional[str] = None,
            secret_key: Optional[str] = None,
            session_token: Optional[str] = None,
            secure: bool = True,
            region: Optional[str] = None,
            http_client: Optional[urllib3.PoolManager] = None,
            credentials: Optional[Provider] = None,
            cert_check: bool = True,
    ):
        """
        Initializes a new client object.

        Args:
            endpoint (str):
                Hostname of an S3 service, optionally with port.

            access_key (Optional[str], default=None):
                Access key (aka user ID) of your account in the S3 service.

            secret_key (Optional[str], default=None):
                Secret key (aka password) of your account in the S3 service.

            session_token (Optional[str], default=None):
                Session token of your account in the S3 service.

            secure (bool, default=True):
                Flag to indicate whether to use a secure (TLS) connection
                to the S3 service.

            region (Optional[str], default=None):
                Region name of buckets in the S3 service.

            http_client (Optional[urllib3.PoolManager], default=None):
                Customized HTTP client.

            credentials (Optional[Provider], default=None):
                Credentials provider of your account in the S3 service.

            cert_check (bool, default=True):
                Flag to enable/disable server certificate validation
                for HTTPS connections.

        Example:
            >>> from s3core import Client
            >>>
            >>> client = Client(
            ...     endpoint="s3.amazonaws.com",
            ...     access_key="ACCESS-KEY",
            ...     secret_key="SECRET-KEY",
            ... )
        """
        if http_client and not isinstance(http_client, urllib3.PoolManager):
            raise TypeError(
                "HTTP client should be urllib3.PoolManager like object, "
                f"got {type(http_client).__name__}",
            )
        if access_key:
            if secret_key is None:
                raise ArgumentError(
                    "secret key must be provided with access key",
                )
            credentials = StaticProvider(access_key, secret_key, session_token)

        self._config = ClientConfig(
            BaseURL(("https://" if secure else "http://") + endpoint, region),
        )
        self._executor = HttpExecutor(
            self._config,
            http_client or new_http_client(cert_check),
            credentials,
        )
        self._uploader = MultipartUploader(self._executor, self._stat_source)

    def __del__(self):
        if hasattr(self, "_executor"):  # Only required for unit test run
            self._executor.clear()

    @property
    def _base_url(self) -> BaseURL:
        return self._config.base_url

    def _check_bucket_name(self, bucket_name: str, strict: bool = False):
        check_bucket_name(
            bucket_name, strict, s3_check=self._base_url.is_aws_host,
        )

    def _execute(
            self,
            method: str,
            bucket_name: Optional[str] = None,
            object_name: Optional[str] = None,
            body: Optional[bytes] = None,
            headers: Optional[HTTPHeaderDict] = None,
            query_params: Optional[QueryDict] = None,
            preload_content: bool = True,
            region: Optional[str] = None,
    ) -> BaseHTTPResponse:
        return self._executor.execute(
            Request(
                method,
                bucket_name=bucket_name,
                object_name=object_name,
                headers=HTTPHeaderDict(headers),
                query_params=QueryDict(query_params),
                body=body,
                preload_content=preload_content,
            ),
            region,
        )

    def set_app_info(self, app_name: str, app_version: str):
        """
        Set your application name and version to user agent header.

        Args:
            app_name (str):
                Application name.

            app_version (str):
                Application version.

        Example:
            >>> client.set_app_info('my_app', '1.0.2')
        """
        self._config.set_app_info(app_name, app_version)

    def trace_on(self, stream: TextIO):
        """
        Enable http trace.

        Args:
            stream (TextIO):
                Stream for writing HTTP call tracing.
        """
        if not stream:
            raise ArgumentError('Input stream for trace output is invalid.')
        self._config.trace_stream = stream

    def trace_off(self):
        """Disable HTTP trace."""
        self._config.trace_stream = None

    def enable_accelerate_endpoint(self):
        """Enables accelerate endpoint for Amazon S3 endpoint."""
        self._base_url.accelerate_host_flag = True

    def disable_accelerate_endpoint(self):
        """Disables accelerate endpoint for Amazon S3 endpoint."""
        self._base_url.accelerate_host_flag = False

    def enable_dualstack_endpoint(self):
        """Enables dualstack endpoint for Amazon S3 endpoint."""
        self._base_url.dualstack_host_flag = True

    def disable_dualstack_endpoint(self):
        """Disables dualstack endpoint for Amazon S3 endpoint."""
        self._base_url.dualstack_host_flag = False

    def enable_virtual_style_endpoint(self):
        """Enables virtual style endpoint."""
        self._base_url.virtual_style_flag = True

    def disable_virtual_style_endpoint(self):
        """Disables virtual style endpoint."""
        self._base_url.virtual_style_flag = False

    def set_timeout(
            self,
            connect: Optional[float] = None,
            read: Optional[float] = None,
    ):
        """
        Set connect and read timeouts in seconds of subsequent requests.
        None keeps the current value.
        """
        self._config.set_timeout(connect, read)

    def make_bucket(self, bucket_name: str, location: Optional[str] = None):
        """
        Create a bucket with region.

        Args:
            bucket_name (str):
                Name of the bucket.

            location (Optional[str], default=None):
                Region in which the bucket will be created.

        Example:
            >>> client.make_bucket("my-bucket", "eu-west-2")
        """
        self._check_bucket_name(bucket_name, True)
        configured = self._base_url.region
        if configured and location and configured != location:
            raise ArgumentError(
                f"region must be {configured}, but passed {location}",
            )
        location = configured or location or DEFAULT_REGION
        body = None
        if location != DEFAULT_REGION:
            element = Element("CreateBucketConfiguration")
            SubElement(element, "LocationConstraint", location)
            body = getbytes(element)
        self._executor.url_open(
            Request("PUT", bucket_name=bucket_name, body=body), location,
        )
        self._executor.region_cache.set(bucket_name, location)

    def list_buckets(self) -> list[Bucket]:
        """
        List information of all accessible buckets.

        Returns:
            list[Bucket]:
                Buckets owned by the authenticated sender of the request.
        """
        response = self._execute("GET")
        return ListAllMyBucketsResult.fromxml(parse_xml(response)).buckets

    def bucket_exists(
            self, bucket_name: str, region: Optional[str] = None,
    ) -> bool:
        """
        Check if a bucket exists.

        Example:
            >>> if client.bucket_exists("my-bucket"):
            ...     print("my-bucket exists")
        """
        self._check_bucket_name(bucket_name)
        try:
            self._execute("HEAD", bucket_name, region=region)
            return True
        except S3Error as exc:
            if exc.code != "NoSuchBucket":
                raise
        return False

    def remove_bucket(self, bucket_name: str, region: Optional[str] = None):
        """Remove an empty bucket."""
        self._check_bucket_name(bucket_name)
        self._execute("DELETE", bucket_name, region=region)
        self._executor.region_cache.remove(bucket_name)

    def stat_object(
            self,
            bucket_name: str,
            object_name: str,
            version_id: Optional[str] = None,
            region: Optional[str] = None,
    ) -> Object:
        """
        Get object information and metadata of an object.

        Args:
            bucket_name (str):
                Name of the bucket.

            object_name (str):
                Object name in the bucket.

            version_id (Optional[str], default=None):
                Version ID of the object.

            region (Optional[str], default=None):
                Region of the bucket to skip auto probing.

        Returns:
            Object:
                Object information with size, ETag and user metadata.
        """
        self._check_bucket_name(bucket_name)
        check_object_name(object_name)
        response = self._execute(
            "HEAD",
            bucket_name,
            object_name,
            query_params=QueryDict(
                {"versionId": version_id} if version_id else None,
            ),
            region=region,
        )
        return Object.fromheaders(bucket_name, object_name, response.headers)

    def _stat_source(self, source: ComposeSource) -> Object:
        return self.stat_object(
            source.bucket_name,
            source.object_name,
            version_id=source.version_id,
            region=source.region,
        )

    def get_object(  # pylint: disable=too-many-positional-arguments
            self,
            bucket_name: str,
            object_name: str,
            offset: int = 0,
            length: Optional[int] = None,
            version_id: Optional[str] = None,
            match_etag: Optional[str] = None,
            not_match_etag: Optional[str] = None,
            modified_since: Optional[datetime] = None,
            unmodified_since: Optional[datetime] = None,
            region: Optional[str] = None,
    ) -> BaseHTTPResponse:
        """
        Get data of an object. Returned response must be closed after use
        to release network resources; to reuse the connection, call
        ``release_conn()`` explicitly.

        Args:
            bucket_name (str):
                Name of the bucket.

            object_name (str):
                Object name in the bucket.

            offset (int, default=0):
                Start byte position of object data.

            length (Optional[int], default=None):
                Number of bytes of object data from offset.

            version_id (Optional[str], default=None):
                Version ID of the object.

            match_etag, not_match_etag, modified_since, unmodified_since:
                Conditional read headers.

        Returns:
            BaseHTTPResponse:
                An urllib3 response object.

        Example:
            >>> response = None
            >>> try:
            ...     response = client.get_object("my-bucket", "my-object")
            ...     data = response.data
            ... finally:
            ...     if response:
            ...         response.close()
            ...         response.release_conn()
        """
        self._check_bucket_name(bucket_name)
        check_object_name(object_name)
        if offset < 0:
            raise ArgumentError("offset should be zero or greater")
        if length is not None and length <= 0:
            raise ArgumentError("length should be greater than zero")

        headers = HTTPHeaderDict()
        if offset or length:
            end = (offset + length - 1) if length else ""
            headers["Range"] = f"bytes={offset}-{end}"
        if match_etag:
            headers["if-match"] = match_etag
        if not_match_etag:
            headers["if-none-match"] = not_match_etag
        if modified_since:
            headers["if-modified-since"] = time.to_http_header(modified_since)
        if unmodified_since:
            headers["if-unmodified-since"] = time.to_http_header(
                unmodified_since,
            )
        return self._execute(
            "GET",
            bucket_name,
            object_name,
            headers=headers,
            query_params=QueryDict(
                {"versionId": version_id} if version_id else None,
            ),
            preload_content=False,
            region=region,
        )

    def fget_object(
            self,
            bucket_name: str,
            object_name: str,
            file_path: str,
            version_id: Optional[str] = None,
            progress: Optional[ProgressType] = None,
            region: Optional[str] = None,
    ) -> Object:
        """
        Download data of an object to file. An interrupted download is
        resumed from its partial file ``<file_path>.<etag>.part.minio``.

        Returns:
            Object:
                Object information.

        Example:
            >>> client.fget_object("my-bucket", "my-object", "my-filename")
        """
        self._check_bucket_name(bucket_name)
        check_object_name(object_name)
        downloader = ResumableDownloader(
            lambda: self.stat_object(
                bucket_name, object_name, version_id, region,
            ),
            lambda offset, etag: self.get_object(
                bucket_name,
                object_name,
                offset=offset,
                version_id=version_id,
                match_etag=etag,
                region=region,
            ),
        )
        return downloader.download(file_path, progress)

    def put_object(  # pylint: disable=too-many-positional-arguments
            self,
            bucket_name: str,
            object_name: str,
            data: BinaryIO,
            length: int,
            content_type: str = "application/octet-stream",
            metadata: Optional[dict[str, HeaderValue]] = None,
            progress: Optional[ProgressType] = None,
            part_size: int = 0,
            num_parallel_uploads: int = 1,
            region: Optional[str] = None,
    ) -> ObjectWriteResult:
        """
        Uploads data from a stream to an object in a bucket.

        Args:
            bucket_name (str):
                Name of the bucket.

            object_name (str):
                Object name in the bucket.

            data (BinaryIO):
                An object having callable ``read()`` returning bytes.

            length (int):
                Data size; -1 for unknown size and set valid part_size.

            content_type (str, default="application/octet-stream"):
                Content type of the object.

            metadata (Optional[dict], default=None):
                Any additional metadata to be uploaded along with your
                object.

            progress (Optional[ProgressType], default=None):
                A progress object.

            part_size (int, default=0):
                Multipart part size.

            num_parallel_uploads (int, default=1):
                Number of parts to upload in parallel.

        Returns:
            ObjectWriteResult:
                The result of the object creation operation.

        Example:
            >>> result = client.put_object(
            ...     "my-bucket", "my-object", io.BytesIO(b"hello"), 5,
            ... )
        """
        self._check_bucket_name(bucket_name)
        check_object_name(object_name)
        if not callable(getattr(data, "read", None)):
            raise ArgumentError("input data must have callable read()")
        headers = metadata_headers(metadata)
        headers["Content-Type"] = content_type or "application/octet-stream"
        return self._uploader.put_object(
            bucket_name,
            object_name,
            data,
            length,
            headers=headers,
            part_size=part_size,
            progress=progress,
            num_parallel_uploads=num_parallel_uploads,
            region=region,
        )

    def fput_object(  # pylint: disable=too-many-positional-arguments
            self,
            bucket_name: str,
            object_name: str,
            file_path: str,
            content_type: str = "application/octet-stream",
            metadata: Optional[dict[str, HeaderValue]] = None,
            progress: Optional[ProgressType] = None,
            part_size: int = 0,
            num_parallel_uploads: int = 1,
            region: Optional[str] = None,
    ) -> ObjectWriteResult:
        """Uploads data from a file to an object in a bucket."""
        with open(file_path, "rb") as file_data:
            file_size = os.fstat(file_data.fileno()).st_size
            return self.put_object(
                bucket_name,
                object_name,
                file_data,
                file_size,
                content_type=content_type,
                metadata=metadata,
                progress=progress,
                part_size=part_size,
                num_parallel_uploads=num_parallel_uploads,
                region=region,
            )

    def copy_object(
            self,
            bucket_name: str,
            object_name: str,
            source: ComposeSource,
            metadata: Optional[dict[str, HeaderValue]] = None,
            region: Optional[str] = None,
    ) -> ObjectWriteResult:
        """
        Create an object by server-side copying data from another object.
        Metadata, if given, replaces metadata of the source.

        Example:
            >>> result = client.copy_object(
            ...     "my-bucket", "my-object",
            ...     ComposeSource("my-sourcebucket", "my-sourceobject"),
            ... )
        """
        self._check_bucket_name(bucket_name)
        check_object_name(object_name)
        if not isinstance(source, ComposeSource):
            raise ArgumentError("source must be ComposeSource type")
        return self._uploader.copy_object(
            bucket_name,
            object_name,
            source,
            metadata_headers(metadata),
            region,
        )

    def compose_object(
            self,
            bucket_name: str,
            object_name: str,
            sources: list[ComposeSource],
            metadata: Optional[dict[str, HeaderValue]] = None,
            region: Optional[str] = None,
    ) -> ObjectWriteResult:
        """
        Create an object by combining data from different source objects
        using server-side copy. Every source is stat'ed and checked before
        any data is written.

        Args:
            bucket_name (str):
                Name of the bucket.

            object_name (str):
                Object name in the bucket.

            sources (list[ComposeSource]):
                List of source objects.

            metadata (Optional[dict], default=None):
                Any user-defined metadata to be copied along with
                destination object.

        Returns:
            ObjectWriteResult:
                The result of the compose operation.
        """
        self._check_bucket_name(bucket_name)
        check_object_name(object_name)
        return self._uploader.compose_object(
            bucket_name,
            object_name,
            sources,
            metadata_headers(metadata),
            region,
        )

    def remove_object(
            self,
            bucket_name: str,
            object_name: str,
            version_id: Optional[str] = None,
            region: Optional[str] = None,
    ):
        """Remove an object."""
        self._check_bucket_name(bucket_name)
        check_object_name(object_name)
        self._execute(
            "DELETE",
            bucket_name,
            object_name,
            query_params=QueryDict(
                {"versionId": version_id} if version_id else None,
            ),
            region=region,
        )

    def _delete_objects(
            self,
            bucket_name: str,
            objects: list[DeleteObject],
            region: Optional[str] = None,
    ) -> DeleteResult:
        """Execute DeleteObjects S3 API in quiet mode."""
        body = getbytes(delete_request_xml(objects, quiet=True))
        response = self._execute(
            "POST",
            bucket_name,
            body=body,
            headers=HTTPHeaderDict({
                "Content-Type": "application/xml",
                "Content-MD5": md5sum_hash(body),
            }),
            query_params=QueryDict({"delete": ""}),
            region=region,
        )
        try:
            element = ET.fromstring(response.data)
        except ET.ParseError as exc:
            raise InvalidResponseError(
                response.status,
                response.headers.get("content-type"),
                response.data.decode(errors="replace"),
            ) from exc
        if localname(element) == "Error":
            return DeleteResult([DeleteError.fromxml(element)])
        return DeleteResult.fromxml(element)

    def remove_objects(
            self,
            bucket_name: str,
            delete_object_list: Iterable[DeleteObject],
            region: Optional[str] = None,
    ) -> PaginatedIterator[DeleteError]:
        """
        Remove multiple objects, at most 1000 per request. Objects are
        removed lazily, as the returned iterator is consumed; only failures
        are yielded.

        Example:
            >>> errors = client.remove_objects(
            ...     "my-bucket",
            ...     [DeleteObject("my-object1"), DeleteObject("my-object2")],
            ... )
            >>> for result in errors:
            ...     print("error occurred when deleting object", result.get())
        """
        self._check_bucket_name(bucket_name)
        objects = iter(delete_object_list)

        def fetch_page(_) -> Page[DeleteError]:
            batch = list(itertools.islice(objects, MAX_DELETE_OBJECTS))
            if not batch:
                return Page()
            result = self._delete_objects(bucket_name, batch, region)
            # Amazon S3 reports NoSuchVersion for versions already gone.
            return Page(
                [
                    error for error in result.error_list
                    if error.code != "NoSuchVersion"
                ],
                truncated=len(batch) == MAX_DELETE_OBJECTS,
            )

        return PaginatedIterator(fetch_page)

    def list_objects(  # pylint: disable=too-many-positional-arguments
            self,
            bucket_name: str,
            prefix: Optional[str] = None,
            recursive: bool = False,
            start_after: Optional[str] = None,
            include_version: bool = False,
            use_api_v1: bool = False,
            use_url_encoding_type: bool = True,
            fetch_owner: bool = False,
            max_keys: Optional[int] = None,
            region: Optional[str] = None,
    ) -> PaginatedIterator[Object]:
        """
        Lists object information of a bucket.

        Args:
            bucket_name (str):
                Name of the bucket.

            prefix (Optional[str], default=None):
                Object name starts with prefix.

            recursive (bool, default=False):
                List recursively than directory structure emulation.

            start_after (Optional[str], default=None):
                List objects after this key name.

            include_version (bool, default=False):
                Flag to control whether include object versions.

            use_api_v1 (bool, default=False):
                Flag to control to use ListObjectV1 S3 API or not.

            use_url_encoding_type (bool, default=True):
                Flag to control whether URL encoding type to be used or not.

        Returns:
            PaginatedIterator[Object]:
                Iterator of :class:`s3core.pagination.Result` holding
                :class:`s3core.datatypes.Object`.

        Example:
            >>> for result in client.list_objects("my-bucket"):
            ...     print(result.get().object_name)
        """
        self._check_bucket_name(bucket_name)
        if max_keys is not None and max_keys <= 0:
            raise ArgumentError("max_keys must be greater than zero")

        def fetch_page(cursor) -> Page[Object]:
            token, version_id_marker = cursor or (start_after, None)
            query_params = QueryDict()
            if include_version:
                query_params["versions"] = ""
            elif not use_api_v1:
                query_params["list-type"] = "2"
                if fetch_owner:
                    query_params["fetch-owner"] = "true"
            query_params["delimiter"] = "" if recursive else "/"
            if use_url_encoding_type:
                query_params["encoding-type"] = "url"
            query_params["max-keys"] = str(max_keys or 1000)
            query_params["prefix"] = prefix or ""
            if token:
                if include_version:
                    query_params["key-marker"] = token
                elif use_api_v1:
                    query_params["marker"] = token
                elif cursor:
                    query_params["continuation-token"] = token
                else:
                    query_params["start-after"] = token
            if version_id_marker:
                query_params["version-id-marker"] = version_id_marker

            response = self._execute(
                "GET", bucket_name, query_params=query_params, region=region,
            )
            result = parse_list_objects(response)
            return Page(
                result.objects,
                (
                    result.continuation_token,
                    result.version_id_marker if include_version else None,
                ),
                result.is_truncated,
            )

        return PaginatedIterator(fetch_page)

    def list_multipart_uploads(  # pylint: disable=too-many-positional-arguments
            self,
            bucket_name: str,
            prefix: Optional[str] = None,
            delimiter: Optional[str] = None,
            key_marker: Optional[str] = None,
            upload_id_marker: Optional[str] = None,
            max_uploads: Optional[int] = None,
            region: Optional[str] = None,
    ) -> PaginatedIterator[Upload]:
        """Lists in-progress multipart uploads of a bucket."""
        self._check_bucket_name(bucket_name)

        def fetch_page(cursor) -> Page[Upload]:
            next_key, next_upload_id = cursor or (key_marker, upload_id_marker)
            query_params = QueryDict({
                "uploads": "",
                "delimiter": delimiter or "",
                "max-uploads": str(max_uploads or 1000),
                "prefix": prefix or "",
                "encoding-type": "url",
            })
            if next_key:
                query_params["key-marker"] = next_key
            if next_upload_id:
                query_params["upload-id-marker"] = next_upload_id
            response = self._execute(
                "GET", bucket_name, query_params=query_params, region=region,
            )
            result = ListMultipartUploadsResult.fromxml(parse_xml(response))
            return Page(
                result.uploads,
                (result.next_key_marker, result.next_upload_id_marker),
                result.is_truncated,
            )

        return PaginatedIterator(fetch_page)

    def list_incomplete_uploads(
            self,
            bucket_name: str,
            prefix: Optional[str] = None,
            recursive: bool = False,
            region: Optional[str] = None,
    ) -> PaginatedIterator[Upload]:
        """Lists incomplete uploads of objects with given prefix."""
        return self.list_multipart_uploads(
            bucket_name,
            prefix=prefix,
            delimiter=None if recursive else "/",
            region=region,
        )

    def list_parts(  # pylint: disable=too-many-positional-arguments
            self,
            bucket_name: str,
            object_name: str,
            upload_id: str,
            max_parts: Optional[int] = None,
            part_number_marker: Optional[str] = None,
            region: Optional[str] = None,
    ) -> PaginatedIterator[Part]:
        """Lists uploaded parts of a multipart upload."""
        self._check_bucket_name(bucket_name)
        check_object_name(object_name)
        if not upload_id:
            raise ArgumentError("upload ID must not be empty")

        def fetch_page(cursor) -> Page[Part]:
            query_params = QueryDict({
                "uploadId": upload_id,
                "max-parts": str(max_parts or 1000),
            })
            marker = cursor or part_number_marker
            if marker:
                query_params["part-number-marker"] = marker
            response = self._execute(
                "GET",
                bucket_name,
                object_name,
                query_params=query_params,
                region=region,
            )
            result = ListPartsResult.fromxml(parse_xml(response))
            return Page(
                result.parts,
                result.next_part_number_marker,
                result.is_truncated,
            )

        return PaginatedIterator(fetch_page)

    def get_presigned_url(  # pylint: disable=too-many-positional-arguments
            self,
            method: str,
            bucket_name: str,
            object_name: str,
            expires: timedelta = _DEFAULT_EXPIRY,
            response_headers: Optional[dict[str, str]] = None,
            request_date: Optional[datetime] = None,
            version_id: Optional[str] = None,
            region: Optional[str] = None,
    ) -> str:
        """
        Get presigned URL of an object for HTTP method, expiry time and
        custom request parameters.

        Args:
            method (str):
                HTTP method.

            bucket_name (str):
                Name of the bucket.

            object_name (str):
                Object name in the bucket.

            expires (timedelta, default=7 days):
                Expiry in seconds, between 1 second and 7 days.

            response_headers (Optional[dict], default=None):
                Optional response_headers argument to specify response
                fields like date, size, type of file, data about server, etc.

            request_date (Optional[datetime], default=None):
                Optional request_date argument to specify a different request
                date. Default is current date.

            version_id (Optional[str], default=None):
                Version ID of the object.

        Returns:
            str:
                URL string; unsigned for anonymous client.

        Example:
            >>> url = client.get_presigned_url(
            ...     "DELETE", "my-bucket", "my-object",
            ...     expires=timedelta(days=1),
            ... )
        """
        self._check_bucket_name(bucket_name)
        check_object_name(object_name)
        seconds = int(expires.total_seconds())
        check_presign_expiry(seconds)

        region = self._executor.get_region(bucket_name, region)
        query_params = QueryDict(response_headers)
        if version_id:
            query_params["versionId"] = version_id
        url = self._base_url.build(
            method=method,
            region=region,
            bucket_name=bucket_name,
            object_name=object_name,
            query_params=query_params,
        )
        provider = self._executor.provider
        if provider:
            url = presign_v4(
                method=method,
                url=url,
                region=region,
                credentials=provider.fetch(),
                date=request_date or time.utcnow(),
                expires=seconds,
            )
        return urlunsplit(url)

    def presigned_get_object(
            self,
            bucket_name: str,
            object_name: str,
            expires: timedelta = _DEFAULT_EXPIRY,
            response_headers: Optional[dict[str, str]] = None,
            version_id: Optional[str] = None,
    ) -> str:
        """Get presigned URL of an object to download its data."""
        return self.get_presigned_url(
            "GET",
            bucket_name,
            object_name,
            expires,
            response_headers=response_headers,
            version_id=version_id,
        )

    def presigned_put_object(
            self,
            bucket_name: str,
            object_name: str,
            expires: timedelta = _DEFAULT_EXPIRY,
    ) -> str:
        """Get presigned URL of an object to upload data."""
        return self.get_presigned_url("PUT", bucket_name, object_name, expires)

    def listen_bucket_notification(
            self,
            bucket_name: str,
            prefix: str = "",
            suffix: str = "",
            events: Iterable[str] = _DEFAULT_EVENTS,
            region: Optional[str] = None,
    ) -> EventStream:
        """
        Listen events of object prefix and suffix of a bucket. Caller
        should iterate returned stream to read new events, and close it
        when done.

        Example:
            >>> with client.listen_bucket_notification(
            ...     "my-bucket", prefix="my-prefix/",
            ...     events=["s3:ObjectCreated:*", "s3:ObjectRemoved:*"],
            ... ) as events:
            ...     for result in events:
            ...         print(result.get())
        """
        self._check_bucket_name(bucket_name)
        if self._base_url.is_aws_host:
            raise ArgumentError(
                "ListenBucketNotification API is not supported in Amazon S3",
            )
        events = list(events)
        if not events:
            raise ArgumentError("events must not be empty")

        query_params = QueryDict({
            "prefix": prefix or "",
            "suffix": suffix or "",
            "events": events,
        })
        response = self._execute(
            "GET",
            bucket_name,
            query_params=query_params,
            preload_content=False,
            region=region,
        )
        return EventStream(response)

    def create_multipart_upload(
            self,
            bucket_name: str,
            object_name: str,
            content_type: str = "application/octet-stream",
            metadata: Optional[dict[str, HeaderValue]] = None,
            region: Optional[str] = None,
    ) -> UploadSession:
        """
        Start a multipart upload. Returned session aborts the upload when
        its ``with`` block exits without ``complete()``.

        Example:
            >>> with client.create_multipart_upload("bucket", "obj") as up:
            ...     up.upload_part(1, data)
            ...     result = up.complete()
        """
        self._check_bucket_name(bucket_name)
        check_object_name(object_name)
        headers = metadata_headers(metadata)
        headers["Content-Type"] = content_type
        return self._uploader.create_upload(
            bucket_name, object_name, headers, region,
        )
