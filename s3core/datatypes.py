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

"""
Response and request data classes of bucket and object operations.
"""

# pylint: disable=too-many-instance-attributes

from __future__ import absolute_import, annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Type, TypeVar, cast
from urllib.parse import unquote_plus
from xml.etree import ElementTree as ET

from urllib3._collections import HTTPHeaderDict

try:
    from urllib3.response import BaseHTTPResponse  # type: ignore[attr-defined]
except ImportError:
    from urllib3.response import HTTPResponse as BaseHTTPResponse

from .error import ArgumentError, InvalidResponseError, S3Error
from .helpers import check_bucket_name, check_object_name, quote
from .time import from_http_header, from_iso8601_or_none, to_http_header
from .xml import Element, SubElement, find, findall, findtext, localname


def _etag(value: Optional[str]) -> Optional[str]:
    return None if value is None else value.replace('"', "")


def _is_true(value: Optional[str]) -> bool:
    return (value or "").lower() == "true"


def _decode(value: Optional[str], encoding_type: Optional[str]):
    if value is not None and encoding_type == "url":
        return unquote_plus(value)
    return value


def parse_xml(response: BaseHTTPResponse) -> ET.Element:
    """
    Parse XML body of a successful response. An ``<Error>`` document
    embedded in it raises S3Error.
    """
    try:
        element = ET.fromstring(response.data)
    except ET.ParseError as exc:
        raise InvalidResponseError(
            response.status,
            response.headers.get("content-type"),
            response.data.decode(errors="replace"),
        ) from exc
    if localname(element) == "Error":
        raise S3Error.fromxml(element, response)
    return element


@dataclass(frozen=True)
class Bucket:
    """Bucket information."""
    name: str
    creation_date: Optional[datetime]


A = TypeVar("A", bound="ListAllMyBucketsResult")


@dataclass(frozen=True)
class ListAllMyBucketsResult:
    """ListBuckets API result."""
    buckets: list[Bucket]

    @classmethod
    def fromxml(cls: Type[A], element: ET.Element) -> A:
        """Create new object with values from XML element."""
        element = cast(ET.Element, find(element, "Buckets", True))
        return cls([
            Bucket(
                cast(str, findtext(bucket, "Name", True)),
                from_iso8601_or_none(findtext(bucket, "CreationDate")),
            )
            for bucket in findall(element, "Bucket")
        ])


B = TypeVar("B", bound="Object")


@dataclass(frozen=True)
class Object:
    """Object information."""
    bucket_name: str
    object_name: Optional[str]
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None
    size: Optional[int] = None
    metadata: Optional[HTTPHeaderDict] = None
    version_id: Optional[str] = None
    is_latest: Optional[str] = None
    storage_class: Optional[str] = None
    owner_id: Optional[str] = None
    owner_name: Optional[str] = None
    content_type: Optional[str] = None
    is_delete_marker: bool = False
    is_dir: bool = field(default=False, init=False)

    def __post_init__(self):
        object.__setattr__(
            self,
            "is_dir",
            bool(self.object_name and self.object_name.endswith("/")),
        )

    @classmethod
    def fromxml(
            cls: Type[B],
            element: ET.Element,
            bucket_name: str,
            is_delete_marker: bool = False,
            encoding_type: Optional[str] = None,
    ) -> B:
        """Create new object with values from XML element."""
        size = findtext(element, "Size")
        owner = find(element, "Owner")
        return cls(
            bucket_name=bucket_name,
            object_name=_decode(
                findtext(element, "Key", True), encoding_type,
            ),
            last_modified=from_iso8601_or_none(
                findtext(element, "LastModified"),
            ),
            etag=_etag(findtext(element, "ETag")),
            size=None if size is None else int(size),
            version_id=findtext(element, "VersionId"),
            is_latest=findtext(element, "IsLatest"),
            storage_class=findtext(element, "StorageClass"),
            owner_id=None if owner is None else findtext(owner, "ID"),
            owner_name=(
                None if owner is None else findtext(owner, "DisplayName")
            ),
            is_delete_marker=is_delete_marker,
        )

    @classmethod
    def fromheaders(
            cls: Type[B],
            bucket_name: str,
            object_name: str,
            headers: HTTPHeaderDict,
    ) -> B:
        """Create new object with values from HeadObject response headers."""
        size = headers.get("content-length")
        metadata = HTTPHeaderDict()
        for key, value in headers.items():
            if key.lower().startswith("x-amz-meta-"):
                metadata.add(key[len("x-amz-meta-"):], value)
        return cls(
            bucket_name=bucket_name,
            object_name=object_name,
            last_modified=from_http_header(headers.get("last-modified")),
            etag=_etag(headers.get("etag")),
            size=None if size is None else int(size),
            metadata=metadata,
            version_id=headers.get("x-amz-version-id"),
            storage_class=headers.get("x-amz-storage-class"),
            content_type=headers.get("content-type"),
            is_delete_marker=_is_true(headers.get("x-amz-delete-marker")),
        )


@dataclass(frozen=True)
class ListObjectsResult:
    """Page of ListObjects/ListObjectsV2/ListObjectVersions API."""
    objects: list[Object]
    is_truncated: bool
    continuation_token: Optional[str]
    version_id_marker: Optional[str]


def parse_list_objects(response: BaseHTTPResponse) -> ListObjectsResult:
    """Parse ListObjects/ListObjectsV2/ListObjectVersions response."""
    element = parse_xml(response)
    bucket_name = cast(str, findtext(element, "Name", True))
    encoding_type = findtext(element, "EncodingType")

    objects = [
        Object.fromxml(tag, bucket_name, encoding_type=encoding_type)
        for tag in findall(element, "Contents")
    ]
    marker = objects[-1].object_name if objects else None
    objects += [
        Object.fromxml(tag, bucket_name, encoding_type=encoding_type)
        for tag in findall(element, "Version")
    ]
    objects += [
        Object(
            bucket_name,
            _decode(findtext(tag, "Prefix", True), encoding_type),
        )
        for tag in findall(element, "CommonPrefixes")
    ]
    objects += [
        Object.fromxml(
            tag, bucket_name, is_delete_marker=True,
            encoding_type=encoding_type,
        )
        for tag in findall(element, "DeleteMarker")
    ]

    is_truncated = _is_true(findtext(element, "IsTruncated"))
    token = _decode(findtext(element, "NextKeyMarker"), encoding_type)
    if token is None:
        token = findtext(element, "NextContinuationToken")
    if token is None:
        token = _decode(findtext(element, "NextMarker"), encoding_type)
    if token is None and is_truncated:
        token = marker
    return ListObjectsResult(
        objects=objects,
        is_truncated=is_truncated,
        continuation_token=token,
        version_id_marker=findtext(element, "NextVersionIdMarker"),
    )


C = TypeVar("C", bound="Part")


@dataclass(frozen=True)
class Part:
    """Part information of a multipart upload."""
    part_number: int
    etag: str
    last_modified: Optional[datetime] = None
    size: Optional[int] = None

    @classmethod
    def fromxml(cls: Type[C], element: ET.Element) -> C:
        """Create new object with values from XML element."""
        size = findtext(element, "Size")
        return cls(
            part_number=int(cast(str, findtext(element, "PartNumber", True))),
            etag=cast(str, _etag(findtext(element, "ETag", True))),
            last_modified=from_iso8601_or_none(
                findtext(element, "LastModified"),
            ),
            size=int(size) if size else None,
        )


D = TypeVar("D", bound="ListPartsResult")


@dataclass(frozen=True)
class ListPartsResult:
    """ListParts API result."""
    bucket_name: Optional[str]
    object_name: Optional[str]
    upload_id: Optional[str]
    next_part_number_marker: Optional[str]
    is_truncated: bool
    parts: list[Part]

    @classmethod
    def fromxml(cls: Type[D], element: ET.Element) -> D:
        """Create new object with values from XML element."""
        return cls(
            bucket_name=findtext(element, "Bucket"),
            object_name=findtext(element, "Key"),
            upload_id=findtext(element, "UploadId"),
            next_part_number_marker=findtext(
                element, "NextPartNumberMarker",
            ),
            is_truncated=_is_true(findtext(element, "IsTruncated")),
            parts=[Part.fromxml(tag) for tag in findall(element, "Part")],
        )


@dataclass(frozen=True)
class Upload:
    """Upload information of a multipart upload."""
    object_name: str
    upload_id: Optional[str] = None
    initiator_id: Optional[str] = None
    initiator_name: Optional[str] = None
    owner_id: Optional[str] = None
    owner_name: Optional[str] = None
    storage_class: Optional[str] = None
    initiated_time: Optional[datetime] = None

    @classmethod
    def fromxml(
            cls, element: ET.Element, encoding_type: Optional[str] = None,
    ) -> Upload:
        """Create new object with values from XML element."""
        initiator = find(element, "Initiator")
        owner = find(element, "Owner")
        return cls(
            object_name=cast(
                str, _decode(findtext(element, "Key", True), encoding_type),
            ),
            upload_id=findtext(element, "UploadId"),
            initiator_id=(
                None if initiator is None else findtext(initiator, "ID")
            ),
            initiator_name=(
                None if initiator is None
                else findtext(initiator, "DisplayName")
            ),
            owner_id=None if owner is None else findtext(owner, "ID"),
            owner_name=(
                None if owner is None else findtext(owner, "DisplayName")
            ),
            storage_class=findtext(element, "StorageClass"),
            initiated_time=from_iso8601_or_none(
                findtext(element, "Initiated"),
            ),
        )


E = TypeVar("E", bound="ListMultipartUploadsResult")


@dataclass(frozen=True)
class ListMultipartUploadsResult:
    """ListMultipartUploads API result."""
    bucket_name: Optional[str]
    next_key_marker: Optional[str]
    next_upload_id_marker: Optional[str]
    is_truncated: bool
    uploads: list[Upload]

    @classmethod
    def fromxml(cls: Type[E], element: ET.Element) -> E:
        """Create new object with values from XML element."""
        encoding_type = findtext(element, "EncodingType")
        return cls(
            bucket_name=findtext(element, "Bucket"),
            next_key_marker=_decode(
                findtext(element, "NextKeyMarker"), encoding_type,
            ),
            next_upload_id_marker=findtext(element, "NextUploadIdMarker"),
            is_truncated=_is_true(findtext(element, "IsTruncated")),
            uploads=[
                Upload.fromxml(tag, encoding_type)
                for tag in findall(element, "Upload")
            ],
        )


@dataclass(frozen=True)
class ObjectWriteResult:
    """Result class of any APIs doing object creation."""
    bucket_name: str
    object_name: str
    version_id: Optional[str]
    etag: Optional[str]
    http_headers: HTTPHeaderDict
    last_modified: Optional[datetime] = None
    location: Optional[str] = None

    @classmethod
    def fromresponse(
            cls,
            bucket_name: str,
            object_name: str,
            response: BaseHTTPResponse,
    ) -> ObjectWriteResult:
        """Create new object with values from PutObject response."""
        return cls(
            bucket_name=bucket_name,
            object_name=object_name,
            version_id=response.headers.get("x-amz-version-id"),
            etag=_etag(response.headers.get("etag")),
            http_headers=response.headers,
        )

    @classmethod
    def fromcomplete(cls, response: BaseHTTPResponse) -> ObjectWriteResult:
        """
        Create new object with values from CompleteMultipartUpload response.
        Server may report failure with ``<Error>`` document and status 200;
        that raises S3Error.
        """
        element = parse_xml(response)
        return cls(
            bucket_name=cast(str, findtext(element, "Bucket")),
            object_name=cast(str, findtext(element, "Key")),
            version_id=response.headers.get("x-amz-version-id"),
            etag=_etag(findtext(element, "ETag")),
            http_headers=response.headers,
            location=findtext(element, "Location"),
        )


def parse_copy_object(
        response: BaseHTTPResponse,
) -> tuple[str, Optional[datetime]]:
    """Parse CopyObject/UploadPartCopy response."""
    element = parse_xml(response)
    etag = cast(str, _etag(findtext(element, "ETag", True)))
    return etag, from_iso8601_or_none(findtext(element, "LastModified"))


@dataclass(frozen=True)
class DeleteObject:
    """Delete object request information."""
    name: str
    version_id: Optional[str] = None

    def __post_init__(self):
        check_object_name(self.name)

    def toxml(self, element: ET.Element) -> ET.Element:
        """Convert to XML."""
        element = SubElement(element, "Object")
        SubElement(element, "Key", self.name)
        if self.version_id is not None:
            SubElement(element, "VersionId", self.version_id)
        return element


def delete_request_xml(objects: list[DeleteObject], quiet: bool) -> ET.Element:
    """Build Delete request document."""
    element = Element("Delete")
    if quiet:
        SubElement(element, "Quiet", "true")
    for obj in objects:
        obj.toxml(element)
    return element


F = TypeVar("F", bound="DeleteError")


@dataclass(frozen=True)
class DeleteError:
    """Delete error information."""
    code: str
    message: Optional[str]
    name: Optional[str]
    version_id: Optional[str]

    @classmethod
    def fromxml(cls: Type[F], element: ET.Element) -> F:
        """Create new object with values from XML element."""
        return cls(
            code=cast(str, findtext(element, "Code", True)),
            message=findtext(element, "Message"),
            name=findtext(element, "Key"),
            version_id=findtext(element, "VersionId"),
        )


G = TypeVar("G", bound="DeleteResult")


@dataclass(frozen=True)
class DeleteResult:
    """Delete objects result; only failures are kept."""
    error_list: list[DeleteError]

    @classmethod
    def fromxml(cls: Type[G], element: ET.Element) -> G:
        """Create new object with values from XML element."""
        return cls([
            DeleteError.fromxml(tag) for tag in findall(element, "Error")
        ])


@dataclass
class ComposeSource:
    """
    A source object of copy_object and compose_object. Arguments are
    validated on construction; object size and ETag are filled in by
    :meth:`build_headers` after the source is stat'ed.
    """
    bucket_name: str
    object_name: str
    region: Optional[str] = None
    version_id: Optional[str] = None
    offset: Optional[int] = None
    length: Optional[int] = None
    match_etag: Optional[str] = None
    not_match_etag: Optional[str] = None
    modified_since: Optional[datetime] = None
    unmodified_since: Optional[datetime] = None
    _object_size: Optional[int] = field(default=None, init=False, repr=False)
    _headers: Optional[dict[str, str]] = field(
        default=None, init=False, repr=False,
    )

    def __post_init__(self):
        check_bucket_name(self.bucket_name)
        check_object_name(self.object_name)
        if self.offset is not None and self.offset < 0:
            raise ArgumentError("offset should be zero or greater")
        if self.length is not None and self.length <= 0:
            raise ArgumentError("length should be greater than zero")
        if self.match_etag == "":
            raise ArgumentError("match_etag must not be empty")
        if self.not_match_etag == "":
            raise ArgumentError("not_match_etag must not be empty")
        for value in (self.modified_since, self.unmodified_since):
            if value is not None and not isinstance(value, datetime):
                raise ArgumentError(
                    "modified_since/unmodified_since must be datetime type",
                )

    def __str__(self):
        version = f"?versionId={self.version_id}" if self.version_id else ""
        return f"{self.bucket_name}/{self.object_name}{version}"

    def _validate_size(self, object_size: int):
        """Validate object size with offset and length."""
        offset = self.offset or 0
        if self.offset is not None and self.offset >= object_size:
            raise ArgumentError(
                f"Source {self}: offset {self.offset} is beyond object "
                f"size {object_size}",
            )
        if self.length is not None and offset + self.length > object_size:
            raise ArgumentError(
                f"Source {self}: compose size {offset + self.length} is "
                f"beyond object size {object_size}",
            )

    def copy_headers(self) -> dict[str, str]:
        """Generate copy source headers."""
        copy_source = quote(f"/{self.bucket_name}/{self.object_name}")
        if self.version_id:
            copy_source += "?versionId=" + quote(self.version_id, safe="")
        headers = {"x-amz-copy-source": copy_source}
        if self.match_etag:
            headers["x-amz-copy-source-if-match"] = self.match_etag
        if self.not_match_etag:
            headers["x-amz-copy-source-if-none-match"] = self.not_match_etag
        if self.modified_since:
            headers["x-amz-copy-source-if-modified-since"] = (
                to_http_header(self.modified_since)
            )
        if self.unmodified_since:
            headers["x-amz-copy-source-if-unmodified-since"] = (
                to_http_header(self.unmodified_since)
            )
        return headers

    def build_headers(self, object_size: int, etag: str):
        """Validate against stat'ed size and pin copy to source ETag."""
        self._validate_size(object_size)
        self._object_size = object_size
        headers = self.copy_headers()
        headers["x-amz-copy-source-if-match"] = self.match_etag or etag
        self._headers = headers

    @property
    def object_size(self) -> int:
        """Get object size."""
        if self._object_size is None:
            raise ArgumentError(
                "build_headers() must be called prior to this method "
                "invocation",
            )
        return self._object_size

    @property
    def headers(self) -> dict[str, str]:
        """Get headers."""
        if self._headers is None:
            raise ArgumentError(
                "build_headers() must be called prior to this method "
                "invocation",
            )
        return self._headers

    @property
    def copy_size(self) -> int:
        """Number of bytes copied from this source."""
        size = self.object_size
        if self.length is not None:
            return self.length
        return size - (self.offset or 0)
