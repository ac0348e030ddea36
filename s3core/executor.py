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
s3core.executor
~~~~~~~~~~~~~~~

Send signed requests and map error responses to :mod:`s3core.error`.

:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import absolute_import, annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, TextIO
from urllib.parse import SplitResult, urlunsplit
from xml.etree import ElementTree as ET

import urllib3
from urllib3._collections import HTTPHeaderDict

try:
    from urllib3.response import BaseHTTPResponse  # type: ignore[attr-defined]
except ImportError:
    from urllib3.response import HTTPResponse as BaseHTTPResponse

from . import time
from .checksum import (UNSIGNED_PAYLOAD, ZERO_SHA256_HASH, md5sum_hash,
                       sha256_hash)
from .config import ClientConfig
from .credentials import Provider
from .error import InvalidResponseError, S3Error, ServerError
from .helpers import QueryDict, headers_to_strings
from .region import DEFAULT_REGION, RegionCache, RegionResolver
from .signer import sign_v4_s3

_LOGGER = logging.getLogger(__name__)

_SUCCESS_STATUS = (200, 204, 206)
_REDIRECT_ERRORS = {
    301: ("PermanentRedirect", "Moved Permanently"),
    307: ("Redirect", "Temporary redirect"),
    400: ("BadRequest", "Bad request"),
}
_METHOD_NOT_ALLOWED = (
    "MethodNotAllowed",
    "The specified method is not allowed against this resource",
)
RETRY_HEAD = "RetryHead"


@dataclass
class Request:
    """HTTP request of an S3 operation."""
    method: str
    bucket_name: Optional[str] = None
    object_name: Optional[str] = None
    headers: HTTPHeaderDict = field(default_factory=HTTPHeaderDict)
    query_params: QueryDict = field(default_factory=QueryDict)
    body: Optional[bytes] = None
    preload_content: bool = True
    no_body_trace: bool = False


class _Tracer:
    """Write HTTP request and response to trace stream, if any."""

    def __init__(self, stream: Optional[TextIO]):
        self._stream = stream

    def write(self, *lines: str):
        """Write lines to stream."""
        if self._stream:
            for line in lines:
                self._stream.write(line)
                self._stream.write("\n")

    def request(self, request: Request, url: SplitResult, headers):
        if not self._stream:
            return
        query = ("?" + url.query) if url.query else ""
        self.write(
            "---------START-HTTP---------",
            f"{request.method} {url.path}{query} HTTP/1.1",
            headers_to_strings(headers, titled_key=True),
        )
        if not request.no_body_trace and request.body is not None:
            self.write("", request.body.decode(errors="replace"))
        self.write("")

    def response(self, response: BaseHTTPResponse):
        self.write(
            f"HTTP/1.1 {response.status}",
            headers_to_strings(response.headers),
        )

    def end(self, body: Optional[bytes] = None):
        if body:
            self.write("", body.decode(errors="replace"))
        self.write("----------END-HTTP----------")


def _is_xml(response: BaseHTTPResponse) -> bool:
    content_type = response.headers.get("content-type", "")
    return "application/xml" in [
        token.strip() for token in content_type.split(";")
    ]


class HttpExecutor:
    """Execute S3 requests through urllib3 connection pool."""

    def __init__(
            self,
            config: ClientConfig,
            http: urllib3.PoolManager,
            provider: Optional[Provider] = None,
            region_cache: Optional[RegionCache] = None,
    ):
        self._config = config
        self._http = http
        self._provider = provider
        self._region_resolver = RegionResolver(
            config.base_url,
            region_cache or RegionCache(),
            self._get_bucket_location,
            lambda: self._provider is not None,
        )

    @property
    def config(self) -> ClientConfig:
        """Get client configuration."""
        return self._config

    @property
    def region_cache(self) -> RegionCache:
        """Get region cache."""
        return self._region_resolver.cache

    @property
    def provider(self) -> Optional[Provider]:
        """Get credential provider."""
        return self._provider

    def clear(self):
        """Close all pooled connections."""
        self._http.clear()

    def get_region(
            self,
            bucket_name: Optional[str] = None,
            region: Optional[str] = None,
    ) -> str:
        """Resolve region of given bucket."""
        return self._region_resolver.resolve(bucket_name, region)

    def _get_bucket_location(self, bucket_name: str) -> bytes:
        response = self.url_open(
            Request(
                "GET",
                bucket_name=bucket_name,
                query_params=QueryDict({"location": ""}),
            ),
            DEFAULT_REGION,
        )
        return response.data

    def _prepare_headers(self, request: Request, url: SplitResult):
        headers = HTTPHeaderDict(request.headers)
        headers["Host"] = url.netloc
        headers["User-Agent"] = self._config.user_agent
        body = request.body
        if request.method in ("PUT", "POST"):
            headers["Content-Length"] = str(len(body or b""))
            if not headers.get("Content-Type"):
                headers["Content-Type"] = "application/octet-stream"

        content_sha256 = headers.get("x-amz-content-sha256")
        if body is None:
            content_sha256 = content_sha256 or ZERO_SHA256_HASH
        elif not content_sha256:
            content_sha256 = (
                UNSIGNED_PAYLOAD if self._config.base_url.is_https
                else sha256_hash(body)
            )
        if (
                body is not None and content_sha256 == UNSIGNED_PAYLOAD and
                not headers.get("Content-MD5")
        ):
            headers["Content-MD5"] = md5sum_hash(body)
        headers["x-amz-content-sha256"] = content_sha256
        return headers, content_sha256

    def url_open(self, request: Request, region: str) -> BaseHTTPResponse:
        """Sign and send request in given region."""
        url = self._config.base_url.build(
            method=request.method,
            region=region,
            bucket_name=request.bucket_name,
            object_name=request.object_name,
            query_params=request.query_params,
        )
        headers, content_sha256 = self._prepare_headers(request, url)
        date = time.utcnow()
        headers["x-amz-date"] = time.to_amz_date(date)

        if self._provider is not None:
            creds = self._provider.fetch()
            if creds.session_token:
                headers["X-Amz-Security-Token"] = creds.session_token
            sign_v4_s3(
                method=request.method,
                url=url,
                region=region,
                headers=headers,
                credentials=creds,
                content_sha256=content_sha256,
                date=date,
            )

        tracer = _Tracer(self._config.trace_stream)
        tracer.request(request, url, headers)

        response = self._http.urlopen(
            request.method,
            urlunsplit(url),
            body=request.body,
            headers=headers,
            preload_content=request.preload_content,
            redirect=False,
            timeout=self._config.timeout,
        )
        tracer.response(response)

        if response.status in _SUCCESS_STATUS:
            tracer.end(response.data if request.preload_content else None)
            return response

        response.read(cache_content=True)
        if not request.preload_content:
            response.release_conn()
        tracer.end(response.data if request.method != "HEAD" else None)
        raise self._error(request, url, response)

    def _error(
            self,
            request: Request,
            url: SplitResult,
            response: BaseHTTPResponse,
    ) -> Exception:
        """Convert failed response to exception."""
        data = response.data
        content_type = response.headers.get("content-type")
        if request.method != "HEAD" and not _is_xml(response):
            if response.status == 304 and not data:
                return ServerError(
                    f"server failed with HTTP status code {response.status}",
                    response.status,
                )
            return InvalidResponseError(
                response.status,
                content_type,
                data.decode(errors="replace") if data else None,
            )
        if request.method != "HEAD" and not data:
            return InvalidResponseError(response.status, content_type, None)

        bucket_name = request.bucket_name
        if data:
            try:
                error = S3Error.fromxml(ET.fromstring(data), response)
            except ET.ParseError as exc:
                raise InvalidResponseError(
                    response.status, content_type,
                    data.decode(errors="replace"),
                ) from exc
        else:
            code, message = self._status_error(request, response)
            if not code:
                return ServerError(
                    f"server failed with HTTP status code {response.status}",
                    response.status,
                )
            error = S3Error(
                code=code,
                message=message,
                resource=url.path,
                request_id=response.headers.get("x-amz-request-id"),
                host_id=response.headers.get("x-amz-id-2"),
                response=response,
                bucket_name=bucket_name,
                object_name=request.object_name,
            )

        if bucket_name and error.code in ("NoSuchBucket", RETRY_HEAD):
            self.region_cache.remove(bucket_name)
        return error

    def _status_error(
            self,
            request: Request,
            response: BaseHTTPResponse,
    ) -> tuple[Optional[str], Optional[str]]:
        """Map HTTP status of a response without error document."""
        status = response.status
        if status in _REDIRECT_ERRORS:
            if self._is_stale_region(request, response):
                return RETRY_HEAD, None
            return redirect_error(response)
        if status == 403:
            return "AccessDenied", "Access denied"
        if status == 404:
            if request.object_name:
                return "NoSuchKey", "Object does not exist"
            if request.bucket_name:
                return "NoSuchBucket", "Bucket does not exist"
            return "ResourceNotFound", "Request resource not found"
        if status in (405, 501):
            return _METHOD_NOT_ALLOWED
        if status == 409:
            if request.bucket_name:
                return "NoSuchBucket", "Bucket does not exist"
            return "ResourceConflict", "Request resource conflicts"
        if status == 412:
            return (
                "PreconditionFailed",
                "At least one of the pre-conditions you specified did not "
                "hold",
            )
        if status == 416:
            return "InvalidRange", "The requested range is not satisfiable"
        return None, None

    def _is_stale_region(
            self, request: Request, response: BaseHTTPResponse,
    ) -> bool:
        """Check whether a bucket HEAD failure means cached region is stale."""
        return bool(
            request.method == "HEAD" and
            request.bucket_name and
            not request.object_name and
            self._config.base_url.is_aws_host and
            response.headers.get("x-amz-bucket-region") and
            self.region_cache.get(request.bucket_name)
        )

    def execute(
            self,
            request: Request,
            region: Optional[str] = None,
    ) -> BaseHTTPResponse:
        """
        Execute request in resolved region. A bucket HEAD failing due to
        stale cached region is retried once in the re-resolved region.
        """
        try:
            return self.url_open(
                request, self.get_region(request.bucket_name, region),
            )
        except S3Error as exc:
            if exc.code != RETRY_HEAD:
                raise

        _LOGGER.debug(
            "retrying %s on bucket %s after region change",
            request.method, request.bucket_name,
        )
        try:
            return self.url_open(
                request, self.get_region(request.bucket_name, region),
            )
        except S3Error as exc:
            if exc.code != RETRY_HEAD or exc.response is None:
                raise
            code, message = redirect_error(exc.response)
            raise exc.copy(code, message) from None


def redirect_error(response: BaseHTTPResponse) -> tuple[str, str]:
    """Error code and message of redirect or bad request response."""
    code, message = _REDIRECT_ERRORS[response.status]
    region = response.headers.get("x-amz-bucket-region")
    if region:
        message += "; use region " + region
    return code, message
