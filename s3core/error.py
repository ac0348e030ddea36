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
s3core.error
~~~~~~~~~~~~

Exception classes raised by this library. Every class carries an
:class:`ErrorKind` tag so callers can dispatch on one attribute instead of
catching a long list of types.

:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import absolute_import, annotations

from enum import Enum
from typing import Optional, Type, TypeVar
from xml.etree import ElementTree as ET

import urllib3

try:
    from urllib3.response import BaseHTTPResponse  # type: ignore[attr-defined]
except ImportError:
    from urllib3.response import HTTPResponse as BaseHTTPResponse

from .xml import findtext

MAX_ERROR_BODY_LENGTH = 1024


class ErrorKind(Enum):
    """Error taxonomy of S3 operations."""
    ARGUMENT = "argument"
    SIGNATURE = "signature"
    ERROR_RESPONSE = "error-response"
    INVALID_RESPONSE = "invalid-response"
    SERVER = "server"
    NETWORK = "network"


class S3CoreException(Exception):
    """Base exception of this library."""
    kind: ErrorKind


class ArgumentError(S3CoreException, ValueError):
    """Raised when an argument fails validation before any network call."""
    kind = ErrorKind.ARGUMENT


class SignatureError(S3CoreException):
    """Raised when a hash primitive required for signing is unavailable."""
    kind = ErrorKind.SIGNATURE


class InvalidResponseError(S3CoreException):
    """Raised to indicate non-XML or malformed response from server."""
    kind = ErrorKind.INVALID_RESPONSE

    def __init__(
            self, code: int, content_type: Optional[str], body: Optional[str],
    ):
        if body and len(body) > MAX_ERROR_BODY_LENGTH:
            body = body[:MAX_ERROR_BODY_LENGTH]
        self._code = code
        self._content_type = content_type
        self._body = body
        super().__init__(
            f"non-XML response from server; Response code: {code}, "
            f"Content-Type: {content_type}, Body: {body}"
        )

    @property
    def code(self) -> int:
        """Get HTTP status code."""
        return self._code

    @property
    def content_type(self) -> Optional[str]:
        """Get content type of the response."""
        return self._content_type

    @property
    def body(self) -> Optional[str]:
        """Get (truncated) response body."""
        return self._body

    def __reduce__(self):
        return type(self), (self._code, self._content_type, self._body)


class ServerError(S3CoreException):
    """Raised to indicate that S3 service returning HTTP server error."""
    kind = ErrorKind.SERVER

    def __init__(self, message: str, status_code: int):
        self._status_code = status_code
        super().__init__(message)

    @property
    def status_code(self) -> int:
        """Get HTTP status code."""
        return self._status_code

    def __reduce__(self):
        return type(self), (str(self), self._status_code)


A = TypeVar("A", bound="S3Error")


class S3Error(S3CoreException):
    """
    Raised to indicate that error response is received
    when executing S3 operation.
    """
    kind = ErrorKind.ERROR_RESPONSE

    def __init__(  # pylint: disable=too-many-positional-arguments
            self,
            code: Optional[str],
            message: Optional[str],
            resource: Optional[str],
            request_id: Optional[str],
            host_id: Optional[str],
            response: Optional[BaseHTTPResponse] = None,
            bucket_name: Optional[str] = None,
            object_name: Optional[str] = None,
    ):
        self._code = code
        self._message = message
        self._resource = resource
        self._request_id = request_id
        self._host_id = host_id
        self._response = response
        self._bucket_name = bucket_name
        self._object_name = object_name

        bucket_message = f", bucket_name: {bucket_name}" if bucket_name else ""
        object_message = f", object_name: {object_name}" if object_name else ""
        super().__init__(
            f"S3 operation failed; code: {code}, message: {message}, "
            f"resource: {resource}, request_id: {request_id}, "
            f"host_id: {host_id}{bucket_message}{object_message}"
        )

    @property
    def code(self) -> Optional[str]:
        """Get S3 error code."""
        return self._code

    @property
    def message(self) -> Optional[str]:
        """Get S3 error message."""
        return self._message

    @property
    def resource(self) -> Optional[str]:
        """Get resource path."""
        return self._resource

    @property
    def request_id(self) -> Optional[str]:
        """Get request ID."""
        return self._request_id

    @property
    def host_id(self) -> Optional[str]:
        """Get host ID."""
        return self._host_id

    @property
    def response(self) -> Optional[BaseHTTPResponse]:
        """Get HTTP response."""
        return self._response

    @property
    def bucket_name(self) -> Optional[str]:
        """Get bucket name."""
        return self._bucket_name

    @property
    def object_name(self) -> Optional[str]:
        """Get object name."""
        return self._object_name

    @classmethod
    def fromxml(
            cls: Type[A],
            element: ET.Element,
            response: Optional[BaseHTTPResponse] = None,
    ) -> A:
        """Create new object with values from XML element."""
        return cls(
            code=findtext(element, "Code"),
            message=findtext(element, "Message"),
            resource=findtext(element, "Resource"),
            request_id=findtext(element, "RequestId"),
            host_id=findtext(element, "HostId"),
            response=response,
            bucket_name=findtext(element, "BucketName"),
            object_name=findtext(element, "Key"),
        )

    def copy(self, code: Optional[str], message: Optional[str]) -> S3Error:
        """Make a copy with replaced code and message."""
        return S3Error(
            code=code,
            message=message,
            resource=self._resource,
            request_id=self._request_id,
            host_id=self._host_id,
            response=self._response,
            bucket_name=self._bucket_name,
            object_name=self._object_name,
        )

    def __reduce__(self):
        return type(self), (
            self._code, self._message, self._resource, self._request_id,
            self._host_id, None, self._bucket_name, self._object_name,
        )

    def __repr__(self):
        return (
            f"S3Error(code={self._code!r}, message={self._message!r}, "
            f"resource={self._resource!r}, request_id={self._request_id!r}, "
            f"host_id={self._host_id!r}, bucket_name={self._bucket_name!r}, "
            f"object_name={self._object_name!r})"
        )


def error_kind(exc: BaseException) -> Optional[ErrorKind]:
    """
    Classify an exception raised by an S3 operation. Transport failures
    are passed through unchanged by this library and classified here as
    ``ErrorKind.NETWORK``.
    """
    if isinstance(exc, S3CoreException):
        return exc.kind
    if isinstance(exc, (urllib3.exceptions.HTTPError, OSError)):
        return ErrorKind.NETWORK
    return None
