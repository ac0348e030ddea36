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

"""Helper functions."""

from __future__ import absolute_import, annotations

import errno
import math
import os
import re
import urllib.parse
from typing import BinaryIO, Mapping, Optional, Union

from typing_extensions import Protocol
from urllib3._collections import HTTPHeaderDict

from .error import ArgumentError

MAX_MULTIPART_COUNT = 10000  # 10000 parts
MAX_MULTIPART_OBJECT_SIZE = 5 * 1024 * 1024 * 1024 * 1024  # 5TiB
MAX_PART_SIZE = 5 * 1024 * 1024 * 1024  # 5GiB
MIN_PART_SIZE = 5 * 1024 * 1024  # 5MiB
MAX_DELETE_OBJECTS = 1000

_BUCKET_NAME_REGEX = re.compile(r'^[a-z0-9][a-z0-9\.\-]{1,61}[a-z0-9]$')
_OLD_BUCKET_NAME_REGEX = re.compile(r'^[a-z0-9][a-z0-9_\.\-\:]{1,61}[a-z0-9]$',
                                    re.IGNORECASE)
_IPV4_REGEX = re.compile(
    r'^((25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9][0-9]|[0-9])\.){3}'
    r'(25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9][0-9]|[0-9])$')
_CREDENTIAL_REGEX = re.compile(r"Credential=([^/]+)")
_SIGNATURE_REGEX = re.compile(r"Signature=([0-9a-f]+)")

HeaderValue = Union[str, list[str], tuple[str, ...]]


def quote(resource: str, safe: str = "/") -> str:
    """
    Percent-encode with the S3 escaping profile: only RFC 3986 unreserved
    characters and those in ``safe`` are left as is.
    """
    return urllib.parse.quote(resource, safe=safe)


def queryencode(query: str) -> str:
    """Encode query parameter key or value; '/' is encoded too."""
    return quote(query, safe="")


class QueryDict(dict):
    """Query parameter multimap; each key holds a list of values."""

    def __init__(self, initial: Optional[Mapping[str, HeaderValue]] = None):
        super().__init__()
        if initial:
            self.extend(initial)

    def __setitem__(self, key: str, value: HeaderValue):
        super().__setitem__(
            key, list(value) if isinstance(value, (list, tuple)) else [value],
        )

    def add(self, key: str, value: str):
        """Append value to key."""
        if key in self:
            self[key].append(value)
        else:
            self[key] = value

    def extend(self, other: Optional[Mapping[str, HeaderValue]]):
        """Append all values of other mapping."""
        for key, values in (other or {}).items():
            if not isinstance(values, (list, tuple)):
                values = [values]
            for value in values:
                self.add(key, value)

    def copy(self) -> QueryDict:
        return QueryDict(self)

    def tostring(self) -> str:
        """Encode to query string sorted by key and value."""
        return "&".join(
            f"{queryencode(key)}={queryencode(value)}"
            for key in sorted(self)
            for value in sorted(self[key])
        )


def headers_to_strings(
        headers: Mapping[str, HeaderValue],
        titled_key: bool = False,
) -> str:
    """Convert HTTP headers to multi-line string with secrets redacted."""
    values = []
    for key, value in headers.items():
        key = key.title() if titled_key else key
        for item in value if isinstance(value, (list, tuple)) else [value]:
            item = _CREDENTIAL_REGEX.sub(
                "Credential=*REDACTED*",
                _SIGNATURE_REGEX.sub("Signature=*REDACTED*", item),
            )
            values.append(f"{key}: {item}")
    return "\n".join(values)


def check_bucket_name(
        bucket_name: str,
        strict: bool = False,
        s3_check: bool = False,
):
    """Check whether bucket name is valid optional with strict check or not."""
    if not isinstance(bucket_name, str):
        raise ArgumentError("bucket name must be str type")
    regex = _BUCKET_NAME_REGEX if strict else _OLD_BUCKET_NAME_REGEX
    if not regex.match(bucket_name):
        raise ArgumentError(f"invalid bucket name {bucket_name}")

    if _IPV4_REGEX.match(bucket_name):
        raise ArgumentError(
            f"bucket name {bucket_name} must not be formatted as an IP address"
        )

    if any(chars in bucket_name for chars in ("..", ".-", "-.")):
        raise ArgumentError(
            f"bucket name {bucket_name} contains invalid successive characters"
        )

    if s3_check and (
            bucket_name.startswith("xn--") or
            bucket_name.endswith("-s3alias") or
            bucket_name.endswith("--ol-s3")
    ):
        raise ArgumentError(
            f"bucket name {bucket_name} must not start with 'xn--' and must "
            "not end with '-s3alias' or '--ol-s3'"
        )


def check_object_name(object_name: str):
    """Check object name is not empty and has no '.' or '..' segment."""
    if not isinstance(object_name, str) or not object_name:
        raise ArgumentError("object name must be a non-empty string")
    for token in object_name.split("/"):
        if token in (".", ".."):
            raise ArgumentError(
                f"object name {object_name} with '.' or '..' path segment "
                "is not supported",
            )


def _validate_sizes(object_size: int, part_size: int):
    """Validate object and part size."""
    if part_size > 0:
        if part_size < MIN_PART_SIZE:
            raise ArgumentError(
                f"part size {part_size} is not supported; minimum allowed 5MiB"
            )
        if part_size > MAX_PART_SIZE:
            raise ArgumentError(
                f"part size {part_size} is not supported; maximum allowed 5GiB"
            )

    if object_size >= 0:
        if object_size > MAX_MULTIPART_OBJECT_SIZE:
            raise ArgumentError(
                f"object size {object_size} is not supported; "
                f"maximum allowed 5TiB"
            )
    elif part_size <= 0:
        raise ArgumentError(
            "valid part size must be provided when object size is unknown",
        )


def get_part_info(object_size: int, part_size: int) -> tuple[int, int]:
    """
    Compute part size and part count for object size. Unknown object size
    (-1) gives part count -1. Without explicit part size, the smallest
    multiple of 5MiB which fits the object in 10000 parts is chosen.
    """
    _validate_sizes(object_size, part_size)

    if object_size < 0:
        return part_size, -1

    if part_size <= 0:
        part_size = math.ceil(
            math.ceil(object_size / MAX_MULTIPART_COUNT) / MIN_PART_SIZE,
        ) * MIN_PART_SIZE

    part_size = min(part_size, object_size)
    part_count = math.ceil(object_size / part_size) if part_size else 1
    if part_count > MAX_MULTIPART_COUNT:
        raise ArgumentError(
            f"object size {object_size} and part size {part_size} "
            f"make more than {MAX_MULTIPART_COUNT} parts for upload"
        )
    return part_size, part_count


class ProgressType(Protocol):
    """typing stub for Put/Get object progress."""

    def set_meta(self, object_name: str, total_length: int):
        """Set process meta information."""

    def update(self, length: int):
        """Set current progress length."""


def read_part_data(
        stream: BinaryIO,
        size: int,
        part_data: bytes = b"",
        progress: Optional[ProgressType] = None,
) -> bytes:
    """Read until part_data holds size bytes or stream is exhausted."""
    size -= len(part_data)
    while size > 0:
        data = stream.read(size)
        if not data:
            break  # EOF reached
        if not isinstance(data, bytes):
            raise ArgumentError("read() must return 'bytes' object")
        part_data += data
        size -= len(data)
        if progress:
            progress.update(len(data))
    return part_data


def makedirs(path: str):
    """Wrapper of os.makedirs() ignores errno.EEXIST."""
    try:
        if path:
            os.makedirs(path)
    except OSError as exc:
        if exc.errno != errno.EEXIST:
            raise
        if not os.path.isdir(path):
            raise ArgumentError(f"path {path} is not a directory") from exc


_STANDARD_HEADERS = (
    "cache-control",
    "content-encoding",
    "content-type",
    "content-disposition",
    "content-language",
    "expires",
)


def _header_value(value) -> str:
    """Convert metadata value to US-ASCII header value."""
    value = str(value)
    try:
        value.encode("us-ascii")
    except UnicodeEncodeError as exc:
        raise ArgumentError(
            f"unsupported metadata value {value}; "
            f"only US-ASCII encoded characters are supported"
        ) from exc
    return value


def metadata_headers(
        metadata: Optional[Mapping[str, HeaderValue]],
) -> HTTPHeaderDict:
    """
    Prefix 'x-amz-meta-' to keys of user metadata. A list or tuple value
    becomes one header per item.
    """
    headers = HTTPHeaderDict()
    for key, values in (metadata or {}).items():
        key = str(key)
        lower = key.lower()
        if not (lower.startswith("x-amz-") or lower in _STANDARD_HEADERS):
            key = "x-amz-meta-" + key
        if not isinstance(values, (list, tuple)):
            values = [values]
        for value in values:
            headers.add(key, _header_value(value))
    return headers
