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

"""Time formatters used in S3 requests and responses."""

from __future__ import absolute_import, annotations

from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime

_AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
_SIGNER_DATE_FORMAT = "%Y%m%d"


def _to_utc(value: datetime) -> datetime:
    """Convert aware datetime to UTC; naive values are taken as UTC."""
    if value.tzinfo:
        return value.astimezone(timezone.utc)
    return value.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    """Current time as timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_amz_date(value: datetime) -> str:
    """Format datetime into X-Amz-Date format i.e. 20130524T000000Z."""
    return _to_utc(value).strftime(_AMZ_DATE_FORMAT)


def to_signer_date(value: datetime) -> str:
    """Format datetime into credential scope date i.e. 20130524."""
    return _to_utc(value).strftime(_SIGNER_DATE_FORMAT)


def from_iso8601utc(value: str | None) -> datetime | None:
    """Parse ISO-8601 UTC time like 2016-11-27T07:55:53.000Z."""
    if value is None:
        return None
    for fmt in ("%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ"):
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    raise ValueError(f"time data {value} does not match ISO-8601 format")


def to_http_header(value: datetime) -> str:
    """Format datetime into RFC 7231 HTTP date."""
    return format_datetime(_to_utc(value), usegmt=True)


def from_http_header(value: str | None) -> datetime | None:
    """Parse RFC 7231 HTTP date; None for missing value."""
    if not value:
        return None
    return _to_utc(parsedate_to_datetime(value))


def from_iso8601_or_none(value: str | None) -> datetime | None:
    """Parse ISO-8601 UTC time; None or empty value gives None."""
    return from_iso8601utc(value) if value else None
