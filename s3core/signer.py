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
s3core.signer
~~~~~~~~~~~~~

AWS Signature Version 4 for S3 requests, in header form (``Authorization``)
and in presigned query form.

:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import absolute_import, annotations

import re
from datetime import datetime
from typing import MutableMapping
from urllib.parse import SplitResult

from . import time
from .checksum import UNSIGNED_PAYLOAD, hmac_sha256, sha256_hash
from .credentials import Credentials
from .error import ArgumentError
from .helpers import HeaderValue, queryencode

SIGN_V4_ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE_NAME = "s3"
MIN_PRESIGN_EXPIRY = 1  # 1 second
MAX_PRESIGN_EXPIRY = 7 * 24 * 3600  # 7 days
_MULTI_SPACE_REGEX = re.compile(r"( +)")
_UNSIGNED_HEADERS = ("authorization", "user-agent")


def check_presign_expiry(expires: int):
    """Check presigned URL expiry is within 1 second to 7 days."""
    if (
            not isinstance(expires, int) or isinstance(expires, bool) or
            not MIN_PRESIGN_EXPIRY <= expires <= MAX_PRESIGN_EXPIRY
    ):
        raise ArgumentError(
            f"expires {expires} must be between {MIN_PRESIGN_EXPIRY} and "
            f"{MAX_PRESIGN_EXPIRY} seconds",
        )


def _scope(date: datetime, region: str) -> str:
    return (
        f"{time.to_signer_date(date)}/{region}/{SERVICE_NAME}/aws4_request"
    )


def _canonical_headers(
        headers: MutableMapping[str, HeaderValue],
) -> tuple[str, str]:
    """
    Return canonical headers and signed header list. Values of a repeated
    header, e.g. from HTTPHeaderDict.items(), are joined by ','.
    """
    canonical: dict[str, list[str]] = {}
    for key, values in headers.items():
        key = key.lower()
        if key in _UNSIGNED_HEADERS:
            continue
        if not isinstance(values, (list, tuple)):
            values = [values]
        canonical.setdefault(key, []).extend(
            _MULTI_SPACE_REGEX.sub(" ", str(value).strip())
            for value in values
        )
    keys = sorted(canonical)
    return (
        "\n".join(f"{key}:{','.join(canonical[key])}" for key in keys),
        ";".join(keys),
    )


def _canonical_query(query: str) -> str:
    """Sort already encoded query parameters by key and value."""
    if not query:
        return ""
    pairs = []
    for param in query.split("&"):
        key, _, value = param.partition("=")
        pairs.append((key, value))
    return "&".join(f"{key}={value}" for key, value in sorted(pairs))


def _string_to_sign(
        method: str,
        url: SplitResult,
        canonical_headers: str,
        signed_headers: str,
        content_sha256: str,
        date: datetime,
        scope: str,
) -> str:
    canonical_request = "\n".join([
        method,
        url.path or "/",
        _canonical_query(url.query),
        canonical_headers,
        "",
        signed_headers,
        content_sha256,
    ])
    return "\n".join([
        SIGN_V4_ALGORITHM,
        time.to_amz_date(date),
        scope,
        sha256_hash(canonical_request),
    ])


def _signature(
        secret_key: str, date: datetime, region: str, string_to_sign: str,
) -> str:
    """Derive signing key and sign string-to-sign."""
    key = ("AWS4" + secret_key).encode()
    for data in (
            time.to_signer_date(date), region, SERVICE_NAME, "aws4_request",
    ):
        key = hmac_sha256(key, data.encode())
    return hmac_sha256(key, string_to_sign.encode()).hex()


def sign_v4_s3(  # pylint: disable=too-many-positional-arguments
        method: str,
        url: SplitResult,
        region: str,
        headers: MutableMapping[str, HeaderValue],
        credentials: Credentials,
        content_sha256: str,
        date: datetime,
) -> MutableMapping[str, HeaderValue]:
    """Add Authorization header of signature V4 to given headers."""
    scope = _scope(date, region)
    canonical_headers, signed_headers = _canonical_headers(headers)
    string_to_sign = _string_to_sign(
        method, url, canonical_headers, signed_headers, content_sha256,
        date, scope,
    )
    signature = _signature(
        credentials.secret_key, date, region, string_to_sign,
    )
    headers["Authorization"] = (
        f"{SIGN_V4_ALGORITHM} Credential={credentials.access_key}/{scope}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )
    return headers


def presign_v4(  # pylint: disable=too-many-positional-arguments
        method: str,
        url: SplitResult,
        region: str,
        credentials: Credentials,
        date: datetime,
        expires: int,
) -> SplitResult:
    """Return URL carrying signature V4 in its query parameters."""
    check_presign_expiry(expires)

    scope = _scope(date, region)
    params = [
        ("X-Amz-Algorithm", SIGN_V4_ALGORITHM),
        ("X-Amz-Credential", f"{credentials.access_key}/{scope}"),
        ("X-Amz-Date", time.to_amz_date(date)),
        ("X-Amz-Expires", str(expires)),
        ("X-Amz-SignedHeaders", "host"),
    ]
    if credentials.session_token:
        params.append(("X-Amz-Security-Token", credentials.session_token))
    query = "&".join(
        ([url.query] if url.query else []) +
        [f"{key}={queryencode(value)}" for key, value in params]
    )
    url = url._replace(query=query)

    string_to_sign = _string_to_sign(
        method, url, "host:" + url.netloc, "host", UNSIGNED_PAYLOAD,
        date, scope,
    )
    signature = _signature(
        credentials.secret_key, date, region, string_to_sign,
    )
    return url._replace(query=f"{query}&X-Amz-Signature={signature}")
