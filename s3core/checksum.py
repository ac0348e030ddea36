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

"""Payload digests for request signing and integrity headers."""

from __future__ import absolute_import, annotations

import base64
import hashlib
import hmac
from typing import Optional

from .error import SignatureError

UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
ZERO_SHA256_HASH = (
    "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
)


def _new_hasher(name: str, **kwargs):
    """Create hashlib object; unsupported algorithm raises SignatureError."""
    try:
        return hashlib.new(name, **kwargs)
    except ValueError as exc:
        raise SignatureError(
            f"{name} digest is not available in this runtime",
        ) from exc


def sha256_hash(data: Optional[str | bytes]) -> str:
    """Compute SHA-256 of data and return hash as hex encoded value."""
    data = data or b""
    hasher = _new_hasher("sha256")
    hasher.update(data.encode() if isinstance(data, str) else data)
    return hasher.hexdigest()


def md5sum_hash(data: Optional[str | bytes]) -> Optional[str]:
    """Compute MD5 of data and return hash as Base64 encoded value."""
    if data is None:
        return None
    # MD5 is used for transport integrity only, not in a security context.
    hasher = _new_hasher("md5", usedforsecurity=False)
    hasher.update(data.encode() if isinstance(data, str) else data)
    return base64.b64encode(hasher.digest()).decode()


def hmac_sha256(key: bytes, data: bytes) -> bytes:
    """Return HMAC-SHA256 digest of given key and data."""
    try:
        return hmac.new(key, data, hashlib.sha256).digest()
    except ValueError as exc:
        raise SignatureError(
            "HMAC-SHA256 is not available in this runtime",
        ) from exc
