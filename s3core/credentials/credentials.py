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

"""Credential definitions to access S3 service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..error import ArgumentError

_EXPIRY_MARGIN = timedelta(seconds=10)


@dataclass(frozen=True)
class Credentials:
    """
    Represents credentials access key, secret key and session token.
    """

    access_key: str
    secret_key: str
    session_token: Optional[str] = None
    expiration: Optional[datetime] = None

    def __post_init__(self):
        if not self.access_key:
            raise ArgumentError("access key must not be empty")
        if not self.secret_key:
            raise ArgumentError("secret key must not be empty")
        if self.expiration and not self.expiration.tzinfo:
            object.__setattr__(
                self,
                "expiration",
                self.expiration.replace(tzinfo=timezone.utc),
            )

    def is_expired(self) -> bool:
        """Check whether these credentials are expired or about to expire."""
        if not self.expiration:
            return False
        return self.expiration < datetime.now(timezone.utc) + _EXPIRY_MARGIN
