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
Credential providers. A provider is asked for credentials once per
outgoing request, so implementations may rotate or refresh them
transparently and must tolerate concurrent calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .credentials import Credentials


class Provider(ABC):  # pylint: disable=too-few-public-methods
    """Credential retriever."""

    @abstractmethod
    def fetch(self) -> Credentials:
        """Fetch credentials to sign one request."""


class StaticProvider(Provider):  # pylint: disable=too-few-public-methods
    """Fixed access key, secret key and optional session token."""

    def __init__(
            self,
            access_key: str,
            secret_key: str,
            session_token: Optional[str] = None,
    ):
        self._credentials = Credentials(access_key, secret_key, session_token)

    def fetch(self) -> Credentials:
        """Return the configured credentials."""
        return self._credentials
