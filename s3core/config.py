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

"""Client configuration: endpoint, user agent, trace sink and timeouts."""

from __future__ import absolute_import, annotations

import os
import platform
from datetime import timedelta
from typing import Optional, TextIO

import certifi
import urllib3
from urllib3.util import Retry, Timeout

from . import __title__, __version__
from .endpoint import BaseURL
from .error import ArgumentError

_DEFAULT_USER_AGENT = (
    f"{__title__} ({platform.system()}; {platform.machine()}) "
    f"{__title__}/{__version__}"
)
_DEFAULT_TIMEOUT = timedelta(minutes=5).seconds


def default_timeout() -> Timeout:
    """Five minutes connect and read timeout."""
    return Timeout(connect=_DEFAULT_TIMEOUT, read=_DEFAULT_TIMEOUT)


def new_http_client(cert_check: bool = True) -> urllib3.PoolManager:
    """
    Create connection pool verifying server certificates against
    SSL_CERT_FILE or certifi CA bundle. Connection failures are retried
    with backoff; HTTP status codes are never retried.
    """
    return urllib3.PoolManager(
        timeout=default_timeout(),
        maxsize=10,
        cert_reqs="CERT_REQUIRED" if cert_check else "CERT_NONE",
        ca_certs=os.environ.get("SSL_CERT_FILE") or certifi.where(),
        retries=Retry(
            total=5,
            backoff_factor=0.2,
            status_forcelist=[],
        ),
    )


class ClientConfig:
    """Mutable client settings read by every request when it is issued."""
    base_url: BaseURL
    user_agent: str
    trace_stream: Optional[TextIO]
    timeout: Timeout

    def __init__(
            self,
            base_url: BaseURL,
            timeout: Optional[Timeout] = None,
            trace_stream: Optional[TextIO] = None,
    ):
        self.base_url = base_url
        self.user_agent = _DEFAULT_USER_AGENT
        self.trace_stream = trace_stream
        self.timeout = timeout or default_timeout()

    def set_app_info(self, app_name: str, app_version: str):
        """Append application name and version to user agent."""
        if not (app_name and app_version):
            raise ArgumentError("Application name/version cannot be empty.")
        self.user_agent = f"{_DEFAULT_USER_AGENT} {app_name}/{app_version}"

    def set_timeout(
            self,
            connect: Optional[float] = None,
            read: Optional[float] = None,
    ):
        """Replace timeouts; None leaves that timeout unchanged."""
        for value in (connect, read):
            if value is not None and value <= 0:
                raise ArgumentError(f"timeout {value} must be positive")
        self.timeout = Timeout(
            connect=self.timeout.connect_timeout if connect is None
            else connect,
            read=self.timeout.read_timeout if read is None else read,
        )
