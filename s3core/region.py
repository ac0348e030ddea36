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

"""Bucket region resolution and the per-bucket region cache."""

from __future__ import absolute_import, annotations

import logging
import threading
from typing import Callable, Optional
from xml.etree import ElementTree as ET

from .endpoint import BaseURL
from .error import ArgumentError, InvalidResponseError

DEFAULT_REGION = "us-east-1"

_LOGGER = logging.getLogger(__name__)


class RegionCache:
    """Thread safe bucket to region map."""

    def __init__(self):
        self._lock = threading.Lock()
        self._map: dict[str, str] = {}

    def get(self, bucket_name: str) -> Optional[str]:
        """Get region of bucket, if cached."""
        with self._lock:
            return self._map.get(bucket_name)

    def set(self, bucket_name: str, region: str):
        """Set region of bucket."""
        with self._lock:
            self._map[bucket_name] = region

    def remove(self, bucket_name: str):
        """Remove region of bucket."""
        with self._lock:
            self._map.pop(bucket_name, None)

    def __len__(self):
        with self._lock:
            return len(self._map)


def parse_location(data: bytes, is_aws_host: bool) -> str:
    """Get region from GetBucketLocation response."""
    try:
        element = ET.fromstring(data)
    except ET.ParseError as exc:
        raise InvalidResponseError(
            200, "application/xml", data.decode(errors="replace"),
        ) from exc
    if not element.text:
        return DEFAULT_REGION
    if element.text == "EU" and is_aws_host:
        return "eu-west-1"
    return element.text


class RegionResolver:
    """
    Pick region of a request. ``locate`` fetches GetBucketLocation response
    body of a bucket; it is called only when region is neither given,
    configured nor cached.
    """

    def __init__(
            self,
            base_url: BaseURL,
            cache: RegionCache,
            locate: Callable[[str], bytes],
            signed: Callable[[], bool],
    ):
        self._base_url = base_url
        self._cache = cache
        self._locate = locate
        self._signed = signed

    @property
    def cache(self) -> RegionCache:
        """Get region cache."""
        return self._cache

    def resolve(
            self,
            bucket_name: Optional[str] = None,
            region: Optional[str] = None,
    ) -> str:
        """Return region for request on given bucket."""
        configured = self._base_url.region
        if region is not None:
            if configured is not None and region != configured:
                raise ArgumentError(
                    f"region must be {configured}, but passed {region}",
                )
            return region

        if configured is not None:
            return configured

        if not bucket_name or not self._signed():
            return DEFAULT_REGION

        region = self._cache.get(bucket_name)
        if region:
            return region

        region = parse_location(
            self._locate(bucket_name), self._base_url.is_aws_host,
        )
        _LOGGER.debug("bucket %s is located in region %s", bucket_name, region)
        self._cache.set(bucket_name, region)
        return region
