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


from unittest import TestCase

from s3core.endpoint import BaseURL
from s3core.error import ArgumentError, InvalidResponseError
from s3core.region import RegionCache, RegionResolver, parse_location

LOCATION = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<LocationConstraint xmlns="http://s3.amazonaws.com/doc/2006-03-01/">'
    '{0}</LocationConstraint>'
)


class ParseLocationTest(TestCase):
    def test_parse_location(self):
        self.assertEqual(
            parse_location(LOCATION.format("").encode(), True), "us-east-1",
        )
        self.assertEqual(
            parse_location(LOCATION.format("EU").encode(), True), "eu-west-1",
        )
        self.assertEqual(
            parse_location(LOCATION.format("EU").encode(), False), "EU",
        )
        self.assertEqual(
            parse_location(LOCATION.format("ap-south-1").encode(), False),
            "ap-south-1",
        )

    def test_invalid_location(self):
        self.assertRaises(
            InvalidResponseError, parse_location, b"not xml", False,
        )


class RegionResolverTest(TestCase):
    def setUp(self):
        self.located = []

    def _resolver(self, endpoint, region=None, signed=True):
        def locate(bucket_name):
            self.located.append(bucket_name)
            return LOCATION.format("eu-central-1").encode()

        return RegionResolver(
            BaseURL(endpoint, region), RegionCache(), locate, lambda: signed,
        )

    def test_explicit_region(self):
        resolver = self._resolver("https://localhost:9000")
        self.assertEqual(
            resolver.resolve("my-bucket", "ap-south-1"), "ap-south-1",
        )
        self.assertEqual(self.located, [])

    def test_explicit_region_conflicts_configured(self):
        resolver = self._resolver("https://localhost:9000", "us-west-2")
        self.assertEqual(resolver.resolve("my-bucket"), "us-west-2")
        self.assertEqual(
            resolver.resolve("my-bucket", "us-west-2"), "us-west-2",
        )
        self.assertRaises(
            ArgumentError, resolver.resolve, "my-bucket", "us-east-2",
        )
        self.assertEqual(self.located, [])

    def test_no_bucket_or_anonymous(self):
        resolver = self._resolver("https://localhost:9000")
        self.assertEqual(resolver.resolve(), "us-east-1")
        resolver = self._resolver("https://localhost:9000", signed=False)
        self.assertEqual(resolver.resolve("my-bucket"), "us-east-1")
        self.assertEqual(self.located, [])

    def test_location_is_cached(self):
        resolver = self._resolver("https://localhost:9000")
        self.assertEqual(resolver.resolve("my-bucket"), "eu-central-1")
        self.assertEqual(resolver.resolve("my-bucket"), "eu-central-1")
        self.assertEqual(self.located, ["my-bucket"])
        self.assertEqual(resolver.cache.get("my-bucket"), "eu-central-1")

        resolver.cache.remove("my-bucket")
        self.assertEqual(resolver.resolve("my-bucket"), "eu-central-1")
        self.assertEqual(self.located, ["my-bucket", "my-bucket"])


class RegionCacheTest(TestCase):
    def test_cache(self):
        cache = RegionCache()
        self.assertIsNone(cache.get("my-bucket"))
        cache.set("my-bucket", "us-west-1")
        cache.set("other-bucket", "us-west-2")
        self.assertEqual(cache.get("my-bucket"), "us-west-1")
        self.assertEqual(len(cache), 2)
        cache.remove("my-bucket")
        cache.remove("missing-bucket")
        self.assertIsNone(cache.get("my-bucket"))
        self.assertEqual(len(cache), 1)
