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
Endpoint parsing and request URL construction: path style or virtual
style addressing and Amazon S3 accelerate/dualstack host rewriting.
"""

from __future__ import absolute_import, annotations

import re
import urllib.parse
from dataclasses import dataclass
from typing import Mapping, Optional

from .error import ArgumentError
from .helpers import QueryDict, quote

_AWS_S3_PREFIX = (r'^(((bucket\.|accesspoint\.)'
                  r'vpce(-(?!_)[a-z_\d]+(?<!-)(?<!_))+\.s3\.)|'
                  r'((?!s3)(?!-)(?!_)[a-z_\d-]{1,63}(?<!-)(?<!_)\.)'
                  r's3-control(-(?!_)[a-z_\d]+(?<!-)(?<!_))*\.|'
                  r'(s3(-(?!_)[a-z_\d]+(?<!-)(?<!_))*\.))')
_HOSTNAME_REGEX = re.compile(
    r'^((?!-)(?!_)[a-z_\d-]{1,63}(?<!-)(?<!_)\.)*'
    r'((?!_)(?!-)[a-z_\d-]{1,63}(?<!-)(?<!_))$',
    re.IGNORECASE)
_AWS_ENDPOINT_REGEX = re.compile(r'.*\.amazonaws\.com(|\.cn)$', re.IGNORECASE)
_AWS_S3_ENDPOINT_REGEX = re.compile(
    _AWS_S3_PREFIX +
    r'((?!s3)(?!-)(?!_)[a-z_\d-]{1,63}(?<!-)(?<!_)\.)*'
    r'amazonaws\.com(|\.cn)$',
    re.IGNORECASE)
_AWS_ELB_ENDPOINT_REGEX = re.compile(
    r'^(?!-)(?!_)[a-z_\d-]{1,63}(?<!-)(?<!_)\.'
    r'(?!-)(?!_)[a-z_\d-]{1,63}(?<!-)(?<!_)\.'
    r'elb\.amazonaws\.com$',
    re.IGNORECASE)
_AWS_S3_PREFIX_REGEX = re.compile(_AWS_S3_PREFIX, re.IGNORECASE)
_REGION_REGEX = re.compile(r'^((?!_)(?!-)[a-z_\d-]{1,63}(?<!-)(?<!_))$',
                           re.IGNORECASE)

# Hosts which are used verbatim without region or dualstack rewriting.
_FIXED_AWS_HOSTS = {
    "s3-external-1.amazonaws.com": "us-east-1",
    "s3-us-gov-west-1.amazonaws.com": "us-gov-west-1",
    "s3-fips-us-gov-west-1.amazonaws.com": "us-gov-west-1",
}


def url_replace(
        url: urllib.parse.SplitResult,
        scheme: Optional[str] = None,
        netloc: Optional[str] = None,
        path: Optional[str] = None,
        query: Optional[str] = None,
) -> urllib.parse.SplitResult:
    """Return new URL with replaced properties in given URL."""
    return url._replace(
        scheme=url.scheme if scheme is None else scheme,
        netloc=url.netloc if netloc is None else netloc,
        path=url.path if path is None else path,
        query=url.query if query is None else query,
    )


@dataclass
class AwsInfo:
    """Amazon S3 host information."""
    s3_prefix: str
    domain_suffix: str
    region: Optional[str]
    dualstack: bool

    @property
    def accelerate(self) -> bool:
        """Check if prefix is an accelerate prefix."""
        return self.s3_prefix.endswith("s3-accelerate.")

    @property
    def is_china(self) -> bool:
        """Check if domain is Amazon S3 China."""
        return self.domain_suffix.endswith(".cn")


def parse_endpoint(endpoint: str) -> urllib.parse.SplitResult:
    """Parse endpoint URL; only scheme, host and port are allowed."""
    if not isinstance(endpoint, str):
        raise TypeError("endpoint must be str type")

    url = urllib.parse.urlsplit(endpoint)
    scheme = url.scheme.lower()
    if scheme not in ("http", "https"):
        raise ArgumentError("scheme in endpoint must be http or https")
    if not url.hostname:
        raise ArgumentError(f"host missing in endpoint {endpoint}")
    if url.path not in ("", "/"):
        raise ArgumentError("path in endpoint is not allowed")
    if url.query:
        raise ArgumentError("query in endpoint is not allowed")
    if url.fragment:
        raise ArgumentError("fragment in endpoint is not allowed")
    if url.username or url.password:
        raise ArgumentError("user information in endpoint is not allowed")
    try:
        port = url.port
    except ValueError as exc:
        raise ArgumentError("invalid port") from exc

    netloc = url.netloc
    if (scheme, port) in (("http", 80), ("https", 443)):
        netloc = url.hostname
    return urllib.parse.SplitResult(scheme, netloc, "", "", "")


def get_aws_info(
        host: str,
        https: bool,
        region: Optional[str],
) -> tuple[Optional[AwsInfo], Optional[str]]:
    """
    Extract Amazon S3 host information. Returns AwsInfo for Amazon S3 hosts
    and, for ELB hosts, the region found in the host name.
    """
    if not _HOSTNAME_REGEX.match(host):
        return None, None

    if _AWS_ELB_ENDPOINT_REGEX.match(host):
        region_in_host = host.split(".elb.amazonaws.com", 1)[0].split(".")[-1]
        return None, region or region_in_host

    if not _AWS_ENDPOINT_REGEX.match(host) or host.startswith("ec2-"):
        return None, None

    if not _AWS_S3_ENDPOINT_REGEX.match(host):
        raise ArgumentError(f"invalid Amazon AWS host {host}")

    matcher = _AWS_S3_PREFIX_REGEX.match(host)
    end = matcher.end() if matcher else 0
    s3_prefix = host[:end]
    if "s3-accesspoint" in s3_prefix and not https:
        raise ArgumentError(f"use HTTPS scheme for host {host}")

    tokens = host[end:].split(".")
    dualstack = tokens[0] == "dualstack"
    if dualstack:
        tokens = tokens[1:]
    region_in_host = ""
    if tokens[0] not in ("vpce", "amazonaws"):
        region_in_host = tokens[0]
        tokens = tokens[1:]
    region_in_host = _FIXED_AWS_HOSTS.get(host, region_in_host)

    info = AwsInfo(
        s3_prefix=s3_prefix,
        domain_suffix=".".join(tokens),
        region=region or region_in_host or None,
        dualstack=dualstack,
    )
    if info.is_china and not info.accelerate and not info.region:
        raise ArgumentError(
            f"region missing in Amazon S3 China endpoint {host}",
        )
    return info, None


class BaseURL:
    """Base URL of S3 endpoint and builder of request URLs."""
    _aws_info: Optional[AwsInfo]
    _url: urllib.parse.SplitResult
    _region: Optional[str]
    _virtual_style_flag: bool
    _accelerate_host_flag: bool

    def __init__(self, endpoint: str, region: Optional[str] = None):
        url = parse_endpoint(endpoint)
        if region and not _REGION_REGEX.match(region):
            raise ArgumentError(f"invalid region {region}")

        hostname = url.hostname or ""
        self._aws_info, region_in_host = get_aws_info(
            hostname, url.scheme == "https", region,
        )
        self._url = url
        self._region = region or region_in_host
        self._virtual_style_flag = (
            self._aws_info is not None or hostname.endswith("aliyuncs.com")
        )
        self._accelerate_host_flag = False
        if self._aws_info:
            self._region = self._aws_info.region or None
            self._accelerate_host_flag = self._aws_info.accelerate

    @property
    def region(self) -> Optional[str]:
        """Get region."""
        return self._region

    @property
    def is_https(self) -> bool:
        """Check if scheme is HTTPS."""
        return self._url.scheme == "https"

    @property
    def host(self) -> str:
        """Get host with port."""
        return self._url.netloc

    @property
    def is_aws_host(self) -> bool:
        """Check if URL points to Amazon S3 host."""
        return self._aws_info is not None

    @property
    def accelerate_host_flag(self) -> bool:
        """Get Amazon S3 accelerate host flag."""
        return self._accelerate_host_flag

    @accelerate_host_flag.setter
    def accelerate_host_flag(self, flag: bool):
        self._accelerate_host_flag = flag

    @property
    def dualstack_host_flag(self) -> bool:
        """Get Amazon S3 dualstack host flag."""
        return self._aws_info.dualstack if self._aws_info else False

    @dualstack_host_flag.setter
    def dualstack_host_flag(self, flag: bool):
        if self._aws_info:
            self._aws_info.dualstack = flag

    @property
    def virtual_style_flag(self) -> bool:
        """Get virtual style addressing flag."""
        return self._virtual_style_flag

    @virtual_style_flag.setter
    def virtual_style_flag(self, flag: bool):
        self._virtual_style_flag = flag

    def _aws_netloc(
            self,
            info: AwsInfo,
            bucket_name: Optional[str],
            enforce_path_style: bool,
            region: str,
    ) -> str:
        """Build Amazon S3 host for bucket request."""
        host = info.s3_prefix + info.domain_suffix
        if host in _FIXED_AWS_HOSTS:
            return host

        prefix = info.s3_prefix
        accelerate = self._accelerate_host_flag
        if accelerate and not info.accelerate:
            prefix = "s3-accelerate."
        if accelerate:
            if "." in (bucket_name or ""):
                raise ArgumentError(
                    f"bucket name '{bucket_name}' with '.' is not allowed "
                    f"for accelerate endpoint"
                )
            if enforce_path_style:
                prefix = prefix.replace("-accelerate", "", 1)
                accelerate = False

        netloc = prefix
        if info.dualstack:
            netloc += "dualstack."
        if not accelerate:
            netloc += region + "."
        return netloc + info.domain_suffix

    def _list_buckets_netloc(self, info: AwsInfo, region: str) -> str:
        """Build Amazon S3 host for ListBuckets API."""
        host = info.s3_prefix + info.domain_suffix
        if host in _FIXED_AWS_HOSTS:
            return host

        prefix, suffix = info.s3_prefix, info.domain_suffix
        if prefix.startswith(("s3.", "s3-")):
            prefix = "s3."
            suffix = "amazonaws.com" + (".cn" if info.is_china else "")
        return f"{prefix}{region}.{suffix}"

    def build(
            self,
            method: str,
            region: str,
            bucket_name: Optional[str] = None,
            object_name: Optional[str] = None,
            query_params: Optional[Mapping] = None,
    ) -> urllib.parse.SplitResult:
        """Build request URL for given bucket, object and query."""
        if not bucket_name and object_name:
            raise ArgumentError(
                f"empty bucket name for object name {object_name}",
            )

        query_params = QueryDict(query_params)
        url = url_replace(self._url, path="/", query=query_params.tostring())

        if not bucket_name:
            if self._aws_info:
                url = url_replace(
                    url,
                    netloc=self._list_buckets_netloc(self._aws_info, region),
                )
            return url

        enforce_path_style = (
            # CreateBucket API requires path style in Amazon AWS S3.
            (method == "PUT" and not object_name and not query_params) or
            # GetBucketLocation API requires path style in Amazon AWS S3.
            "location" in query_params or
            # Bucket name containing '.' breaks TLS certificate validation.
            ("." in bucket_name and self.is_https)
        )

        netloc = url.netloc
        if self._aws_info:
            netloc = self._aws_netloc(
                self._aws_info, bucket_name, enforce_path_style, region,
            )

        if enforce_path_style or not self._virtual_style_flag:
            path = f"/{bucket_name}"
        else:
            netloc = f"{bucket_name}.{netloc}"
            path = ""
        if object_name:
            path += "/" + quote(object_name)
        return url_replace(url, netloc=netloc, path=path or "/")
