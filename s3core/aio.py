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
s3core.aio
~~~~~~~~~~

Asynchronous facade over :class:`s3core.api.Client`. Every operation is
submitted to an executor and returns a :class:`concurrent.futures.Future`.
Listing operations resolve to the list of all results, read in the worker
thread.

:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import absolute_import, annotations

import functools
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from .api import Client

_DEFAULT_MAX_WORKERS = 8

# Operations returning value as is.
_DIRECT_OPERATIONS = (
    "make_bucket",
    "bucket_exists",
    "remove_bucket",
    "list_buckets",
    "stat_object",
    "get_object",
    "put_object",
    "fput_object",
    "fget_object",
    "copy_object",
    "compose_object",
    "remove_object",
    "get_presigned_url",
    "presigned_get_object",
    "presigned_put_object",
    "listen_bucket_notification",
)

# Operations returning lazy iterator of Result.
_LISTING_OPERATIONS = (
    "remove_objects",
    "list_objects",
    "list_multipart_uploads",
    "list_incomplete_uploads",
    "list_parts",
)


class AsyncClient:
    """
    Run operations of a client on an executor. Executor passed by caller is
    not shut down by this object; otherwise a thread pool is created and
    owned.

    Cancelling a returned future does not abort a running multipart upload;
    the upload is aborted only if the operation itself fails.

    Example:
        >>> with AsyncClient(Client("play.min.io")) as client:
        ...     future = client.bucket_exists("my-bucket")
        ...     print(future.result())
    """

    def __init__(self, client: Client, executor: Optional[Executor] = None):
        self._client = client
        self._owned = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=_DEFAULT_MAX_WORKERS,
            thread_name_prefix="s3core",
        )

    @property
    def client(self) -> Client:
        """Get synchronous client."""
        return self._client

    def submit(self, func: Callable[..., Any], *args, **kwargs) -> Future:
        """Run callable on executor."""
        return self._executor.submit(func, *args, **kwargs)

    def __getattr__(self, name: str):
        if name in _DIRECT_OPERATIONS:
            method = getattr(self._client, name)
        elif name in _LISTING_OPERATIONS:
            listing = getattr(self._client, name)

            def method(*args, **kwargs):
                return list(listing(*args, **kwargs))
        else:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}",
            )

        @functools.wraps(method)
        def operation(*args, **kwargs) -> Future:
            return self.submit(method, *args, **kwargs)

        return operation

    def close(self, wait: bool = True):
        """Shut down owned executor."""
        if self._owned:
            self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, value, traceback):
        self.close()
