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

"""Resumable download of an object to a local file."""

from __future__ import absolute_import, annotations

import logging
import os
import shutil
from typing import Callable, Optional, cast

try:
    from urllib3.response import BaseHTTPResponse  # type: ignore[attr-defined]
except ImportError:
    from urllib3.response import HTTPResponse as BaseHTTPResponse

from .datatypes import Object
from .error import ArgumentError
from .helpers import ProgressType, makedirs, queryencode

_LOGGER = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


def temp_file_path(file_path: str, etag: str) -> str:
    """Partial download file of given ETag, i.e. FILE.ETAG.part.minio."""
    return f"{file_path}.{queryencode(etag)}.part.minio"


def _size(path: str) -> int:
    return os.path.getsize(path) if os.path.exists(path) else -1


class ResumableDownloader:
    """
    Download object to a file through a partial file named after the
    object's ETag. An interrupted download resumes from the size of the
    partial file; an existing target file of the object's size is taken as
    complete.

    ``stat`` returns current object information and ``fetch(offset, etag)``
    returns the content of that ETag version starting at given offset.
    """

    def __init__(
            self,
            stat: Callable[[], Object],
            fetch: Callable[[int, str], BaseHTTPResponse],
    ):
        self._stat = stat
        self._fetch = fetch

    def _prepare(self, file_path: str, tmp_file_path: str, size: int) -> int:
        """Return offset to resume from; -1 if file_path is complete."""
        tmp_size = _size(tmp_file_path)
        if tmp_size > size:
            os.remove(tmp_file_path)
            tmp_size = -1

        file_size = _size(file_path)
        if file_size == size:
            return -1
        if file_size > size:
            raise ArgumentError(
                f"source object size {size} is smaller than the size "
                f"{file_size} of destination file {file_path}",
            )
        if file_size >= 0 and tmp_size < 0:
            shutil.copyfile(file_path, tmp_file_path)
            tmp_size = file_size
        return max(tmp_size, 0)

    def download(
            self,
            file_path: str,
            progress: Optional[ProgressType] = None,
    ) -> Object:
        """Download to file_path and return object information."""
        if os.path.isdir(file_path):
            raise ArgumentError(f"file {file_path} is a directory")
        makedirs(os.path.dirname(file_path))

        info = self._stat()
        size = cast(int, info.size)
        tmp_file_path = temp_file_path(file_path, cast(str, info.etag))
        offset = self._prepare(file_path, tmp_file_path, size)
        if offset < 0:
            return info

        if progress:
            progress.set_meta(
                object_name=cast(str, info.object_name), total_length=size,
            )
            if offset:
                progress.update(offset)

        written = 0
        if offset < size:
            if offset:
                _LOGGER.debug(
                    "resuming download of %s from offset %d",
                    info.object_name, offset,
                )
            response = self._fetch(offset, cast(str, info.etag))
            try:
                with open(tmp_file_path, "ab") as tmp_file:
                    for data in response.stream(amt=_CHUNK_SIZE):
                        written += tmp_file.write(data)
                        if progress:
                            progress.update(len(data))
            finally:
                response.close()
                response.release_conn()
        else:
            with open(tmp_file_path, "ab"):
                pass

        if written != size - offset:
            raise IOError(
                f"data written {written} bytes does not match expected "
                f"{size - offset} bytes",
            )
        os.replace(tmp_file_path, file_path)
        return info
