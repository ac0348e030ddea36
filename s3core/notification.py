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

"""Reader of newline delimited JSON bucket notification stream."""

from __future__ import absolute_import, annotations

import json
from typing import Any, Optional

import urllib3

try:
    from urllib3.response import BaseHTTPResponse  # type: ignore[attr-defined]
except ImportError:
    from urllib3.response import HTTPResponse as BaseHTTPResponse

from .error import InvalidResponseError
from .pagination import Result


class EventStream:
    """
    Context manager friendly iterator of notification records. Each
    non-blank line of the response is one JSON document. A line which is
    not JSON, or a broken connection, ends the stream with one error
    :class:`Result`.
    """

    def __init__(self, response: BaseHTTPResponse):
        self._response: Optional[BaseHTTPResponse] = response

    @property
    def closed(self) -> bool:
        """Check whether stream is closed."""
        return self._response is None

    def close(self):
        """Release connection; calling it again does nothing."""
        response, self._response = self._response, None
        if response is not None:
            response.close()
            response.release_conn()

    def __iter__(self):
        return self

    def __next__(self) -> Result[dict[str, Any]]:
        while self._response is not None:
            try:
                line = self._response.readline()
            except (urllib3.exceptions.HTTPError, OSError) as exc:
                self.close()
                return Result(error=exc)
            if not line:
                break
            line = line.strip()
            if not line:
                continue
            try:
                return Result(json.loads(line))
            except ValueError as exc:
                self.close()
                error = InvalidResponseError(
                    200,
                    "application/json",
                    line.decode(errors="replace")
                    if isinstance(line, bytes) else line,
                )
                error.__cause__ = exc
                return Result(error=error)
        self.close()
        raise StopIteration

    def __enter__(self):
        return self

    def __exit__(self, exc_type, value, traceback):
        self.close()
