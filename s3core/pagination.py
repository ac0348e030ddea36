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
s3core.pagination
~~~~~~~~~~~~~~~~~

Lazy iteration over paged listing APIs. Each listing supplies a
``fetch_page(cursor)`` function; :class:`PaginatedIterator` buffers one page
at a time and fetches the next only when the buffer is drained and the
previous page was truncated.

A failure to fetch a page is not raised from ``__next__``; it is yielded as
a final :class:`Result` whose :meth:`Result.get` raises it.

:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import absolute_import, annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of a listing API."""
    items: list[T] = field(default_factory=list)
    cursor: Any = None
    truncated: bool = False


class Result(Generic[T]):
    """Holds either an item or the error which ended an iteration."""

    def __init__(
            self,
            value: Optional[T] = None,
            error: Optional[BaseException] = None,
    ):
        self._value = value
        self._error = error

    @property
    def error(self) -> Optional[BaseException]:
        """Get error, if any."""
        return self._error

    def get(self) -> T:
        """Return value or raise stored error."""
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore[return-value]

    def __repr__(self):
        if self._error is not None:
            return f"Result(error={self._error!r})"
        return f"Result(value={self._value!r})"


class PaginatedIterator(Iterator[Result[T]]):
    """Forward only, single use iterator over pages of a listing."""

    def __init__(
            self,
            fetch_page: Callable[[Any], Page[T]],
            cursor: Any = None,
    ):
        self._fetch_page = fetch_page
        self._cursor = cursor
        self._buffer: deque[T] = deque()
        self._more = True
        self._error: Optional[BaseException] = None

    def _fill(self):
        while not self._buffer and self._more and self._error is None:
            try:
                page = self._fetch_page(self._cursor)
            except Exception as exc:  # pylint: disable=broad-except
                self._error = exc
                self._more = False
                return
            self._buffer.extend(page.items)
            self._cursor = page.cursor
            self._more = page.truncated

    def has_next(self) -> bool:
        """Check whether another result is available; may fetch a page."""
        self._fill()
        return bool(self._buffer) or self._error is not None

    def __iter__(self):
        return self

    def __next__(self) -> Result[T]:
        if not self.has_next():
            raise StopIteration
        if self._buffer:
            return Result(self._buffer.popleft())
        error, self._error = self._error, None
        return Result(error=error)
