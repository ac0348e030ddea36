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
s3core.multipart
~~~~~~~~~~~~~~~~

Multipart upload orchestration: streamed put_object, server side
copy_object and compose_object.

A multipart upload is held by :class:`UploadSession`, a context manager
which aborts the upload when its block exits without completing it. A
failure to abort is logged and never replaces the exception which ended
the block.

:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import absolute_import, annotations

import itertools
import logging
import threading
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from typing import BinaryIO, Callable, Iterable, Iterator, Optional, cast

from urllib3._collections import HTTPHeaderDict

from .checksum import md5sum_hash
from .datatypes import (ComposeSource, Object, ObjectWriteResult, Part,
                        parse_copy_object, parse_xml)
from .error import ArgumentError
from .executor import HttpExecutor, Request
from .helpers import (MAX_MULTIPART_COUNT, MAX_MULTIPART_OBJECT_SIZE,
                      MAX_PART_SIZE, MIN_PART_SIZE, ProgressType, QueryDict,
                      get_part_info, read_part_data)
from .xml import Element, SubElement, findtext, getbytes

_LOGGER = logging.getLogger(__name__)

StatFunc = Callable[[ComposeSource], Object]


def _read_parts(
        stream: BinaryIO,
        object_size: int,
        part_size: int,
        part_count: int,
        progress: Optional[ProgressType] = None,
) -> Iterator[tuple[int, bytes, bool]]:
    """
    Yield (part number, data, is last part) from stream. For unknown
    object size, one byte more than part size is read to detect the end of
    stream; that byte starts the next part.
    """
    if part_count > 0:
        uploaded_size = 0
        for part_number in range(1, part_count + 1):
            size = (
                part_size if part_number < part_count
                else object_size - uploaded_size
            )
            data = read_part_data(stream, size, progress=progress)
            if len(data) != size:
                raise IOError(
                    f"stream having not enough data; expected: {size}, "
                    f"got: {len(data)} bytes"
                )
            uploaded_size += size
            yield part_number, data, part_number == part_count
        return

    part_number = 0
    one_byte = b""
    while True:
        part_number += 1
        data = read_part_data(
            stream, part_size + 1, part_data=one_byte, progress=progress,
        )
        if len(data) <= part_size:
            yield part_number, data, True
            return
        one_byte = data[-1:]
        yield part_number, data[:-1], False


class UploadSession:
    """
    Multipart upload in progress. Use as context manager; the upload is
    aborted unless :meth:`complete` succeeded inside the block.
    """

    def __init__(
            self,
            executor: HttpExecutor,
            bucket_name: str,
            object_name: str,
            upload_id: str,
            region: Optional[str] = None,
    ):
        self._executor = executor
        self._bucket_name = bucket_name
        self._object_name = object_name
        self._upload_id = upload_id
        self._region = region
        self._parts: dict[int, Part] = {}
        self._lock = threading.Lock()
        self._done = False

    @property
    def upload_id(self) -> str:
        """Get upload ID."""
        return self._upload_id

    @property
    def parts(self) -> list[Part]:
        """Get uploaded parts ordered by part number."""
        with self._lock:
            return [self._parts[key] for key in sorted(self._parts)]

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if not self._done:
            try:
                self.abort()
            except Exception as exc:  # pylint: disable=broad-except
                _LOGGER.warning(
                    "unable to abort upload %s of %s/%s: %s",
                    self._upload_id, self._bucket_name, self._object_name,
                    exc,
                )
        return False

    def _query(self, part_number: Optional[int] = None) -> QueryDict:
        query_params = QueryDict({"uploadId": self._upload_id})
        if part_number is not None:
            query_params["partNumber"] = str(part_number)
        return query_params

    def _add(self, part: Part) -> Part:
        with self._lock:
            self._parts[part.part_number] = part
        return part

    def upload_part(
            self,
            part_number: int,
            data: bytes,
            headers: Optional[HTTPHeaderDict] = None,
    ) -> Part:
        """Execute UploadPart S3 API."""
        response = self._executor.execute(
            Request(
                "PUT",
                bucket_name=self._bucket_name,
                object_name=self._object_name,
                headers=HTTPHeaderDict(headers),
                query_params=self._query(part_number),
                body=data,
                no_body_trace=True,
            ),
            self._region,
        )
        return self._add(Part(
            part_number=part_number,
            etag=cast(str, response.headers.get("etag", "")).replace('"', ""),
            size=len(data),
        ))

    def upload_part_copy(
            self,
            part_number: int,
            headers: dict[str, str],
            size: Optional[int] = None,
    ) -> Part:
        """Execute UploadPartCopy S3 API."""
        response = self._executor.execute(
            Request(
                "PUT",
                bucket_name=self._bucket_name,
                object_name=self._object_name,
                headers=HTTPHeaderDict(headers),
                query_params=self._query(part_number),
            ),
            self._region,
        )
        etag, last_modified = parse_copy_object(response)
        return self._add(Part(
            part_number=part_number,
            etag=etag,
            last_modified=last_modified,
            size=size,
        ))

    def upload_parts(
            self,
            parts: Iterable[tuple[int, bytes, bool]],
            num_parallel_uploads: int = 1,
    ):
        """
        Upload parts; with more than one parallel upload, at most that many
        parts are read ahead and in flight.
        """
        if num_parallel_uploads <= 1:
            for part_number, data, _ in parts:
                self.upload_part(part_number, data)
            return

        pending: deque[Future] = deque()
        with ThreadPoolExecutor(max_workers=num_parallel_uploads) as pool:
            try:
                for part_number, data, _ in parts:
                    if len(pending) >= num_parallel_uploads:
                        pending.popleft().result()
                    pending.append(
                        pool.submit(self.upload_part, part_number, data),
                    )
                while pending:
                    pending.popleft().result()
            except BaseException:
                for future in pending:
                    future.cancel()
                raise

    def complete(self) -> ObjectWriteResult:
        """Execute CompleteMultipartUpload S3 API with uploaded parts."""
        parts = self.parts
        if [part.part_number for part in parts] != list(
                range(1, len(parts) + 1),
        ):
            raise ArgumentError(
                f"parts of upload {self._upload_id} are not numbered "
                "contiguously from 1",
            )
        element = Element("CompleteMultipartUpload")
        for part in parts:
            tag = SubElement(element, "Part")
            SubElement(tag, "PartNumber", str(part.part_number))
            SubElement(tag, "ETag", '"' + part.etag + '"')
        body = getbytes(element)
        response = self._executor.execute(
            Request(
                "POST",
                bucket_name=self._bucket_name,
                object_name=self._object_name,
                headers=HTTPHeaderDict({
                    "Content-Type": "application/xml",
                    "Content-MD5": md5sum_hash(body),
                }),
                query_params=self._query(),
                body=body,
            ),
            self._region,
        )
        result = ObjectWriteResult.fromcomplete(response)
        self._done = True
        return result

    def abort(self):
        """Execute AbortMultipartUpload S3 API."""
        self._done = True
        self._executor.execute(
            Request(
                "DELETE",
                bucket_name=self._bucket_name,
                object_name=self._object_name,
                query_params=self._query(),
            ),
            self._region,
        )


def calc_part_count(sources: list[ComposeSource], stat: StatFunc) -> int:
    """
    Stat every source and compute number of parts of composed object.
    Every source but the last must be at least 5MiB, also the last piece
    when such source is split by 5GiB.
    """
    object_size = 0
    part_count = 0
    for i, src in enumerate(sources, start=1):
        info = stat(src)
        src.build_headers(cast(int, info.size), cast(str, info.etag))
        size = src.copy_size
        is_last = i == len(sources)

        if size < MIN_PART_SIZE and not is_last:
            raise ArgumentError(
                f"source {src}: size {size} must be greater than "
                f"{MIN_PART_SIZE}"
            )

        object_size += size
        if object_size > MAX_MULTIPART_OBJECT_SIZE:
            raise ArgumentError(
                f"destination object size must be less than "
                f"{MAX_MULTIPART_OBJECT_SIZE}"
            )

        count, last_part_size = divmod(size, MAX_PART_SIZE)
        if last_part_size:
            count += 1
        elif count:
            last_part_size = MAX_PART_SIZE
        if count > 1 and last_part_size < MIN_PART_SIZE and not is_last:
            raise ArgumentError(
                f"source {src}: for multipart split upload of {size}, "
                f"last part size is less than {MIN_PART_SIZE}"
            )
        part_count += max(count, 1)

    if part_count > MAX_MULTIPART_COUNT:
        raise ArgumentError(
            f"Compose sources create more than allowed multipart count "
            f"{MAX_MULTIPART_COUNT}"
        )
    return part_count


class MultipartUploader:
    """Upload and copy objects, in parts where required."""

    def __init__(self, executor: HttpExecutor, stat: StatFunc):
        self._executor = executor
        self._stat = stat

    def create_upload(
            self,
            bucket_name: str,
            object_name: str,
            headers: Optional[HTTPHeaderDict] = None,
            region: Optional[str] = None,
    ) -> UploadSession:
        """Execute CreateMultipartUpload S3 API."""
        headers = HTTPHeaderDict(headers)
        if not headers.get("Content-Type"):
            headers["Content-Type"] = "application/octet-stream"
        response = self._executor.execute(
            Request(
                "POST",
                bucket_name=bucket_name,
                object_name=object_name,
                headers=headers,
                query_params=QueryDict({"uploads": ""}),
            ),
            region,
        )
        upload_id = cast(str, findtext(parse_xml(response), "UploadId", True))
        return UploadSession(
            self._executor, bucket_name, object_name, upload_id, region,
        )

    def put(
            self,
            bucket_name: str,
            object_name: str,
            data: bytes,
            headers: Optional[HTTPHeaderDict] = None,
            region: Optional[str] = None,
    ) -> ObjectWriteResult:
        """Execute PutObject S3 API."""
        response = self._executor.execute(
            Request(
                "PUT",
                bucket_name=bucket_name,
                object_name=object_name,
                headers=HTTPHeaderDict(headers),
                body=data,
                no_body_trace=True,
            ),
            region,
        )
        return ObjectWriteResult.fromresponse(
            bucket_name, object_name, response,
        )

    def put_object(
            self,
            bucket_name: str,
            object_name: str,
            data: BinaryIO,
            length: int,
            headers: Optional[HTTPHeaderDict] = None,
            part_size: int = 0,
            progress: Optional[ProgressType] = None,
            num_parallel_uploads: int = 1,
            region: Optional[str] = None,
    ) -> ObjectWriteResult:
        """
        Upload stream; single PutObject when it fits in one part, multipart
        upload otherwise.
        """
        part_size, part_count = get_part_info(length, part_size)
        if progress:
            progress.set_meta(object_name=object_name, total_length=length)

        parts = _read_parts(data, length, part_size, part_count, progress)
        first = next(parts)
        part_number, part_data, is_last = first
        if is_last and part_number == 1:
            return self.put(
                bucket_name, object_name, part_data, headers, region,
            )

        with self.create_upload(
                bucket_name, object_name, headers, region,
        ) as session:
            session.upload_parts(
                itertools.chain([first], parts), num_parallel_uploads,
            )
            return session.complete()

    def _copy(
            self,
            bucket_name: str,
            object_name: str,
            source: ComposeSource,
            headers: Optional[HTTPHeaderDict] = None,
            metadata_directive: Optional[str] = None,
            region: Optional[str] = None,
    ) -> ObjectWriteResult:
        """Execute CopyObject S3 API."""
        headers = HTTPHeaderDict(headers)
        headers.extend(source.copy_headers())
        if metadata_directive:
            headers["x-amz-metadata-directive"] = metadata_directive
        response = self._executor.execute(
            Request(
                "PUT",
                bucket_name=bucket_name,
                object_name=object_name,
                headers=headers,
            ),
            region,
        )
        etag, last_modified = parse_copy_object(response)
        return ObjectWriteResult(
            bucket_name=bucket_name,
            object_name=object_name,
            version_id=response.headers.get("x-amz-version-id"),
            etag=etag,
            http_headers=response.headers,
            last_modified=last_modified,
        )

    def copy_object(
            self,
            bucket_name: str,
            object_name: str,
            source: ComposeSource,
            headers: Optional[HTTPHeaderDict] = None,
            region: Optional[str] = None,
    ) -> ObjectWriteResult:
        """
        Server side copy. Byte ranges and sources bigger than 5GiB are
        copied in parts.
        """
        return self.compose_object(
            bucket_name, object_name, [source], headers, region,
        )

    def compose_object(
            self,
            bucket_name: str,
            object_name: str,
            sources: list[ComposeSource],
            headers: Optional[HTTPHeaderDict] = None,
            region: Optional[str] = None,
    ) -> ObjectWriteResult:
        """Create object by combining sources using server side copy."""
        if not isinstance(sources, (list, tuple)) or not sources:
            raise ArgumentError("sources must be non-empty list or tuple type")
        for i, src in enumerate(sources):
            if not isinstance(src, ComposeSource):
                raise ArgumentError(
                    f"sources[{i}] must be ComposeSource type",
                )

        part_count = calc_part_count(list(sources), self._stat)
        src = sources[0]
        if part_count == 1 and src.offset is None and src.length is None:
            return self._copy(
                bucket_name, object_name, src, headers,
                "REPLACE" if headers else None, region,
            )

        with self.create_upload(
                bucket_name, object_name, headers, region,
        ) as session:
            part_number = 0
            for src in sources:
                offset = src.offset or 0
                size = src.copy_size
                while size > 0:
                    part_number += 1
                    length = min(size, MAX_PART_SIZE)
                    part_headers = dict(src.headers)
                    part_headers["x-amz-copy-source-range"] = (
                        f"bytes={offset}-{offset + length - 1}"
                    )
                    session.upload_part_copy(part_number, part_headers, length)
                    offset += length
                    size -= length
            return session.complete()