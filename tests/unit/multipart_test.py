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


import io
import threading
from unittest import TestCase, mock

from s3core import Client
from s3core.datatypes import ComposeSource
from s3core.error import ArgumentError, S3Error
from s3core.helpers import (MAX_MULTIPART_OBJECT_SIZE, MAX_PART_SIZE,
                            MIN_PART_SIZE, get_part_info)
from s3core.multipart import UploadSession, _read_parts

from .mocks import XML_HEADERS, MockConnection, MockResponse

MB = 1024 * 1024
NS = 'xmlns="http://s3.amazonaws.com/doc/2006-03-01/"'
URL = "https://localhost:9000/bucket/obj"
INITIATE = (
    f'<InitiateMultipartUploadResult {NS}><Bucket>bucket</Bucket>'
    '<Key>obj</Key><UploadId>xyz</UploadId></InitiateMultipartUploadResult>'
)
COMPLETE = (
    f'<CompleteMultipartUploadResult {NS}>'
    '<Location>https://localhost:9000/bucket/obj</Location>'
    '<Bucket>bucket</Bucket><Key>obj</Key><ETag>"final"</ETag>'
    '</CompleteMultipartUploadResult>'
)
ERROR = (
    '<Error><Code>{0}</Code><Message>{1}</Message>'
    '<Resource>/bucket/obj</Resource><RequestId>1</RequestId>'
    '<HostId>2</HostId></Error>'
)
COPY_PART = (
    f'<CopyPartResult {NS}><LastModified>2026-01-02T03:04:05.000Z'
    '</LastModified><ETag>"{0}"</ETag></CopyPartResult>'
)


def _initiate(mock_server, url=URL):
    mock_server.mock_add_request(
        MockResponse("POST", url + "?uploads=", {}, 200,
                     response_headers=XML_HEADERS, content=INITIATE),
    )


def _part(mock_server, number, status=200, size=None, url=URL):
    headers = {"Content-Length": str(size)} if size is not None else {}
    if status == 200:
        mock_server.mock_add_request(
            MockResponse(
                "PUT", f"{url}?partNumber={number}&uploadId=xyz", headers,
                200, response_headers={"ETag": f'"etag{number}"'},
            ),
        )
    else:
        mock_server.mock_add_request(
            MockResponse(
                "PUT", f"{url}?partNumber={number}&uploadId=xyz", headers,
                status, response_headers=XML_HEADERS,
                content=ERROR.format("InternalError", "try again"),
            ),
        )


def _complete(mock_server, content=COMPLETE, url=URL):
    mock_server.mock_add_request(
        MockResponse("POST", url + "?uploadId=xyz",
                     {"Content-Type": "application/xml"}, 200,
                     response_headers=XML_HEADERS, content=content),
    )


def _abort(mock_server, status=204, url=URL):
    mock_server.mock_add_request(
        MockResponse(
            "DELETE", url + "?uploadId=xyz", {}, status,
            response_headers=XML_HEADERS if status != 204 else None,
            content=(
                ERROR.format("AccessDenied", "denied")
                if status != 204 else None
            ),
        ),
    )


def _methods(mock_server):
    return [call[0] for call in mock_server.calls]


class PartInfoTest(TestCase):
    def test_default_part_size(self):
        self.assertEqual(
            get_part_info(MAX_MULTIPART_OBJECT_SIZE, 0), (550502400, 9987),
        )
        self.assertEqual(
            get_part_info(MAX_MULTIPART_OBJECT_SIZE // 1024, 0),
            (MIN_PART_SIZE, 1024),
        )
        self.assertEqual(get_part_info(10, 0), (10, 1))
        self.assertEqual(get_part_info(0, 0), (0, 1))

    def test_configured_part_size(self):
        self.assertEqual(
            get_part_info(MAX_MULTIPART_OBJECT_SIZE, 1024 * MB * 1000 // 1024),
            (1048576000, 5243),
        )
        self.assertEqual(get_part_info(11 * MB, 5 * MB), (5 * MB, 3))

    def test_unknown_size(self):
        self.assertEqual(get_part_info(-1, 5 * MB), (5 * MB, -1))
        self.assertRaises(ArgumentError, get_part_info, -1, 0)

    def test_invalid_sizes(self):
        self.assertRaises(ArgumentError, get_part_info, 10, MB)
        self.assertRaises(ArgumentError, get_part_info, 10, MAX_PART_SIZE + 1)
        self.assertRaises(
            ArgumentError, get_part_info, MAX_MULTIPART_OBJECT_SIZE + 1, 0,
        )
        self.assertRaises(
            ArgumentError, get_part_info, MAX_MULTIPART_OBJECT_SIZE,
            MIN_PART_SIZE,
        )


class ReadPartsTest(TestCase):
    def test_unknown_size_peek_ahead(self):
        data = bytes(range(256)) * (12 * MB // 256)
        parts = list(_read_parts(io.BytesIO(data), -1, 5 * MB, -1))
        self.assertEqual(
            [(number, len(chunk), last) for number, chunk, last in parts],
            [(1, 5 * MB, False), (2, 5 * MB, False), (3, 2 * MB, True)],
        )
        self.assertEqual(b"".join(chunk for _, chunk, _ in parts), data)

    def test_unknown_size_exact_part(self):
        parts = list(
            _read_parts(io.BytesIO(b"a" * (5 * MB)), -1, 5 * MB, -1),
        )
        self.assertEqual(len(parts), 1)
        self.assertEqual(parts[0][0], 1)
        self.assertTrue(parts[0][2])

    def test_unknown_size_empty_stream(self):
        self.assertEqual(
            list(_read_parts(io.BytesIO(b""), -1, 5 * MB, -1)),
            [(1, b"", True)],
        )

    def test_short_stream(self):
        parts = _read_parts(io.BytesIO(b"a" * 10), 20, 20, 1)
        self.assertRaises(IOError, next, parts)


class PutObjectTest(TestCase):
    @mock.patch("urllib3.PoolManager")
    def test_single_part(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse(
                "PUT", URL,
                {"Content-Length": "5", "Content-Type": "text/plain",
                 "x-amz-meta-color": "red"},
                200, response_headers={"ETag": '"abc"',
                                       "x-amz-version-id": "v1"},
            ),
        )
        result = Client("localhost:9000").put_object(
            "bucket", "obj", io.BytesIO(b"hello"), 5,
            content_type="text/plain", metadata={"color": "red"},
        )
        self.assertEqual(result.etag, "abc")
        self.assertEqual(result.version_id, "v1")
        self.assertEqual(_methods(mock_server), ["PUT"])

    @mock.patch("urllib3.PoolManager")
    def test_unknown_size_exact_part_is_single_put(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse("PUT", URL, {"Content-Length": str(5 * MB)}, 200,
                         response_headers={"ETag": '"abc"'}),
        )
        Client("localhost:9000").put_object(
            "bucket", "obj", io.BytesIO(b"a" * (5 * MB)), -1,
            part_size=5 * MB,
        )
        self.assertEqual(_methods(mock_server), ["PUT"])

    @mock.patch("urllib3.PoolManager")
    def test_three_parts(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        _initiate(mock_server)
        _part(mock_server, 1, size=5 * MB)
        _part(mock_server, 2, size=5 * MB)
        _part(mock_server, 3, size=MB)
        _complete(mock_server)

        result = Client("localhost:9000").put_object(
            "bucket", "obj", io.BytesIO(b"a" * (11 * MB)), 11 * MB,
            part_size=5 * MB,
        )
        self.assertEqual(result.etag, "final")
        self.assertEqual(result.location, "https://localhost:9000/bucket/obj")
        self.assertEqual(mock_server.requests, [])
        body = mock_server.calls[-1][3]
        self.assertLess(
            body.index(b"<ETag>\"etag1\"</ETag>"),
            body.index(b"<ETag>\"etag3\"</ETag>"),
        )

    @mock.patch("urllib3.PoolManager")
    def test_part_failure_aborts_once(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        _initiate(mock_server)
        _part(mock_server, 1)
        _part(mock_server, 2)
        _part(mock_server, 3, status=500)
        _abort(mock_server)

        with self.assertRaises(S3Error) as ctx:
            Client("localhost:9000").put_object(
                "bucket", "obj", io.BytesIO(b"a" * (11 * MB)), 11 * MB,
                part_size=5 * MB,
            )
        self.assertEqual(ctx.exception.code, "InternalError")
        self.assertEqual(
            _methods(mock_server), ["POST", "PUT", "PUT", "PUT", "DELETE"],
        )
        self.assertEqual(mock_server.requests, [])

    @mock.patch("urllib3.PoolManager")
    def test_abort_failure_keeps_original_error(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        _initiate(mock_server)
        _part(mock_server, 1)
        _part(mock_server, 2, status=500)
        _abort(mock_server, status=403)

        client = Client("localhost:9000")
        with self.assertLogs("s3core.multipart", level="WARNING") as logs:
            with self.assertRaises(S3Error) as ctx:
                client.put_object(
                    "bucket", "obj", io.BytesIO(b"a" * (11 * MB)), 11 * MB,
                    part_size=5 * MB,
                )
        self.assertEqual(ctx.exception.code, "InternalError")
        self.assertIn("unable to abort upload xyz", logs.output[0])
        self.assertEqual(mock_server.requests, [])

    @mock.patch("urllib3.PoolManager")
    def test_complete_error_document_aborts(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        _initiate(mock_server)
        _part(mock_server, 1)
        _part(mock_server, 2)
        _part(mock_server, 3)
        _complete(mock_server, ERROR.format("InternalError", "retry"))
        _abort(mock_server)

        with self.assertRaises(S3Error) as ctx:
            Client("localhost:9000").put_object(
                "bucket", "obj", io.BytesIO(b"a" * (11 * MB)), 11 * MB,
                part_size=5 * MB,
            )
        self.assertEqual(ctx.exception.code, "InternalError")
        self.assertEqual(_methods(mock_server)[-2:], ["POST", "DELETE"])
        self.assertEqual(mock_server.requests, [])


class ComposeObjectTest(TestCase):
    @staticmethod
    def _head(mock_server, name, size, etag):
        mock_server.mock_add_request(
            MockResponse(
                "HEAD", f"https://localhost:9000/src/{name}", {}, 200,
                response_headers={
                    "Content-Length": str(size), "ETag": f'"{etag}"',
                },
            ),
        )

    @mock.patch("urllib3.PoolManager")
    def test_compose(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        self._head(mock_server, "a", 6 * MB, "etag-a")
        self._head(mock_server, "b", MB, "etag-b")
        _initiate(mock_server)
        for number, (name, size, etag) in enumerate(
                [("a", 6 * MB, "etag-a"), ("b", MB, "etag-b")], start=1,
        ):
            mock_server.mock_add_request(
                MockResponse(
                    "PUT", f"{URL}?partNumber={number}&uploadId=xyz",
                    {
                        "x-amz-copy-source": f"/src/{name}",
                        "x-amz-copy-source-if-match": etag,
                        "x-amz-copy-source-range": f"bytes=0-{size - 1}",
                    },
                    200, response_headers=XML_HEADERS,
                    content=COPY_PART.replace("{0}", f"part{number}"),
                ),
            )
        _complete(mock_server)

        result = Client("localhost:9000").compose_object(
            "bucket", "obj",
            [ComposeSource("src", "a"), ComposeSource("src", "b")],
        )
        self.assertEqual(result.etag, "final")
        self.assertEqual(mock_server.requests, [])
        self.assertIn(b"<ETag>\"part2\"</ETag>", mock_server.calls[-1][3])

    @mock.patch("urllib3.PoolManager")
    def test_small_source_fails_before_writes(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        self._head(mock_server, "a", MB, "etag-a")

        with self.assertRaises(ArgumentError):
            Client("localhost:9000").compose_object(
                "bucket", "obj",
                [ComposeSource("src", "a"), ComposeSource("src", "b")],
            )
        self.assertEqual(_methods(mock_server), ["HEAD"])

    @mock.patch("urllib3.PoolManager")
    def test_offset_beyond_size_fails_before_writes(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        self._head(mock_server, "a", 6 * MB, "etag-a")
        self._head(mock_server, "b", MB, "etag-b")

        with self.assertRaises(ArgumentError):
            Client("localhost:9000").compose_object(
                "bucket", "obj",
                [ComposeSource("src", "a"),
                 ComposeSource("src", "b", offset=MB)],
            )
        self.assertEqual(_methods(mock_server), ["HEAD", "HEAD"])

    @mock.patch("urllib3.PoolManager")
    def test_total_size_over_limit_fails_before_writes(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        size = 3 * 1024 * 1024 * MB
        self._head(mock_server, "a", size, "etag-a")
        self._head(mock_server, "b", size, "etag-b")

        with self.assertRaises(ArgumentError):
            Client("localhost:9000").compose_object(
                "bucket", "obj",
                [ComposeSource("src", "a"), ComposeSource("src", "b")],
            )
        self.assertEqual(_methods(mock_server), ["HEAD", "HEAD"])
        self.assertEqual(mock_server.requests, [])

    @mock.patch("urllib3.PoolManager")
    def test_part_count_over_limit_fails_before_writes(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        count = 10001
        for _ in range(count):
            self._head(mock_server, "a", MIN_PART_SIZE, "etag-a")

        with self.assertRaises(ArgumentError):
            Client("localhost:9000").compose_object(
                "bucket", "obj", [ComposeSource("src", "a")] * count,
            )
        self.assertEqual(_methods(mock_server), ["HEAD"] * count)
        self.assertEqual(mock_server.requests, [])

    def test_invalid_sources(self):
        client = Client("localhost:9000")
        self.assertRaises(ArgumentError, client.compose_object,
                          "bucket", "obj", [])
        self.assertRaises(ArgumentError, client.compose_object,
                          "bucket", "obj", ["src/a"])
        self.assertRaises(ArgumentError, ComposeSource, "src", "a",
                          length=0)

    @mock.patch("urllib3.PoolManager")
    def test_copy_object(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        self._head(mock_server, "a", 1024, "etag-a")
        mock_server.mock_add_request(
            MockResponse(
                "PUT", URL, {"x-amz-copy-source": "/src/a"}, 200,
                response_headers=XML_HEADERS,
                content=(
                    f'<CopyObjectResult {NS}><ETag>"copied"</ETag>'
                    '<LastModified>2026-01-02T03:04:05.000Z</LastModified>'
                    '</CopyObjectResult>'
                ),
            ),
        )
        result = Client("localhost:9000").copy_object(
            "bucket", "obj", ComposeSource("src", "a"),
        )
        self.assertEqual(result.etag, "copied")
        self.assertEqual(result.last_modified.year, 2026)
        self.assertIsNone(
            mock_server.calls[-1][2].get("x-amz-copy-source-if-match"),
        )

    @mock.patch("urllib3.PoolManager")
    def test_copy_large_object_stats_once(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        size = MAX_PART_SIZE + 1024 * MB
        self._head(mock_server, "a", size, "etag-a")
        _initiate(mock_server)
        for number, (start, end) in enumerate(
                [(0, MAX_PART_SIZE - 1), (MAX_PART_SIZE, size - 1)], start=1,
        ):
            mock_server.mock_add_request(
                MockResponse(
                    "PUT", f"{URL}?partNumber={number}&uploadId=xyz",
                    {
                        "x-amz-copy-source": "/src/a",
                        "x-amz-copy-source-if-match": "etag-a",
                        "x-amz-copy-source-range": f"bytes={start}-{end}",
                    },
                    200, response_headers=XML_HEADERS,
                    content=COPY_PART.replace("{0}", f"part{number}"),
                ),
            )
        _complete(mock_server)

        result = Client("localhost:9000").copy_object(
            "bucket", "obj", ComposeSource("src", "a"),
        )
        self.assertEqual(result.etag, "final")
        self.assertEqual(
            _methods(mock_server), ["HEAD", "POST", "PUT", "PUT", "POST"],
        )
        self.assertEqual(mock_server.requests, [])


class FakeExecutor:
    """Thread safe executor answering multipart requests."""

    def __init__(self, fail_part=None):
        self.fail_part = fail_part
        self.requests = []
        self._lock = threading.Lock()

    def execute(self, request, region=None):
        with self._lock:
            self.requests.append(request)
        part_number = request.query_params.get("partNumber")
        if part_number:
            number = int(part_number[0])
            if number == self.fail_part:
                raise S3Error("InternalError", "failed", None, None, None)
            return MockResponse("PUT", "", {}, 200,
                                response_headers={"ETag": f'"etag{number}"'})
        if request.method == "POST":
            return MockResponse("POST", "", {}, 200,
                                response_headers=XML_HEADERS,
                                content=COMPLETE)
        return MockResponse(request.method, "", {}, 204)

    def methods(self):
        return [request.method for request in self.requests]


def _parts(count):
    return ((number, b"x" * number, number == count)
            for number in range(1, count + 1))


class UploadSessionTest(TestCase):
    def test_parallel_upload(self):
        executor = FakeExecutor()
        with UploadSession(executor, "bucket", "obj", "xyz") as session:
            session.upload_parts(_parts(7), num_parallel_uploads=3)
            result = session.complete()
        self.assertEqual(result.etag, "final")
        self.assertEqual(
            [part.part_number for part in session.parts], list(range(1, 8)),
        )
        self.assertEqual([part.size for part in session.parts],
                         list(range(1, 8)))
        self.assertNotIn("DELETE", executor.methods())

    def test_parallel_upload_failure_aborts(self):
        executor = FakeExecutor(fail_part=4)
        with self.assertRaises(S3Error):
            with UploadSession(executor, "bucket", "obj", "xyz") as session:
                session.upload_parts(_parts(7), num_parallel_uploads=3)
                session.complete()
        self.assertEqual(executor.methods().count("DELETE"), 1)
        self.assertNotIn("POST", executor.methods())

    def test_parts_must_be_contiguous(self):
        executor = FakeExecutor()
        with self.assertRaises(ArgumentError):
            with UploadSession(executor, "bucket", "obj", "xyz") as session:
                session.upload_part(1, b"a")
                session.upload_part(3, b"c")
                session.complete()
        self.assertEqual(executor.methods(), ["PUT", "PUT", "DELETE"])

    def test_abort_after_complete_is_skipped(self):
        executor = FakeExecutor()
        with UploadSession(executor, "bucket", "obj", "xyz") as session:
            session.upload_part(1, b"a")
            session.complete()
        self.assertEqual(executor.methods(), ["PUT", "POST"])

    @mock.patch("urllib3.PoolManager")
    def test_create_multipart_upload(self, mock_connection):
        mock_server = MockConnection()
        mock_connection.return_value = mock_server
        mock_server.mock_add_request(
            MockResponse("POST", URL + "?uploads=",
                         {"Content-Type": "text/plain"}, 200,
                         response_headers=XML_HEADERS, content=INITIATE),
        )
        _abort(mock_server)
        client = Client("localhost:9000")
        with client.create_multipart_upload(
                "bucket", "obj", content_type="text/plain",
        ) as session:
            self.assertEqual(session.upload_id, "xyz")
        self.assertEqual(_methods(mock_server), ["POST", "DELETE"])
