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


import pickle
from unittest import TestCase
from xml.etree import ElementTree as ET

import urllib3

from s3core.error import (MAX_ERROR_BODY_LENGTH, ArgumentError, ErrorKind,
                          InvalidResponseError, S3Error, ServerError,
                          SignatureError, error_kind)

ERROR_XML = (
    '<Error><Code>NoSuchKey</Code><Message>The specified key does not '
    'exist.</Message><Key>obj</Key><BucketName>bucket</BucketName>'
    '<Resource>/bucket/obj</Resource><RequestId>req</RequestId>'
    '<HostId>host</HostId></Error>'
)


class S3ErrorTest(TestCase):
    def test_fromxml(self):
        error = S3Error.fromxml(ET.fromstring(ERROR_XML))
        self.assertEqual(error.code, 'NoSuchKey')
        self.assertEqual(error.message, 'The specified key does not exist.')
        self.assertEqual(error.bucket_name, 'bucket')
        self.assertEqual(error.object_name, 'obj')
        self.assertEqual(error.resource, '/bucket/obj')
        self.assertEqual(error.request_id, 'req')
        self.assertEqual(error.host_id, 'host')
        self.assertIs(error.kind, ErrorKind.ERROR_RESPONSE)
        self.assertIn('code: NoSuchKey', str(error))

    def test_copy(self):
        error = S3Error.fromxml(ET.fromstring(ERROR_XML))
        copied = error.copy('AccessDenied', 'Access denied')
        self.assertEqual(copied.code, 'AccessDenied')
        self.assertEqual(copied.message, 'Access denied')
        self.assertEqual(copied.request_id, 'req')
        self.assertEqual(copied.object_name, 'obj')
        self.assertEqual(error.code, 'NoSuchKey')

    def test_pickle(self):
        error = S3Error('Code', 'message', '/bucket', 'req', 'host',
                        bucket_name='bucket')
        restored = pickle.loads(pickle.dumps(error))
        self.assertEqual(repr(restored), repr(error))
        self.assertEqual(str(restored), str(error))
        self.assertIsNone(restored.response)


class InvalidResponseErrorTest(TestCase):
    def test_body_truncated(self):
        error = InvalidResponseError(502, 'text/html', 'x' * 5000)
        self.assertEqual(len(error.body), MAX_ERROR_BODY_LENGTH)
        self.assertEqual(error.code, 502)
        self.assertEqual(error.content_type, 'text/html')
        self.assertIs(error.kind, ErrorKind.INVALID_RESPONSE)

    def test_empty_body(self):
        error = InvalidResponseError(500, None, None)
        self.assertIsNone(error.body)
        self.assertIn('Response code: 500', str(error))

    def test_pickle(self):
        error = InvalidResponseError(400, 'text/plain', 'bad request')
        restored = pickle.loads(pickle.dumps(error))
        self.assertEqual(restored.code, 400)
        self.assertEqual(restored.body, 'bad request')
        self.assertEqual(str(restored), str(error))


class ServerErrorTest(TestCase):
    def test_pickle(self):
        error = ServerError('server failed', 503)
        restored = pickle.loads(pickle.dumps(error))
        self.assertEqual(restored.status_code, 503)
        self.assertEqual(str(restored), 'server failed')
        self.assertIs(restored.kind, ErrorKind.SERVER)


class ErrorKindTest(TestCase):
    def test_library_errors(self):
        self.assertIs(error_kind(ArgumentError('bad')), ErrorKind.ARGUMENT)
        self.assertIs(error_kind(SignatureError('md5')), ErrorKind.SIGNATURE)
        self.assertIs(
            error_kind(ServerError('failed', 500)), ErrorKind.SERVER,
        )

    def test_network_errors(self):
        self.assertIs(
            error_kind(urllib3.exceptions.ProtocolError('reset')),
            ErrorKind.NETWORK,
        )
        self.assertIs(
            error_kind(urllib3.exceptions.MaxRetryError(None, '/', None)),
            ErrorKind.NETWORK,
        )
        self.assertIs(error_kind(ConnectionResetError()), ErrorKind.NETWORK)

    def test_unknown(self):
        self.assertIsNone(error_kind(KeyError('key')))

    def test_argument_error_is_value_error(self):
        self.assertTrue(issubclass(ArgumentError, ValueError))
