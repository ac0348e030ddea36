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
s3core - protocol engine for Amazon S3 compatible object storage

    >>> from s3core import Client
    >>> client = Client(
    ...     "play.min.io",
    ...     access_key="Q3AM3UQ867SPQQA43P2F",
    ...     secret_key="zuf+tfteSlswRu7BJ86wekitnifILbZam1KYY3TG",
    ... )
    >>> for result in client.list_objects("my-bucket", recursive=True):
    ...     print(result.get().object_name)

:license: Apache 2.0, see LICENSE for more details.
"""

__title__ = "s3core"
__author__ = "MinIO, Inc."
__version__ = "1.0.0"
__license__ = "Apache 2.0"

# pylint: disable=wrong-import-position
from .aio import AsyncClient as AsyncClient
from .api import Client as Client
from .error import ArgumentError as ArgumentError
from .error import ErrorKind as ErrorKind
from .error import InvalidResponseError as InvalidResponseError
from .error import S3CoreException as S3CoreException
from .error import S3Error as S3Error
from .error import ServerError as ServerError
from .error import SignatureError as SignatureError
from .pagination import Result as Result
