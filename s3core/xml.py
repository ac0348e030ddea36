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

"""Namespace aware XML helpers used to encode and decode S3 messages."""

from __future__ import annotations

import io
from typing import Optional, TypeVar
from xml.etree import ElementTree as ET

from typing_extensions import Protocol

S3_NAMESPACE = "http://s3.amazonaws.com/doc/2006-03-01/"


def Element(  # pylint: disable=invalid-name
        tag: str,
        namespace: str = S3_NAMESPACE,
) -> ET.Element:
    """Create root element with S3 namespace."""
    return ET.Element(tag, {"xmlns": namespace} if namespace else {})


def SubElement(  # pylint: disable=invalid-name
        parent: ET.Element, tag: str, text: Optional[str] = None,
) -> ET.Element:
    """Create child element with optional text."""
    element = ET.SubElement(parent, tag)
    if text is not None:
        element.text = text
    return element


def _qualify(element: ET.Element, path: str) -> tuple[str, dict[str, str]]:
    """Qualify each step of path with namespace of element, if any."""
    if not element.tag.startswith("{"):
        return path, {}
    namespace = element.tag[1:element.tag.find("}")]
    return (
        "/".join(f"ns:{token}" for token in path.split("/")),
        {"ns": namespace},
    )


def find(
        element: ET.Element,
        path: str,
        strict: bool = False,
) -> Optional[ET.Element]:
    """Namespace aware ElementTree.Element.find()."""
    path, namespaces = _qualify(element, path)
    child = element.find(path, namespaces=namespaces)
    if strict and child is None:
        raise ValueError(f"XML element <{path}> not found")
    return child


def findall(element: ET.Element, path: str) -> list[ET.Element]:
    """Namespace aware ElementTree.Element.findall()."""
    path, namespaces = _qualify(element, path)
    return element.findall(path, namespaces=namespaces)


def findtext(
        element: ET.Element,
        path: str,
        strict: bool = False,
        default: Optional[str] = None,
) -> Optional[str]:
    """
    Namespace aware ElementTree.Element.findtext(). A missing element
    returns ``default`` or raises ValueError when ``strict`` is set.
    """
    child = find(element, path, strict=strict)
    return default if child is None else (child.text or "")


def localname(element: ET.Element) -> str:
    """Tag name of element without namespace."""
    return element.tag.rsplit("}", 1)[-1]


def getbytes(element: ET.Element) -> bytes:
    """Serialize element to bytes without XML declaration."""
    with io.BytesIO() as data:
        ET.ElementTree(element).write(
            data, encoding=None, xml_declaration=False,
        )
        return data.getvalue()


UnmarshalT = TypeVar("UnmarshalT", bound="UnmarshalProtocol")


class UnmarshalProtocol(Protocol):
    """typing stub for class with `fromxml` method"""

    @classmethod
    def fromxml(cls: type[UnmarshalT], element: ET.Element) -> UnmarshalT:
        """Create object by values from XML element."""


def unmarshal(cls: type[UnmarshalT], data: str | bytes) -> UnmarshalT:
    """Unmarshal given XML data to an object of passed class."""
    return cls.fromxml(ET.fromstring(data))
