#!/usr/bin/env python3
"""
Clipboard item types and content hashing.

A clipboard item is either text or an image. Both variants are frozen
dataclasses so equality is by value: two items are the same entry in the
history when their content (and, for images, their metadata) match, no
matter when or how often they were copied.

This module provides:
- TextItem / ImageItem: the two variants of ClipboardItem
- item_hash(): SHA-256 hex digest of an item, used for echo tracking
- describe(): one-line human-readable summary of an item
- png_dimensions(): width and height from a PNG header
"""
from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass
from typing import Union

PNG_MIME_TYPE: str = "image/png"

# 8-byte PNG signature followed by the IHDR chunk length and type.
PNG_SIGNATURE: bytes = b"\x89PNG\r\n\x1a\n"


@dataclass(frozen=True)
class TextItem:
    """Plain text clipboard content."""

    text: str


@dataclass(frozen=True)
class ImageItem:
    """
    Image clipboard content.

    Attributes:
        data: Encoded image bytes as served by the clipboard owner.
        width: Image width in pixels.
        height: Image height in pixels.
        mime_type: Format of data, image/png unless the owner offered another.
    """

    data: bytes
    width: int
    height: int
    mime_type: str = PNG_MIME_TYPE


ClipboardItem = Union[TextItem, ImageItem]


def item_hash(item: ClipboardItem) -> str:
    """
    Compute SHA-256 hash of a clipboard item.

    The variant is mixed into the digest so a text item can never collide
    with an image whose bytes happen to spell the same string.

    Args:
        item: Clipboard item to hash.

    Returns:
        Hexadecimal string representation of the SHA-256 digest.
    """
    digest = hashlib.sha256()
    if isinstance(item, TextItem):
        digest.update(b"text\x00")
        digest.update(item.text.encode("utf-8"))
    else:
        digest.update(b"image\x00")
        digest.update(f"{item.mime_type}\x00{item.width}x{item.height}\x00".encode("ascii"))
        digest.update(item.data)
    return digest.hexdigest()


def describe(item: ClipboardItem, limit: int = 60) -> str:
    """Return a single-line summary of an item for logs and tables."""
    if isinstance(item, ImageItem):
        return f"[Image: {item.width}x{item.height}]"
    text = item.text.replace("\n", "\\n")
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def is_blank(item: ClipboardItem) -> bool:
    """Return True for text that is empty or whitespace only."""
    return isinstance(item, TextItem) and not item.text.strip()


def png_dimensions(data: bytes) -> tuple[int, int] | None:
    """
    Read width and height from the IHDR chunk of a PNG image.

    Args:
        data: Raw PNG bytes.

    Returns:
        (width, height), or None if data is not a PNG.
    """
    if len(data) < 24 or not data.startswith(PNG_SIGNATURE):
        return None
    if data[12:16] != b"IHDR":
        return None
    width, height = struct.unpack(">II", data[16:24])
    return width, height
