#!/usr/bin/env python3
"""Tests for clipboard item types, hashing and summaries."""
import struct

from superclip.item import (
    PNG_SIGNATURE,
    ImageItem,
    TextItem,
    describe,
    is_blank,
    item_hash,
    png_dimensions,
)


def make_png_header(width: int, height: int) -> bytes:
    """Build the first bytes of a PNG up to and including the IHDR size."""
    return PNG_SIGNATURE + struct.pack(">I", 13) + b"IHDR" + struct.pack(">II", width, height)


class TestItemEquality:
    """Items compare by value."""

    def test_equal_text_items(self) -> None:
        """Test text items with the same text are equal and hash equally."""
        assert TextItem("hello") == TextItem("hello")
        assert hash(TextItem("hello")) == hash(TextItem("hello"))

    def test_images_differ_by_dimensions(self) -> None:
        """Test images with the same bytes but different size are distinct."""
        assert ImageItem(b"\x00", 1, 2) != ImageItem(b"\x00", 2, 1)

    def test_text_never_equals_image(self) -> None:
        """Test a text item is never equal to an image item."""
        assert TextItem("x") != ImageItem(b"x", 1, 1)


class TestItemHash:
    """Tests for item_hash."""

    def test_returns_hex_digest(self) -> None:
        """Test item_hash returns a 64-character SHA-256 hex string."""
        digest = item_hash(TextItem("hello"))
        assert len(digest) == 64
        int(digest, 16)

    def test_same_content_same_hash(self) -> None:
        """Test equal items produce equal hashes."""
        assert item_hash(TextItem("abc")) == item_hash(TextItem("abc"))

    def test_variant_is_part_of_hash(self) -> None:
        """Test text and image with the same bytes hash differently."""
        assert item_hash(TextItem("abc")) != item_hash(ImageItem(b"abc", 1, 1))

    def test_image_metadata_is_part_of_hash(self) -> None:
        """Test the image dimensions change the hash."""
        assert item_hash(ImageItem(b"abc", 1, 1)) != item_hash(ImageItem(b"abc", 1, 2))


class TestDescribe:
    """Tests for describe."""

    def test_short_text_unchanged(self) -> None:
        """Test short text is returned as is."""
        assert describe(TextItem("hello")) == "hello"

    def test_newlines_escaped(self) -> None:
        """Test newlines are rendered so the summary stays on one line."""
        assert describe(TextItem("a\nb")) == "a\\nb"

    def test_long_text_truncated(self) -> None:
        """Test text longer than the limit is cut and marked."""
        summary = describe(TextItem("x" * 100), limit=10)
        assert summary == "xxxxxxx..."
        assert len(summary) == 10

    def test_image_summary(self) -> None:
        """Test images are summarized by their dimensions."""
        assert describe(ImageItem(b"", 640, 480)) == "[Image: 640x480]"


class TestIsBlank:
    """Tests for is_blank."""

    def test_empty_and_whitespace_text_is_blank(self) -> None:
        """Test empty and whitespace-only text counts as blank."""
        assert is_blank(TextItem(""))
        assert is_blank(TextItem(" \n\t"))

    def test_text_with_content_is_not_blank(self) -> None:
        """Test text with visible characters is not blank."""
        assert not is_blank(TextItem(" a "))

    def test_image_is_never_blank(self) -> None:
        """Test an image is not blank even when its data is empty."""
        assert not is_blank(ImageItem(b"", 0, 0))


class TestPngDimensions:
    """Tests for png_dimensions."""

    def test_reads_ihdr(self) -> None:
        """Test width and height are read from the IHDR chunk."""
        assert png_dimensions(make_png_header(800, 600) + b"rest") == (800, 600)

    def test_not_png(self) -> None:
        """Test non-PNG data returns None."""
        assert png_dimensions(b"GIF89a" + b"\x00" * 30) is None

    def test_truncated(self) -> None:
        """Test data shorter than the header returns None."""
        assert png_dimensions(PNG_SIGNATURE) is None

    def test_missing_ihdr(self) -> None:
        """Test a PNG signature not followed by IHDR returns None."""
        data = PNG_SIGNATURE + struct.pack(">I", 13) + b"tEXt" + b"\x00" * 8
        assert png_dimensions(data) is None
