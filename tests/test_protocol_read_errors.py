#!/usr/bin/env python3
"""
Unit tests for netstring protocol reading (error cases).

Every malformed frame must raise ProtocolError rather than EndOfStream,
so the server can tell a broken client from one that simply left.
"""
import asyncio

import pytest

from superclip.protocol import (
    MAX_PAYLOAD_SIZE,
    EndOfStream,
    ProtocolError,
    read_netstring,
)


def make_reader(data: bytes) -> asyncio.StreamReader:
    """Create a StreamReader with the given data for testing."""
    reader = asyncio.StreamReader()
    reader.feed_data(data)
    reader.feed_eof()
    return reader


async def read_error(data: bytes) -> ProtocolError:
    """Read data and return the ProtocolError it raises."""
    with pytest.raises(ProtocolError) as exc_info:
        await read_netstring(make_reader(data))
    assert not isinstance(exc_info.value, EndOfStream)
    return exc_info.value


@pytest.mark.asyncio
async def test_invalid_length_character() -> None:
    """Test a non-digit in the length field is rejected."""
    error = await read_error(b"1x:abc,")
    assert "Invalid character" in str(error)


@pytest.mark.asyncio
async def test_empty_length_field() -> None:
    """Test a frame starting with a colon is rejected."""
    error = await read_error(b":abc,")
    assert "Empty length field" in str(error)


@pytest.mark.asyncio
async def test_too_many_length_digits() -> None:
    """Test a length field longer than allowed is rejected."""
    error = await read_error(b"123456789:")
    assert "maximum digits" in str(error)


@pytest.mark.asyncio
async def test_payload_over_limit() -> None:
    """Test a declared length above MAX_PAYLOAD_SIZE is rejected before reading."""
    error = await read_error(f"{MAX_PAYLOAD_SIZE + 1}:".encode("ascii"))
    assert "exceeds limit" in str(error)


@pytest.mark.asyncio
async def test_eof_in_length_field() -> None:
    """Test the stream closing mid-length is an error."""
    error = await read_error(b"12")
    assert "while reading length field" in str(error)


@pytest.mark.asyncio
async def test_eof_in_payload() -> None:
    """Test a truncated payload reports how much arrived."""
    error = await read_error(b"10:abc")
    assert "after 3 bytes" in str(error)


@pytest.mark.asyncio
async def test_missing_comma() -> None:
    """Test a payload not followed by a comma is rejected."""
    error = await read_error(b"3:abc;")
    assert "Expected comma" in str(error)


@pytest.mark.asyncio
async def test_eof_instead_of_comma() -> None:
    """Test the stream closing right before the comma is rejected."""
    error = await read_error(b"3:abc")
    assert "Expected comma" in str(error)
