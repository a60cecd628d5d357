#!/usr/bin/env python3
"""
Message framing for the daemon socket.

Each request and each response travels as one netstring:

    <decimal length>:<payload bytes>,

so "5:hello," carries the five bytes "hello". The payload is opaque here;
codec.py turns it into a Request or Response. One connection carries any
number of frames back to back, and a peer that closes the connection
between two frames ends the session cleanly (EndOfStream).

Frames are capped at 64 MiB, which a full history of images stays under,
and the length prefix is limited to 8 digits so a hostile prefix cannot
make the reader buffer without bound.
"""
import asyncio

# Largest payload accepted in either direction, in bytes (64 MiB).
MAX_PAYLOAD_SIZE: int = 67108864

# Longest accepted length prefix; 8 digits covers MAX_PAYLOAD_SIZE.
MAX_LENGTH_DIGITS: int = 8


class ProtocolError(Exception):
    """
    A frame or payload on the daemon socket is malformed.

    Covers bad length prefixes, oversized frames, truncated frames, a
    missing terminator, and payloads codec.py cannot decode.
    """


class EndOfStream(ProtocolError):
    """
    The peer closed the connection between two frames.

    Subclassing ProtocolError means code waiting for a reply treats it as
    a failure; the server loop catches it first and ends the session.
    """


def encode_netstring(data: bytes) -> bytes:
    """Frame data as <length>:<data>,."""
    return b"%d:%s," % (len(data), data)


def validate_payload_size(data: bytes) -> bool:
    """Return True if data fits in a single frame."""
    return len(data) <= MAX_PAYLOAD_SIZE


async def _read_length(reader: asyncio.StreamReader) -> int:
    digits = bytearray()
    while True:
        byte = await reader.read(1)
        if not byte:
            if digits:
                raise ProtocolError("Connection closed while reading length field")
            raise EndOfStream("Connection closed before next message")
        if byte == b":":
            break
        if not byte.isdigit():
            raise ProtocolError(f"Invalid character in length field: {byte!r}")
        digits += byte
        if len(digits) > MAX_LENGTH_DIGITS:
            raise ProtocolError(
                f"Length field exceeds maximum digits ({MAX_LENGTH_DIGITS})"
            )
    if not digits:
        raise ProtocolError("Empty length field")
    return int(digits)


async def read_netstring(reader: asyncio.StreamReader) -> bytes:
    """
    Read the next frame from reader and return its payload.

    Args:
        reader: Stream positioned at the start of a frame.

    Returns:
        The payload bytes.

    Raises:
        EndOfStream: If the stream ended cleanly before the frame began.
        ProtocolError: If the frame is malformed, too large, or cut short.
    """
    length = await _read_length(reader)
    if length > MAX_PAYLOAD_SIZE:
        raise ProtocolError(f"Payload size {length} exceeds limit {MAX_PAYLOAD_SIZE}")
    try:
        payload = await reader.readexactly(length)
    except asyncio.IncompleteReadError as e:
        raise ProtocolError(
            f"Connection closed after {len(e.partial)} bytes of a {length}-byte payload"
        ) from e
    terminator = await reader.read(1)
    if terminator != b",":
        raise ProtocolError(f"Expected comma terminator, got {terminator!r}")
    return payload


async def write_netstring(writer: asyncio.StreamWriter, data: bytes) -> None:
    """
    Write data as one frame and wait until it has been flushed.

    Raises:
        ProtocolError: If data is larger than MAX_PAYLOAD_SIZE; nothing is
            written in that case.
        ConnectionError: If the peer has gone away.
    """
    if not validate_payload_size(data):
        raise ProtocolError(f"Payload size {len(data)} exceeds limit {MAX_PAYLOAD_SIZE}")
    writer.write(encode_netstring(data))
    await writer.drain()
