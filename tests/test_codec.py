#!/usr/bin/env python3
"""Tests for the MessagePack request/response envelope."""
import msgpack
import pytest

from superclip.codec import (
    decode_command,
    decode_item,
    decode_payload,
    encode_command,
    encode_item,
    encode_request,
    encode_response,
)
from superclip.item import ImageItem, TextItem
from superclip.messages import (
    Clear,
    Delete,
    DeleteThis,
    Promote,
    Request,
    Response,
    Snapshot,
    Stop,
)
from superclip.protocol import ProtocolError

IMAGE = ImageItem(b"\x89PNG\r\n\x1a\n\x00\x01", 3, 2)


@pytest.mark.parametrize(
    "command",
    [
        Snapshot(),
        Promote(3),
        Delete(0),
        DeleteThis(TextItem("gone")),
        DeleteThis(IMAGE),
        Clear(),
        Stop(),
    ],
)
def test_request_round_trip(command) -> None:
    """Test every command survives encoding and decoding."""
    assert decode_payload(encode_request(Request(command))) == Request(command)


def test_response_with_snapshot_and_message() -> None:
    """Test a response carrying both fields decodes intact."""
    response = Response(snapshot=(TextItem("a"), IMAGE), message="note")
    assert decode_payload(encode_response(response)) == response


def test_response_with_empty_snapshot() -> None:
    """Test an empty snapshot is kept distinct from a missing one."""
    decoded = decode_payload(encode_response(Response.from_snapshot(())))
    assert decoded.snapshot == ()
    assert decoded.message is None


def test_message_only_response() -> None:
    """Test a message-only response decodes with no snapshot."""
    decoded = decode_payload(encode_response(Response.from_message("hi")))
    assert decoded == Response(message="hi")


def test_wire_layout() -> None:
    """Test the envelope is a plain tagged array."""
    assert msgpack.unpackb(encode_request(Request(Promote(2))), raw=False) == [
        "request",
        ["promote", 2],
    ]
    assert msgpack.unpackb(encode_response(Response(message="m")), raw=False) == [
        "response",
        None,
        "m",
    ]


def test_encoding_is_deterministic() -> None:
    """Test equal values always encode to identical bytes."""
    first = encode_response(Response.from_snapshot((TextItem("x"), IMAGE)))
    second = encode_response(Response.from_snapshot((TextItem("x"), IMAGE)))
    assert first == second


def test_image_bytes_travel_as_binary() -> None:
    """Test image data is packed as bin, not str."""
    assert encode_item(IMAGE) == ["image", "image/png", 3, 2, IMAGE.data]
    assert decode_item(["image", "image/png", 3, 2, IMAGE.data]) == IMAGE


def test_encode_unknown_command_type() -> None:
    """Test encoding something that is not a command fails loudly."""
    with pytest.raises(TypeError):
        encode_command(object())


class TestMalformedInput:
    """Malformed payloads raise ProtocolError."""

    def test_garbage_bytes(self) -> None:
        """Test bytes that are not MessagePack are rejected."""
        with pytest.raises(ProtocolError, match="Undecodable payload"):
            decode_payload(b"\xc1")

    def test_truncated_payload(self) -> None:
        """Test a truncated MessagePack value is rejected."""
        data = encode_request(Request(DeleteThis(TextItem("abcdef"))))
        with pytest.raises(ProtocolError):
            decode_payload(data[:-2])

    def test_not_an_array(self) -> None:
        """Test a payload that is not an envelope array is rejected."""
        with pytest.raises(ProtocolError, match="envelope"):
            decode_payload(msgpack.packb({"request": "snapshot"}))

    def test_unknown_envelope(self) -> None:
        """Test an unknown envelope tag is rejected."""
        with pytest.raises(ProtocolError, match="Unknown envelope"):
            decode_payload(msgpack.packb(["notify", "x"]))

    def test_response_without_content(self) -> None:
        """Test a response with neither snapshot nor message is rejected."""
        with pytest.raises(ProtocolError):
            decode_payload(msgpack.packb(["response", None, None]))

    def test_response_with_bad_message(self) -> None:
        """Test a response message that is not a string is rejected."""
        with pytest.raises(ProtocolError, match="not a string"):
            decode_payload(msgpack.packb(["response", None, 5]))

    @pytest.mark.parametrize(
        "value",
        [
            [],
            ["explode"],
            ["promote"],
            ["promote", "1"],
            ["promote", True],
            ["delete", 1, 2],
            ["snapshot", 1],
            ["delete_this"],
            "stop",
        ],
    )
    def test_malformed_commands(self, value) -> None:
        """Test unknown commands and wrong arguments are rejected."""
        with pytest.raises(ProtocolError):
            decode_command(value)

    @pytest.mark.parametrize(
        "value",
        [
            [],
            ["text"],
            ["text", b"bytes"],
            ["image", "image/png", 1, 1],
            ["image", "image/png", "1", 1, b""],
            ["image", "image/png", 1, 1, "not bytes"],
            ["sound", b""],
            None,
        ],
    )
    def test_malformed_items(self, value) -> None:
        """Test malformed items are rejected."""
        with pytest.raises(ProtocolError):
            decode_item(value)
