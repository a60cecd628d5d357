#!/usr/bin/env python3
"""
MessagePack encoding of the request/response envelope.

Every message is a MessagePack array whose first element names the
envelope kind:

    ["request", <command>]
    ["response", <snapshot or nil>, <message or nil>]

Commands are arrays tagged by name: ["snapshot"], ["promote", i],
["delete", i], ["delete_this", <item>], ["clear"], ["stop"]. Items are
["text", str] or ["image", mime_type, width, height, bytes].

Encoding only uses arrays, so the same value always produces the same
bytes. The encoded payload is framed with protocol.encode_netstring.
"""

from __future__ import annotations

from typing import Any, Union

import msgpack

from superclip.item import ClipboardItem, ImageItem, TextItem
from superclip.messages import (
    Clear,
    Command,
    Delete,
    DeleteThis,
    Promote,
    Request,
    Response,
    Snapshot,
    Stop,
)
from superclip.protocol import ProtocolError

REQUEST_TAG = "request"
RESPONSE_TAG = "response"

Payload = Union[Request, Response]


def encode_item(item: ClipboardItem) -> list[Any]:
    if isinstance(item, TextItem):
        return ["text", item.text]
    return ["image", item.mime_type, item.width, item.height, item.data]


def decode_item(value: Any) -> ClipboardItem:
    """Build a ClipboardItem from its unpacked array form.

    Raises:
        ProtocolError: If value is not a well-formed item.
    """
    if not isinstance(value, list) or not value:
        raise ProtocolError(f"Malformed clipboard item: {value!r}")
    kind = value[0]
    if kind == "text" and len(value) == 2 and isinstance(value[1], str):
        return TextItem(value[1])
    if kind == "image" and len(value) == 5:
        _, mime_type, width, height, data = value
        if (
            isinstance(mime_type, str)
            and _is_int(width)
            and _is_int(height)
            and isinstance(data, bytes)
        ):
            return ImageItem(data=data, width=width, height=height, mime_type=mime_type)
    raise ProtocolError(f"Malformed clipboard item of kind {kind!r}")


def encode_command(command: Command) -> list[Any]:
    if isinstance(command, Snapshot):
        return ["snapshot"]
    if isinstance(command, Promote):
        return ["promote", command.index]
    if isinstance(command, Delete):
        return ["delete", command.index]
    if isinstance(command, DeleteThis):
        return ["delete_this", encode_item(command.item)]
    if isinstance(command, Clear):
        return ["clear"]
    if isinstance(command, Stop):
        return ["stop"]
    raise TypeError(f"Unknown command type: {type(command).__name__}")


def decode_command(value: Any) -> Command:
    """Build a Command from its unpacked array form.

    Raises:
        ProtocolError: If value is not a known, well-formed command.
    """
    if not isinstance(value, list) or not value or not isinstance(value[0], str):
        raise ProtocolError(f"Malformed command: {value!r}")
    name, args = value[0], value[1:]
    if name in ("snapshot", "clear", "stop") and not args:
        return {"snapshot": Snapshot, "clear": Clear, "stop": Stop}[name]()
    if name in ("promote", "delete") and len(args) == 1 and _is_int(args[0]):
        return Promote(args[0]) if name == "promote" else Delete(args[0])
    if name == "delete_this" and len(args) == 1:
        return DeleteThis(decode_item(args[0]))
    raise ProtocolError(f"Unknown or malformed command {name!r}")


def encode_request(request: Request) -> bytes:
    return _pack([REQUEST_TAG, encode_command(request.command)])


def encode_response(response: Response) -> bytes:
    snapshot = None
    if response.snapshot is not None:
        snapshot = [encode_item(item) for item in response.snapshot]
    return _pack([RESPONSE_TAG, snapshot, response.message])


def decode_payload(data: bytes) -> Payload:
    """
    Decode one framed payload into a Request or a Response.

    Args:
        data: Payload bytes as returned by protocol.read_netstring.

    Returns:
        The decoded Request or Response.

    Raises:
        ProtocolError: If data is not valid MessagePack or not a known
            envelope.
    """
    try:
        value = msgpack.unpackb(data, raw=False)
    except (ValueError, msgpack.exceptions.UnpackException) as e:
        raise ProtocolError(f"Undecodable payload: {e}") from e

    if not isinstance(value, list) or not value:
        raise ProtocolError("Payload is not an envelope array")
    tag = value[0]
    if tag == REQUEST_TAG and len(value) == 2:
        return Request(decode_command(value[1]))
    if tag == RESPONSE_TAG and len(value) == 3:
        return _decode_response(value[1], value[2])
    raise ProtocolError(f"Unknown envelope {tag!r}")


def _decode_response(snapshot: Any, message: Any) -> Response:
    if snapshot is not None and not isinstance(snapshot, list):
        raise ProtocolError("Response snapshot is not an array")
    if message is not None and not isinstance(message, str):
        raise ProtocolError("Response message is not a string")
    items = None if snapshot is None else tuple(decode_item(entry) for entry in snapshot)
    try:
        return Response(snapshot=items, message=message)
    except ValueError as e:
        raise ProtocolError(str(e)) from e


def _pack(value: list[Any]) -> bytes:
    return msgpack.packb(value, use_bin_type=True)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
