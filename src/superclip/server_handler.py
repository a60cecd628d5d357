#!/usr/bin/env python3
"""Command server connection handler.

Each client connection gets its own handle_client coroutine. A connection
carries any number of request/response exchanges and ends when the client
closes it, when it sends something undecodable, or when the daemon stops.
Failures only ever close the connection they happened on.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import TYPE_CHECKING, Optional

from superclip.codec import decode_payload, encode_response
from superclip.dispatch import execute_command
from superclip.messages import Request, Response
from superclip.protocol import EndOfStream, ProtocolError, read_netstring, write_netstring

if TYPE_CHECKING:
    from superclip.dispatch import Publisher
    from superclip.history_shared import SharedHistory

logger = logging.getLogger(__name__)


async def handle_client(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    history: SharedHistory,
    stop_event: asyncio.Event,
    publish: Optional[Publisher] = None,
) -> None:
    """Handle a single client connection.

    Args:
        reader: The asyncio StreamReader for the socket connection.
        writer: The asyncio StreamWriter for the socket connection.
        history: Shared history handle.
        stop_event: Daemon stop flag; set by Stop, and ends the session.
        publish: Writes a promoted item to the system clipboard.
    """
    logger.debug("Client connected")

    try:
        await serve_requests(reader, writer, history, stop_event, publish)
        logger.debug("Client disconnected cleanly")
    except ProtocolError as e:
        logger.warning("Protocol error: %s", e)
    except ConnectionError as e:
        logger.warning("Connection error: %s", e)
    finally:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug("Error closing client connection: %s", e)


async def serve_requests(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    history: SharedHistory,
    stop_event: asyncio.Event,
    publish: Optional[Publisher] = None,
) -> None:
    """Read requests and write responses until EOF or daemon stop.

    Waits on both the next message and the stop event, so an idle client
    cannot hold up shutdown.

    Raises:
        ProtocolError: If the client sent an undecodable message (after the
            explanatory response has been written).
        ConnectionError: If the client went away mid-exchange.
    """
    stop_task = asyncio.create_task(stop_event.wait())
    try:
        while not stop_event.is_set():
            read_task = asyncio.create_task(read_netstring(reader))
            done, _ = await asyncio.wait(
                {read_task, stop_task}, return_when=asyncio.FIRST_COMPLETED
            )
            if read_task not in done:
                read_task.cancel()
                with suppress(asyncio.CancelledError, ProtocolError):
                    await read_task
                return

            try:
                data = read_task.result()
                response = await handle_payload(data, history, stop_event, publish)
            except EndOfStream:
                return
            except ProtocolError as e:
                await _send(writer, Response.from_message(f"Malformed request: {e}"))
                raise

            await _send(writer, response)
    finally:
        stop_task.cancel()
        with suppress(asyncio.CancelledError):
            await stop_task


async def handle_payload(
    data: bytes,
    history: SharedHistory,
    stop_event: asyncio.Event,
    publish: Optional[Publisher] = None,
) -> Response:
    """Decode one request payload and execute it.

    Raises:
        ProtocolError: If data cannot be decoded. The caller answers with
            an explanatory message and drops the connection.
    """
    payload = decode_payload(data)
    if not isinstance(payload, Request):
        return Response.from_message("Wrong payload type: expected a request, got a response")
    logger.debug("Executing %s", type(payload.command).__name__)
    return await execute_command(payload.command, history, stop_event, publish)


async def _send(writer: asyncio.StreamWriter, response: Response) -> None:
    try:
        data = encode_response(response)
        await write_netstring(writer, data)
    except ProtocolError as e:
        logger.error("Cannot send response: %s", e)
        await write_netstring(writer, encode_response(Response.from_message(str(e))))
