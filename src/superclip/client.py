#!/usr/bin/env python3
"""Protocol client for the superclip daemon.

This module sends a single command to a running daemon and returns its
response. Connection attempts are retried with tenacity's exponential
backoff so a client started right after the daemon still gets through.
It is what the CLI uses; any other client speaks the same protocol.
"""

from __future__ import annotations

import asyncio
import logging

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from superclip.client_constants import (
    INITIAL_WAIT,
    MAX_ATTEMPTS,
    MAX_WAIT,
    RESPONSE_TIMEOUT,
    WAIT_MULTIPLIER,
)
from superclip.codec import decode_payload, encode_request
from superclip.messages import Command, Request, Response
from superclip.protocol import ProtocolError, read_netstring, write_netstring

logger = logging.getLogger(__name__)


async def connect_to_daemon(
    socket_path: str,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Connect to the daemon via Unix domain socket.

    Args:
        socket_path: Path to the Unix domain socket.

    Returns:
        Tuple of (StreamReader, StreamWriter) for the connection.

    Raises:
        ConnectionError: If connection fails (socket not found, refused, etc).
    """
    try:
        return await asyncio.open_unix_connection(socket_path)
    except OSError as e:
        raise ConnectionError(f"Failed to connect to {socket_path}: {e}") from e


@retry(
    wait=wait_exponential(
        multiplier=INITIAL_WAIT,
        exp_base=WAIT_MULTIPLIER,
        max=MAX_WAIT,
    ),
    retry=retry_if_exception_type(ConnectionError),
    stop=stop_after_attempt(MAX_ATTEMPTS),
    reraise=True,
)
async def connect_with_retry(
    socket_path: str,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Connect to the daemon, retrying on connection failures.

    Raises:
        ConnectionError: If every attempt failed.
    """
    logger.debug("Connecting to daemon at %s", socket_path)
    try:
        return await connect_to_daemon(socket_path)
    except ConnectionError:
        logger.debug("Connection to %s failed, will retry", socket_path)
        raise


async def exchange(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    command: Command,
) -> Response:
    """Send one request on an open connection and read the response.

    Raises:
        ProtocolError: If the reply is malformed or not a response.
        asyncio.TimeoutError: If the daemon does not answer in time.
    """
    await write_netstring(writer, encode_request(Request(command)))
    data = await asyncio.wait_for(read_netstring(reader), timeout=RESPONSE_TIMEOUT)
    payload = decode_payload(data)
    if not isinstance(payload, Response):
        raise ProtocolError("Expected a response from the daemon, got a request")
    return payload


async def send_command(socket_path: str, command: Command) -> Response:
    """Connect to the daemon, send command and return the response.

    Args:
        socket_path: Path to the Unix domain socket.
        command: The command to execute.

    Returns:
        The daemon's response.

    Raises:
        ConnectionError: If the daemon is unreachable or drops the connection.
        ProtocolError: If the daemon's reply cannot be decoded.
    """
    reader, writer = await connect_with_retry(socket_path)
    try:
        return await exchange(reader, writer, command)
    except asyncio.TimeoutError as e:
        raise ConnectionError(f"No response from daemon at {socket_path}") from e
    finally:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug("Error closing connection: %s", e)
