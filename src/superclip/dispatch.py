#!/usr/bin/env python3
"""Command execution against the shared history.

execute_command applies one decoded command and builds the response:
every successful state-changing command returns the fresh snapshot so
clients stay synchronized without a second round trip, and rejected
commands return a message with the history unchanged.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from superclip.constants import STOP_ACKNOWLEDGEMENT
from superclip.errors import IndexOutOfBoundsError, ItemNotFoundError
from superclip.messages import (
    Clear,
    Delete,
    DeleteThis,
    Promote,
    Response,
    Snapshot,
    Stop,
)

if TYPE_CHECKING:
    from superclip.history_shared import SharedHistory
    from superclip.item import ClipboardItem
    from superclip.messages import Command

logger = logging.getLogger(__name__)

Publisher = Callable[["ClipboardItem"], Awaitable[None]]


async def execute_command(
    command: Command,
    history: SharedHistory,
    stop_event: asyncio.Event,
    publish: Optional[Publisher] = None,
) -> Response:
    """Apply command to history and return the response to send.

    Args:
        command: The decoded command.
        history: Shared history handle.
        stop_event: Set by the Stop command.
        publish: Called with the promoted item after a successful Promote,
            outside the history lock, to put it on the system clipboard.

    Returns:
        The response for the client.
    """
    if isinstance(command, Snapshot):
        return Response.from_snapshot(history.snapshot())

    if isinstance(command, Promote):
        try:
            item, snapshot = history.promote(command.index)
        except IndexOutOfBoundsError as e:
            return Response.from_message(f"Could not promote item: {e}")
        if publish is not None:
            await publish(item)
        return Response.from_snapshot(snapshot)

    if isinstance(command, Delete):
        try:
            snapshot = history.delete(command.index)
        except IndexOutOfBoundsError as e:
            return Response.from_message(f"Could not delete item: {e}")
        return Response.from_snapshot(snapshot)

    if isinstance(command, DeleteThis):
        try:
            snapshot = history.delete_value(command.item)
        except ItemNotFoundError as e:
            return Response.from_message(f"Could not delete item: {e}")
        return Response.from_snapshot(snapshot)

    if isinstance(command, Clear):
        return Response.from_snapshot(history.clear())

    if isinstance(command, Stop):
        logger.debug("Stop requested by client")
        stop_event.set()
        return Response.from_message(STOP_ACKNOWLEDGEMENT)

    raise TypeError(f"Unknown command type: {type(command).__name__}")
