#!/usr/bin/env python3
"""Command server for superclip.

The command server listens on a Unix domain socket and lets protocol
clients (the GUI, the CLI, scripts) inspect and edit the clipboard history.
Every connection is handled by its own coroutine; all of them reach the
history through the one shared, lock-guarded handle.

On startup the socket path is checked: an active server there is a fatal
error, a stale socket file is removed. The socket is only accessible to
the current user.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import TYPE_CHECKING, Optional

from superclip.errors import StartupError
from superclip.server_handler import handle_client
from superclip.server_socket import check_socket_state

if TYPE_CHECKING:
    from superclip.dispatch import Publisher
    from superclip.history_shared import SharedHistory

logger = logging.getLogger(__name__)


class CommandServer:
    """Unix socket server exposing the shared history.

    Args:
        socket_path: Path to listen on.
        history: Shared history handle.
        stop_event: Daemon stop flag, set by the Stop command.
        publish: Writes a promoted item to the system clipboard.
    """

    def __init__(
        self,
        socket_path: str,
        history: SharedHistory,
        stop_event: asyncio.Event,
        publish: Optional[Publisher] = None,
    ) -> None:
        self.socket_path = socket_path
        self.history = history
        self.stop_event = stop_event
        self.publish = publish
        self._server: asyncio.AbstractServer | None = None

    async def start(self) -> None:
        """Bind the socket and start accepting connections.

        Raises:
            StartupError: If another server is listening on the path or the
                socket cannot be bound.
        """
        check_socket_state(self.socket_path)
        try:
            self._server = await asyncio.start_unix_server(
                self._on_connection, path=self.socket_path
            )
            os.chmod(self.socket_path, 0o600)
        except OSError as e:
            raise StartupError(f"Cannot bind socket {self.socket_path}: {e}") from e
        logger.debug("Command server listening on %s", self.socket_path)

    async def close(self) -> None:
        """Stop accepting connections and wait for handlers to finish."""
        if self._server is None:
            return
        self._server.close()
        await self._server.wait_closed()
        self._server = None
        logger.debug("Command server closed")

    @property
    def is_serving(self) -> bool:
        return self._server is not None and self._server.is_serving()

    async def _on_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        await handle_client(reader, writer, self.history, self.stop_event, self.publish)
