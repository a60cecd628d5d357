#!/usr/bin/env python3
"""Daemon lifecycle coordination.

The Daemon owns the clipboard history and the stop signal. Startup order:

1. Acquire the single-instance lock (fails fast if another daemon runs).
2. Create the empty history and echo state.
3. Bind the command server socket.
4. Start the clipboard backend and the poller task.

Shutdown is triggered by the Stop command, SIGINT/SIGTERM, or Daemon.stop().
It closes the server, waits for the poller to notice the stop signal,
removes the socket file and releases (and removes) the lock file.

Usage:
    superclip --daemon
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
from typing import TYPE_CHECKING

from superclip.constants import CLIPBOARD_TIMEOUT
from superclip.echo_state import EchoState
from superclip.history import ClipboardHistory
from superclip.history_shared import SharedHistory
from superclip.item import describe, item_hash
from superclip.poller import ClipboardPoller
from superclip.server import CommandServer
from superclip.server_socket import cleanup_socket, print_startup_message
from superclip.singleton import SingletonGuard

if TYPE_CHECKING:
    from superclip.clipboard import ClipboardBackend
    from superclip.config import DaemonConfig
    from superclip.item import ClipboardItem

logger = logging.getLogger(__name__)

# Seconds to wait for open client connections to finish during shutdown.
SERVER_CLOSE_TIMEOUT: float = 2.0

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class Daemon:
    """Clipboard history daemon.

    Args:
        config: Paths, capacity and poll interval.
        backend: Host clipboard access.
        handle_signals: Install SIGINT/SIGTERM handlers while running.
    """

    def __init__(
        self,
        config: DaemonConfig,
        backend: ClipboardBackend,
        handle_signals: bool = True,
    ) -> None:
        self.config = config
        self.backend = backend
        self.handle_signals = handle_signals
        self.guard = SingletonGuard(config.lock_path)
        self.stop_event = asyncio.Event()
        self.ready = asyncio.Event()
        self.history: SharedHistory | None = None
        self.echo_state = EchoState()

    def stop(self) -> None:
        """Request shutdown."""
        self.stop_event.set()

    async def run(self) -> None:
        """Run until stopped.

        Raises:
            StartupError: If another daemon holds the lock or the socket
                cannot be bound. Nothing is left behind in that case.
        """
        self.guard.acquire()
        try:
            await self._run_services()
        finally:
            self.guard.release()

    async def _run_services(self) -> None:
        self.history = SharedHistory(ClipboardHistory(self.config.capacity))
        self.echo_state.clear()
        poller = ClipboardPoller(
            self.backend, self.history, self.echo_state, self.config.poll_interval
        )
        server = CommandServer(
            self.config.socket_path, self.history, self.stop_event, self.publish
        )

        await server.start()
        poller_task: asyncio.Task[None] | None = None
        try:
            self.backend.start()
            await poller.prime()
            self._install_signal_handlers()
            poller_task = asyncio.create_task(poller.run(self.stop_event))
            self.ready.set()
            print_startup_message(self.config.socket_path)
            logger.info("Daemon started, history capacity %d", self.config.capacity)

            stop_task = asyncio.create_task(self.stop_event.wait())
            done, _ = await asyncio.wait(
                {stop_task, poller_task}, return_when=asyncio.FIRST_COMPLETED
            )
            if poller_task in done:
                stop_task.cancel()
                # The poller only returns once stopped; anything else is a crash.
                poller_task.result()
        finally:
            self.stop_event.set()
            self._remove_signal_handlers()
            await self._close_server(server)
            if poller_task is not None:
                await self._join_poller(poller_task)
            cleanup_socket(self.config.socket_path)
            await asyncio.to_thread(self.backend.close)
            self.ready.clear()
            logger.info("Daemon stopped")

    async def publish(self, item: ClipboardItem) -> None:
        """Write a promoted item to the system clipboard.

        The echo record is set before writing so the poller does not record
        the daemon's own write as a new copy.
        """
        self.echo_state.record_written(item_hash(item))
        if not await asyncio.to_thread(self.backend.write, item):
            self.echo_state.clear_written()
            logger.warning("Could not put promoted item on the clipboard: %s", describe(item))

    async def _close_server(self, server: CommandServer) -> None:
        try:
            await asyncio.wait_for(server.close(), timeout=SERVER_CLOSE_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning("Timed out waiting for client connections to close")

    async def _join_poller(self, poller_task: asyncio.Task[None]) -> None:
        # The poller checks the stop signal at least once per interval, plus
        # one clipboard read in flight.
        timeout = self.config.poll_interval + CLIPBOARD_TIMEOUT
        try:
            await asyncio.wait_for(poller_task, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Clipboard poller did not stop within %.1fs", timeout)
        except Exception as e:
            logger.error("Clipboard poller failed: %s", e)

    def _install_signal_handlers(self) -> None:
        if not self.handle_signals:
            return
        loop = asyncio.get_running_loop()
        for sig in SHUTDOWN_SIGNALS:
            loop.add_signal_handler(sig, self.stop_event.set)

    def _remove_signal_handlers(self) -> None:
        if not self.handle_signals:
            return
        loop = asyncio.get_running_loop()
        for sig in SHUTDOWN_SIGNALS:
            loop.remove_signal_handler(sig)


async def run_daemon(config: DaemonConfig, backend: ClipboardBackend) -> None:
    """Run a daemon with signal handling until it is stopped."""
    await Daemon(config, backend).run()


def clean_runtime_files(socket_path: str, lock_path: str) -> list[str]:
    """Remove the socket and lock files left behind by a daemon that died.

    Args:
        socket_path: Path to the Unix domain socket.
        lock_path: Path to the single-instance lock file.

    Returns:
        The paths that were removed.

    Raises:
        StartupError: If a daemon still holds the lock.
    """
    lock_existed = os.path.exists(lock_path)

    # Taking the lock proves no daemon is running; releasing it removes the file.
    guard = SingletonGuard(lock_path)
    guard.acquire()
    removed = []
    try:
        if os.path.lexists(socket_path):
            cleanup_socket(socket_path)
            removed.append(socket_path)
    finally:
        guard.release()
    if lock_existed:
        removed.append(lock_path)
    for path in removed:
        logger.info("Removed %s", path)
    return removed
