#!/usr/bin/env python3
"""Clipboard poller.

The poller samples the host clipboard on a fixed interval and records
new content in the shared history. It skips a cycle when the clipboard
is empty or unreadable, when the content has not changed since the last
sample, and when the content is the daemon's own write (echo).

Read failures are transient: they are logged and the next cycle tries
again. The loop exits within one interval of the stop event being set.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from superclip.constants import POLL_INTERVAL
from superclip.errors import ClipboardReadError
from superclip.history import InsertResult
from superclip.item import describe, is_blank, item_hash

if TYPE_CHECKING:
    from superclip.clipboard import ClipboardBackend
    from superclip.echo_state import EchoState
    from superclip.history_shared import SharedHistory

logger = logging.getLogger(__name__)


class ClipboardPoller:
    """Feeds clipboard changes into the shared history.

    Args:
        backend: Host clipboard access.
        history: Shared, lock-guarded history handle.
        echo_state: Records the daemon's own clipboard writes.
        interval: Seconds between samples.
    """

    def __init__(
        self,
        backend: ClipboardBackend,
        history: SharedHistory,
        echo_state: EchoState,
        interval: float = POLL_INTERVAL,
    ) -> None:
        self.backend = backend
        self.history = history
        self.echo_state = echo_state
        self.interval = interval

    async def run(self, stop_event: asyncio.Event) -> None:
        """Poll until stop_event is set."""
        logger.debug("Clipboard poller started, interval %.3fs", self.interval)
        while not stop_event.is_set():
            await self.poll_once()
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
        logger.debug("Clipboard poller stopped")

    async def prime(self) -> None:
        """Take the current clipboard content as the starting sample.

        Whatever was copied before the daemon started is not recorded; only
        later changes are. An unreadable clipboard leaves no baseline.
        """
        try:
            item = await asyncio.to_thread(self.backend.read)
        except Exception as e:
            logger.debug("No clipboard baseline: %s", e)
            return
        if item is None or is_blank(item):
            return
        self.echo_state.record_seen(item_hash(item))
        logger.debug("Clipboard baseline: %s", describe(item))

    async def poll_once(self) -> InsertResult | None:
        """Sample the clipboard once and record it if it is new.

        Returns:
            The history outcome, or None if the cycle was skipped.
        """
        try:
            item = await asyncio.to_thread(self.backend.read)
        except ClipboardReadError as e:
            logger.warning("Clipboard read failed: %s", e)
            return None
        except Exception as e:
            logger.warning("Unexpected clipboard read failure: %s", e)
            return None

        if item is None or is_blank(item):
            logger.debug("Clipboard empty, skipping")
            return None

        current_hash = item_hash(item)
        if self.echo_state.consume_echo(current_hash):
            logger.debug("Skipping echo of our own clipboard write")
            return None
        if self.echo_state.is_unchanged(current_hash):
            return None

        result = self.history.insert_or_promote(item)
        logger.debug("Clipboard %s: %s", result.value, describe(item))
        return result
