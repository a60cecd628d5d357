#!/usr/bin/env python3
"""Lock-guarded handle on the clipboard history.

The daemon owns one ClipboardHistory and hands a SharedHistory wrapping it
to both the poller and the command server. Every method holds the lock for
exactly one history operation and never across clipboard or socket I/O.

State-changing methods return the snapshot taken under the same lock
acquisition, so the caller reports the state its own operation produced.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from superclip.history import ClipboardHistory, InsertResult
    from superclip.item import ClipboardItem

Snapshot = tuple["ClipboardItem", ...]


class SharedHistory:
    """Serializes access to a ClipboardHistory."""

    def __init__(self, history: ClipboardHistory) -> None:
        self._history = history
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._history.capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)

    def insert_or_promote(self, item: ClipboardItem) -> InsertResult:
        with self._lock:
            return self._history.insert_or_promote(item)

    def promote(self, index: int) -> tuple[ClipboardItem, Snapshot]:
        """Promote the entry at index.

        Returns:
            The promoted item and the resulting snapshot.

        Raises:
            IndexOutOfBoundsError: If index is out of range.
        """
        with self._lock:
            item = self._history.promote(index)
            return item, self._history.snapshot()

    def delete(self, index: int) -> Snapshot:
        with self._lock:
            self._history.delete(index)
            return self._history.snapshot()

    def delete_value(self, item: ClipboardItem) -> Snapshot:
        with self._lock:
            self._history.delete_value(item)
            return self._history.snapshot()

    def clear(self) -> Snapshot:
        with self._lock:
            self._history.clear()
            return self._history.snapshot()

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._history.snapshot()
