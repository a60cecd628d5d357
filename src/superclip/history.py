#!/usr/bin/env python3
"""Bounded, deduplicated clipboard history.

ClipboardHistory is a plain data structure with no I/O and no locking.
Index 0 is the most recently used entry. The history never holds more
than ``capacity`` entries and never holds two equal items; the order only
changes through insert, promote and delete.

See history_shared.py for the lock-guarded handle shared by the poller
and the command server.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Iterator

from superclip.constants import DEFAULT_CAPACITY
from superclip.errors import IndexOutOfBoundsError, ItemNotFoundError
from superclip.item import ClipboardItem, ImageItem, describe


class InsertResult(enum.Enum):
    """Outcome of insert_or_promote."""

    INSERTED = "inserted"
    PROMOTED = "promoted"


@dataclass(frozen=True)
class HistoryEntry:
    """A clipboard item together with its position in the history."""

    index: int
    item: ClipboardItem


class ClipboardHistory:
    """Fixed-capacity, most-recent-first clipboard history."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._items: list[ClipboardItem] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ClipboardItem]:
        return iter(tuple(self._items))

    def insert_or_promote(self, item: ClipboardItem) -> InsertResult:
        """Add an item to the front of the history.

        An item equal to an existing entry is promoted instead of being
        duplicated. A new item that pushes the history past capacity evicts
        the oldest entry.

        Args:
            item: The clipboard item to record.

        Returns:
            InsertResult.PROMOTED if an equal entry existed, otherwise
            InsertResult.INSERTED.
        """
        try:
            position = self._items.index(item)
        except ValueError:
            self._items.insert(0, item)
            if len(self._items) > self._capacity:
                self._items.pop()
            return InsertResult.INSERTED
        self._items.insert(0, self._items.pop(position))
        return InsertResult.PROMOTED

    def promote(self, index: int) -> ClipboardItem:
        """Move the entry at index to the front and return it.

        Raises:
            IndexOutOfBoundsError: If index does not refer to an entry.
        """
        self._check_index(index)
        item = self._items.pop(index)
        self._items.insert(0, item)
        return item

    def delete(self, index: int) -> ClipboardItem:
        """Remove the entry at index and return it.

        Raises:
            IndexOutOfBoundsError: If index does not refer to an entry.
        """
        self._check_index(index)
        return self._items.pop(index)

    def delete_value(self, item: ClipboardItem) -> None:
        """Remove the entry equal to item.

        Raises:
            ItemNotFoundError: If no entry equals item.
        """
        try:
            self._items.remove(item)
        except ValueError:
            raise ItemNotFoundError(f"Item not in history: {describe(item)}") from None

    def clear(self) -> None:
        self._items.clear()

    def snapshot(self) -> tuple[ClipboardItem, ...]:
        """Return a read-only copy of the entries, most recent first."""
        return tuple(self._items)

    def entries(self) -> list[HistoryEntry]:
        return [HistoryEntry(index, item) for index, item in enumerate(self._items)]

    def _check_index(self, index: int) -> None:
        # Negative indices are rejected rather than counted from the back.
        if not 0 <= index < len(self._items):
            raise IndexOutOfBoundsError(index, len(self._items))


def format_table(items: Iterable[ClipboardItem]) -> str:
    """Render a snapshot as a POS | ITEM table."""
    lines = ["POS | ITEM", "----+" + "-" * 40]
    for index, item in enumerate(items):
        if isinstance(item, ImageItem):
            summary = f"Image ({item.width}, {item.height})"
        else:
            summary = describe(item)
        lines.append(f"{index:>3} | {summary}")
    return "\n".join(lines)
