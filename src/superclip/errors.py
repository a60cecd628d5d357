#!/usr/bin/env python3
"""Exception hierarchy for superclip.

Protocol-level framing errors live in protocol.py alongside the netstring
reader that raises them; everything else is defined here.
"""


class SuperclipError(Exception):
    """Base class for superclip errors."""


class StartupError(SuperclipError):
    """The daemon cannot start (already running, socket cannot be bound)."""


class ClipboardReadError(SuperclipError):
    """Transient failure reading the host clipboard."""


class HistoryError(SuperclipError):
    """Base class for rejected history operations."""


class IndexOutOfBoundsError(HistoryError, IndexError):
    """A history index does not refer to an existing entry."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"Index {index} out of bounds for history of length {length}")
        self.index = index
        self.length = length


class ItemNotFoundError(HistoryError, LookupError):
    """No history entry is equal to the requested item."""
