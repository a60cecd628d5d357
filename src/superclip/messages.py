#!/usr/bin/env python3
"""Request and response types exchanged with the daemon.

A Request wraps exactly one command. A Response carries a history
snapshot, a human-readable message, or both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from superclip.item import ClipboardItem


@dataclass(frozen=True)
class Snapshot:
    """Return the current history without changing it."""


@dataclass(frozen=True)
class Promote:
    """Move the entry at index to the front and put it on the clipboard."""

    index: int


@dataclass(frozen=True)
class Delete:
    """Remove the entry at index."""

    index: int


@dataclass(frozen=True)
class DeleteThis:
    """Remove the entry equal to item."""

    item: ClipboardItem


@dataclass(frozen=True)
class Clear:
    """Remove every entry."""


@dataclass(frozen=True)
class Stop:
    """Shut the daemon down."""


Command = Union[Snapshot, Promote, Delete, DeleteThis, Clear, Stop]


@dataclass(frozen=True)
class Request:
    command: Command


@dataclass(frozen=True)
class Response:
    """Reply to a request.

    Attributes:
        snapshot: History entries, most recent first, or None.
        message: Explanation for errors and acknowledgements, or None.
    """

    snapshot: Optional[tuple[ClipboardItem, ...]] = None
    message: Optional[str] = None

    def __post_init__(self) -> None:
        if self.snapshot is None and self.message is None:
            raise ValueError("Response needs a snapshot, a message, or both")

    @classmethod
    def from_snapshot(cls, snapshot: tuple[ClipboardItem, ...]) -> Response:
        return cls(snapshot=tuple(snapshot))

    @classmethod
    def from_message(cls, message: str) -> Response:
        return cls(message=message)
