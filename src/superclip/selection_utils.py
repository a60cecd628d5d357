#!/usr/bin/env python3
"""X11 selection utility functions.

This module provides the shared event-waiting helper used while reading
a selection. Reads run on a worker thread, so waiting blocks on the
display file descriptor with a deadline instead of spinning.
"""

from __future__ import annotations

import select
import time
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.rq import Event


def wait_for_event(
    display: "Display",
    matches: Callable[["Event"], bool],
    on_other: Callable[["Event"], None],
    deadline: float,
) -> "Event | None":
    """Read events from the display until one satisfies matches.

    Events that do not match are handed to on_other as they arrive, so a
    SelectionRequest for content we own is still answered while we wait
    for another client's data.

    Args:
        display: The X11 display connection.
        matches: Predicate selecting the event to wait for.
        on_other: Callback for every other event read during the wait.
        deadline: time.monotonic() value after which to give up.

    Returns:
        The matching event, or None if the deadline passed first.
    """
    while True:
        while display.pending_events() > 0:
            event = display.next_event()
            if matches(event):
                return event
            on_other(event)
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return None
        select.select([display.fileno()], [], [], remaining)
