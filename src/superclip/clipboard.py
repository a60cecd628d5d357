"""Host clipboard access.

The daemon consumes two capabilities from the platform: read the current
clipboard content and write content to the clipboard. ClipboardBackend is
the interface the poller and command server depend on; clipboard_x11.py
implements it for X11 using python-xlib.

The X11 plumbing shared by that backend also lives here: opening the
display named by $DISPLAY and creating the window the daemon reads and
owns selections through.
"""

from __future__ import annotations

import abc
import os
from typing import TYPE_CHECKING

from Xlib import X

from superclip.errors import StartupError

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.xobject.drawable import Window

    from superclip.item import ClipboardItem


class ClipboardBackend(abc.ABC):
    """Read and write access to the system clipboard.

    Both methods block; async callers run them via asyncio.to_thread.
    """

    @abc.abstractmethod
    def read(self) -> ClipboardItem | None:
        """Return the current clipboard content.

        Returns:
            The current item, or None if the clipboard is empty.

        Raises:
            ClipboardReadError: On a transient failure or unsupported format.
        """

    @abc.abstractmethod
    def write(self, item: ClipboardItem) -> bool:
        """Make item the current clipboard content.

        Returns:
            True on success, False on failure.
        """

    def start(self) -> None:
        """Begin any background work the backend needs (event serving)."""

    def close(self) -> None:
        """Stop background work and release platform resources."""


def validate_display() -> Display:
    """Open the display named by $DISPLAY.

    Raises:
        StartupError: If DISPLAY is empty or the server cannot be reached.
    """
    display_name = os.environ.get("DISPLAY")
    if not display_name:
        raise StartupError(
            "DISPLAY environment variable is not set; "
            "X11 display is required for clipboard access."
        )

    try:
        from Xlib.display import Display as XDisplay
        return XDisplay(display_name)
    except Exception as e:
        raise StartupError(f"Failed to connect to X11 display: {e}") from e


def create_hidden_window(display: Display) -> Window:
    """Return a new never-mapped 1x1 child of the root window.

    Conversions are delivered to it when reading, and it is the owner of
    CLIPBOARD after a promote. Property change events are selected so that
    INCR transfers can be followed.
    """
    screen = display.screen()
    return screen.root.create_window(
        0, 0, 1, 1, 0, screen.root_depth, event_mask=X.PropertyChangeMask,
    )
