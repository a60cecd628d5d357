"""X11 clipboard backend.

X11Clipboard reads and writes the CLIPBOARD selection with python-xlib.

Reading asks the current owner for image/png first and UTF8_STRING
second, waiting for SelectionNotify with a timeout and following
incremental (INCR) transfers for large content.

Writing takes ownership of CLIPBOARD with a hidden window and keeps the
owned item so SelectionRequests from other applications can be answered.
A background thread answers those requests while nothing else is using
the display; all display access goes through one lock.
"""

from __future__ import annotations

import logging
import select
import threading
import time
from typing import TYPE_CHECKING, Any

from Xlib import X

from superclip.clipboard import ClipboardBackend, create_hidden_window, validate_display
from superclip.clipboard_selection import handle_selection_request
from superclip.constants import CLIPBOARD_TIMEOUT, MAX_ITEM_SIZE
from superclip.errors import ClipboardReadError
from superclip.item import PNG_MIME_TYPE, ImageItem, TextItem, is_blank, png_dimensions
from superclip.selection_utils import wait_for_event

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.rq import Event
    from Xlib.xobject.drawable import Window

    from superclip.item import ClipboardItem

logger = logging.getLogger(__name__)

# How often the event thread wakes up to check for shutdown, in seconds.
EVENT_THREAD_WAKEUP: float = 0.2


def _resource_id(resource: Any) -> int:
    """Return the X id of a window object, or the value itself for X.NONE."""
    return getattr(resource, "id", resource)


class X11Clipboard(ClipboardBackend):
    """ClipboardBackend for the X11 CLIPBOARD selection."""

    def __init__(
        self, display: Display, window: Window, timeout: float = CLIPBOARD_TIMEOUT
    ) -> None:
        self._display = display
        self._window = window
        self._timeout = timeout
        self._lock = threading.Lock()
        self._owned: ClipboardItem | None = None
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

        self._clipboard_atom = display.intern_atom("CLIPBOARD")
        self._property_atom = display.intern_atom("SUPERCLIP_SEL")
        self._incr_atom = display.intern_atom("INCR")
        self._utf8_atom = display.intern_atom("UTF8_STRING")
        self._png_atom = display.intern_atom(PNG_MIME_TYPE)

    @classmethod
    def open(cls) -> X11Clipboard:
        """Connect to $DISPLAY and create the ownership window.

        Raises:
            StartupError: If the display is unavailable.
        """
        display = validate_display()
        window = create_hidden_window(display)
        return cls(display, window)

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._serve_forever, name="superclip-x11-events", daemon=True
        )
        self._thread.start()

    def close(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=EVENT_THREAD_WAKEUP * 5)
            self._thread = None
        with self._lock:
            try:
                self._window.destroy()
                self._display.close()
            except Exception as e:
                logger.debug("Error closing X11 display: %s", e)

    def read(self) -> ClipboardItem | None:
        with self._lock:
            self._serve_pending()
            owner = _resource_id(self._display.get_selection_owner(self._clipboard_atom))
            if owner == X.NONE:
                logger.debug("No CLIPBOARD owner")
                return None
            if owner == self._window.id:
                return self._owned

            image = self._read_image()
            if image is not None:
                return image
            data = self._convert(self._utf8_atom)
            if data is None:
                return None
            item = TextItem(data.decode("utf-8", errors="replace"))
            return None if is_blank(item) else item

    def write(self, item: ClipboardItem) -> bool:
        with self._lock:
            try:
                self._owned = item
                self._window.set_selection_owner(self._clipboard_atom, X.CurrentTime)
                self._display.flush()

                owner = self._display.get_selection_owner(self._clipboard_atom)
                if _resource_id(owner) != self._window.id:
                    logger.error("Failed to acquire CLIPBOARD ownership")
                    self._owned = None
                    return False
                return True
            except Exception as e:
                logger.error("Failed to set clipboard content: %s", e)
                self._owned = None
                return False

    def serve_pending(self) -> None:
        """Answer any queued selection events without blocking."""
        with self._lock:
            self._serve_pending()

    def _serve_forever(self) -> None:
        fd = self._display.fileno()
        while not self._stop.is_set():
            try:
                select.select([fd], [], [], EVENT_THREAD_WAKEUP)
                self.serve_pending()
            except Exception as e:
                if self._stop.is_set():
                    return
                logger.warning("X11 event handling failed: %s", e)
                time.sleep(EVENT_THREAD_WAKEUP)

    def _serve_pending(self) -> None:
        while self._display.pending_events() > 0:
            self._dispatch(self._display.next_event())

    def _dispatch(self, event: Event) -> None:
        if event.type == X.SelectionRequest and event.selection == self._clipboard_atom:
            handle_selection_request(self._display, event, self._owned)
        elif event.type == X.SelectionClear and event.atom == self._clipboard_atom:
            logger.debug("Lost CLIPBOARD ownership")
            self._owned = None

    def _read_image(self) -> ImageItem | None:
        data = self._convert(self._png_atom)
        if data is None:
            return None
        dimensions = png_dimensions(data)
        if dimensions is None:
            logger.debug("Owner offered image/png but sent non-PNG data, trying text")
            return None
        width, height = dimensions
        return ImageItem(data=data, width=width, height=height)

    def _convert(self, target: int) -> bytes | None:
        """Ask the CLIPBOARD owner for target and return the data.

        Returns:
            The converted bytes, or None if the owner refused the target.

        Raises:
            ClipboardReadError: On timeout or oversized content.
        """
        self._window.convert_selection(
            self._clipboard_atom, target, self._property_atom, X.CurrentTime
        )
        self._display.flush()

        event = wait_for_event(
            self._display,
            lambda e: e.type == X.SelectionNotify and e.selection == self._clipboard_atom,
            self._dispatch,
            time.monotonic() + self._timeout,
        )
        if event is None:
            raise ClipboardReadError(f"Clipboard read timed out after {self._timeout} seconds")
        if event.property == X.NONE:
            return None

        prop = self._window.get_full_property(self._property_atom, X.AnyPropertyType)
        if prop is not None and prop.property_type == self._incr_atom:
            return self._read_incremental()
        self._window.delete_property(self._property_atom)
        self._display.flush()
        if prop is None:
            return None
        data = _as_bytes(prop.value)
        if len(data) > MAX_ITEM_SIZE:
            raise ClipboardReadError(f"Clipboard content of {len(data)} bytes is too large")
        return data

    def _read_incremental(self) -> bytes:
        # Deleting the INCR property tells the owner to send the first chunk.
        self._window.delete_property(self._property_atom)
        self._display.flush()

        chunks: list[bytes] = []
        total = 0
        while True:
            event = wait_for_event(
                self._display,
                lambda e: (
                    e.type == X.PropertyNotify
                    and e.atom == self._property_atom
                    and e.state == X.PropertyNewValue
                ),
                self._dispatch,
                time.monotonic() + self._timeout,
            )
            if event is None:
                raise ClipboardReadError("Incremental clipboard transfer timed out")
            prop = self._window.get_full_property(self._property_atom, X.AnyPropertyType)
            self._window.delete_property(self._property_atom)
            self._display.flush()
            if prop is None or not prop.value:
                return b"".join(chunks)
            chunk = _as_bytes(prop.value)
            total += len(chunk)
            if total > MAX_ITEM_SIZE:
                raise ClipboardReadError(f"Clipboard content exceeds {MAX_ITEM_SIZE} bytes")
            chunks.append(chunk)


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)
