"""X11 selection request handling.

When the daemon owns CLIPBOARD (after a client promoted an entry), other
applications ask it for the content through SelectionRequest events.

The module handles:
- Responding to TARGETS with the targets the owned item can be served as
- Serving text as UTF8_STRING, STRING or text/plain;charset=utf-8
- Serving images in their own MIME type (normally image/png)
- Refusing anything else, or content too large for a single property
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from Xlib import X, Xatom
from Xlib.protocol.event import SelectionNotify as SelectionNotifyEvent

from superclip.item import ImageItem, TextItem

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.event import SelectionRequest

    from superclip.item import ClipboardItem

logger = logging.getLogger(__name__)

TEXT_TARGET_NAMES = ("UTF8_STRING", "text/plain;charset=utf-8")

# Fraction of the maximum request size used for a single property write.
PROPERTY_SAFETY_MARGIN: float = 0.9


def get_max_property_size(display: "Display") -> int:
    """Return the maximum property size in bytes for a single change_property.

    The X11 protocol limits property writes based on max_request_length,
    which is counted in 4-byte units.
    """
    max_bytes = display.info.max_request_length * 4  # type: ignore[attr-defined]
    return int(max_bytes * PROPERTY_SAFETY_MARGIN)


def supported_targets(display: "Display", item: "ClipboardItem") -> list[int]:
    """Return the target atoms item can be converted to."""
    targets = [display.intern_atom("TARGETS")]
    if isinstance(item, TextItem):
        targets.extend(display.intern_atom(name) for name in TEXT_TARGET_NAMES)
        targets.append(Xatom.STRING)
    else:
        targets.append(display.intern_atom(item.mime_type))
    return targets


def item_bytes_for_target(
    display: "Display", item: "ClipboardItem", target: int
) -> bytes | None:
    """Return the bytes to serve for target, or None if unsupported."""
    if isinstance(item, ImageItem):
        if target == display.intern_atom(item.mime_type):
            return item.data
        return None
    if target == Xatom.STRING:
        return item.text.encode("latin-1", errors="replace")
    if target in [display.intern_atom(name) for name in TEXT_TARGET_NAMES]:
        return item.text.encode("utf-8")
    return None


def handle_selection_request(
    display: "Display", event: "SelectionRequest", item: "ClipboardItem | None"
) -> None:
    """Respond to a SelectionRequest for a selection we own.

    Writes the requested conversion to the requestor's property and sends
    SelectionNotify. Refuses (property=None) when nothing is owned, the
    target is unsupported, or the data would exceed the maximum property
    size.

    Args:
        display: The X11 display connection.
        event: The SelectionRequest event.
        item: The item currently owned, or None.
    """
    targets_atom = display.intern_atom("TARGETS")
    # Obsolete clients send property None and expect the target atom to be used.
    prop = event.property if event.property != X.NONE else event.target
    logger.debug("SelectionRequest target=%s property=%s", event.target, prop)

    if item is None:
        prop = X.NONE
    elif event.target == targets_atom:
        event.requestor.change_property(
            prop, Xatom.ATOM, 32, supported_targets(display, item)
        )
    else:
        data = item_bytes_for_target(display, item, event.target)
        if data is None:
            prop = X.NONE
        elif len(data) > get_max_property_size(display):
            logger.warning(
                "Refusing selection request: %d bytes exceeds single property limit",
                len(data),
            )
            prop = X.NONE
        else:
            event.requestor.change_property(prop, event.target, 8, data)

    send_selection_notify(display, event, prop)


def send_selection_notify(
    display: "Display", event: "SelectionRequest", prop: int
) -> None:
    """Send SelectionNotify response."""
    event.requestor.send_event(
        SelectionNotifyEvent(
            time=event.time,
            requestor=event.requestor.id,
            selection=event.selection,
            target=event.target,
            property=prop,
        ),
        event_mask=0,
    )
    display.flush()
