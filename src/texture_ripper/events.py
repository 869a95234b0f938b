"""Input events consumed by the frame tick."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

LEFT_BUTTON = 1


@dataclass(frozen=True)
class PointerMove:
    """Pointer moved.

    `buttons` lists the buttons held during the move, or is None when the
    source does not report them.
    """

    x: float
    y: float
    buttons: Optional[tuple[int, ...]] = None


@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float
    button: int = LEFT_BUTTON


@dataclass(frozen=True)
class PointerUp:
    x: float
    y: float
    button: int = LEFT_BUTTON


@dataclass(frozen=True)
class Wheel:
    """One scroll tick. Only the sign of `dy` matters."""

    x: float
    y: float
    dy: float


@dataclass(frozen=True)
class PointerLeave:
    """The pointer left the window; no cursor position is available."""


@dataclass(frozen=True)
class FocusLost:
    """The window lost focus; any drag in progress ends."""


InputEvent = Union[PointerMove, PointerDown, PointerUp, Wheel, PointerLeave, FocusLost]


def from_canvas_event(event: dict) -> Optional[InputEvent]:
    """Translate a canvas event dict into an input event.

    Args:
        event: Event as delivered by `canvas.add_event_handler`.

    Returns:
        The matching event, or None for event types the tick does not use.
    """
    event_type = event.get("event_type", "")
    x = float(event.get("x", 0))
    y = float(event.get("y", 0))

    if event_type == "pointer_move":
        buttons = event.get("buttons")
        return PointerMove(x, y, None if buttons is None else tuple(buttons))
    if event_type == "pointer_down":
        return PointerDown(x, y, int(event.get("button", LEFT_BUTTON)))
    if event_type == "pointer_up":
        return PointerUp(x, y, int(event.get("button", LEFT_BUTTON)))
    if event_type == "wheel":
        dy = float(event.get("dy", 0))
        if dy == 0:
            return None
        return Wheel(x, y, dy)
    if event_type == "pointer_leave":
        return PointerLeave()
    return None
