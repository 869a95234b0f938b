"""Per-frame input processing.

A tick consumes the events received since the previous frame, in arrival
order, and updates the explicit `Session` value:

- pointer moves update the cursor,
- each wheel tick zooms anchored at its own position,
- a press of the pan button resolves the clicked pixel and starts a drag,
- a release, or losing focus, ends the drag,
- a drag in progress is advanced once more at the end of the frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

import numpy as np

from .events import (
    LEFT_BUTTON,
    FocusLost,
    InputEvent,
    PointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
    Wheel,
)
from .image_registry import PlacedImage
from .pan import PanEngine, PanSession
from .picking import PixelHit, PixelResolver
from .viewport import ViewportState
from .zoom import ZoomDirection, ZoomEngine


@dataclass
class Session:
    """Mutable view state threaded through every tick."""

    viewport: ViewportState = field(default_factory=ViewportState)
    pan: PanSession = field(default_factory=PanSession)
    cursor: Optional[np.ndarray] = None
    frame: int = 0
    elapsed: float = 0.0

    def set_cursor(self, x: float, y: float) -> None:
        self.cursor = np.array([x, y], dtype=np.float64)


@dataclass
class TickResult:
    """What happened during one tick."""

    hits: list[PixelHit] = field(default_factory=list)
    clicks: int = 0
    zoom_steps: int = 0
    view_changed: bool = False


class ViewEngine:
    """Holds the zoom, pan and picking engines and applies them to a Session."""

    def __init__(
        self,
        zoom: Optional[ZoomEngine] = None,
        pan: Optional[PanEngine] = None,
        resolver: Optional[PixelResolver] = None,
        pan_button: int = LEFT_BUTTON,
    ) -> None:
        self.zoom = zoom or ZoomEngine()
        self.pan = pan or PanEngine()
        self.resolver = resolver or PixelResolver()
        self.pan_button = pan_button

    def _track(self, session: Session, window_size) -> bool:
        delta = self.pan.track(session.pan, session.viewport, session.cursor, window_size)
        return bool(np.any(delta != 0))

    def tick(
        self,
        session: Session,
        events: Iterable[InputEvent],
        images: Sequence[PlacedImage],
        window_size,
        dt: float = 0.0,
    ) -> TickResult:
        """Process one frame of input.

        Args:
            session: View state to update.
            events: Events received since the last tick, oldest first.
            images: Placed images in creation order.
            window_size: (width, height) of the window.
            dt: Seconds since the previous tick.

        Returns:
            The pixel hits of this frame's clicks and change flags.
        """
        result = TickResult()
        viewport = session.viewport

        for event in events:
            if isinstance(event, PointerMove):
                session.set_cursor(event.x, event.y)
                if (
                    session.pan.active
                    and event.buttons is not None
                    and self.pan_button not in event.buttons
                ):
                    # The release happened where we could not see it.
                    self.pan.cancel(session.pan)

            elif isinstance(event, Wheel):
                session.set_cursor(event.x, event.y)
                direction = ZoomDirection.from_wheel_delta(event.dy)
                if direction is None:
                    continue
                result.view_changed |= self._track(session, window_size)
                if self.zoom.step(viewport, direction, session.cursor, window_size):
                    result.zoom_steps += 1
                    result.view_changed = True

            elif isinstance(event, PointerDown):
                session.set_cursor(event.x, event.y)
                if event.button != self.pan_button:
                    continue
                result.clicks += 1
                hit = self.resolver.resolve(session.cursor, viewport, window_size, images)
                if hit is not None:
                    result.hits.append(hit)
                self.pan.press(session.pan, viewport, session.cursor, window_size)

            elif isinstance(event, PointerUp):
                session.set_cursor(event.x, event.y)
                if event.button != self.pan_button:
                    continue
                result.view_changed |= self._track(session, window_size)
                self.pan.release(session.pan)

            elif isinstance(event, PointerLeave):
                session.cursor = None

            elif isinstance(event, FocusLost):
                self.pan.cancel(session.pan)

        result.view_changed |= self._track(session, window_size)
        session.frame += 1
        session.elapsed += dt
        return result


def tick(
    session: Session,
    events: Iterable[InputEvent],
    images: Sequence[PlacedImage],
    window_size,
    dt: float = 0.0,
) -> TickResult:
    """Run one tick with default engines."""
    return ViewEngine().tick(session, events, images, window_size, dt)
