"""Frame loop tying input events, view state, images and the renderer together."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from .config import ViewerConfig
from .events import FocusLost, InputEvent
from .image_registry import ImageRegistry, PlacedImage
from .pan import PanEngine
from .picking import PixelHit, PixelResolver
from .tick import Session, TickResult, ViewEngine
from .viewport import ViewportState
from .zoom import ZoomEngine

if TYPE_CHECKING:
    from .renderer import Visualizer

logger = logging.getLogger(__name__)


class Controller:
    """Run one tick per frame over queued input.

    Event handlers only queue events; all view state changes happen in
    `step`, so every state mutation comes from the frame loop.
    """

    def __init__(
        self,
        registry: Optional[ImageRegistry] = None,
        visualizer: Optional[Visualizer] = None,
        config: Optional[ViewerConfig] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            registry: Placed images. A new empty registry if None.
            visualizer: Renderer to keep in sync, or None to run headless.
            config: Viewer settings.
        """
        self.config = config or ViewerConfig()
        self.registry = registry if registry is not None else ImageRegistry()
        self.vis = visualizer

        self.session = Session(
            viewport=ViewportState(
                min_scale=self.config.min_scale, max_scale=self.config.max_scale
            )
        )
        self.engine = ViewEngine(
            zoom=ZoomEngine(self.config.zoom_in_factor, self.config.zoom_out_factor),
            pan=PanEngine(),
            resolver=PixelResolver(),
            pan_button=self.config.pan_button,
        )

        self._events: deque[InputEvent] = deque()
        self._last_step_time: Optional[float] = None
        self._reset_requested = False
        self._stop = asyncio.Event()

        # Callbacks for UI updates
        self.on_pixel_hit: Optional[Callable[[PixelHit], None]] = None
        self.on_image_ready: Optional[Callable[[PlacedImage], None]] = None

    @property
    def viewport(self) -> ViewportState:
        return self.session.viewport

    def window_size(self) -> tuple[float, float]:
        if self.vis is not None:
            return self.vis.get_window_size()
        width, height = self.config.window_size
        return (float(width), float(height))

    def push_event(self, event: Optional[InputEvent]) -> None:
        """Queue an input event for the next tick."""
        if event is not None:
            self._events.append(event)

    def focus_lost(self) -> None:
        """End any drag on the next tick, as if the pan button were released.

        For hosts that report focus or pointer-capture loss. The render canvas
        has no such event, so in the viewer a lost release is detected from
        the first pointer move whose `buttons` lacks the pan button.
        """
        self.push_event(FocusLost())

    def open_image(self, path, translation=(0.0, 0.0), world_scale=(1.0, 1.0)) -> PlacedImage:
        """Queue an image file; it appears once decoded."""
        return self.registry.load(Path(path), translation, world_scale)

    def reset_view(self) -> None:
        """Return to the startup view on the next tick."""
        self._reset_requested = True

    def step(self, dt: Optional[float] = None) -> TickResult:
        """Process all queued events as one frame and redraw.

        Args:
            dt: Seconds since the previous step. Measured if None.

        Returns:
            What happened during the tick.
        """
        now = time.monotonic()
        if dt is None:
            dt = 0.0 if self._last_step_time is None else now - self._last_step_time
        self._last_step_time = now

        for image in self.registry.poll():
            if self.on_image_ready:
                self.on_image_ready(image)

        if self._reset_requested:
            self._reset_requested = False
            self.engine.pan.cancel(self.session.pan)
            self.session.viewport.reset()

        events = list(self._events)
        self._events.clear()

        result = self.engine.tick(
            self.session, events, list(self.registry), self.window_size(), dt
        )

        for hit in result.hits:
            if self.on_pixel_hit:
                self.on_pixel_hit(hit)

        self.redraw()
        return result

    def redraw(self) -> None:
        if self.vis is None:
            return
        self.vis.sync_images(self.registry)
        self.vis.set_view(self.session.viewport)
        self.vis.draw()

    def stop(self) -> None:
        """Ask `run` to return after the current frame."""
        self._stop.set()

    async def run(self) -> None:
        """Step at the configured FPS until stopped or the window closes."""
        interval = 1.0 / self.config.fps
        try:
            while not self._stop.is_set():
                if self.vis is not None and self.vis.is_closed():
                    logger.info("Window closed.")
                    break
                self.step()
                await asyncio.sleep(interval)
        finally:
            self.registry.close()
