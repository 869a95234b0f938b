"""Cursor-anchored zooming of the viewport."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

import numpy as np

from .viewport import ViewportState, as_vec2, half_size

logger = logging.getLogger(__name__)

ZOOM_IN_FACTOR = 0.8
ZOOM_OUT_FACTOR = 1.25


class ZoomDirection(Enum):
    """Direction of a single wheel tick."""

    IN = "in"
    OUT = "out"

    @classmethod
    def from_wheel_delta(cls, dy: float) -> Optional[ZoomDirection]:
        """Map a canvas wheel delta to a direction.

        Scrolling up reports a negative `dy` and zooms in. The magnitude is
        ignored; a zero delta carries no direction.
        """
        if dy < 0:
            return cls.IN
        if dy > 0:
            return cls.OUT
        return None


def cursor_in_window(cursor, window_size) -> bool:
    """Whether a screen position lies inside the window rectangle."""
    if cursor is None:
        return False
    x, y = as_vec2(cursor)
    width, height = as_vec2(window_size)
    return 0.0 <= x <= width and 0.0 <= y <= height


class ZoomEngine:
    """Apply fixed-factor zoom steps that keep the point under the cursor fixed.

    A step scales the viewport by `zoom_in_factor` or `zoom_out_factor` and
    then shifts the translation so that the world point under the cursor
    before the step is still under it afterwards. The two default factors
    are reciprocal, so N steps in followed by N steps out restore the scale.
    """

    def __init__(
        self,
        zoom_in_factor: float = ZOOM_IN_FACTOR,
        zoom_out_factor: float = ZOOM_OUT_FACTOR,
    ) -> None:
        """Initialize the engine.

        Args:
            zoom_in_factor: Scale multiplier for zooming in (< 1).
            zoom_out_factor: Scale multiplier for zooming out (> 1).
        """
        if not 0.0 < zoom_in_factor < 1.0:
            raise ValueError(f"zoom_in_factor must be in (0, 1), got {zoom_in_factor}")
        if zoom_out_factor <= 1.0:
            raise ValueError(f"zoom_out_factor must be > 1, got {zoom_out_factor}")
        self.zoom_in_factor = zoom_in_factor
        self.zoom_out_factor = zoom_out_factor

    def factor_for(self, direction: ZoomDirection) -> float:
        if direction is ZoomDirection.IN:
            return self.zoom_in_factor
        return self.zoom_out_factor

    def step(
        self,
        viewport: ViewportState,
        direction: ZoomDirection,
        cursor,
        window_size,
    ) -> bool:
        """Apply one zoom tick anchored at the cursor.

        Args:
            viewport: State to mutate.
            direction: Zoom in or out.
            cursor: Cursor screen position, or None if unavailable.
            window_size: (width, height) of the window in screen units.

        Returns:
            True if the viewport changed, False if the step was skipped
            because the cursor is absent or outside the window.
        """
        if not cursor_in_window(cursor, window_size):
            return False

        center = half_size(window_size)
        p_screen = as_vec2(cursor) - center
        world_before = viewport.screen_to_world(cursor, center)

        old_scale = viewport.scale
        new_scale = viewport.set_scale(old_scale * self.factor_for(direction))

        # Solve for the translation that puts world_before back under p_screen
        # at the committed (possibly clamped) scale.
        viewport.translation = world_before - p_screen * new_scale

        logger.debug(
            "Zoom %s at %s: scale %.6g -> %.6g",
            direction.value,
            np.round(p_screen, 3).tolist(),
            old_scale,
            new_scale,
        )
        return new_scale != old_scale
