"""Camera transform between screen space and world space."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

DEFAULT_MIN_SCALE = 1e-4
DEFAULT_MAX_SCALE = 1e4


def as_vec2(value) -> np.ndarray:
    """Return `value` as a float64 array of shape (2,)."""
    arr = np.asarray(value, dtype=np.float64)
    if arr.shape != (2,):
        raise ValueError(f"Expected a 2D vector, got shape {arr.shape}")
    return arr


def half_size(window_size) -> np.ndarray:
    """Half of a (width, height) window size as a vector."""
    return as_vec2(window_size) / 2.0


@dataclass(eq=False)
class ViewportState:
    """Camera translation and scale.

    Attributes:
        translation: World-space position of the viewport center.
        scale: World units per screen unit. Always inside
            `[min_scale, max_scale]`, hence strictly positive.
        min_scale: Lower scale bound (most zoomed in).
        max_scale: Upper scale bound (most zoomed out).
    """

    translation: np.ndarray = field(default_factory=lambda: np.zeros(2))
    scale: float = 1.0
    min_scale: float = DEFAULT_MIN_SCALE
    max_scale: float = DEFAULT_MAX_SCALE

    def __post_init__(self) -> None:
        if not 0.0 < self.min_scale <= self.max_scale:
            raise ValueError(
                f"Invalid scale bounds: min={self.min_scale}, max={self.max_scale}"
            )
        self.translation = as_vec2(self.translation).copy()
        self.set_scale(self.scale)

    def set_scale(self, value: float) -> float:
        """Commit a new scale, clamped to the configured bounds.

        Returns:
            The scale actually committed.
        """
        self.scale = float(max(self.min_scale, min(self.max_scale, value)))
        return self.scale

    def screen_to_world(self, screen_pos, viewport_half_size) -> np.ndarray:
        """Map a screen position to world space.

        Positions outside the window are valid; pointer capture reports them
        during a drag.
        """
        return (as_vec2(screen_pos) - as_vec2(viewport_half_size)) * self.scale + self.translation

    def world_to_screen(self, world_pos, viewport_half_size) -> np.ndarray:
        """Inverse of `screen_to_world`."""
        return (as_vec2(world_pos) - self.translation) / self.scale + as_vec2(viewport_half_size)

    def visible_world_rect(self, window_size) -> tuple[float, float, float, float]:
        """World rectangle covered by the window as (left, right, top, bottom)."""
        extent = as_vec2(window_size) * self.scale / 2.0
        left, top = self.translation - extent
        right, bottom = self.translation + extent
        return float(left), float(right), float(top), float(bottom)

    def reset(self) -> None:
        """Return to the startup view: no translation, unit scale."""
        self.translation = np.zeros(2)
        self.set_scale(1.0)
