"""Drag-to-pan state machine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .viewport import ViewportState, half_size

logger = logging.getLogger(__name__)


@dataclass
class PanSession:
    """State of an in-progress drag.

    `anchor_world` is only meaningful while `active` is True; reading it on
    an idle session is a programming error.
    """

    active: bool = False
    _anchor_world: Optional[np.ndarray] = field(default=None, repr=False)

    @property
    def anchor_world(self) -> np.ndarray:
        if not self.active or self._anchor_world is None:
            raise RuntimeError("PanSession is idle; it has no anchor")
        return self._anchor_world

    def begin(self, anchor_world: np.ndarray) -> None:
        self.active = True
        self._anchor_world = np.array(anchor_world, dtype=np.float64)

    def reanchor(self, anchor_world: np.ndarray) -> None:
        self._anchor_world = np.array(anchor_world, dtype=np.float64)

    def clear(self) -> None:
        self.active = False
        self._anchor_world = None


class PanEngine:
    """Track a drag gesture so the grabbed world point stays under the pointer.

    States are Idle (`session.active` False) and Panning. Each frame while
    panning, the translation is corrected by the difference between the
    anchor and the cursor's current world position, and the anchor is then
    refreshed to the cursor's corrected world position. Every frame thus
    applies exactly the incremental pointer motion, independent of frame
    rate, and zoom steps taken mid-drag keep the anchor valid because they
    preserve the world point under the cursor.
    """

    def press(self, session: PanSession, viewport: ViewportState, cursor, window_size) -> bool:
        """Start a drag at the cursor. No-op without a cursor position."""
        if cursor is None:
            return False
        anchor = viewport.screen_to_world(cursor, half_size(window_size))
        session.begin(anchor)
        logger.debug("Pan started at world %s", np.round(anchor, 3).tolist())
        return True

    def track(self, session: PanSession, viewport: ViewportState, cursor, window_size) -> np.ndarray:
        """Advance the drag by one frame.

        Returns:
            The translation delta applied this frame (zero when idle or when
            the cursor position is unavailable).
        """
        if not session.active or cursor is None:
            return np.zeros(2)

        center = half_size(window_size)
        current_world = viewport.screen_to_world(cursor, center)
        delta = session.anchor_world - current_world
        viewport.translation = viewport.translation + delta
        session.reanchor(viewport.screen_to_world(cursor, center))
        return delta

    def release(self, session: PanSession) -> None:
        """End the drag, regardless of where the cursor is."""
        if session.active:
            logger.debug("Pan ended")
        session.clear()

    # Losing focus or pointer capture ends the gesture like a release.
    cancel = release
