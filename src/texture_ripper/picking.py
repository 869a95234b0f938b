"""Resolve a pointer position to the image pixel underneath it.

The cursor is mapped through the viewport into world space, then into the
local frame of each placed image, topmost first, until one contains it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from .image_registry import PlacedImage
from .viewport import ViewportState, as_vec2, half_size

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class PixelHit:
    """Result of a successful pick.

    Attributes:
        image_id: Id of the image that was hit.
        pixel_x: Column in the image's native bitmap.
        pixel_y: Row in the image's native bitmap.
        world_pos: World position that was resolved.
        local_pos: Position relative to the image center, in world units.
    """

    image_id: int
    pixel_x: int
    pixel_y: int
    world_pos: np.ndarray
    local_pos: np.ndarray

    @property
    def pixel(self) -> tuple[int, int]:
        return (self.pixel_x, self.pixel_y)


def contains(image: PlacedImage, world_pos: np.ndarray) -> bool:
    """Whether `world_pos` lies in the image's bounding box, edges included."""
    extent = image.world_size / 2.0
    offset = np.abs(world_pos - image.translation)
    return bool(np.all(offset <= extent))


def local_to_pixel(image: PlacedImage, local_pos: np.ndarray) -> tuple[int, int]:
    """Map an image-local world offset to a pixel index.

    The floored index is clamped to the bitmap so that points on the far
    edges, or pushed past them by rounding, still land on a valid pixel.
    """
    dims = np.asarray(image.pixel_dimensions, dtype=np.float64)
    pixel = np.floor(local_pos / image.world_scale + dims / 2.0)
    pixel = np.clip(pixel, 0, dims - 1)
    return int(pixel[0]), int(pixel[1])


class PixelResolver:
    """Find which image, and which pixel of it, lies under a screen position."""

    def resolve_world(self, world_pos, images: Iterable[PlacedImage]) -> Optional[PixelHit]:
        """Resolve a world position against images given in creation order.

        Images are tested from the most recently placed to the oldest, so the
        first match is the topmost one. Images that are still loading are
        skipped.

        Args:
            world_pos: World-space position.
            images: Placed images in creation (draw) order.

        Returns:
            The hit, or None if no ready image contains the point.
        """
        world_pos = as_vec2(world_pos)
        for image in reversed(list(images)):
            if not image.is_ready or not contains(image, world_pos):
                continue
            local = world_pos - image.translation
            pixel_x, pixel_y = local_to_pixel(image, local)
            return PixelHit(image.image_id, pixel_x, pixel_y, world_pos, local)
        return None

    def resolve(
        self,
        cursor,
        viewport: ViewportState,
        window_size,
        images: Iterable[PlacedImage],
    ) -> Optional[PixelHit]:
        """Resolve a screen position.

        Args:
            cursor: Cursor screen position, or None if unavailable.
            viewport: Current camera state.
            window_size: (width, height) of the window.
            images: Placed images in creation (draw) order.

        Returns:
            The hit, or None when there is no cursor or nothing was hit.
        """
        if cursor is None:
            return None
        world_pos = viewport.screen_to_world(cursor, half_size(window_size))
        hit = self.resolve_world(world_pos, images)
        if hit is not None:
            logger.info(
                "Clicked image %d at local (%.2f, %.2f), pixel (%d, %d)",
                hit.image_id,
                hit.local_pos[0],
                hit.local_pos[1],
                hit.pixel_x,
                hit.pixel_y,
            )
        return hit
