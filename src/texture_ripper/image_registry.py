"""Ordered collection of images placed in world space, with background loading."""

from __future__ import annotations

import logging
from concurrent import futures
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

import numpy as np
from PIL import Image

from .viewport import as_vec2

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class PlacedImage:
    """An image positioned in world space.

    Attributes:
        image_id: Registry-assigned identifier, increasing in creation order.
        translation: World position of the image center.
        world_scale: Per-axis scale applied to the native bitmap.
        pixel_dimensions: Native (width, height) in texels, or None while the
            image is still loading.
        path: Source file, if the image was loaded from disk.
        rgba: Decoded H x W x 4 uint8 pixels, used for drawing only.
    """

    image_id: int
    translation: np.ndarray = field(default_factory=lambda: np.zeros(2))
    world_scale: np.ndarray = field(default_factory=lambda: np.ones(2))
    pixel_dimensions: Optional[tuple[int, int]] = None
    path: Optional[Path] = None
    rgba: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.translation = as_vec2(self.translation).copy()
        self.world_scale = as_vec2(self.world_scale).copy()
        if np.any(self.world_scale <= 0):
            raise ValueError(f"world_scale must be positive, got {self.world_scale.tolist()}")
        if self.pixel_dimensions is not None:
            self.set_pixel_dimensions(*self.pixel_dimensions)

    def set_pixel_dimensions(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self.pixel_dimensions = (int(width), int(height))

    @property
    def is_ready(self) -> bool:
        return self.pixel_dimensions is not None

    @property
    def world_size(self) -> np.ndarray:
        """Size of the image in world units."""
        return np.asarray(self.pixel_dimensions, dtype=np.float64) * self.world_scale


def decode_image(path: Path) -> np.ndarray:
    """Read an image file into an H x W x 4 uint8 array.

    Raises:
        OSError: If the file cannot be read or is not an image.
        ValueError: If the image exceeds Pillow's pixel limit.
    """
    try:
        with Image.open(path) as img:
            return np.asarray(img.convert("RGBA"), dtype=np.uint8)
    except Image.DecompressionBombError as exc:
        raise ValueError(str(exc)) from exc


class ImageRegistry:
    """Owns the placed images in creation order.

    Files are decoded on a worker thread. Finished decodes are committed only
    by `poll()`, which the frame loop calls at the start of each tick, so a
    tick never observes a half-updated image.
    """

    def __init__(self, max_workers: int = 2) -> None:
        self._images: dict[int, PlacedImage] = {}
        self._next_id = 0
        self._executor: Optional[ThreadPoolExecutor] = None
        self._max_workers = max_workers
        self._pending: dict[int, Future] = {}

    def __len__(self) -> int:
        return len(self._images)

    def __iter__(self) -> Iterator[PlacedImage]:
        return iter(list(self._images.values()))

    def __contains__(self, image_id: int) -> bool:
        return image_id in self._images

    def get(self, image_id: int) -> PlacedImage:
        return self._images[image_id]

    def add(
        self,
        pixel_dimensions: Optional[tuple[int, int]] = None,
        translation=(0.0, 0.0),
        world_scale=(1.0, 1.0),
        rgba: Optional[np.ndarray] = None,
        path: Optional[Path] = None,
    ) -> PlacedImage:
        """Place an image on top of all existing ones.

        If `rgba` is given and `pixel_dimensions` is not, the dimensions are
        taken from the array.
        """
        if pixel_dimensions is None and rgba is not None:
            pixel_dimensions = (rgba.shape[1], rgba.shape[0])
        image = PlacedImage(
            image_id=self._next_id,
            translation=translation,
            world_scale=world_scale,
            pixel_dimensions=pixel_dimensions,
            path=path,
            rgba=rgba,
        )
        self._next_id += 1
        self._images[image.image_id] = image
        return image

    def load(self, path, translation=(0.0, 0.0), world_scale=(1.0, 1.0)) -> PlacedImage:
        """Queue an image file for decoding; it is placed immediately but not ready.

        Args:
            path: Image file to read.
            translation: World position of the image center.
            world_scale: Per-axis scale applied to the native bitmap.

        Returns:
            The placeholder PlacedImage, filled in by a later `poll()`.
        """
        path = Path(path)
        image = self.add(translation=translation, world_scale=world_scale, path=path)
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers, thread_name_prefix="texture-ripper-load"
            )
        self._pending[image.image_id] = self._executor.submit(decode_image, path)
        logger.debug("Queued %s as image %d", path, image.image_id)
        return image

    def poll(self) -> list[PlacedImage]:
        """Commit finished decodes.

        Images whose file could not be decoded are logged and removed.

        Returns:
            Images that became ready during this call.
        """
        ready = []
        for image_id, future in list(self._pending.items()):
            if not future.done():
                continue
            del self._pending[image_id]
            image = self._images.get(image_id)
            if image is None:
                continue
            try:
                rgba = future.result()
            except (OSError, ValueError) as exc:
                logger.warning("Failed to load %s: %s", image.path, exc)
                del self._images[image_id]
                continue
            image.rgba = rgba
            image.set_pixel_dimensions(rgba.shape[1], rgba.shape[0])
            logger.info(
                "Loaded %s (%dx%d) as image %d",
                image.path,
                rgba.shape[1],
                rgba.shape[0],
                image_id,
            )
            ready.append(image)
        return ready

    def wait(self, timeout: Optional[float] = None) -> list[PlacedImage]:
        """Block until queued decodes finish, then commit them.

        Args:
            timeout: Seconds to wait in total, or None to wait for all.
                Decodes still running when it expires stay pending and are
                committed by a later `poll()`; check `has_pending`.

        Returns:
            Images that became ready during this call.
        """
        futures.wait(list(self._pending.values()), timeout=timeout)
        return self.poll()

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def remove(self, image_id: int) -> None:
        """Remove an image; raises KeyError for unknown ids."""
        del self._images[image_id]
        future = self._pending.pop(image_id, None)
        if future is not None:
            future.cancel()

    def close(self) -> None:
        """Stop the loader threads."""
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None
        self._pending.clear()
