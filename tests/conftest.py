"""Pytest fixtures for texture-ripper tests."""

import numpy as np
import pytest
from PIL import Image

from texture_ripper.image_registry import ImageRegistry


WINDOW_SIZE = (800.0, 600.0)


@pytest.fixture
def window_size():
    """Default 800x600 window."""
    return WINDOW_SIZE


@pytest.fixture
def gradient_png(tmp_path):
    """Path to a 20x10 RGB PNG whose red channel encodes the column index.

    Pixel (x, y) has color (x * 10, y * 20, 0).
    """
    xs, ys = np.meshgrid(np.arange(20), np.arange(10))
    rgb = np.stack([xs * 10, ys * 20, np.zeros_like(xs)], axis=-1).astype(np.uint8)
    path = tmp_path / "gradient.png"
    Image.fromarray(rgb).save(path)
    return path


@pytest.fixture
def broken_png(tmp_path):
    """Path to a file with a .png name that is not an image."""
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    return path


@pytest.fixture
def registry():
    """Registry with a single 200x100 image centered at the origin, unit scale."""
    reg = ImageRegistry()
    reg.add(pixel_dimensions=(200, 100))
    yield reg
    reg.close()


@pytest.fixture
def overlapping_registry():
    """Registry with two overlapping images; image 1 is placed last (on top).

    Image 0: 200x100 at the origin.
    Image 1: 50x50 at (80, 0), covering world x in [55, 105].
    """
    reg = ImageRegistry()
    reg.add(pixel_dimensions=(200, 100))
    reg.add(pixel_dimensions=(50, 50), translation=(80.0, 0.0))
    yield reg
    reg.close()
