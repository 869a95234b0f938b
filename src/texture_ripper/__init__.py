"""texture-ripper: inspect images on a zoomable, pannable canvas and pick pixels."""

from .image_registry import ImageRegistry, PlacedImage
from .pan import PanEngine, PanSession
from .picking import PixelHit, PixelResolver
from .tick import Session, TickResult, ViewEngine, tick
from .viewport import ViewportState
from .zoom import ZoomDirection, ZoomEngine

__version__ = "0.1.0"

__all__ = [
    "ImageRegistry",
    "PanEngine",
    "PanSession",
    "PixelHit",
    "PixelResolver",
    "PlacedImage",
    "Session",
    "TickResult",
    "ViewEngine",
    "ViewportState",
    "ZoomDirection",
    "ZoomEngine",
    "tick",
]
