"""pygfx-based renderer for placed images (onscreen/offscreen)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

import numpy as np
import pygfx as gfx

if TYPE_CHECKING:
    from .image_registry import PlacedImage
    from .viewport import ViewportState


class Visualizer:
    """Owns a pygfx scene with one image mesh per ready PlacedImage.

    World space has x to the right and y downwards, like screen space. pygfx
    has y upwards, so meshes and the camera are mirrored on y when synced.

    Modes: desktop (window), offscreen.
    """

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        mode: str = "desktop",
        title: str = "texture-ripper",
    ) -> None:
        """Create canvas, renderer, scene and camera.

        Args:
            width: Window width in screen units.
            height: Window height in screen units.
            mode: "desktop" for a window, "offscreen" for headless rendering.
            title: Window title.
        """
        self.width = width
        self.height = height
        self.mode = mode

        if mode == "offscreen":
            from rendercanvas.offscreen import RenderCanvas as OffscreenCanvas

            self.canvas = OffscreenCanvas(size=(width, height), pixel_ratio=1)
        else:
            from rendercanvas.auto import RenderCanvas

            self.canvas = RenderCanvas(size=(width, height), title=title)

        self.renderer = gfx.WgpuRenderer(self.canvas)
        self.scene = gfx.Scene()
        self.scene.add(gfx.Background(None, gfx.BackgroundMaterial((0.125, 0.125, 0.125, 1))))

        self.camera = gfx.OrthographicCamera(width, height, maintain_aspect=False)
        self.camera.local.position = (0, 0, 0)

        # image_id -> mesh
        self.image_meshes: dict[int, gfx.Image] = {}

        self.canvas.request_draw(self._render)

    def _render(self) -> None:
        self.renderer.render(self.scene, self.camera)

    def get_window_size(self) -> tuple[float, float]:
        """Current logical (width, height) of the canvas."""
        width, height = self.canvas.get_logical_size()
        return float(width), float(height)

    def set_view(self, viewport: ViewportState, window_size=None) -> None:
        """Point the camera at the viewport's visible world rectangle."""
        if window_size is None:
            window_size = self.get_window_size()
        left, right, top, bottom = viewport.visible_world_rect(window_size)
        self.camera.width = right - left
        self.camera.height = bottom - top
        self.camera.local.position = ((left + right) / 2, -(top + bottom) / 2, 0)

    def _make_mesh(self, image: PlacedImage) -> gfx.Image:
        texture = gfx.Texture(np.ascontiguousarray(image.rgba), dim=2)
        mesh = gfx.Image(
            gfx.Geometry(grid=texture),
            gfx.ImageBasicMaterial(clim=(0, 255), interpolation="nearest"),
        )
        self._place_mesh(mesh, image)
        return mesh

    @staticmethod
    def _place_mesh(mesh: gfx.Image, image: PlacedImage) -> None:
        # pygfx puts texel centers on integer coordinates with row 0 at the
        # origin; shift by half a texel and mirror y so row 0 is at the top.
        width, height = image.pixel_dimensions
        sx, sy = image.world_scale
        tx, ty = image.translation
        mesh.local.scale = (sx, -sy, 1)
        mesh.local.position = (
            tx + (0.5 - width / 2) * sx,
            -(ty + (0.5 - height / 2) * sy),
            0,
        )

    def sync_images(self, images: Iterable[PlacedImage]) -> None:
        """Add meshes for newly ready images and drop meshes of removed ones."""
        seen = set()
        for depth, image in enumerate(images):
            if not image.is_ready or image.rgba is None:
                continue
            seen.add(image.image_id)
            mesh = self.image_meshes.get(image.image_id)
            if mesh is None:
                mesh = self._make_mesh(image)
                self.image_meshes[image.image_id] = mesh
                self.scene.add(mesh)
            else:
                self._place_mesh(mesh, image)
            # Later images are drawn on top.
            mesh.render_order = depth

        for image_id in list(self.image_meshes):
            if image_id not in seen:
                self.scene.remove(self.image_meshes.pop(image_id))

    def draw(self) -> None:
        """Schedule a redraw of the current scene."""
        self.canvas.request_draw()

    def is_closed(self) -> bool:
        return self.canvas.get_closed()

    def close(self) -> None:
        self.canvas.close()

    def read_pixels(self) -> np.ndarray:
        """Render and return the image as uint8 H x W x 3."""
        image = np.asarray(self.canvas.draw())

        # The image is RGBA, convert to RGB
        if image.shape[-1] == 4:
            image = image[:, :, :3]

        if image.dtype != np.uint8:
            image = image.astype(np.uint8)

        return image
