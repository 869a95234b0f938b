"""Command-line interface for texture-ripper.

Entry point: `texture-ripper [IMAGES...] [OPTIONS]`.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

# Lazy imports to improve startup time.

# Seconds the offscreen render waits for images to decode.
LOAD_TIMEOUT = 60.0


def _eprint(msg: str) -> None:
    """Print to stderr.

    Args:
        msg: Message to print.
    """
    print(msg, file=sys.stderr)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument(
    "images",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--fps", type=float, help="Frame rate of the input loop.")
@click.option("--width", type=int, help="Window width.")
@click.option("--height", type=int, help="Window height.")
@click.option(
    "--offscreen",
    is_flag=True,
    help="Run headless renderer (no window); useful for testing.",
)
@click.option(
    "--screenshot",
    type=click.Path(dir_okay=False, path_type=Path),
    help="With --offscreen, save the rendered frame to this PNG.",
)
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    help="Also write logs to this file.",
)
@click.option(
    "--load-config",
    type=str,
    help="Load viewer settings from config (name or path to .json file).",
)
@click.option(
    "--save-config",
    type=str,
    help="Save current viewer settings to config (name or path to .json file).",
)
@click.version_option(package_name="texture-ripper")
def main(
    images: tuple[Path, ...],
    fps: float | None,
    width: int | None,
    height: int | None,
    offscreen: bool,
    screenshot: Path | None,
    debug: bool,
    log_file: str | None,
    load_config: str | None,
    save_config: str | None,
) -> None:
    """Inspect images on a zoomable, pannable canvas.

    Scroll to zoom at the cursor, drag to pan, click to report the pixel
    under the cursor, press O to open another image.

    Args:
        images: Image files placed at the world origin, last on top.
        fps: Frame rate of the input loop.
        width: Window width.
        height: Window height.
        offscreen: If True, render one frame headlessly and exit.
        screenshot: Where to save the offscreen frame.
        debug: If True, enable debug logging.
        log_file: Optional log file.
        load_config: Config name or .json path to start from.
        save_config: Config name or .json path to save the settings to.
    """
    from .config import ConfigManager, ViewerConfig
    from .logging_config import setup_logging

    setup_logging(logging.DEBUG if debug else logging.INFO, log_file)

    config_manager = ConfigManager()
    if load_config:
        try:
            config = config_manager.resolve(load_config)
        except (OSError, ValueError) as exc:
            _eprint(f"[texture-ripper] Could not load config {load_config}: {exc}")
            raise SystemExit(2) from exc
        _eprint(f"[texture-ripper] Loaded config from: {load_config}")
    else:
        config = ViewerConfig()

    # Explicit CLI options override the config
    if fps is not None:
        config.fps = fps
    if width is not None:
        config.window_width = width
    if height is not None:
        config.window_height = height

    if save_config:
        saved_path = config_manager.store(config, save_config)
        _eprint(f"[texture-ripper] Saved config to: {saved_path}")

    if screenshot is not None and not offscreen:
        _eprint("[texture-ripper] --screenshot requires --offscreen")
        raise SystemExit(2)

    from .controller import Controller
    from .image_registry import ImageRegistry
    from .renderer import Visualizer

    registry = ImageRegistry()
    for path in images:
        registry.load(path)

    if offscreen:
        vis = Visualizer(*config.window_size, mode="offscreen")
        controller = Controller(registry, vis, config)
        registry.wait(timeout=LOAD_TIMEOUT)
        if registry.has_pending:
            _eprint("[texture-ripper] Some images are still loading; rendering without them")
        controller.step()
        arr = vis.read_pixels()
        _eprint(f"[texture-ripper] Rendered one frame offscreen: shape={arr.shape}")
        if screenshot is not None:
            from PIL import Image

            Image.fromarray(arr).save(screenshot)
            _eprint(f"[texture-ripper] Saved screenshot to: {screenshot}")
        vis.close()
        registry.close()
        return

    import asyncio

    from .interactive import InteractiveControls

    async def _run() -> None:
        # The canvas must be created inside the running loop it schedules on.
        vis = Visualizer(*config.window_size, mode="desktop", title=config.title)
        controller = Controller(registry, vis, config)
        controls = InteractiveControls(controller, vis.canvas)
        controls.attach_handlers()
        controls.set_quit_callback(controller.stop)

        _eprint("[texture-ripper] Viewer ready. Press 'q' to quit.")
        _eprint("Controls: Wheel=zoom, Drag=pan, Click=pick pixel, O=open image, R=reset view")

        try:
            await controller.run()
        finally:
            controls.detach_handlers()
            vis.close()
            _eprint("[texture-ripper] Viewer closed.")

    asyncio.run(_run())


if __name__ == "__main__":  # pragma: no cover
    main()
