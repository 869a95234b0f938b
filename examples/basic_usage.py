"""Basic usage example for texture-ripper.

This example opens a window with one image, and prints the pixel under the
cursor on every click.
"""

import asyncio
import sys
from pathlib import Path

from texture_ripper.controller import Controller
from texture_ripper.interactive import InteractiveControls
from texture_ripper.logging_config import setup_logging
from texture_ripper.renderer import Visualizer


async def main(image_path: Path):
    """Show an image and report clicked pixels."""
    setup_logging()

    # Create visualizer and controller
    visualizer = Visualizer(width=800, height=600, mode="desktop")
    controller = Controller(visualizer=visualizer)

    # Report clicks
    controller.on_pixel_hit = lambda hit: print(
        f"Image {hit.image_id}: pixel ({hit.pixel_x}, {hit.pixel_y})"
    )

    # Load the image at the world origin
    controller.open_image(image_path)

    # Wire mouse and keyboard
    controls = InteractiveControls(controller, visualizer.canvas)
    controls.attach_handlers()
    controls.set_quit_callback(controller.stop)

    await controller.run()


if __name__ == "__main__":
    asyncio.run(main(Path(sys.argv[1] if len(sys.argv) > 1 else "path/to/your/image.png")))
