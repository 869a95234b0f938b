"""Drive the view engine without a window.

This example shows how to:
- Place images in a registry
- Feed synthetic input events through `tick`
- Read back the view state and the picked pixels
"""

from texture_ripper import ImageRegistry, Session, tick
from texture_ripper.events import PointerDown, PointerMove, PointerUp, Wheel

WINDOW = (800, 600)


def main():
    registry = ImageRegistry()
    registry.add(pixel_dimensions=(200, 100))
    registry.add(pixel_dimensions=(50, 50), translation=(80.0, 0.0))
    images = list(registry)

    session = Session()

    # Two wheel ticks toward the top-right image
    result = tick(session, [Wheel(480, 300, dy=-1), Wheel(480, 300, dy=-1)], images, WINDOW)
    print(f"Zoomed {result.zoom_steps} steps, scale={session.viewport.scale:.3f}")

    # Click: resolves the pixel and starts a drag
    result = tick(session, [PointerDown(480, 300)], images, WINDOW)
    for hit in result.hits:
        print(f"Clicked image {hit.image_id} at pixel {hit.pixel}")

    # Drag 100 screen units to the left over a few frames, then release
    for x in (460, 430, 400, 380):
        tick(session, [PointerMove(x, 300, buttons=(1,))], images, WINDOW)
    tick(session, [PointerUp(380, 300)], images, WINDOW)
    print(f"Translation after drag: {session.viewport.translation.round(3).tolist()}")


if __name__ == "__main__":
    main()
