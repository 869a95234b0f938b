"""Interactive controls for keyboard and mouse input."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from .events import from_canvas_event

if TYPE_CHECKING:
    from .controller import Controller

logger = logging.getLogger(__name__)

POINTER_EVENT_TYPES = ("pointer_down", "pointer_move", "pointer_up", "pointer_leave", "wheel")


def ask_image_path(extensions: list[str]) -> Optional[str]:
    """Show a native file picker filtered to the given image extensions.

    Returns:
        The chosen path, or None if the dialog was cancelled.
    """
    import tkinter as tk
    from tkinter import filedialog

    root = tk.Tk()
    root.withdraw()
    try:
        patterns = " ".join(f"*.{ext}" for ext in extensions)
        path = filedialog.askopenfilename(
            title="Open image", filetypes=[("Image", patterns)]
        )
    finally:
        root.destroy()
    return path or None


class InteractiveControls:
    """Handles keyboard and mouse events for the viewer.

    Keyboard shortcuts:
    - O: Open an image file
    - R: Reset the view
    - Q/Escape: Quit

    Mouse controls:
    - Mouse wheel: Zoom in/out at the cursor position
    - Click: Report the image pixel under the cursor
    - Click and drag: Pan the view
    """

    def __init__(
        self,
        controller: Controller,
        canvas=None,
        ask_path: Callable[[list[str]], Optional[str]] = ask_image_path,
    ):
        """Initialize interactive controls.

        Args:
            controller: The Controller receiving input.
            canvas: The render canvas to attach event handlers to.
            ask_path: Function prompting the user for an image path.
        """
        self.controller = controller
        self.canvas = canvas
        self.ask_path = ask_path
        self._handlers_attached = False
        self._quit_callback: Callable[[], None] | None = None

    def attach_handlers(self) -> None:
        """Attach event handlers to the canvas."""
        if not self.canvas or self._handlers_attached:
            return

        if hasattr(self.canvas, "add_event_handler"):
            self.canvas.add_event_handler(self._on_pointer, *POINTER_EVENT_TYPES)
            self.canvas.add_event_handler(self._on_key, "key_down")
            self._handlers_attached = True

    def detach_handlers(self) -> None:
        """Detach event handlers from the canvas."""
        if not self.canvas or not self._handlers_attached:
            return

        if hasattr(self.canvas, "remove_event_handler"):
            self.canvas.remove_event_handler(self._on_pointer, *POINTER_EVENT_TYPES)
            self.canvas.remove_event_handler(self._on_key, "key_down")
            self._handlers_attached = False

    def set_quit_callback(self, callback: Callable[[], None]) -> None:
        """Set a callback to be called when quit is requested."""
        self._quit_callback = callback

    def _on_pointer(self, event) -> None:
        """Queue pointer and wheel events for the next tick."""
        self.controller.push_event(from_canvas_event(event))

    def _open_image(self) -> None:
        path = self.ask_path(self.controller.config.image_filters)
        if path is None:
            return
        logger.info("Opening %s", path)
        self.controller.open_image(path)

    def _on_key(self, event) -> None:
        """Handle keyboard events.

        Args:
            event: The keyboard event.
        """
        key = event.get("key", "")

        if key in ("o", "O"):
            self._open_image()

        elif key in ("r", "R"):
            self.controller.reset_view()

        elif key in ("q", "Q", "Escape"):
            if self._quit_callback:
                self._quit_callback()
            else:
                logger.info("Quit requested")
