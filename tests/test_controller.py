"""Tests for the frame loop controller (headless)."""

import asyncio
import time

import numpy as np
import pytest
from PIL import Image

from texture_ripper.config import ViewerConfig
from texture_ripper.controller import Controller
from texture_ripper.events import PointerDown, PointerMove, PointerUp, Wheel


def test_step_processes_queued_events(registry):
    controller = Controller(registry)
    hits = []
    controller.on_pixel_hit = hits.append

    controller.push_event(PointerDown(450.0, 325.0))
    controller.push_event(None)
    result = controller.step(dt=0.016)

    assert result.clicks == 1
    assert [h.pixel for h in hits] == [(150, 75)]
    assert controller.session.frame == 1


def test_events_are_consumed_once(registry):
    controller = Controller(registry)
    controller.push_event(Wheel(400.0, 300.0, dy=-1.0))

    assert controller.step().zoom_steps == 1
    assert controller.step().zoom_steps == 0
    assert controller.viewport.scale == pytest.approx(0.8)


def test_config_drives_engines():
    config = ViewerConfig(zoom_in_factor=0.5, zoom_out_factor=2.0, min_scale=0.25, pan_button=3)
    controller = Controller(config=config)

    for _ in range(5):
        controller.push_event(Wheel(400.0, 300.0, dy=-1.0))
    controller.step()
    assert controller.viewport.scale == 0.25

    controller.push_event(PointerDown(400.0, 300.0, button=1))
    controller.step()
    assert not controller.session.pan.active

    controller.push_event(PointerDown(400.0, 300.0, button=3))
    controller.step()
    assert controller.session.pan.active


def test_window_size_from_config():
    controller = Controller(config=ViewerConfig(window_width=1024, window_height=768))
    assert controller.window_size() == (1024.0, 768.0)


def test_reset_view_applies_on_next_step():
    controller = Controller()
    controller.push_event(PointerDown(100.0, 100.0))
    controller.push_event(PointerMove(150.0, 100.0, buttons=(1,)))
    controller.step()
    assert controller.session.pan.active

    controller.reset_view()
    assert controller.viewport.translation.tolist() == [-50.0, 0.0]

    controller.step()
    assert controller.viewport.translation.tolist() == [0.0, 0.0]
    assert not controller.session.pan.active


def test_focus_lost_ends_drag():
    controller = Controller()
    controller.push_event(PointerDown(100.0, 100.0))
    controller.step()

    controller.focus_lost()
    controller.step()

    assert not controller.session.pan.active


def test_open_image_becomes_ready(gradient_png):
    controller = Controller()
    image = controller.open_image(gradient_png)
    try:
        controller.registry.wait(timeout=10)
        assert image.is_ready

        controller.push_event(PointerDown(400.0, 300.0))
        result = controller.step()
        assert result.hits[0].pixel == (10, 5)
    finally:
        controller.registry.close()


def test_open_image_ready_callback(gradient_png):
    controller = Controller()
    ready = []
    controller.on_image_ready = ready.append
    controller.open_image(gradient_png)
    try:
        deadline = time.monotonic() + 10
        while not ready and time.monotonic() < deadline:
            controller.step()
            time.sleep(0.01)
        assert len(ready) == 1
        assert ready[0].pixel_dimensions == (20, 10)
    finally:
        controller.registry.close()


def test_oversized_image_does_not_stop_the_loop(tmp_path, monkeypatch):
    path = tmp_path / "atlas.png"
    Image.new("RGB", (400, 400)).save(path)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10_000)

    controller = Controller()
    ready = []
    controller.on_image_ready = ready.append
    controller.open_image(path)
    try:
        deadline = time.monotonic() + 10
        while controller.registry.has_pending and time.monotonic() < deadline:
            controller.step()
            time.sleep(0.01)

        controller.push_event(PointerDown(400.0, 300.0))
        result = controller.step()

        assert ready == []
        assert len(controller.registry) == 0
        assert result.clicks == 1
        assert result.hits == []
    finally:
        controller.registry.close()


def test_run_stops_when_requested():
    controller = Controller(config=ViewerConfig(fps=200.0))

    async def scenario():
        task = asyncio.create_task(controller.run())
        controller.push_event(PointerDown(100.0, 100.0))
        controller.push_event(PointerMove(120.0, 100.0, buttons=(1,)))
        controller.push_event(PointerUp(120.0, 100.0))
        await asyncio.sleep(0.05)
        controller.stop()
        await asyncio.wait_for(task, timeout=5)

    asyncio.run(scenario())

    np.testing.assert_allclose(controller.viewport.translation, [-20.0, 0.0])
    assert controller.session.frame >= 1


class FakeVisualizer:
    """Stands in for the pygfx renderer."""

    def __init__(self):
        self.synced = []
        self.views = []
        self.draws = 0
        self.closed = False

    def get_window_size(self):
        return (400.0, 200.0)

    def sync_images(self, images):
        self.synced.append([img.image_id for img in images])

    def set_view(self, viewport, window_size=None):
        self.views.append((viewport.translation.copy(), viewport.scale))

    def draw(self):
        self.draws += 1

    def is_closed(self):
        return self.closed


def test_step_syncs_visualizer(registry):
    vis = FakeVisualizer()
    controller = Controller(registry, vis)

    # Window is 400x200, so world (50, 25) is screen (250, 125).
    controller.push_event(PointerDown(250.0, 125.0))
    result = controller.step()

    assert result.hits[0].pixel == (150, 75)
    assert vis.synced == [[0]]
    assert vis.draws == 1
    assert vis.views[0][1] == 1.0


def test_run_stops_when_window_closes():
    vis = FakeVisualizer()
    vis.closed = True
    controller = Controller(visualizer=vis)

    asyncio.run(asyncio.wait_for(controller.run(), timeout=5))

    assert controller.session.frame == 0
