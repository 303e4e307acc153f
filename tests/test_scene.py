import logging

import numpy as np

from animation import FrameScheduler
from previews import DomePreview, RingPreview
from scene import Scene, split_width


class StubCanvas:

    def __init__(self):
        self.images = []

    def set_image(self, img):
        self.images.append(img)


class StubWindow:

    def __init__(self, shape, frames=0):
        self.shape = shape
        self.frames_left = frames
        self.canvas = StubCanvas()

    @property
    def running(self):
        return self.frames_left > 0

    def get_window_shape(self):
        return self.shape

    def get_canvas(self):
        return self.canvas

    def is_pressed(self, key):
        return False

    def show(self):
        self.frames_left -= 1


def make_scene(shape=(200, 100), frames=0):
    # Skips __init__, which opens a real window
    scene = object.__new__(Scene)
    scene.window = StubWindow(shape, frames)
    scene.dpr = 1.0
    scene.scheduler = FrameScheduler()
    scene.previews = []
    scene.animations = []
    return scene


def broken_preview(canvas):
    raise RuntimeError("no voxels for you")


def test_split_width_gives_remainder_to_last_panel():
    assert split_width(7, 2) == [3, 4]
    assert split_width(200, 1) == [200]
    assert sum(split_width(1281, 3)) == 1281


def test_failing_preview_is_skipped_and_others_keep_running(caplog):
    scene = make_scene()
    with caplog.at_level(logging.ERROR, logger='scene'):
        assert scene.add_preview(broken_preview, 'broken') is None
    assert any("broken" in r.getMessage() for r in caplog.records)
    assert scene.previews == []

    animation = scene.add_preview(DomePreview, 'dome')
    for t in (0.0, 16.0, 32.0):
        scene.scheduler.tick(t)
    assert animation.frames == 3
    assert animation.running


def test_new_preview_canvas_uses_its_final_panel_width():
    scene = make_scene()
    scene.add_preview(RingPreview, 'ring')
    scene.add_preview(DomePreview, 'dome')
    ring, dome = scene.previews
    assert (ring.canvas.width, ring.canvas.height) == (200, 100)
    assert (dome.canvas.width, dome.canvas.height) == (100, 100)


def test_resize_is_deferred_to_the_next_frame():
    scene = make_scene()
    scene.add_preview(RingPreview, 'ring')
    scene.add_preview(DomePreview, 'dome')
    ring = scene.previews[0]

    scene._sync_sizes()
    assert ring.canvas.pixel_size == (200, 100)
    scene.scheduler.tick(0.0)
    assert ring.canvas.pixel_size == (100, 100)

    scene.window.shape = (300, 120)
    scene._sync_sizes()
    scene.scheduler.tick(16.0)
    assert [p.canvas.pixel_size for p in scene.previews] == [(150, 120),
                                                               (150, 120)]


def test_sync_sizes_without_previews_is_a_no_op():
    scene = make_scene()
    scene._sync_sizes()
    assert scene.previews == []


def test_compose_fills_the_window():
    scene = make_scene()
    empty = scene.compose()
    assert empty.shape == (200, 100, 3)
    assert not empty.any()

    scene.add_preview(RingPreview, 'ring')
    scene.add_preview(DomePreview, 'dome')
    scene._sync_sizes()
    scene.scheduler.tick(0.0)
    img = scene.compose()
    assert img.shape == (200, 100, 3)
    assert img.flags['C_CONTIGUOUS']
    assert np.isfinite(img).all()


def test_stop_halts_every_animation():
    scene = make_scene()
    scene.add_preview(RingPreview, 'ring')
    scene.add_preview(DomePreview, 'dome')
    scene.stop()
    assert len(scene.scheduler) == 0
    assert not any(a.running for a in scene.animations)


def test_finish_presents_frames_and_stops_animations():
    scene = make_scene(frames=3)
    animation = scene.add_preview(RingPreview, 'ring')
    scene.finish()
    assert animation.frames == 3
    assert len(scene.window.canvas.images) == 3
    assert scene.window.canvas.images[-1].shape == (200, 100, 3)
    assert not animation.running


def test_finish_warns_once_when_nothing_animates(caplog):
    scene = make_scene(frames=4)
    with caplog.at_level(logging.WARNING, logger='scene'):
        scene.finish()
    idle = [r for r in caplog.records if "No preview" in r.getMessage()]
    assert len(idle) == 1
