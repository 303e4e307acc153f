import logging
import os
import time
from datetime import datetime

import numpy as np
import taichi as ti

from animation import Animation, FrameScheduler
from canvas import Canvas
import __main__

logger = logging.getLogger(__name__)

SCREEN_RES = (1280, 560)
DEVICE_PIXEL_RATIO = 1.0
HELP_MSG = '''
====================================================
Voxel Dome Preview:
* Press P to save a screenshot
* Close the window to quit
====================================================
'''


def split_width(total, parts):
    """Integer widths of ``parts`` side-by-side panels filling ``total``."""
    base = total // parts
    widths = [base] * parts
    widths[-1] += total - base * parts
    return widths


class Scene:
    """
    Window host for a row of previews.

    Every preview draws into its own ``Canvas``; each presented window frame
    advances the shared ``FrameScheduler`` once and blits the canvases next
    to each other.
    """

    def __init__(self, screen_res=SCREEN_RES,
                 device_pixel_ratio=DEVICE_PIXEL_RATIO):
        ti.init(arch=ti.vulkan)
        print(HELP_MSG)
        self.window = ti.ui.Window("Voxel Dome Preview", screen_res,
                                   vsync=True)
        self.dpr = device_pixel_ratio
        self.scheduler = FrameScheduler()
        self.previews = []
        self.animations = []
        if not os.path.exists('screenshot'):
            os.makedirs('screenshot')

    def _panel_sizes(self, count):
        w, h = self.window.get_window_shape()
        return [(pw / self.dpr, h / self.dpr)
                for pw in split_width(w, count)]

    def add_preview(self, factory, name):
        """
        Create a preview with ``factory(canvas)`` and start animating it.

        A preview that cannot be set up is logged and skipped; the others
        keep running.
        """
        w, h = self._panel_sizes(len(self.previews) + 1)[-1]
        try:
            canvas = Canvas(w, h, self.dpr)
            preview = factory(canvas)
        except Exception:
            logger.exception("Could not set up preview %r", name)
            return None

        self.previews.append(preview)
        animation = Animation(self.scheduler, preview.frame, name=name)
        self.animations.append(animation)
        animation.start()
        return animation

    def _sync_sizes(self):
        if not self.previews:
            return
        # Only records the new size; canvases pick it up on their next frame
        for preview, size in zip(self.previews,
                                 self._panel_sizes(len(self.previews))):
            preview.canvas.request_resize(*size)

    def compose(self):
        if not self.previews:
            w, h = self.window.get_window_shape()
            return np.zeros((w, h, 3), dtype=np.float32)
        images = [preview.canvas.to_image() for preview in self.previews]
        height = min(img.shape[1] for img in images)
        return np.ascontiguousarray(
            np.concatenate([img[:, :height] for img in images], axis=0))

    def stop(self):
        for animation in self.animations:
            animation.stop()

    def finish(self):
        canvas = self.window.get_canvas()
        start = time.monotonic()
        idle_reported = False
        while self.window.running:
            self._sync_sizes()
            elapsed_ms = (time.monotonic() - start) * 1000.0
            self.scheduler.tick(elapsed_ms)
            if len(self.scheduler) == 0 and not idle_reported:
                logger.warning("No preview is animating, showing last frames")
                idle_reported = True

            img = self.compose()
            if self.window.is_pressed('p'):
                timestamp = datetime.today().strftime('%Y-%m-%d-%H%M%S')
                dirpath = os.getcwd()
                main_filename = os.path.split(__main__.__file__)[1]
                fname = os.path.join(dirpath, 'screenshot',
                                     f"{main_filename}-{timestamp}.jpg")
                ti.tools.image.imwrite(img, fname)
                print(f"Screenshot has been saved to {fname}")
            canvas.set_image(img)
            self.window.show()
        self.stop()
