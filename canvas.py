import math

import numpy as np
import taichi as ti


def rgba(r, g, b, a=1.0):
    """8-bit channel values -> (float rgb array, alpha)."""
    return np.array((r, g, b), dtype=np.float32) / 255.0, float(a)


BACKGROUND = rgba(15, 18, 23)
BLOCK_FILL = rgba(255, 122, 24, 0.95)
BLOCK_STROKE = rgba(0, 0, 0, 0.35)
BLOCK_HIGHLIGHT = rgba(255, 154, 61, 0.18)

# Below this size a block is a flat square, no outline or highlight band
BLOCK_DETAIL_MIN_SIZE = 4
HIGHLIGHT_FRACTION = 0.32


@ti.kernel
def paint_rects(pixels: ti.template(), rects: ti.types.ndarray(),
                colors: ti.types.ndarray()):
    # Rectangles are painted strictly in order; later ones cover earlier ones
    h = pixels.shape[0]
    w = pixels.shape[1]
    ti.loop_config(serialize=True)
    for n in range(rects.shape[0]):
        x0 = ti.max(rects[n, 0], 0)
        y0 = ti.max(rects[n, 1], 0)
        x1 = ti.min(rects[n, 2], w)
        y1 = ti.min(rects[n, 3], h)
        c = ti.Vector([colors[n, 0], colors[n, 1], colors[n, 2]])
        a = colors[n, 3]
        if x1 > x0 and y1 > y0:
            for i, j in ti.ndrange((y0, y1), (x0, x1)):
                if a >= 1.0:
                    pixels[i, j] = c
                else:
                    pixels[i, j] += (c - pixels[i, j]) * a


@ti.kernel
def fill_ellipse_mask(pixels: ti.template(), x0: ti.i32, y0: ti.i32,
                      x1: ti.i32, y1: ti.i32, cx: ti.f32, cy: ti.f32,
                      rx: ti.f32, ry: ti.f32, inv_dpr: ti.f32, r: ti.f32,
                      g: ti.f32, b: ti.f32, a: ti.f32):
    c = ti.Vector([r, g, b])
    for i, j in ti.ndrange((y0, y1), (x0, x1)):
        # pixel centres, in logical units
        u = ((j + 0.5) * inv_dpr - cx) / rx
        v = ((i + 0.5) * inv_dpr - cy) / ry
        if u * u + v * v <= 1.0:
            pixels[i, j] += (c - pixels[i, j]) * a


class Canvas:
    """
    Framebuffer standing in for one preview's drawing surface.

    ``pixels`` is an RGB ``ti.Vector.field`` of shape (rows, cols) with a
    top-left origin. All drawing calls take logical coordinates; the field is
    ``device_pixel_ratio`` times larger on each axis. Resizes requested from
    outside are only applied by ``measure_current_size``, which a preview
    calls once at the start of every frame.
    """

    def __init__(self, width, height, device_pixel_ratio=1.0):
        if device_pixel_ratio <= 0:
            raise ValueError(
                f"device_pixel_ratio must be positive, got {device_pixel_ratio}")
        if width < 0 or height < 0:
            raise ValueError(f"Invalid canvas size {width}x{height}")
        self.dpr = float(device_pixel_ratio)
        self._pending_size = None
        self._tree = None
        self._allocate(width, height)

    def _allocate(self, width, height):
        if self._tree is not None:
            self._tree.destroy()
        self.width = width
        self.height = height
        w = max(1, int(math.floor(width * self.dpr)))
        h = max(1, int(math.floor(height * self.dpr)))

        fb = ti.FieldsBuilder()
        self.pixels = ti.Vector.field(3, dtype=ti.f32)
        fb.dense(ti.ij, (h, w)).place(self.pixels)
        self._tree = fb.finalize()

    @property
    def pixel_size(self):
        h, w = self.pixels.shape
        return w, h

    def request_resize(self, width, height):
        if width < 0 or height < 0:
            raise ValueError(f"Invalid canvas size {width}x{height}")
        self._pending_size = (width, height)

    def measure_current_size(self):
        if self._pending_size is not None:
            size, self._pending_size = self._pending_size, None
            if size != (self.width, self.height):
                self._allocate(*size)
        return self.width, self.height

    # Primitives

    def _to_pixels(self, values):
        return np.floor(np.asarray(values, dtype=np.float64) *
                        self.dpr).astype(np.int32)

    def fill_rects(self, rects, style, alpha=1.0):
        """Paint logical (x, y, w, h) rows with one style, in order."""
        rects = np.asarray(rects, dtype=np.float64).reshape(-1, 4)
        if len(rects) == 0:
            return
        x, y, w, h = rects.T
        px = np.stack([self._to_pixels(x), self._to_pixels(y),
                       self._to_pixels(x + w), self._to_pixels(y + h)],
                      axis=1)
        color, a = style
        colors = np.empty((len(px), 4), dtype=np.float32)
        colors[:, :3] = color
        colors[:, 3] = a * alpha
        paint_rects(self.pixels, np.ascontiguousarray(px), colors)

    def fill_rect(self, x, y, w, h, style, alpha=1.0):
        self.fill_rects([(x, y, w, h)], style, alpha)

    def fill_ellipse(self, cx, cy, rx, ry, style, alpha=1.0):
        if rx <= 0 or ry <= 0:
            return
        pw, ph = self.pixel_size
        x0, y0, x1, y1 = self._to_pixels(
            (cx - rx, cy - ry, cx + rx + 1, cy + ry + 1))
        x0, x1 = max(int(x0), 0), min(int(x1), pw)
        y0, y1 = max(int(y0), 0), min(int(y1), ph)
        if x1 <= x0 or y1 <= y0:
            return
        color, a = style
        fill_ellipse_mask(self.pixels, x0, y0, x1, y1, cx, cy, rx, ry,
                          1.0 / self.dpr, *color.tolist(), a * alpha)

    def draw_grid_lines(self, ox, oy, cell, count, style):
        line = 1.0 / self.dpr
        span = cell * count
        rects = []
        for i in range(count + 1):
            rects.append((ox + i * cell, oy, line, span))
            rects.append((ox, oy + i * cell, span, line))
        self.fill_rects(rects, style)

    # Frame-level operations

    def clear_and_fill_background(self, width, height):
        self.fill_rect(0, 0, width, height, BACKGROUND)

    def draw_blocks(self, xs, ys, size, alphas):
        """
        Draw one shaded block per (x, y), in the order given.

        Each block is a fill, and from ``BLOCK_DETAIL_MIN_SIZE`` up also a one
        pixel outline and a highlight band along its top. ``alphas`` scales
        every layer of its block.
        """
        xs = np.asarray(xs, dtype=np.float64).reshape(-1)
        ys = np.asarray(ys, dtype=np.float64).reshape(-1)
        alphas = np.broadcast_to(np.asarray(alphas, dtype=np.float64),
                                 xs.shape)
        if len(xs) == 0:
            return

        x0, y0 = self._to_pixels(xs), self._to_pixels(ys)
        x1, y1 = self._to_pixels(xs + size), self._to_pixels(ys + size)
        layers = [((x0, y0, x1, y1), BLOCK_FILL)]
        if size >= BLOCK_DETAIL_MIN_SIZE:
            lw = max(1, int(round(self.dpr)))
            band = max(1, int(math.floor(size * HIGHLIGHT_FRACTION)))
            # crisp separation between neighbouring blocks
            layers += [
                ((x0, y0, x1, y0 + lw), BLOCK_STROKE),
                ((x0, y1 - lw, x1, y1), BLOCK_STROKE),
                ((x0, y0 + lw, x0 + lw, y1 - lw), BLOCK_STROKE),
                ((x1 - lw, y0 + lw, x1, y1 - lw), BLOCK_STROKE),
                ((x0, y0, x1, self._to_pixels(ys + band)), BLOCK_HIGHLIGHT),
            ]

        n, k = len(xs), len(layers)
        rects = np.empty((n, k, 4), dtype=np.int32)
        colors = np.empty((n, k, 4), dtype=np.float32)
        for layer, (rect, (color, a)) in enumerate(layers):
            rects[:, layer] = np.stack(rect, axis=1)
            colors[:, layer, :3] = color
            colors[:, layer, 3] = a * alphas
        paint_rects(self.pixels, rects.reshape(-1, 4), colors.reshape(-1, 4))

    def draw_unit_block(self, x, y, size, alpha=1.0):
        self.draw_blocks([x], [y], size, [alpha])

    def to_numpy(self):
        """(rows, cols, 3) copy with a top-left origin."""
        return self.pixels.to_numpy()

    def to_image(self):
        """(W, H, 3) copy with a bottom-left origin, for ti.ui canvases."""
        return np.ascontiguousarray(np.flipud(self.to_numpy()).transpose(1, 0, 2))
