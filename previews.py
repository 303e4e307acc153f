import math

from canvas import rgba
from projection import project
from renderer import Renderer
from voxels import ShellParams, build_hemisphere_voxels

# Blueprint ring
GRID = 32
PAD = 14
GRID_LINE_MIN_CELL = 6
RING_RADIUS_FRACTION = 0.33
RING_THICKNESS = 0.55
PULSE_PERIOD_MS = 900
GRID_LINE = rgba(255, 255, 255, 0.08)

# Voxel dome
DOME_RADIUS = 11
DOME_THICKNESS = 1
ROTATION_PERIOD_MS = 2200
SCALE_DIVISOR = 42
MIN_SCALE = 4
BLOCK_SCALE = 0.9
ORIGIN = (0.5, 0.72)
FLOOR_SHADOW = rgba(0, 0, 0, 0.18)
CAP_HIGHLIGHT = rgba(255, 154, 61, 0.14)


def ring_cells(t, grid=GRID):
    """Grid cells (x, z) lying on the pulsing ring at time t (ms)."""
    mid = (grid - 1) / 2
    # gentle breathing
    pulse = 0.9 + 0.1 * math.sin(t / PULSE_PERIOD_MS)
    r = (grid * RING_RADIUS_FRACTION) * pulse

    cells = []
    for z in range(grid):
        for x in range(grid):
            d = math.hypot(x - mid, z - mid)
            if abs(d - r) <= RING_THICKNESS:
                cells.append((x, z))
    return cells


class RingPreview:

    def __init__(self, canvas):
        self.canvas = canvas

    def frame(self, t):
        canvas = self.canvas
        w, h = canvas.measure_current_size()
        canvas.clear_and_fill_background(w, h)

        s = max(2, math.floor(min((w - PAD * 2) / GRID, (h - PAD * 2) / GRID)))
        ox = math.floor((w - s * GRID) / 2)
        oy = math.floor((h - s * GRID) / 2)

        if s >= GRID_LINE_MIN_CELL:
            canvas.draw_grid_lines(ox, oy, s, GRID, GRID_LINE)

        cells = ring_cells(t)
        canvas.draw_blocks([ox + x * s for x, _ in cells],
                           [oy + z * s for _, z in cells], s - 1, 1.0)


def rotation_angle(t):
    return (t / ROTATION_PERIOD_MS) % (math.pi * 2)


class DomePreview:
    """
    Voxel hemisphere spinning about its vertical axis.

    The voxel set is built once here; each frame only re-projects, re-sorts
    and redraws it.
    """

    def __init__(self, canvas, radius=DOME_RADIUS, thickness=DOME_THICKNESS,
                 filled=False):
        self.canvas = canvas
        self.params = ShellParams(radius, thickness, filled).validated()
        self.voxels = build_hemisphere_voxels(self.params.radius,
                                              filled=self.params.filled,
                                              thickness=self.params.thickness)
        self.renderer = Renderer(canvas)

    def frame(self, t):
        canvas = self.canvas
        w, h = canvas.measure_current_size()
        canvas.clear_and_fill_background(w, h)

        # small floor shadow to ground it
        canvas.fill_ellipse(w * 0.55, h * 0.78, w * 0.18, h * 0.06,
                            FLOOR_SHADOW)

        scale = max(MIN_SCALE, min(w, h) / SCALE_DIVISOR)
        cx = w * ORIGIN[0]
        cy = h * ORIGIN[1]
        a = rotation_angle(t)

        blocks = project(self.voxels, a, scale, cx, cy,
                         radius=self.params.radius)
        s = max(2, math.floor(scale * BLOCK_SCALE))
        self.renderer.render(blocks, s)

        # highlight the apex so it reads as a roof
        canvas.fill_ellipse(cx, cy - (self.params.radius * scale * 1.05),
                            s * 2.3, s * 1.2, CAP_HIGHLIGHT)
