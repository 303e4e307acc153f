import math

import numpy as np

from math_utils import np_rotate_y

# Oblique projection ratios relative to the base unit scale. These are visual
# tuning values picked so voxels read as upright blocks; they are not derived
# from a true axonometric camera. Changing any of them changes the dome's
# silhouette.
ISO_X_SCALE = 0.95
ISO_DIAGONAL_SCALE = 0.48
ISO_HEIGHT_SCALE = 1.02

# Weight of height in the painter's ordering key
DEPTH_HEIGHT_WEIGHT = 0.35

SHADE_BASE = 0.75
SHADE_RANGE = 0.25
SHADE_RADIUS_EPSILON = 0.01

BLOCK_DTYPE = np.dtype([('x', np.float64), ('y', np.float64),
                        ('depth', np.float64), ('shade', np.float64)])


def iso_project(points, scale, cx, cy):
    """Map rotated (N, 3) points to screen (X, Y) arrays."""
    p = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    x, y, z = p[:, 0], p[:, 1], p[:, 2]
    sx = (x - z) * scale * ISO_X_SCALE
    sy = (x + z) * scale * ISO_DIAGONAL_SCALE - y * scale * ISO_HEIGHT_SCALE
    return cx + sx, cy + sy


def depth_key(points):
    p = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    return (p[:, 0] + p[:, 2]) + p[:, 1] * DEPTH_HEIGHT_WEIGHT


def shade(points, angle, radius):
    # Brightness follows the rotated x/z position weighted by cos/sin of the
    # angle, so the side turned towards the viewer reads lighter.
    p = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    norm = radius + SHADE_RADIUS_EPSILON
    return SHADE_BASE + SHADE_RANGE * (math.cos(angle) * (p[:, 0] / norm) +
                                       math.sin(angle) * (p[:, 2] / norm))


def project(voxels, angle, scale, origin_x, origin_y, radius=None):
    """
    Rotate every voxel about the vertical axis by ``angle`` and project it.

    Returns a ``BLOCK_DTYPE`` array with one record per input voxel, in input
    order. ``radius`` normalizes the shading term and defaults to the largest
    coordinate magnitude in ``voxels``.
    """
    voxels = np.asarray(voxels).reshape(-1, 3)
    blocks = np.zeros(len(voxels), dtype=BLOCK_DTYPE)
    if len(voxels) == 0:
        return blocks
    if radius is None:
        radius = float(np.abs(voxels).max())

    p = np_rotate_y(voxels, angle)
    blocks['x'], blocks['y'] = iso_project(p, scale, origin_x, origin_y)
    blocks['depth'] = depth_key(p)
    blocks['shade'] = shade(p, angle, radius)
    return blocks
