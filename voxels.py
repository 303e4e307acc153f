import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)

# Half a voxel of slack so unit cubes round onto the continuous sphere surface
SURFACE_OFFSET = 0.5


@dataclass(frozen=True)
class ShellParams:
    radius: int = 11
    thickness: int = 1
    filled: bool = False

    def validated(self):
        """
        Clamp degenerate values to the smallest valid shell: radius >= 1 and
        1 <= thickness <= radius + 1. Logs once when something was changed.
        """
        radius = max(1, int(self.radius))
        thickness = min(max(1, int(self.thickness)), radius + 1)
        if (radius, thickness) != (self.radius, self.thickness):
            logger.warning(
                "Invalid hemisphere parameters radius=%s thickness=%s, "
                "using radius=%d thickness=%d", self.radius, self.thickness,
                radius, thickness)
        return ShellParams(radius=radius, thickness=thickness,
                           filled=bool(self.filled))


def build_hemisphere_voxels(radius, filled=False, thickness=1):
    """
    Voxelize the upper half (y >= 0) of a sphere of the given radius.

    A point is kept when its distance d from the centre satisfies
    ``inner <= d <= outer`` with ``outer = radius + 0.5`` and
    ``inner = radius - thickness + 0.5``; ``filled`` drops the inner test.

    The result is an (N, 3) integer array of (x, y, z) rows in enumeration
    order (y outermost, then z, then x). It is marked read-only since the same
    set is shared by every frame.
    """
    r = int(radius)
    if r < 0:
        vox = np.empty((0, 3), dtype=np.int32)
        vox.flags.writeable = False
        return vox

    ys = np.arange(0, r + 1)
    zs = np.arange(-r, r + 1)
    xs = np.arange(-r, r + 1)
    y, z, x = np.meshgrid(ys, zs, xs, indexing='ij')
    d = np.sqrt(x * x + y * y + z * z)

    outer = r + SURFACE_OFFSET
    place = d <= outer
    if not filled:
        inner = (r - thickness) + SURFACE_OFFSET
        place &= d >= inner

    vox = np.stack([x[place], y[place], z[place]], axis=1).astype(np.int32)
    vox.flags.writeable = False
    return vox
