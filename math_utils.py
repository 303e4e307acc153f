import math
import numpy as np


def np_rotate_matrix_y(theta):
    """
    Return the 3x3 matrix rotating the (x, z) plane by theta radians about
    the vertical axis. y is left untouched.
    """
    c = math.cos(theta)
    s = math.sin(theta)
    return np.array([[c, 0.0, s],
                     [0.0, 1.0, 0.0],
                     [-s, 0.0, c]])


def np_rotate_y(points, theta):
    # points is (N, 3); row vectors, so multiply by the transpose
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    return points @ np_rotate_matrix_y(theta).T
