"""Geographic to globe coordinate transforms."""

import math
from typing import NamedTuple

import numpy as np

DEG_TO_RAD = math.pi / 180.0


class Vec3(NamedTuple):
    x: float
    y: float
    z: float


def project(radius: float, lat: float, lng: float) -> Vec3:
    """Convert latitude/longitude (degrees) to a point on a sphere.

    Globe coordinate system:
    - Y: up, north pole at (0, radius, 0)
    - Z: toward longitude 0 on the equator
    - X: toward longitude 90 on the equator

    Out-of-range angles are not rejected; the trig functions wrap them.
    """
    colat = (90.0 - lat) * DEG_TO_RAD
    lng_rad = lng * DEG_TO_RAD
    sin_colat = math.sin(colat)
    return Vec3(
        radius * sin_colat * math.sin(lng_rad),
        radius * math.cos(colat),
        radius * sin_colat * math.cos(lng_rad),
    )


def project_array(radius: float, lats: np.ndarray, lngs: np.ndarray) -> np.ndarray:
    """Vectorized :func:`project`. Returns an (N, 3) float64 array."""
    colat = (90.0 - np.asarray(lats, dtype=np.float64)) * DEG_TO_RAD
    lng_rad = np.asarray(lngs, dtype=np.float64) * DEG_TO_RAD
    sin_colat = np.sin(colat)
    return np.column_stack((
        radius * sin_colat * np.sin(lng_rad),
        radius * np.cos(colat),
        radius * sin_colat * np.cos(lng_rad),
    ))


def project_positions(radius: float, positions) -> np.ndarray:
    """Project a sequence of (lng, lat) positions to an (N, 3) array."""
    pts = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
    return project_array(radius, pts[:, 1], pts[:, 0])
