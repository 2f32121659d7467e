"""Mesh building for border rings, point sets, and the coordinate grid."""

import logging
from collections.abc import Iterable, Sequence

import numpy as np

from ..models import Position
from .coords import project_positions
from .models import Mesh

logger = logging.getLogger(__name__)


def ring_segments(ring: Sequence[Position], radius: float, closed: bool = True) -> np.ndarray:
    """Project one ring and return its segments as a (2 * n_segments, 3) array.

    A closed ring of n points gives n segments, the last one joining point
    n-1 back to point 0 whether or not the ring repeats its first point.
    An open ring of n points gives n-1 segments.
    """
    n = len(ring)
    if n == 0:
        return np.zeros((0, 3))
    pts = project_positions(radius, ring)
    if closed:
        starts = pts
        ends = np.roll(pts, -1, axis=0)
    else:
        starts = pts[:-1]
        ends = pts[1:]
    # Interleave: start0, end0, start1, end1, ...
    segments = np.empty((2 * len(starts), 3))
    segments[0::2] = starts
    segments[1::2] = ends
    return segments


def build_ring_mesh(
    rings: Iterable[Sequence[Position]],
    radius: float,
    closed: bool = True,
    name: str = "",
) -> Mesh:
    """Build a line mesh with one segment per consecutive vertex pair of each ring.

    Rings are independent: no vertices are shared between rings, and the
    output order follows the input order exactly.
    """
    parts = [ring_segments(ring, radius, closed) for ring in rings]
    parts = [p for p in parts if len(p)]
    if not parts:
        logger.debug("Ring mesh %r is empty", name)
        return Mesh(primitive="lines", name=name)
    vertices = np.concatenate(parts, axis=0)
    logger.debug("Ring mesh %r: %d rings, %d vertices", name, len(parts), len(vertices))
    return Mesh(vertices=vertices, primitive="lines", name=name)


def build_point_mesh(points: Sequence[Position], radius: float, name: str = "") -> Mesh:
    """Build a point mesh with one vertex per (lng, lat) point, in input order."""
    if len(points) == 0:
        return Mesh(primitive="points", name=name)
    vertices = project_positions(radius, points)
    logger.debug("Point mesh %r: %d vertices", name, len(vertices))
    return Mesh(vertices=vertices, primitive="points", name=name)


def build_graticule_rings(
    lat_step: float = 10.0, lng_step: float = 10.0, resolution: float = 2.0,
) -> list[list[Position]]:
    """Rings for a latitude/longitude grid, suitable for build_ring_mesh.

    Parallels are closed loops at each multiple of ``lat_step`` strictly
    between the poles. Meridians are full great circles (longitude ``lng``
    going north, ``lng + 180`` coming back south), so closing them never
    cuts through the sphere. ``resolution`` is the sampling step in degrees.
    """
    rings: list[list[Position]] = []

    lngs = np.arange(-180.0, 180.0, resolution)
    for lat in np.arange(-90.0 + lat_step, 90.0, lat_step):
        rings.append([(float(lng), float(lat)) for lng in lngs])

    lats_up = np.arange(-90.0, 90.0, resolution)
    lats_down = np.arange(90.0, -90.0, -resolution)
    for lng in np.arange(0.0, 180.0, lng_step):
        ring = [(float(lng), float(lat)) for lat in lats_up]
        ring += [(float(lng) - 180.0, float(lat)) for lat in lats_down]
        rings.append(ring)
    return rings
