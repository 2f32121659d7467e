"""TopoJSON decoding: shared delta-encoded arcs to absolute-coordinate geometries."""

import logging
from typing import Optional

import numpy as np
from pydantic import BaseModel, Field

from ..models import (
    FeatureId,
    GeometryCollection,
    LineStringGeometry,
    MultiLineStringGeometry,
    MultiPointGeometry,
    MultiPolygonGeometry,
    NullGeometry,
    PointGeometry,
    PolygonGeometry,
    Position,
    Topology,
    Transform,
)

logger = logging.getLogger(__name__)


class DecodeError(ValueError):
    """Malformed topology: unresolved arc reference or unknown object."""


class ObjectNotFoundError(DecodeError):
    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(
            f"Topology has no object named {name!r} (available: {', '.join(available) or 'none'})"
        )


class DecodedGeometry(BaseModel):
    """A geometry with absolute coordinates, nested GeoJSON-style by kind.

    - Polygon: list of rings; MultiPolygon: list of polygons
    - LineString: one ring; MultiLineString: list of rings
    - Point: one position; MultiPoint: list of positions
    - GeometryCollection: children in ``geometries``; Null: nothing
    """
    kind: str
    coordinates: list = Field(default_factory=list)
    id: Optional[FeatureId] = None
    properties: dict = Field(default_factory=dict)
    geometries: list["DecodedGeometry"] = Field(default_factory=list)


def _apply_transform(points: np.ndarray, transform: Optional[Transform]) -> np.ndarray:
    if transform is None:
        return points
    return points * np.asarray(transform.scale) + np.asarray(transform.translate)


def _to_positions(points: np.ndarray) -> list[Position]:
    return [(float(x), float(y)) for x, y in points.tolist()]


class ArcTable:
    """Decoded arcs of one topology, resolved by signed index.

    Arcs are decoded on first use: a running sum over the deltas (starting at
    the origin), followed by the topology transform.
    """

    def __init__(self, topology: Topology):
        self._arcs = topology.arcs
        self._transform = topology.transform
        self._decoded: dict[int, list[Position]] = {}

    def __len__(self) -> int:
        return len(self._arcs)

    def _decode(self, index: int) -> list[Position]:
        cached = self._decoded.get(index)
        if cached is not None:
            return cached
        arc = self._arcs[index]
        if not arc:
            points: list[Position] = []
        else:
            absolute = np.cumsum(np.asarray(arc, dtype=np.float64), axis=0)
            points = _to_positions(_apply_transform(absolute, self._transform))
        self._decoded[index] = points
        return points

    def resolve(self, ref: int) -> list[Position]:
        """Return the points of arc ``ref``; a negative ref is ``~ref`` reversed."""
        index = ~ref if ref < 0 else ref
        if index >= len(self._arcs):
            raise DecodeError(
                f"Arc reference {ref} resolves to index {index}, "
                f"but the topology only has {len(self._arcs)} arcs"
            )
        points = self._decode(index)
        return points[::-1] if ref < 0 else list(points)

    def stitch(self, refs: list[int]) -> list[Position]:
        """Concatenate arcs into one ring or line, merging shared junction points."""
        points: list[Position] = []
        for ref in refs:
            arc = self.resolve(ref)
            if points and arc and points[-1] == arc[0]:
                points.pop()
            points.extend(arc)
        return points


def decode_arc(topology: Topology, ref: int) -> list[Position]:
    """Decode a single signed arc reference to absolute positions."""
    return ArcTable(topology).resolve(ref)


def _decode_position(position: Position, transform: Optional[Transform]) -> Position:
    if transform is None:
        return (float(position[0]), float(position[1]))
    return (
        position[0] * transform.scale[0] + transform.translate[0],
        position[1] * transform.scale[1] + transform.translate[1],
    )


def decode_geometry(topology: Topology, geometry, arcs: Optional[ArcTable] = None) -> DecodedGeometry:
    """Decode one topology geometry (recursively for collections)."""
    if arcs is None:
        arcs = ArcTable(topology)
    transform = topology.transform
    common = {"id": geometry.id, "properties": dict(geometry.properties)}

    if isinstance(geometry, PolygonGeometry):
        coords = [arcs.stitch(ring) for ring in geometry.arcs]
        return DecodedGeometry(kind="Polygon", coordinates=coords, **common)
    if isinstance(geometry, MultiPolygonGeometry):
        coords = [[arcs.stitch(ring) for ring in polygon] for polygon in geometry.arcs]
        return DecodedGeometry(kind="MultiPolygon", coordinates=coords, **common)
    if isinstance(geometry, LineStringGeometry):
        return DecodedGeometry(kind="LineString", coordinates=arcs.stitch(geometry.arcs), **common)
    if isinstance(geometry, MultiLineStringGeometry):
        coords = [arcs.stitch(line) for line in geometry.arcs]
        return DecodedGeometry(kind="MultiLineString", coordinates=coords, **common)
    if isinstance(geometry, PointGeometry):
        coords = list(_decode_position(geometry.coordinates, transform))
        return DecodedGeometry(kind="Point", coordinates=coords, **common)
    if isinstance(geometry, MultiPointGeometry):
        coords = [_decode_position(p, transform) for p in geometry.coordinates]
        return DecodedGeometry(kind="MultiPoint", coordinates=coords, **common)
    if isinstance(geometry, GeometryCollection):
        children = [decode_geometry(topology, g, arcs) for g in geometry.geometries]
        return DecodedGeometry(kind="GeometryCollection", geometries=children, **common)
    if isinstance(geometry, NullGeometry):
        return DecodedGeometry(kind="Null", **common)
    raise DecodeError(f"Unsupported geometry type: {type(geometry).__name__}")


def decode_object(topology: Topology, name: str) -> DecodedGeometry:
    """Decode the named topology object.

    Raises:
        ObjectNotFoundError: if ``name`` is not one of ``topology.objects``.
        DecodeError: if any arc reference in the object cannot be resolved.
    """
    geometry = topology.objects.get(name)
    if geometry is None:
        raise ObjectNotFoundError(name, sorted(topology.objects))
    decoded = decode_geometry(topology, geometry)
    logger.debug(
        "Decoded object %r (%s, %d arcs in topology)", name, decoded.kind, len(topology.arcs)
    )
    return decoded
