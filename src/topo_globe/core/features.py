"""Feature extraction from decoded topology geometries."""

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Optional

from ..models import Feature
from .topology import DecodedGeometry

logger = logging.getLogger(__name__)

KeepPredicate = Callable[[Feature], bool]


def _feature_id(geometry: DecodedGeometry):
    if geometry.id is not None:
        return geometry.id
    return geometry.properties.get("id")


def _to_feature(geometry: DecodedGeometry) -> Optional[Feature]:
    """Convert one non-collection geometry to a Feature.

    Polygon holes stay as extra rings. MultiPolygon rings are flattened into
    a single list, so polygon boundaries are no longer distinguishable.
    """
    kind = geometry.kind
    coords = geometry.coordinates
    rings: list = []
    points: list = []

    if kind == "Polygon":
        rings = [list(ring) for ring in coords]
    elif kind == "MultiPolygon":
        rings = [list(ring) for polygon in coords for ring in polygon]
    elif kind == "LineString":
        rings = [list(coords)]
    elif kind == "MultiLineString":
        rings = [list(line) for line in coords]
    elif kind == "Point":
        points = [tuple(coords)]
    elif kind == "MultiPoint":
        points = [tuple(p) for p in coords]
    elif kind == "Null":
        return None
    else:
        raise ValueError(f"Cannot extract features from geometry kind {kind!r}")

    return Feature(
        geometry_kind=kind,
        rings=rings,
        points=points,
        id=_feature_id(geometry),
        attributes=dict(geometry.properties),
    )


def extract_features(
    geometry: DecodedGeometry, keep: Optional[KeepPredicate] = None,
) -> Iterator[Feature]:
    """Yield Features for a decoded geometry.

    A GeometryCollection yields the features of its children in order.
    Features for which ``keep`` returns False are dropped.
    """
    if geometry.kind == "GeometryCollection":
        for child in geometry.geometries:
            yield from extract_features(child, keep)
        return

    feature = _to_feature(geometry)
    if feature is None:
        logger.debug("Skipping null geometry (id=%r)", geometry.id)
        return
    if keep is not None and not keep(feature):
        return
    yield feature


def exclude_ids(ids: Iterable) -> KeepPredicate:
    """Build a keep-predicate that drops features whose id is in ``ids``.

    The world atlas uses id -99 for shapes with no associated country.
    """
    excluded = set(ids)

    def keep(feature: Feature) -> bool:
        return feature.id not in excluded

    return keep


def collect_rings(features: Iterable[Feature]) -> list:
    """All rings of all features, in feature order."""
    return [ring for f in features for ring in f.rings]


def collect_points(features: Iterable[Feature]) -> list:
    """All points of all features, in feature order."""
    return [p for f in features for p in f.points]
