"""Per-layer globe pipeline: decode, extract, join, build.

Each layer (countries, states, cities, grid) is independent. build_globe runs
them in worker threads and isolates failures, so a malformed topology for one
layer leaves the others intact.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models import Feature, JoinRecord, Topology
from .features import collect_points, exclude_ids, extract_features
from .join import join_attributes
from .mesh import build_graticule_rings, build_point_mesh, build_ring_mesh
from .models import GlobeResult, LayerResult, Mesh, merge_meshes
from .topology import decode_object

logger = logging.getLogger(__name__)

LINE_KINDS = ("LineString", "MultiLineString")

ProgressCallback = Callable[[int, int], Awaitable[None]]


class LayerSpec(BaseModel):
    """Everything needed to build one layer's mesh."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    topology: Topology
    object_name: str
    mode: Literal["lines", "points"] = "lines"
    records: list[JoinRecord] = Field(default_factory=list)
    join_key: str = "id"
    join_columns: tuple[str, ...] = ("name",)
    excluded_ids: list = Field(default_factory=list)


def _line_mesh(features: list[Feature], radius: float, name: str) -> Mesh:
    """Polygon rings close; line strings stay open."""
    closed_rings = [r for f in features if f.geometry_kind not in LINE_KINDS for r in f.rings]
    open_rings = [r for f in features if f.geometry_kind in LINE_KINDS for r in f.rings]
    mesh = build_ring_mesh(closed_rings, radius, closed=True, name=name)
    if open_rings:
        lines = build_ring_mesh(open_rings, radius, closed=False, name=name)
        if mesh.is_empty:
            return lines
        return merge_meshes([mesh, lines], name=name)
    return mesh


def build_layer(spec: LayerSpec, radius: float) -> LayerResult:
    """Run the full pipeline for one layer.

    Raises:
        DecodeError: if the layer's object is missing or references bad arcs.
    """
    geometry = decode_object(spec.topology, spec.object_name)
    keep = exclude_ids(spec.excluded_ids) if spec.excluded_ids else None
    features = list(extract_features(geometry, keep))
    if spec.records:
        features = list(join_attributes(features, spec.records, spec.join_key, spec.join_columns))

    if spec.mode == "points":
        mesh = build_point_mesh(collect_points(features), radius, name=spec.name)
    else:
        mesh = _line_mesh(features, radius, spec.name)

    logger.info(
        "Layer %s: %d features, %d vertices (%s)",
        spec.name, len(features), mesh.vertex_count, mesh.primitive,
    )
    return LayerResult(mesh=mesh, features=features)


def build_grid_layer(
    radius: float, lat_step: float = 10.0, lng_step: float = 10.0,
) -> LayerResult:
    """Coordinate grid overlay built through the same ring builder."""
    rings = build_graticule_rings(lat_step, lng_step)
    return LayerResult(mesh=build_ring_mesh(rings, radius, name="grid"))


async def build_globe(
    specs: list[LayerSpec],
    radius: float,
    include_grid: bool = False,
    grid_lat_step: float = 10.0,
    grid_lng_step: float = 10.0,
    progress: Optional[ProgressCallback] = None,
) -> GlobeResult:
    """Build every layer concurrently in worker threads.

    A layer that raises is logged, recorded in ``errors``, and left out of
    ``layers``; the remaining layers are unaffected.
    """
    names = [spec.name for spec in specs]
    jobs = [asyncio.to_thread(build_layer, spec, radius) for spec in specs]
    if include_grid:
        names.append("grid")
        jobs.append(asyncio.to_thread(build_grid_layer, radius, grid_lat_step, grid_lng_step))

    total = len(jobs)
    done = 0

    async def _tracked(job):
        nonlocal done
        try:
            return await job
        finally:
            done += 1
            if progress is not None:
                try:
                    await progress(done, total)
                except Exception as e:
                    logger.warning("Progress callback failed: %s", e)

    outcomes = await asyncio.gather(*(_tracked(j) for j in jobs), return_exceptions=True)

    result = GlobeResult()
    for name, outcome in zip(names, outcomes):
        if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, Exception):
            logger.warning("Layer %s failed to build: %s", name, outcome)
            result.errors[name] = str(outcome)
        else:
            result.layers[name] = outcome
    return result
