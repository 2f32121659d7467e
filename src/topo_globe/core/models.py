"""Pydantic return models for core computation functions."""

from typing import Literal, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from topo_globe.models import Feature

Primitive = Literal["lines", "points", "triangles"]


class Mesh(BaseModel):
    """Return type for all mesh building functions.

    For ``lines`` every consecutive vertex pair (2k, 2k+1) is one segment;
    for ``points`` every vertex is drawn on its own.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    vertices: np.ndarray = Field(default_factory=lambda: np.zeros((0, 3)))
    primitive: Primitive = "lines"
    name: str = ""

    @field_validator("vertices", mode="before")
    @classmethod
    def vertices_must_be_3d(cls, v) -> np.ndarray:
        arr = np.array(v, dtype=np.float64)
        if arr.size == 0:
            return np.zeros((0, 3))
        if arr.ndim != 2 or arr.shape[1] != 3:
            raise ValueError(f"Vertices must have shape (N, 3), got {arr.shape}")
        arr.setflags(write=False)
        return arr

    @model_validator(mode="after")
    def line_vertices_must_pair(self) -> "Mesh":
        if self.primitive == "lines" and len(self.vertices) % 2:
            raise ValueError(
                f"Line mesh needs an even vertex count, got {len(self.vertices)}"
            )
        if self.primitive == "triangles" and len(self.vertices) % 3:
            raise ValueError(
                f"Triangle mesh needs a vertex count divisible by 3, got {len(self.vertices)}"
            )
        return self

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def is_empty(self) -> bool:
        return self.vertex_count == 0

    def vertex_buffer(self) -> np.ndarray:
        """Flat float32 buffer (x0, y0, z0, x1, ...) for GPU upload."""
        return self.vertices.astype(np.float32).ravel()

    def index_buffer(self) -> np.ndarray:
        """Sequential uint32 indices matching :meth:`vertex_buffer`."""
        return np.arange(self.vertex_count, dtype=np.uint32)

    def indexed(self) -> tuple[np.ndarray, np.ndarray]:
        """Deduplicated vertices (first-occurrence order) plus a uint32 index buffer.

        Drawing ``unique[indices]`` with the same primitive reproduces the mesh.
        """
        if self.is_empty:
            return np.zeros((0, 3)), np.zeros(0, dtype=np.uint32)
        _, first, inverse = np.unique(
            self.vertices, axis=0, return_index=True, return_inverse=True,
        )
        inverse = inverse.reshape(-1)
        order = np.argsort(first)
        rank = np.empty_like(order)
        rank[order] = np.arange(len(order))
        unique = self.vertices[first[order]]
        return unique, rank[inverse].astype(np.uint32)


def merge_meshes(meshes: list[Mesh], name: str = "") -> Mesh:
    """Concatenate meshes of the same primitive, preserving order."""
    if not meshes:
        return Mesh(name=name)
    primitives = {m.primitive for m in meshes}
    if len(primitives) > 1:
        raise ValueError(f"Cannot merge meshes with different primitives: {sorted(primitives)}")
    vertices = np.concatenate([m.vertices for m in meshes], axis=0)
    return Mesh(vertices=vertices, primitive=meshes[0].primitive, name=name)


class LayerResult(BaseModel):
    """Return type for build_layer: the mesh plus the features it was built from."""
    mesh: Mesh
    features: list[Feature] = []


class GlobeResult(BaseModel):
    """Return type for build_globe.

    Layers that failed are absent from ``layers`` and listed in ``errors``.
    """
    layers: dict[str, LayerResult] = {}
    errors: dict[str, str] = {}

    @property
    def meshes(self) -> dict[str, Mesh]:
        return {name: layer.mesh for name, layer in self.layers.items()}

    def mesh(self, name: str) -> Optional[Mesh]:
        layer = self.layers.get(name)
        return layer.mesh if layer else None
