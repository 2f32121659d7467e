"""Session state for the topo-globe MCP server.

Holds all data for the current globe: loaded topology sources, join tables,
globe parameters, layer toggles, and the built layer meshes.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from topo_globe.core.layers import LayerSpec
from topo_globe.core.models import GlobeResult
from topo_globe.models import JoinRecord, Topology

LAYER_NAMES: tuple[str, ...] = ("countries", "states", "cities")

# Default object name and geometry mode per layer
LAYER_DEFAULTS: dict[str, tuple[str, str]] = {
    "countries": ("countries", "lines"),
    "states": ("states", "lines"),
    "cities": ("cities", "points"),
}


class GlobeParams(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    radius: float = Field(default=0.5, ge=0)
    exclude_ids: list[int | float | str] = Field(default_factory=lambda: [-99])
    join_key: str = "id"
    grid_lat_step: float = Field(default=10.0, gt=0, le=90)
    grid_lng_step: float = Field(default=10.0, gt=0, le=180)


class LayerToggles(BaseModel):
    """Optional layers. Countries are always built once loaded."""
    model_config = ConfigDict(validate_assignment=True)

    states: bool = True
    cities: bool = True
    grid: bool = True

    def enabled(self, layer: str) -> bool:
        if layer == "countries":
            return True
        return bool(getattr(self, layer, False))


class LayerSource(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    topology: Optional[Topology] = None
    object_name: str = ""
    mode: Literal["lines", "points"] = "lines"
    topology_path: Optional[str] = None
    records: list[JoinRecord] = []
    table_path: Optional[str] = None

    @property
    def is_set(self) -> bool:
        return self.topology is not None


def _default_sources() -> dict[str, LayerSource]:
    return {
        name: LayerSource(object_name=obj, mode=mode)
        for name, (obj, mode) in LAYER_DEFAULTS.items()
    }


class SessionState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    sources: dict[str, LayerSource] = Field(default_factory=_default_sources)
    params: GlobeParams = Field(default_factory=GlobeParams)
    layers: LayerToggles = Field(default_factory=LayerToggles)
    globe: Optional[GlobeResult] = None

    def layer_specs(self) -> list[LayerSpec]:
        """Specs for every loaded and enabled layer, in layer order."""
        specs = []
        for name in LAYER_NAMES:
            source = self.sources[name]
            if not source.is_set or not self.layers.enabled(name):
                continue
            specs.append(LayerSpec(
                name=name,
                topology=source.topology,
                object_name=source.object_name,
                mode=source.mode,
                records=source.records,
                join_key=self.params.join_key,
                excluded_ids=self.params.exclude_ids,
            ))
        return specs

    def clear_meshes(self) -> None:
        self.globe = None

    def summary(self) -> dict:
        globe = self.globe
        return {
            "sources": {
                name: {
                    "topology_loaded": src.is_set,
                    "topology_path": src.topology_path,
                    "object_name": src.object_name,
                    "mode": src.mode,
                    "available_objects": sorted(src.topology.objects) if src.topology else [],
                    "join_records": len(src.records),
                    "table_path": src.table_path,
                }
                for name, src in self.sources.items()
            },
            "params": self.params.model_dump(),
            "layers": self.layers.model_dump(),
            "meshes": {
                "built": globe is not None,
                "vertex_counts": (
                    {name: m.vertex_count for name, m in globe.meshes.items()}
                    if globe else {}
                ),
                "errors": dict(globe.errors) if globe else {},
            },
        }


# Global session state, one per MCP server process
state = SessionState()
