"""Pydantic domain models for topology input, features, and join records."""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator

FeatureId = Union[int, float, str]
Position = tuple[float, float]
Ring = list[Position]


class Transform(BaseModel):
    """Affine quantization transform: real = translate + grid * scale."""
    scale: tuple[float, float] = (1.0, 1.0)
    translate: tuple[float, float] = (0.0, 0.0)


class _Geometry(BaseModel):
    id: Optional[FeatureId] = None
    properties: dict = Field(default_factory=dict)

    @field_validator("properties", mode="before")
    @classmethod
    def null_properties_are_empty(cls, v):
        return {} if v is None else v


class PolygonGeometry(_Geometry):
    type: Literal["Polygon"] = "Polygon"
    arcs: list[list[int]]


class MultiPolygonGeometry(_Geometry):
    type: Literal["MultiPolygon"] = "MultiPolygon"
    arcs: list[list[list[int]]]


class LineStringGeometry(_Geometry):
    type: Literal["LineString"] = "LineString"
    arcs: list[int]


class MultiLineStringGeometry(_Geometry):
    type: Literal["MultiLineString"] = "MultiLineString"
    arcs: list[list[int]]


def _xy(position):
    if isinstance(position, (list, tuple)):
        return position[:2]
    return position


class PointGeometry(_Geometry):
    type: Literal["Point"] = "Point"
    coordinates: Position

    @field_validator("coordinates", mode="before")
    @classmethod
    def keep_xy(cls, v):
        return _xy(v)


class MultiPointGeometry(_Geometry):
    type: Literal["MultiPoint"] = "MultiPoint"
    coordinates: list[Position]

    @field_validator("coordinates", mode="before")
    @classmethod
    def keep_xy(cls, v):
        return [_xy(p) for p in v] if isinstance(v, list) else v


class NullGeometry(_Geometry):
    type: Literal[None] = None


class GeometryCollection(_Geometry):
    type: Literal["GeometryCollection"] = "GeometryCollection"
    geometries: list["TopoGeometry"] = Field(default_factory=list)


def _geometry_tag(v) -> str:
    kind = v.get("type") if isinstance(v, dict) else getattr(v, "type", None)
    return "Null" if kind is None else kind


TopoGeometry = Annotated[
    Union[
        Annotated[PolygonGeometry, Tag("Polygon")],
        Annotated[MultiPolygonGeometry, Tag("MultiPolygon")],
        Annotated[LineStringGeometry, Tag("LineString")],
        Annotated[MultiLineStringGeometry, Tag("MultiLineString")],
        Annotated[PointGeometry, Tag("Point")],
        Annotated[MultiPointGeometry, Tag("MultiPoint")],
        Annotated[GeometryCollection, Tag("GeometryCollection")],
        Annotated[NullGeometry, Tag("Null")],
    ],
    Discriminator(_geometry_tag),
]

GeometryCollection.model_rebuild()


class Topology(BaseModel):
    """A TopoJSON topology: a shared arc table plus named geometry objects.

    Arcs are stored exactly as serialized (delta-encoded integer pairs);
    decoding happens in :mod:`topo_globe.core.topology`.
    """
    model_config = ConfigDict(frozen=True)

    type: Literal["Topology"] = "Topology"
    arcs: list[list[tuple[float, float]]] = Field(default_factory=list)
    objects: dict[str, TopoGeometry] = Field(default_factory=dict)
    transform: Optional[Transform] = None
    bbox: Optional[list[float]] = None

    @field_validator("arcs", mode="before")
    @classmethod
    def drop_extra_dimensions(cls, v):
        # Arc positions may carry extra (z, m) values; only x/y are decoded.
        if not isinstance(v, list):
            return v
        return [[_xy(p) for p in arc] if isinstance(arc, list) else arc for arc in v]


class Feature(BaseModel):
    """One extracted feature: rings for polygons/lines, points for point sets."""
    model_config = ConfigDict(frozen=True)

    geometry_kind: str
    rings: list[Ring] = Field(default_factory=list)
    points: list[Position] = Field(default_factory=list)
    id: Optional[FeatureId] = None
    attributes: dict = Field(default_factory=dict)

    @property
    def name(self) -> Optional[str]:
        return self.attributes.get("name")


class JoinRecord(BaseModel):
    """One row of an auxiliary table. Columns beyond id/name are kept as extras."""
    model_config = ConfigDict(extra="allow", frozen=True)

    id: Optional[FeatureId] = None
    name: Optional[FeatureId] = None

    def get(self, column: str, default=None):
        if column in type(self).model_fields:
            return getattr(self, column)
        return (self.model_extra or {}).get(column, default)

    def has(self, column: str) -> bool:
        if column in type(self).model_fields:
            return column in self.model_fields_set
        return column in (self.model_extra or {})
