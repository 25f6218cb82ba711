from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lng)


class BoundingBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, point: GeoPoint) -> bool:
        return self.min_lat <= point.lat <= self.max_lat and self.min_lng <= point.lng <= self.max_lng

    def corners(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """South-west and north-east corners as (lat, lng) pairs."""
        return (self.min_lat, self.min_lng), (self.max_lat, self.max_lng)


class IntersectionRequest(BaseModel):
    points: List[Tuple[float, float]]

    @classmethod
    def from_vertices(cls, vertices: List[GeoPoint]) -> "IntersectionRequest":
        return cls(points=[p.as_tuple() for p in vertices])


class MarkerRole(str, Enum):
    QUERY = "query"
    RESULT = "result"
    ADDED = "added"


ROLE_COLORS = {
    MarkerRole.QUERY: "blue",
    MarkerRole.RESULT: "red",
    MarkerRole.ADDED: "blue",
}


@dataclass
class OverlayMarker:
    point: GeoPoint
    role: MarkerRole
    color: str
    handle: int


@dataclass(frozen=True)
class Circle:
    center: GeoPoint
    radius_m: float


@dataclass(frozen=True)
class Polygon:
    vertices: Tuple[GeoPoint, ...]

    def __post_init__(self) -> None:
        if len(self.vertices) < 3:
            raise ValueError("Polygon must contain at least three vertices.")


Region = Union[Circle, Polygon]


@dataclass
class QueryOutcome:
    """Result of one console action, as shown to the user."""

    ok: bool
    message: Optional[str] = None
    error_kind: Optional[str] = None
    stale: bool = False
    results: List[GeoPoint] = field(default_factory=list)


__all__ = [
    "GeoPoint",
    "BoundingBox",
    "IntersectionRequest",
    "MarkerRole",
    "ROLE_COLORS",
    "OverlayMarker",
    "Circle",
    "Polygon",
    "Region",
    "QueryOutcome",
]
