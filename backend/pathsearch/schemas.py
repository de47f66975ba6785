from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Coordinate as CoordinateValue, Snap


class Coordinate(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)

    def to_value(self) -> CoordinateValue:
        return CoordinateValue(self.lat, self.lon)


class RouteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_location: Coordinate = Field(..., alias="from")
    to_location: Coordinate = Field(..., alias="to")


class SnapOut(BaseModel):
    point: list[float]
    distance_km: float
    on_segment: bool
    segment: Optional[list[list[float]]] = None

    @classmethod
    def from_snap(cls, snap: Snap) -> "SnapOut":
        return cls(
            point=snap.point.as_pair(),
            distance_km=snap.distance_km,
            on_segment=snap.on_segment,
            segment=[p.as_pair() for p in snap.segment] if snap.segment else None,
        )


class RouteResponse(BaseModel):
    path: list[list[float]]
    found: bool
    total_distance_km: float
    start: SnapOut
    end: SnapOut
    explored: int


class GraphSummary(BaseModel):
    nodes: int
    edges: int
    ways: int
    version: int
