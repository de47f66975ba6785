from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

# 7 decimal places is roughly 1 cm at the equator.
COORD_PRECISION = 7


def quantize(value: float) -> float:
    return round(float(value), COORD_PRECISION)


@dataclass(frozen=True, order=True)
class Coordinate:
    """Latitude/longitude in degrees, quantized so equal values share one graph identity."""

    lat: float
    lon: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "lat", quantize(self.lat))
        object.__setattr__(self, "lon", quantize(self.lon))

    def as_pair(self) -> list[float]:
        return [self.lat, self.lon]

    def __str__(self) -> str:
        return f"{self.lat},{self.lon}"


@dataclass(frozen=True)
class Way:
    way_id: Optional[int]
    points: Tuple[Coordinate, ...] = ()
    name: Optional[str] = None
    highway: Optional[str] = None

    @property
    def is_usable(self) -> bool:
        return len(self.points) >= 2


@dataclass(frozen=True)
class Snap:
    point: Coordinate
    distance_km: float
    segment: Optional[Tuple[Coordinate, Coordinate]] = field(default=None)

    @property
    def on_segment(self) -> bool:
        return self.segment is not None
