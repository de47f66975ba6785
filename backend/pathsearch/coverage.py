from __future__ import annotations

from typing import Optional

from shapely.geometry import MultiPoint, Point
from shapely.geometry.base import BaseGeometry

from .graph import Graph
from .models import Coordinate


def _buffer_geometry(geom: BaseGeometry, buffer_m: float) -> BaseGeometry:
    if buffer_m <= 0:
        return geom
    deg = buffer_m / 111_000.0
    return geom.buffer(deg)


class Coverage:
    """Area the loaded road data covers: the buffered convex hull of the graph nodes.

    The buffer is converted from metres at 111 km per degree in both axes, so
    east-west it is narrower by cos(lat) (about 0.7 at 45°N).
    """

    def __init__(self, area: Optional[BaseGeometry]) -> None:
        self.area = area

    @classmethod
    def from_graph(cls, graph: Graph, buffer_m: float) -> "Coverage":
        points = [(node.lon, node.lat) for node in graph.nodes()]  # GeoJSON order lon,lat
        if not points:
            return cls(area=None)
        hull = MultiPoint(points).convex_hull
        return cls(area=_buffer_geometry(hull, buffer_m))

    @property
    def is_empty(self) -> bool:
        return self.area is None or self.area.is_empty

    def contains(self, point: Coordinate) -> bool:
        if self.is_empty:
            return False
        pt = Point(point.lon, point.lat)
        return self.area.contains(pt) or self.area.touches(pt)
