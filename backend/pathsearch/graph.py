from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from shapely.geometry import LineString, mapping

from .errors import UnknownNodeError
from .models import Coordinate, Way
from .utils import distance

LOGGER = logging.getLogger("pathsearch.graph")

Adjacency = Dict[Coordinate, Dict[Coordinate, float]]


class Graph:
    """Undirected road graph keyed by coordinate. Treated as read-only once built."""

    def __init__(self, adjacency: Adjacency, ways: Sequence[Way] = ()) -> None:
        self.adjacency = adjacency
        self.ways: Tuple[Way, ...] = tuple(ways)

    def __contains__(self, node: object) -> bool:
        return node in self.adjacency

    def __len__(self) -> int:
        return len(self.adjacency)

    @property
    def node_count(self) -> int:
        return len(self.adjacency)

    @property
    def edge_count(self) -> int:
        return sum(len(row) for row in self.adjacency.values()) // 2

    def nodes(self) -> Iterable[Coordinate]:
        return self.adjacency.keys()

    def neighbors(self, node: Coordinate) -> Dict[Coordinate, float]:
        try:
            return self.adjacency[node]
        except KeyError:
            raise UnknownNodeError(f"Unknown node {node}") from None

    def weight(self, a: Coordinate, b: Coordinate) -> float:
        row = self.neighbors(a)
        if b not in row:
            raise UnknownNodeError(f"No edge between {a} and {b}")
        return row[b]

    def segments(self) -> Iterator[Tuple[Coordinate, Coordinate]]:
        for way in self.ways:
            for idx in range(len(way.points) - 1):
                yield way.points[idx], way.points[idx + 1]

    def with_waypoint(self, point: Coordinate, seg_start: Coordinate, seg_end: Coordinate) -> "Graph":
        """Return a copy where ``point`` is spliced onto the segment ``seg_start``-``seg_end``.

        Only the touched rows are copied; ``self`` is left as it was so other
        readers of the same snapshot are unaffected.
        """
        if point in self.adjacency:
            return self
        for endpoint in (seg_start, seg_end):
            if endpoint not in self.adjacency:
                raise UnknownNodeError(f"Unknown node {endpoint}")
        adjacency = dict(self.adjacency)
        adjacency[point] = {}
        for endpoint in (seg_start, seg_end):
            w = distance(point, endpoint)
            row = dict(adjacency[endpoint])
            row[point] = w
            adjacency[endpoint] = row
            adjacency[point][endpoint] = w
        return Graph(adjacency=adjacency, ways=self.ways)

    def to_geojson(self) -> dict:
        features = []
        for way in self.ways:
            line = LineString([(p.lon, p.lat) for p in way.points])  # GeoJSON order lon,lat
            features.append(
                {
                    "type": "Feature",
                    "properties": {"id": way.way_id, "name": way.name, "highway": way.highway},
                    "geometry": mapping(line),
                }
            )
        return {"type": "FeatureCollection", "features": features}


def _add_edge(adjacency: Adjacency, a: Coordinate, b: Coordinate) -> None:
    w = distance(a, b)
    adjacency.setdefault(a, {})[b] = w
    adjacency.setdefault(b, {})[a] = w


def build_graph(ways: Iterable[Optional[Way]]) -> Graph:
    """Turn road polylines into an undirected graph weighted by haversine length (km)."""
    adjacency: Adjacency = {}
    usable: List[Way] = []
    skipped = 0
    for way in ways:
        if way is None or not way.is_usable:
            skipped += 1
            LOGGER.warning("Skipping way %s without usable geometry", getattr(way, "way_id", None))
            continue
        added = 0
        for idx in range(len(way.points) - 1):
            a = way.points[idx]
            b = way.points[idx + 1]
            if a == b:
                LOGGER.debug("Skipping zero-length segment at %s in way %s", a, way.way_id)
                continue
            _add_edge(adjacency, a, b)
            added += 1
        if added:
            usable.append(way)
        else:
            skipped += 1
            LOGGER.warning("Skipping way %s: all segments have zero length", way.way_id)
    graph = Graph(adjacency=adjacency, ways=usable)
    LOGGER.info(
        "Built graph: %d nodes, %d edges from %d ways (%d skipped)",
        graph.node_count,
        graph.edge_count,
        len(usable),
        skipped,
    )
    return graph


def _coordinate(raw: Any) -> Coordinate:
    return Coordinate(lat=float(raw["lat"]), lon=float(raw["lon"]))


def ways_from_overpass(payload: dict) -> List[Way]:
    """Parse an Overpass ``out geom`` JSON payload into ways.

    Elements other than ways are ignored. Ways without geometry are kept with
    no points so the builder can report them.
    """
    ways: List[Way] = []
    for element in payload.get("elements") or []:
        if not isinstance(element, dict):
            LOGGER.warning("Ignoring malformed element %r", element)
            continue
        if element.get("type", "way") != "way":
            continue
        geometry = element.get("geometry") or []
        tags = element.get("tags") or {}
        try:
            points = tuple(_coordinate(geo) for geo in geometry if geo is not None)
        except (KeyError, TypeError, ValueError):
            LOGGER.warning("Way %s has malformed geometry", element.get("id"))
            points = ()
        ways.append(
            Way(
                way_id=element.get("id"),
                points=points,
                name=tags.get("name"),
                highway=tags.get("highway"),
            )
        )
    return ways
