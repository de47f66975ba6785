from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..config import Settings, settings as default_settings
from ..dijkstra import shortest_path_with_stats
from ..errors import NoNearbyPoint
from ..graph import Graph
from ..models import Coordinate, Snap
from ..snapping import NearestPointResolver
from ..utils import distance, polyline_distance_km
from .graph_store import GraphSnapshot, GraphStore

LOGGER = logging.getLogger("pathsearch.routing")


@dataclass
class RouteResult:
    path: List[Coordinate]
    total_distance_km: float
    start: Snap
    end: Snap
    explored: int

    @property
    def found(self) -> bool:
        return bool(self.path)

    def path_pairs(self) -> List[List[float]]:
        return [p.as_pair() for p in self.path]


def _splice(graph: Graph, src: Snap, dst: Snap) -> Graph:
    """Add snapped mid-segment points to a copy of ``graph`` so Dijkstra can address them."""
    if src.segment is not None and dst.segment is not None and set(src.segment) == set(dst.segment):
        seg_start, seg_end = src.segment
        near, far = sorted((src.point, dst.point), key=lambda p: distance(seg_start, p))
        graph = graph.with_waypoint(near, seg_start, seg_end)
        return graph.with_waypoint(far, near, seg_end)
    for snap in (src, dst):
        if snap.segment is not None:
            graph = graph.with_waypoint(snap.point, *snap.segment)
    return graph


def _deadline(seconds: float) -> Callable[[], bool]:
    expires_at = time.monotonic() + seconds
    return lambda: time.monotonic() > expires_at


class RoutingService:
    def __init__(self, store: GraphStore, config: Optional[Settings] = None) -> None:
        self.store = store
        self.config = config or default_settings

    def _snap(self, snapshot: GraphSnapshot, point: Coordinate) -> Snap:
        if snapshot.graph.node_count == 0:
            raise NoNearbyPoint("No road data is loaded")
        if not snapshot.coverage.contains(point):
            raise NoNearbyPoint(f"{point} is outside the loaded road data")
        resolver = NearestPointResolver(snapshot.graph, epsilon_km=self.config.snap_epsilon_km)
        snap = resolver.resolve(point)
        if snap is None:
            raise NoNearbyPoint(f"No road near {point}")
        if snap.distance_km > self.config.max_snap_distance_km:
            raise NoNearbyPoint(f"Nearest road is {snap.distance_km:.2f} km from {point}")
        return snap

    def snap(self, point: Coordinate) -> Snap:
        return self._snap(self.store.snapshot(), point)

    def compute_route(self, start: Coordinate, end: Coordinate) -> RouteResult:
        snapshot = self.store.snapshot()
        src = self._snap(snapshot, start)
        dst = self._snap(snapshot, end)

        graph = _splice(snapshot.graph, src, dst)
        result = shortest_path_with_stats(
            graph,
            src.point,
            dst.point,
            should_abort=_deadline(self.config.route_deadline_s),
        )
        total = polyline_distance_km(result.path)
        if result.found:
            LOGGER.info(
                "Route %s -> %s: %d nodes, %.3f km (%d explored)",
                src.point,
                dst.point,
                len(result.path),
                total,
                result.explored,
            )
        else:
            LOGGER.info("No route %s -> %s (%d explored)", src.point, dst.point, result.explored)
        return RouteResult(
            path=result.path,
            total_distance_km=total,
            start=src,
            end=dst,
            explored=result.explored,
        )
