from __future__ import annotations

from typing import Optional

from .graph import Graph
from .models import Coordinate, Snap
from .utils import distance, project_point_on_segment


def resolve_nearest(point: Coordinate, graph: Graph) -> Optional[Coordinate]:
    """Closest existing graph node to ``point``, or None for an empty graph."""
    snap = _nearest_node(point, graph)
    return snap.point if snap else None


def _nearest_node(point: Coordinate, graph: Graph) -> Optional[Snap]:
    best_node = None
    best_dist = float("inf")
    for node in graph.nodes():
        dist = distance(point, node)
        if dist < best_dist:
            best_node = node
            best_dist = dist
    if best_node is None:
        return None
    return Snap(point=best_node, distance_km=best_dist)


def nearest_on_segment(point: Coordinate, graph: Graph) -> Optional[Snap]:
    best: Optional[Snap] = None
    for seg_start, seg_end in graph.segments():
        projected = project_point_on_segment(point, seg_start, seg_end)
        dist = distance(point, projected)
        if best is None or dist < best.distance_km:
            best = Snap(point=projected, distance_km=dist, segment=(seg_start, seg_end))
    if best is None:
        return None
    if best.point in graph:
        # clamped to an endpoint, or landed exactly on a vertex
        return Snap(point=best.point, distance_km=best.distance_km)
    return best


class NearestPointResolver:
    """Snaps arbitrary coordinates onto a graph.

    The nearest vertex wins unless a point projected onto a segment is closer
    by more than ``epsilon_km``.
    """

    def __init__(self, graph: Graph, epsilon_km: float = 0.005) -> None:
        self.graph = graph
        self.epsilon_km = epsilon_km

    def nearest_node(self, point: Coordinate) -> Optional[Snap]:
        return _nearest_node(point, self.graph)

    def nearest_on_segment(self, point: Coordinate) -> Optional[Snap]:
        return nearest_on_segment(point, self.graph)

    def resolve(self, point: Coordinate) -> Optional[Snap]:
        node = self.nearest_node(point)
        projected = self.nearest_on_segment(point)
        if node is None:
            return projected
        if projected is None:
            return node
        if projected.distance_km < node.distance_km - self.epsilon_km:
            return projected
        return node
