from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .errors import SearchAborted, UnknownNodeError
from .graph import Graph
from .models import Coordinate


@dataclass
class SearchResult:
    path: List[Coordinate]
    distance_km: float
    explored: int

    @property
    def found(self) -> bool:
        return bool(self.path)


def _reconstruct(prev: Dict[Coordinate, Coordinate], start: Coordinate, end: Coordinate) -> List[Coordinate]:
    path = [end]
    while path[-1] in prev:
        path.append(prev[path[-1]])
    path.reverse()
    if path[0] != start:
        return []
    return path


def shortest_path_with_stats(
    graph: Graph,
    start: Coordinate,
    end: Coordinate,
    should_abort: Optional[Callable[[], bool]] = None,
) -> SearchResult:
    """Dijkstra from ``start`` to ``end``.

    An unreachable ``end`` gives an empty path, never an exception.
    ``should_abort`` is polled once per settled node; a true result raises
    :class:`SearchAborted`.
    """
    if graph is None:
        raise ValueError("graph is required")
    for node in (start, end):
        if node not in graph:
            raise UnknownNodeError(f"Unknown node {node}")

    dist: Dict[Coordinate, float] = {start: 0.0}
    prev: Dict[Coordinate, Coordinate] = {}
    counter = itertools.count()
    pq: List[Tuple[float, int, Coordinate]] = [(0.0, next(counter), start)]
    settled = set()

    while pq:
        if should_abort is not None and should_abort():
            raise SearchAborted(f"Search from {start} to {end} aborted after {len(settled)} nodes")
        cost, _, node = heapq.heappop(pq)
        if node in settled:
            continue
        settled.add(node)
        if node == end:
            break
        for neighbor, weight in graph.neighbors(node).items():
            tentative = cost + weight
            if tentative < dist.get(neighbor, float("inf")):
                dist[neighbor] = tentative
                prev[neighbor] = node
                heapq.heappush(pq, (tentative, next(counter), neighbor))

    if end not in settled:
        return SearchResult(path=[], distance_km=float("inf"), explored=len(settled))

    path = _reconstruct(prev, start, end)
    total = dist[end] if path else float("inf")
    return SearchResult(path=path, distance_km=total, explored=len(settled))


def shortest_path(
    graph: Graph,
    start: Coordinate,
    end: Coordinate,
    should_abort: Optional[Callable[[], bool]] = None,
) -> List[Coordinate]:
    return shortest_path_with_stats(graph, start, end, should_abort=should_abort).path
