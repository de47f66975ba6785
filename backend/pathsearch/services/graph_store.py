from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, List, Optional

from ..config import Settings, settings
from ..coverage import Coverage
from ..graph import Graph, build_graph
from ..models import Way
from .overpass import OverpassClient, load_ways_file

LOGGER = logging.getLogger("pathsearch.graph_store")

WayLoader = Callable[[], List[Way]]


@dataclass(frozen=True)
class GraphSnapshot:
    graph: Graph
    coverage: Coverage
    version: int


class GraphStore:
    """Holds the current graph snapshot.

    A refresh builds a brand new graph and swaps the reference, so requests
    that already hold the previous snapshot keep reading it undisturbed.
    """

    def __init__(self, loader: WayLoader, coverage_buffer_m: float = 250.0) -> None:
        self._loader = loader
        self._coverage_buffer_m = coverage_buffer_m
        self._snapshot: Optional[GraphSnapshot] = None
        self._lock = threading.Lock()

    def snapshot(self) -> GraphSnapshot:
        snap = self._snapshot
        if snap is None:
            with self._lock:
                if self._snapshot is None:
                    self._snapshot = self._build(version=1)
                snap = self._snapshot
        return snap

    def refresh(self) -> GraphSnapshot:
        with self._lock:
            version = self._snapshot.version + 1 if self._snapshot else 1
            # a failure here propagates and leaves the previous snapshot in place
            self._snapshot = self._build(version=version)
            return self._snapshot

    def _build(self, version: int) -> GraphSnapshot:
        ways = self._loader()
        graph = build_graph(ways)
        coverage = Coverage.from_graph(graph, self._coverage_buffer_m)
        LOGGER.info("Graph snapshot v%d ready (%d nodes)", version, graph.node_count)
        return GraphSnapshot(graph=graph, coverage=coverage, version=version)


def default_loader(config: Settings) -> WayLoader:
    if config.ways_file:
        path = config.ways_file
        return lambda: load_ways_file(path)
    client = OverpassClient(config.overpass_url, timeout_s=config.overpass_timeout_s)
    return lambda: client.fetch_ways(config.overpass_area, config.overpass_highway_filter)


@lru_cache(maxsize=1)
def get_store() -> GraphStore:
    return GraphStore(default_loader(settings), coverage_buffer_m=settings.coverage_buffer_m)
