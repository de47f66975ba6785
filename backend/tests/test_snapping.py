import pytest

from pathsearch.graph import build_graph
from pathsearch.models import Coordinate, Way
from pathsearch.snapping import NearestPointResolver, nearest_on_segment, resolve_nearest
from pathsearch.utils import distance


def _way(way_id, *pairs) -> Way:
    return Way(way_id=way_id, points=tuple(Coordinate(lat, lon) for lat, lon in pairs))


def test_resolve_nearest_picks_closer_node() -> None:
    graph = build_graph([_way(1, (0, 0), (1, 0))])
    assert resolve_nearest(Coordinate(0.4, 0), graph) == Coordinate(0, 0)
    assert resolve_nearest(Coordinate(0.6, 0), graph) == Coordinate(1, 0)


def test_empty_graph_resolves_to_nothing() -> None:
    graph = build_graph([])
    assert resolve_nearest(Coordinate(0, 0), graph) is None
    assert nearest_on_segment(Coordinate(0, 0), graph) is None
    assert NearestPointResolver(graph).resolve(Coordinate(0, 0)) is None


def test_nearest_on_segment_projects_into_interior() -> None:
    graph = build_graph([_way(1, (0, 0), (0, 0.01)), _way(2, (1, 1), (1, 1.01))])
    query = Coordinate(0.001, 0.005)
    snap = nearest_on_segment(query, graph)
    assert snap is not None
    assert snap.point == Coordinate(0, 0.005)
    assert snap.segment == (Coordinate(0, 0), Coordinate(0, 0.01))
    assert snap.distance_km == pytest.approx(distance(query, Coordinate(0, 0.005)))


def test_segment_snap_clamped_to_vertex_is_a_node_snap() -> None:
    graph = build_graph([_way(1, (0, 0), (0, 0.01))])
    snap = nearest_on_segment(Coordinate(0, -0.005), graph)
    assert snap is not None
    assert snap.point == Coordinate(0, 0)
    assert snap.segment is None


def test_resolver_prefers_segment_point_when_clearly_closer() -> None:
    # vertices are ~550 m away; the road passes ~110 m from the query
    graph = build_graph([_way(1, (0, 0), (0, 0.01))])
    resolver = NearestPointResolver(graph, epsilon_km=0.005)
    snap = resolver.resolve(Coordinate(0.001, 0.005))
    assert snap is not None
    assert snap.on_segment
    assert snap.point == Coordinate(0, 0.005)


def test_resolver_keeps_vertex_within_epsilon() -> None:
    graph = build_graph([_way(1, (0, 0), (0, 0.01))])
    query = Coordinate(0.0001, 0.0001)
    node_km = distance(query, Coordinate(0, 0))
    segment_km = distance(query, Coordinate(0, 0.0001))
    assert segment_km < node_km

    loose = NearestPointResolver(graph, epsilon_km=node_km - segment_km + 0.001)
    snap = loose.resolve(query)
    assert snap is not None
    assert snap.point == Coordinate(0, 0)
    assert not snap.on_segment

    strict = NearestPointResolver(graph, epsilon_km=0.0)
    snap = strict.resolve(query)
    assert snap is not None
    assert snap.point == Coordinate(0, 0.0001)
    assert snap.on_segment
