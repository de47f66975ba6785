import json
from urllib.parse import parse_qs

import httpx
import pytest

from pathsearch.errors import GeodataUnavailable
from pathsearch.models import Coordinate
from pathsearch.services.graph_store import GraphStore
from pathsearch.services.overpass import OverpassClient, build_query, load_ways_file

URL = "https://overpass.test/api/interpreter"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_build_query_targets_area_and_geometry() -> None:
    query = build_query("Genté", "highway", timeout_s=25)
    assert query.startswith("[out:json][timeout:25];")
    assert 'area["name"="Genté"]->.searchArea;' in query
    assert 'way["highway"](area.searchArea);' in query
    assert query.endswith("out geom;")


def test_fetch_ways_posts_query_and_parses(ways_file) -> None:
    body = ways_file.read_text(encoding="utf-8")
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["form"] = parse_qs(request.content.decode("utf-8"))
        return httpx.Response(200, text=body, headers={"Content-Type": "application/json"})

    client = OverpassClient(URL, timeout_s=10, client=_client(handler))
    ways = client.fetch_ways("Genté")

    assert seen["method"] == "POST"
    assert "out geom;" in seen["form"]["data"][0]
    assert [way.way_id for way in ways] == [1, 2, 3, 4]
    assert ways[0].points[0] == Coordinate(45.63, -0.31)
    assert ways[3].points == ()


def test_fetch_ways_http_error_is_geodata_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(504, text="Gateway Timeout")

    client = OverpassClient(URL, client=_client(handler))
    with pytest.raises(GeodataUnavailable):
        client.fetch_ways("Genté")


def test_fetch_ways_network_error_is_geodata_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = OverpassClient(URL, client=_client(handler))
    with pytest.raises(GeodataUnavailable):
        client.fetch_ways("Genté")


def test_fetch_ways_invalid_json_is_geodata_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>rate limited</html>")

    client = OverpassClient(URL, client=_client(handler))
    with pytest.raises(GeodataUnavailable):
        client.fetch_ways("Genté")


def test_empty_elements_yield_no_ways() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"elements": []})

    client = OverpassClient(URL, client=_client(handler))
    assert client.fetch_ways("Nowhere") == []


TIMEOUT_REMARK = "runtime error: Query timed out in \"query\" at line 3 after 26 seconds."


def test_runtime_error_remark_is_geodata_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"elements": [], "remark": TIMEOUT_REMARK})

    client = OverpassClient(URL, client=_client(handler))
    with pytest.raises(GeodataUnavailable, match="timed out"):
        client.fetch_ways("Genté")

    store = GraphStore(lambda: client.fetch_ways("Genté"))
    with pytest.raises(GeodataUnavailable):
        store.snapshot()


def test_remark_with_partial_result_keeps_ways(ways_file) -> None:
    payload = json.loads(ways_file.read_text(encoding="utf-8"))
    payload["remark"] = TIMEOUT_REMARK

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    client = OverpassClient(URL, client=_client(handler))
    assert len(client.fetch_ways("Genté")) == 4


@pytest.mark.parametrize("elements", [None, {"type": "way"}, "way"])
def test_missing_element_list_is_geodata_failure(elements) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"elements": elements})

    client = OverpassClient(URL, client=_client(handler))
    with pytest.raises(GeodataUnavailable):
        client.fetch_ways("Genté")


def test_non_object_elements_are_skipped() -> None:
    elements = [
        None,
        7,
        {"type": "way", "id": 5, "geometry": [{"lat": 1.0, "lon": 2.0}, {"lat": 1.0, "lon": 2.001}]},
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"elements": elements})

    client = OverpassClient(URL, client=_client(handler))
    ways = client.fetch_ways("Genté")
    assert [way.way_id for way in ways] == [5]
    assert ways[0].points[1] == Coordinate(1.0, 2.001)


def test_load_ways_file(tmp_path, ways_file) -> None:
    assert len(load_ways_file(ways_file)) == 4
    with pytest.raises(GeodataUnavailable):
        load_ways_file(tmp_path / "missing.json")
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(GeodataUnavailable):
        load_ways_file(broken)
    listing = tmp_path / "list.json"
    listing.write_text(json.dumps([1, 2]), encoding="utf-8")
    with pytest.raises(GeodataUnavailable):
        load_ways_file(listing)
