from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import httpx

from ..errors import GeodataUnavailable
from ..graph import ways_from_overpass
from ..models import Way

LOGGER = logging.getLogger("pathsearch.overpass")


def build_query(area: str, highway_filter: str = "highway", timeout_s: float = 30.0) -> str:
    area_name = area.replace('"', '\\"')
    return (
        f"[out:json][timeout:{int(timeout_s)}];\n"
        f'area["name"="{area_name}"]->.searchArea;\n'
        f'(way["{highway_filter}"](area.searchArea););\n'
        "out geom;"
    )


def _parse_payload(payload: object, source: str) -> List[Way]:
    if not isinstance(payload, dict):
        raise GeodataUnavailable(f"Unexpected geodata payload from {source}")
    elements = payload.get("elements", [])
    if not isinstance(elements, list):
        LOGGER.error("Geodata from %s has no element list", source)
        raise GeodataUnavailable(f"Unexpected geodata payload from {source}")
    ways = ways_from_overpass(payload)
    # Overpass reports query timeouts and out-of-memory as 200 + remark
    remark = payload.get("remark")
    if remark and not ways:
        LOGGER.error("Geodata query at %s failed: %s", source, remark)
        raise GeodataUnavailable(f"Geodata query failed: {remark}")
    if not ways:
        LOGGER.warning("No elements returned by %s", source)
    return ways


class OverpassClient:
    """Fetches road polylines from an Overpass API endpoint."""

    def __init__(self, url: str, timeout_s: float = 30.0, client: Optional[httpx.Client] = None) -> None:
        self.url = url
        self.timeout_s = timeout_s
        self._client = client

    def fetch_ways(self, area: str, highway_filter: str = "highway") -> List[Way]:
        query = build_query(area, highway_filter, self.timeout_s)
        LOGGER.info("Querying %s for ways in %r", self.url, area)
        try:
            if self._client is not None:
                response = self._client.post(self.url, data={"data": query}, timeout=self.timeout_s)
            else:
                response = httpx.post(self.url, data={"data": query}, timeout=self.timeout_s)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            LOGGER.error("Overpass request failed: %s", exc)
            raise GeodataUnavailable(f"Overpass request failed: {exc}") from exc
        except ValueError as exc:
            LOGGER.error("Overpass returned invalid JSON: %s", exc)
            raise GeodataUnavailable("Overpass returned invalid JSON") from exc
        ways = _parse_payload(payload, self.url)
        LOGGER.info("Fetched %d ways from Overpass", len(ways))
        return ways


def load_ways_file(path: str | Path) -> List[Way]:
    """Read ways from an Overpass JSON document on disk."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, ValueError) as exc:
        LOGGER.error("Could not read geodata file %s: %s", path, exc)
        raise GeodataUnavailable(f"Could not read geodata file {path}") from exc
    return _parse_payload(payload, str(path))
