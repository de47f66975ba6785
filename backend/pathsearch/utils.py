import math
from typing import Iterable

from .models import Coordinate

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1, lon1, lat2, lon2) -> float:
    phi1 = math.radians(lat1); phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dl = math.radians(lon2 - lon1)
    a = math.sin(dphi/2)**2 + math.cos(phi1)*math.cos(phi2)*math.sin(dl/2)**2
    c = 2*math.atan2(math.sqrt(a), math.sqrt(1-a))
    return EARTH_RADIUS_KM * c


def distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in kilometres."""
    if a == b:
        return 0.0
    # sorted so the float result is identical in both directions
    p, q = (a, b) if a < b else (b, a)
    return haversine_km(p.lat, p.lon, q.lat, q.lon)


def project_point_on_segment(point: Coordinate, seg_start: Coordinate, seg_end: Coordinate) -> Coordinate:
    """Closest point to ``point`` on the closed segment, projected in plain lat/lon space.

    Not geodesic; close enough at street scale.
    """
    dx = seg_end.lat - seg_start.lat
    dy = seg_end.lon - seg_start.lon
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return seg_start
    t = ((point.lat - seg_start.lat) * dx + (point.lon - seg_start.lon) * dy) / length_sq
    if t < 0:
        return seg_start
    if t > 1:
        return seg_end
    return Coordinate(seg_start.lat + t * dx, seg_start.lon + t * dy)


def polyline_distance_km(points: Iterable[Coordinate]) -> float:
    total = 0.0
    prev = None
    for p in points:
        if prev is not None:
            total += distance(prev, p)
        prev = p
    return total
