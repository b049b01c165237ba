from __future__ import annotations
from dataclasses import dataclass
from math import atan2, cos, isfinite, radians, sin, sqrt

"""
Geospatial helpers.

A tiny geometry layer shared by the search pipeline, the proxy route and the CLI.
Consumer-grade accuracy is enough here (spherical Earth, no ellipsoid correction),
so we keep it dependency-free.

Invalid coordinates never produce a number: `haversine_km` returns None, which
callers treat as "distance unknown" (not zero).
"""

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees (WGS84 assumed)."""

    lat: float
    lng: float


def is_valid_coordinate(lat: float, lng: float) -> bool:
    """Return True if (lat, lng) is finite and inside the valid degree ranges."""
    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError):
        return False
    if not (isfinite(lat) and isfinite(lng)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


def haversine_km(a: GeoPoint | None, b: GeoPoint | None) -> float | None:
    """Compute great-circle distance in kilometres between two points.

    Returns None when either point is missing or invalid (NaN, inf, out of range).
    """
    if a is None or b is None:
        return None
    if not (is_valid_coordinate(a.lat, a.lng) and is_valid_coordinate(b.lat, b.lng)):
        return None

    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlat = lat2 - lat1
    dlng = radians(b.lng - a.lng)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    # Rounding can push h a hair outside [0, 1] for antipodal points.
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_KM * 2 * atan2(sqrt(h), sqrt(1 - h))


def parse_latlng(text: str | None) -> GeoPoint | None:
    """Parse an upstream `"lat,lng"` string into a GeoPoint (None if malformed)."""
    if not text or not isinstance(text, str):
        return None
    parts = text.split(",")
    if len(parts) != 2:
        return None
    try:
        lat = float(parts[0].strip())
        lng = float(parts[1].strip())
    except ValueError:
        return None
    if not is_valid_coordinate(lat, lng):
        return None
    return GeoPoint(lat=lat, lng=lng)


def format_distance_km(km: float) -> str:
    """Render a distance the way the spaces API does (e.g. `"4.9 km away"`)."""
    return f"{km:.1f} km away"
