"""
Pass-through transform for the nearby-spaces proxy.

The proxy keeps the upstream response shape (object keyed by space id) and only:
- adds a `distance` string ("4.9 km away") when upstream did not send one and the
  space has a usable coordinate
- drops spaces whose name / locality / city does not contain the text query
"""

from __future__ import annotations

from typing import Any, Mapping

from gofloaters.core.geo import GeoPoint, format_distance_km, haversine_km
from gofloaters.listings.normalize import extract_coordinate
from gofloaters.search.pipeline import matches_text


def _field(record: Mapping[str, Any], *path: str) -> str | None:
    value: Any = record
    for key in path:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value if isinstance(value, str) else None


def transform_nearby(payload: Mapping[str, Any], origin: GeoPoint, query: str | None = None) -> dict[str, Any]:
    """Return a new response mapping; `payload` and its records are left untouched."""
    out: dict[str, Any] = {}
    for space_id, record in payload.items():
        if not isinstance(record, Mapping):
            continue
        space = dict(record)

        if not space.get("distance"):
            km = haversine_km(origin, extract_coordinate(space))
            if km is not None:
                space["distance"] = format_distance_km(km)

        if not matches_text(
            query,
            _field(space, "spaceName"),
            _field(space, "address", "locality"),
            _field(space, "address", "city"),
        ):
            continue
        out[space_id] = space
    return out
