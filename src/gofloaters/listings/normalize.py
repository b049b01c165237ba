"""
Listing normalization (the lenient parse step).

The spaces API returns a JSON object keyed by space id, with loosely typed values:
numbers are often string-encoded (`"priceperhr": "400"`, `"googleRating": "4.5"`),
keys may be missing, and the coordinate comes either as a `"lat,lng"` string or as
`address.latitude/longitude`.

Everything loose is handled here, once, so the pipeline only ever sees strictly
typed `Listing` objects. Rules:
- unparsable / missing price, capacity, rating -> 0
- missing or invalid coordinate -> None (distance unknown downstream)
"""

from __future__ import annotations

import logging
from math import isfinite
from typing import Any, Mapping

from gofloaters.core.geo import GeoPoint, is_valid_coordinate, parse_latlng
from gofloaters.domain.models import Listing

logger = logging.getLogger(__name__)

MAX_RATING = 5.0


def parse_number(value: Any, default: float = 0.0) -> float:
    """Parse a possibly string-encoded, non-negative number; fall back to `default`."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return default
    if not isfinite(number) or number < 0:
        return default
    return number


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def extract_coordinate(record: Mapping[str, Any]) -> GeoPoint | None:
    """Return the space coordinate from `location` or `address.latitude/longitude`."""
    point = parse_latlng(record.get("location"))
    if point is not None:
        return point

    address = record.get("address")
    if not isinstance(address, Mapping):
        return None
    try:
        lat = float(address.get("latitude"))
        lng = float(address.get("longitude"))
    except (TypeError, ValueError):
        return None
    if not is_valid_coordinate(lat, lng):
        return None
    return GeoPoint(lat=lat, lng=lng)


def normalize_listing(listing_id: str, record: Mapping[str, Any]) -> Listing:
    """Convert one raw upstream space record into a typed `Listing`."""
    address = record.get("address")
    if not isinstance(address, Mapping):
        address = {}

    facilities = record.get("facilitiesList")
    if not isinstance(facilities, list):
        facilities = []

    rating = min(MAX_RATING, parse_number(record.get("googleRating")))

    return Listing(
        id=str(listing_id),
        coordinate=extract_coordinate(record),
        price_per_hour=parse_number(record.get("priceperhr")),
        capacity=int(parse_number(record.get("seatsAvailable"))),
        facilities=frozenset(f.strip() for f in facilities if isinstance(f, str) and f.strip()),
        rating=rating,
        name=_text(record.get("spaceName")) or _text(record.get("spaceDisplayName")),
        locality=_text(address.get("locality")),
        city=_text(address.get("city")) or _text(record.get("city")),
    )


def normalize_listings(payload: Mapping[str, Any]) -> list[Listing]:
    """Normalize a spaces response (object keyed by id), preserving upstream order."""
    out: list[Listing] = []
    for listing_id, record in payload.items():
        if not isinstance(record, Mapping):
            logger.warning("Skipping space %s: expected an object, got %s", listing_id, type(record).__name__)
            continue
        out.append(normalize_listing(listing_id, record))
    return out
