"""
GoFloaters search CLI entrypoint.

Handy for quick local checks without the web client. The `search` command runs
the same pipeline as `/api/spaces/search`.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from gofloaters.config.settings import get_settings
from gofloaters.core.geo import GeoPoint, haversine_km
from gofloaters.core.logging import configure_logging
from gofloaters.domain.models import FilterCriteria, ReferencePoint
from gofloaters.ingestion.spaces_client import SpacesClient, UpstreamError, build_cache
from gofloaters.location.places import search_places
from gofloaters.location.provider import resolve_reference_point
from gofloaters.search.pipeline import GeoFilterPipeline


def _criteria_from_args(args: argparse.Namespace) -> FilterCriteria:
    defaults = get_settings().filters.default_criteria()
    return FilterCriteria(
        price_range=(
            args.min_price if args.min_price is not None else defaults.price_range[0],
            args.max_price if args.max_price is not None else defaults.price_range[1],
        ),
        capacity_range=(
            args.min_capacity if args.min_capacity is not None else defaults.capacity_range[0],
            args.max_capacity if args.max_capacity is not None else defaults.capacity_range[1],
        ),
        required_facilities=args.facility or [],
        min_rating=args.min_rating if args.min_rating is not None else defaults.min_rating,
        max_distance_km=args.max_distance if args.max_distance is not None else defaults.max_distance_km,
        text_query=args.query or "",
        sort_key=args.sort_by or defaults.sort_key,
        sort_direction=args.sort_order or defaults.sort_direction,
    )


def _cmd_search(args: argparse.Namespace) -> int:
    """Handle the `search` subcommand."""
    settings = get_settings()

    try:
        selected = None
        if args.lat is not None and args.lng is not None:
            selected = ReferencePoint(lat=args.lat, lng=args.lng, name=args.place)
        criteria = _criteria_from_args(args)
    except ValueError as exc:
        print(f"Invalid filters: {exc}", file=sys.stderr)
        return 2

    origin = resolve_reference_point(
        selected=selected, default=settings.location.default_reference_point()
    ).reference_point
    client = SpacesClient(settings, build_cache(settings))
    try:
        listings = client.fetch_listings(lat=origin.lat, lng=origin.lng, space_sub_type=args.space_sub_type)
    except UpstreamError as exc:
        print(f"Failed to load spaces: {exc}", file=sys.stderr)
        return 1

    results = GeoFilterPipeline(settings.filters.limits()).run(listings, origin, criteria)

    if args.json:
        payload = [r.model_dump(mode="json") for r in results]
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(f"{len(results)} meeting spaces found near {origin.name or f'{origin.lat:.4f},{origin.lng:.4f}'}")
    order = "low to high" if criteria.sort_direction == "asc" else "high to low"
    print(f"Sorted by {criteria.sort_key} ({order})")
    for i, item in enumerate(results, start=1):
        listing = item.listing
        distance = f"{item.distance_km:.1f} km" if item.distance_km is not None else "distance unknown"
        where = ", ".join(p for p in [listing.locality, listing.city] if p)
        print(
            f"{i:>2}. {listing.name or listing.id} ({where})  {distance}  "
            f"Rs {listing.price_per_hour:,.0f}/hr  seats={listing.capacity}  rating={listing.rating:.1f}"
        )
    return 0


def _cmd_distance(args: argparse.Namespace) -> int:
    km = haversine_km(GeoPoint(lat=args.lat1, lng=args.lng1), GeoPoint(lat=args.lat2, lng=args.lng2))
    if km is None:
        print("unknown (invalid coordinate)")
        return 1
    print(f"{km:.3f} km")
    return 0


def _cmd_places(args: argparse.Namespace) -> int:
    for place in search_places(args.query, limit=int(args.limit)):
        print(f"{place.place_id}\t{place.description}\t{place.lat:.4f},{place.lng:.4f}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(prog="gofloaters")
    sub = parser.add_subparsers(dest="command", required=True)

    s = sub.add_parser("search", help="Search nearby meeting spaces with filters and sorting.")
    s.add_argument("--lat", type=float, default=None, help="Omit lat/lng to use the default location")
    s.add_argument("--lng", type=float, default=None)
    s.add_argument("--place", type=str, default=None, help="Display name for the reference point")
    s.add_argument("--space-sub-type", dest="space_sub_type", type=str, default=None)
    s.add_argument("--min-price", type=float, default=None)
    s.add_argument("--max-price", type=float, default=None)
    s.add_argument("--min-capacity", type=int, default=None)
    s.add_argument("--max-capacity", type=int, default=None)
    s.add_argument("--facility", action="append", default=[], help="Repeatable; all must be present")
    s.add_argument("--min-rating", type=float, default=None)
    s.add_argument("--max-distance", type=float, default=None, help="km")
    s.add_argument("--query", type=str, default=None, help="Match name, locality or city")
    s.add_argument("--sort-by", choices=["distance", "price", "rating", "capacity"], default=None)
    s.add_argument("--sort-order", choices=["asc", "desc"], default=None)
    s.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    s.set_defaults(func=_cmd_search)

    d = sub.add_parser("distance", help="Great-circle distance in km between two points.")
    d.add_argument("lat1", type=float)
    d.add_argument("lng1", type=float)
    d.add_argument("lat2", type=float)
    d.add_argument("lng2", type=float)
    d.set_defaults(func=_cmd_distance)

    p = sub.add_parser("places", help="Autocomplete a city name.")
    p.add_argument("query")
    p.add_argument("--limit", type=int, default=6)
    p.set_defaults(func=_cmd_places)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m gofloaters.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
