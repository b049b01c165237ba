from __future__ import annotations

# The geo filter pipeline: annotate -> filter -> sort.
#
# This is the one piece of real logic behind the search UI. Every caller (the
# search API route, the CLI) goes through `GeoFilterPipeline.run` so list view,
# map markers and CLI output always agree on which spaces are shown and in which
# order.
#
# Contract:
# - pure: no I/O, no shared state, inputs are never mutated
# - never raises for well-typed input; missing data degrades per the rules below

import logging
from typing import Iterable, Sequence

from gofloaters.core.geo import haversine_km
from gofloaters.domain.models import (
    AnnotatedListing,
    FilterCriteria,
    FilterLimits,
    Listing,
    ReferencePoint,
)

logger = logging.getLogger(__name__)

# Sort position for listings whose distance is unknown: last ascending, first descending.
UNKNOWN_DISTANCE_SORT_KM = 999.0


def annotate(listings: Iterable[Listing], reference_point: ReferencePoint) -> list[AnnotatedListing]:
    """Attach `distance_km` to every listing (None when its coordinate is missing/invalid)."""
    origin = reference_point.to_geo()
    return [AnnotatedListing(listing=item, distance_km=haversine_km(origin, item.coordinate)) for item in listings]


def _in_range(value: float, bounds: tuple[float, float]) -> bool:
    low, high = bounds
    return low <= value <= high


def price_filter_active(criteria: FilterCriteria, limits: FilterLimits) -> bool:
    # Upper bound at the max selectable value means "no price filtering".
    return criteria.price_range[1] < limits.max_price


def capacity_filter_active(criteria: FilterCriteria, limits: FilterLimits) -> bool:
    return criteria.capacity_range[1] < limits.max_capacity


def distance_filter_active(criteria: FilterCriteria, limits: FilterLimits) -> bool:
    return criteria.max_distance_km < limits.max_distance_km


def matches_text(query: str | None, *fields: str | None) -> bool:
    """Case-insensitive substring match of `query` against any of `fields`.

    A blank query matches everything.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return True
    return any(needle in (f or "").lower() for f in fields)


def passes_filters(item: AnnotatedListing, criteria: FilterCriteria, limits: FilterLimits) -> bool:
    """Return True if `item` passes every active predicate (conjunctive)."""
    listing = item.listing

    if price_filter_active(criteria, limits) and not _in_range(listing.price_per_hour, criteria.price_range):
        return False

    if capacity_filter_active(criteria, limits) and not _in_range(listing.capacity, criteria.capacity_range):
        return False

    # AND semantics: a listing missing any one required facility is out.
    if criteria.required_facilities and not criteria.required_facilities.issubset(listing.facilities):
        return False

    if listing.rating < criteria.min_rating:
        return False

    if distance_filter_active(criteria, limits):
        # Unknown distance cannot satisfy a finite bound.
        if item.distance_km is None or item.distance_km > criteria.max_distance_km:
            return False

    if not matches_text(criteria.text_query, listing.name, listing.locality, listing.city):
        return False

    return True


def sort_value(item: AnnotatedListing, sort_key: str) -> float:
    """Numeric sort key for `item` under `sort_key`."""
    if sort_key == "price":
        return float(item.listing.price_per_hour)
    if sort_key == "rating":
        return float(item.listing.rating)
    if sort_key == "capacity":
        return float(item.listing.capacity)
    return item.distance_km if item.distance_km is not None else UNKNOWN_DISTANCE_SORT_KM


def active_filter_count(criteria: FilterCriteria, limits: FilterLimits) -> int:
    """Number of predicates that will actually exclude something (UI badge count)."""
    return sum(
        [
            price_filter_active(criteria, limits),
            capacity_filter_active(criteria, limits),
            bool(criteria.required_facilities),
            criteria.min_rating > 0,
            distance_filter_active(criteria, limits),
            bool(criteria.text_query.strip()),
        ]
    )


class GeoFilterPipeline:
    """Annotate listings with distance, filter by the criteria, and sort stably."""

    def __init__(self, limits: FilterLimits | None = None):
        self._limits = limits or FilterLimits()

    @property
    def limits(self) -> FilterLimits:
        return self._limits

    def run(
        self,
        listings: Sequence[Listing],
        reference_point: ReferencePoint,
        criteria: FilterCriteria,
    ) -> list[AnnotatedListing]:
        # Step 1: distance is computed once per listing per run (the origin may change between runs).
        annotated = annotate(listings, reference_point)

        # Step 2: conjunctive filtering.
        kept = [item for item in annotated if passes_filters(item, criteria, self._limits)]

        # Step 3: `sorted` is stable, and `reverse=True` keeps ties in input order too.
        ordered = sorted(
            kept,
            key=lambda item: sort_value(item, criteria.sort_key),
            reverse=criteria.sort_direction == "desc",
        )

        logger.debug(
            "Pipeline kept %d/%d listings (sort=%s %s)",
            len(ordered),
            len(annotated),
            criteria.sort_key,
            criteria.sort_direction,
        )
        return ordered


def run_pipeline(
    listings: Sequence[Listing],
    reference_point: ReferencePoint,
    criteria: FilterCriteria | None = None,
    *,
    limits: FilterLimits | None = None,
) -> list[AnnotatedListing]:
    """Convenience wrapper: run the pipeline once with default criteria/limits if omitted."""
    return GeoFilterPipeline(limits).run(listings, reference_point, criteria or FilterCriteria())
