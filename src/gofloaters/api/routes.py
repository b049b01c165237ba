"""
API routes.

Endpoints:
- GET /api/spaces/nearby: pass-through proxy to the spaces API (+ distance, + text filter).
- GET /api/spaces/search: server-side filter/sort pipeline over the same upstream data.
- GET /api/places/autocomplete, /api/places/{place_id}: offline place lookup.
- GET /api/settings: public UI defaults (filter limits, default location, facilities).
- GET /api/health
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from gofloaters.config.settings import get_settings
from gofloaters.core.geo import format_distance_km
from gofloaters.domain.models import FilterCriteria, ReferencePoint, SearchRequest, SortDirection, SortKey
from gofloaters.ingestion.spaces_client import SpacesClient, build_cache
from gofloaters.listings.normalize import normalize_listings
from gofloaters.location.places import get_place, search_places
from gofloaters.location.provider import (
    GEOLOCATION_MAXIMUM_AGE_MS,
    GEOLOCATION_TIMEOUT_MS,
    resolve_reference_point,
)
from gofloaters.search.pipeline import GeoFilterPipeline, active_filter_count
from gofloaters.search.proxy import transform_nearby

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def _client() -> SpacesClient:
    settings = get_settings()
    return SpacesClient(settings, build_cache(settings))


def _upstream_failure(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to fetch spaces", "message": str(exc) or "Unknown error"},
    )


@router.get("/api/health")
def get_health() -> dict:
    return {"status": "ok"}


@router.get("/api/spaces/nearby")
def get_spaces_nearby(
    lat: float = Query(..., ge=-90, le=90, allow_inf_nan=False),
    lng: float = Query(..., ge=-180, le=180, allow_inf_nan=False),
    space_sub_type: str = Query("meetingSpace", alias="spaceSubType"),
    query: str | None = None,
) -> Any:
    """Proxy nearby spaces, adding distance strings and an optional text filter."""
    request = SearchRequest(lat=lat, lng=lng, space_sub_type=space_sub_type, query=query)
    try:
        payload = _client().fetch_raw(lat=request.lat, lng=request.lng, space_sub_type=request.space_sub_type)
        origin = ReferencePoint(lat=request.lat, lng=request.lng).to_geo()
        return transform_nearby(payload, origin, request.query)
    except Exception as exc:
        logger.error("Error fetching spaces: %s", exc)
        return _upstream_failure(exc)


@router.get("/api/spaces/search")
def get_spaces_search(
    lat: float | None = Query(None, ge=-90, le=90, allow_inf_nan=False),
    lng: float | None = Query(None, ge=-180, le=180, allow_inf_nan=False),
    place: str | None = Query(None, description="Place name shown for the reference point"),
    space_sub_type: str | None = Query(None, alias="spaceSubType"),
    min_price: float | None = Query(None, ge=0),
    max_price: float | None = Query(None, ge=0),
    min_capacity: int | None = Query(None, ge=0),
    max_capacity: int | None = Query(None, ge=0),
    facility: list[str] | None = Query(None),
    min_rating: float | None = Query(None, ge=0, le=5),
    max_distance_km: float | None = Query(None, gt=0),
    query: str | None = None,
    sort_by: SortKey | None = None,
    sort_order: SortDirection | None = None,
) -> Any:
    """Run the filter/sort pipeline over nearby spaces and return the ordered results."""
    settings = get_settings()
    defaults = settings.filters.default_criteria()

    if (lat is None) != (lng is None):
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": "lat and lng must be given together"},
        )
    selected = ReferencePoint(lat=lat, lng=lng, name=place) if lat is not None and lng is not None else None
    origin = resolve_reference_point(
        selected=selected, default=settings.location.default_reference_point()
    ).reference_point

    try:
        criteria = FilterCriteria(
            price_range=(
                min_price if min_price is not None else defaults.price_range[0],
                max_price if max_price is not None else defaults.price_range[1],
            ),
            capacity_range=(
                min_capacity if min_capacity is not None else defaults.capacity_range[0],
                max_capacity if max_capacity is not None else defaults.capacity_range[1],
            ),
            required_facilities=facility or [],
            min_rating=min_rating if min_rating is not None else defaults.min_rating,
            max_distance_km=max_distance_km if max_distance_km is not None else defaults.max_distance_km,
            text_query=query or "",
            sort_key=sort_by or defaults.sort_key,
            sort_direction=sort_order or defaults.sort_direction,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e

    try:
        payload = _client().fetch_raw(lat=origin.lat, lng=origin.lng, space_sub_type=space_sub_type)
    except Exception as exc:
        logger.error("Error fetching spaces: %s", exc)
        return _upstream_failure(exc)

    limits = settings.filters.limits()
    listings = normalize_listings(payload)
    ordered = GeoFilterPipeline(limits).run(listings, origin, criteria)

    results = []
    for item in ordered:
        results.append(
            {
                "id": item.id,
                "distance_km": item.distance_km,
                "distance": format_distance_km(item.distance_km) if item.distance_km is not None else None,
                "listing": item.listing.model_dump(mode="json"),
                "space": payload.get(item.id),
            }
        )

    return {
        "reference_point": origin.model_dump(mode="json"),
        "count": len(results),
        "results": results,
        "meta": {
            "total_fetched": len(listings),
            "active_filters": active_filter_count(criteria, limits),
            "criteria": criteria.model_dump(mode="json"),
            "limits": limits.model_dump(mode="json"),
        },
    }


@router.get("/api/places/autocomplete")
def get_places_autocomplete(input: str = "", limit: int = Query(6, ge=1, le=20)) -> dict:
    """Return place predictions whose name starts with `input`."""
    places = search_places(input, limit=limit)
    return {"predictions": [p.model_dump(mode="json") for p in places]}


@router.get("/api/places/{place_id}")
def get_place_details(place_id: str) -> dict:
    """Return one place (name + coordinate) by id."""
    place = get_place(place_id)
    if place is None:
        raise HTTPException(status_code=404, detail={"code": "NOT_FOUND", "message": f"Unknown place '{place_id}'"})
    return place.model_dump(mode="json")


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return safe-to-expose settings used as UI defaults."""
    settings = get_settings()
    return {
        "app": {"name": settings.app.name},
        "location": {
            "default": settings.location.default_reference_point().model_dump(mode="json"),
            "geolocation": {"timeout_ms": GEOLOCATION_TIMEOUT_MS, "maximum_age_ms": GEOLOCATION_MAXIMUM_AGE_MS},
        },
        "filters": {
            "limits": settings.filters.limits().model_dump(mode="json"),
            "price_step": settings.filters.price_step,
            "defaults": settings.filters.default_criteria().model_dump(mode="json"),
            "facility_options": [f.model_dump(mode="json") for f in settings.filters.facility_options],
        },
        "upstream": {"space_sub_type": settings.upstream.space_sub_type},
    }
