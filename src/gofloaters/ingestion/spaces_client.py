"""
Spaces API client (the listing source).

Fetches nearby spaces from the GoFloaters spaces API:

    GET {upstream.base_url}?lat=..&lng=..&spaceSubType=meetingSpace

and returns either the raw JSON object keyed by space id (for the pass-through
proxy) or normalized `Listing` objects (for the search pipeline).

Responses are cached for a short TTL; when the upstream call fails we serve the
last good payload if one exists, otherwise raise `UpstreamError`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from gofloaters.config.settings import Settings
from gofloaters.core.cache import FileCache
from gofloaters.core.env import resolve_project_path
from gofloaters.core.http import get_json
from gofloaters.domain.models import Listing
from gofloaters.listings.normalize import normalize_listings

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "spaces"


class UpstreamError(RuntimeError):
    """The spaces API could not be reached or returned an unusable response."""


def build_cache(settings: Settings) -> FileCache:
    return FileCache(
        resolve_project_path(settings.cache.dir),
        enabled=settings.cache.enabled,
        default_ttl_seconds=settings.cache.default_ttl_seconds,
    )


class SpacesClient:
    """Fetches (and caches) nearby spaces from the upstream spaces API."""

    def __init__(self, settings: Settings, cache: FileCache):
        self._settings = settings
        self._cache = cache

    def _fetch_upstream(self, lat: float, lng: float, space_sub_type: str) -> dict[str, Any]:
        upstream = self._settings.upstream
        params = {"lat": str(lat), "lng": str(lng), "spaceSubType": space_sub_type}
        logger.info("Fetching from spaces API: %s params=%s", upstream.base_url, params)
        try:
            payload = get_json(
                upstream.base_url,
                params=params,
                headers={"User-Agent": upstream.user_agent},
                timeout_seconds=self._settings.app.http_timeout_seconds,
            )
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            reason = exc.response.reason_phrase
            raise UpstreamError(f"Spaces API error: {status} {reason}".rstrip()) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Spaces API request failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamError("Spaces API returned invalid JSON") from exc

        if not isinstance(payload, dict):
            raise UpstreamError(
                f"Spaces API returned {type(payload).__name__}; expected an object keyed by space id"
            )
        return payload

    def fetch_raw(self, *, lat: float, lng: float, space_sub_type: str | None = None) -> dict[str, Any]:
        """Return the upstream JSON object keyed by space id.

        Raises:
            UpstreamError: When the upstream call fails and no cached payload exists.
        """
        sub_type = space_sub_type or self._settings.upstream.space_sub_type
        cache_key = f"nearby:{lat:.5f}:{lng:.5f}:{sub_type}"
        ttl_seconds = int(self._settings.upstream.cache_ttl_seconds)

        try:
            return self._cache.get_or_set(
                CACHE_NAMESPACE,
                cache_key,
                lambda: self._fetch_upstream(lat, lng, sub_type),
                ttl_seconds=ttl_seconds,
                stale_if_error=True,
                stale_predicate=lambda exc: isinstance(exc, UpstreamError),
            )
        except UpstreamError as exc:
            logger.warning("Spaces API unavailable for lat=%.5f lng=%.5f: %s", lat, lng, exc)
            raise

    def fetch_listings(self, *, lat: float, lng: float, space_sub_type: str | None = None) -> list[Listing]:
        """Fetch and normalize nearby spaces into typed listings."""
        return normalize_listings(self.fetch_raw(lat=lat, lng=lng, space_sub_type=space_sub_type))
