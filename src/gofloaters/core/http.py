"""
Outbound HTTP.

The backend talks to exactly one remote service (the spaces API) and only ever
GETs JSON from it, so this stays a single function over `httpx`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "GoFloaters-Search-App/1.0"
DEFAULT_HEADERS = {"Accept": "application/json", "User-Agent": DEFAULT_USER_AGENT}


def get_json(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 15,
) -> Any:
    """GET `url` and decode the JSON body.

    Raises `httpx.HTTPStatusError` for non-2xx responses, other `httpx.HTTPError`
    subclasses for transport failures, and `ValueError` for a non-JSON body.
    """
    merged = {**DEFAULT_HEADERS, **(headers or {})}
    with httpx.Client(timeout=timeout_seconds, headers=merged, follow_redirects=True) as client:
        resp = client.get(url, params=params)
        logger.debug("GET %s -> %s", resp.url, resp.status_code)
        resp.raise_for_status()
        return resp.json()
