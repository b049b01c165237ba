"""
Reference point resolution (the location provider).

The search origin comes from one of, in order of precedence:
1. a place the user picked (autocomplete / "search this area")
2. a device geolocation fix
3. the last known reference point (held by the caller, not by this module)
4. the configured default (Koramangala, Bengaluru)

Everything is passed in explicitly; there is no process-wide "current location".
A failed device fix is classified (permission denied / unavailable / timeout) and
turned into a user-facing message while the search falls back to the next source.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from gofloaters.core.geo import is_valid_coordinate
from gofloaters.domain.models import ReferencePoint

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = ReferencePoint(lat=12.9304278, lng=77.678404, name="Koramangala, Bengaluru", source="default")

# Device geolocation request options used by the web client.
GEOLOCATION_TIMEOUT_MS = 10_000
GEOLOCATION_MAXIMUM_AGE_MS = 300_000


class GeolocationErrorCode(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"


_MESSAGES: dict[GeolocationErrorCode, str] = {
    GeolocationErrorCode.PERMISSION_DENIED: "Location access denied. Please enable location services.",
    GeolocationErrorCode.POSITION_UNAVAILABLE: "Location information is unavailable.",
    GeolocationErrorCode.TIMEOUT: "Location request timed out.",
    GeolocationErrorCode.UNSUPPORTED: "Geolocation is not supported by this browser.",
    GeolocationErrorCode.UNKNOWN: "Unable to retrieve location.",
}

# Numeric codes of the browser's GeolocationPositionError.
_BROWSER_CODES: dict[int, GeolocationErrorCode] = {
    1: GeolocationErrorCode.PERMISSION_DENIED,
    2: GeolocationErrorCode.POSITION_UNAVAILABLE,
    3: GeolocationErrorCode.TIMEOUT,
}


class GeolocationError(Exception):
    """A device geolocation request failed."""

    def __init__(self, code: GeolocationErrorCode | str | int):
        self.code = classify_geolocation_error(code)
        super().__init__(describe_geolocation_error(self.code))


def classify_geolocation_error(code: GeolocationErrorCode | str | int | None) -> GeolocationErrorCode:
    """Map a browser numeric code or a code name onto `GeolocationErrorCode`."""
    if isinstance(code, GeolocationErrorCode):
        return code
    if isinstance(code, int) and not isinstance(code, bool):
        return _BROWSER_CODES.get(code, GeolocationErrorCode.UNKNOWN)
    if isinstance(code, str):
        try:
            return GeolocationErrorCode(code.strip().lower())
        except ValueError:
            return GeolocationErrorCode.UNKNOWN
    return GeolocationErrorCode.UNKNOWN


def describe_geolocation_error(code: GeolocationErrorCode | str | int | None) -> str:
    """User-facing message for a geolocation failure."""
    return _MESSAGES[classify_geolocation_error(code)]


@dataclass(frozen=True)
class LocationResolution:
    """The chosen reference point plus an optional message to show the user."""

    reference_point: ReferencePoint
    message: str | None = None


def _usable(point: ReferencePoint | None) -> bool:
    return point is not None and is_valid_coordinate(point.lat, point.lng)


def resolve_reference_point(
    *,
    selected: ReferencePoint | None = None,
    device: ReferencePoint | None = None,
    device_error: GeolocationError | None = None,
    last_known: ReferencePoint | None = None,
    default: ReferencePoint | None = None,
) -> LocationResolution:
    """Pick the search origin from the explicitly supplied candidates."""
    if _usable(selected):
        return LocationResolution(reference_point=selected.model_copy(update={"source": "selected"}))

    if _usable(device):
        return LocationResolution(
            reference_point=device.model_copy(update={"source": "device", "name": device.name or "Your location"})
        )

    message = str(device_error) if device_error is not None else None
    if device_error is not None:
        logger.info("Device location unavailable (%s); falling back", device_error.code.value)

    if _usable(last_known):
        return LocationResolution(
            reference_point=last_known.model_copy(update={"source": "last_known"}), message=message
        )

    fallback = default if _usable(default) else DEFAULT_LOCATION
    return LocationResolution(reference_point=fallback.model_copy(update={"source": "default"}), message=message)
