import pytest

from gofloaters.domain.models import ReferencePoint
from gofloaters.location.provider import (
    DEFAULT_LOCATION,
    GeolocationError,
    GeolocationErrorCode,
    classify_geolocation_error,
    describe_geolocation_error,
    resolve_reference_point,
)

PICKED = ReferencePoint(lat=19.0760, lng=72.8777, name="Mumbai, Maharashtra, India")
DEVICE = ReferencePoint(lat=12.9352, lng=77.6245)
LAST = ReferencePoint(lat=18.5204, lng=73.8567, name="Pune")


def test_selected_place_wins_over_device_fix():
    resolution = resolve_reference_point(selected=PICKED, device=DEVICE, last_known=LAST)
    assert resolution.reference_point.lat == PICKED.lat
    assert resolution.reference_point.source == "selected"
    assert resolution.message is None


def test_device_fix_is_named_your_location():
    point = resolve_reference_point(device=DEVICE, last_known=LAST).reference_point
    assert (point.lat, point.lng) == (DEVICE.lat, DEVICE.lng)
    assert point.name == "Your location"
    assert point.source == "device"


def test_device_failure_falls_back_to_last_known_with_message():
    resolution = resolve_reference_point(
        device_error=GeolocationError(GeolocationErrorCode.PERMISSION_DENIED), last_known=LAST
    )
    assert resolution.reference_point.name == "Pune"
    assert resolution.reference_point.source == "last_known"
    assert resolution.message == "Location access denied. Please enable location services."


def test_everything_missing_falls_back_to_default():
    resolution = resolve_reference_point(device_error=GeolocationError(3))
    assert resolution.reference_point.lat == DEFAULT_LOCATION.lat
    assert resolution.reference_point.lng == DEFAULT_LOCATION.lng
    assert resolution.reference_point.source == "default"
    assert resolution.message == "Location request timed out."


def test_configured_default_is_used_when_given():
    custom = ReferencePoint(lat=28.6139, lng=77.2090, name="New Delhi")
    point = resolve_reference_point(default=custom).reference_point
    assert point.name == "New Delhi"
    assert point.source == "default"


@pytest.mark.parametrize(
    "code,expected",
    [
        (1, GeolocationErrorCode.PERMISSION_DENIED),
        (2, GeolocationErrorCode.POSITION_UNAVAILABLE),
        (3, GeolocationErrorCode.TIMEOUT),
        ("timeout", GeolocationErrorCode.TIMEOUT),
        ("UNSUPPORTED", GeolocationErrorCode.UNSUPPORTED),
        (42, GeolocationErrorCode.UNKNOWN),
        ("weird", GeolocationErrorCode.UNKNOWN),
        (None, GeolocationErrorCode.UNKNOWN),
    ],
)
def test_classify_geolocation_error(code, expected):
    assert classify_geolocation_error(code) is expected


def test_describe_geolocation_error_messages():
    assert describe_geolocation_error(2) == "Location information is unavailable."
    assert describe_geolocation_error("unsupported") == "Geolocation is not supported by this browser."
    assert describe_geolocation_error(None) == "Unable to retrieve location."
