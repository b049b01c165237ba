"""
Domain models (Pydantic).

These types are the stable contract between layers:
- the lenient parse step (`gofloaters.listings.normalize`) produces `Listing`
- the presentation layer (API/CLI) builds `FilterCriteria` and a `ReferencePoint`
- the pipeline (`gofloaters.search.pipeline`) returns `AnnotatedListing`

Listings and criteria are frozen: the pipeline treats them as read-only and a new
`FilterCriteria` replaces the old one on every user interaction.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from gofloaters.core.geo import GeoPoint


SortKey = Literal["distance", "price", "rating", "capacity"]
SortDirection = Literal["asc", "desc"]
LocationSource = Literal["selected", "device", "last_known", "default"]


class Listing(BaseModel):
    """A meeting space, normalized from the upstream record."""

    model_config = ConfigDict(frozen=True)

    id: str
    coordinate: GeoPoint | None = None
    price_per_hour: float = Field(0, ge=0)
    capacity: int = Field(0, ge=0)
    facilities: frozenset[str] = frozenset()
    rating: float = Field(0, ge=0, le=5)
    name: str = ""
    locality: str = ""
    city: str = ""


class AnnotatedListing(BaseModel):
    """A listing plus its distance from the reference point (None when unknown)."""

    model_config = ConfigDict(frozen=True)

    listing: Listing
    distance_km: float | None = None

    @property
    def id(self) -> str:
        return self.listing.id


class ReferencePoint(BaseModel):
    """The search origin: a device fix, a picked place, or the configured default."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    name: str | None = None
    source: LocationSource = "selected"

    def to_geo(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)


class FilterLimits(BaseModel):
    """Maximum selectable values; a bound at (or above) its limit disables that filter."""

    model_config = ConfigDict(frozen=True)

    max_price: float = Field(5000, gt=0)
    max_capacity: int = Field(20, gt=0)
    max_distance_km: float = Field(50, gt=0)


class FilterCriteria(BaseModel):
    """User-selected filters + sort for one pipeline invocation.

    Defaults are the "unbounded" sentinels, so `FilterCriteria()` filters nothing
    and sorts by ascending distance.
    """

    model_config = ConfigDict(frozen=True)

    price_range: tuple[float, float] = (0, 5000)
    capacity_range: tuple[int, int] = (1, 20)
    required_facilities: frozenset[str] = frozenset()
    min_rating: float = Field(0, ge=0, le=5)
    max_distance_km: float = Field(50, gt=0)
    text_query: str = ""
    sort_key: SortKey = "distance"
    sort_direction: SortDirection = "asc"

    @field_validator("required_facilities", mode="before")
    @classmethod
    def _strip_facilities(cls, value):
        if value is None:
            return frozenset()
        return frozenset(str(v).strip() for v in value if v and str(v).strip())

    @field_validator("text_query", mode="before")
    @classmethod
    def _none_query(cls, value):
        return "" if value is None else value

    @model_validator(mode="after")
    def _validate_ranges(self) -> "FilterCriteria":
        if self.price_range[0] > self.price_range[1]:
            raise ValueError("price_range min must not exceed max")
        if self.capacity_range[0] > self.capacity_range[1]:
            raise ValueError("capacity_range min must not exceed max")
        return self


class SearchRequest(BaseModel):
    """Query accepted by the nearby-spaces proxy route."""

    model_config = ConfigDict(populate_by_name=True)

    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(..., ge=-180, le=180, allow_inf_nan=False)
    space_sub_type: str = Field("meetingSpace", alias="spaceSubType")
    query: str | None = None


class PlaceResult(BaseModel):
    """One location autocomplete prediction (name + coordinate)."""

    place_id: str
    description: str
    main_text: str
    secondary_text: str = ""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    def to_reference_point(self) -> ReferencePoint:
        return ReferencePoint(lat=self.lat, lng=self.lng, name=self.description, source="selected")
