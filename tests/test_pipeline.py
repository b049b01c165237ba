import pytest

from gofloaters.core.geo import GeoPoint, haversine_km
from gofloaters.domain.models import FilterCriteria, FilterLimits, Listing, ReferencePoint
from gofloaters.search.pipeline import (
    UNKNOWN_DISTANCE_SORT_KM,
    GeoFilterPipeline,
    active_filter_count,
    run_pipeline,
)

ORIGIN = ReferencePoint(lat=12.9304278, lng=77.678404, name="Koramangala, Bengaluru")


def _point_km_north(km: float) -> GeoPoint:
    # One degree of latitude is ~111.195 km on a 6371 km sphere.
    return GeoPoint(lat=ORIGIN.lat + km / 111.195, lng=ORIGIN.lng)


def _listing(listing_id: str, *, km: float | None = None, **kwargs) -> Listing:
    coordinate = _point_km_north(km) if km is not None else None
    return Listing(id=listing_id, coordinate=coordinate, **kwargs)


def _ids(results) -> list[str]:
    return [r.id for r in results]


def test_default_criteria_returns_every_listing_once():
    listings = [
        _listing("a", km=2, price_per_hour=400, capacity=4, rating=4.5, facilities={"AC"}),
        _listing("b", km=80, price_per_hour=9000, capacity=200, rating=0),
        _listing("c", price_per_hour=0, capacity=0),
        Listing(id="d", coordinate=GeoPoint(lat=float("nan"), lng=0.0)),
    ]
    results = run_pipeline(listings, ORIGIN)
    assert sorted(_ids(results)) == ["a", "b", "c", "d"]
    assert len(results) == len(listings)


def test_end_to_end_rating_and_distance_bound():
    l1 = _listing("L1", km=2, price_per_hour=400, rating=4.5)
    l2 = _listing("L2", km=10, price_per_hour=1200, rating=3.0)
    l3 = _listing("L3", price_per_hour=0, rating=4.8)
    criteria = FilterCriteria(price_range=(0, 5000), min_rating=4.0, max_distance_km=5)

    results = GeoFilterPipeline().run([l1, l2, l3], ORIGIN, criteria)

    assert _ids(results) == ["L1"]
    assert results[0].distance_km == pytest.approx(2, abs=0.01)


def test_filters_are_conjunctive():
    listings = [
        _listing("ok", km=1, price_per_hour=500, capacity=6, rating=4.2, facilities={"AC", "Hi Speed WiFi"}),
        _listing("too_pricey", km=1, price_per_hour=1500, capacity=6, rating=4.2, facilities={"AC", "Hi Speed WiFi"}),
        _listing("too_small", km=1, price_per_hour=500, capacity=2, rating=4.2, facilities={"AC", "Hi Speed WiFi"}),
        _listing("low_rated", km=1, price_per_hour=500, capacity=6, rating=3.9, facilities={"AC", "Hi Speed WiFi"}),
        _listing("too_far", km=12, price_per_hour=500, capacity=6, rating=4.2, facilities={"AC", "Hi Speed WiFi"}),
        _listing("no_wifi", km=1, price_per_hour=500, capacity=6, rating=4.2, facilities={"AC"}),
    ]
    criteria = FilterCriteria(
        price_range=(100, 1000),
        capacity_range=(4, 10),
        required_facilities={"AC", "Hi Speed WiFi"},
        min_rating=4.0,
        max_distance_km=10,
    )
    assert _ids(run_pipeline(listings, ORIGIN, criteria)) == ["ok"]


def test_facilities_require_full_containment():
    only_ac = _listing("only_ac", km=1, facilities={"AC"})
    both = _listing("both", km=1, facilities={"AC", "WiFi", "Coffee/Tea"})
    criteria = FilterCriteria(required_facilities={"AC", "WiFi"})
    assert _ids(run_pipeline([only_ac, both], ORIGIN, criteria)) == ["both"]


def test_price_and_capacity_at_max_sentinel_are_ignored():
    limits = FilterLimits(max_price=5000, max_capacity=20, max_distance_km=50)
    listings = [
        _listing("cheap", km=1, price_per_hour=50, capacity=1),
        _listing("premium", km=1, price_per_hour=7000, capacity=40),
    ]
    # Lower bounds are set, but the upper bounds sit at the sentinel so both filters are off.
    criteria = FilterCriteria(price_range=(1000, 5000), capacity_range=(10, 20))
    assert _ids(GeoFilterPipeline(limits).run(listings, ORIGIN, criteria)) == ["cheap", "premium"]

    bounded = FilterCriteria(price_range=(1000, 4999), capacity_range=(10, 19))
    assert _ids(GeoFilterPipeline(limits).run(listings, ORIGIN, bounded)) == []


def test_price_range_is_inclusive():
    listings = [_listing("low", km=1, price_per_hour=200), _listing("high", km=1, price_per_hour=800)]
    criteria = FilterCriteria(price_range=(200, 800))
    assert _ids(run_pipeline(listings, ORIGIN, criteria)) == ["low", "high"]


def test_unknown_distance_excluded_only_when_distance_bound_active():
    known = _listing("known", km=3)
    unknown = _listing("unknown")
    assert _ids(run_pipeline([unknown, known], ORIGIN, FilterCriteria(max_distance_km=50))) == ["known", "unknown"]
    assert _ids(run_pipeline([unknown, known], ORIGIN, FilterCriteria(max_distance_km=25))) == ["known"]


def test_no_hardcoded_distance_cutoff():
    far = _listing("far", km=40)
    assert _ids(run_pipeline([far], ORIGIN, FilterCriteria())) == ["far"]
    assert _ids(run_pipeline([far], ORIGIN, FilterCriteria(max_distance_km=45))) == ["far"]


def test_text_query_matches_name_locality_or_city_case_insensitively():
    listings = [
        _listing("by_name", km=1, name="The Koramangala Hub", locality="5th Block", city="Bengaluru"),
        _listing("by_locality", km=1, name="Workden", locality="HSR Layout", city="Bengaluru"),
        _listing("by_city", km=1, name="Desk One", locality="Andheri", city="Mumbai"),
    ]
    assert _ids(run_pipeline(listings, ORIGIN, FilterCriteria(text_query="KORAMANGALA"))) == ["by_name"]
    assert _ids(run_pipeline(listings, ORIGIN, FilterCriteria(text_query="hsr"))) == ["by_locality"]
    assert _ids(run_pipeline(listings, ORIGIN, FilterCriteria(text_query="mumbai"))) == ["by_city"]
    assert len(run_pipeline(listings, ORIGIN, FilterCriteria(text_query="   "))) == 3


def test_sort_is_stable_for_equal_keys_in_both_directions():
    listings = [
        _listing("first", km=1, price_per_hour=500),
        _listing("cheap", km=2, price_per_hour=100),
        _listing("second", km=3, price_per_hour=500),
        _listing("third", km=4, price_per_hour=500),
    ]
    asc = run_pipeline(listings, ORIGIN, FilterCriteria(sort_key="price", sort_direction="asc"))
    desc = run_pipeline(listings, ORIGIN, FilterCriteria(sort_key="price", sort_direction="desc"))
    assert _ids(asc) == ["cheap", "first", "second", "third"]
    assert _ids(desc) == ["first", "second", "third", "cheap"]


def test_unknown_distance_sorts_last_ascending_and_first_descending():
    listings = [_listing("unknown"), _listing("near", km=1), _listing("mid", km=20)]
    asc = run_pipeline(listings, ORIGIN, FilterCriteria(sort_key="distance", sort_direction="asc"))
    desc = run_pipeline(listings, ORIGIN, FilterCriteria(sort_key="distance", sort_direction="desc"))
    assert _ids(asc) == ["near", "mid", "unknown"]
    assert _ids(desc) == ["unknown", "mid", "near"]
    assert UNKNOWN_DISTANCE_SORT_KM == 999


@pytest.mark.parametrize(
    "sort_key,expected",
    [
        ("rating", ["r3", "r4", "r5"]),
        ("capacity", ["r5", "r4", "r3"]),
    ],
)
def test_sort_by_numeric_fields(sort_key, expected):
    listings = [
        _listing("r5", km=1, rating=5.0, capacity=2),
        _listing("r3", km=1, rating=3.0, capacity=30),
        _listing("r4", km=1, rating=4.0, capacity=10),
    ]
    assert _ids(run_pipeline(listings, ORIGIN, FilterCriteria(sort_key=sort_key))) == expected


def test_pipeline_does_not_mutate_input_and_returns_new_list():
    listings = [_listing("b", km=5), _listing("a", km=1)]
    snapshot = list(listings)
    results = run_pipeline(listings, ORIGIN)
    assert listings == snapshot
    assert _ids(results) == ["a", "b"]
    assert results[0].listing == listings[1]


def test_distance_is_recomputed_for_each_reference_point():
    listing = _listing("x", km=5)
    elsewhere = ReferencePoint(lat=19.0760, lng=72.8777)
    near = run_pipeline([listing], ORIGIN)[0].distance_km
    far = run_pipeline([listing], elsewhere)[0].distance_km
    assert near == pytest.approx(5, abs=0.01)
    assert far == pytest.approx(haversine_km(elsewhere.to_geo(), listing.coordinate))


def test_active_filter_count():
    limits = FilterLimits()
    assert active_filter_count(FilterCriteria(), limits) == 0
    criteria = FilterCriteria(
        price_range=(0, 1000), required_facilities={"AC"}, min_rating=4, max_distance_km=10, text_query="hub"
    )
    assert active_filter_count(criteria, limits) == 5
