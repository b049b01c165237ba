from gofloaters.location.places import get_place, search_places


def test_search_places_prefix_match_case_insensitive():
    names = [p.main_text for p in search_places("BAN")]
    assert names == ["Bangalore"]


def test_search_places_is_prefix_not_substring():
    assert [p.main_text for p in search_places("umbai")] == []


def test_search_places_limit_and_blank_query():
    assert len(search_places("g", limit=2)) == 2
    assert search_places("   ") == []
    assert search_places(None) == []


def test_place_converts_to_selected_reference_point():
    place = get_place("mumbai")
    assert place is not None
    point = place.to_reference_point()
    assert point.name == "Mumbai, Maharashtra, India"
    assert point.source == "selected"
    assert get_place("atlantis") is None
