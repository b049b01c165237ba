"""
Offline place autocomplete.

Used when no hosted places API is configured: a fixed gazetteer of Indian cities,
matched by case-insensitive prefix on the city name. The data contract (place id,
description, coordinate) is the same one the web client gets from a hosted
autocomplete service.
"""

from __future__ import annotations

from gofloaters.domain.models import PlaceResult

DEFAULT_LIMIT = 6

# (place_id, main_text, secondary_text, lat, lng)
_CITIES: list[tuple[str, str, str, float, float]] = [
    ("bangalore", "Bangalore", "Karnataka, India", 12.9716, 77.5946),
    ("mumbai", "Mumbai", "Maharashtra, India", 19.0760, 72.8777),
    ("delhi", "New Delhi", "Delhi, India", 28.6139, 77.2090),
    ("pune", "Pune", "Maharashtra, India", 18.5204, 73.8567),
    ("hyderabad", "Hyderabad", "Telangana, India", 17.3850, 78.4867),
    ("chennai", "Chennai", "Tamil Nadu, India", 13.0827, 80.2707),
    ("kolkata", "Kolkata", "West Bengal, India", 22.5726, 88.3639),
    ("ahmedabad", "Ahmedabad", "Gujarat, India", 23.0225, 72.5714),
    ("jaipur", "Jaipur", "Rajasthan, India", 26.9124, 75.7873),
    ("surat", "Surat", "Gujarat, India", 21.1702, 72.8311),
    ("lucknow", "Lucknow", "Uttar Pradesh, India", 26.8467, 80.9462),
    ("kanpur", "Kanpur", "Uttar Pradesh, India", 26.4499, 80.3319),
    ("nagpur", "Nagpur", "Maharashtra, India", 21.1458, 79.0882),
    ("indore", "Indore", "Madhya Pradesh, India", 22.7196, 75.8577),
    ("thane", "Thane", "Maharashtra, India", 19.2183, 72.9781),
    ("bhopal", "Bhopal", "Madhya Pradesh, India", 23.2599, 77.4126),
    ("visakhapatnam", "Visakhapatnam", "Andhra Pradesh, India", 17.6868, 83.2185),
    ("patna", "Patna", "Bihar, India", 25.5941, 85.1376),
    ("vadodara", "Vadodara", "Gujarat, India", 22.3072, 73.1812),
    ("ghaziabad", "Ghaziabad", "Uttar Pradesh, India", 28.6692, 77.4538),
    ("ludhiana", "Ludhiana", "Punjab, India", 30.9010, 75.8573),
    ("agra", "Agra", "Uttar Pradesh, India", 27.1767, 78.0081),
    ("nashik", "Nashik", "Maharashtra, India", 19.9975, 73.7898),
    ("faridabad", "Faridabad", "Haryana, India", 28.4089, 77.3178),
    ("navi_mumbai", "Navi Mumbai", "Maharashtra, India", 19.0330, 73.0297),
    ("noida", "Noida", "Uttar Pradesh, India", 28.5355, 77.3910),
    ("gurugram", "Gurugram", "Haryana, India", 28.4595, 77.0266),
    ("chandigarh", "Chandigarh", "India", 30.7333, 76.7794),
    ("coimbatore", "Coimbatore", "Tamil Nadu, India", 11.0168, 76.9558),
    ("madurai", "Madurai", "Tamil Nadu, India", 9.9252, 78.1198),
    ("mysore", "Mysuru", "Karnataka, India", 12.2958, 76.6394),
    ("mangalore", "Mangaluru", "Karnataka, India", 12.9141, 74.8560),
    ("hubli", "Hubballi-Dharwad", "Karnataka, India", 15.3647, 75.1240),
    ("kochi", "Kochi", "Kerala, India", 9.9312, 76.2673),
    ("thiruvananthapuram", "Thiruvananthapuram", "Kerala, India", 8.5241, 76.9366),
    ("guwahati", "Guwahati", "Assam, India", 26.1445, 91.7362),
    ("bhubaneswar", "Bhubaneswar", "Odisha, India", 20.2961, 85.8245),
    ("dehradun", "Dehradun", "Uttarakhand, India", 30.3165, 78.0322),
    ("goa", "Goa", "India", 15.2993, 74.1240),
]

PLACES: dict[str, PlaceResult] = {
    place_id: PlaceResult(
        place_id=place_id,
        description=f"{main}, {secondary}",
        main_text=main,
        secondary_text=secondary,
        lat=lat,
        lng=lng,
    )
    for place_id, main, secondary, lat, lng in _CITIES
}


def search_places(query: str | None, *, limit: int = DEFAULT_LIMIT) -> list[PlaceResult]:
    """Return places whose name starts with `query` (case-insensitive), gazetteer order."""
    needle = (query or "").strip().lower()
    if not needle or limit <= 0:
        return []
    out: list[PlaceResult] = []
    for place in PLACES.values():
        if place.main_text.lower().startswith(needle):
            out.append(place)
            if len(out) >= limit:
                break
    return out


def get_place(place_id: str) -> PlaceResult | None:
    return PLACES.get(place_id.strip())
