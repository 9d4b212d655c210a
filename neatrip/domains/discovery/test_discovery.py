"""
Tests for AR place discovery.
"""

from __future__ import annotations

import math
import random

import pytest

from .generator import PLACE_TEMPLATES, discover_places, generate_places
from .models import ARCategory, DiscoveryRequest, Location


def _equirectangular_distance(origin: Location, lat: float, lng: float) -> float:
    dy = (lat - origin.lat) * 111_000
    dx = (lng - origin.lng) * 111_000 * math.cos(math.radians(origin.lat))
    return math.hypot(dx, dy)


# --- Model Tests ---


def test_request_requires_location() -> None:
    with pytest.raises(ValueError):
        DiscoveryRequest.model_validate({"heading": 90})


def test_request_requires_lat_and_lng() -> None:
    with pytest.raises(ValueError):
        DiscoveryRequest.model_validate({"location": {"lat": 10.0}})


def test_request_rejects_poles() -> None:
    with pytest.raises(ValueError):
        Location(lat=90.0, lng=0.0)


def test_request_accepts_camel_case() -> None:
    request = DiscoveryRequest.model_validate(
        {"location": {"lat": 1.0, "lng": 2.0}, "heading": 45, "category": "cafe", "limit": 2}
    )
    assert request.category == ARCategory.CAFE
    assert request.limit == 2


# --- Generator Tests ---


@pytest.mark.parametrize("seed", range(20))
@pytest.mark.parametrize("radius", [10.0, 250.0, 1000.0, 25_000.0])
def test_generated_places_stay_within_radius(seed: int, radius: float) -> None:
    origin = Location(lat=48.8566, lng=2.3522)
    places = generate_places(origin, radius, random.Random(seed))

    assert len(places) == len(PLACE_TEMPLATES)
    for place in places:
        assert place.distance <= radius
        actual = _equirectangular_distance(origin, place.latitude, place.longitude)
        assert actual <= radius
        assert actual == pytest.approx(place.distance, abs=1.0)


def test_directions_normalised() -> None:
    places = generate_places(Location(lat=-33.86, lng=151.2), 1000, random.Random(7))
    for place in places:
        assert 0 <= place.direction < 360


def test_direction_matches_sector_at_equator() -> None:
    places = generate_places(Location(lat=0.0, lng=0.0), 1000, random.Random(3))
    for index, place in enumerate(places):
        low, high = index * 45, index * 45 + 30
        assert low - 1 <= place.direction <= high + 1


def test_ids_are_sequential() -> None:
    places = generate_places(Location(lat=0.0, lng=0.0), 500, random.Random(1))
    assert [p.id for p in places] == [f"place-{i}" for i in range(1, 9)]


# --- discover_places ---


def test_discover_defaults_radius() -> None:
    response = discover_places(
        DiscoveryRequest(location=Location(lat=40.0, lng=-74.0)), random.Random(2)
    )
    assert response.radius == 1000
    assert response.total == len(PLACE_TEMPLATES)
    assert all(p.distance <= 1000 for p in response.places)


def test_discover_filters_by_category() -> None:
    request = DiscoveryRequest(
        location=Location(lat=40.0, lng=-74.0), category=ARCategory.ATTRACTION
    )
    response = discover_places(request, random.Random(2))

    assert response.total == 2
    assert {p.name for p in response.places} == {"Historic Museum", "Tech Innovation Center"}


def test_discover_total_counts_before_limit() -> None:
    request = DiscoveryRequest(location=Location(lat=40.0, lng=-74.0), limit=3)
    response = discover_places(request, random.Random(2))

    assert len(response.places) == 3
    assert response.total == len(PLACE_TEMPLATES)


def test_discover_echoes_heading_and_location() -> None:
    request = DiscoveryRequest(location=Location(lat=12.5, lng=7.25), heading=270)
    response = discover_places(request, random.Random(0))
    payload = response.to_json_dict()

    assert payload["heading"] == 270
    assert payload["location"] == {"lat": 12.5, "lng": 7.25}
    assert "isVerified" in payload["places"][0]
    assert "currentVisitors" in payload["places"][0]
