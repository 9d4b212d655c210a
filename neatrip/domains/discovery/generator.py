"""
AR Place Generator - Mock points of interest around the viewer.

Each template gets a bearing in its own 45-degree sector (plus up to 30
degrees of jitter) and a distance between 10% and 90% of the radius. The
offset is converted to degrees with an equirectangular approximation
(111 km per degree of latitude, scaled by cos(lat) for longitude).
"""

from __future__ import annotations

import logging
import math
import random
from typing import Any

from .models import ARCategory, ARPlace, DiscoveryRequest, DiscoveryResponse, Location

logger = logging.getLogger(__name__)

__all__ = ["PLACE_TEMPLATES", "discover_places", "generate_places"]

METERS_PER_DEGREE = 111_000.0

PLACE_TEMPLATES: list[dict[str, Any]] = [
    {
        "name": "Sunset Restaurant",
        "description": "Fine dining with panoramic city views and exceptional cuisine",
        "category": ARCategory.RESTAURANT,
        "rating": 4.8,
        "is_verified": True,
        "tags": ["fine dining", "romantic", "views", "wine"],
        "highlights": ["Live music weekends", "Rooftop seating", "Award-winning chef"],
        "current_visitors": 23,
        "estimated_wait_time": "15-20 min",
    },
    {
        "name": "Historic Museum",
        "description": "Ancient artifacts and interactive exhibits spanning 2000 years of history",
        "category": ARCategory.ATTRACTION,
        "rating": 4.6,
        "is_verified": True,
        "tags": ["history", "culture", "education", "family-friendly"],
        "highlights": ["VR experiences", "Guided tours", "Gift shop"],
        "current_visitors": 67,
        "estimated_wait_time": "5-10 min",
    },
    {
        "name": "Artisan Coffee House",
        "description": "Specialty coffee roastery with locally sourced beans and cozy atmosphere",
        "category": ARCategory.CAFE,
        "rating": 4.9,
        "is_verified": False,
        "tags": ["coffee", "wifi", "workspace", "pastries"],
        "highlights": ["Coffee brewing classes", "Local art displays", "Pet-friendly"],
        "current_visitors": 12,
        "estimated_wait_time": "No wait",
    },
    {
        "name": "Central Park",
        "description": "Lush green space with walking trails, lake, and recreational facilities",
        "category": ARCategory.NATURE,
        "rating": 4.7,
        "is_verified": True,
        "tags": ["nature", "walking", "relaxation", "family"],
        "highlights": ["Boat rentals", "Outdoor concerts", "Playground"],
        "current_visitors": 156,
        "estimated_wait_time": "No wait",
    },
    {
        "name": "Luxury Shopping Mall",
        "description": "Premium shopping destination with designer brands and entertainment complex",
        "category": ARCategory.SHOPPING,
        "rating": 4.4,
        "is_verified": True,
        "tags": ["luxury", "shopping", "dining", "entertainment"],
        "highlights": ["Designer stores", "Food court", "Cinema complex"],
        "current_visitors": 234,
        "estimated_wait_time": "No wait",
    },
    {
        "name": "Tech Innovation Center",
        "description": "Interactive technology museum showcasing the latest innovations and future trends",
        "category": ARCategory.ATTRACTION,
        "rating": 4.5,
        "is_verified": True,
        "tags": ["technology", "innovation", "interactive", "education"],
        "highlights": ["VR experiences", "AI demonstrations", "Coding workshops"],
        "current_visitors": 89,
        "estimated_wait_time": "10-15 min",
    },
    {
        "name": "Ocean View Cafe",
        "description": "Seaside cafe with fresh seafood and stunning ocean views",
        "category": ARCategory.CAFE,
        "rating": 4.7,
        "is_verified": False,
        "tags": ["seafood", "ocean views", "cafe", "relaxation"],
        "highlights": ["Fresh seafood", "Sunset views", "Outdoor seating"],
        "current_visitors": 34,
        "estimated_wait_time": "5-10 min",
    },
    {
        "name": "Adventure Sports Center",
        "description": "Extreme sports facility offering rock climbing, zip-lining, and bungee jumping",
        "category": ARCategory.ENTERTAINMENT,
        "rating": 4.6,
        "is_verified": True,
        "tags": ["adventure", "sports", "extreme", "outdoor"],
        "highlights": ["Professional instructors", "Safety equipment", "Group packages"],
        "current_visitors": 45,
        "estimated_wait_time": "20-30 min",
    },
]


def generate_places(
    origin: Location,
    radius: float,
    rng: random.Random | None = None,
) -> list[ARPlace]:
    """
    Place every template around `origin` within `radius` metres.

    Args:
        origin: Viewer position
        radius: Search radius in metres
        rng: Random source (seed it for reproducible output)

    Returns:
        One ARPlace per template, ids "place-1".."place-N"
    """
    rng = rng or random.Random()
    lat_scale = math.cos(math.radians(origin.lat))
    places = []

    for index, template in enumerate(PLACE_TEMPLATES):
        bearing = math.radians(index * 45 + rng.random() * 30)
        distance = rng.random() * radius * 0.8 + radius * 0.1

        lat = origin.lat + (distance / METERS_PER_DEGREE) * math.cos(bearing)
        lng = origin.lng + (distance / (METERS_PER_DEGREE * lat_scale)) * math.sin(bearing)

        # Bearing from viewer to place in the degree plane, normalised to 0-360
        direction = math.degrees(math.atan2(lng - origin.lng, lat - origin.lat))
        direction = (direction + 360) % 360

        places.append(
            ARPlace(
                id=f"place-{index + 1}",
                distance=round(distance),
                direction=round(direction) % 360,
                latitude=lat,
                longitude=lng,
                **template,
            )
        )

    return places


def discover_places(
    request: DiscoveryRequest,
    rng: random.Random | None = None,
    default_radius: float = 1000.0,
) -> DiscoveryResponse:
    """
    Run a discovery request: generate, filter by category, then limit.

    `total` counts the filtered places before the limit is applied.
    """
    radius = request.radius or default_radius
    places = generate_places(request.location, radius, rng)

    if request.category:
        places = [p for p in places if p.category == request.category]

    total = len(places)
    if request.limit:
        places = places[: request.limit]

    logger.info(
        "AR discovery: lat=%.5f lng=%.5f radius=%.0f category=%s -> %d/%d places",
        request.location.lat,
        request.location.lng,
        radius,
        request.category.value if request.category else "any",
        len(places),
        total,
    )

    return DiscoveryResponse(
        places=places,
        total=total,
        location=request.location,
        heading=request.heading,
        radius=radius,
    )
