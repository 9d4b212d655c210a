"""
Discovery Models - Data types for AR place discovery.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from neatrip.domains.base import CamelModel


class ARCategory(str, Enum):
    """Categories the AR overlay can filter by."""

    RESTAURANT = "restaurant"
    ATTRACTION = "attraction"
    CAFE = "cafe"
    NATURE = "nature"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"


class Location(CamelModel):
    """A WGS84 coordinate. Poles are excluded (longitude scale is undefined)."""

    lat: float = Field(..., gt=-90.0, lt=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)


class DiscoveryRequest(CamelModel):
    """Body of POST /api/ar-discovery."""

    location: Location
    heading: float = 0.0
    radius: float | None = Field(default=None, ge=10.0, le=50_000.0)  # metres
    category: ARCategory | None = None
    limit: int | None = Field(default=None, ge=1)


class ARPlace(CamelModel):
    """A place positioned relative to the viewer."""

    id: str
    name: str
    description: str
    category: ARCategory
    distance: int  # metres, rounded
    direction: int  # degrees clockwise from north, 0-359
    rating: float
    is_verified: bool
    image: str | None = None
    tags: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)
    current_visitors: int = 0
    estimated_wait_time: str | None = None
    latitude: float
    longitude: float


class DiscoveryResponse(CamelModel):
    """Discovery result envelope."""

    places: list[ARPlace]
    total: int
    location: Location
    heading: float
    radius: float
