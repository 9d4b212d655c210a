"""
Discovery Domain - AR place discovery around the viewer.

This domain handles:
- Mock point-of-interest generation within a radius
- Bearing/direction computation for the AR overlay
- Category filtering and result limits
"""

from .generator import PLACE_TEMPLATES, discover_places, generate_places
from .models import ARCategory, ARPlace, DiscoveryRequest, DiscoveryResponse, Location

__all__ = [
    "ARCategory",
    "ARPlace",
    "DiscoveryRequest",
    "DiscoveryResponse",
    "Location",
    "PLACE_TEMPLATES",
    "discover_places",
    "generate_places",
]
