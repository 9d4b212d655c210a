"""
API Routes.
"""

from . import (
    auth,
    buddies,
    discovery,
    health,
    itinerary,
    notifications,
    places,
    posts,
    preferences,
    users,
)

__all__ = [
    "health",
    "discovery",
    "itinerary",
    "buddies",
    "auth",
    "preferences",
    "posts",
    "users",
    "places",
    "notifications",
]
