"""
Buddies Domain - Travel companion search and matching.

This domain handles:
- Filtering the buddy roster by destination, budget, style and more
- AI compatibility matching with a static fallback
"""

from .matcher import BUDDY_PROFILES, FALLBACK_MATCHES, BuddyMatcher, filter_buddies, generate_buddies
from .models import (
    BuddyMatch,
    BuddySearchRequest,
    BuddySearchResponse,
    CompatibilityAnalysis,
    MatchPreferences,
    MatchRequest,
    MatchResult,
    TravelBuddy,
)

__all__ = [
    "BuddyMatcher",
    "BUDDY_PROFILES",
    "FALLBACK_MATCHES",
    "filter_buddies",
    "generate_buddies",
    "BuddyMatch",
    "BuddySearchRequest",
    "BuddySearchResponse",
    "CompatibilityAnalysis",
    "MatchPreferences",
    "MatchRequest",
    "MatchResult",
    "TravelBuddy",
]
