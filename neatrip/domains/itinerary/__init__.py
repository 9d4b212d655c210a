"""
Itinerary Domain - AI-assisted trip planning.

This domain handles:
- Prompt construction from traveller preferences
- JSON extraction and shape validation of the model reply
- Canned fallback plans when the model is unavailable
"""

from .models import (
    ActivityCategory,
    ItineraryActivity,
    ItineraryDay,
    ItineraryPlan,
    ItineraryRequest,
)
from .planner import FALLBACK_ACTIVITIES, ItineraryPlanner, build_fallback_itinerary

__all__ = [
    "ActivityCategory",
    "ItineraryActivity",
    "ItineraryDay",
    "ItineraryPlan",
    "ItineraryRequest",
    "ItineraryPlanner",
    "FALLBACK_ACTIVITIES",
    "build_fallback_itinerary",
]
