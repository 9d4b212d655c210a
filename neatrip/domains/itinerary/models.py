"""
Itinerary Models - Data types for AI itinerary planning.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from neatrip.domains.base import CamelModel


class ActivityCategory(str, Enum):
    """Activity categories the planner is asked to use."""

    SIGHTSEEING = "sightseeing"
    DINING = "dining"
    TRANSPORT = "transport"
    ACCOMMODATION = "accommodation"
    ACTIVITY = "activity"
    RELAXATION = "relaxation"


class ItineraryRequest(CamelModel):
    """Body of POST /api/itinerary."""

    destination: str = Field(..., min_length=1)
    duration: int = Field(..., ge=1, le=30)  # days
    budget: str = "moderate"
    travel_style: str = "balanced"
    interests: list[str] = Field(default_factory=list)
    group_size: int = Field(default=1, ge=1)
    accommodation: str = ""
    transportation: str = "public transport"


class ItineraryActivity(CamelModel):
    """One scheduled activity."""

    id: str
    name: str
    description: str = ""
    location: str = ""
    duration: str = ""
    start_time: str = ""
    category: str = ActivityCategory.ACTIVITY.value
    cost: str = ""
    tips: list[str] = Field(default_factory=list)
    priority: str = "medium"


class ItineraryDay(CamelModel):
    """A single day of the plan."""

    day: int = Field(..., ge=1)
    date: str
    activities: list[ItineraryActivity] = Field(default_factory=list)
    total_duration: str = ""
    estimated_cost: str = ""


class ItineraryPlan(CamelModel):
    """Response of POST /api/itinerary."""

    itinerary: list[ItineraryDay] = Field(..., min_length=1)
