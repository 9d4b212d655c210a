"""
Itinerary Routes - AI day-by-day trip plans.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from neatrip.adapters.analytics import AnalyticsTracker
from neatrip.domains.itinerary import ItineraryPlan, ItineraryPlanner, ItineraryRequest
from neatrip.interfaces.api.deps import get_itinerary_planner, get_tracker

router = APIRouter()


@router.post("", response_model=ItineraryPlan)
async def generate_itinerary(
    request: ItineraryRequest,
    planner: ItineraryPlanner = Depends(get_itinerary_planner),
    tracker: AnalyticsTracker = Depends(get_tracker),
):
    """
    Plan a trip.

    Always answers 200 for a valid request: when the AI service fails
    or returns something unusable, a canned itinerary is returned.
    """
    plan = await planner.plan(request)
    await tracker.track(
        "itinerary_generated",
        {"destination": request.destination, "duration": request.duration},
    )
    return plan
