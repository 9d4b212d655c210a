"""
Itinerary Planner - AI day-by-day plans with a canned fallback.

The model is asked for JSON; the first `{...}` span in its reply is
parsed and validated. Any failure along the way (transport, missing or
malformed JSON, wrong shape) yields the fallback plan instead. Callers
never see the failure.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import date, timedelta
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from neatrip.config import LLMError

from .models import ItineraryActivity, ItineraryDay, ItineraryPlan, ItineraryRequest

if TYPE_CHECKING:
    from neatrip.adapters.llm import LLMService

logger = logging.getLogger(__name__)

__all__ = ["FALLBACK_ACTIVITIES", "ItineraryPlanner", "build_fallback_itinerary"]

SYSTEM_INSTRUCTION = (
    "You are an expert travel planner who creates detailed, realistic, and "
    "helpful travel itineraries. Always respond with valid JSON."
)

TEMPERATURE = 0.7
MAX_TOKENS = 2000

FALLBACK_ACTIVITIES: list[dict[str, object]] = [
    {
        "name": "Historic City Center Walking Tour",
        "description": "Explore the ancient heart of the city with a knowledgeable local guide",
        "location": "Old Town Square",
        "duration": "3 hours",
        "category": "sightseeing",
        "cost": "$25",
        "tips": ["Wear comfortable shoes", "Bring a camera", "Book in advance"],
        "priority": "high",
    },
    {
        "name": "Traditional Local Restaurant",
        "description": "Experience authentic local cuisine in a family-owned establishment",
        "location": "Grandma's Kitchen",
        "duration": "1.5 hours",
        "category": "dining",
        "cost": "$35",
        "tips": ["Try the signature dish", "Make reservations"],
        "priority": "medium",
    },
    {
        "name": "Scenic Viewpoint Hike",
        "description": "Hike to breathtaking panoramic views of the surrounding landscape",
        "location": "Eagle Peak Trail",
        "duration": "4 hours",
        "category": "activity",
        "cost": "$15",
        "tips": ["Bring water and snacks", "Wear hiking boots", "Check weather"],
        "priority": "high",
    },
    {
        "name": "Local Art Museum Visit",
        "description": "Discover the region's artistic heritage and contemporary works",
        "location": "Municipal Art Museum",
        "duration": "2 hours",
        "category": "sightseeing",
        "cost": "$20",
        "tips": ["Audio guide recommended", "Photography allowed in most areas"],
        "priority": "medium",
    },
    {
        "name": "Sunset Beach Relaxation",
        "description": "Unwind at the beautiful beach with stunning sunset views",
        "location": "Golden Beach",
        "duration": "2 hours",
        "category": "relaxation",
        "cost": "$0",
        "tips": ["Bring a towel", "Best time for photos is 30 min before sunset"],
        "priority": "low",
    },
]

ACTIVITIES_PER_DAY = 3


def build_fallback_itinerary(
    request: ItineraryRequest,
    start: date | None = None,
    rng: random.Random | None = None,
) -> ItineraryPlan:
    """
    Canned plan: the first three activities every day, three hours apart
    from 09:00, with a daily cost between $100 and $249.
    """
    start = start or date.today()
    rng = rng or random.Random()

    days = []
    for index in range(request.duration):
        day_number = index + 1
        activities = [
            ItineraryActivity(
                id=f"{day_number}-{slot + 1}",
                start_time=f"{9 + slot * 3:02d}:00",
                **template,
            )
            for slot, template in enumerate(FALLBACK_ACTIVITIES[:ACTIVITIES_PER_DAY])
        ]
        days.append(
            ItineraryDay(
                day=day_number,
                date=(start + timedelta(days=index)).isoformat(),
                activities=activities,
                total_duration="8 hours",
                estimated_cost=f"${rng.randint(100, 249)}",
            )
        )

    return ItineraryPlan(itinerary=days)


def build_prompt(request: ItineraryRequest) -> str:
    """Render the user prompt for the planner model."""
    interests = ", ".join(request.interests) or "General sightseeing"
    return f"""
You are an expert travel planner. Create a detailed {request.duration}-day itinerary for {request.destination}.

Travel Preferences:
- Budget: {request.budget}
- Travel Style: {request.travel_style}
- Group Size: {request.group_size}
- Interests: {interests}
- Transportation: {request.transportation}
- Special Requirements: {request.accommodation or "None"}

Please provide a day-by-day itinerary with the following structure for each day:
- Day number and date
- 3-4 activities with realistic timing
- Each activity should include: name, description, location, duration, start time, category, cost, and pro tips
- Total duration and estimated cost for the day

Categories to use: sightseeing, dining, transport, accommodation, activity, relaxation
- Make activities realistic and well-timed
- Include local insights and practical tips
- Consider travel time between locations
- Match the budget level specified
- Include a mix of activities based on interests

Return the response in JSON format with this structure:
{{
  "itinerary": [
    {{
      "day": 1,
      "date": "2024-01-15",
      "activities": [
        {{
          "id": "1-1",
          "name": "Activity Name",
          "description": "Detailed description",
          "location": "Location name",
          "duration": "2 hours",
          "startTime": "09:00",
          "category": "sightseeing",
          "cost": "$25",
          "tips": ["Tip 1", "Tip 2"],
          "priority": "high"
        }}
      ],
      "totalDuration": "8 hours",
      "estimatedCost": "$150"
    }}
  ]
}}
"""


class ItineraryPlanner:
    """
    Builds itineraries with the completion service, falling back to
    canned data on any failure.

    Example:
        >>> planner = ItineraryPlanner(LLMService())
        >>> plan = await planner.plan(ItineraryRequest(destination="Kyoto", duration=3))
    """

    def __init__(
        self,
        llm: LLMService,
        rng: random.Random | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._llm = llm
        self._rng = rng or random.Random()
        self._today = today

    async def plan(self, request: ItineraryRequest) -> ItineraryPlan:
        """Generate a plan for the request. Never raises on AI failure."""
        try:
            data = await self._llm.complete_json(
                build_prompt(request),
                system_instruction=SYSTEM_INSTRUCTION,
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
            plan = ItineraryPlan.model_validate(data)
        except LLMError as e:
            logger.warning("Itinerary generation failed, using fallback: %s", e)
        except PydanticValidationError as e:
            logger.warning(
                "Itinerary response has unexpected shape, using fallback: %d errors",
                e.error_count(),
            )
        else:
            logger.info(
                "Itinerary generated: destination=%s days=%d",
                request.destination,
                len(plan.itinerary),
            )
            return plan

        return build_fallback_itinerary(request, start=self._today(), rng=self._rng)
