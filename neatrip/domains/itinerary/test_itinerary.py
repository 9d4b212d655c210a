"""
Tests for the itinerary planner.
"""

from __future__ import annotations

import random
from datetime import date
from unittest.mock import AsyncMock

import pytest

from neatrip.config import ErrorCode, LLMError

from .models import ItineraryPlan, ItineraryRequest
from .planner import ItineraryPlanner, build_fallback_itinerary, build_prompt

TODAY = date(2025, 3, 10)


@pytest.fixture
def request_body() -> ItineraryRequest:
    return ItineraryRequest(
        destination="Lisbon",
        duration=2,
        budget="budget",
        travel_style="cultural",
        interests=["food", "history"],
        group_size=2,
    )


@pytest.fixture
def mock_llm() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def planner(mock_llm: AsyncMock) -> ItineraryPlanner:
    return ItineraryPlanner(mock_llm, rng=random.Random(0), today=lambda: TODAY)


# --- Request model ---


def test_request_requires_destination_and_duration() -> None:
    with pytest.raises(ValueError):
        ItineraryRequest.model_validate({"destination": "Rome"})
    with pytest.raises(ValueError):
        ItineraryRequest.model_validate({"duration": 3})
    with pytest.raises(ValueError):
        ItineraryRequest.model_validate({"destination": "Rome", "duration": 0})


def test_request_reads_camel_case() -> None:
    request = ItineraryRequest.model_validate(
        {"destination": "Rome", "duration": 3, "travelStyle": "luxury", "groupSize": 4}
    )
    assert request.travel_style == "luxury"
    assert request.group_size == 4


def test_prompt_mentions_preferences(request_body: ItineraryRequest) -> None:
    prompt = build_prompt(request_body)
    assert "2-day itinerary for Lisbon" in prompt
    assert "food, history" in prompt
    assert "Special Requirements: None" in prompt
    assert '"itinerary": [' in prompt


# --- Fallback ---


def test_fallback_shape(request_body: ItineraryRequest) -> None:
    plan = build_fallback_itinerary(request_body, start=TODAY, rng=random.Random(1))

    assert [d.day for d in plan.itinerary] == [1, 2]
    assert [d.date for d in plan.itinerary] == ["2025-03-10", "2025-03-11"]

    for day in plan.itinerary:
        assert [a.id for a in day.activities] == [f"{day.day}-1", f"{day.day}-2", f"{day.day}-3"]
        assert [a.start_time for a in day.activities] == ["09:00", "12:00", "15:00"]
        assert day.total_duration == "8 hours"
        cost = int(day.estimated_cost.lstrip("$"))
        assert 100 <= cost <= 249


def test_fallback_serialises_camel_case(request_body: ItineraryRequest) -> None:
    payload = build_fallback_itinerary(request_body, start=TODAY).to_json_dict()
    day = payload["itinerary"][0]
    assert "totalDuration" in day
    assert "estimatedCost" in day
    assert "startTime" in day["activities"][0]


# --- Planner ---


async def test_plan_uses_model_output(
    planner: ItineraryPlanner, mock_llm: AsyncMock, request_body: ItineraryRequest
) -> None:
    mock_llm.complete_json.return_value = {
        "itinerary": [
            {
                "day": 1,
                "date": "2025-03-10",
                "activities": [
                    {
                        "id": "1-1",
                        "name": "Tram 28",
                        "startTime": "10:00",
                        "category": "transport",
                        "cost": "$3",
                    }
                ],
                "totalDuration": "6 hours",
                "estimatedCost": "$80",
            }
        ]
    }

    plan = await planner.plan(request_body)

    assert isinstance(plan, ItineraryPlan)
    assert plan.itinerary[0].activities[0].name == "Tram 28"
    kwargs = mock_llm.complete_json.call_args.kwargs
    assert kwargs["temperature"] == 0.7
    assert kwargs["max_tokens"] == 2000


async def test_plan_falls_back_on_llm_error(
    planner: ItineraryPlanner, mock_llm: AsyncMock, request_body: ItineraryRequest
) -> None:
    mock_llm.complete_json.side_effect = LLMError("down")

    plan = await planner.plan(request_body)

    assert len(plan.itinerary) == 2
    assert plan.itinerary[0].activities[0].name == "Historic City Center Walking Tour"


async def test_plan_falls_back_on_missing_json(
    planner: ItineraryPlanner, mock_llm: AsyncMock, request_body: ItineraryRequest
) -> None:
    mock_llm.complete_json.side_effect = LLMError(
        "No valid JSON found in response", code=ErrorCode.LLM_INVALID_RESPONSE
    )

    plan = await planner.plan(request_body)

    assert plan.itinerary[0].date == "2025-03-10"


async def test_plan_falls_back_on_wrong_shape(
    planner: ItineraryPlanner, mock_llm: AsyncMock, request_body: ItineraryRequest
) -> None:
    mock_llm.complete_json.return_value = {"days": "not what we asked for"}

    plan = await planner.plan(request_body)

    assert len(plan.itinerary) == request_body.duration
