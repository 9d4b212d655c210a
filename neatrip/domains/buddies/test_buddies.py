"""
Tests for travel buddy search and matching.
"""

from __future__ import annotations

import random
from unittest.mock import AsyncMock

import pytest

from neatrip.config import LLMError

from .matcher import BuddyMatcher, generate_buddies
from .models import BuddySearchRequest, MatchRequest, MatchResult


@pytest.fixture
def mock_llm() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def matcher(mock_llm: AsyncMock) -> BuddyMatcher:
    return BuddyMatcher(mock_llm, rng=random.Random(0))


@pytest.fixture
def match_request() -> MatchRequest:
    return MatchRequest.model_validate(
        {
            "userId": "user-1",
            "preferences": {
                "destinations": ["Bali, Indonesia"],
                "travelStyle": ["Adventure"],
                "interests": ["Photography"],
                "budget": "Mid-range ($1000-2000)",
                "ageRange": [24, 34],
                "languages": ["English"],
                "preferences": {
                    "smoking": False,
                    "drinking": True,
                    "adventureLevel": 8,
                    "socialLevel": 6,
                },
            },
        }
    )


# --- Roster ---


def test_roster_ids_and_scores() -> None:
    buddies = generate_buddies(random.Random(5))
    assert [b.id for b in buddies] == ["buddy-1", "buddy-2", "buddy-3", "buddy-4"]
    assert all(70 <= b.match_score <= 99 for b in buddies)


# --- Search ---


def test_search_without_filters_returns_everyone(matcher: BuddyMatcher) -> None:
    response = matcher.search(BuddySearchRequest())
    assert response.total == 4
    assert len(response.buddies) == 4


def test_search_by_destination(matcher: BuddyMatcher) -> None:
    response = matcher.search(BuddySearchRequest(destination="Bali, Indonesia"))
    assert {b.name for b in response.buddies} == {"Sarah Chen", "Emma Johnson"}


def test_search_by_budget_exact(matcher: BuddyMatcher) -> None:
    response = matcher.search(BuddySearchRequest(budget="Luxury ($3500+)"))
    assert [b.name for b in response.buddies] == ["Yuki Tanaka"]


def test_search_by_style_overlap(matcher: BuddyMatcher) -> None:
    response = matcher.search(BuddySearchRequest(travel_style=["Luxury", "Backpacking"]))
    assert {b.name for b in response.buddies} == {"Emma Johnson", "Yuki Tanaka"}


def test_search_by_interests_and_languages(matcher: BuddyMatcher) -> None:
    response = matcher.search(
        BuddySearchRequest(interests=["Food & Dining"], languages=["Spanish"])
    )
    assert [b.name for b in response.buddies] == ["Marco Rodriguez"]


def test_search_by_age_range(matcher: BuddyMatcher) -> None:
    response = matcher.search(BuddySearchRequest(age_range=(26, 30)))
    assert {b.name for b in response.buddies} == {"Sarah Chen", "Yuki Tanaka"}


def test_search_query_is_case_insensitive(matcher: BuddyMatcher) -> None:
    response = matcher.search(BuddySearchRequest(search_query="BARCELONA"))
    assert [b.name for b in response.buddies] == ["Marco Rodriguez"]

    response = matcher.search(BuddySearchRequest(search_query="photography"))
    assert [b.name for b in response.buddies] == ["Sarah Chen"]


def test_search_limit_keeps_total(matcher: BuddyMatcher) -> None:
    response = matcher.search(BuddySearchRequest(limit=1))
    assert len(response.buddies) == 1
    assert response.total == 4


def test_search_rejects_inverted_age_range() -> None:
    with pytest.raises(ValueError):
        BuddySearchRequest(age_range=(40, 20))


# --- Match ---


def test_match_request_requires_user_and_preferences() -> None:
    with pytest.raises(ValueError):
        MatchRequest.model_validate({"preferences": {}})
    with pytest.raises(ValueError):
        MatchRequest.model_validate({"userId": "u1"})


async def test_match_uses_model_output(
    matcher: BuddyMatcher, mock_llm: AsyncMock, match_request: MatchRequest
) -> None:
    mock_llm.complete_json.return_value = {
        "matches": [
            {"userId": "buddy-3", "matchScore": 91, "strengths": ["Both love hiking"]}
        ],
        "recommendations": "Go with Emma.",
    }

    result = await matcher.match(match_request)

    assert result.matches[0].user_id == "buddy-3"
    assert result.recommendations == "Go with Emma."
    prompt = mock_llm.complete_json.call_args.args[0]
    assert "buddy-1: Sarah Chen" in prompt
    assert "Age Range: 24 - 34" in prompt
    assert mock_llm.complete_json.call_args.kwargs["temperature"] == 0.3


async def test_match_falls_back_on_llm_error(
    matcher: BuddyMatcher, mock_llm: AsyncMock, match_request: MatchRequest
) -> None:
    mock_llm.complete_json.side_effect = LLMError("down")

    result = await matcher.match(match_request)

    assert isinstance(result, MatchResult)
    assert [m.user_id for m in result.matches] == ["buddy-1", "buddy-2"]
    assert [m.match_score for m in result.matches] == [95, 88]
    assert result.recommendations


async def test_match_falls_back_on_bad_shape(
    matcher: BuddyMatcher, mock_llm: AsyncMock, match_request: MatchRequest
) -> None:
    mock_llm.complete_json.return_value = {"matches": [{"matchScore": "very high"}]}

    result = await matcher.match(match_request)

    payload = result.to_json_dict()
    assert payload["matches"][0]["userId"] == "buddy-1"
    assert "compatibilityAnalysis" in payload["matches"][0]
    assert "potentialChallenges" in payload["matches"][0]
