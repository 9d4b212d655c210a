"""
Travel Buddy Matcher - Roster search and AI compatibility matching.

Search filters a fixed roster of mock profiles. Matching asks the
completion service to rank that roster against the traveller's
preferences and falls back to a static result on any failure.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from neatrip.config import LLMError

from .models import (
    BuddySearchRequest,
    BuddySearchResponse,
    MatchRequest,
    MatchResult,
    TravelBuddy,
)

if TYPE_CHECKING:
    from neatrip.adapters.llm import LLMService

logger = logging.getLogger(__name__)

__all__ = ["BUDDY_PROFILES", "BuddyMatcher", "FALLBACK_MATCHES", "generate_buddies"]

SYSTEM_INSTRUCTION = (
    "You are an expert travel matching system. Always respond with valid JSON "
    "and provide detailed compatibility analysis."
)

TEMPERATURE = 0.3
MAX_TOKENS = 1500

BUDDY_PROFILES: list[dict[str, Any]] = [
    {
        "name": "Sarah Chen",
        "age": 28,
        "location": "San Francisco, USA",
        "bio": "Adventure seeker and photography enthusiast. Love exploring hidden gems and local cultures. Always up for spontaneous trips!",
        "travel_style": ["Adventure", "Cultural", "Budget"],
        "interests": ["Hiking & Nature", "Photography", "Food & Dining"],
        "destinations": ["Bali, Indonesia", "Tokyo, Japan", "Bangkok, Thailand"],
        "availability": "Flexible",
        "budget": "Mid-range ($1000-2000)",
        "languages": ["English", "Mandarin"],
        "is_verified": True,
        "last_active": "2 hours ago",
        "stats": {"trips_completed": 12, "reviews_received": 28, "average_rating": 4.8},
        "preferences": {
            "smoking": False, "drinking": True, "early_bird": True, "night_owl": False,
            "vegetarian": False, "adventure_level": 8, "social_level": 7,
        },
    },
    {
        "name": "Marco Rodriguez",
        "age": 32,
        "location": "Barcelona, Spain",
        "bio": "Digital nomad and food lover. Seeking travel buddies for culinary adventures and cultural experiences. Fluent in 4 languages!",
        "travel_style": ["Cultural", "Relaxation", "Digital Nomad"],
        "interests": ["Food & Dining", "History & Culture", "Art & Museums"],
        "destinations": ["Rome, Italy", "Paris, France", "London, UK"],
        "availability": "Weekends",
        "budget": "Comfortable ($2000-3500)",
        "languages": ["Spanish", "English", "Italian", "French"],
        "is_verified": True,
        "last_active": "5 hours ago",
        "stats": {"trips_completed": 18, "reviews_received": 35, "average_rating": 4.9},
        "preferences": {
            "smoking": False, "drinking": True, "early_bird": False, "night_owl": True,
            "vegetarian": True, "adventure_level": 6, "social_level": 9,
        },
    },
    {
        "name": "Emma Johnson",
        "age": 25,
        "location": "London, UK",
        "bio": "Backpacker and budget travel expert. Love meeting new people and sharing travel stories. Always looking for the next adventure!",
        "travel_style": ["Backpacking", "Budget", "Adventure"],
        "interests": ["Hiking & Nature", "Sports & Fitness", "Entertainment"],
        "destinations": ["Bali, Indonesia", "Sydney, Australia", "Bangkok, Thailand"],
        "availability": "Flexible",
        "budget": "Budget ($500-1000)",
        "languages": ["English", "French"],
        "is_verified": False,
        "last_active": "1 day ago",
        "stats": {"trips_completed": 8, "reviews_received": 15, "average_rating": 4.6},
        "preferences": {
            "smoking": False, "drinking": True, "early_bird": True, "night_owl": True,
            "vegetarian": False, "adventure_level": 9, "social_level": 8,
        },
    },
    {
        "name": "Yuki Tanaka",
        "age": 30,
        "location": "Tokyo, Japan",
        "bio": "Luxury travel enthusiast and art lover. Seeking sophisticated travel companions for high-end experiences and cultural immersion.",
        "travel_style": ["Luxury", "Cultural", "Romantic"],
        "interests": ["Art & Museums", "Shopping", "Food & Dining"],
        "destinations": ["Paris, France", "New York, USA", "Singapore"],
        "availability": "Flexible",
        "budget": "Luxury ($3500+)",
        "languages": ["Japanese", "English"],
        "is_verified": True,
        "last_active": "3 hours ago",
        "stats": {"trips_completed": 15, "reviews_received": 22, "average_rating": 4.7},
        "preferences": {
            "smoking": False, "drinking": False, "early_bird": True, "night_owl": False,
            "vegetarian": False, "adventure_level": 4, "social_level": 6,
        },
    },
]

FALLBACK_MATCHES: dict[str, Any] = {
    "matches": [
        {
            "userId": "buddy-1",
            "matchScore": 95,
            "compatibilityAnalysis": {
                "destinations": "High compatibility - both interested in similar destinations",
                "travelStyle": "Excellent match - identical travel preferences",
                "interests": "Strong alignment in interests and activities",
                "budget": "Good match - compatible budget ranges",
                "lifestyle": "Great compatibility in lifestyle preferences",
            },
            "strengths": ["Shared love for adventure", "Similar budget range", "Compatible schedules"],
            "potentialChallenges": ["Different language preferences", "Slight age gap"],
        },
        {
            "userId": "buddy-2",
            "matchScore": 88,
            "compatibilityAnalysis": {
                "destinations": "Good compatibility - some overlapping destinations",
                "travelStyle": "Good match - similar travel preferences",
                "interests": "Moderate alignment in interests",
                "budget": "Acceptable match - budget ranges work",
                "lifestyle": "Good compatibility in most areas",
            },
            "strengths": ["Complementary interests", "Good communication", "Flexible schedules"],
            "potentialChallenges": ["Different adventure levels", "Budget constraints"],
        },
    ],
    "recommendations": (
        "Based on your preferences, we recommend focusing on buddies who share your "
        "passion for adventure and have compatible budgets."
    ),
}


def generate_buddies(rng: random.Random | None = None) -> list[TravelBuddy]:
    """Build the roster with ids "buddy-N" and match scores in 70-99."""
    rng = rng or random.Random()
    return [
        TravelBuddy(id=f"buddy-{index + 1}", match_score=rng.randint(70, 99), **profile)
        for index, profile in enumerate(BUDDY_PROFILES)
    ]


def _overlaps(wanted: list[str], offered: list[str]) -> bool:
    return any(item in offered for item in wanted)


def filter_buddies(
    buddies: list[TravelBuddy], request: BuddySearchRequest
) -> list[TravelBuddy]:
    """Apply the search filters in a fixed order."""
    results = buddies

    if request.destination:
        results = [b for b in results if request.destination in b.destinations]

    if request.budget:
        results = [b for b in results if b.budget == request.budget]

    if request.travel_style:
        results = [b for b in results if _overlaps(request.travel_style, b.travel_style)]

    if request.interests:
        results = [b for b in results if _overlaps(request.interests, b.interests)]

    if request.age_range:
        low, high = request.age_range
        results = [b for b in results if low <= b.age <= high]

    if request.languages:
        results = [b for b in results if _overlaps(request.languages, b.languages)]

    if request.search_query:
        needle = request.search_query.lower()
        results = [
            b
            for b in results
            if needle in b.name.lower()
            or needle in b.location.lower()
            or needle in b.bio.lower()
        ]

    return results


def build_match_prompt(request: MatchRequest, roster: list[TravelBuddy]) -> str:
    """Render the user prompt for the matching model."""
    prefs = request.preferences
    lifestyle = prefs.preferences
    candidates = "\n".join(
        f"- {b.id}: {b.name}, {b.age}, {b.location}; styles={', '.join(b.travel_style)}; "
        f"interests={', '.join(b.interests)}; destinations={', '.join(b.destinations)}; "
        f"budget={b.budget}; languages={', '.join(b.languages)}"
        for b in roster
    )
    return f"""
You are an expert travel matching system. Calculate compatibility scores between travelers based on their preferences.

User Preferences:
- Destinations: {', '.join(prefs.destinations)}
- Travel Style: {', '.join(prefs.travel_style)}
- Interests: {', '.join(prefs.interests)}
- Budget: {prefs.budget}
- Age Range: {prefs.age_range[0]} - {prefs.age_range[1]}
- Languages: {', '.join(prefs.languages)}
- Lifestyle: Smoking={lifestyle.smoking}, Drinking={lifestyle.drinking}, Adventure Level={lifestyle.adventure_level}/10, Social Level={lifestyle.social_level}/10

Candidate travel buddies:
{candidates}

Please provide a detailed compatibility analysis and suggest the top 5 most compatible travel buddies from the candidates.

Return the response in JSON format with this structure:
{{
  "matches": [
    {{
      "userId": "buddy-id",
      "matchScore": 95,
      "compatibilityAnalysis": {{
        "destinations": "High compatibility - both interested in similar destinations",
        "travelStyle": "Excellent match - identical travel preferences",
        "interests": "Strong alignment in interests and activities",
        "budget": "Good match - compatible budget ranges",
        "lifestyle": "Great compatibility in lifestyle preferences"
      }},
      "strengths": ["Shared love for adventure", "Similar budget range", "Compatible schedules"],
      "potentialChallenges": ["Different language preferences", "Slight age gap"]
    }}
  ],
  "recommendations": "Based on your preferences, we recommend ..."
}}
"""


class BuddyMatcher:
    """
    Travel buddy search and matching.

    Example:
        >>> matcher = BuddyMatcher(LLMService())
        >>> matcher.search(BuddySearchRequest(destination="Bali, Indonesia"))
        >>> await matcher.match(MatchRequest(user_id="u1", preferences=...))
    """

    def __init__(self, llm: LLMService, rng: random.Random | None = None) -> None:
        self._llm = llm
        self._rng = rng or random.Random()

    def search(self, request: BuddySearchRequest) -> BuddySearchResponse:
        """Filter the roster. `total` counts matches before the limit."""
        filtered = filter_buddies(generate_buddies(self._rng), request)
        limited = filtered[: request.limit] if request.limit else filtered

        logger.info("Buddy search: %d/%d profiles", len(limited), len(filtered))
        return BuddySearchResponse(buddies=limited, total=len(filtered), filters=request)

    async def match(self, request: MatchRequest) -> MatchResult:
        """Rank the roster with the completion service. Never raises on AI failure."""
        roster = generate_buddies(self._rng)
        try:
            data = await self._llm.complete_json(
                build_match_prompt(request, roster),
                system_instruction=SYSTEM_INSTRUCTION,
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
            result = MatchResult.model_validate(data)
        except LLMError as e:
            logger.warning("AI matching failed, using fallback: %s", e)
        except PydanticValidationError as e:
            logger.warning(
                "Match response has unexpected shape, using fallback: %d errors",
                e.error_count(),
            )
        else:
            logger.info("AI matching: user=%s matches=%d", request.user_id, len(result.matches))
            return result

        return MatchResult.model_validate(FALLBACK_MATCHES)
