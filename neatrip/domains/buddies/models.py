"""
Travel Buddy Models - Profiles, search filters and match results.
"""

from __future__ import annotations

from pydantic import Field, model_validator

from neatrip.domains.base import CamelModel


class BuddyStats(CamelModel):
    trips_completed: int = 0
    reviews_received: int = 0
    average_rating: float = 0.0


class LifestylePreferences(CamelModel):
    """Lifestyle traits of a buddy profile."""

    smoking: bool = False
    drinking: bool = False
    early_bird: bool = False
    night_owl: bool = False
    vegetarian: bool = False
    adventure_level: int = Field(default=5, ge=1, le=10)
    social_level: int = Field(default=5, ge=1, le=10)


class TravelBuddy(CamelModel):
    """A matchable traveller profile."""

    id: str
    name: str
    age: int
    location: str
    bio: str
    travel_style: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    destinations: list[str] = Field(default_factory=list)
    availability: str = ""
    budget: str = ""
    languages: list[str] = Field(default_factory=list)
    match_score: int = Field(default=0, ge=0, le=100)
    is_verified: bool = False
    last_active: str = ""
    stats: BuddyStats = Field(default_factory=BuddyStats)
    preferences: LifestylePreferences = Field(default_factory=LifestylePreferences)


class LifestyleFilter(CamelModel):
    """Optional lifestyle constraints in a search."""

    smoking: bool | None = None
    drinking: bool | None = None
    adventure_level: int | None = Field(default=None, ge=1, le=10)
    social_level: int | None = Field(default=None, ge=1, le=10)


def _check_age_range(age_range: tuple[int, int] | None) -> None:
    if age_range is not None and age_range[0] > age_range[1]:
        raise ValueError("ageRange minimum must not exceed maximum")


class BuddySearchRequest(CamelModel):
    """Body of POST /api/travel-buddy with action "search"."""

    destination: str | None = None
    travel_dates: str | None = None
    duration: int | None = Field(default=None, ge=1)
    travel_style: list[str] | None = None
    interests: list[str] | None = None
    budget: str | None = None
    group_size: int | None = Field(default=None, ge=1)
    age_range: tuple[int, int] | None = None
    languages: list[str] | None = None
    preferences: LifestyleFilter | None = None
    search_query: str | None = None
    limit: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _validate_age_range(self) -> BuddySearchRequest:
        _check_age_range(self.age_range)
        return self


class BuddySearchResponse(CamelModel):
    buddies: list[TravelBuddy]
    total: int
    filters: BuddySearchRequest


class MatchLifestyle(CamelModel):
    smoking: bool = False
    drinking: bool = False
    adventure_level: int = Field(default=5, ge=1, le=10)
    social_level: int = Field(default=5, ge=1, le=10)


class MatchPreferences(CamelModel):
    """What the requesting traveller is looking for."""

    destinations: list[str] = Field(default_factory=list)
    travel_style: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    budget: str = ""
    age_range: tuple[int, int] = (18, 99)
    languages: list[str] = Field(default_factory=list)
    preferences: MatchLifestyle = Field(default_factory=MatchLifestyle)

    @model_validator(mode="after")
    def _validate_age_range(self) -> MatchPreferences:
        _check_age_range(self.age_range)
        return self


class MatchRequest(CamelModel):
    """Body of POST /api/travel-buddy with action "match"."""

    user_id: str = Field(..., min_length=1)
    preferences: MatchPreferences


class CompatibilityAnalysis(CamelModel):
    destinations: str = ""
    travel_style: str = ""
    interests: str = ""
    budget: str = ""
    lifestyle: str = ""


class BuddyMatch(CamelModel):
    """One suggested buddy with the reasoning behind the score."""

    user_id: str
    match_score: int = Field(..., ge=0, le=100)
    compatibility_analysis: CompatibilityAnalysis = Field(default_factory=CompatibilityAnalysis)
    strengths: list[str] = Field(default_factory=list)
    potential_challenges: list[str] = Field(default_factory=list)


class MatchResult(CamelModel):
    matches: list[BuddyMatch]
    recommendations: str = ""
