"""
Travel Buddy Routes - Search the buddy roster or ask for AI matches.

A single endpoint dispatches on the `action` field of the body.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError as PydanticValidationError

from neatrip.adapters.analytics import AnalyticsTracker
from neatrip.config import ErrorCode, NeatripError, ValidationError
from neatrip.domains.buddies import BuddyMatcher, BuddySearchRequest, MatchRequest
from neatrip.interfaces.api.deps import get_buddy_matcher, get_tracker

router = APIRouter()


def _parse(model: type, body: dict[str, Any]):
    try:
        return model.model_validate(body)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError(errors[0]["message"], {"errors": errors}) from e


@router.post("")
async def travel_buddy(
    body: dict[str, Any] = Body(...),
    matcher: BuddyMatcher = Depends(get_buddy_matcher),
    tracker: AnalyticsTracker = Depends(get_tracker),
) -> dict[str, Any]:
    """
    - **action** = "search": filter profiles (destination, budget,
      travelStyle, interests, ageRange, languages, searchQuery, limit)
    - **action** = "match": rank profiles for `userId` using `preferences`
    """
    action = body.get("action")

    if action == "search":
        search = _parse(BuddySearchRequest, body)
        response = matcher.search(search)
        await tracker.track("buddy_search", {"total": response.total})
        return response.to_json_dict()

    if action == "match":
        match = _parse(MatchRequest, body)
        result = await matcher.match(match)
        await tracker.track("buddy_match", {"matches": len(result.matches)})
        return result.to_json_dict()

    raise NeatripError(ErrorCode.INVALID_ACTION, "Invalid action", {"action": action})
