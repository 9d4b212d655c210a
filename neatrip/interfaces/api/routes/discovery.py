"""
Discovery Routes - Nearby places for the AR camera overlay.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from neatrip.adapters.analytics import AnalyticsTracker
from neatrip.config import get_settings
from neatrip.domains.discovery import DiscoveryRequest, DiscoveryResponse, discover_places
from neatrip.interfaces.api.deps import get_tracker

router = APIRouter()


@router.post("", response_model=DiscoveryResponse)
async def ar_discovery(
    request: DiscoveryRequest,
    tracker: AnalyticsTracker = Depends(get_tracker),
):
    """
    Generate places around the caller's position.

    - **location**: `{lat, lng}` of the device (required)
    - **heading**: Compass heading in degrees
    - **radius**: Search radius in metres (default 1000)
    - **category**: Only return this category
    - **limit**: Maximum places returned
    """
    settings = get_settings()
    response = discover_places(request, default_radius=settings.discovery_default_radius_m)

    await tracker.track(
        "ar_discovery",
        {"total": response.total, "category": request.category, "radius": response.radius},
    )
    return response
