"""
Health Routes - System health and status endpoints.
"""

from typing import Any

from fastapi import APIRouter

from neatrip import __version__

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "neatrip"}


@router.get("/api")
async def api_info() -> dict[str, Any]:
    """API info endpoint."""
    return {
        "name": "NeaTrip API",
        "version": __version__,
        "description": "Travel discovery, AI itineraries and travel-buddy matching",
        "docs": "/docs",
    }
