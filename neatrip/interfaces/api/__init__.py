"""
API Interface - FastAPI REST API.

Serves AR discovery, itinerary planning, travel-buddy matching and the
social feed behind one application.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
