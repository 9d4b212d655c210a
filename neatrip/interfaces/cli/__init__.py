"""
CLI Interface - Command-line tools for NeaTrip.

Provides commands for:
- Database setup, demo data, backup and restore
- AR discovery, itinerary planning and buddy search
- Running the API server
"""

from .main import app, main

__all__ = ["app", "main"]
