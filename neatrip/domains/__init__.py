"""
Domains - Business logic layer.

Each domain is self-contained with:
- models.py: Pydantic data models
- Implementation files
- test_*.py modules beside the code
"""

__all__ = [
    "discovery",
    "itinerary",
    "buddies",
    "social",
    "accounts",
]
