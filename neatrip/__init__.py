"""
NeaTrip - Social travel-sharing backend: feed, AR place discovery,
AI itineraries and travel-buddy matching.

Example:
    >>> from neatrip.domains.discovery import discover_places, DiscoveryRequest
    >>> response = discover_places(DiscoveryRequest(location={"lat": 48.85, "lng": 2.35}))
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
