"""
Analytics Adapter - Best-effort event and error tracking.
"""

from .tracker import AnalyticsConfig, AnalyticsEvent, AnalyticsTracker, ErrorEvent

__all__ = ["AnalyticsTracker", "AnalyticsConfig", "AnalyticsEvent", "ErrorEvent"]
