"""
Adapters - External service integrations.

All external calls are wrapped here to isolate domains from third-party changes.
"""

from .analytics import AnalyticsConfig, AnalyticsTracker
from .llm import LLMResponse, LLMService
from .sqlite import COLLECTIONS, DocumentStore

__all__ = [
    # Chat completion (OpenAI-compatible)
    "LLMService",
    "LLMResponse",
    # Storage
    "DocumentStore",
    "COLLECTIONS",
    # Analytics
    "AnalyticsTracker",
    "AnalyticsConfig",
]
