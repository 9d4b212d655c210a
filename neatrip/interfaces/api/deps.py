"""
API Dependencies - Dependency injection for FastAPI routes.

Provides singleton instances of the store, AI client, tracker and services.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from neatrip.adapters.analytics import AnalyticsConfig, AnalyticsTracker
from neatrip.adapters.llm import LLMService
from neatrip.adapters.sqlite import DocumentStore
from neatrip.config import get_settings
from neatrip.domains.accounts import SessionManager
from neatrip.domains.buddies import BuddyMatcher
from neatrip.domains.itinerary import ItineraryPlanner
from neatrip.domains.social import SocialService


@lru_cache
def get_document_store() -> DocumentStore:
    """Get document store singleton."""
    settings = get_settings()
    return DocumentStore(settings.db_path)


@lru_cache
def get_llm_service() -> LLMService:
    """Get chat completion client singleton."""
    return LLMService()


@lru_cache
def get_tracker() -> AnalyticsTracker:
    """Get analytics tracker singleton."""
    settings = get_settings()
    return AnalyticsTracker(
        AnalyticsConfig(
            enabled=settings.analytics_enabled,
            debug=settings.analytics_debug,
            sample_rate=settings.analytics_sample_rate,
            endpoint=settings.analytics_endpoint,
            api_key=settings.analytics_api_key,
            flush_interval_seconds=settings.analytics_flush_interval_seconds,
            max_queue_size=settings.analytics_max_queue_size,
        )
    )


@lru_cache
def get_session_manager() -> SessionManager:
    """Get session token manager singleton."""
    settings = get_settings()
    return SessionManager(settings.session_secret, settings.session_ttl_seconds)


def get_social_service(
    store: DocumentStore = Depends(get_document_store),
) -> SocialService:
    return SocialService(store)


def get_itinerary_planner(
    llm: LLMService = Depends(get_llm_service),
) -> ItineraryPlanner:
    return ItineraryPlanner(llm)


def get_buddy_matcher(llm: LLMService = Depends(get_llm_service)) -> BuddyMatcher:
    return BuddyMatcher(llm)


async def init_services() -> None:
    """
    Initialize services on startup.

    This should be called from the FastAPI lifespan handler.
    """
    settings = get_settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)

    store = get_document_store()
    await store.initialize()

    get_tracker().start()


async def cleanup_services() -> None:
    """Cleanup services on shutdown."""
    await get_tracker().stop()
    await get_document_store().close()


def reset_services() -> None:
    """Drop cached singletons so the next call rebuilds them from settings."""
    for factory in (get_document_store, get_llm_service, get_tracker, get_session_manager):
        factory.cache_clear()
