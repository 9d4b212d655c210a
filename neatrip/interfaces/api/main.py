"""
FastAPI Main Application - Unified API entry point.

Run with: uvicorn neatrip.interfaces.api.main:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from neatrip import __version__
from neatrip.config import get_settings

from .deps import cleanup_services, get_tracker, init_services
from .middleware import (
    ErrorHandlerMiddleware,
    LatencyMiddleware,
    RateLimitMiddleware,
    RequestIDMiddleware,
    validation_exception_handler,
)
from .routes import (
    auth,
    buddies,
    discovery,
    health,
    itinerary,
    notifications,
    places,
    posts,
    preferences,
    users,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logger.info("Starting NeaTrip API...")
    logger.info("  Database: %s", settings.db_path)
    logger.info("  LLM: %s (%s)", settings.llm_model, settings.llm_base_url)
    logger.info("  Analytics: %s", "on" if settings.analytics_enabled else "off")

    # Open the document store and start the analytics flush task
    await init_services()
    logger.info("  Services initialized")

    yield

    # Cleanup
    logger.info("Shutting down NeaTrip API...")
    await cleanup_services()


def create_app() -> FastAPI:
    """Create FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="NeaTrip API",
        description="Travel discovery, AI itineraries and travel-buddy matching",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Starlette wraps in reverse order: the last middleware added runs first
    app.add_middleware(RateLimitMiddleware, requests_per_minute=settings.rate_limit_rpm)
    app.add_middleware(ErrorHandlerMiddleware, tracker_factory=get_tracker)
    app.add_middleware(LatencyMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "X-Request-ID",
            "Sec-CH-Prefers-Color-Scheme",
        ],
    )

    # Body validation failures answer 400, not FastAPI's default 422
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(discovery.router, prefix="/api/ar-discovery", tags=["Discovery"])
    app.include_router(itinerary.router, prefix="/api/itinerary", tags=["Itinerary"])
    app.include_router(buddies.router, prefix="/api/travel-buddy", tags=["Travel Buddy"])
    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(preferences.router, prefix="/api/preferences", tags=["Preferences"])
    app.include_router(posts.router, prefix="/api/posts", tags=["Posts"])
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(places.router, prefix="/api/places", tags=["Places"])
    app.include_router(
        notifications.router, prefix="/api/notifications", tags=["Notifications"]
    )

    return app


# Create app instance
app = create_app()
