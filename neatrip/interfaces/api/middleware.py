"""
API Middleware - Request/response processing.

Provides:
- Request ID tracking
- Response latency measurement
- Error handling with taxonomy codes
- Request validation errors as 400
- Rate limiting
"""

from __future__ import annotations

import logging
import time
import uuid
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from neatrip.adapters.analytics import AnalyticsTracker
from neatrip.config.errors import ErrorCode, NeatripError

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach request ID for tracing across logs and responses."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        # Store in request state for access in handlers
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response


class LatencyMiddleware(BaseHTTPMiddleware):
    """Track and log request latency."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"

        # Log request with latency
        request_id = getattr(request.state, "request_id", "unknown")
        logger.info(
            "%s %s status=%d latency_ms=%.2f request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id,
        )

        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Convert NeatripError exceptions to structured JSON responses.

    Unhandled exceptions become 500 INTERNAL_ERROR and are reported to
    the analytics tracker.
    """

    def __init__(
        self,
        app: ASGIApp,
        tracker_factory: Callable[[], AnalyticsTracker] | None = None,
    ) -> None:
        super().__init__(app)
        self.tracker_factory = tracker_factory

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except NeatripError as e:
            request_id = getattr(request.state, "request_id", "unknown")
            status = error_code_to_status(e.code)
            logger.log(
                logging.ERROR if status >= 500 else logging.WARNING,
                "NeatripError: %s request_id=%s details=%s",
                e.message,
                request_id,
                e.details,
            )
            return error_response(status, e.to_dict(), request_id)
        except Exception as e:
            request_id = getattr(request.state, "request_id", "unknown")
            logger.exception("Unhandled error: %s request_id=%s", str(e), request_id)
            if self.tracker_factory is not None:
                await self.tracker_factory().track_error(
                    e,
                    "server",
                    {
                        "path": request.url.path,
                        "method": request.method,
                        "request_id": request_id,
                    },
                )
            return error_response(
                500,
                {
                    "code": ErrorCode.INTERNAL_ERROR.value,
                    "message": "Internal server error",
                    "details": {},
                },
                request_id,
            )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request validation failures as 400 with the error envelope."""
    request_id = getattr(request.state, "request_id", "unknown")
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    message = errors[0]["message"] if errors else "Invalid request"
    logger.warning("Validation failed: %s request_id=%s", message, request_id)
    return error_response(
        400,
        {
            "code": ErrorCode.VALIDATION_ERROR.value,
            "message": message,
            "details": {"errors": errors},
        },
        request_id,
    )


def error_response(status_code: int, error: dict[str, Any], request_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "request_id": request_id},
    )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Simple in-memory rate limiting per client IP."""

    def __init__(self, app: ASGIApp, requests_per_minute: int = 60) -> None:
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.buckets: dict[str, dict[str, Any]] = defaultdict(
            lambda: {"window": 0, "tokens": 0}
        )
        self._current_window = 0

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        # Skip rate limiting for health checks
        if request.url.path == "/health":
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()
        window = int(now // 60)  # 1-minute windows

        # A new window starts every bucket afresh, so drop the old ones
        if window != self._current_window:
            self.buckets.clear()
            self._current_window = window

        bucket = self.buckets[client_ip]

        # Reset bucket if new window
        if bucket["window"] != window:
            bucket["window"] = window
            bucket["tokens"] = self.requests_per_minute

        if bucket["tokens"] <= 0:
            request_id = getattr(request.state, "request_id", "unknown")
            logger.warning(
                "Rate limit exceeded for %s request_id=%s",
                client_ip,
                request_id,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "error": {
                        "code": ErrorCode.SECURITY_RATE_LIMITED.value,
                        "message": "Too many requests. Please retry after 60 seconds.",
                        "details": {"retry_after": 60},
                    },
                    "request_id": request_id,
                },
                headers={"Retry-After": "60"},
            )

        bucket["tokens"] -= 1

        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(bucket["tokens"])
        response.headers["X-RateLimit-Limit"] = str(self.requests_per_minute)

        return response


def error_code_to_status(code: ErrorCode) -> int:
    """Map error codes to HTTP status codes."""
    mapping = {
        # 400 Bad Request
        ErrorCode.VALIDATION_ERROR: 400,
        ErrorCode.INVALID_ACTION: 400,
        ErrorCode.STORAGE_RESTORE_FAILED: 400,
        # 401 Unauthorized
        ErrorCode.SECURITY_UNAUTHORIZED: 401,
        # 403 Forbidden
        ErrorCode.SECURITY_FORBIDDEN: 403,
        # 404 Not Found
        ErrorCode.NOT_FOUND: 404,
        # 409 Conflict
        ErrorCode.CONFLICT: 409,
        # 429 Rate Limited
        ErrorCode.SECURITY_RATE_LIMITED: 429,
        ErrorCode.LLM_RATE_LIMITED: 429,
        # 502 Bad Gateway
        ErrorCode.LLM_AUTH_FAILED: 502,
        ErrorCode.LLM_INVALID_RESPONSE: 502,
        # 503 Service Unavailable
        ErrorCode.LLM_UNAVAILABLE: 503,
        ErrorCode.STORAGE_CONNECTION_FAILED: 503,
    }
    return mapping.get(code, 500)
