"""Tests for the API middleware."""

from unittest.mock import AsyncMock, MagicMock, patch

from fastapi import Request, Response

from .middleware import RateLimitMiddleware


def make_request(ip: str, path: str = "/api/posts") -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": path,
            "headers": [],
            "query_string": b"",
            "client": (ip, 1234),
            "server": ("testserver", 80),
            "scheme": "http",
        }
    )


async def test_rate_limit_blocks_after_quota() -> None:
    limiter = RateLimitMiddleware(MagicMock(), requests_per_minute=2)
    call_next = AsyncMock(return_value=Response())

    with patch("neatrip.interfaces.api.middleware.time.time", return_value=600.0):
        statuses = [
            (await limiter.dispatch(make_request("10.0.0.1"), call_next)).status_code
            for _ in range(3)
        ]

    assert statuses == [200, 200, 429]
    assert call_next.await_count == 2


async def test_rate_limit_drops_buckets_from_past_windows() -> None:
    limiter = RateLimitMiddleware(MagicMock(), requests_per_minute=5)
    call_next = AsyncMock(return_value=Response())

    with patch("neatrip.interfaces.api.middleware.time.time", return_value=600.0):
        for i in range(10):
            await limiter.dispatch(make_request(f"10.0.0.{i}"), call_next)
    assert len(limiter.buckets) == 10

    with patch("neatrip.interfaces.api.middleware.time.time", return_value=660.0):
        response = await limiter.dispatch(make_request("10.0.0.99"), call_next)

    assert list(limiter.buckets) == ["10.0.0.99"]
    assert response.headers["X-RateLimit-Remaining"] == "4"


async def test_health_is_not_rate_limited() -> None:
    limiter = RateLimitMiddleware(MagicMock(), requests_per_minute=1)
    call_next = AsyncMock(return_value=Response())

    for _ in range(3):
        response = await limiter.dispatch(make_request("10.0.0.1", "/health"), call_next)
        assert response.status_code == 200
    assert len(limiter.buckets) == 0
