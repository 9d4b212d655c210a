"""
Analytics Tracker - Best-effort event and error reporting.

`track` and `track_error` only enqueue. A periodic flush task posts the
queues to an external collector, oldest first, stopping at the first
failure; on shutdown the queues are sent as one batch each.

Queues are bounded: when full, the oldest payload is dropped. Nothing
here raises into the caller and no request waits on the collector.
"""

from __future__ import annotations

import asyncio
import logging
import random
import secrets
import time
import traceback
from collections import deque
from dataclasses import asdict, dataclass, field
from typing import Any, Literal

import httpx

logger = logging.getLogger(__name__)

__all__ = ["AnalyticsConfig", "AnalyticsEvent", "AnalyticsTracker", "ErrorEvent"]

ErrorType = Literal["server", "api", "network"]


@dataclass
class AnalyticsConfig:
    """Tracker configuration."""

    enabled: bool = True
    debug: bool = False
    sample_rate: float = 1.0
    endpoint: str | None = None
    api_key: str | None = None
    flush_interval_seconds: float = 30.0
    max_queue_size: int = 500


@dataclass
class AnalyticsEvent:
    """A named event with arbitrary properties."""

    name: str
    properties: dict[str, Any] = field(default_factory=dict)
    timestamp: int = 0
    userId: str | None = None
    sessionId: str | None = None


@dataclass
class ErrorEvent:
    """A reported error."""

    message: str
    type: ErrorType
    timestamp: int
    stack: str | None = None
    userId: str | None = None
    sessionId: str | None = None
    context: dict[str, Any] = field(default_factory=dict)


def _now_ms() -> int:
    return int(time.time() * 1000)


class AnalyticsTracker:
    """
    Queueing analytics client.

    Example:
        >>> tracker = AnalyticsTracker(AnalyticsConfig(endpoint="https://collector"))
        >>> await tracker.track("itinerary_generated", {"days": 3})
        >>> await tracker.track_error(exc, "api", {"path": "/api/itinerary"})
    """

    def __init__(
        self,
        config: AnalyticsConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or AnalyticsConfig()
        self._rng = rng or random.Random()
        self.session_id = self._generate_session_id()
        self.user_id: str | None = None
        self.is_online = True
        self.event_queue: deque[AnalyticsEvent] = self._new_queue()
        self.error_queue: deque[ErrorEvent] = self._new_queue()
        self._flush_task: asyncio.Task[None] | None = None

    def _new_queue(self) -> deque[Any]:
        return deque(maxlen=self.config.max_queue_size)

    @staticmethod
    def _enqueue(queue: deque[Any], item: Any) -> None:
        if len(queue) == queue.maxlen:
            logger.debug("Analytics queue full, dropping oldest payload")
        queue.append(item)

    @staticmethod
    def _generate_session_id() -> str:
        return f"{secrets.token_hex(6)}{_now_ms():x}"

    def _should_sample(self) -> bool:
        return self._rng.random() < self.config.sample_rate

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["X-API-Key"] = self.config.api_key
        return headers

    async def identify_user(
        self, user_id: str, properties: dict[str, Any] | None = None
    ) -> None:
        """Attach a user ID to subsequent events."""
        self.user_id = user_id
        await self.track("user_identified", {"userId": user_id, **(properties or {})})

    async def track(self, name: str, properties: dict[str, Any] | None = None) -> None:
        """Queue an event (subject to sampling)."""
        if not self.config.enabled or not self._should_sample():
            return

        event = AnalyticsEvent(
            name=name,
            properties=properties or {},
            timestamp=_now_ms(),
            userId=self.user_id,
            sessionId=self.session_id,
        )

        if self.config.debug:
            logger.debug("[Analytics] Event: %s", event)

        # Without a collector there is nowhere to deliver to
        if self.config.endpoint:
            self._enqueue(self.event_queue, event)

    async def track_error(
        self,
        error: BaseException | str,
        error_type: ErrorType = "server",
        context: dict[str, Any] | None = None,
    ) -> None:
        """Queue an error. Errors are never sampled out."""
        if not self.config.enabled:
            return

        if isinstance(error, BaseException):
            message = str(error) or type(error).__name__
            stack = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )
        else:
            message, stack = error, None

        event = ErrorEvent(
            message=message,
            type=error_type,
            timestamp=_now_ms(),
            stack=stack,
            userId=self.user_id,
            sessionId=self.session_id,
            context=context or {},
        )

        if self.config.debug:
            logger.debug("[Analytics] Error: %s", event.message)

        if self.config.endpoint:
            self._enqueue(self.error_queue, event)

    async def _post(self, path: str, payload: Any) -> None:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{self.config.endpoint}{path}",
                headers=self._headers(),
                json=payload,
                timeout=10.0,
            )
            response.raise_for_status()

    async def _send(self, path: str, queue: deque[Any]) -> bool:
        """Send the oldest queued payload. It goes back to the front on failure."""
        item = queue.popleft()
        try:
            await self._post(path, asdict(item))
            return True
        except httpx.HTTPError as e:
            logger.warning("Failed to send analytics payload to %s: %s", path, e)
            queue.appendleft(item)
            return False

    async def set_online(self, online: bool) -> None:
        """Toggle connectivity; coming back online flushes the queues."""
        self.is_online = online
        if online:
            await self.flush()

    async def flush(self) -> None:
        """Send queued events, then errors, oldest first; stop at the first failure."""
        if not self.is_online or not self.config.endpoint:
            return

        while self.event_queue:
            if not await self._send("/events", self.event_queue):
                break

        while self.error_queue:
            if not await self._send("/errors", self.error_queue):
                break

    async def _send_batch(self, path: str, queue: deque[Any]) -> None:
        batch = list(queue)
        queue.clear()
        try:
            await self._post(path, [asdict(item) for item in batch])
        except httpx.HTTPError as e:
            logger.warning("Failed to send analytics batch to %s: %s", path, e)
            queue.extendleft(reversed(batch))

    async def flush_batch(self) -> None:
        """Send each queue as a single batch request (used on shutdown)."""
        if not self.is_online or not self.config.endpoint:
            return

        if self.event_queue:
            await self._send_batch("/events/batch", self.event_queue)
        if self.error_queue:
            await self._send_batch("/errors/batch", self.error_queue)

    async def _flush_periodically(self) -> None:
        while True:
            await asyncio.sleep(self.config.flush_interval_seconds)
            await self.flush()

    def start(self) -> None:
        """Start the periodic flush task."""
        if self._flush_task is None and self.config.enabled and self.config.endpoint:
            self._flush_task = asyncio.create_task(self._flush_periodically())

    async def stop(self) -> None:
        """Cancel the periodic flush and send what is left as a batch."""
        if self._flush_task is not None:
            self._flush_task.cancel()
            try:
                await self._flush_task
            except asyncio.CancelledError:
                pass
            self._flush_task = None
        await self.flush_batch()

    def session_info(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "userId": self.user_id,
            "isOnline": self.is_online,
        }

    def reset_session(self) -> None:
        """Start a new session and drop queued payloads."""
        self.session_id = self._generate_session_id()
        self.event_queue.clear()
        self.error_queue.clear()
