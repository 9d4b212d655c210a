"""
Tests for the analytics tracker.
"""

from __future__ import annotations

import random
from unittest.mock import AsyncMock

import httpx
import pytest

from .tracker import AnalyticsConfig, AnalyticsTracker


@pytest.fixture
def tracker() -> AnalyticsTracker:
    tracker = AnalyticsTracker(
        AnalyticsConfig(endpoint="http://collector.test", api_key="secret", max_queue_size=3),
        rng=random.Random(0),
    )
    tracker._post = AsyncMock()  # type: ignore[method-assign]
    return tracker


async def test_track_only_queues(tracker: AnalyticsTracker) -> None:
    await tracker.track("place_saved", {"placeId": "p1"})

    tracker._post.assert_not_called()  # type: ignore[attr-defined]
    assert [e.name for e in tracker.event_queue] == ["place_saved"]


async def test_flush_sends_event(tracker: AnalyticsTracker) -> None:
    await tracker.track("place_saved", {"placeId": "p1"})
    await tracker.flush()

    path, payload = tracker._post.call_args.args  # type: ignore[attr-defined]
    assert path == "/events"
    assert payload["name"] == "place_saved"
    assert payload["properties"] == {"placeId": "p1"}
    assert payload["sessionId"] == tracker.session_id
    assert len(tracker.event_queue) == 0


async def test_track_disabled_does_nothing(tracker: AnalyticsTracker) -> None:
    tracker.config.enabled = False
    await tracker.track("ignored")
    await tracker.track_error("ignored")
    assert len(tracker.event_queue) == 0
    assert len(tracker.error_queue) == 0


async def test_no_endpoint_drops_payloads() -> None:
    tracker = AnalyticsTracker(AnalyticsConfig(endpoint=None))
    await tracker.track("nowhere")
    await tracker.track_error("nowhere")
    assert len(tracker.event_queue) == 0
    assert len(tracker.error_queue) == 0


async def test_sampling_zero_drops_events(tracker: AnalyticsTracker) -> None:
    tracker.config.sample_rate = 0.0
    await tracker.track("dropped")
    assert len(tracker.event_queue) == 0


async def test_identify_user_tags_events(tracker: AnalyticsTracker) -> None:
    await tracker.identify_user("u1", {"plan": "free"})
    await tracker.track("next")
    await tracker.flush()

    payload = tracker._post.call_args.args[1]  # type: ignore[attr-defined]
    assert payload["name"] == "next"
    assert payload["userId"] == "u1"


async def test_offline_events_wait_for_reconnect(tracker: AnalyticsTracker) -> None:
    tracker.is_online = False
    await tracker.track("a")
    await tracker.track_error(RuntimeError("boom"), "api")
    await tracker.flush()

    assert len(tracker.event_queue) == 1
    assert len(tracker.error_queue) == 1
    tracker._post.assert_not_called()  # type: ignore[attr-defined]

    await tracker.set_online(True)

    assert len(tracker.event_queue) == 0
    assert len(tracker.error_queue) == 0
    paths = [c.args[0] for c in tracker._post.call_args_list]  # type: ignore[attr-defined]
    assert paths == ["/events", "/errors"]


async def test_failed_send_keeps_order(tracker: AnalyticsTracker) -> None:
    await tracker.track("first")
    await tracker.track("second")
    tracker._post.side_effect = httpx.ConnectError("down")  # type: ignore[attr-defined]

    await tracker.flush()

    assert tracker._post.call_count == 1  # type: ignore[attr-defined]
    assert [e.name for e in tracker.event_queue] == ["first", "second"]


async def test_queue_is_bounded_and_drops_oldest(tracker: AnalyticsTracker) -> None:
    tracker._post.side_effect = httpx.ConnectError("down")  # type: ignore[attr-defined]

    for name in ("a", "b", "c", "d", "e"):
        await tracker.track(name)
        await tracker.flush()

    assert [e.name for e in tracker.event_queue] == ["c", "d", "e"]


async def test_track_error_captures_stack(tracker: AnalyticsTracker) -> None:
    try:
        raise ValueError("bad input")
    except ValueError as e:
        await tracker.track_error(e, "api", {"path": "/api/itinerary"})
    await tracker.flush()

    path, payload = tracker._post.call_args.args  # type: ignore[attr-defined]
    assert path == "/errors"
    assert payload["message"] == "bad input"
    assert "ValueError" in payload["stack"]
    assert payload["context"] == {"path": "/api/itinerary"}


async def test_stop_flushes_batches(tracker: AnalyticsTracker) -> None:
    await tracker.track("a")
    await tracker.track("b")

    await tracker.stop()

    path, payload = tracker._post.call_args.args  # type: ignore[attr-defined]
    assert path == "/events/batch"
    assert [e["name"] for e in payload] == ["a", "b"]
    assert len(tracker.event_queue) == 0


async def test_failed_batch_is_kept(tracker: AnalyticsTracker) -> None:
    await tracker.track("a")
    tracker._post.side_effect = httpx.ConnectError("down")  # type: ignore[attr-defined]

    await tracker.flush_batch()

    assert [e.name for e in tracker.event_queue] == ["a"]


async def test_reset_session(tracker: AnalyticsTracker) -> None:
    await tracker.track("a")
    old = tracker.session_id
    tracker.reset_session()
    assert tracker.session_id != old
    assert tracker.session_info()["sessionId"] == tracker.session_id
    assert len(tracker.event_queue) == 0
