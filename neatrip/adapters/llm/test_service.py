"""
Tests for the chat completion adapter.
"""

from __future__ import annotations

from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from neatrip.config import ErrorCode, LLMError

from .service import LLMResponse, LLMService, extract_json_object


def _reply(status_code: int = 200, payload: dict | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = "body"
    response.json.return_value = payload or {}
    return response


@pytest.fixture
def mock_http() -> Generator[AsyncMock, None, None]:
    """Patch httpx.AsyncClient and expose the inner client mock."""
    inner = AsyncMock()
    with patch("neatrip.adapters.llm.service.httpx.AsyncClient") as client_cls:
        client_cls.return_value.__aenter__.return_value = inner
        client_cls.return_value.__aexit__.return_value = False
        yield inner


@pytest.fixture
def llm() -> LLMService:
    return LLMService(base_url="http://llm.test/v1/", api_key="k", model="test-model")


# --- extract_json_object ---


def test_extract_json_from_plain_object() -> None:
    assert extract_json_object('{"a": 1}') == {"a": 1}


def test_extract_json_surrounded_by_prose() -> None:
    text = 'Sure! Here you go:\n```json\n{"itinerary": [{"day": 1}]}\n```\nEnjoy.'
    assert extract_json_object(text) == {"itinerary": [{"day": 1}]}


def test_extract_json_spans_first_to_last_brace() -> None:
    text = 'prefix {"outer": {"inner": true}} suffix'
    assert extract_json_object(text) == {"outer": {"inner": True}}


def test_extract_json_no_object() -> None:
    with pytest.raises(LLMError) as exc_info:
        extract_json_object("I cannot help with that.")
    assert exc_info.value.code == ErrorCode.LLM_INVALID_RESPONSE


def test_extract_json_malformed() -> None:
    with pytest.raises(LLMError):
        extract_json_object("{not: valid json}")


def test_extract_json_empty_text() -> None:
    with pytest.raises(LLMError):
        extract_json_object("")


# --- LLMService.complete ---


async def test_complete_sends_system_and_user_messages(
    llm: LLMService, mock_http: AsyncMock
) -> None:
    mock_http.post.return_value = _reply(
        payload={
            "model": "test-model",
            "choices": [{"message": {"content": "hello"}}],
            "usage": {"total_tokens": 42},
        }
    )

    response = await llm.complete(
        "plan a trip", system_instruction="be helpful", temperature=0.3, max_tokens=100
    )

    assert isinstance(response, LLMResponse)
    assert response.text == "hello"
    assert response.tokens_used == 42

    args, kwargs = mock_http.post.call_args
    assert args[0] == "http://llm.test/v1/chat/completions"
    body = kwargs["json"]
    assert body["messages"][0] == {"role": "system", "content": "be helpful"}
    assert body["messages"][1] == {"role": "user", "content": "plan a trip"}
    assert body["temperature"] == 0.3
    assert body["max_tokens"] == 100
    assert kwargs["headers"]["Authorization"] == "Bearer k"


async def test_complete_without_choices_returns_empty_text(
    llm: LLMService, mock_http: AsyncMock
) -> None:
    mock_http.post.return_value = _reply(payload={"choices": []})
    response = await llm.complete("hi")
    assert response.text == ""


async def test_complete_rate_limited(llm: LLMService, mock_http: AsyncMock) -> None:
    mock_http.post.return_value = _reply(status_code=429)
    with pytest.raises(LLMError) as exc_info:
        await llm.complete("hi")
    assert exc_info.value.code == ErrorCode.LLM_RATE_LIMITED


async def test_complete_server_error(llm: LLMService, mock_http: AsyncMock) -> None:
    mock_http.post.return_value = _reply(status_code=502)
    with pytest.raises(LLMError) as exc_info:
        await llm.complete("hi")
    assert exc_info.value.code == ErrorCode.LLM_UNAVAILABLE


async def test_complete_transport_error(llm: LLMService, mock_http: AsyncMock) -> None:
    mock_http.post.side_effect = httpx.ConnectError("refused")
    with pytest.raises(LLMError):
        await llm.complete("hi")


async def test_complete_json(llm: LLMService, mock_http: AsyncMock) -> None:
    mock_http.post.return_value = _reply(
        payload={"choices": [{"message": {"content": 'Result: {"matches": []}'}}]}
    )
    data = await llm.complete_json("match me")
    assert data == {"matches": []}
