"""
LLM Service - Chat completion client for the AI-assisted endpoints.

Talks to any OpenAI-compatible `/chat/completions` endpoint with a
system + user message pair. Callers that need structured output use
`complete_json`, which pulls the first `{...}` span out of the reply.

Architecture:
    Route → domain planner → LLMService.complete_json → hosted model
    Any failure → LLMError (planners fall back to canned data)
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

import httpx

from neatrip.config import ErrorCode, LLMError, get_settings

logger = logging.getLogger(__name__)

__all__ = ["LLMResponse", "LLMService", "extract_json_object"]

# Greedy: from the first "{" to the last "}" across newlines
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


@dataclass
class LLMResponse:
    """Response from LLM generation."""

    text: str
    model: str
    provider: str
    tokens_used: int | None = None


def extract_json_object(text: str) -> dict[str, Any]:
    """
    Extract and parse the first JSON object embedded in free text.

    Models often wrap JSON in prose or code fences; the span from the
    first opening brace to the last closing brace is parsed.

    Raises:
        LLMError: No object found, or the span is not valid JSON
    """
    match = _JSON_OBJECT_RE.search(text or "")
    if not match:
        raise LLMError(
            "No valid JSON found in response",
            code=ErrorCode.LLM_INVALID_RESPONSE,
        )

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise LLMError(
            f"Invalid JSON in response: {e.msg}",
            {"position": e.pos},
            code=ErrorCode.LLM_INVALID_RESPONSE,
        ) from e

    if not isinstance(data, dict):
        raise LLMError(
            "Response JSON is not an object",
            code=ErrorCode.LLM_INVALID_RESPONSE,
        )
    return data


class LLMService:
    """
    Chat completion client.

    Example:
        >>> llm = LLMService()
        >>> response = await llm.complete(
        ...     "Plan a weekend in Lisbon",
        ...     system_instruction="You are an expert travel planner.",
        ... )
    """

    provider = "openai-compatible"

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize LLM service.

        Args:
            base_url: Endpoint root (defaults to settings)
            api_key: Bearer key (defaults to settings)
            model: Override default model
            timeout: Request timeout in seconds
        """
        settings = get_settings()
        self.base_url = (base_url or settings.llm_base_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.llm_api_key
        self.model = model or settings.llm_model
        self.timeout = timeout or settings.llm_timeout_seconds

    async def complete(
        self,
        prompt: str,
        system_instruction: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """
        Generate a completion.

        Args:
            prompt: User message
            system_instruction: System message
            temperature: Sampling temperature
            max_tokens: Completion token cap

        Returns:
            LLMResponse with the first choice's text

        Raises:
            LLMError: Transport failure or non-200 reply
        """
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})

        body: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens is not None:
            body["max_tokens"] = max_tokens

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=headers,
                    json=body,
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            raise LLMError(f"Completion request failed: {e}") from e

        if response.status_code == 429:
            raise LLMError("Completion quota exceeded", code=ErrorCode.LLM_RATE_LIMITED)

        if response.status_code in (401, 403):
            raise LLMError("Completion service rejected credentials", code=ErrorCode.LLM_AUTH_FAILED)

        if response.status_code != 200:
            logger.error("Completion error: %s %s", response.status_code, response.text[:200])
            raise LLMError(f"Completion API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise LLMError(
                "Completion reply is not JSON", code=ErrorCode.LLM_INVALID_RESPONSE
            ) from e

        # Extract text from first choice
        text = ""
        choices = data.get("choices") or []
        if choices:
            message = choices[0].get("message") or {}
            text = message.get("content") or ""

        usage = data.get("usage") or {}

        return LLMResponse(
            text=text,
            model=data.get("model", self.model),
            provider=self.provider,
            tokens_used=usage.get("total_tokens"),
        )

    async def complete_json(
        self,
        prompt: str,
        system_instruction: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> dict[str, Any]:
        """Generate a completion and parse the JSON object inside it."""
        response = await self.complete(
            prompt,
            system_instruction=system_instruction,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return extract_json_object(response.text)
