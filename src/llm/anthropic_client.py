"""Client for the Anthropic Messages API."""

from __future__ import annotations

import logging
from typing import Iterable

import httpx

from config.settings import get_settings
from llm.base import BaseLLMClient, LLMRequestError

LOGGER = logging.getLogger(__name__)

ANTHROPIC_ENDPOINT = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicClient(BaseLLMClient):
    """Minimal Claude client; the system prompt is a top-level field, not a message."""

    def __init__(
        self,
        model: str,
        api_key: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("API key must be configured for Anthropic client.")

        self._model = model
        self._api_key = api_key
        self._timeout = get_settings().http_timeout_seconds
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    async def chat(
        self,
        messages: Iterable[dict[str, str]],
        *,
        system_context: str,
        temperature: float = 0.7,
    ) -> str:
        payload = {
            "model": self._model,
            "max_tokens": 4096,
            "system": system_context,
            "messages": list(messages),
            "temperature": temperature,
        }

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(ANTHROPIC_ENDPOINT, json=payload, headers=self._headers())

        if response.is_error:
            raise LLMRequestError(f"API Error: {response.text}")

        data = response.json()
        try:
            return data["content"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMRequestError("Invalid response format") from exc
