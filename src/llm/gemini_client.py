"""Client for the Google Gemini generateContent API."""

from __future__ import annotations

import logging
from typing import Iterable

import httpx

from config.settings import get_settings
from llm.base import BaseLLMClient, LLMRequestError

LOGGER = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiClient(BaseLLMClient):
    """Gemini uses a parts-based message format and passes the key as a query parameter."""

    def __init__(
        self,
        model: str,
        api_key: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("API key must be configured for Gemini client.")

        self._model = model
        self._api_key = api_key
        self._timeout = get_settings().http_timeout_seconds
        self._transport = transport

    @staticmethod
    def _to_contents(messages: Iterable[dict[str, str]]) -> list[dict]:
        return [
            {
                "role": "user" if msg["role"] == "user" else "model",
                "parts": [{"text": msg["content"]}],
            }
            for msg in messages
        ]

    async def chat(
        self,
        messages: Iterable[dict[str, str]],
        *,
        system_context: str,
        temperature: float = 0.7,
    ) -> str:
        payload = {
            "contents": self._to_contents(messages),
            "systemInstruction": {"parts": [{"text": system_context}]},
            "generationConfig": {"temperature": temperature},
        }

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(
                f"{GEMINI_BASE_URL}/{self._model}:generateContent",
                params={"key": self._api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
            )

        if response.is_error:
            raise LLMRequestError(f"API Error: {response.text}")

        data = response.json()
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMRequestError("Invalid response format") from exc
