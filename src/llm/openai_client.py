"""OpenAI chat completion client wrapper."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from openai import AsyncOpenAI

from config.settings import get_settings
from llm.base import BaseLLMClient, LLMRequestError

LOGGER = logging.getLogger(__name__)


class OpenAIClient(BaseLLMClient):
    """Wrapper for the OpenAI Chat Completion API."""

    def __init__(self, model: str, api_key: str, *, client: AsyncOpenAI | None = None) -> None:
        if not api_key:
            raise ValueError("API key must be configured for OpenAI client.")

        settings = get_settings()
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=settings.openai_base_url or None,
            timeout=settings.http_timeout_seconds,
        )
        self._model = model

    async def chat(
        self,
        messages: Iterable[dict[str, str]],
        *,
        system_context: str,
        temperature: float = 0.7,
    ) -> str:
        payload = [{"role": "system", "content": system_context}, *messages]
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=payload,
            temperature=temperature,
        )
        if not response.choices:
            raise LLMRequestError("Invalid response format")
        content = response.choices[0].message.content
        if content is None:
            raise LLMRequestError("Invalid response format")
        return content
