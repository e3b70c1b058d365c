"""Provider-neutral AI reply service used by the conversation core."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from config.providers import AIProvider
from journal.history import build_llm_history
from journal.schemas import Message
from llm.base import BaseLLMClient
from llm.factory import build_llm_client

LOGGER = logging.getLogger(__name__)

ClientFactory = Callable[[AIProvider, str, str], BaseLLMClient]


class AIService:
    """Sends the full conversation to the configured provider. No retries."""

    def __init__(self, client_factory: ClientFactory = build_llm_client) -> None:
        self._client_factory = client_factory

    async def get_reply(
        self,
        messages: Sequence[Message],
        provider: AIProvider,
        model: str,
        api_key: str,
        system_context: str,
    ) -> str:
        provider = AIProvider(provider)
        LOGGER.info("Requesting AI response from %s using model %s", provider.display_name, model)

        client = self._client_factory(provider, model, api_key)
        try:
            reply = await client.chat(build_llm_history(messages), system_context=system_context)
        except Exception:
            LOGGER.exception("Failed to get AI response from %s", provider.display_name)
            raise

        LOGGER.info("Successfully received AI response from %s", provider.display_name)
        return reply
