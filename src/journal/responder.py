"""Issues one AI request at a time and maps client failures to domain errors."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from config.settings import AppSettings
from journal.errors import MissingCredentialError, ProviderError, RequestInFlightError
from journal.schemas import Message
from llm.base import ReplyClient

LOGGER = logging.getLogger(__name__)


class AIResponseCoordinator:
    """Forwards the conversation to the AI client and returns its text verbatim.

    The conversation controller owns the request state and sets it around each call;
    the coordinator additionally refuses re-entrant calls so that two requests can
    never overlap even if a caller skips the controller's check. Retries, if any,
    belong to the client.
    """

    def __init__(self, client: ReplyClient) -> None:
        self._client = client
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def request_reply(self, history: Sequence[Message], settings: AppSettings) -> str:
        if self._in_flight:
            raise RequestInFlightError()
        if not settings.has_api_key:
            LOGGER.warning("API key not configured")
            raise MissingCredentialError()

        self._in_flight = True
        try:
            return await self._client.get_reply(
                list(history),
                settings.ai_provider,
                settings.ai_model,
                settings.api_key,
                settings.ai_context,
            )
        except Exception as exc:
            raise ProviderError(str(exc) or None) from exc
        finally:
            self._in_flight = False
