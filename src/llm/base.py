"""Shared abstractions for language model clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Iterable, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from config.providers import AIProvider
    from journal.schemas import Message


class LLMRequestError(RuntimeError):
    """Raised by provider clients for HTTP failures and malformed payloads."""


class ReplyClient(Protocol):
    """Collaborator that turns a conversation into the next assistant reply."""

    async def get_reply(
        self,
        messages: Sequence[Message],
        provider: AIProvider,
        model: str,
        api_key: str,
        system_context: str,
    ) -> str:  # pragma: no cover - protocol stub
        ...


class BaseLLMClient(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    async def chat(
        self,
        messages: Iterable[dict[str, str]],
        *,
        system_context: str,
        temperature: float = 0.7,
    ) -> str:
        """Return a chat-style completion."""
