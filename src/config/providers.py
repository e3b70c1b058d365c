"""AI and text-to-speech provider catalogue."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AIProvider(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"

    @property
    def display_name(self) -> str:
        return _AI_DISPLAY_NAMES[self]


class TTSProvider(str, Enum):
    LOCAL = "local"
    OPENAI = "openai"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"

    @property
    def display_name(self) -> str:
        return _TTS_DISPLAY_NAMES[self]


_AI_DISPLAY_NAMES = {
    AIProvider.OPENAI: "OpenAI",
    AIProvider.GEMINI: "Google Gemini",
    AIProvider.ANTHROPIC: "Anthropic Claude",
}

_TTS_DISPLAY_NAMES = {
    TTSProvider.LOCAL: "Local (Device)",
    TTSProvider.OPENAI: "OpenAI TTS",
    TTSProvider.GEMINI: "Gemini TTS",
    TTSProvider.ANTHROPIC: "Anthropic TTS",
}


@dataclass(frozen=True)
class AIModel:
    provider: AIProvider
    model_name: str
    display_name: str


_MODELS: dict[AIProvider, tuple[AIModel, ...]] = {
    AIProvider.OPENAI: (
        AIModel(AIProvider.OPENAI, "gpt-4o", "GPT-4o"),
        AIModel(AIProvider.OPENAI, "gpt-4o-mini", "GPT-4o Mini"),
        AIModel(AIProvider.OPENAI, "gpt-4-turbo", "GPT-4 Turbo"),
        AIModel(AIProvider.OPENAI, "gpt-3.5-turbo", "GPT-3.5 Turbo"),
    ),
    AIProvider.GEMINI: (
        AIModel(AIProvider.GEMINI, "gemini-1.5-pro", "Gemini 1.5 Pro"),
        AIModel(AIProvider.GEMINI, "gemini-1.5-flash", "Gemini 1.5 Flash"),
        AIModel(AIProvider.GEMINI, "gemini-pro", "Gemini Pro"),
    ),
    AIProvider.ANTHROPIC: (
        AIModel(AIProvider.ANTHROPIC, "claude-opus-4-5-20251101", "Claude Opus 4.5"),
        AIModel(AIProvider.ANTHROPIC, "claude-haiku-4-5-20251001", "Claude Haiku 4.5"),
        AIModel(AIProvider.ANTHROPIC, "claude-sonnet-4-5-20250929", "Claude Sonnet 4.5"),
        AIModel(AIProvider.ANTHROPIC, "claude-opus-4-1-20250805", "Claude Opus 4.1"),
        AIModel(AIProvider.ANTHROPIC, "claude-opus-4-20250514", "Claude Opus 4"),
        AIModel(AIProvider.ANTHROPIC, "claude-sonnet-4-20250514", "Claude Sonnet 4"),
        AIModel(AIProvider.ANTHROPIC, "claude-3-5-haiku-20241022", "Claude Haiku 3.5"),
        AIModel(AIProvider.ANTHROPIC, "claude-3-haiku-20240307", "Claude Haiku 3"),
    ),
}


def models_for_provider(provider: AIProvider | str) -> list[AIModel]:
    """Return the known chat models for a provider."""

    return list(_MODELS[AIProvider(provider)])
