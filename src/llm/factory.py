"""Factory returning the LLM client for a provider."""

from __future__ import annotations

from config.providers import AIProvider
from llm.anthropic_client import AnthropicClient
from llm.base import BaseLLMClient
from llm.gemini_client import GeminiClient
from llm.openai_client import OpenAIClient


def build_llm_client(provider: AIProvider | str, model: str, api_key: str) -> BaseLLMClient:
    """Instantiate the connector for the selected provider."""

    provider = AIProvider(provider)
    if provider is AIProvider.OPENAI:
        return OpenAIClient(model, api_key)
    if provider is AIProvider.GEMINI:
        return GeminiClient(model, api_key)
    if provider is AIProvider.ANTHROPIC:
        return AnthropicClient(model, api_key)
    raise ValueError(f"Unsupported ai_provider: {provider}")
