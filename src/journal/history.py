from __future__ import annotations

from collections.abc import Iterable

from journal.schemas import Message

USER_LABEL = "You"
ASSISTANT_LABEL = "AI"


def role_for_message(message: Message) -> str:
    return "user" if message.is_user else "assistant"


def speaker_label(message: Message) -> str:
    return USER_LABEL if message.is_user else ASSISTANT_LABEL


def build_llm_history(messages: Iterable[Message]) -> list[dict[str, str]]:
    """Map turns to provider-neutral role/content pairs. The system prompt is passed separately."""

    return [
        {"role": role_for_message(message), "content": message.content}
        for message in messages
    ]


def render_conversation(messages: Iterable[Message]) -> str:
    return "\n\n".join(f"{speaker_label(message)}: {message.content}" for message in messages)


def preview(text: str, limit: int = 50) -> str:
    """Shorten user text for log lines."""

    text = text.strip()
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."
