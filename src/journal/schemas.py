"""Pydantic schemas for conversation state."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

WELCOME_MESSAGE = "Hi! I'm here to help you with your journaling today. What's on your mind?"


def _now() -> datetime:
    return datetime.now().astimezone()


class Message(BaseModel):
    """One conversation turn. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    content: str
    is_user: bool
    timestamp: datetime = Field(default_factory=_now)

    @classmethod
    def welcome(cls) -> Message:
        return cls(content=WELCOME_MESSAGE, is_user=False)


class RequestState(str, Enum):
    IDLE = "idle"
    AWAITING_AI_RESPONSE = "awaiting_ai_response"
    AWAITING_SUMMARY = "awaiting_summary"


class SpeechState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    SPEAKING = "speaking"


class IOModes(BaseModel):
    """User preference for speech vs. text; independent of current speech activity."""

    input_is_speech: bool = False
    output_is_speech: bool = False


class ChatState(BaseModel):
    """Immutable snapshot published to the presentation layer after each change."""

    model_config = ConfigDict(frozen=True)

    messages: list[Message]
    request_state: RequestState = RequestState.IDLE
    speech_state: SpeechState = SpeechState.IDLE
    modes: IOModes = Field(default_factory=IOModes)
    pending_summary: str | None = None
    is_generating_summary: bool = False
    is_saving: bool = False
    pending_transcript: str | None = None
    is_saving_transcript: bool = False
    last_error: str | None = None
    last_success_notice: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.request_state is RequestState.AWAITING_AI_RESPONSE

    @property
    def is_listening(self) -> bool:
        return self.speech_state is SpeechState.LISTENING

    @property
    def is_speaking(self) -> bool:
        return self.speech_state is SpeechState.SPEAKING
