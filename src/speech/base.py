"""Speech collaborator contract shared by the conversation core and engine implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from journal.errors import JournalError

if TYPE_CHECKING:  # pragma: no cover
    from config.providers import TTSProvider
    from config.settings import AppSettings


class SynthesisError(JournalError):
    status_code = 503
    default_detail = "Speech synthesis failed"


@dataclass
class TranscriptionSegment:
    """Structured representation of a Whisper transcription segment."""

    start: float
    end: float
    text: str
    language: str
    logprob: float


def merge_segments(segments: Iterable[TranscriptionSegment]) -> str:
    """Merge segments into a single string."""

    return " ".join(segment.text for segment in segments).strip()


class SpeechEngine(ABC):
    """Speech recognition and synthesis as seen by the conversation core."""

    @abstractmethod
    def is_recognition_available(self) -> bool:
        """Whether an utterance can currently be captured."""

    @abstractmethod
    async def start_listening(self) -> str:
        """Suspend until an utterance is recognized; return its text ("" if nothing was heard)."""

    @abstractmethod
    def stop_listening(self) -> None:
        """Abort an in-progress recognition. Safe to call when idle."""

    @abstractmethod
    async def speak(self, text: str, settings: AppSettings) -> None:
        """Suspend until the text has been spoken."""

    @abstractmethod
    def stop_speaking(self) -> None:
        """Abort an in-progress synthesis or playback. Safe to call when idle."""

    @abstractmethod
    def set_voice_provider(self, provider: TTSProvider) -> None:
        """Select the text-to-speech provider used by subsequent speak calls."""
