"""Plain-text transcript rendering and its export confirmation."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from journal.history import speaker_label
from journal.schemas import Message

LOGGER = logging.getLogger(__name__)

TRANSCRIPT_HEADER = "Chat Transcript"
SEPARATOR_WIDTH = 50
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_transcript(messages: Sequence[Message]) -> str:
    """Render the message log; identical logs always produce identical text."""

    parts = [f"{TRANSCRIPT_HEADER}\n", "=" * SEPARATOR_WIDTH + "\n\n"]
    for message in messages:
        parts.append(f"[{message.timestamp.strftime(TIMESTAMP_FORMAT)}] {speaker_label(message)}:\n")
        parts.append(f"{message.content}\n\n")
    return "".join(parts)


class TranscriptExport:
    def __init__(self) -> None:
        self.pending_transcript: str | None = None
        self.is_saving = False

    def prepare(self, messages: Sequence[Message]) -> str | None:
        if not messages or self.is_saving:
            return None
        LOGGER.info("Preparing chat transcript for saving")
        self.is_saving = True
        self.pending_transcript = build_transcript(messages)
        return self.pending_transcript

    def on_saved(self, success: bool, location: str | None = None) -> str | None:
        self.is_saving = False
        self.pending_transcript = None
        if not success:
            LOGGER.warning("Failed to save chat transcript or cancelled")
            return None

        LOGGER.info("Chat transcript saved successfully")
        if location:
            return f"Chat transcript saved to: {location}"
        return "Chat transcript saved successfully"
