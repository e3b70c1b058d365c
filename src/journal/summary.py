"""Journal entry generation and the accept/reject/save lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

from config.settings import AppSettings
from journal.errors import ProviderError, SummaryGenerationFailedError
from journal.history import render_conversation
from journal.responder import AIResponseCoordinator
from journal.schemas import Message

LOGGER = logging.getLogger(__name__)

FORMAT_REQUEST_TEMPLATE = (
    "Please format the following conversation as a journal entry according to "
    "these instructions:\n\n{instructions}\n\n---\n\nConversation:\n\n{conversation}"
)


class SummaryPhase(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    PENDING = "pending"
    SAVING = "saving"


def build_format_request(messages: Sequence[Message], instructions: str) -> Message:
    """Build the synthetic user turn asking the AI to rewrite the conversation."""

    return Message(
        content=FORMAT_REQUEST_TEMPLATE.format(
            instructions=instructions,
            conversation=render_conversation(messages),
        ),
        is_user=True,
    )


class SummaryWorkflow:
    """Idle -> Generating -> Pending -> (Saving -> Idle | Idle)."""

    def __init__(self, responder: AIResponseCoordinator) -> None:
        self._responder = responder
        self.phase = SummaryPhase.IDLE
        self.pending_summary: str | None = None

    @property
    def is_generating(self) -> bool:
        return self.phase is SummaryPhase.GENERATING

    @property
    def is_saving(self) -> bool:
        return self.phase is SummaryPhase.SAVING

    def can_generate(self, messages: Sequence[Message]) -> bool:
        return bool(messages) and self.phase is SummaryPhase.IDLE and self.pending_summary is None

    def begin(self, messages: Sequence[Message]) -> bool:
        if not self.can_generate(messages):
            return False
        LOGGER.info("Generating formatted summary")
        self.phase = SummaryPhase.GENERATING
        return True

    async def generate(self, messages: Sequence[Message], settings: AppSettings) -> str:
        """Request the formatted entry; the workflow must have been started with begin()."""

        if self.phase is not SummaryPhase.GENERATING:
            raise RuntimeError("Summary generation was not started.")

        history = [*messages, build_format_request(messages, settings.output_format_instructions)]
        try:
            summary = await self._responder.request_reply(history, settings)
        except ProviderError as exc:
            self.phase = SummaryPhase.IDLE
            LOGGER.error("Failed to generate formatted summary: %s", exc.detail)
            raise SummaryGenerationFailedError.from_cause(exc.detail) from exc
        except BaseException:
            self.phase = SummaryPhase.IDLE
            raise

        LOGGER.info("Formatted summary generated successfully")
        self.pending_summary = summary
        self.phase = SummaryPhase.PENDING
        return summary

    def accept(self, text: str) -> bool:
        """Keep the (possibly edited) text and hand it to the save collaborator."""

        if self.phase is not SummaryPhase.PENDING:
            return False
        self.pending_summary = text
        self.phase = SummaryPhase.SAVING
        return True

    def reject(self) -> None:
        if self.phase in (SummaryPhase.PENDING, SummaryPhase.SAVING):
            self.phase = SummaryPhase.IDLE
        self.pending_summary = None

    def on_save_completed(self, success: bool, location: str | None = None) -> str | None:
        """Clear the pending entry and return the success notice, if any.

        A failed save and a cancelled save are treated the same way: the entry is dropped
        and no error is reported, since the save collaborator reports its own errors.
        """

        self.phase = SummaryPhase.IDLE
        self.pending_summary = None
        if not success:
            LOGGER.warning("Failed to save journal entry or cancelled")
            return None

        LOGGER.info("Journal entry saved successfully")
        if location:
            return f"Journal entry saved to: {location}"
        return "Journal entry saved successfully"
