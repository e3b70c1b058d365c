"""Listening/speaking sub-states and input/output mode toggles."""

from __future__ import annotations

import logging
from collections.abc import Callable

from config.providers import TTSProvider
from config.settings import AppSettings
from journal.errors import JournalError, SpeechError, SpeechUnavailableError
from journal.schemas import IOModes, SpeechState
from speech.base import SpeechEngine

LOGGER = logging.getLogger(__name__)


def _detail(exc: Exception) -> str | None:
    if isinstance(exc, JournalError):
        return exc.detail
    return str(exc) or None


class SpeechIOCoordinator:
    """Drives the speech engine while keeping Listening and Speaking mutually exclusive.

    Every listen or speak call is tagged with a session number. A stop request moves the
    state to Idle immediately; whatever the engine returns afterwards for that session is
    discarded instead of overwriting a newer state.
    """

    def __init__(self, engine: SpeechEngine, on_change: Callable[[], None] | None = None) -> None:
        self._engine = engine
        self._on_change = on_change or (lambda: None)
        self._state = SpeechState.IDLE
        self._session = 0
        self.modes = IOModes()

    @property
    def state(self) -> SpeechState:
        return self._state

    def toggle_input_mode(self) -> bool:
        self.modes.input_is_speech = not self.modes.input_is_speech
        LOGGER.info("Input mode changed to: %s", "speech" if self.modes.input_is_speech else "text")
        if not self.modes.input_is_speech:
            self.stop_listening()
        self._on_change()
        return self.modes.input_is_speech

    def toggle_output_mode(self) -> bool:
        self.modes.output_is_speech = not self.modes.output_is_speech
        LOGGER.info("Output mode changed to: %s", "speech" if self.modes.output_is_speech else "text")
        if not self.modes.output_is_speech:
            self.stop_speaking()
        self._on_change()
        return self.modes.output_is_speech

    def begin_listening(self, *, request_in_flight: bool) -> int | None:
        """Enter Listening and return the session number, or None when the call is a no-op."""

        if self._state is not SpeechState.IDLE or request_in_flight:
            return None
        if not self._engine.is_recognition_available():
            raise SpeechUnavailableError()

        LOGGER.info("Starting speech recognition")
        return self._enter(SpeechState.LISTENING)

    async def listen(self, session: int) -> str:
        """Await the recognized utterance for a session opened by begin_listening."""

        stopped = False
        try:
            text = await self._engine.start_listening()
        except Exception as exc:
            if not self._owns(session, SpeechState.LISTENING):
                return ""
            LOGGER.error("Speech recognition error: %s", exc)
            raise SpeechError(_detail(exc)) from exc
        finally:
            stopped = not self._owns(session, SpeechState.LISTENING)
            self._settle(session, SpeechState.LISTENING)

        if stopped:
            LOGGER.info("Discarding speech recognized after listening was stopped")
            return ""
        return text.strip()

    def stop_listening(self) -> None:
        if self._state is not SpeechState.LISTENING:
            return
        self._engine.stop_listening()
        self._state = SpeechState.IDLE
        LOGGER.info("Stopped listening")
        self._on_change()

    async def speak(self, text: str, settings: AppSettings) -> None:
        if not text.strip():
            LOGGER.warning("Cannot speak empty text")
            return
        if self._state is not SpeechState.IDLE:
            LOGGER.info("Skipping speech output while %s", self._state.value)
            return

        session = self._enter(SpeechState.SPEAKING)
        try:
            await self._engine.speak(text, settings)
        except Exception as exc:
            if self._owns(session, SpeechState.SPEAKING):
                LOGGER.error("Speech synthesis error: %s", exc)
                raise SpeechError(_detail(exc)) from exc
        finally:
            self._settle(session, SpeechState.SPEAKING)

    def stop_speaking(self) -> None:
        self._engine.stop_speaking()
        if self._state is SpeechState.SPEAKING:
            self._state = SpeechState.IDLE
            self._on_change()

    def set_voice_provider(self, provider: TTSProvider) -> None:
        self._engine.set_voice_provider(provider)

    def _enter(self, state: SpeechState) -> int:
        self._session += 1
        self._state = state
        self._on_change()
        return self._session

    def _owns(self, session: int, state: SpeechState) -> bool:
        return self._session == session and self._state is state

    def _settle(self, session: int, state: SpeechState) -> None:
        if self._owns(session, state):
            self._state = SpeechState.IDLE
            self._on_change()
