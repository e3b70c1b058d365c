"""Top-level conversation state owner exposed to the presentation layer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from config.settings import AppSettings
from config.store import SettingsRepository
from journal.errors import JournalError, SpeechError, SpeechUnavailableError
from journal.history import preview
from journal.responder import AIResponseCoordinator
from journal.schemas import ChatState, IOModes, Message, RequestState, SpeechState
from journal.speech_io import SpeechIOCoordinator
from journal.store import MessageStore
from journal.summary import SummaryWorkflow
from journal.transcript import TranscriptExport
from llm.base import ReplyClient
from speech.base import SpeechEngine

LOGGER = logging.getLogger(__name__)

StateListener = Callable[[ChatState], None]


class ConversationController:
    """Coordinates the message log, AI requests, speech I/O and the save workflows.

    All methods must be called from the event loop thread. Operations that wait on an
    external collaborator apply their synchronous part immediately and return the
    scheduled task (or None when the call was rejected by its precondition).
    """

    def __init__(
        self,
        ai_client: ReplyClient,
        speech_engine: SpeechEngine,
        settings_repository: SettingsRepository,
    ) -> None:
        self._listeners: list[StateListener] = []
        self._tasks: set[asyncio.Task] = set()
        self._settings_repository = settings_repository

        self._store = MessageStore(Message.welcome())
        self._responder = AIResponseCoordinator(ai_client)
        self._speech = SpeechIOCoordinator(speech_engine, on_change=self._emit)
        self._summary = SummaryWorkflow(self._responder)
        self._transcript = TranscriptExport()

        self._request_state = RequestState.IDLE
        self._last_error: str | None = None
        self._last_success_notice: str | None = None
        # Bumped by clear_chat so that replies to a discarded conversation are dropped.
        self._epoch = 0

        self._voice_provider = settings_repository.settings.tts_provider
        self._speech.set_voice_provider(self._voice_provider)
        self._unsubscribe_settings = settings_repository.subscribe(self._on_settings_changed)
        LOGGER.info("Conversation controller initialized")

    # State publication -------------------------------------------------

    @property
    def state(self) -> ChatState:
        return ChatState(
            messages=self._store.all(),
            request_state=self._request_state,
            speech_state=self._speech.state,
            modes=self._speech.modes.model_copy(),
            pending_summary=self._summary.pending_summary,
            is_generating_summary=self._summary.is_generating,
            is_saving=self._summary.is_saving,
            pending_transcript=self._transcript.pending_transcript,
            is_saving_transcript=self._transcript.is_saving,
            last_error=self._last_error,
            last_success_notice=self._last_success_notice,
        )

    @property
    def messages(self) -> list[Message]:
        return self._store.all()

    @property
    def request_state(self) -> RequestState:
        return self._request_state

    @property
    def speech_state(self) -> SpeechState:
        return self._speech.state

    @property
    def modes(self) -> IOModes:
        return self._speech.modes.model_copy()

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        if not self._listeners:
            return
        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                LOGGER.exception("State listener failed")

    # Conversation ------------------------------------------------------

    def send_message(self, text: str) -> asyncio.Task | None:
        text = text.strip()
        if not text or self._request_state is not RequestState.IDLE:
            return None

        LOGGER.info("User sending message: %s", preview(text))
        self._store.append(Message(content=text, is_user=True))
        self._request_state = RequestState.AWAITING_AI_RESPONSE
        self._last_error = None
        self._emit()
        return self._spawn(self._complete_reply(self._store.all(), self._epoch))

    async def _complete_reply(self, history: list[Message], epoch: int) -> None:
        settings = self._settings_repository.settings
        try:
            reply = await self._responder.request_reply(history, settings)
        except JournalError as exc:
            if epoch != self._epoch:
                LOGGER.info("Discarding AI failure for a cleared conversation: %s", exc.detail)
                self._finish_request()
            else:
                self._finish_request(error=exc.detail)
            return
        except BaseException:
            self._finish_request()
            raise

        if epoch != self._epoch:
            LOGGER.info("Discarding AI response for a cleared conversation")
            self._finish_request()
            return

        LOGGER.info("AI response received successfully")
        self._store.append(Message(content=reply, is_user=False))
        self._finish_request()

        if self._speech.modes.output_is_speech:
            self._spawn(self._speak(reply))

    def _finish_request(self, error: str | None = None) -> None:
        self._request_state = RequestState.IDLE
        self._last_error = error
        self._emit()

    def clear_chat(self) -> None:
        LOGGER.info("Clearing chat")
        self._epoch += 1
        self._store.reset(Message.welcome())
        self._last_error = None
        self._last_success_notice = None
        self._emit()

    def clear_error(self) -> None:
        self._last_error = None
        self._emit()

    def clear_save_success(self) -> None:
        self._last_success_notice = None
        self._emit()

    # Journal entry -----------------------------------------------------

    def save_journal_entry(self) -> asyncio.Task | None:
        if self._request_state is not RequestState.IDLE:
            return None
        messages = self._store.all()
        if not self._summary.begin(messages):
            return None

        self._request_state = RequestState.AWAITING_SUMMARY
        self._last_error = None
        self._emit()
        return self._spawn(self._generate_summary(messages))

    async def _generate_summary(self, messages: list[Message]) -> None:
        settings = self._settings_repository.settings
        try:
            await self._summary.generate(messages, settings)
        except JournalError as exc:
            self._finish_request(error=exc.detail)
            return
        except BaseException:
            self._finish_request()
            raise
        self._finish_request()

    def accept_summary_and_save(self, text: str) -> bool:
        accepted = self._summary.accept(text)
        if accepted:
            self._emit()
        return accepted

    def reject_summary(self) -> None:
        self._summary.reject()
        self._emit()

    def on_file_saved(self, success: bool, path: str | None = None) -> None:
        notice = self._summary.on_save_completed(success, path)
        if success:
            self._last_success_notice = notice
        else:
            self._last_error = None
        self._emit()

    # Transcript --------------------------------------------------------

    def save_chat_transcript(self) -> str | None:
        transcript = self._transcript.prepare(self._store.all())
        if transcript is None:
            return None
        self._last_error = None
        self._emit()
        return transcript

    def on_transcript_saved(self, success: bool, path: str | None = None) -> None:
        notice = self._transcript.on_saved(success, path)
        if success:
            self._last_success_notice = notice
        else:
            self._last_error = None
        self._emit()

    # Speech ------------------------------------------------------------

    def toggle_input_mode(self) -> bool:
        return self._speech.toggle_input_mode()

    def toggle_output_mode(self) -> bool:
        return self._speech.toggle_output_mode()

    def start_listening(self) -> asyncio.Task | None:
        """Begin capturing an utterance.

        Returns None when another activity is in progress. Raises SpeechUnavailableError,
        after recording it as the last error, when the device cannot recognize speech.
        """

        try:
            session = self._speech.begin_listening(
                request_in_flight=self._request_state is not RequestState.IDLE
            )
        except SpeechUnavailableError as exc:
            self._last_error = exc.detail
            self._emit()
            raise
        if session is None:
            return None

        self._last_error = None
        self._emit()
        return self._spawn(self._listen(session))

    async def _listen(self, session: int) -> None:
        try:
            text = await self._speech.listen(session)
        except SpeechError as exc:
            self._last_error = exc.detail
            self._emit()
            return
        if text:
            self.send_message(text)

    def stop_listening(self) -> None:
        self._speech.stop_listening()

    async def _speak(self, text: str) -> None:
        try:
            await self._speech.speak(text, self._settings_repository.settings)
        except SpeechError as exc:
            self._last_error = exc.detail
            self._emit()

    def stop_speaking(self) -> None:
        self._speech.stop_speaking()

    def _on_settings_changed(self, settings: AppSettings) -> None:
        if settings.tts_provider is self._voice_provider:
            return
        self._voice_provider = settings.tts_provider
        self._speech.set_voice_provider(settings.tts_provider)
        LOGGER.info("TTS provider updated to: %s", settings.tts_provider.display_name)

    # Task handling -----------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait until every scheduled operation, including follow-ups, has finished."""

        while self._tasks:
            await asyncio.wait(set(self._tasks))

    async def aclose(self) -> None:
        self._unsubscribe_settings()
        self._speech.stop_listening()
        self._speech.stop_speaking()
        await self.wait_idle()
        self._listeners.clear()
