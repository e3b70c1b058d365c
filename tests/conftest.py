from __future__ import annotations

import asyncio
import os
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

# Must be set before anything calls get_settings(), which creates the data directory.
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="journal-tests-"))

from config.providers import TTSProvider  # noqa: E402
from config.settings import AppSettings  # noqa: E402
from config.store import SettingsRepository  # noqa: E402
from speech.base import SpeechEngine, TranscriptionSegment  # noqa: E402
from speech.tts import BaseSynthesizer  # noqa: E402


class FakeAIClient:
    def __init__(self, reply: str = "Sounds good", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []
        self.gate: asyncio.Event | None = None

    async def get_reply(self, messages, provider, model, api_key, system_context) -> str:
        self.calls.append(
            {
                "messages": list(messages),
                "provider": provider,
                "model": model,
                "api_key": api_key,
                "system_context": system_context,
            }
        )
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.reply


class FakeSpeechEngine(SpeechEngine):
    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.listen_calls = 0
        self.stop_listening_calls = 0
        self.stop_speaking_calls = 0
        self.spoken: list[str] = []
        self.providers: list[TTSProvider] = []
        self.hold_speech = False
        self.speech_error: Exception | None = None
        self._heard: asyncio.Future | None = None
        self._speaking: asyncio.Future | None = None

    def is_recognition_available(self) -> bool:
        return self.available

    async def start_listening(self) -> str:
        self.listen_calls += 1
        self._heard = asyncio.get_running_loop().create_future()
        return await self._heard

    def hear(self, text: str) -> None:
        self._heard.set_result(text)

    def fail_listening(self, exc: Exception) -> None:
        self._heard.set_exception(exc)

    def stop_listening(self) -> None:
        self.stop_listening_calls += 1
        if self._heard is not None and not self._heard.done():
            self._heard.set_result("")

    async def speak(self, text: str, settings) -> None:
        self.spoken.append(text)
        if self.speech_error is not None:
            raise self.speech_error
        if self.hold_speech:
            self._speaking = asyncio.get_running_loop().create_future()
            await self._speaking

    def finish_speaking(self) -> None:
        self._speaking.set_result(None)

    def stop_speaking(self) -> None:
        self.stop_speaking_calls += 1
        if self._speaking is not None and not self._speaking.done():
            self._speaking.set_result(None)

    def set_voice_provider(self, provider: TTSProvider) -> None:
        self.providers.append(provider)


class FakeTranscriber:
    def __init__(self, text: str) -> None:
        self.text = text
        self.received: list[tuple[bytes, str | None]] = []

    def transcribe(self, audio_bytes: bytes, language_hint: str | None = None):
        self.received.append((audio_bytes, language_hint))
        return [
            TranscriptionSegment(start=0.0, end=1.0, text=f" {self.text}", language="en", logprob=-0.1)
        ]


class FakeSynthesizer(BaseSynthesizer):
    def __init__(self, gate: asyncio.Event | None = None) -> None:
        self.gate = gate
        self.texts: list[str] = []

    async def synthesize(self, text: str, settings: AppSettings) -> bytes:
        self.texts.append(text)
        if self.gate is not None:
            await self.gate.wait()
        return b"RIFF-fake"


async def settle(rounds: int = 10) -> None:
    """Let scheduled tasks run up to their next suspension point."""

    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture()
def settings_repository() -> SettingsRepository:
    repository = SettingsRepository()
    repository.update(api_key="sk-test-key")
    return repository


@pytest.fixture()
def ai_client() -> FakeAIClient:
    return FakeAIClient()


@pytest.fixture()
def speech_engine() -> FakeSpeechEngine:
    return FakeSpeechEngine()


@pytest.fixture()
def make_controller(ai_client, speech_engine, settings_repository):
    """Controllers need a running loop for their tasks, so build them inside the coroutine."""

    from journal.controller import ConversationController

    def factory(**overrides):
        return ConversationController(
            ai_client=overrides.get("ai_client", ai_client),
            speech_engine=overrides.get("speech_engine", speech_engine),
            settings_repository=overrides.get("settings_repository", settings_repository),
        )

    return factory


@pytest.fixture(scope="session")
def app():
    import importlib

    main = importlib.import_module("main")
    return main.app


@pytest.fixture()
def runtime(tmp_path, ai_client, settings_repository):
    """Runtime wired to fakes so tests never load Whisper, TTS models or provider SDKs."""

    from api.dependencies import Runtime
    from journal.controller import ConversationController
    from speech.channels import BufferedAudioSink, QueuedAudioSource
    from speech.engine import WhisperSpeechEngine
    from storage.files import FileStorageService

    source = QueuedAudioSource()
    sink = BufferedAudioSink()
    engine = WhisperSpeechEngine(
        source,
        sink,
        transcriber=FakeTranscriber("I went for a walk"),
        synthesizer_factory=lambda provider: FakeSynthesizer(),
    )
    controller = ConversationController(
        ai_client=ai_client,
        speech_engine=engine,
        settings_repository=settings_repository,
    )
    return Runtime(
        controller=controller,
        settings_repository=settings_repository,
        storage=FileStorageService(tmp_path / "exports"),
        audio_source=source,
        audio_sink=sink,
    )


@pytest.fixture()
def log_buffer():
    from config.logs import MemoryLogHandler

    return MemoryLogHandler()


@pytest.fixture()
def client(app, runtime, log_buffer):
    import api.dependencies as deps

    app.dependency_overrides[deps.get_runtime] = lambda: runtime
    app.dependency_overrides[deps.get_logs] = lambda: log_buffer

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
