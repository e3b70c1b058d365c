"""Shared FastAPI dependencies.

Separated to avoid circular imports between route modules.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from config.logs import MemoryLogHandler, get_log_buffer
from config.settings import get_settings
from config.store import SettingsRepository
from speech.channels import BufferedAudioSink, QueuedAudioSource
from storage.files import FileStorageService

if TYPE_CHECKING:  # pragma: no cover
    from journal.controller import ConversationController


@dataclass
class Runtime:
    """Process-wide conversation plus the collaborators the routes talk to directly."""

    controller: ConversationController
    settings_repository: SettingsRepository
    storage: FileStorageService
    audio_source: QueuedAudioSource
    audio_sink: BufferedAudioSink


@lru_cache(maxsize=1)
def _runtime_factory() -> Runtime:
    # Lazy imports keep provider SDKs out of module import time.
    from journal.controller import ConversationController
    from llm.service import AIService
    from speech.engine import WhisperSpeechEngine

    settings = get_settings()
    repository = SettingsRepository(settings.settings_file)
    source = QueuedAudioSource()
    sink = BufferedAudioSink()
    controller = ConversationController(
        ai_client=AIService(),
        speech_engine=WhisperSpeechEngine(source, sink),
        settings_repository=repository,
    )
    return Runtime(
        controller=controller,
        settings_repository=repository,
        storage=FileStorageService(settings.export_dir),
        audio_source=source,
        audio_sink=sink,
    )


async def get_runtime() -> Runtime:
    # Async so the controller is created and used on the event loop thread.
    return _runtime_factory()


async def shutdown_runtime() -> None:
    if _runtime_factory.cache_info().currsize:
        await _runtime_factory().controller.aclose()
        _runtime_factory.cache_clear()


def get_logs() -> MemoryLogHandler:
    return get_log_buffer()
