"""Speech engine composing audio capture, Whisper transcription, synthesis and playback."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from config.providers import TTSProvider
from config.settings import AppSettings, get_settings
from speech.base import SpeechEngine, TranscriptionSegment, merge_segments
from speech.tts import BaseSynthesizer, build_synthesizer

LOGGER = logging.getLogger(__name__)

AudioSource = Callable[[], Awaitable[bytes]]
AudioSink = Callable[[bytes], Awaitable[None]]
SynthesizerFactory = Callable[[TTSProvider], BaseSynthesizer]


class Transcriber(Protocol):
    def transcribe(
        self, audio_bytes: bytes, language_hint: str | None = None
    ) -> list[TranscriptionSegment]:  # pragma: no cover - protocol stub
        ...


class WhisperSpeechEngine(SpeechEngine):
    """Records one utterance from the audio source and speaks replies through the sink.

    The Whisper model and the synthesizer are created on first use so that constructing
    the engine never loads heavy ML dependencies.
    """

    def __init__(
        self,
        audio_source: AudioSource | None,
        audio_sink: AudioSink,
        *,
        transcriber: Transcriber | None = None,
        synthesizer_factory: SynthesizerFactory = build_synthesizer,
    ) -> None:
        self._source = audio_source
        self._sink = audio_sink
        self._transcriber = transcriber
        self._synthesizer_factory = synthesizer_factory
        self._provider = TTSProvider.LOCAL
        self._synthesizer: BaseSynthesizer | None = None
        self._capture: asyncio.Future | None = None
        self._speaking: asyncio.Future | None = None

    def is_recognition_available(self) -> bool:
        return self._source is not None

    async def start_listening(self) -> str:
        if self._source is None:
            raise RuntimeError("No audio source configured.")

        capture = asyncio.ensure_future(self._source())
        self._capture = capture
        try:
            await asyncio.wait({capture})
        finally:
            self._capture = None
            if not capture.done():
                capture.cancel()

        if capture.cancelled():
            LOGGER.info("Audio capture stopped before an utterance was recorded")
            return ""

        audio = capture.result()
        transcriber = self._get_transcriber()
        segments = await asyncio.to_thread(
            transcriber.transcribe, audio, get_settings().speech_language
        )
        return merge_segments(segments)

    def stop_listening(self) -> None:
        if self._capture is not None and not self._capture.done():
            self._capture.cancel()

    async def speak(self, text: str, settings: AppSettings) -> None:
        speaking = asyncio.ensure_future(self._synthesize_and_play(text, settings))
        self._speaking = speaking
        try:
            await asyncio.wait({speaking})
        finally:
            self._speaking = None
            if not speaking.done():
                speaking.cancel()

        if not speaking.cancelled():
            speaking.result()

    async def _synthesize_and_play(self, text: str, settings: AppSettings) -> None:
        audio = await self._get_synthesizer().synthesize(text, settings)
        await self._sink(audio)

    def stop_speaking(self) -> None:
        if self._speaking is not None and not self._speaking.done():
            self._speaking.cancel()

    def set_voice_provider(self, provider: TTSProvider) -> None:
        provider = TTSProvider(provider)
        if provider is not self._provider:
            self._provider = provider
            self._synthesizer = None
        LOGGER.info("TTS provider set to: %s", provider.display_name)

    def _get_transcriber(self) -> Transcriber:
        if self._transcriber is None:
            # Lazy import to avoid loading faster-whisper until speech input is used.
            from speech.transcriber import WhisperTranscriber

            self._transcriber = WhisperTranscriber()
        return self._transcriber

    def _get_synthesizer(self) -> BaseSynthesizer:
        if self._synthesizer is None:
            self._synthesizer = self._synthesizer_factory(self._provider)
        return self._synthesizer
