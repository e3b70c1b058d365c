"""Text-to-speech synthesis for spoken AI replies."""

from __future__ import annotations

import asyncio
import base64
import io
import logging
import wave
from abc import ABC, abstractmethod
from pathlib import Path

import httpx
import numpy as np

from config.providers import TTSProvider
from config.settings import AppSettings, get_settings
from speech.base import SynthesisError

LOGGER = logging.getLogger(__name__)

OPENAI_SPEECH_ENDPOINT = "https://api.openai.com/v1/audio/speech"
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
GEMINI_SAMPLE_RATE = 24000


def pcm16_to_wav_bytes(pcm: np.ndarray, sample_rate: int) -> bytes:
    pcm_bytes = pcm.astype(np.int16).tobytes()
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm_bytes)
    return buffer.getvalue()


class BaseSynthesizer(ABC):
    """Interface for all text-to-speech synthesizers."""

    @abstractmethod
    async def synthesize(self, text: str, settings: AppSettings) -> bytes:
        """Return playable audio for the given text."""


class OpenAISynthesizer(BaseSynthesizer):
    """OpenAI speech endpoint; returns MP3 audio."""

    def __init__(self, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._timeout = get_settings().http_timeout_seconds
        self._transport = transport

    async def synthesize(self, text: str, settings: AppSettings) -> bytes:
        if not settings.tts_openai_api_key:
            raise SynthesisError("Please configure your OpenAI TTS API key in Settings")

        LOGGER.info("Requesting TTS audio from OpenAI")
        payload = {
            "model": settings.tts_openai_model,
            "input": text,
            "voice": settings.tts_openai_voice,
        }
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(
                OPENAI_SPEECH_ENDPOINT,
                json=payload,
                headers={"Authorization": f"Bearer {settings.tts_openai_api_key}"},
            )

        if response.is_error:
            raise SynthesisError(f"API Error: {response.text}")
        LOGGER.info("Received TTS audio (%d bytes)", len(response.content))
        return response.content


class GeminiSynthesizer(BaseSynthesizer):
    """Gemini audio generation; raw 24 kHz PCM is wrapped into WAV."""

    def __init__(self, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._timeout = get_settings().http_timeout_seconds
        self._transport = transport

    async def synthesize(self, text: str, settings: AppSettings) -> bytes:
        if not settings.tts_gemini_api_key:
            raise SynthesisError("Please configure your Gemini TTS API key in Settings")

        LOGGER.info("Requesting TTS audio from Gemini")
        payload = {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {
                        "prebuiltVoiceConfig": {"voiceName": settings.tts_gemini_voice}
                    }
                },
            },
        }
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(
                f"{GEMINI_BASE_URL}/{settings.tts_gemini_model}:generateContent",
                params={"key": settings.tts_gemini_api_key},
                json=payload,
            )

        if response.is_error:
            raise SynthesisError(f"API Error: {response.text}")
        try:
            encoded = response.json()["candidates"][0]["content"]["parts"][0]["inlineData"]["data"]
        except (KeyError, IndexError, TypeError) as exc:
            raise SynthesisError("Invalid response format") from exc

        pcm = np.frombuffer(base64.b64decode(encoded), dtype=np.int16)
        return pcm16_to_wav_bytes(pcm, GEMINI_SAMPLE_RATE)


class AnthropicSynthesizer(BaseSynthesizer):
    async def synthesize(self, text: str, settings: AppSettings) -> bytes:
        raise SynthesisError(
            "Anthropic TTS API is not yet available. Please use OpenAI or Gemini TTS instead."
        )


class CoquiSynthesizer(BaseSynthesizer):
    """Offline TTS using Coqui TTS models for the local voice."""

    def __init__(self) -> None:
        try:
            from TTS.api import TTS  # type: ignore[import]
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise SynthesisError("The TTS package is required for the local voice.") from exc

        self._tts = TTS(model_name="tts_models/en/ljspeech/vits")
        self._work_dir = get_settings().data_dir

    async def synthesize(self, text: str, settings: AppSettings) -> bytes:
        wav_path = Path(self._work_dir) / "tmp_tts.wav"
        wav_path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(self._tts.tts_to_file, text=text, file_path=str(wav_path))

        import soundfile as sf  # lazy import

        audio_array, sample_rate = sf.read(str(wav_path), dtype="float32")
        audio_array = np.asarray(audio_array, dtype=np.float32)
        wav_path.unlink(missing_ok=True)

        output = io.BytesIO()
        sf.write(output, audio_array, sample_rate, format="WAV")
        return output.getvalue()


def build_synthesizer(provider: TTSProvider | str) -> BaseSynthesizer:
    """Factory returning the synthesizer for a voice provider."""

    provider = TTSProvider(provider)
    if provider is TTSProvider.OPENAI:
        return OpenAISynthesizer()
    if provider is TTSProvider.GEMINI:
        return GeminiSynthesizer()
    if provider is TTSProvider.ANTHROPIC:
        return AnthropicSynthesizer()
    if provider is TTSProvider.LOCAL:
        return CoquiSynthesizer()
    raise ValueError(f"Unsupported TTS provider: {provider}")
