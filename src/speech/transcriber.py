"""Speech-to-text for spoken journal entries based on Whisper."""

from __future__ import annotations

import io
import logging

import numpy as np
import soundfile as sf
from faster_whisper import WhisperModel
from langdetect import DetectorFactory, detect

from config.settings import get_settings
from speech.base import TranscriptionSegment

DetectorFactory.seed = 7  # deterministic language detection

LOGGER = logging.getLogger(__name__)

WHISPER_SAMPLE_RATE = 16000
NO_SPEECH_THRESHOLD = 0.6
INITIAL_PROMPT = "A personal journaling conversation about the speaker's day, thoughts and feelings."


def load_utterance(audio_bytes: bytes) -> np.ndarray:
    """Decode a recorded utterance into mono float32 samples at Whisper's sample rate."""

    with sf.SoundFile(io.BytesIO(audio_bytes), mode="r") as audio_file:
        samples = audio_file.read(dtype="float32", always_2d=True)
        sample_rate = audio_file.samplerate

    mono = samples.mean(axis=1)
    if sample_rate == WHISPER_SAMPLE_RATE or mono.size == 0:
        return mono.astype(np.float32)

    duration = mono.size / sample_rate
    target = np.linspace(0.0, duration, int(round(duration * WHISPER_SAMPLE_RATE)), endpoint=False)
    source = np.arange(mono.size) / sample_rate
    return np.interp(target, source, mono).astype(np.float32)


class WhisperTranscriber:
    """Transcribes one utterance at a time; the model is loaded once per process."""

    def __init__(self) -> None:
        settings = get_settings()
        LOGGER.info("Loading Whisper model %s", settings.whisper_model_size)
        self._model = WhisperModel(
            model_size_or_path=settings.whisper_model_size,
            device=settings.whisper_device,
            compute_type=settings.whisper_compute_type,
        )
        self._default_language = settings.speech_language or None

    def transcribe(
        self, audio_bytes: bytes, language_hint: str | None = None
    ) -> list[TranscriptionSegment]:
        audio = load_utterance(audio_bytes)
        if audio.size == 0:
            return []

        segments, info = self._model.transcribe(
            audio,
            beam_size=5,
            language=language_hint or self._default_language,
            initial_prompt=INITIAL_PROMPT,
            vad_filter=True,
            temperature=0.0,
        )

        results: list[TranscriptionSegment] = []
        for segment in segments:
            text = segment.text.strip()
            if not text or segment.no_speech_prob > NO_SPEECH_THRESHOLD:
                continue
            results.append(
                TranscriptionSegment(
                    start=segment.start,
                    end=segment.end,
                    text=text,
                    language=info.language or self._safe_detect(text) or "unknown",
                    logprob=segment.avg_logprob,
                )
            )

        LOGGER.info("Transcribed %d segment(s) from %.1fs of audio", len(results), audio.size / WHISPER_SAMPLE_RATE)
        return results

    @staticmethod
    def _safe_detect(text: str) -> str | None:
        try:
            return detect(text)
        except Exception:  # langdetect raises its own LangDetectException on short input
            LOGGER.debug("Language detection failed for text: %s", text)
        return None
