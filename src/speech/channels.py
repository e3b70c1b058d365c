"""Audio source and sink for presentation layers that exchange audio over HTTP."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass


class QueuedAudioSource:
    """Each capture waits for the next recording handed over by the client."""

    def __init__(self) -> None:
        self._recordings: asyncio.Queue[bytes] = asyncio.Queue()

    def submit(self, audio_bytes: bytes) -> None:
        self._recordings.put_nowait(audio_bytes)

    async def __call__(self) -> bytes:
        return await self._recordings.get()


@dataclass
class AudioClip:
    audio: bytes
    mime_type: str


class BufferedAudioSink:
    """Keeps the most recent synthesized clip until the client fetches it."""

    def __init__(self) -> None:
        self._clip: AudioClip | None = None

    async def __call__(self, audio_bytes: bytes) -> None:
        self._clip = AudioClip(audio=audio_bytes, mime_type=guess_audio_mime(audio_bytes))

    def take(self) -> AudioClip | None:
        clip, self._clip = self._clip, None
        return clip


def guess_audio_mime(audio_bytes: bytes) -> str:
    if audio_bytes[:4] == b"RIFF":
        return "audio/wav"
    return "audio/mpeg"
