"""Writes journal entries and transcripts to the export directory."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

LOGGER = logging.getLogger(__name__)

FILENAME_TIMESTAMP = "%Y-%m-%d_%H-%M-%S"


@dataclass(frozen=True)
class SaveResult:
    success: bool
    location: str | None = None


class FileStorageService:
    def __init__(self, export_dir: Path) -> None:
        self._export_dir = Path(export_dir)

    @staticmethod
    def journal_entry_filename(now: datetime | None = None) -> str:
        return f"journal_entry_{(now or datetime.now()).strftime(FILENAME_TIMESTAMP)}.md"

    @staticmethod
    def transcript_filename(now: datetime | None = None) -> str:
        return f"chat_transcript_{(now or datetime.now()).strftime(FILENAME_TIMESTAMP)}.txt"

    async def save(self, content: str, filename: str) -> SaveResult:
        """Write the content; failures are logged here and reported as an unsuccessful result."""

        if Path(filename).name != filename:
            LOGGER.error("Refusing to save outside the export directory: %s", filename)
            return SaveResult(success=False)

        path = self._export_dir / filename
        try:
            await asyncio.to_thread(self._write, path, content)
        except (OSError, UnicodeError):
            LOGGER.exception("Failed to write %s", path)
            return SaveResult(success=False)

        LOGGER.info("Saved %d characters to %s", len(content), path)
        return SaveResult(success=True, location=str(path))

    @staticmethod
    def _write(path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
