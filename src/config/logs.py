"""Logging setup plus an in-memory buffer of recent records for the logs view."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime

from config.settings import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogEntry:
    timestamp: datetime
    level: str
    source: str
    message: str

    def formatted(self) -> str:
        return f"[{self.timestamp:%Y-%m-%d %H:%M:%S}] [{self.level}] [{self.source}] {self.message}"


class MemoryLogHandler(logging.Handler):
    """Keeps the most recent records; the oldest entry is dropped once full."""

    def __init__(self, capacity: int = 1000, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._entries: deque[LogEntry] = deque(maxlen=capacity)
        self._entries_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            if record.exc_info:
                message = f"{message}\n{logging.Formatter().formatException(record.exc_info)}"
            entry = LogEntry(
                timestamp=datetime.fromtimestamp(record.created),
                level=record.levelname,
                source=record.name,
                message=message,
            )
        except Exception:
            self.handleError(record)
            return
        with self._entries_lock:
            self._entries.append(entry)

    def get_logs(self) -> list[LogEntry]:
        with self._entries_lock:
            return list(self._entries)

    def logs_as_text(self) -> str:
        return "\n".join(entry.formatted() for entry in self.get_logs())

    def clear(self) -> None:
        with self._entries_lock:
            self._entries.clear()
        LOGGER.info("Logs cleared")


_buffer: MemoryLogHandler | None = None


def configure_logging(settings: Settings) -> MemoryLogHandler:
    """Configure root logging once and return the shared log buffer."""

    global _buffer
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    if _buffer is None:
        _buffer = MemoryLogHandler(capacity=settings.log_buffer_size)
        logging.getLogger().addHandler(_buffer)
    return _buffer


def get_log_buffer() -> MemoryLogHandler:
    if _buffer is None:
        raise RuntimeError("Logging has not been configured.")
    return _buffer
