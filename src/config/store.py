"""JSON-backed user settings with change notification."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from config.settings import AppSettings

LOGGER = logging.getLogger(__name__)

SettingsListener = Callable[[AppSettings], None]


class SettingsRepository:
    """Holds the current AppSettings snapshot and publishes every change."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._listeners: list[SettingsListener] = []
        self._settings = self._load()

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        """Register a listener; the returned callable removes it again."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes: Any) -> AppSettings:
        unknown = set(changes) - set(AppSettings.model_fields)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

        merged = {**self._settings.model_dump(), **changes}
        updated = AppSettings.model_validate(merged)
        self._replace(updated)
        return updated

    def reset(self) -> AppSettings:
        defaults = AppSettings()
        self._replace(defaults)
        return defaults

    def _replace(self, settings: AppSettings) -> None:
        self._settings = settings
        self._save()
        LOGGER.info(
            "Settings updated (provider=%s, model=%s, tts=%s)",
            settings.ai_provider.value,
            settings.ai_model,
            settings.tts_provider.value,
        )
        for listener in list(self._listeners):
            try:
                listener(settings)
            except Exception:
                LOGGER.exception("Settings listener failed")

    def _load(self) -> AppSettings:
        if self._path is None or not self._path.exists():
            return AppSettings()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return AppSettings.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            LOGGER.warning("Ignoring unreadable settings file %s: %s", self._path, exc)
            return AppSettings()

    def _save(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            self._settings.model_dump_json(indent=2),
            encoding="utf-8",
        )
