"""Application-wide configuration loading and validation."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from config.providers import AIProvider, TTSProvider

DEFAULT_AI_CONTEXT = (
    "You are a supportive friend helping someone with their daily journaling. "
    "Ask thoughtful questions, show empathy, and help them explore their thoughts and feelings."
)

DEFAULT_OUTPUT_FORMAT = (
    "Format the journal entry as a clean markdown document with a "
    "title, date, and well-organized sections based on our conversation."
)


class Settings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    environment: Literal["local", "dev", "prod"] = Field(default="local")
    log_level: str = Field(default="INFO")
    log_buffer_size: int = Field(
        default=1000,
        ge=1,
        description="Number of recent log records kept in memory for the logs endpoint.",
    )

    data_dir: Path = Field(default=Path("./data"))
    settings_file: Path | None = Field(
        default=None,
        description="JSON file holding the user settings. Defaults to <data_dir>/settings.json.",
    )
    export_dir: Path | None = Field(
        default=None,
        description="Directory receiving journal entries and transcripts. Defaults to <data_dir>/exports.",
    )

    # AI provider connectivity
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    openai_base_url: str | None = Field(
        default=None, description="Optional OpenAI-compatible endpoint override."
    )

    # Speech recognition
    whisper_model_size: str = Field(default="small.en")
    whisper_compute_type: str = Field(default="auto")  # e.g. float16, int8_float16
    whisper_device: str = Field(default="auto")
    speech_language: str = Field(default="en")

    @field_validator("data_dir")
    @classmethod
    def ensure_data_dir(cls, value: Path) -> Path:
        value.mkdir(parents=True, exist_ok=True)
        return value

    @model_validator(mode="after")
    def derive_paths(self) -> Settings:
        if self.settings_file is None:
            self.settings_file = self.data_dir / "settings.json"
        if self.export_dir is None:
            self.export_dir = self.data_dir / "exports"
        return self


class AppSettings(BaseModel):
    """User-editable settings snapshot read at the start of every operation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ai_provider: AIProvider = AIProvider.OPENAI
    ai_model: str = "gpt-4o-mini"
    api_key: str = ""
    ai_context: str = DEFAULT_AI_CONTEXT
    output_format_instructions: str = DEFAULT_OUTPUT_FORMAT

    tts_provider: TTSProvider = TTSProvider.LOCAL
    tts_openai_api_key: str = ""
    tts_openai_model: str = "tts-1"
    tts_openai_voice: str = "nova"
    tts_gemini_api_key: str = ""
    tts_gemini_model: str = "gemini-2.5-flash-preview-tts"
    tts_gemini_voice: str = "Kore"
    tts_anthropic_api_key: str = ""

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
