"""Domain-specific exceptions for conversation operations.

These exceptions are safe to import from API layers without triggering heavy ML imports.
"""

from __future__ import annotations


class JournalError(Exception):
    status_code: int = 500
    default_detail: str = "Journal assistant error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail


class MissingCredentialError(JournalError):
    status_code = 400
    default_detail = "Please configure your API key in Settings"


class ProviderError(JournalError):
    status_code = 502
    default_detail = "Failed to get AI response"


class RequestInFlightError(JournalError):
    status_code = 409
    default_detail = "Another AI request is already in progress."


class SpeechUnavailableError(JournalError):
    status_code = 503
    default_detail = "Speech recognition is not available on this device"


class SpeechError(JournalError):
    status_code = 503
    default_detail = "Speech recognition failed"


class SummaryGenerationFailedError(JournalError):
    status_code = 502
    default_detail = "Failed to generate summary: Unknown error"

    @classmethod
    def from_cause(cls, cause: str | None) -> SummaryGenerationFailedError:
        return cls(f"Failed to generate summary: {cause or 'Unknown error'}")
