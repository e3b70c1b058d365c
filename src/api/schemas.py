"""API-facing Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class SendMessageRequest(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("Text may not be empty.")
        return text


class AcceptSummaryRequest(BaseModel):
    content: str = Field(description="Journal entry text, possibly edited by the user.")


class ModelResponse(BaseModel):
    name: str
    display_name: str
