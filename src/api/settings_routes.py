"""Routes for user settings and the in-app log viewer."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from api.dependencies import Runtime, get_logs, get_runtime
from api.schemas import ModelResponse
from config.logs import MemoryLogHandler
from config.providers import AIProvider, models_for_provider
from config.settings import AppSettings

LOGGER = logging.getLogger(__name__)

router = APIRouter()

SECRET_FIELDS = ("api_key", "tts_openai_api_key", "tts_gemini_api_key", "tts_anthropic_api_key")
MASK_PREFIX = "****"


def mask_secret(value: str) -> str:
    if not value:
        return ""
    return f"{MASK_PREFIX}{value[-4:]}" if len(value) > 8 else MASK_PREFIX


def _public_settings(settings: AppSettings) -> dict[str, Any]:
    data = settings.model_dump(mode="json")
    for name in SECRET_FIELDS:
        data[name] = mask_secret(data[name])
    return data


@router.get("/settings")
async def read_settings(runtime: Runtime = Depends(get_runtime)) -> dict[str, Any]:
    return _public_settings(runtime.settings_repository.settings)


@router.patch("/settings")
async def update_settings(
    changes: dict[str, Any] = Body(...),
    runtime: Runtime = Depends(get_runtime),
) -> dict[str, Any]:
    # Masked secrets echoed back from GET /settings keep the stored value.
    changes = {
        name: value
        for name, value in changes.items()
        if not (name in SECRET_FIELDS and isinstance(value, str) and value.startswith(MASK_PREFIX))
    }
    try:
        updated = runtime.settings_repository.update(**changes)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _public_settings(updated)


@router.get("/settings/models/{provider}", response_model=list[ModelResponse])
async def list_models(provider: str) -> list[ModelResponse]:
    try:
        models = models_for_provider(AIProvider(provider))
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown provider: {provider}") from exc
    return [ModelResponse(name=m.model_name, display_name=m.display_name) for m in models]


@router.get("/logs", response_class=PlainTextResponse)
async def read_logs(logs: MemoryLogHandler = Depends(get_logs)) -> str:
    return logs.logs_as_text()


@router.delete("/logs", status_code=204)
async def clear_logs(logs: MemoryLogHandler = Depends(get_logs)) -> None:
    logs.clear()
