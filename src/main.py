"""Entry point for the journaling chat assistant service."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.dependencies import shutdown_runtime
from api.routes import router as chat_router
from api.settings_routes import router as settings_router
from config.logs import configure_logging
from config.settings import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await shutdown_runtime()


settings = get_settings()
configure_logging(settings)

app = FastAPI(
    title="Thought Smith",
    description="Journaling chat assistant that turns conversations into journal entries.",
    lifespan=lifespan,
)
app.include_router(chat_router, prefix="/api")
app.include_router(settings_router, prefix="/api")
