from __future__ import annotations

import sys
from typing import Any, Dict

from fastapi import Depends, FastAPI
from loguru import logger

from piggybank.api.deps import get_sender, get_store
from piggybank.api.router import api_router
from piggybank.config import Settings, get_settings
from piggybank.storage.base import StorageError


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


configure_logging(get_settings().LOG_LEVEL)

app = FastAPI(
    title="Piggybank",
    version="1.0.0",
    description="WhatsApp personal finance tracker",
)

app.include_router(api_router)


@app.on_event("startup")
async def _startup() -> None:
    try:
        get_store().open()
    except StorageError as e:
        # the store is opened again lazily on the first request
        logger.warning("Storage init skipped (not reachable): {}", str(e))


@app.on_event("shutdown")
async def _shutdown() -> None:
    get_store().close()


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {
        "ok": True,
        "service": "piggybank",
        "env": settings.APP_ENV,
        "storage": get_store().name,
        "whatsapp": "mock" if get_sender().mock_mode else True,
    }


def run() -> None:
    import uvicorn

    uvicorn.run("piggybank.main:app", host="0.0.0.0", port=3000)
