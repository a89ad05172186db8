from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text

from anime_catalog.core.config import Settings
from anime_catalog.core.deps import get_sessionmaker, settings_dep

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str = "ok"


router = APIRouter()


@router.get("/healthz", response_model=HealthResponse)
async def healthz() -> HealthResponse:
    return HealthResponse()


@router.get("/readyz", response_model=HealthResponse, responses={503: {"model": HealthResponse}})
async def readyz(request: Request, settings: Settings = Depends(settings_dep)) -> HealthResponse | JSONResponse:
    # the session is opened here rather than injected so that a missing
    # sessionmaker (lifespan not run) reports 503 like any other DB failure
    try:
        async with get_sessionmaker(request)() as session:
            await asyncio.wait_for(session.execute(text("SELECT 1")), timeout=settings.repository_timeout_seconds)
    except Exception as exc:  # noqa: BLE001
        logger.warning("readiness_check_failed", extra={"reason": str(exc)})
        return JSONResponse(status_code=503, content=HealthResponse(status="unavailable").model_dump())
    return HealthResponse()
