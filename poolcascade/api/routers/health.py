"""Health check."""

from __future__ import annotations

from fastapi import APIRouter
from loguru import logger
from pydantic import BaseModel
from sqlalchemy import text

from poolcascade.db.database import engine
from poolcascade.db.redis import ping_redis

router = APIRouter(prefix="/api/v1", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    db_ok: bool
    redis_ok: bool


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check DB and Redis connectivity."""
    db_ok = False
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        db_ok = True
    except Exception as e:
        logger.warning(f"[HEALTH] DB check failed: {e}")

    redis_ok = await ping_redis()

    return HealthResponse(
        status="ok" if db_ok and redis_ok else "degraded",
        version="0.1.0",
        db_ok=db_ok,
        redis_ok=redis_ok,
    )
