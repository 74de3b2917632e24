"""Holder ledger maintenance."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from poolcascade.api.dependencies import get_project_service, get_session
from poolcascade.core.projects import ProjectService

router = APIRouter(prefix="/api/v1/holders", tags=["holders"])


@router.post("/migrate/{pool_address}")
async def migrate_pool_holders(
    pool_address: str,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    """Copy a migrated DBC pool's holder ledger onto its DAMM v2 successor."""
    report = await service.migrate_pool_holders(pool_address)
    await session.commit()
    return report.to_dict()
