"""Pool endpoints addressed by (platform, id)."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from poolcascade.api.dependencies import get_project_service, get_session
from poolcascade.api.serializers import model_to_dict, relation_to_dict
from poolcascade.core.platforms import SUPPORTED_PLATFORMS
from poolcascade.core.projects import ProjectService
from poolcascade.schemas import PoolStatusRequest

router = APIRouter(prefix="/api/v1/pools", tags=["pools"])


@router.get("/platforms")
async def list_platforms() -> dict[str, Any]:
    return {"platforms": list(SUPPORTED_PLATFORMS)}


@router.get("/{platform}/{pool_id}")
async def get_pool(
    platform: str,
    pool_id: int,
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    """Effective pool behind (platform, id), following a DBC migration."""
    resolved, relation = await service.resolve_pool(platform, pool_id)
    return {
        "resolution": resolved.as_dict(),
        "pool": model_to_dict(resolved.pool),
        "source_pool": model_to_dict(resolved.source_pool),
        "pool_relation": relation_to_dict(relation),
    }


@router.post("/{platform}/{pool_id}/status")
async def set_pool_status(
    platform: str,
    pool_id: int,
    body: PoolStatusRequest,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    """Write status on exactly this row (cpmm rows also update their DBC source)."""
    row = await service.set_pool_status(platform, pool_id, body.active)
    await session.commit()
    return model_to_dict(row)


@router.delete("/{platform}/{pool_id}")
async def delete_pool(
    platform: str,
    pool_id: int,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    await service.delete_pool(platform, pool_id)
    await session.commit()
    return {"ok": True, "platform": platform, "id": pool_id}
