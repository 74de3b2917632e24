"""Companion-pool annotations attached to a resolved project view."""

from __future__ import annotations

from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from poolcascade.core.platforms import (
    METEORA_CPMM,
    RAYDIUM_CPMM,
    RAYDIUM_LAUNCHPAD,
    get_platform,
)
from poolcascade.models.pool import MeteoradbcConfig, RaydiumPoolRelation


class RelationAugmenter:
    """Best-effort lookups; a miss or a failed query just means no key."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def augment(
        self,
        effective_platform: str,
        effective_pool: Any,
        *,
        source_pool: Any | None = None,
    ) -> dict[str, Any]:
        relation: dict[str, Any] = {}
        try:
            if effective_platform == RAYDIUM_LAUNCHPAD:
                relation.update(await self._launchpad_relation(effective_pool))

            dbc_row = source_pool if source_pool is not None else effective_pool
            if isinstance(dbc_row, MeteoradbcConfig):
                relation.update(await self._dbc_successor(dbc_row))
        except SQLAlchemyError as e:
            logger.warning(f"[RELATION] Lookup failed for {effective_platform}: {e}")
        return relation

    async def _launchpad_relation(self, pool: Any) -> dict[str, Any]:
        result = await self._session.execute(
            select(RaydiumPoolRelation).where(
                RaydiumPoolRelation.launchpad_pool_id == pool.pool_address
            )
        )
        link = result.scalars().first()
        if link is None:
            return {}
        out: dict[str, Any] = {"relation": link}
        if link.cpmm_pool_id:
            cpmm = await get_platform(RAYDIUM_CPMM).load_by_address(
                self._session, link.cpmm_pool_id
            )
            if cpmm is not None:
                out["cpmm_pool_config"] = cpmm
        return out

    async def _dbc_successor(self, dbc_row: MeteoradbcConfig) -> dict[str, Any]:
        # Keyed off damm_v2_pool_address alone, migrated flag or not.
        if not dbc_row.damm_v2_pool_address:
            return {}
        cpmm = await get_platform(METEORA_CPMM).load_by_address(
            self._session, dbc_row.damm_v2_pool_address
        )
        if cpmm is None:
            return {}
        return {"meteoracpmm_config": cpmm}
