from __future__ import annotations

from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from poolcascade.core.errors import UpdateFailed
from poolcascade.core.platforms import get_platform, status_value
from poolcascade.models.project import StrategyConfig


class StatusCascade:
    """Pool activation writes and the strategy shutdown that follows them."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def set_status(self, platform: str, pool_id: int, active: bool) -> Any:
        """Set ``status`` on the literal (platform, pool_id) row.

        No migration redirect here: the caller names the row to write.
        A meteora_cpmm row also drags its source DBC row along.
        """
        spec = get_platform(platform)
        try:
            row = await spec.update_status(self._session, pool_id, active)
        except SQLAlchemyError as e:
            raise UpdateFailed(f"status update failed for {platform}#{pool_id}: {e}") from e
        logger.info(f"[CASCADE] {platform}#{pool_id} status={status_value(active)}")
        return row

    async def close_all_strategies(self, project_id: int) -> int:
        """Disable every enabled strategy of the project; returns rows changed."""
        try:
            result = await self._session.execute(
                select(StrategyConfig).where(
                    StrategyConfig.project_id == project_id,
                    StrategyConfig.enabled.is_(True),
                )
            )
            strategies = result.scalars().all()
            for strategy in strategies:
                strategy.enabled = False
            await self._session.flush()
        except SQLAlchemyError as e:
            raise UpdateFailed(f"closing strategies of project {project_id} failed: {e}") from e
        closed = len(strategies)
        if closed:
            logger.info(f"[CASCADE] Closed {closed} strategies for project {project_id}")
        return closed
