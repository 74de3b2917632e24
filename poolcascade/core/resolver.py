"""Project pool resolution with DBC -> DAMM v2 migration redirect."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from poolcascade.core.platforms import METEORA_CPMM, METEORA_DBC, get_platform


@dataclass(frozen=True)
class Resolved:
    """Outcome of resolving a (platform, pool id) pair.

    ``source_pool`` is the row stored under the declared platform;
    ``pool`` is the row reads should use. They differ only after a
    bonding-curve migration was followed.
    """

    original_platform: str
    original_pool_id: int
    effective_platform: str
    effective_pool_id: int
    pool: Any
    source_pool: Any

    @property
    def redirected(self) -> bool:
        return (
            self.effective_platform != self.original_platform
            or self.effective_pool_id != self.original_pool_id
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "original_platform": self.original_platform,
            "original_pool_id": self.original_pool_id,
            "effective_platform": self.effective_platform,
            "effective_pool_id": self.effective_pool_id,
            "redirected": self.redirected,
        }


def migration_successor_address(dbc_row: Any) -> str | None:
    """The DAMM v2 address a migrated curve should redirect to, if any."""
    if not dbc_row.is_migrated:
        return None
    return dbc_row.damm_v2_pool_address or None


class PoolResolver:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def resolve(self, platform: str, pool_id: int) -> Resolved:
        """Load the pool behind ``(platform, pool_id)``.

        Raises InvalidPlatform for an unknown tag (before any query) and
        PoolNotFound when the row is missing. A migrated Meteora DBC row
        redirects to its DAMM v2 successor when that row exists; a missing
        successor falls back to the curve itself.
        """
        spec = get_platform(platform)
        source = await spec.require(self._session, pool_id)

        if platform == METEORA_DBC:
            successor = await self._find_successor(source)
            if successor is not None:
                logger.debug(
                    f"[RESOLVE] dbc#{pool_id} migrated -> {METEORA_CPMM}#{successor.id}"
                )
                return Resolved(
                    original_platform=platform,
                    original_pool_id=pool_id,
                    effective_platform=METEORA_CPMM,
                    effective_pool_id=successor.id,
                    pool=successor,
                    source_pool=source,
                )

        return Resolved(
            original_platform=platform,
            original_pool_id=pool_id,
            effective_platform=platform,
            effective_pool_id=pool_id,
            pool=source,
            source_pool=source,
        )

    async def _find_successor(self, dbc_row: Any) -> Any | None:
        address = migration_successor_address(dbc_row)
        if address is None:
            return None
        try:
            successor = await get_platform(METEORA_CPMM).load_by_address(self._session, address)
        except SQLAlchemyError as e:
            logger.warning(f"[RESOLVE] Successor lookup failed for {address}: {e}")
            return None
        if successor is None:
            logger.warning(
                f"[RESOLVE] dbc {dbc_row.pool_address} marked migrated but "
                f"{address} has no cpmm row, keeping dbc"
            )
        return successor
