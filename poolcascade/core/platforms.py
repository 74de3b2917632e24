"""Pool platform registry.

One ``PlatformSpec`` per platform tag. The resolver, the status cascade and
the delete guards all dispatch through ``REGISTRY`` so the set of supported
platforms is defined in exactly one place.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from poolcascade.core.errors import InvalidPlatform, PoolNotFound
from poolcascade.models.pool import (
    MeteoracpmmConfig,
    MeteoradbcConfig,
    PumpfunAmmPoolConfig,
    PumpfuninternalConfig,
    RaydiumCpmmPoolConfig,
    RaydiumLaunchpadPoolConfig,
    RaydiumPoolConfig,
)
from poolcascade.models.project import ProjectConfig

RAYDIUM = "raydium"
PUMPFUN_INTERNAL = "pumpfun_internal"
PUMPFUN_AMM = "pumpfun_amm"
RAYDIUM_LAUNCHPAD = "raydium_launchpad"
RAYDIUM_CPMM = "raydium_cpmm"
METEORA_DBC = "meteora_dbc"
METEORA_CPMM = "meteora_cpmm"

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"

# Called after a row's own status was written: (session, row, status)
StatusHook = Callable[[AsyncSession, Any, str], Awaitable[None]]


def status_value(active: bool) -> str:
    return STATUS_ACTIVE if active else STATUS_INACTIVE


@dataclass(frozen=True)
class PlatformSpec:
    tag: str
    model: type
    address_field: str = "pool_address"
    after_status: StatusHook | None = None

    async def load(self, session: AsyncSession, pool_id: int) -> Any | None:
        return await session.get(self.model, pool_id)

    async def load_by_address(self, session: AsyncSession, address: str) -> Any | None:
        column = getattr(self.model, self.address_field)
        result = await session.execute(select(self.model).where(column == address))
        return result.scalars().first()

    async def require(self, session: AsyncSession, pool_id: int) -> Any:
        row = await self.load(session, pool_id)
        if row is None:
            raise PoolNotFound(self.tag, pool_id)
        return row

    def address_of(self, row: Any) -> str:
        return getattr(row, self.address_field)

    async def update_status(self, session: AsyncSession, pool_id: int, active: bool) -> Any:
        """Write ``status`` on the row, then run the platform's cascade hook."""
        row = await self.require(session, pool_id)
        status = status_value(active)
        row.status = status
        await session.flush()
        if self.after_status is not None:
            await self.after_status(session, row, status)
        return row

    async def count_dependents(self, session: AsyncSession, pool_id: int) -> int:
        """Projects still pointing at this pool."""
        result = await session.execute(
            select(func.count())
            .select_from(ProjectConfig)
            .where(
                ProjectConfig.pool_platform == self.tag,
                ProjectConfig.pool_id == pool_id,
            )
        )
        return result.scalar_one()


async def _cascade_cpmm_to_dbc(session: AsyncSession, row: MeteoracpmmConfig, status: str) -> None:
    # Backward only: the bonding curve follows its successor, never the reverse.
    if not row.dbc_pool_address:
        return
    result = await session.execute(
        select(MeteoradbcConfig).where(MeteoradbcConfig.pool_address == row.dbc_pool_address)
    )
    sources = result.scalars().all()
    for source in sources:
        source.status = status
    await session.flush()
    logger.debug(
        f"[CASCADE] cpmm {row.pool_address} -> dbc {row.dbc_pool_address} "
        f"status={status} rows={len(sources)}"
    )


REGISTRY: dict[str, PlatformSpec] = {
    spec.tag: spec
    for spec in (
        PlatformSpec(RAYDIUM, RaydiumPoolConfig),
        PlatformSpec(PUMPFUN_INTERNAL, PumpfuninternalConfig, address_field="mint"),
        PlatformSpec(PUMPFUN_AMM, PumpfunAmmPoolConfig),
        PlatformSpec(RAYDIUM_LAUNCHPAD, RaydiumLaunchpadPoolConfig),
        PlatformSpec(RAYDIUM_CPMM, RaydiumCpmmPoolConfig),
        PlatformSpec(METEORA_DBC, MeteoradbcConfig),
        PlatformSpec(METEORA_CPMM, MeteoracpmmConfig, after_status=_cascade_cpmm_to_dbc),
    )
}

SUPPORTED_PLATFORMS = tuple(REGISTRY)


def get_platform(tag: str) -> PlatformSpec:
    spec = REGISTRY.get(tag)
    if spec is None:
        raise InvalidPlatform(tag)
    return spec
