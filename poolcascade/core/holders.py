"""Carry holder ledgers across a Meteora DBC -> DAMM v2 migration."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from poolcascade.core.errors import NotMigratable
from poolcascade.core.platforms import METEORA_DBC, get_platform
from poolcascade.models.holder import HOLDER_TYPE_POOL, MeteoracpmmHolder, MeteoradbcHolder

# Ledger columns copied verbatim onto the successor row.
_COPIED_FIELDS = (
    "address",
    "holder_type",
    "base_mint",
    "quote_mint",
    "start_slot",
    "last_slot",
    "start_timestamp",
    "last_timestamp",
    "start_signature",
    "end_signature",
    "base_change",
    "quote_change",
    "sol_change",
    "tx_count",
)


@dataclass
class MigrationReport:
    pool_address: str
    successor_pool_address: str
    total_found: int = 0
    migrated: int = 0
    skipped: int = 0
    errored: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class HolderMigrator:
    """Copy non-pool DBC ledger rows onto the DAMM v2 successor pool.

    Additive only: source rows are never modified or removed, and rows
    already present on the successor are skipped, so re-running after a
    partial failure only fills the gaps.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def migrate(self, dbc_pool_address: str) -> MigrationReport:
        dbc = await get_platform(METEORA_DBC).load_by_address(self._session, dbc_pool_address)
        if dbc is None:
            raise NotMigratable(f"no meteora_dbc pool at {dbc_pool_address}")
        successor = dbc.damm_v2_pool_address
        if not successor:
            raise NotMigratable(f"meteora_dbc pool {dbc_pool_address} has no damm_v2 successor")

        result = await self._session.execute(
            select(MeteoradbcHolder)
            .where(
                MeteoradbcHolder.pool_address == dbc_pool_address,
                MeteoradbcHolder.holder_type != HOLDER_TYPE_POOL,
            )
            .order_by(MeteoradbcHolder.id)
        )
        # Snapshot values up front; a savepoint rollback may expire loaded rows.
        rows = [
            {field: getattr(holder, field) for field in _COPIED_FIELDS}
            for holder in result.scalars().all()
        ]

        report = MigrationReport(
            pool_address=dbc_pool_address,
            successor_pool_address=successor,
            total_found=len(rows),
        )
        logger.info(
            f"[HOLDERS] Migrating {len(rows)} ledger rows {dbc_pool_address} -> {successor}"
        )

        for values in rows:
            try:
                if await self._successor_exists(values, successor):
                    report.skipped += 1
                    continue
                async with self._session.begin_nested():
                    await self._insert_successor(values, successor)
                report.migrated += 1
            except Exception as e:
                report.errored += 1
                logger.error(f"[HOLDERS] Failed to migrate {values['address']} to {successor}: {e}")

        logger.info(
            f"[HOLDERS] {dbc_pool_address}: migrated={report.migrated} "
            f"skipped={report.skipped} errored={report.errored}"
        )
        return report

    async def _successor_exists(self, values: dict, successor: str) -> bool:
        result = await self._session.execute(
            select(MeteoracpmmHolder.id)
            .where(
                MeteoracpmmHolder.address == values["address"],
                MeteoracpmmHolder.pool_address == successor,
                MeteoracpmmHolder.base_mint == values["base_mint"],
                MeteoracpmmHolder.quote_mint == values["quote_mint"],
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def _insert_successor(self, values: dict, successor: str) -> None:
        self._session.add(MeteoracpmmHolder(pool_address=successor, **values))
        await self._session.flush()
