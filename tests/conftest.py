"""Shared test fixtures.

Tests run against SQLite (aiosqlite) in a temp dir by default; set
TEST_DATABASE_URL to point them at a scratch PostgreSQL instead.
"""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from poolcascade.db.database import build_engine
from poolcascade.models import (
    Base,
    MeteoracpmmConfig,
    MeteoracpmmHolder,
    MeteoradbcConfig,
    MeteoradbcHolder,
    ProjectConfig,
    PumpfunAmmPoolConfig,
    RaydiumCpmmPoolConfig,
    RaydiumLaunchpadPoolConfig,
    RaydiumPoolRelation,
    RoleConfigRelation,
    StrategyConfig,
    TokenConfig,
)


@pytest.fixture
def database_url(tmp_path) -> str:
    return os.getenv("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture(scope="function")
async def db_session(database_url) -> AsyncGenerator[AsyncSession, None]:
    """Fresh engine+session per test with NullPool to avoid loop mismatch.

    Service calls only flush (auto-create flows commit), so the schema is
    dropped at the end rather than relying on rollback.
    """
    engine = build_engine(database_url, poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


# ── Row builders ─────────────────────────────────────────────────────


class Seed:
    """Small helpers that insert and flush a single row."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _add(self, row):
        self.session.add(row)
        await self.session.flush()
        return row

    async def token(self, mint: str = "MINT1111111111", **kw) -> TokenConfig:
        kw.setdefault("symbol", "TEST")
        kw.setdefault("name", "Test Token")
        kw.setdefault("decimals", 6)
        return await self._add(TokenConfig(mint=mint, **kw))

    async def dbc(
        self,
        pool_address: str = "DBC1",
        *,
        damm_v2: str = "",
        migrated: bool = False,
        **kw,
    ) -> MeteoradbcConfig:
        kw.setdefault("base_mint", "MINT1111111111")
        kw.setdefault("quote_mint", "So11111111111111111111111111111111111111112")
        return await self._add(
            MeteoradbcConfig(
                pool_address=pool_address,
                damm_v2_pool_address=damm_v2,
                is_migrated=migrated,
                **kw,
            )
        )

    async def cpmm(self, pool_address: str = "CPMM1", *, dbc: str = "", **kw) -> MeteoracpmmConfig:
        kw.setdefault("base_mint", "MINT1111111111")
        kw.setdefault("quote_mint", "So11111111111111111111111111111111111111112")
        return await self._add(
            MeteoracpmmConfig(pool_address=pool_address, dbc_pool_address=dbc, **kw)
        )

    async def pumpfun_amm(self, pool_address: str = "AMM1", **kw) -> PumpfunAmmPoolConfig:
        kw.setdefault("base_mint", "MINT1111111111")
        kw.setdefault("quote_mint", "So11111111111111111111111111111111111111112")
        return await self._add(PumpfunAmmPoolConfig(pool_address=pool_address, **kw))

    async def launchpad(self, pool_address: str = "LAUNCH1", **kw) -> RaydiumLaunchpadPoolConfig:
        kw.setdefault("base_mint", "MINT1111111111")
        kw.setdefault("quote_mint", "So11111111111111111111111111111111111111112")
        kw.setdefault("base_vault", "LVAULTA")
        kw.setdefault("quote_vault", "LVAULTB")
        return await self._add(RaydiumLaunchpadPoolConfig(pool_address=pool_address, **kw))

    async def raydium_cpmm(self, pool_address: str = "RCPMM1", **kw) -> RaydiumCpmmPoolConfig:
        kw.setdefault("base_mint", "MINT1111111111")
        kw.setdefault("quote_mint", "So11111111111111111111111111111111111111112")
        kw.setdefault("base_vault", "RVAULTA")
        kw.setdefault("quote_vault", "RVAULTB")
        return await self._add(RaydiumCpmmPoolConfig(pool_address=pool_address, **kw))

    async def launchpad_relation(self, launchpad: str, cpmm: str) -> RaydiumPoolRelation:
        return await self._add(RaydiumPoolRelation(launchpad_pool_id=launchpad, cpmm_pool_id=cpmm))

    async def project(
        self,
        platform: str,
        pool_id: int,
        *,
        token_id: int = 1,
        name: str = "proj",
        **kw,
    ) -> ProjectConfig:
        return await self._add(
            ProjectConfig(
                name=name,
                pool_platform=platform,
                pool_id=pool_id,
                token_id=token_id,
                **kw,
            )
        )

    async def strategy(self, project_id: int, *, enabled: bool = True, **kw) -> StrategyConfig:
        kw.setdefault("role_id", 1)
        kw.setdefault("strategy_name", "grid")
        kw.setdefault("strategy_type", "market_making")
        return await self._add(StrategyConfig(project_id=project_id, enabled=enabled, **kw))

    async def role_link(self, project_id: int, role_id: int = 1) -> RoleConfigRelation:
        return await self._add(RoleConfigRelation(role_id=role_id, project_id=project_id))

    async def dbc_holder(self, address: str, holder_type: str = "retail_investors", **kw) -> MeteoradbcHolder:
        kw.setdefault("pool_address", "DBC1")
        kw.setdefault("base_mint", "MINT1111111111")
        kw.setdefault("quote_mint", "So11111111111111111111111111111111111111112")
        return await self._add(MeteoradbcHolder(address=address, holder_type=holder_type, **kw))

    async def cpmm_holder(self, address: str, holder_type: str = "retail_investors", **kw) -> MeteoracpmmHolder:
        kw.setdefault("pool_address", "CPMM1")
        kw.setdefault("base_mint", "MINT1111111111")
        kw.setdefault("quote_mint", "So11111111111111111111111111111111111111112")
        return await self._add(MeteoracpmmHolder(address=address, holder_type=holder_type, **kw))


@pytest.fixture
def seed(db_session) -> Seed:
    return Seed(db_session)
