"""Pool variant tables, one per DEX integration.

Every variant carries ``status`` ("active" / "inactive"), which is what
the status cascade writes.
"""

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from poolcascade.models.base import Base, utcnow


class RaydiumPoolConfig(Base):
    """Raydium AMM v4 pool (platform tag ``raydium``)."""

    __tablename__ = "pool_config"

    id: Mapped[int] = mapped_column(primary_key=True)
    platform: Mapped[str] = mapped_column(String(20), default="raydium")
    pool_address: Mapped[str] = mapped_column(String(100), unique=True)
    base_is_wsol: Mapped[bool] = mapped_column(Boolean, default=False)
    base_mint_id: Mapped[int | None] = mapped_column(Integer)
    quote_mint_id: Mapped[int | None] = mapped_column(Integer)
    base_vault: Mapped[str | None] = mapped_column(String(100))
    quote_vault: Mapped[str | None] = mapped_column(String(100))
    lp_mint_id: Mapped[int | None] = mapped_column(Integer)
    fee_rate: Mapped[float] = mapped_column(Float, default=0.0)
    status: Mapped[str] = mapped_column(String(20), default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow
    )


class RaydiumLaunchpadPoolConfig(Base):
    """Raydium LaunchLab bonding-curve pool."""

    __tablename__ = "raydium_launchpad_pool_config"

    id: Mapped[int] = mapped_column(primary_key=True)
    pool_address: Mapped[str] = mapped_column(String(128), unique=True)
    platform: Mapped[str] = mapped_column(String(20), default="raydium_launchpad")
    config_id: Mapped[str | None] = mapped_column(String(128))
    platform_config_id: Mapped[str | None] = mapped_column(String(128))
    trade_fee_rate: Mapped[float] = mapped_column(Float, default=0.0)
    max_share_fee_rate: Mapped[float] = mapped_column(Float, default=0.0)
    migrate_type: Mapped[int] = mapped_column(Integer, default=0)
    mint_b: Mapped[str | None] = mapped_column(String(128))
    base_mint: Mapped[str] = mapped_column(String(128))
    quote_mint: Mapped[str] = mapped_column(String(128))
    base_vault: Mapped[str] = mapped_column(String(128))
    quote_vault: Mapped[str] = mapped_column(String(128))
    creator: Mapped[str | None] = mapped_column(String(128))
    status: Mapped[str] = mapped_column(String(20), default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow
    )


class RaydiumCpmmPoolConfig(Base):
    """Raydium constant-product pool (launchpad graduation target)."""

    __tablename__ = "raydium_cpmm_pool_config"

    id: Mapped[int] = mapped_column(primary_key=True)
    platform: Mapped[str] = mapped_column(String(20), default="raydium_cpmm")
    program_id: Mapped[str | None] = mapped_column(String(128))
    pool_address: Mapped[str] = mapped_column(String(128), unique=True)
    config_id: Mapped[str | None] = mapped_column(String(128))
    base_mint: Mapped[str] = mapped_column(String(128))
    quote_mint: Mapped[str] = mapped_column(String(128))
    base_vault: Mapped[str] = mapped_column(String(128))
    quote_vault: Mapped[str] = mapped_column(String(128))
    lp_mint: Mapped[str | None] = mapped_column(String(128))
    fee_rate: Mapped[float] = mapped_column(Float, default=0.0)
    protocol_fee_rate: Mapped[float] = mapped_column(Float, default=0.0)
    trade_fee_rate: Mapped[float] = mapped_column(Float, default=0.0)
    fund_fee_rate: Mapped[float] = mapped_column(Float, default=0.0)
    status: Mapped[str] = mapped_column(String(20), default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow
    )


class RaydiumPoolRelation(Base):
    """Pairs a launchpad pool with the cpmm pool it graduated into."""

    __tablename__ = "raydiumpool_relation"

    id: Mapped[int] = mapped_column(primary_key=True)
    mint_a: Mapped[str | None] = mapped_column(String(128))
    mint_b: Mapped[str | None] = mapped_column(String(128))
    launchpad_pool_id: Mapped[str | None] = mapped_column(String(128))
    cpmm_pool_id: Mapped[str | None] = mapped_column(String(128))
    launchpad_pool_base_vault: Mapped[str] = mapped_column(String(128), default="")
    launchpad_pool_quote_vault: Mapped[str] = mapped_column(String(128), default="")
    cpmm_pool_base_vault: Mapped[str] = mapped_column(String(128), default="")
    cpmm_pool_quote_vault: Mapped[str] = mapped_column(String(128), default="")
    launchpad_base_is_wsol: Mapped[bool] = mapped_column(Boolean, default=False)
    cpmm_base_is_wsol: Mapped[bool] = mapped_column(Boolean, default=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    token_mint_sig: Mapped[str | None] = mapped_column(String(128))
    migrate_sig: Mapped[str | None] = mapped_column(String(128))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())

    __table_args__ = (
        Index("idx_raydiumpool_relation_launchpad", "launchpad_pool_id"),
        Index("idx_raydiumpool_relation_cpmm", "cpmm_pool_id"),
    )


class PumpfuninternalConfig(Base):
    """Pump.fun bonding curve (pre-graduation), addressed by mint."""

    __tablename__ = "pumpfuninternal_config"

    id: Mapped[int] = mapped_column(primary_key=True)
    platform: Mapped[str] = mapped_column(String(20), default="pumpfun_internal")
    mint: Mapped[str] = mapped_column(String(64), unique=True)
    bonding_curve_pda: Mapped[str | None] = mapped_column(String(64))
    associated_bonding_curve: Mapped[str | None] = mapped_column(String(64))
    creator_vault_pda: Mapped[str | None] = mapped_column(String(64))
    fee_recipient: Mapped[str | None] = mapped_column(String(64))
    fee_rate: Mapped[float] = mapped_column(Float, default=0.0)
    status: Mapped[str] = mapped_column(String(20), default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow
    )


class PumpfunAmmPoolConfig(Base):
    """PumpSwap AMM pool."""

    __tablename__ = "pumpfunammpool_config"

    id: Mapped[int] = mapped_column(primary_key=True)
    pool_address: Mapped[str] = mapped_column(String(44), unique=True)
    pool_bump: Mapped[int] = mapped_column(Integer, default=0)
    index: Mapped[int] = mapped_column(Integer, default=0)
    creator: Mapped[str | None] = mapped_column(String(44))
    base_mint: Mapped[str] = mapped_column(String(44))
    quote_mint: Mapped[str] = mapped_column(String(44))
    lp_mint: Mapped[str | None] = mapped_column(String(44))
    pool_base_token_account: Mapped[str | None] = mapped_column(String(44))
    pool_quote_token_account: Mapped[str | None] = mapped_column(String(44))
    lp_supply: Mapped[int] = mapped_column(BigInteger, default=0)
    coin_creator: Mapped[str | None] = mapped_column(String(44))
    status: Mapped[str] = mapped_column(String(20), default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow
    )


class MeteoradbcConfig(Base):
    """Meteora Dynamic Bonding Curve pool.

    ``damm_v2_pool_address`` stays empty until the curve graduates; after
    that it names the MeteoracpmmConfig row that succeeds this pool.
    """

    __tablename__ = "meteoradbc_config"

    id: Mapped[int] = mapped_column(primary_key=True)
    pool_address: Mapped[str] = mapped_column(String(44), unique=True)
    creator: Mapped[str | None] = mapped_column(String(44))
    pool_config: Mapped[str | None] = mapped_column(String(44))
    base_mint: Mapped[str] = mapped_column(String(44))
    quote_mint: Mapped[str] = mapped_column(String(44))
    pool_base_token_account: Mapped[str | None] = mapped_column(String(44))
    pool_quote_token_account: Mapped[str | None] = mapped_column(String(44))
    first_buyer: Mapped[str | None] = mapped_column(String(44))
    damm_v2_pool_address: Mapped[str] = mapped_column(String(44), default="")
    is_migrated: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(String(20), default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow
    )


class MeteoracpmmConfig(Base):
    """Meteora DAMM v2 pool; ``dbc_pool_address`` points back at its curve."""

    __tablename__ = "meteoracpmm_config"

    id: Mapped[int] = mapped_column(primary_key=True)
    pool_address: Mapped[str] = mapped_column(String(44), unique=True)
    dbc_pool_address: Mapped[str] = mapped_column(String(44), default="")
    creator: Mapped[str | None] = mapped_column(String(44))
    base_mint: Mapped[str] = mapped_column(String(44))
    quote_mint: Mapped[str] = mapped_column(String(44))
    pool_base_token_account: Mapped[str | None] = mapped_column(String(44))
    pool_quote_token_account: Mapped[str | None] = mapped_column(String(44))
    status: Mapped[str] = mapped_column(String(20), default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    __table_args__ = (Index("idx_meteoracpmm_dbc_pool", "dbc_pool_address"),)
