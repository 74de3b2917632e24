"""Per-pool holder ledgers.

A ledger row accumulates one wallet's net flows on one pool, split by
``holder_type`` (pool, project, retail_investors).
"""

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from poolcascade.models.base import Base, utcnow

HOLDER_TYPE_POOL = "pool"
HOLDER_TYPE_PROJECT = "project"
HOLDER_TYPE_RETAIL = "retail_investors"


class HolderLedgerMixin:
    """Columns shared by the base/quote ledgers."""

    id: Mapped[int] = mapped_column(primary_key=True)
    address: Mapped[str] = mapped_column(String(64))
    holder_type: Mapped[str] = mapped_column(String(32), default=HOLDER_TYPE_RETAIL)
    pool_address: Mapped[str] = mapped_column(String(64))
    base_mint: Mapped[str] = mapped_column(String(64))
    quote_mint: Mapped[str] = mapped_column(String(64))
    start_slot: Mapped[int] = mapped_column(BigInteger, default=0)
    last_slot: Mapped[int] = mapped_column(BigInteger, default=0)
    start_timestamp: Mapped[int] = mapped_column(BigInteger, default=0)
    last_timestamp: Mapped[int] = mapped_column(BigInteger, default=0)
    start_signature: Mapped[str | None] = mapped_column(String(128))
    end_signature: Mapped[str | None] = mapped_column(String(128))
    base_change: Mapped[float] = mapped_column(Float, default=0.0)
    quote_change: Mapped[float] = mapped_column(Float, default=0.0)
    sol_change: Mapped[float] = mapped_column(Float, default=0.0)
    tx_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow
    )


class MeteoradbcHolder(HolderLedgerMixin, Base):
    __tablename__ = "meteoradbc_holder"

    __table_args__ = (
        UniqueConstraint(
            "address", "pool_address", "base_mint", "quote_mint", "holder_type",
            name="uq_meteoradbc_holder_key",
        ),
        Index("idx_meteoradbc_holder_pool", "pool_address"),
    )


class MeteoracpmmHolder(HolderLedgerMixin, Base):
    __tablename__ = "meteoracpmm_holder"

    __table_args__ = (
        UniqueConstraint(
            "address", "pool_address", "base_mint", "quote_mint", "holder_type",
            name="uq_meteoracpmm_holder_key",
        ),
        Index("idx_meteoracpmm_holder_pool", "pool_address"),
    )


class RaydiumPoolHolder(HolderLedgerMixin, Base):
    __tablename__ = "raydiumpool_holder"

    __table_args__ = (
        UniqueConstraint(
            "address", "pool_address", "base_mint", "quote_mint", "holder_type",
            name="uq_raydiumpool_holder_key",
        ),
        Index("idx_raydiumpool_holder_pool", "pool_address"),
    )


class PumpfunAmmPoolHolder(HolderLedgerMixin, Base):
    """AMM ledger; also tracks gross trader volume."""

    __tablename__ = "pumpfunammpool_holder"

    trader_base_volume: Mapped[float] = mapped_column(Float, default=0.0)
    trader_quote_volume: Mapped[float] = mapped_column(Float, default=0.0)
    trader_sol_volume: Mapped[float] = mapped_column(Float, default=0.0)

    __table_args__ = (
        UniqueConstraint(
            "address", "pool_address", "base_mint", "quote_mint", "holder_type",
            name="uq_pumpfunammpool_holder_key",
        ),
        Index("idx_pumpfunammpool_holder_pool", "pool_address"),
    )


class PumpfuninternalHolder(Base):
    """Bonding-curve ledger: keyed by curve PDA and mint, flows in mint/SOL."""

    __tablename__ = "pumpfuninternal_holder"

    id: Mapped[int] = mapped_column(primary_key=True)
    address: Mapped[str] = mapped_column(String(64))
    holder_type: Mapped[str] = mapped_column(String(32), default=HOLDER_TYPE_RETAIL)
    bonding_curve_pda: Mapped[str] = mapped_column(String(64))
    mint: Mapped[str] = mapped_column(String(64))
    start_slot: Mapped[int] = mapped_column(BigInteger, default=0)
    last_slot: Mapped[int] = mapped_column(BigInteger, default=0)
    start_timestamp: Mapped[int] = mapped_column(BigInteger, default=0)
    last_timestamp: Mapped[int] = mapped_column(BigInteger, default=0)
    start_signature: Mapped[str | None] = mapped_column(String(128))
    end_signature: Mapped[str | None] = mapped_column(String(128))
    mint_change: Mapped[float] = mapped_column(Float, default=0.0)
    sol_change: Mapped[float] = mapped_column(Float, default=0.0)
    mint_volume: Mapped[float] = mapped_column(Float, default=0.0)
    sol_volume: Mapped[float] = mapped_column(Float, default=0.0)
    tx_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    __table_args__ = (
        UniqueConstraint(
            "address", "bonding_curve_pda", "mint", "holder_type",
            name="uq_pumpfuninternal_holder_key",
        ),
    )
