from datetime import datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from poolcascade.models.base import Base, JSONType, utcnow


class TokenConfig(Base):
    """Token metadata referenced by projects (one row per mint)."""

    __tablename__ = "token_info"

    id: Mapped[int] = mapped_column(primary_key=True)
    mint: Mapped[str] = mapped_column(String(64), unique=True)
    symbol: Mapped[str | None] = mapped_column(String(32))
    name: Mapped[str | None] = mapped_column(String(255))
    decimals: Mapped[int] = mapped_column(Integer, default=6)
    logo_uri: Mapped[str | None] = mapped_column(String(512))
    total_supply: Mapped[float] = mapped_column(Float, default=0.0)
    creator: Mapped[str | None] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow
    )


class ProjectConfig(Base):
    """A trading project bound to exactly one pool on one platform."""

    __tablename__ = "project_config"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    pool_platform: Mapped[str] = mapped_column(String(32), default="raydium")
    pool_id: Mapped[int] = mapped_column(Integer)
    token_id: Mapped[int] = mapped_column(Integer)
    token_metadata_id: Mapped[int | None] = mapped_column(Integer)
    snapshot_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    snapshot_count: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    update_stat_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    is_migrated: Mapped[bool] = mapped_column(Boolean, default=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False)
    assets_balance: Mapped[float] = mapped_column(Float, default=0.0)
    retail_sol_amount: Mapped[float] = mapped_column(Float, default=0.0)
    pool_config: Mapped[str | None] = mapped_column(String(64))
    event: Mapped[dict[str, Any] | None] = mapped_column(JSONType)
    vesting: Mapped[dict[str, Any] | None] = mapped_column(JSONType)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    __table_args__ = (
        Index("idx_project_config_pool", "pool_platform", "pool_id"),
        Index("idx_project_config_token", "token_id"),
    )


class StrategyConfig(Base):
    """Per-role trading strategy attached to a project."""

    __tablename__ = "strategy_config"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(Integer)
    role_id: Mapped[int] = mapped_column(Integer)
    strategy_name: Mapped[str] = mapped_column(String(255))
    strategy_type: Mapped[str] = mapped_column(String(64))
    strategy_params: Mapped[dict[str, Any] | None] = mapped_column(JSONType)
    strategy_stat: Mapped[dict[str, Any] | None] = mapped_column(JSONType)
    enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    __table_args__ = (Index("idx_strategy_config_project", "project_id"),)


class RoleConfigRelation(Base):
    """Links a role to a project. Blocks project deletion while present."""

    __tablename__ = "role_config_relation"

    id: Mapped[int] = mapped_column(primary_key=True)
    role_id: Mapped[int] = mapped_column(Integer)
    project_id: Mapped[int] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())

    __table_args__ = (Index("idx_role_config_relation_project", "project_id"),)


class ProjectFundTransferRecord(Base):
    """Token/SOL movements in or out of a project wallet set."""

    __tablename__ = "project_fund_transfer_record"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(Integer)
    mint: Mapped[str] = mapped_column(String(64))
    direction: Mapped[str] = mapped_column(String(8))  # in, out
    amount: Mapped[float] = mapped_column(Float, default=0.0)
    target_name: Mapped[str] = mapped_column(String(32), default="project")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, server_default=func.now())

    __table_args__ = (Index("idx_fund_transfer_project", "project_id"),)
