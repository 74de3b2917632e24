"""Request payloads shared by the service layer and the REST routers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Project columns a partial update may touch.
PROJECT_MUTABLE_FIELDS = (
    "name",
    "pool_platform",
    "pool_id",
    "token_id",
    "token_metadata_id",
    "snapshot_enabled",
    "snapshot_count",
    "is_active",
    "update_stat_enabled",
    "is_migrated",
    "is_locked",
    "assets_balance",
    "retail_sol_amount",
    "pool_config",
    "event",
    "vesting",
)

# Columns the slice listing may order by.
PROJECT_ORDER_FIELDS = (
    "id",
    "name",
    "pool_platform",
    "pool_id",
    "token_id",
    "snapshot_enabled",
    "snapshot_count",
    "is_active",
    "update_stat_enabled",
    "is_migrated",
    "created_at",
    "updated_at",
)


class ProjectUpdate(BaseModel):
    """Partial project update; unset fields are left alone."""
    name: str | None = Field(default=None, max_length=255)
    pool_platform: str | None = None
    pool_id: int | None = Field(default=None, ge=1)
    token_id: int | None = Field(default=None, ge=1)
    token_metadata_id: int | None = None
    snapshot_enabled: bool | None = None
    snapshot_count: int | None = Field(default=None, ge=0)
    is_active: bool | None = None
    update_stat_enabled: bool | None = None
    is_migrated: bool | None = None
    is_locked: bool | None = None
    assets_balance: float | None = None
    retail_sol_amount: float | None = None
    pool_config: str | None = Field(default=None, max_length=64)
    event: dict[str, Any] | None = None
    vesting: dict[str, Any] | None = None


class ProjectCreate(ProjectUpdate):
    name: str = Field(min_length=1, max_length=255)
    pool_platform: str
    pool_id: int = Field(ge=1)
    token_id: int = Field(ge=1)


class StrategyConfigIn(BaseModel):
    role_id: int | None = None
    strategy_name: str = Field(min_length=1, max_length=255)
    strategy_type: str = Field(min_length=1, max_length=64)
    strategy_params: dict[str, Any] | None = None
    strategy_stat: dict[str, Any] | None = None
    enabled: bool = False


class MintConfigIn(BaseModel):
    mint: str = Field(min_length=1, max_length=64)
    symbol: str = Field(min_length=1, max_length=32)
    name: str = Field(min_length=1, max_length=255)
    decimals: int = Field(default=6, ge=0, le=18)
    logo_uri: str = ""
    total_supply: float = Field(default=0.0, ge=0)


class MeteoracpmmPoolIn(BaseModel):
    pool_address: str = Field(min_length=1, max_length=44)
    dbc_pool_address: str = ""
    creator: str = ""
    base_mint: str = ""
    quote_mint: str = ""
    pool_base_token_account: str = ""
    pool_quote_token_account: str = ""
    status: str = "active"


class MeteoradbcPoolIn(BaseModel):
    pool_address: str = Field(min_length=1, max_length=44)
    creator: str = ""
    pool_config: str = ""
    base_mint: str
    quote_mint: str
    pool_base_token_account: str = ""
    pool_quote_token_account: str = ""
    first_buyer: str = ""
    status: str = "active"
    damm_v2_pool_address: str = ""
    is_migrated: bool = False
    cpmm_pool_config: MeteoracpmmPoolIn | None = None


class AutoCreateMeteoradbcProject(BaseModel):
    role_id: int = Field(ge=1)
    mint_config: MintConfigIn
    pool_config: MeteoradbcPoolIn
    project_name: str = ""
    token_metadata_id: int | None = None
    snapshot_enabled: bool = False
    is_active: bool = True
    strategy_configs: list[StrategyConfigIn] = Field(default_factory=list)


class PumpfunAmmPoolIn(BaseModel):
    pool_address: str = Field(min_length=1, max_length=44)
    pool_bump: int = Field(default=0, ge=0, le=255)
    index: int = Field(default=0, ge=0)
    creator: str = ""
    base_mint: str
    quote_mint: str
    lp_mint: str = ""
    pool_base_token_account: str = ""
    pool_quote_token_account: str = ""
    lp_supply: int = Field(default=0, ge=0)
    coin_creator: str = ""


class AutoCreatePumpfunAmmProject(BaseModel):
    mint: str = Field(min_length=1, max_length=64)
    role_id: int = Field(ge=1)
    project_initial_token: float = Field(default=0.0, ge=0)
    pool_config: PumpfunAmmPoolIn
    project_name: str = ""
    token_metadata_id: int | None = None


class VestingReviewRequest(BaseModel):
    start_id: int = Field(ge=1)
    end_id: int = Field(ge=1)
    only_success: bool = False


class VestingFix(BaseModel):
    id: int = Field(ge=1)
    status: str = ""
    pool_remove_amount: float = 0.0


class VestingFixRequest(BaseModel):
    data: list[VestingFix] = Field(min_length=1)


class PoolStatusRequest(BaseModel):
    active: bool


class ProjectActiveRequest(BaseModel):
    is_active: bool


class AssetsBalanceRequest(BaseModel):
    assets_balance: float


class VestingUpdateRequest(BaseModel):
    vesting: dict[str, Any] | None

