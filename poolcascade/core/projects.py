"""Project lifecycle on top of the resolver, cascade and migrator.

Every operation works inside the caller's session and only flushes; the
two auto-create flows are the exception and commit themselves so the
monitor notification can go out strictly after the rows are durable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from poolcascade.core.cascade import StatusCascade
from poolcascade.core.errors import (
    CreateFailed,
    DependencyExists,
    InvalidPlatform,
    PoolNotFound,
    ProjectNotFound,
    TokenNotFound,
    UpdateFailed,
)
from poolcascade.core.holders import HolderMigrator, MigrationReport
from poolcascade.core.notifier import MonitorNotifier, build_monitor_message
from poolcascade.core.pagination import clamp_page, paginate, pagination_meta
from poolcascade.core.platforms import (
    METEORA_DBC,
    PUMPFUN_AMM,
    STATUS_ACTIVE,
    get_platform,
)
from poolcascade.core.profit import ProfitCalculator
from poolcascade.core.relations import RelationAugmenter
from poolcascade.core.resolver import PoolResolver, Resolved
from poolcascade.models.pool import MeteoracpmmConfig, MeteoradbcConfig, PumpfunAmmPoolConfig
from poolcascade.models.project import (
    ProjectConfig,
    ProjectFundTransferRecord,
    RoleConfigRelation,
    StrategyConfig,
    TokenConfig,
)
from poolcascade.schemas import (
    PROJECT_MUTABLE_FIELDS,
    PROJECT_ORDER_FIELDS,
    AutoCreateMeteoradbcProject,
    AutoCreatePumpfunAmmProject,
    ProjectCreate,
    VestingFix,
)

# Columns that accept an explicit null in a partial update.
_NULLABLE_FIELDS = {"token_metadata_id", "pool_config", "event", "vesting"}

VESTING_DONE = "done"
VESTING_FAILED = "failed"


@dataclass
class ProjectView:
    """A project as callers see it: pool already resolved, relations attached."""

    project: ProjectConfig
    pool: Any | None
    token: TokenConfig | None
    pool_relation: dict[str, Any] = field(default_factory=dict)
    project_profit: float = 0.0
    resolution: Resolved | None = None

    @property
    def pool_platform(self) -> str:
        if self.resolution is not None:
            return self.resolution.effective_platform
        return self.project.pool_platform

    @property
    def pool_id(self) -> int:
        if self.resolution is not None:
            return self.resolution.effective_pool_id
        return self.project.pool_id


def default_project_name(symbol: str | None, mint: str) -> str:
    return f"{symbol or settings.default_token_symbol}-{mint[:5]}"


def _vesting_number(vesting: dict[str, Any], key: str) -> float:
    value = vesting.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def is_error_vesting(vesting: dict[str, Any] | None) -> bool:
    """Failed vestings, and "done" ones that never removed pool liquidity."""
    if not isinstance(vesting, dict):
        return False
    status = vesting.get("status")
    if status == VESTING_FAILED:
        return True
    return status == VESTING_DONE and _vesting_number(vesting, "pool_remove_amount") == 0


class ProjectService:
    def __init__(
        self,
        session: AsyncSession,
        *,
        notifier: MonitorNotifier | None = None,
    ) -> None:
        self._session = session
        self._notifier = notifier
        self.resolver = PoolResolver(session)
        self.augmenter = RelationAugmenter(session)
        self.cascade = StatusCascade(session)
        self.profit = ProfitCalculator(session)
        self.holders = HolderMigrator(session)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_project(self, project_id: int) -> ProjectConfig:
        project = await self._session.get(ProjectConfig, project_id)
        if project is None:
            raise ProjectNotFound(project_id)
        return project

    async def _require_token(self, token_id: int) -> TokenConfig:
        token = await self._session.get(TokenConfig, token_id)
        if token is None:
            raise TokenNotFound(token_id)
        return token

    async def _build_view(self, project: ProjectConfig, *, strict: bool = True) -> ProjectView:
        token = await self._session.get(TokenConfig, project.token_id)
        profit = await self.profit.profit(project.id)
        try:
            resolved = await self.resolver.resolve(project.pool_platform, project.pool_id)
        except (InvalidPlatform, PoolNotFound) as e:
            if strict:
                raise
            logger.warning(f"[PROJECT] #{project.id} pool unresolved: {e}")
            return ProjectView(project=project, pool=None, token=token, project_profit=profit)

        relation = await self.augmenter.augment(
            resolved.effective_platform, resolved.pool, source_pool=resolved.source_pool
        )
        return ProjectView(
            project=project,
            pool=resolved.pool,
            token=token,
            pool_relation=relation,
            project_profit=profit,
            resolution=resolved,
        )

    async def resolve_project(self, project_id: int) -> ProjectView:
        """Project with its effective pool, token, relations and profit."""
        project = await self.get_project(project_id)
        return await self._build_view(project)

    async def list_projects(self) -> list[ProjectView]:
        result = await self._session.execute(select(ProjectConfig).order_by(ProjectConfig.id))
        return [await self._build_view(p, strict=False) for p in result.scalars().all()]

    async def list_projects_page(
        self,
        page: int | None = None,
        page_size: int | None = None,
        order_field: str = "id",
        order_type: str = "desc",
    ) -> tuple[list[ProjectView], dict[str, Any]]:
        page, page_size = clamp_page(page, page_size, max_size=settings.max_page_size)
        if order_field not in PROJECT_ORDER_FIELDS:
            order_field = "id"
        column = getattr(ProjectConfig, order_field)
        ordering = column.asc() if order_type == "asc" else column.desc()

        total = (
            await self._session.execute(select(func.count()).select_from(ProjectConfig))
        ).scalar_one()
        result = await self._session.execute(
            select(ProjectConfig)
            .order_by(ordering, ProjectConfig.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        views = [await self._build_view(p, strict=False) for p in result.scalars().all()]
        return views, pagination_meta(page, page_size, total)

    async def latest_project(self) -> ProjectView | None:
        result = await self._session.execute(
            select(ProjectConfig).order_by(ProjectConfig.id.desc()).limit(1)
        )
        project = result.scalars().first()
        if project is None:
            return None
        return await self._build_view(project, strict=False)

    async def latest_active_project(self) -> ProjectView | None:
        """Newest active project among the five most recent, if any."""
        result = await self._session.execute(
            select(ProjectConfig).order_by(ProjectConfig.id.desc()).limit(5)
        )
        for project in result.scalars().all():
            if project.is_active:
                return await self._build_view(project, strict=False)
        return None

    async def resolve_pool(self, platform: str, pool_id: int) -> tuple[Resolved, dict[str, Any]]:
        resolved = await self.resolver.resolve(platform, pool_id)
        relation = await self.augmenter.augment(
            resolved.effective_platform, resolved.pool, source_pool=resolved.source_pool
        )
        return resolved, relation

    # ------------------------------------------------------------------
    # Create / update / delete
    # ------------------------------------------------------------------

    async def create_project(self, data: ProjectCreate) -> ProjectView:
        await get_platform(data.pool_platform).require(self._session, data.pool_id)
        await self._require_token(data.token_id)

        project = ProjectConfig(
            name=data.name,
            pool_platform=data.pool_platform,
            pool_id=data.pool_id,
            token_id=data.token_id,
            token_metadata_id=data.token_metadata_id,
            snapshot_enabled=bool(data.snapshot_enabled),
            snapshot_count=0,
            is_active=True if data.is_active is None else data.is_active,
            update_stat_enabled=True if data.update_stat_enabled is None else data.update_stat_enabled,
            is_migrated=bool(data.is_migrated),
            is_locked=bool(data.is_locked),
            assets_balance=0.0,
            retail_sol_amount=data.retail_sol_amount or 0.0,
            pool_config=data.pool_config or "",
            event=data.event,
            vesting=data.vesting,
        )
        try:
            self._session.add(project)
            await self._session.flush()
        except SQLAlchemyError as e:
            raise CreateFailed(f"project create failed: {e}") from e
        logger.info(f"[PROJECT] Created #{project.id} {project.pool_platform}#{project.pool_id}")
        return await self._build_view(project)

    async def _validate_pool_change(self, project: ProjectConfig, changes: dict[str, Any]) -> None:
        if "pool_platform" not in changes and "pool_id" not in changes:
            return
        platform = changes.get("pool_platform", project.pool_platform)
        pool_id = changes.get("pool_id", project.pool_id)
        await get_platform(platform).require(self._session, pool_id)

    async def update_project(self, project_id: int, changes: dict[str, Any]) -> ProjectView:
        """Partial update, with the pool cascade when ``is_active`` is given.

        The project row, the pool status change and the strategy shutdown
        land in one savepoint: either all of them persist or none does.
        """
        project = await self.get_project(project_id)
        changes = {
            key: value
            for key, value in changes.items()
            if key in PROJECT_MUTABLE_FIELDS and (value is not None or key in _NULLABLE_FIELDS)
        }
        await self._validate_pool_change(project, changes)
        if "token_id" in changes:
            await self._require_token(changes["token_id"])

        try:
            async with self._session.begin_nested():
                for key, value in changes.items():
                    setattr(project, key, value)
                await self._session.flush()

                if "is_active" in changes:
                    active = changes["is_active"]
                    await self.cascade.set_status(project.pool_platform, project.pool_id, active)
                    if not active:
                        await self.cascade.close_all_strategies(project.id)
        except SQLAlchemyError as e:
            raise UpdateFailed(f"project {project_id} update failed: {e}") from e

        logger.info(f"[PROJECT] Updated #{project_id}: {', '.join(sorted(changes)) or 'no changes'}")
        return await self._build_view(project)

    async def set_project_active(self, project_id: int, active: bool) -> ProjectView:
        return await self.update_project(project_id, {"is_active": active})

    async def persist_redirect(self, project_id: int) -> ProjectView:
        """Write a followed migration back onto the project row."""
        project = await self.get_project(project_id)
        resolved = await self.resolver.resolve(project.pool_platform, project.pool_id)
        if resolved.redirected:
            try:
                project.pool_platform = resolved.effective_platform
                project.pool_id = resolved.effective_pool_id
                project.is_migrated = True
                await self._session.flush()
            except SQLAlchemyError as e:
                raise UpdateFailed(f"project {project_id} redirect failed: {e}") from e
            logger.info(
                f"[PROJECT] #{project_id} now points at "
                f"{resolved.effective_platform}#{resolved.effective_pool_id}"
            )
        return await self._build_view(project)

    async def _count(self, model: type, *criteria: Any) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(model).where(*criteria)
        )
        return result.scalar_one()

    async def delete_project(self, project_id: int) -> None:
        project = await self.get_project(project_id)
        role_count = await self._count(RoleConfigRelation, RoleConfigRelation.project_id == project_id)
        if role_count:
            raise DependencyExists(
                f"project {project_id} still has {role_count} role links",
                role_count=role_count,
            )
        strategy_count = await self._count(StrategyConfig, StrategyConfig.project_id == project_id)
        if strategy_count:
            raise DependencyExists(
                f"project {project_id} still has {strategy_count} strategies",
                strategy_count=strategy_count,
            )
        await self._session.delete(project)
        await self._session.flush()
        logger.info(f"[PROJECT] Deleted #{project_id}")

    async def set_pool_status(self, platform: str, pool_id: int, active: bool) -> Any:
        return await self.cascade.set_status(platform, pool_id, active)

    async def delete_pool(self, platform: str, pool_id: int) -> None:
        spec = get_platform(platform)
        row = await spec.require(self._session, pool_id)
        project_count = await spec.count_dependents(self._session, pool_id)
        if project_count:
            raise DependencyExists(
                f"{platform} pool {pool_id} is used by {project_count} projects",
                project_count=project_count,
            )
        await self._session.delete(row)
        await self._session.flush()
        logger.info(f"[PROJECT] Deleted pool {platform}#{pool_id} ({spec.address_of(row)})")

    async def toggle_lock(self, project_id: int) -> ProjectConfig:
        project = await self.get_project(project_id)
        project.is_locked = not project.is_locked
        await self._session.flush()
        return project

    async def update_assets_balance(self, project_id: int, assets_balance: float) -> ProjectConfig:
        project = await self.get_project(project_id)
        project.assets_balance = assets_balance
        await self._session.flush()
        return project

    async def update_vesting(self, project_id: int, vesting: dict[str, Any] | None) -> ProjectConfig:
        project = await self.get_project(project_id)
        project.vesting = dict(vesting) if vesting is not None else None
        await self._session.flush()
        return project

    async def migrate_pool_holders(self, dbc_pool_address: str) -> MigrationReport:
        return await self.holders.migrate(dbc_pool_address)

    # ------------------------------------------------------------------
    # Settlement views
    # ------------------------------------------------------------------

    async def profit_ranking(
        self,
        page: int | None = None,
        page_size: int | None = None,
        order_type: str = "desc",
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        page, page_size = clamp_page(page, page_size, max_size=settings.max_page_size)
        ranked = await self.profit.rank(order=order_type)
        rows, meta = paginate(ranked, page, page_size)

        token_ids = {project.token_id for project, _ in rows}
        tokens: dict[int, TokenConfig] = {}
        if token_ids:
            result = await self._session.execute(
                select(TokenConfig).where(TokenConfig.id.in_(token_ids))
            )
            tokens = {t.id: t for t in result.scalars().all()}

        items = [
            {"project": project, "project_profit": value, "token": tokens.get(project.token_id)}
            for project, value in rows
        ]
        return items, meta

    async def vesting_review(
        self, start_id: int, end_id: int, *, only_success: bool = False
    ) -> dict[str, Any]:
        """Sum vesting outcomes for projects with ids in [start_id, end_id]."""
        result = await self._session.execute(
            select(ProjectConfig)
            .where(ProjectConfig.id >= start_id, ProjectConfig.id <= end_id)
            .order_by(ProjectConfig.id)
        )
        projects = result.scalars().all()

        counted = 0
        pool_quote_balance = 0.0
        pool_remove_amount = 0.0
        for project in projects:
            vesting = project.vesting
            if not isinstance(vesting, dict):
                continue
            if only_success and vesting.get("status") != VESTING_DONE:
                continue
            pool_quote_balance += _vesting_number(vesting, "pool_quote_balance")
            pool_remove_amount += _vesting_number(vesting, "pool_remove_amount")
            counted += 1

        return {
            "start_id": start_id,
            "end_id": end_id,
            "project_count": counted,
            "pool_quote_balance": pool_quote_balance,
            "pool_remove_amount": pool_remove_amount,
            "projects": list(projects),
        }

    async def error_vestings(self) -> list[ProjectConfig]:
        result = await self._session.execute(
            select(ProjectConfig)
            .where(ProjectConfig.vesting.is_not(None))
            .order_by(ProjectConfig.id)
        )
        return [p for p in result.scalars().all() if is_error_vesting(p.vesting)]

    async def fix_error_vestings(self, fixes: list[VestingFix]) -> dict[str, Any]:
        """Merge status / pool_remove_amount into each project's vesting blob."""
        updated = 0
        errors: list[str] = []
        for fix in fixes:
            project = await self._session.get(ProjectConfig, fix.id)
            if project is None:
                errors.append(f"project id {fix.id} not found")
                continue
            vesting = dict(project.vesting) if isinstance(project.vesting, dict) else {}
            if fix.status:
                vesting["status"] = fix.status
            vesting["pool_remove_amount"] = fix.pool_remove_amount
            project.vesting = vesting
            updated += 1
        await self._session.flush()
        logger.info(f"[PROJECT] Vesting fixed for {updated} projects, {len(errors)} errors")
        out: dict[str, Any] = {"updated_count": updated}
        if errors:
            out["errors"] = errors
        return out

    # ------------------------------------------------------------------
    # Auto-create flows
    # ------------------------------------------------------------------

    async def _find_or_create_token(self, mint: str, **defaults: Any) -> TokenConfig:
        result = await self._session.execute(select(TokenConfig).where(TokenConfig.mint == mint))
        token = result.scalars().first()
        if token is not None:
            return token
        token = TokenConfig(mint=mint, **defaults)
        self._session.add(token)
        await self._session.flush()
        return token

    async def auto_create_meteoradbc_project(
        self, request: AutoCreateMeteoradbcProject
    ) -> dict[str, Any]:
        """Token, DBC pool, optional DAMM v2 pool, project, role link, strategies.

        All rows are created in one transaction. After commit a
        start_monitoring message is handed to the notifier.
        """
        mint_cfg = request.mint_config
        pool_cfg = request.pool_config
        cpmm_cfg = pool_cfg.cpmm_pool_config
        try:
            async with self._session.begin_nested():
                token = await self._find_or_create_token(
                    mint_cfg.mint,
                    symbol=mint_cfg.symbol,
                    name=mint_cfg.name,
                    decimals=mint_cfg.decimals,
                    logo_uri=mint_cfg.logo_uri,
                    total_supply=mint_cfg.total_supply,
                )

                damm_v2 = cpmm_cfg.pool_address if cpmm_cfg else pool_cfg.damm_v2_pool_address
                dbc = MeteoradbcConfig(
                    pool_address=pool_cfg.pool_address,
                    creator=pool_cfg.creator,
                    pool_config=pool_cfg.pool_config,
                    base_mint=pool_cfg.base_mint,
                    quote_mint=pool_cfg.quote_mint,
                    pool_base_token_account=pool_cfg.pool_base_token_account,
                    pool_quote_token_account=pool_cfg.pool_quote_token_account,
                    first_buyer=pool_cfg.first_buyer,
                    damm_v2_pool_address=damm_v2 or "",
                    is_migrated=pool_cfg.is_migrated,
                    status=pool_cfg.status or STATUS_ACTIVE,
                )
                self._session.add(dbc)

                cpmm = None
                if cpmm_cfg is not None:
                    cpmm = MeteoracpmmConfig(
                        pool_address=cpmm_cfg.pool_address,
                        dbc_pool_address=cpmm_cfg.dbc_pool_address or pool_cfg.pool_address,
                        creator=cpmm_cfg.creator,
                        base_mint=cpmm_cfg.base_mint,
                        quote_mint=cpmm_cfg.quote_mint,
                        pool_base_token_account=cpmm_cfg.pool_base_token_account,
                        pool_quote_token_account=cpmm_cfg.pool_quote_token_account,
                        status=cpmm_cfg.status or STATUS_ACTIVE,
                    )
                    self._session.add(cpmm)
                await self._session.flush()

                project = ProjectConfig(
                    name=request.project_name or default_project_name(token.symbol, mint_cfg.mint),
                    pool_platform=METEORA_DBC,
                    pool_id=dbc.id,
                    token_id=token.id,
                    token_metadata_id=request.token_metadata_id,
                    snapshot_enabled=request.snapshot_enabled,
                    snapshot_count=0,
                    is_active=request.is_active,
                    update_stat_enabled=True,
                    pool_config=pool_cfg.pool_config,
                )
                self._session.add(project)
                await self._session.flush()

                role_link = RoleConfigRelation(role_id=request.role_id, project_id=project.id)
                self._session.add(role_link)

                strategies = [
                    StrategyConfig(
                        project_id=project.id,
                        role_id=s.role_id or request.role_id,
                        strategy_name=s.strategy_name,
                        strategy_type=s.strategy_type,
                        strategy_params=s.strategy_params,
                        strategy_stat=s.strategy_stat,
                        enabled=s.enabled,
                    )
                    for s in request.strategy_configs
                ]
                self._session.add_all(strategies)
                await self._session.flush()
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise CreateFailed(f"meteora dbc project create failed: {e}") from e

        logger.info(
            f"[PROJECT] Auto-created meteora_dbc project #{project.id} "
            f"pool={dbc.pool_address} cpmm={cpmm.pool_address if cpmm else '-'}"
        )

        if self._notifier is not None:
            self._notifier.submit(build_monitor_message(project.id, dbc, cpmm))
        return {
            "project": project,
            "token": token,
            "meteoradbc_config": dbc,
            "meteoracpmm_config": cpmm,
            "role_config_relation": role_link,
            "strategy_configs": strategies,
        }

    async def auto_create_pumpfun_amm_project(
        self, request: AutoCreatePumpfunAmmProject
    ) -> dict[str, Any]:
        pool_cfg = request.pool_config
        try:
            async with self._session.begin_nested():
                token = await self._find_or_create_token(
                    request.mint,
                    symbol=settings.default_token_symbol,
                    name=settings.default_token_name,
                    decimals=settings.default_token_decimals,
                    logo_uri="",
                    total_supply=settings.default_token_supply,
                )

                pool = PumpfunAmmPoolConfig(
                    pool_address=pool_cfg.pool_address,
                    pool_bump=pool_cfg.pool_bump,
                    index=pool_cfg.index,
                    creator=pool_cfg.creator,
                    base_mint=pool_cfg.base_mint,
                    quote_mint=pool_cfg.quote_mint,
                    lp_mint=pool_cfg.lp_mint,
                    pool_base_token_account=pool_cfg.pool_base_token_account,
                    pool_quote_token_account=pool_cfg.pool_quote_token_account,
                    lp_supply=pool_cfg.lp_supply,
                    coin_creator=pool_cfg.coin_creator,
                    status=STATUS_ACTIVE,
                )
                self._session.add(pool)
                await self._session.flush()

                project = ProjectConfig(
                    name=request.project_name or default_project_name(token.symbol, request.mint),
                    pool_platform=PUMPFUN_AMM,
                    pool_id=pool.id,
                    token_id=token.id,
                    token_metadata_id=request.token_metadata_id,
                    snapshot_enabled=True,
                    snapshot_count=0,
                    is_active=True,
                    update_stat_enabled=True,
                )
                self._session.add(project)
                await self._session.flush()

                transfer = None
                if request.project_initial_token > 0:
                    transfer = ProjectFundTransferRecord(
                        project_id=project.id,
                        mint=request.mint,
                        direction="in",
                        amount=request.project_initial_token,
                        target_name="project",
                    )
                    self._session.add(transfer)

                role_link = RoleConfigRelation(role_id=request.role_id, project_id=project.id)
                self._session.add(role_link)
                await self._session.flush()
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise CreateFailed(f"pumpfun amm project create failed: {e}") from e

        logger.info(f"[PROJECT] Auto-created pumpfun_amm project #{project.id} pool={pool.pool_address}")
        return {
            "project": project,
            "token": token,
            "pumpfun_amm_pool_config": pool,
            "project_fund_transfer_record": transfer,
            "role_config_relation": role_link,
        }
