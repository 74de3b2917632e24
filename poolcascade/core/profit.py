"""Round-over-round project profit.

Projects are launched one after another with the same capital, so a
project's profit is the change in ``assets_balance`` relative to the
project created immediately before it (``id - 1``). Gaps in the id
sequence yield 0.0 rather than reaching further back.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from poolcascade.models.project import ProjectConfig


def profit_from_balances(project_id: int, balances: dict[int, float]) -> float:
    if project_id <= 1:
        return 0.0
    previous = balances.get(project_id - 1)
    current = balances.get(project_id)
    if previous is None or current is None:
        return 0.0
    return float(current) - float(previous)


class ProfitCalculator:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def profit(self, project_id: int) -> float:
        if project_id <= 1:
            return 0.0
        result = await self._session.execute(
            select(ProjectConfig.id, ProjectConfig.assets_balance).where(
                ProjectConfig.id.in_((project_id, project_id - 1))
            )
        )
        balances = {row.id: row.assets_balance for row in result}
        return profit_from_balances(project_id, balances)

    async def rank(
        self,
        *,
        order: str = "desc",
        min_profit: float | None = None,
        max_profit: float | None = None,
    ) -> list[tuple[ProjectConfig, float]]:
        """All projects with profit inside [min_profit, max_profit], sorted.

        Bounds default to the configured ranking window; extreme rounds
        (test launches, manual top-ups) are left out.
        """
        low = settings.profit_range_min if min_profit is None else min_profit
        high = settings.profit_range_max if max_profit is None else max_profit

        result = await self._session.execute(select(ProjectConfig).order_by(ProjectConfig.id))
        projects = result.scalars().all()
        balances = {p.id: p.assets_balance for p in projects}

        ranked = []
        for project in projects:
            value = profit_from_balances(project.id, balances)
            if low <= value <= high:
                ranked.append((project, value))

        ranked.sort(key=lambda item: item[1], reverse=order.lower() != "asc")
        return ranked
