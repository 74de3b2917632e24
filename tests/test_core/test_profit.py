"""Round-over-round profit and the profit ranking."""

import pytest

from poolcascade.core.profit import ProfitCalculator, profit_from_balances


def test_profit_from_balances():
    balances = {1: 10.0, 2: 12.5, 3: 11.0, 5: 20.0}

    assert profit_from_balances(1, balances) == 0.0
    assert profit_from_balances(2, balances) == 2.5
    assert profit_from_balances(3, balances) == -1.5
    # Gap in the id sequence: no predecessor, no profit.
    assert profit_from_balances(5, balances) == 0.0
    assert profit_from_balances(0, balances) == 0.0
    assert profit_from_balances(9, balances) == 0.0


async def _projects(seed, balances):
    rows = []
    for balance in balances:
        rows.append(await seed.project("raydium", 1, assets_balance=balance))
    return rows


@pytest.mark.asyncio
async def test_first_project_has_zero_profit(db_session, seed):
    first, _ = await _projects(seed, [100.0, 105.0])

    assert first.id == 1
    assert await ProfitCalculator(db_session).profit(1) == 0.0


@pytest.mark.asyncio
async def test_profit_against_previous_id(db_session, seed):
    await _projects(seed, [100.0, 105.0, 95.0])
    calc = ProfitCalculator(db_session)

    assert await calc.profit(2) == pytest.approx(5.0)
    assert await calc.profit(3) == pytest.approx(-10.0)


@pytest.mark.asyncio
async def test_missing_project_has_zero_profit(db_session, seed):
    await _projects(seed, [100.0])

    assert await ProfitCalculator(db_session).profit(50) == 0.0


@pytest.mark.asyncio
async def test_rank_filters_and_sorts_desc(db_session, seed):
    # profits: #2 = +5, #3 = -3, #4 = +40 (outside default window), #5 = +1
    await _projects(seed, [100.0, 105.0, 102.0, 142.0, 143.0])

    ranked = await ProfitCalculator(db_session).rank()

    assert [(p.id, v) for p, v in ranked] == [
        (2, pytest.approx(5.0)),
        (5, pytest.approx(1.0)),
        (1, 0.0),
        (3, pytest.approx(-3.0)),
    ]


@pytest.mark.asyncio
async def test_rank_ascending_with_custom_bounds(db_session, seed):
    await _projects(seed, [100.0, 105.0, 102.0, 142.0])

    ranked = await ProfitCalculator(db_session).rank(order="asc", min_profit=0.0, max_profit=50.0)

    assert [p.id for p, _ in ranked] == [1, 2, 4]


@pytest.mark.asyncio
async def test_rank_bounds_are_inclusive(db_session, seed):
    await _projects(seed, [100.0, 95.0, 125.0])  # -5 and +30: both window edges

    ranked = await ProfitCalculator(db_session).rank()

    assert {p.id for p, _ in ranked} == {1, 2, 3}
