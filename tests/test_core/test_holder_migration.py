"""Holder ledger migration from a DBC curve onto its DAMM v2 pool."""

import pytest
from sqlalchemy import func, select

from poolcascade.core.errors import NotMigratable
from poolcascade.core.holders import HolderMigrator
from poolcascade.models import MeteoracpmmHolder, MeteoradbcHolder


async def _cpmm_holders(session, pool_address="CPMM1"):
    result = await session.execute(
        select(MeteoracpmmHolder)
        .where(MeteoracpmmHolder.pool_address == pool_address)
        .order_by(MeteoracpmmHolder.address)
    )
    return result.scalars().all()


async def _dbc_count(session):
    result = await session.execute(select(func.count()).select_from(MeteoradbcHolder))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_copies_non_pool_rows(db_session, seed):
    await seed.dbc("DBC1", damm_v2="CPMM1", migrated=True)
    await seed.dbc_holder("POOLVAULT", holder_type="pool")
    await seed.dbc_holder(
        "WALLET_A",
        holder_type="retail_investors",
        base_change=1500.5,
        quote_change=-2.25,
        sol_change=-2.25,
        tx_count=3,
        start_slot=100,
        last_slot=180,
        start_signature="sigA",
        end_signature="sigB",
    )

    report = await HolderMigrator(db_session).migrate("DBC1")

    assert (report.total_found, report.migrated, report.skipped, report.errored) == (1, 1, 0, 0)
    assert report.successor_pool_address == "CPMM1"

    copied = await _cpmm_holders(db_session)
    assert len(copied) == 1
    row = copied[0]
    assert row.address == "WALLET_A"
    assert row.pool_address == "CPMM1"
    assert row.holder_type == "retail_investors"
    assert row.base_change == 1500.5
    assert row.quote_change == -2.25
    assert row.tx_count == 3
    assert (row.start_slot, row.last_slot) == (100, 180)
    assert (row.start_signature, row.end_signature) == ("sigA", "sigB")


@pytest.mark.asyncio
async def test_source_rows_are_left_untouched(db_session, seed):
    await seed.dbc("DBC1", damm_v2="CPMM1", migrated=True)
    source = await seed.dbc_holder("WALLET_A", base_change=10.0)
    await seed.dbc_holder("POOLVAULT", holder_type="pool")

    await HolderMigrator(db_session).migrate("DBC1")

    assert await _dbc_count(db_session) == 2
    assert source.pool_address == "DBC1"
    assert source.base_change == 10.0


@pytest.mark.asyncio
async def test_existing_successor_rows_are_skipped(db_session, seed):
    await seed.dbc("DBC1", damm_v2="CPMM1", migrated=True)
    await seed.dbc_holder("WALLET_A", base_change=10.0)
    await seed.dbc_holder("WALLET_B", holder_type="project")
    existing = await seed.cpmm_holder("WALLET_A", base_change=99.0)

    report = await HolderMigrator(db_session).migrate("DBC1")

    assert (report.total_found, report.migrated, report.skipped, report.errored) == (2, 1, 1, 0)
    # Existing successor ledger wins; nothing is overwritten.
    assert existing.base_change == 99.0


@pytest.mark.asyncio
async def test_rerun_is_idempotent(db_session, seed):
    await seed.dbc("DBC1", damm_v2="CPMM1", migrated=True)
    await seed.dbc_holder("WALLET_A")
    await seed.dbc_holder("WALLET_B", holder_type="project")
    migrator = HolderMigrator(db_session)

    first = await migrator.migrate("DBC1")
    second = await migrator.migrate("DBC1")

    assert (first.migrated, first.skipped) == (2, 0)
    assert (second.migrated, second.skipped, second.errored) == (0, 2, 0)
    assert len(await _cpmm_holders(db_session)) == 2


@pytest.mark.asyncio
async def test_failed_insert_is_counted_and_others_continue(db_session, seed):
    await seed.dbc("DBC1", damm_v2="CPMM1", migrated=True)
    await seed.dbc_holder("WALLET_A")
    await seed.dbc_holder("WALLET_B")
    migrator = HolderMigrator(db_session)

    original = migrator._insert_successor

    async def flaky_insert(values, successor):
        if values["address"] == "WALLET_A":
            raise RuntimeError("insert rejected")
        await original(values, successor)

    migrator._insert_successor = flaky_insert

    report = await migrator.migrate("DBC1")

    assert (report.migrated, report.skipped, report.errored) == (1, 0, 1)
    assert [h.address for h in await _cpmm_holders(db_session)] == ["WALLET_B"]


@pytest.mark.asyncio
async def test_no_successor_address_is_not_migratable(db_session, seed):
    await seed.dbc("DBC1", damm_v2="")
    await seed.dbc_holder("WALLET_A")

    with pytest.raises(NotMigratable):
        await HolderMigrator(db_session).migrate("DBC1")

    assert await _cpmm_holders(db_session) == []


@pytest.mark.asyncio
async def test_unknown_dbc_is_not_migratable(db_session):
    with pytest.raises(NotMigratable):
        await HolderMigrator(db_session).migrate("NOPE")


@pytest.mark.asyncio
async def test_only_pool_rows_reports_zero(db_session, seed):
    await seed.dbc("DBC1", damm_v2="CPMM1", migrated=True)
    await seed.dbc_holder("POOLVAULT", holder_type="pool")

    report = await HolderMigrator(db_session).migrate("DBC1")

    assert report.to_dict() == {
        "pool_address": "DBC1",
        "successor_pool_address": "CPMM1",
        "total_found": 0,
        "migrated": 0,
        "skipped": 0,
        "errored": 0,
    }
