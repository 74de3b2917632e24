"""Companion-pool annotations."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from poolcascade.core.relations import RelationAugmenter


@pytest.mark.asyncio
async def test_launchpad_gets_relation_and_cpmm(db_session, seed):
    launchpad = await seed.launchpad("LAUNCH1")
    cpmm = await seed.raydium_cpmm("RCPMM1")
    link = await seed.launchpad_relation("LAUNCH1", "RCPMM1")

    relation = await RelationAugmenter(db_session).augment("raydium_launchpad", launchpad)

    assert relation == {"relation": link, "cpmm_pool_config": cpmm}


@pytest.mark.asyncio
async def test_launchpad_relation_without_cpmm_row(db_session, seed):
    launchpad = await seed.launchpad("LAUNCH1")
    link = await seed.launchpad_relation("LAUNCH1", "RCPMM_MISSING")

    relation = await RelationAugmenter(db_session).augment("raydium_launchpad", launchpad)

    assert relation == {"relation": link}


@pytest.mark.asyncio
async def test_launchpad_without_relation_is_empty(db_session, seed):
    launchpad = await seed.launchpad("LAUNCH1")

    relation = await RelationAugmenter(db_session).augment("raydium_launchpad", launchpad)

    assert relation == {}


@pytest.mark.asyncio
async def test_dbc_with_successor_gets_cpmm_even_unmigrated(db_session, seed):
    cpmm = await seed.cpmm("CPMM1", dbc="DBC1")
    dbc = await seed.dbc("DBC1", damm_v2="CPMM1", migrated=False)

    relation = await RelationAugmenter(db_session).augment("meteora_dbc", dbc)

    assert relation == {"meteoracpmm_config": cpmm}


@pytest.mark.asyncio
async def test_redirected_view_still_carries_cpmm_from_source(db_session, seed):
    cpmm = await seed.cpmm("CPMM1", dbc="DBC1")
    dbc = await seed.dbc("DBC1", damm_v2="CPMM1", migrated=True)

    relation = await RelationAugmenter(db_session).augment(
        "meteora_cpmm", cpmm, source_pool=dbc
    )

    assert relation == {"meteoracpmm_config": cpmm}


@pytest.mark.asyncio
async def test_dbc_without_successor_is_empty(db_session, seed):
    dbc = await seed.dbc("DBC1")

    assert await RelationAugmenter(db_session).augment("meteora_dbc", dbc) == {}


@pytest.mark.asyncio
async def test_plain_platforms_get_no_relation(db_session, seed):
    amm = await seed.pumpfun_amm("AMM1")

    assert await RelationAugmenter(db_session).augment("pumpfun_amm", amm) == {}


@pytest.mark.asyncio
async def test_lookup_failure_yields_empty_relation(db_session, seed):
    launchpad = await seed.launchpad("LAUNCH1")
    db_session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("down")))

    relation = await RelationAugmenter(db_session).augment("raydium_launchpad", launchpad)

    assert relation == {}
