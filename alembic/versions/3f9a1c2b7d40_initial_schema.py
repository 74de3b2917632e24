"""initial_schema

Projects, tokens, strategies, role links, fund transfers, the seven pool
variant tables, the launchpad/cpmm relation and the holder ledgers.

Revision ID: 3f9a1c2b7d40
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON = sa.JSON(none_as_null=True).with_variant(postgresql.JSONB(none_as_null=True), 'postgresql')


def _timestamps(updated: bool = True) -> list[sa.Column]:
    cols = [sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False)]
    if updated:
        cols.append(sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False))
    return cols


def _ledger_columns() -> list[sa.Column]:
    return [
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('address', sa.String(64), nullable=False),
        sa.Column('holder_type', sa.String(32), nullable=False),
        sa.Column('pool_address', sa.String(64), nullable=False),
        sa.Column('base_mint', sa.String(64), nullable=False),
        sa.Column('quote_mint', sa.String(64), nullable=False),
        sa.Column('start_slot', sa.BigInteger(), nullable=False),
        sa.Column('last_slot', sa.BigInteger(), nullable=False),
        sa.Column('start_timestamp', sa.BigInteger(), nullable=False),
        sa.Column('last_timestamp', sa.BigInteger(), nullable=False),
        sa.Column('start_signature', sa.String(128), nullable=True),
        sa.Column('end_signature', sa.String(128), nullable=True),
        sa.Column('base_change', sa.Float(), nullable=False),
        sa.Column('quote_change', sa.Float(), nullable=False),
        sa.Column('sol_change', sa.Float(), nullable=False),
        sa.Column('tx_count', sa.Integer(), nullable=False),
        *_timestamps(),
    ]


_LEDGERS = ('meteoradbc_holder', 'meteoracpmm_holder', 'raydiumpool_holder', 'pumpfunammpool_holder')


def upgrade() -> None:
    # 1. Tokens and projects
    op.create_table(
        'token_info',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('mint', sa.String(64), nullable=False, unique=True),
        sa.Column('symbol', sa.String(32), nullable=True),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('decimals', sa.Integer(), nullable=False),
        sa.Column('logo_uri', sa.String(512), nullable=True),
        sa.Column('total_supply', sa.Float(), nullable=False),
        sa.Column('creator', sa.String(64), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        'project_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('pool_platform', sa.String(32), nullable=False),
        sa.Column('pool_id', sa.Integer(), nullable=False),
        sa.Column('token_id', sa.Integer(), nullable=False),
        sa.Column('token_metadata_id', sa.Integer(), nullable=True),
        sa.Column('snapshot_enabled', sa.Boolean(), nullable=False),
        sa.Column('snapshot_count', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('update_stat_enabled', sa.Boolean(), nullable=False),
        sa.Column('is_migrated', sa.Boolean(), nullable=False),
        sa.Column('is_locked', sa.Boolean(), nullable=False),
        sa.Column('assets_balance', sa.Float(), nullable=False),
        sa.Column('retail_sol_amount', sa.Float(), nullable=False),
        sa.Column('pool_config', sa.String(64), nullable=True),
        sa.Column('event', JSON, nullable=True),
        sa.Column('vesting', JSON, nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_project_config_pool', 'project_config', ['pool_platform', 'pool_id'])
    op.create_index('idx_project_config_token', 'project_config', ['token_id'])

    op.create_table(
        'strategy_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.Column('strategy_name', sa.String(255), nullable=False),
        sa.Column('strategy_type', sa.String(64), nullable=False),
        sa.Column('strategy_params', JSON, nullable=True),
        sa.Column('strategy_stat', JSON, nullable=True),
        sa.Column('enabled', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_strategy_config_project', 'strategy_config', ['project_id'])

    op.create_table(
        'role_config_relation',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index('idx_role_config_relation_project', 'role_config_relation', ['project_id'])

    op.create_table(
        'project_fund_transfer_record',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('mint', sa.String(64), nullable=False),
        sa.Column('direction', sa.String(8), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('target_name', sa.String(32), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index('idx_fund_transfer_project', 'project_fund_transfer_record', ['project_id'])

    # 2. Pool variants
    op.create_table(
        'pool_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('platform', sa.String(20), nullable=False),
        sa.Column('pool_address', sa.String(100), nullable=False, unique=True),
        sa.Column('base_is_wsol', sa.Boolean(), nullable=False),
        sa.Column('base_mint_id', sa.Integer(), nullable=True),
        sa.Column('quote_mint_id', sa.Integer(), nullable=True),
        sa.Column('base_vault', sa.String(100), nullable=True),
        sa.Column('quote_vault', sa.String(100), nullable=True),
        sa.Column('lp_mint_id', sa.Integer(), nullable=True),
        sa.Column('fee_rate', sa.Float(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'raydium_launchpad_pool_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('pool_address', sa.String(128), nullable=False, unique=True),
        sa.Column('platform', sa.String(20), nullable=False),
        sa.Column('config_id', sa.String(128), nullable=True),
        sa.Column('platform_config_id', sa.String(128), nullable=True),
        sa.Column('trade_fee_rate', sa.Float(), nullable=False),
        sa.Column('max_share_fee_rate', sa.Float(), nullable=False),
        sa.Column('migrate_type', sa.Integer(), nullable=False),
        sa.Column('mint_b', sa.String(128), nullable=True),
        sa.Column('base_mint', sa.String(128), nullable=False),
        sa.Column('quote_mint', sa.String(128), nullable=False),
        sa.Column('base_vault', sa.String(128), nullable=False),
        sa.Column('quote_vault', sa.String(128), nullable=False),
        sa.Column('creator', sa.String(128), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'raydium_cpmm_pool_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('platform', sa.String(20), nullable=False),
        sa.Column('program_id', sa.String(128), nullable=True),
        sa.Column('pool_address', sa.String(128), nullable=False, unique=True),
        sa.Column('config_id', sa.String(128), nullable=True),
        sa.Column('base_mint', sa.String(128), nullable=False),
        sa.Column('quote_mint', sa.String(128), nullable=False),
        sa.Column('base_vault', sa.String(128), nullable=False),
        sa.Column('quote_vault', sa.String(128), nullable=False),
        sa.Column('lp_mint', sa.String(128), nullable=True),
        sa.Column('fee_rate', sa.Float(), nullable=False),
        sa.Column('protocol_fee_rate', sa.Float(), nullable=False),
        sa.Column('trade_fee_rate', sa.Float(), nullable=False),
        sa.Column('fund_fee_rate', sa.Float(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'raydiumpool_relation',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('mint_a', sa.String(128), nullable=True),
        sa.Column('mint_b', sa.String(128), nullable=True),
        sa.Column('launchpad_pool_id', sa.String(128), nullable=True),
        sa.Column('cpmm_pool_id', sa.String(128), nullable=True),
        sa.Column('launchpad_pool_base_vault', sa.String(128), nullable=False),
        sa.Column('launchpad_pool_quote_vault', sa.String(128), nullable=False),
        sa.Column('cpmm_pool_base_vault', sa.String(128), nullable=False),
        sa.Column('cpmm_pool_quote_vault', sa.String(128), nullable=False),
        sa.Column('launchpad_base_is_wsol', sa.Boolean(), nullable=False),
        sa.Column('cpmm_base_is_wsol', sa.Boolean(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('token_mint_sig', sa.String(128), nullable=True),
        sa.Column('migrate_sig', sa.String(128), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index('idx_raydiumpool_relation_launchpad', 'raydiumpool_relation', ['launchpad_pool_id'])
    op.create_index('idx_raydiumpool_relation_cpmm', 'raydiumpool_relation', ['cpmm_pool_id'])

    op.create_table(
        'pumpfuninternal_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('platform', sa.String(20), nullable=False),
        sa.Column('mint', sa.String(64), nullable=False, unique=True),
        sa.Column('bonding_curve_pda', sa.String(64), nullable=True),
        sa.Column('associated_bonding_curve', sa.String(64), nullable=True),
        sa.Column('creator_vault_pda', sa.String(64), nullable=True),
        sa.Column('fee_recipient', sa.String(64), nullable=True),
        sa.Column('fee_rate', sa.Float(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'pumpfunammpool_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('pool_address', sa.String(44), nullable=False, unique=True),
        sa.Column('pool_bump', sa.Integer(), nullable=False),
        sa.Column('index', sa.Integer(), nullable=False),
        sa.Column('creator', sa.String(44), nullable=True),
        sa.Column('base_mint', sa.String(44), nullable=False),
        sa.Column('quote_mint', sa.String(44), nullable=False),
        sa.Column('lp_mint', sa.String(44), nullable=True),
        sa.Column('pool_base_token_account', sa.String(44), nullable=True),
        sa.Column('pool_quote_token_account', sa.String(44), nullable=True),
        sa.Column('lp_supply', sa.BigInteger(), nullable=False),
        sa.Column('coin_creator', sa.String(44), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'meteoradbc_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('pool_address', sa.String(44), nullable=False, unique=True),
        sa.Column('creator', sa.String(44), nullable=True),
        sa.Column('pool_config', sa.String(44), nullable=True),
        sa.Column('base_mint', sa.String(44), nullable=False),
        sa.Column('quote_mint', sa.String(44), nullable=False),
        sa.Column('pool_base_token_account', sa.String(44), nullable=True),
        sa.Column('pool_quote_token_account', sa.String(44), nullable=True),
        sa.Column('first_buyer', sa.String(44), nullable=True),
        sa.Column('damm_v2_pool_address', sa.String(44), nullable=False, server_default=''),
        sa.Column('is_migrated', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('status', sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'meteoracpmm_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('pool_address', sa.String(44), nullable=False, unique=True),
        sa.Column('dbc_pool_address', sa.String(44), nullable=False, server_default=''),
        sa.Column('creator', sa.String(44), nullable=True),
        sa.Column('base_mint', sa.String(44), nullable=False),
        sa.Column('quote_mint', sa.String(44), nullable=False),
        sa.Column('pool_base_token_account', sa.String(44), nullable=True),
        sa.Column('pool_quote_token_account', sa.String(44), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_meteoracpmm_dbc_pool', 'meteoracpmm_config', ['dbc_pool_address'])

    # 3. Holder ledgers
    for table in _LEDGERS:
        extra = []
        if table == 'pumpfunammpool_holder':
            extra = [
                sa.Column('trader_base_volume', sa.Float(), nullable=False),
                sa.Column('trader_quote_volume', sa.Float(), nullable=False),
                sa.Column('trader_sol_volume', sa.Float(), nullable=False),
            ]
        op.create_table(
            table,
            *_ledger_columns(),
            *extra,
            sa.UniqueConstraint(
                'address', 'pool_address', 'base_mint', 'quote_mint', 'holder_type',
                name=f'uq_{table}_key',
            ),
        )
        op.create_index(f'idx_{table}_pool', table, ['pool_address'])

    op.create_table(
        'pumpfuninternal_holder',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('address', sa.String(64), nullable=False),
        sa.Column('holder_type', sa.String(32), nullable=False),
        sa.Column('bonding_curve_pda', sa.String(64), nullable=False),
        sa.Column('mint', sa.String(64), nullable=False),
        sa.Column('start_slot', sa.BigInteger(), nullable=False),
        sa.Column('last_slot', sa.BigInteger(), nullable=False),
        sa.Column('start_timestamp', sa.BigInteger(), nullable=False),
        sa.Column('last_timestamp', sa.BigInteger(), nullable=False),
        sa.Column('start_signature', sa.String(128), nullable=True),
        sa.Column('end_signature', sa.String(128), nullable=True),
        sa.Column('mint_change', sa.Float(), nullable=False),
        sa.Column('sol_change', sa.Float(), nullable=False),
        sa.Column('mint_volume', sa.Float(), nullable=False),
        sa.Column('sol_volume', sa.Float(), nullable=False),
        sa.Column('tx_count', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            'address', 'bonding_curve_pda', 'mint', 'holder_type',
            name='uq_pumpfuninternal_holder_key',
        ),
    )


def downgrade() -> None:
    op.drop_table('pumpfuninternal_holder')
    for table in reversed(_LEDGERS):
        op.drop_index(f'idx_{table}_pool', table_name=table)
        op.drop_table(table)

    op.drop_index('idx_meteoracpmm_dbc_pool', table_name='meteoracpmm_config')
    op.drop_table('meteoracpmm_config')
    op.drop_table('meteoradbc_config')
    op.drop_table('pumpfunammpool_config')
    op.drop_table('pumpfuninternal_config')
    op.drop_index('idx_raydiumpool_relation_cpmm', table_name='raydiumpool_relation')
    op.drop_index('idx_raydiumpool_relation_launchpad', table_name='raydiumpool_relation')
    op.drop_table('raydiumpool_relation')
    op.drop_table('raydium_cpmm_pool_config')
    op.drop_table('raydium_launchpad_pool_config')
    op.drop_table('pool_config')

    op.drop_index('idx_fund_transfer_project', table_name='project_fund_transfer_record')
    op.drop_table('project_fund_transfer_record')
    op.drop_index('idx_role_config_relation_project', table_name='role_config_relation')
    op.drop_table('role_config_relation')
    op.drop_index('idx_strategy_config_project', table_name='strategy_config')
    op.drop_table('strategy_config')
    op.drop_index('idx_project_config_token', table_name='project_config')
    op.drop_index('idx_project_config_pool', table_name='project_config')
    op.drop_table('project_config')
    op.drop_table('token_info')
