"""initial portfolio schema

Revision ID: a1c4e2f9b7d3
Revises:
Create Date: 2026-10-17 09:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c4e2f9b7d3'
down_revision = None
branch_labels = None
depends_on = None


def timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    ]


def owner() -> sa.Column:
    return sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('employment_status', sa.String(length=20), nullable=False, server_default='EmploymentPass'),
        sa.Column('annual_income', sa.Numeric(15, 2), nullable=True),
        sa.Column('fi_goal', sa.Numeric(15, 2), nullable=True),
        sa.Column('fi_target_year', sa.Integer(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'holdings',
        sa.Column('id', sa.Uuid(), nullable=False),
        owner(),
        sa.Column('symbol', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('location', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('entry_currency', sa.String(length=3), nullable=False),
        sa.Column('quantity', sa.Numeric(20, 8), nullable=True),
        sa.Column('unit_cost', sa.Numeric(18, 6), nullable=True),
        sa.Column('current_unit_price', sa.Numeric(18, 6), nullable=True),
        sa.Column('value_sgd', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('value_usd', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('value_inr', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('price_updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('price_source', sa.String(length=20), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_holdings_id'), 'holdings', ['id'], unique=False)
    op.create_index(op.f('ix_holdings_user_id'), 'holdings', ['user_id'], unique=False)
    op.create_index(op.f('ix_holdings_symbol'), 'holdings', ['symbol'], unique=False)
    op.create_index(op.f('ix_holdings_category'), 'holdings', ['category'], unique=False)

    op.create_table(
        'categories',
        sa.Column('id', sa.Uuid(), nullable=False),
        owner(),
        sa.Column('name', sa.String(length=20), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('target_percentage', sa.Numeric(5, 2), nullable=False),
        sa.Column('user_target_percentage', sa.Numeric(5, 2), nullable=True),
        sa.Column('rebalance_threshold', sa.Numeric(5, 2), nullable=False, server_default='5'),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'name', name='uq_category_user_name'),
    )
    op.create_index(op.f('ix_categories_id'), 'categories', ['id'], unique=False)
    op.create_index(op.f('ix_categories_user_id'), 'categories', ['user_id'], unique=False)

    op.create_table(
        'allocation_targets',
        sa.Column('id', sa.Uuid(), nullable=False),
        owner(),
        sa.Column('name', sa.String(length=100), nullable=False, server_default='Custom'),
        sa.Column('core_target', sa.Numeric(5, 2), nullable=False),
        sa.Column('growth_target', sa.Numeric(5, 2), nullable=False),
        sa.Column('hedge_target', sa.Numeric(5, 2), nullable=False),
        sa.Column('liquidity_target', sa.Numeric(5, 2), nullable=False),
        sa.Column('rebalance_threshold', sa.Numeric(5, 2), nullable=False, server_default='5'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_allocation_targets_id'), 'allocation_targets', ['id'], unique=False)
    op.create_index(op.f('ix_allocation_targets_user_id'), 'allocation_targets', ['user_id'], unique=False)
    op.create_index(op.f('ix_allocation_targets_is_active'), 'allocation_targets', ['is_active'], unique=False)

    op.create_table(
        'exchange_rates',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('from_currency', sa.String(length=3), nullable=False),
        sa.Column('to_currency', sa.String(length=3), nullable=False),
        sa.Column('rate', sa.Numeric(18, 8), nullable=False),
        sa.Column('source', sa.String(length=10), nullable=False, server_default='api'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_exchange_rates_id'), 'exchange_rates', ['id'], unique=False)
    op.create_index(op.f('ix_exchange_rates_is_active'), 'exchange_rates', ['is_active'], unique=False)
    op.create_index('ix_exchange_rates_pair', 'exchange_rates', ['from_currency', 'to_currency'], unique=False)

    op.create_table(
        'yearly_data',
        sa.Column('id', sa.Uuid(), nullable=False),
        owner(),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('income', sa.Numeric(15, 2), nullable=False, server_default='0'),
        sa.Column('expenses', sa.Numeric(15, 2), nullable=False, server_default='0'),
        sa.Column('savings', sa.Numeric(15, 2), nullable=False, server_default='0'),
        sa.Column('srs_contribution', sa.Numeric(15, 2), nullable=False, server_default='0'),
        sa.Column('net_worth', sa.Numeric(15, 2), nullable=False, server_default='0'),
        sa.Column('market_gains', sa.Numeric(15, 2), nullable=True),
        sa.Column('return_percent', sa.Numeric(7, 2), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'year', name='uq_yearly_data_user_year'),
    )
    op.create_index(op.f('ix_yearly_data_id'), 'yearly_data', ['id'], unique=False)
    op.create_index(op.f('ix_yearly_data_user_id'), 'yearly_data', ['user_id'], unique=False)
    op.create_index(op.f('ix_yearly_data_year'), 'yearly_data', ['year'], unique=False)


def downgrade() -> None:
    op.drop_table('yearly_data')
    op.drop_table('exchange_rates')
    op.drop_table('allocation_targets')
    op.drop_table('categories')
    op.drop_table('holdings')
    op.drop_table('users')
