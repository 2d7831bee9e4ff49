"""add fi milestones

Revision ID: c7e2b5d81f04
Revises: a1c4e2f9b7d3
Create Date: 2026-10-17 14:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'c7e2b5d81f04'
down_revision = 'a1c4e2f9b7d3'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'fi_milestones',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('amount', sa.Numeric(15, 2), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_fi_milestones_id'), 'fi_milestones', ['id'], unique=False)
    op.create_index(op.f('ix_fi_milestones_user_id'), 'fi_milestones', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_fi_milestones_user_id'), table_name='fi_milestones')
    op.drop_index(op.f('ix_fi_milestones_id'), table_name='fi_milestones')
    op.drop_table('fi_milestones')
