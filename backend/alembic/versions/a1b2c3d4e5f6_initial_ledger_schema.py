"""initial ledger schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1b2c3d4e5f6'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'players',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('name_key', sa.String(length=50), nullable=False),
        sa.Column('discord_id', sa.String(length=32), nullable=True),
        sa.Column('username', sa.String(length=100), nullable=True),
        sa.Column('username_key', sa.String(length=100), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('role', sa.Enum('ADMIN', 'MEMBER', name='playerrole'), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_players_id'), 'players', ['id'], unique=False)
    op.create_index(op.f('ix_players_name'), 'players', ['name'], unique=False)
    op.create_index(op.f('ix_players_name_key'), 'players', ['name_key'], unique=True)
    op.create_index(op.f('ix_players_username'), 'players', ['username'], unique=False)
    op.create_index(op.f('ix_players_username_key'), 'players', ['username_key'], unique=True)

    op.create_table(
        'items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('name_key', sa.String(length=100), nullable=False),
        sa.Column('category', sa.Enum('SKILL', 'WEAPON', 'ARMOR', 'ACCESSORY', 'MATERIAL', 'MOUNT', 'SPECIAL', name='itemcategory'), nullable=False),
        sa.Column('sub_type', sa.String(length=100), nullable=True),
        sa.Column('tradeable', sa.Boolean(), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_items_id'), 'items', ['id'], unique=False)
    op.create_index(op.f('ix_items_name'), 'items', ['name'], unique=False)
    op.create_index(op.f('ix_items_name_key'), 'items', ['name_key'], unique=True)

    op.create_table(
        'bosses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('name_key', sa.String(length=100), nullable=False),
        sa.Column('location', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bosses_id'), 'bosses', ['id'], unique=False)
    op.create_index(op.f('ix_bosses_name'), 'bosses', ['name'], unique=False)
    op.create_index(op.f('ix_bosses_name_key'), 'bosses', ['name_key'], unique=True)

    op.create_table(
        'drops',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('item_id', sa.Integer(), nullable=False),
        sa.Column('boss_id', sa.Integer(), nullable=True),
        sa.Column('drop_date', sa.Date(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('participant_count', sa.Integer(), nullable=False),
        sa.Column('drop_status', sa.Enum('DROPPED', 'NOT_DROPPED', name='dropstatus'), nullable=False),
        sa.Column('finance_status', sa.Enum('WAIT', 'PAID', 'PERSONAL', name='financestatus'), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.ForeignKeyConstraint(['item_id'], ['items.id'], ),
        sa.ForeignKeyConstraint(['boss_id'], ['bosses.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_drops_id'), 'drops', ['id'], unique=False)
    op.create_index(op.f('ix_drops_item_id'), 'drops', ['item_id'], unique=False)
    op.create_index(op.f('ix_drops_boss_id'), 'drops', ['boss_id'], unique=False)

    op.create_table(
        'sales',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('drop_id', sa.Integer(), nullable=False),
        sa.Column('sale_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('fee_percent', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('fee_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('net_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('sale_date', sa.Date(), nullable=True),
        sa.Column('platform', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.ForeignKeyConstraint(['drop_id'], ['drops.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sales_id'), 'sales', ['id'], unique=False)
    op.create_index(op.f('ix_sales_drop_id'), 'sales', ['drop_id'], unique=True)

    op.create_table(
        'shares',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('drop_id', sa.Integer(), nullable=False),
        sa.Column('player_id', sa.Integer(), nullable=False),
        sa.Column('share_type', sa.Enum('AUTO', 'BUY', 'PERSONAL', name='sharetype'), nullable=False),
        sa.Column('percent', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('paid_status', sa.Enum('WAIT', 'PAID', name='paidstatus'), nullable=False),
        sa.Column('remark', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.ForeignKeyConstraint(['drop_id'], ['drops.id'], ),
        sa.ForeignKeyConstraint(['player_id'], ['players.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_shares_id'), 'shares', ['id'], unique=False)
    op.create_index(op.f('ix_shares_drop_id'), 'shares', ['drop_id'], unique=False)
    op.create_index(op.f('ix_shares_player_id'), 'shares', ['player_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('shares')
    op.drop_table('sales')
    op.drop_table('drops')
    op.drop_table('bosses')
    op.drop_table('items')
    op.drop_table('players')
