"""Create vending tables

Revision ID: 20261019_000001
Revises: None
Create Date: 2026-10-19

Creates vending machines, products, users, slots and transactions.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the vending tables."""
    op.create_table(
        'vending_machines',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('image', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
    )
    op.create_index('ix_products_name', 'products', ['name'])

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('username', sa.String(255), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column(
            'role',
            sa.Enum('admin', 'user', 'machine', name='user_role', create_constraint=True),
            nullable=False,
            server_default='user'
        ),
        sa.Column('balance', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('vending_machine_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['vending_machine_id'],
            ['vending_machines.id'],
            name='fk_users_vending_machine_id',
            ondelete='NO ACTION'
        ),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'slots',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('index', sa.Integer(), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('product_id', sa.Integer(), nullable=True),
        sa.Column('vending_machine_id', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['product_id'],
            ['products.id'],
            name='fk_slots_product_id',
            ondelete='SET NULL'
        ),
        sa.ForeignKeyConstraint(
            ['vending_machine_id'],
            ['vending_machines.id'],
            name='fk_slots_vending_machine_id',
            ondelete='CASCADE'
        ),
        sa.CheckConstraint('stock >= 0', name='ck_slots_stock_non_negative'),
        sa.UniqueConstraint('vending_machine_id', 'index', name='uq_slots_machine_index'),
    )
    op.create_index('ix_slots_product_id', 'slots', ['product_id'])
    op.create_index('ix_slots_vending_machine_id', 'slots', ['vending_machine_id'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('code', sa.String(8), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('slot_id', sa.Integer(), nullable=True),
        sa.Column('product_id', sa.Integer(), nullable=True),
        sa.Column('vending_machine_id', sa.Integer(), nullable=True),
        sa.Column('has_confirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('confirmed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['user_id'],
            ['users.id'],
            name='fk_transactions_user_id',
            ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['slot_id'],
            ['slots.id'],
            name='fk_transactions_slot_id',
            ondelete='SET NULL'
        ),
        sa.ForeignKeyConstraint(
            ['product_id'],
            ['products.id'],
            name='fk_transactions_product_id',
            ondelete='NO ACTION'
        ),
        sa.ForeignKeyConstraint(
            ['vending_machine_id'],
            ['vending_machines.id'],
            name='fk_transactions_vending_machine_id',
            ondelete='NO ACTION'
        ),
    )
    op.create_index('ix_transactions_code', 'transactions', ['code'], unique=True)
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_vending_machine_id', 'transactions', ['vending_machine_id'])


def downgrade() -> None:
    """Drop the vending tables."""
    op.drop_index('ix_transactions_vending_machine_id', table_name='transactions')
    op.drop_index('ix_transactions_user_id', table_name='transactions')
    op.drop_index('ix_transactions_code', table_name='transactions')
    op.drop_table('transactions')
    op.drop_index('ix_slots_vending_machine_id', table_name='slots')
    op.drop_index('ix_slots_product_id', table_name='slots')
    op.drop_table('slots')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
    op.drop_index('ix_products_name', table_name='products')
    op.drop_table('products')
    op.drop_table('vending_machines')
