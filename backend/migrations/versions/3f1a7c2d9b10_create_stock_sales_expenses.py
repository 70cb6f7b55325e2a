"""create_stock_sales_expenses

Revision ID: 3f1a7c2d9b10
Revises:
Create Date: 2026-01-05 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a7c2d9b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create stock_items, sales and expenses tables."""
    op.create_table(
        'stock_items',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Numeric(precision=14, scale=2), nullable=False, server_default=sa.text('0')),
        sa.Column('stock', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.CheckConstraint('price >= 0', name='ck_stock_item_price_non_negative'),
        sa.CheckConstraint('stock >= 0', name='ck_stock_item_stock_non_negative'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_stock_items_created_at', 'stock_items', ['created_at'])

    op.create_table(
        'sales',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('sold_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('stock_item_id', sa.BigInteger(), nullable=True),
        sa.Column('item_name', sa.String(length=255), nullable=False),
        sa.Column('unit_price', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('qty', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('buyer_name', sa.String(length=255), nullable=True),
        sa.CheckConstraint('qty > 0', name='ck_sale_qty_positive'),
        sa.ForeignKeyConstraint(['stock_item_id'], ['stock_items.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_sales_sold_at', 'sales', ['sold_at'])
    op.create_index('ix_sales_stock_item', 'sales', ['stock_item_id'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('bought_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('total_cost', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.CheckConstraint('total_cost >= 0', name='ck_expense_total_cost_non_negative'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_expenses_bought_at', 'expenses', ['bought_at'])


def downgrade() -> None:
    """Drop expenses, sales and stock_items tables."""
    op.drop_index('ix_expenses_bought_at', table_name='expenses')
    op.drop_table('expenses')
    op.drop_index('ix_sales_stock_item', table_name='sales')
    op.drop_index('ix_sales_sold_at', table_name='sales')
    op.drop_table('sales')
    op.drop_index('ix_stock_items_created_at', table_name='stock_items')
    op.drop_table('stock_items')
