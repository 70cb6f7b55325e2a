"""add_sale_status

Revision ID: 7b4e9d0c2a58
Revises: 3f1a7c2d9b10
Create Date: 2026-01-19 10:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7b4e9d0c2a58'
down_revision: Union[str, Sequence[str], None] = '3f1a7c2d9b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add payment status to sales; existing rows become 'lunas'."""
    op.add_column(
        'sales',
        sa.Column('status', sa.String(length=20), nullable=False, server_default='lunas'),
    )
    op.create_check_constraint(
        'sale_status', 'sales', "status IN ('lunas', 'belum_bayar')"
    )


def downgrade() -> None:
    """Remove payment status from sales."""
    op.drop_constraint('sale_status', 'sales', type_='check')
    op.drop_column('sales', 'status')
