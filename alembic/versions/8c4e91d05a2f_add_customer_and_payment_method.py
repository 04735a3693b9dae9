"""add customer fields and payment method to orders

Revision ID: 8c4e91d05a2f
Revises: 3a1f0c2b7d10
Create Date: 2026-10-14 21:40:12.008314

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c4e91d05a2f'
down_revision: Union[str, Sequence[str], None] = '3a1f0c2b7d10'
branch_labels = None
depends_on = None

payment_method = sa.Enum('cash', 'card', 'upi', name='payment_method')


def upgrade() -> None:
    # enum создаём явно, add_column сам его не создаёт
    payment_method.create(op.get_bind(), checkfirst=True)
    op.add_column('orders', sa.Column('payment_method', payment_method, nullable=True))
    op.add_column('orders', sa.Column('customer_name', sa.String(length=128), nullable=True))
    op.add_column('orders', sa.Column('customer_phone', sa.String(length=32), nullable=True))
    op.add_column('orders', sa.Column('customer_id', sa.String(length=64), nullable=True))
    op.add_column('orders', sa.Column('estimated_time', sa.String(length=64), nullable=True))


def downgrade() -> None:
    # откат - удаляем колонки
    op.drop_column('orders', 'estimated_time')
    op.drop_column('orders', 'customer_id')
    op.drop_column('orders', 'customer_phone')
    op.drop_column('orders', 'customer_name')
    op.drop_column('orders', 'payment_method')
    payment_method.drop(op.get_bind(), checkfirst=True)
