"""add participating units

Revision ID: 8b2e4c1d9a57
Revises: 3f1c9a7d2b40
Create Date: 2026-10-17 15:40:02.511870

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b2e4c1d9a57'
down_revision: Union[str, None] = '3f1c9a7d2b40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'eom_participating_units',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('work_unit_id', sa.Integer(), nullable=False, unique=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_eom_participating_units_id', 'eom_participating_units', ['id'])


def downgrade() -> None:
    op.drop_index('ix_eom_participating_units_id', table_name='eom_participating_units')
    op.drop_table('eom_participating_units')
