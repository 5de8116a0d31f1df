"""daily records

Revision ID: 001_daily_records
Revises:
Create Date: 2026-10-19 09:00:00.000000+07:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_daily_records'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'daily_records',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('collection_path', sa.String(length=255), nullable=False),
        sa.Column('branch', sa.String(length=100), nullable=False),
        sa.Column('date', sa.String(length=10), nullable=False),
        sa.Column('sales', sa.String(length=64), nullable=False),
        sa.Column('wage', sa.String(length=64), nullable=False),
        sa.Column('commission', sa.String(length=64), nullable=False),
        sa.Column('updated_at', sa.String(length=40), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_daily_records_collection_path'), 'daily_records', ['collection_path'], unique=False)
    op.create_index('ix_daily_records_path_created', 'daily_records', ['collection_path', 'created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_daily_records_path_created', table_name='daily_records')
    op.drop_index(op.f('ix_daily_records_collection_path'), table_name='daily_records')
    op.drop_table('daily_records')
