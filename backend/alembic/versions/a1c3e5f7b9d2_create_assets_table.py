"""create assets table

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = 'a1c3e5f7b9d2'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'assets',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('code', sa.String(length=100), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('unit', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('acquisition_date', sa.Date(), nullable=True),
        sa.Column('value', sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column('serial_number', sa.String(length=255), nullable=True),
        sa.Column('color', sa.String(length=100), nullable=True),
        sa.Column('manufacturer', sa.String(length=255), nullable=True),
        sa.Column('model', sa.String(length=255), nullable=True),
        sa.Column('capacity', sa.String(length=100), nullable=True),
        sa.Column('voltage', sa.String(length=50), nullable=True),
        sa.Column('origin', sa.String(length=255), nullable=True),
        sa.Column('condition', sa.String(length=255), nullable=True),
        sa.Column('holder', sa.String(length=255), nullable=True),
        sa.Column('inalienable', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('owner_id', 'code', name='uq_assets_owner_code'),
    )
    op.create_index('ix_assets_owner_created_at', 'assets', ['owner_id', 'created_at'])
    op.create_index('ix_assets_owner_status', 'assets', ['owner_id', 'status'])
    op.create_index('ix_assets_owner_location', 'assets', ['owner_id', 'location'])
    op.create_index('ix_assets_owner_unit', 'assets', ['owner_id', 'unit'])


def downgrade() -> None:
    op.drop_index('ix_assets_owner_unit', table_name='assets')
    op.drop_index('ix_assets_owner_location', table_name='assets')
    op.drop_index('ix_assets_owner_status', table_name='assets')
    op.drop_index('ix_assets_owner_created_at', table_name='assets')
    op.drop_table('assets')
