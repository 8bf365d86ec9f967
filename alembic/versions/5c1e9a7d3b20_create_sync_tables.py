"""create sync records and synced items tables

Revision ID: 5c1e9a7d3b20
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e9a7d3b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add sync markers and the JSON store of synced upstream objects."""
    op.create_table('sync_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('resource', sa.String(length=100), nullable=False),
        sa.Column('scope', sa.String(length=200), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_sync_records_resource_scope', 'sync_records', ['resource', 'scope'])

    op.create_table('synced_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('resource', sa.String(length=100), nullable=False),
        sa.Column('scope', sa.String(length=200), nullable=False),
        sa.Column('key', sa.String(length=200), nullable=False),
        sa.Column('parent_key', sa.String(length=200), nullable=True),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('resource', 'scope', 'key', name='uq_synced_item_resource_scope_key')
    )
    op.create_index('ix_synced_items_parent', 'synced_items', ['resource', 'scope', 'parent_key'])


def downgrade() -> None:
    """Remove both sync tables."""
    op.drop_index('ix_synced_items_parent', table_name='synced_items')
    op.drop_table('synced_items')
    op.drop_index('ix_sync_records_resource_scope', table_name='sync_records')
    op.drop_table('sync_records')
