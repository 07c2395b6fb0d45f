"""Create parts and part_history tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create parts table keyed by the user-chosen part ID
    op.create_table('parts',
    sa.Column('id', sa.String(100), nullable=False),
    sa.Column('name', sa.String(255), nullable=False),
    sa.Column('location', sa.String(255), nullable=True),
    sa.Column('serial_number', sa.String(255), nullable=True),
    sa.Column('project_name', sa.String(255), nullable=True),
    sa.Column('project_number', sa.String(100), nullable=True),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('quantity', sa.Integer(), nullable=False),
    sa.Column('status', sa.String(20), server_default='Received', nullable=False),
    sa.Column('version', sa.Integer(), server_default='1', nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.CheckConstraint('quantity >= 0', name='ck_parts_quantity_non_negative'),
    sa.PrimaryKeyConstraint('id')
    )

    # Create append-only part_history table
    op.create_table('part_history',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('part_id', sa.String(100), nullable=False),
    sa.Column('type', sa.String(20), nullable=False),
    sa.Column('change', sa.Integer(), nullable=True),
    sa.Column('old_status', sa.String(20), nullable=True),
    sa.Column('new_status', sa.String(20), nullable=True),
    sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
    sa.Column('user', sa.String(255), nullable=False),
    sa.ForeignKeyConstraint(['part_id'], ['parts.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )

    # Add indexes for search and history lookups
    op.create_index('ix_parts_serial_number', 'parts', ['serial_number'])
    op.create_index('ix_parts_project_number', 'parts', ['project_number'])
    op.create_index('ix_parts_status', 'parts', ['status'])
    op.create_index('ix_part_history_part_id', 'part_history', ['part_id'])
    op.create_index('ix_part_history_timestamp', 'part_history', ['timestamp'])


def downgrade() -> None:
    op.drop_index('ix_part_history_timestamp', table_name='part_history')
    op.drop_index('ix_part_history_part_id', table_name='part_history')
    op.drop_index('ix_parts_status', table_name='parts')
    op.drop_index('ix_parts_project_number', table_name='parts')
    op.drop_index('ix_parts_serial_number', table_name='parts')
    op.drop_table('part_history')
    op.drop_table('parts')
