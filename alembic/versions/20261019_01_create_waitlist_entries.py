"""create waitlist_entries table

Revision ID: waitlist_entries
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'waitlist_entries'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'waitlist_entries',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('custom_role', sa.String(100), nullable=True),
        sa.Column('ip_hash', sa.String(64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('email', name='uq_waitlist_email'),
    )
    # Serves the per-IP rate limit: WHERE ip_hash = ? AND created_at >= ?
    op.create_index('ix_waitlist_entries_ip_hash_created_at', 'waitlist_entries', ['ip_hash', 'created_at'])

def downgrade():
    op.drop_index('ix_waitlist_entries_ip_hash_created_at', table_name='waitlist_entries')
    op.drop_table('waitlist_entries')
