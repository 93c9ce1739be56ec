"""create event table"""

revision = "0001"
down_revision = None

from alembic import op
import sqlalchemy as sa


def upgrade():
    op.create_table(
        'event',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('type', sa.String(50), nullable=False, server_default=''),
        sa.Column('url', sa.String(300), nullable=True),
        sa.Column('data', sa.Text(), nullable=True),
        sa.Column('ref', sa.Integer(), nullable=True),
        sa.Column('created', sa.DateTime(), nullable=False,
                  server_default=sa.func.current_timestamp()),
        sa.Column('created_by', sa.Integer(), nullable=True),
    )
    op.create_index('ix_event_created_by', 'event', ['created_by'])


def downgrade():
    op.drop_index('ix_event_created_by', 'event')
    op.drop_table('event')
