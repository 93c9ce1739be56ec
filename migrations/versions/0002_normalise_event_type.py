"""move event type slugs into event_type"""

revision = "0002"
down_revision = "0001"

from alembic import op
import sqlalchemy as sa


def upgrade():
    op.create_table(
        'event_type',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('slug', sa.String(50), nullable=False, unique=True),
        sa.Column('label', sa.String(150), nullable=False, server_default=''),
        sa.Column('description', sa.Text(), nullable=True),
    )
    op.execute(
        "INSERT INTO event_type (slug, label) "
        "SELECT DISTINCT type, '' FROM event"
    )

    with op.batch_alter_table('event') as batch:
        batch.add_column(sa.Column('type_id', sa.Integer(), nullable=True))

    op.execute(
        "UPDATE event SET type_id = "
        "(SELECT et.id FROM event_type et WHERE et.slug = event.type)"
    )

    with op.batch_alter_table('event') as batch:
        batch.alter_column('type_id', existing_type=sa.Integer(), nullable=False)
        batch.create_foreign_key('fk_event_type_id', 'event_type', ['type_id'], ['id'])
        batch.drop_column('type')


def downgrade():
    with op.batch_alter_table('event') as batch:
        batch.add_column(sa.Column('type', sa.String(50), nullable=False, server_default=''))

    op.execute(
        "UPDATE event SET type = "
        "(SELECT et.slug FROM event_type et WHERE et.id = event.type_id)"
    )

    with op.batch_alter_table('event') as batch:
        batch.drop_constraint('fk_event_type_id', type_='foreignkey')
        batch.drop_column('type_id')

    op.drop_table('event_type')
