"""convert serialized event data to json"""

revision = "0003"
down_revision = "0002"

import json

from alembic import op
import phpserialize
import sqlalchemy as sa


def _json_value(value):
    """PHP arrays come back as dicts; list-shaped ones become JSON arrays."""
    if isinstance(value, dict):
        if list(value) == list(range(len(value))):
            return [_json_value(v) for v in value.values()]
        return {str(k): _json_value(v) for k, v in value.items()}
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    return value


def upgrade():
    conn = op.get_bind()
    rows = conn.execute(
        sa.text("SELECT id, data FROM event WHERE data IS NOT NULL")
    ).fetchall()

    for event_id, data in rows:
        try:
            json.loads(data)
            continue
        except ValueError:
            pass

        try:
            value = phpserialize.loads(
                data.encode("utf-8"),
                decode_strings=True,
                object_hook=lambda name, d: d,
            )
        except (ValueError, TypeError):
            # Neither JSON nor serialized; left for the reader to return as-is
            continue

        conn.execute(
            sa.text("UPDATE event SET data = :data WHERE id = :id"),
            {"data": json.dumps(_json_value(value)), "id": event_id},
        )


def downgrade():
    # JSON is readable by every version; nothing to restore
    pass
