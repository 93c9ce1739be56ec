"""Persistence for recorded events.

Event rows reference event_type by id; read queries join the type slug
and the actor's identity (user + primary user_email) back in.

The store is handed a SQLAlchemy engine by its owner, so it is
dialect-neutral (SQLite and PostgreSQL) and holds no process-wide state.
"""

from typing import Any

from sqlalchemy import DateTime, text
from sqlalchemy.engine import Engine

from eventlog.events.types import EventQuery, EventType, SortDirection
from eventlog.persistence.schema import event_table, event_type_table, metadata

TABLE_ALIAS = "e"

# Filterable fields -> qualified columns
FIELD_COLUMNS = {
    "id": "e.id",
    "type": "et.slug",
    "url": "e.url",
    "ref": "e.ref",
    "created": "e.created",
    "created_by": "e.created_by",
    "email": "ue.email",
}

SORT_COLUMNS = {
    "id": "e.id",
    "type": "et.slug",
    "ref": "e.ref",
    "created": "e.created",
    "created_by": "e.created_by",
}

_SELECT = """
    SELECT e.id, e.url, e.data, e.ref, e.created, e.created_by,
           et.slug AS type,
           ue.email, u.first_name, u.last_name, u.profile_img, u.gender
"""

_FROM = """
    FROM event e
    JOIN event_type et ON et.id = e.type_id
    LEFT JOIN "user" u ON e.created_by = u.id
    LEFT JOIN user_email ue ON ue.user_id = u.id AND ue.is_primary = :is_primary
"""


class EventStore:
    """Reads and writes the event and event_type tables."""

    def __init__(self, engine: Engine):
        self._engine = engine
        self._ensure_tables()

    @property
    def table_name(self) -> str:
        return event_table.name

    @property
    def table_alias(self) -> str:
        return TABLE_ALIAS

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_tables(self) -> None:
        """Create the event tables (and missing identity tables)."""
        metadata.create_all(self._engine, checkfirst=True)

    def _build_condition(self, cond: Any, index: int) -> tuple[str, dict[str, Any]]:
        """Build SQL for one where entry.

        Accepts {"field", "operator", "value"} dicts or (field, value) pairs.
        """
        if isinstance(cond, dict):
            field = cond["field"]
            op = cond.get("operator", "eq")
            value = cond.get("value")
        else:
            field, value = cond
            op = "eq"

        if field not in FIELD_COLUMNS:
            raise ValueError(f"Unknown field '{field}' in where")
        column = FIELD_COLUMNS[field]
        p = f"w{index}"

        if op == "eq":
            return f"{column} = :{p}", {p: value}
        elif op == "neq":
            return f"{column} != :{p}", {p: value}
        elif op == "gt":
            return f"{column} > :{p}", {p: value}
        elif op == "gte":
            return f"{column} >= :{p}", {p: value}
        elif op == "lt":
            return f"{column} < :{p}", {p: value}
        elif op == "lte":
            return f"{column} <= :{p}", {p: value}
        elif op in ("in", "notIn"):
            names = [f"{p}_{i}" for i in range(len(value))]
            if not names:
                # Nothing matches an empty IN list
                return ("1 = 0" if op == "in" else "1 = 1"), {}
            keyword = "IN" if op == "in" else "NOT IN"
            placeholders = ", ".join(f":{n}" for n in names)
            return f"{column} {keyword} ({placeholders})", dict(zip(names, value))
        elif op == "contains":
            return f"{column} LIKE :{p}", {p: f"%{value}%"}
        elif op == "startsWith":
            return f"{column} LIKE :{p}", {p: f"{value}%"}
        elif op == "isNull":
            return f"{column} IS NULL", {}
        elif op == "isNotNull":
            return f"{column} IS NOT NULL", {}
        elif op == "between":
            return (
                f"{column} BETWEEN :{p}_lo AND :{p}_hi",
                {f"{p}_lo": value[0], f"{p}_hi": value[1]},
            )

        raise ValueError(f"Unsupported operator '{op}' in where")

    def _build_where(self, query: EventQuery) -> tuple[str, dict[str, Any]]:
        """WHERE clause shared by select and count."""
        conditions: list[str] = []
        params: dict[str, Any] = {"is_primary": True}

        if query.keywords:
            # Types are searched by slug, so "password changed" matches password_changed
            conditions.append("(et.slug LIKE :kw_slug OR ue.email LIKE :kw_email)")
            params["kw_slug"] = f"%{query.keywords.lower().replace(' ', '_')}%"
            params["kw_email"] = f"%{query.keywords}%"

        for i, cond in enumerate(query.where):
            sql_cond, values = self._build_condition(cond, i)
            conditions.append(sql_cond)
            params.update(values)

        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        return where, params

    def _build_order(self, query: EventQuery) -> str:
        if query.sort_column not in SORT_COLUMNS:
            raise ValueError(f"Unknown sort column '{query.sort_column}'")
        direction = "ASC" if SortDirection(query.sort_direction) == SortDirection.ASC else "DESC"
        column = SORT_COLUMNS[query.sort_column]
        if column == "e.id":
            return f" ORDER BY e.id {direction}"
        return f" ORDER BY {column} {direction}, e.id {direction}"

    # ------------------------------------------------------------------
    # Event types
    # ------------------------------------------------------------------

    def upsert_type(self, event_type: EventType) -> int:
        """Make sure an event_type row matches the registered type.

        Returns:
            The event_type id
        """
        with self._engine.connect() as conn:
            row = conn.execute(
                text("SELECT id, label, description FROM event_type WHERE slug = :slug"),
                {"slug": event_type.slug},
            ).mappings().fetchone()

            if row is None:
                result = conn.execute(
                    event_type_table.insert().values(
                        slug=event_type.slug,
                        label=event_type.label,
                        description=event_type.description,
                    )
                )
                conn.commit()
                return result.inserted_primary_key[0]

            if row["label"] != event_type.label or row["description"] != event_type.description:
                conn.execute(
                    text(
                        "UPDATE event_type SET label = :label, description = :description "
                        "WHERE id = :id"
                    ),
                    {
                        "label": event_type.label,
                        "description": event_type.description,
                        "id": row["id"],
                    },
                )
                conn.commit()
            return row["id"]

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def insert(self, values: dict[str, Any]) -> int | None:
        """Insert one event row.

        Omitting "created" lets the database stamp the current time.

        Returns:
            The new id, or None if no row was written
        """
        with self._engine.connect() as conn:
            result = conn.execute(event_table.insert().values(**values))
            conn.commit()
            if not result.rowcount:
                return None
            return result.inserted_primary_key[0]

    def delete(self, event_id: int) -> bool:
        """Delete an event. Returns True if a row was removed."""
        with self._engine.connect() as conn:
            result = conn.execute(
                text("DELETE FROM event WHERE id = :id"),
                {"id": event_id},
            )
            conn.commit()
            return result.rowcount > 0

    def select(
        self,
        query: EventQuery,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Fetch raw joined event rows."""
        where, params = self._build_where(query)
        sql = f"{_SELECT}{_FROM}{where}{self._build_order(query)}"

        if limit is not None:
            sql += " LIMIT :limit OFFSET :offset"
            params["limit"] = limit
            params["offset"] = offset

        with self._engine.connect() as conn:
            rows = conn.execute(
                text(sql).columns(created=DateTime),
                params,
            ).mappings().fetchall()

        return [dict(row) for row in rows]

    def count(self, query: EventQuery) -> int:
        """Count events matching a query."""
        where, params = self._build_where(query)
        with self._engine.connect() as conn:
            return conn.execute(text(f"SELECT COUNT(*){_FROM}{where}"), params).scalar_one()
