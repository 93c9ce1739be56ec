"""Alembic environment for the event log revisions.

runner.py opens the connection itself (so the database location is
resolved the same way as for the event store) and hands it over through
``config.attributes["connection"]``. Revisions run in batch mode because
SQLite cannot ALTER most constraints in place.
"""

from alembic import context
from sqlalchemy import create_engine, pool


def _run(connection) -> None:
    context.configure(connection=connection, render_as_batch=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connection = context.config.attributes.get("connection")
    if connection is not None:
        _run(connection)
        return

    # Invoked through the alembic command line with sqlalchemy.url set
    engine = create_engine(
        context.config.get_main_option("sqlalchemy.url"), poolclass=pool.NullPool
    )
    with engine.connect() as connection:
        _run(connection)


run_migrations_online()
