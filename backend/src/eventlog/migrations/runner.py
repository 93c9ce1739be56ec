"""Alembic migration runner.

Drives the revisions under ``migrations/versions`` through Alembic's
command API. The environment script is the env.py next to this module;
the revisions directory is passed in, so an installed package can migrate
any project's database without an alembic.ini.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy.engine import Connection

from eventlog.persistence.config import DatabaseConfig, create_db_engine

ENV_DIR = Path(__file__).parent


@dataclass
class MigrationInfo:
    """One revision and whether the database has it."""

    revision: str
    description: str
    is_applied: bool


def _alembic_config(versions_dir: Path, connection: Connection | None = None) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(ENV_DIR))
    cfg.set_main_option("version_locations", str(versions_dir))
    cfg.set_main_option("path_separator", "os")
    cfg.set_main_option("version_path_separator", "os")
    if connection is not None:
        cfg.attributes["connection"] = connection
    return cfg


@contextmanager
def _migration_connection(db_config: DatabaseConfig) -> Iterator[Connection]:
    """Connection shared with env.py; commits when the command succeeds."""
    engine = create_db_engine(db_config)
    try:
        with engine.begin() as conn:
            yield conn
    finally:
        engine.dispose()


def apply_migrations(
    db_config: DatabaseConfig,
    versions_dir: Path,
    target: str | None = None,
) -> None:
    """Upgrade to target (default: head)."""
    with _migration_connection(db_config) as conn:
        command.upgrade(_alembic_config(versions_dir, conn), target or "head")


def stamp_migration(
    db_config: DatabaseConfig,
    versions_dir: Path,
    revision: str = "head",
) -> None:
    """Record a revision as applied without running anything.

    For databases whose tables EventStore already created at startup.
    """
    with _migration_connection(db_config) as conn:
        command.stamp(_alembic_config(versions_dir, conn), revision)


def rollback_migration(db_config: DatabaseConfig, versions_dir: Path) -> None:
    """Downgrade by one revision."""
    with _migration_connection(db_config) as conn:
        command.downgrade(_alembic_config(versions_dir, conn), "-1")


def get_migration_status(db_config: DatabaseConfig, versions_dir: Path) -> list[MigrationInfo]:
    """Every revision, oldest first, flagged applied or pending."""
    script = ScriptDirectory.from_config(_alembic_config(versions_dir))

    with _migration_connection(db_config) as conn:
        heads = MigrationContext.configure(conn).get_current_heads()

    applied = (
        {rev.revision for rev in script.iterate_revisions(heads, "base")} if heads else set()
    )

    revisions = list(script.walk_revisions())
    revisions.reverse()
    return [
        MigrationInfo(
            revision=rev.revision,
            description=rev.doc or "",
            is_applied=rev.revision in applied,
        )
        for rev in revisions
    ]
