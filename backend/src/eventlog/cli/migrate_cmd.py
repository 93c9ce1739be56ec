"""Migrate CLI commands: apply, rollback, stamp, status."""

from pathlib import Path

import click

from eventlog.migrations.runner import (
    apply_migrations,
    get_migration_status,
    rollback_migration,
    stamp_migration,
)
from eventlog.persistence.config import DatabaseConfig


def _resolve_paths() -> tuple[DatabaseConfig, Path]:
    """Database config and revisions directory for the project at cwd."""
    cwd = Path.cwd()
    base_path = cwd.parent if cwd.name == "backend" else cwd
    return DatabaseConfig.from_env(base_path), base_path / "migrations" / "versions"


def _has_migrations(versions_dir: Path) -> bool:
    return versions_dir.exists() and any(versions_dir.glob("*.py"))


def _fail(action: str, error: Exception) -> None:
    click.echo(click.style(f"Error {action}: {error}", fg="red"), err=True)
    raise SystemExit(1)


@click.group()
def migrate():
    """Migration commands."""
    pass


@migrate.command()
@click.option("--to", "target", default=None, help="Apply up to a specific revision.")
def apply(target: str | None):
    """Apply pending migrations."""
    db_config, versions_dir = _resolve_paths()
    if not _has_migrations(versions_dir):
        click.echo("No migrations found.")
        return

    click.echo(f"Applying migrations to: {db_config.url}")
    try:
        apply_migrations(db_config, versions_dir, target=target)
    except Exception as e:
        _fail("applying migrations", e)
    click.echo("Migrations applied successfully.")

    _print_status(db_config, versions_dir)


@migrate.command()
def rollback():
    """Rollback the last applied migration."""
    db_config, versions_dir = _resolve_paths()
    if not _has_migrations(versions_dir):
        click.echo("No migrations found.")
        return

    click.echo(f"Rolling back last migration on: {db_config.url}")
    try:
        rollback_migration(db_config, versions_dir)
    except Exception as e:
        _fail("rolling back", e)
    click.echo("Rollback successful.")

    _print_status(db_config, versions_dir)


@migrate.command()
@click.option("--revision", "-r", default=None, help="Revision to stamp (default: head).")
def stamp(revision: str | None):
    """Mark migrations as applied without running them.

    Use this when adopting migrations on a database whose event tables
    were already created at application startup.
    """
    db_config, versions_dir = _resolve_paths()
    if not _has_migrations(versions_dir):
        click.echo("No migrations found.")
        return

    target = revision or "head"
    click.echo(f"Stamping database as revision '{target}' (no migrations executed).")
    try:
        stamp_migration(db_config, versions_dir, revision=target)
    except Exception as e:
        _fail("stamping", e)
    click.echo("Stamp successful.")

    _print_status(db_config, versions_dir)


@migrate.command()
def status():
    """Show migration status (applied and pending)."""
    db_config, versions_dir = _resolve_paths()
    if not _has_migrations(versions_dir):
        click.echo("No migrations found.")
        return

    _print_status(db_config, versions_dir)


def _print_status(db_config: DatabaseConfig, versions_dir: Path) -> None:
    """Print the applied/pending table; exits 1 if the database can't be read."""
    try:
        infos = get_migration_status(db_config, versions_dir)
    except Exception as e:
        _fail("reading migration status", e)

    applied_count = sum(1 for i in infos if i.is_applied)
    click.echo(
        f"\nMigration status ({applied_count} applied, "
        f"{len(infos) - applied_count} pending):"
    )
    for info in infos:
        marker = "[x]" if info.is_applied else "[ ]"
        click.echo(f"  {marker} {info.revision}: {info.description}")
