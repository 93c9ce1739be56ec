"""Database configuration and engine factory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine


@dataclass
class DatabaseConfig:
    """Database connection configuration.

    Supports sqlite:/// and postgresql:// URL schemes.
    """

    url: str

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> DatabaseConfig:
        """Create config from environment variables.

        Resolution order:
        1. DATABASE_URL env var (standard)
        2. EVENTLOG_DB_PATH env var (converted to sqlite:/// URL)
        3. Default: sqlite:///{base_path}/data/eventlog.db
        """
        url = os.environ.get("DATABASE_URL")
        if url:
            return cls(url=url)

        db_path = os.environ.get("EVENTLOG_DB_PATH")
        if db_path:
            return cls(url=f"sqlite:///{db_path}")

        if base_path:
            return cls(url=f"sqlite:///{base_path / 'data' / 'eventlog.db'}")

        return cls(url="sqlite:///eventlog.db")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_postgresql(self) -> bool:
        return self.url.startswith("postgresql")

    @property
    def sqlite_path(self) -> str | None:
        """Filesystem path of a sqlite database, None for in-memory or other engines."""
        if not self.is_sqlite:
            return None
        path = self.url.replace("sqlite:///", "")
        if not path or path == ":memory:":
            return None
        return path

    @property
    def sqlalchemy_url(self) -> str:
        """URL suitable for SQLAlchemy engine creation.

        Ensures postgresql:// URLs use the psycopg (v3) driver.
        """
        if self.url.startswith("postgresql://"):
            return self.url.replace("postgresql://", "postgresql+psycopg://", 1)
        return self.url


def create_db_engine(config: DatabaseConfig) -> Engine:
    """Create the shared engine for a database config.

    Creates the parent directory of a sqlite file if needed.
    """
    sqlite_path = config.sqlite_path
    if sqlite_path:
        Path(sqlite_path).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(config.sqlalchemy_url)
