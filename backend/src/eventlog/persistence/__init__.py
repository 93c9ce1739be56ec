"""Persistence layer - database config, schema and event store."""

from eventlog.persistence.config import DatabaseConfig, create_db_engine
from eventlog.persistence.store import EventStore

__all__ = ["DatabaseConfig", "EventStore", "create_db_engine"]
