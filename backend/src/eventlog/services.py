"""Service wiring and the create_event helper.

Application code that only needs to emit events calls create_event()
and never touches EventService directly:

    from eventlog.services import create_event

    create_event("password_changed", {"ip": request.client.host}, ref=user.id)
"""

from __future__ import annotations

import importlib
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from eventlog.config import Settings
from eventlog.events.errors import EventConfigError
from eventlog.events.loader import EventTypeLoader
from eventlog.events.service import EventService
from eventlog.hooks.builtin import register_builtin_hooks
from eventlog.persistence.config import create_db_engine
from eventlog.persistence.store import EventStore

logger = logging.getLogger(__name__)

_event_service: EventService | None = None


def build_event_service(settings: Settings) -> EventService:
    """Create an EventService from settings.

    Registers the builtin hooks, imports the configured hook modules so
    their @event_hook handlers register, loads event types from the
    configured modules and app override file, ensures the tables exist,
    and syncs the types into event_type.

    Raises:
        EventConfigError: If a hook module cannot be imported or the
            event type config is invalid
    """
    register_builtin_hooks()
    import_hook_modules(settings.hook_modules)

    registry = EventTypeLoader(settings.module_paths, settings.app_config_path).load()
    store = EventStore(create_db_engine(settings.database))
    service = EventService(store, registry, environment=settings.environment)
    service.sync_types()
    return service


def get_event_service() -> EventService:
    """Return the process-wide EventService, building it on first use."""
    global _event_service
    if _event_service is None:
        _event_service = build_event_service(Settings.from_env(Path.cwd()))
    return _event_service


def set_event_service(service: EventService | None) -> None:
    """Replace the process-wide EventService (None resets it).

    Applications use this to install a customised service at startup.
    """
    global _event_service
    _event_service = service


def create_event(
    event_type: str,
    data: Any = None,
    created_by: int | None = None,
    ref: int | None = None,
    recorded: str | datetime | None = None,
) -> int | bool:
    """Record an event with the process-wide service.

    See EventService.create for the arguments and return value.
    """
    return get_event_service().create(event_type, data, created_by, ref, recorded)


def import_hook_modules(names: list[str]) -> None:
    """Import modules that register hook handlers as a side effect."""
    for name in names:
        try:
            importlib.import_module(name)
        except ImportError as e:
            raise EventConfigError(f"Could not import hook module '{name}': {e}") from e
        logger.debug("Imported hook module %s", name)
