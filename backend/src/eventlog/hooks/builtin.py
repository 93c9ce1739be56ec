"""Hooks that ship with eventlog."""

import logging
from typing import Any

from eventlog.hooks.registry import HookRegistry

logger = logging.getLogger(__name__)


def log_event(event_type: str, event_data: dict[str, Any]) -> None:
    """Write the recorded event to the application log."""
    logger.info(
        "Event #%s '%s' recorded (by=%s, ref=%s, url=%s)",
        event_data.get("id"),
        event_type,
        event_data.get("created_by") or "system",
        event_data.get("ref"),
        event_data.get("url"),
    )


def register_builtin_hooks() -> None:
    HookRegistry.register("logEvent", log_event)
