"""Event recording, event type registry and read-back."""

from eventlog.events.errors import (
    ErrorHandling,
    EventConfigError,
    EventError,
    UnrecognisedEventTypeError,
)
from eventlog.events.loader import EventTypeLoader
from eventlog.events.registry import EventTypeRegistry
from eventlog.events.service import EventService
from eventlog.events.types import (
    Event,
    EventActor,
    EventQuery,
    EventType,
    SortDirection,
)

__all__ = [
    "ErrorHandling",
    "Event",
    "EventActor",
    "EventConfigError",
    "EventError",
    "EventQuery",
    "EventService",
    "EventType",
    "EventTypeLoader",
    "EventTypeRegistry",
    "SortDirection",
    "UnrecognisedEventTypeError",
]
