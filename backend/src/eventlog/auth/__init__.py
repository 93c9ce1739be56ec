"""Actor identity for eventlog."""

from eventlog.auth.context import acting_as, get_current_actor
from eventlog.auth.types import SYSTEM_ACTOR, ActorContext

__all__ = [
    "ActorContext",
    "SYSTEM_ACTOR",
    "acting_as",
    "get_current_actor",
]
