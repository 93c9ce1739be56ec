"""Current-actor accessor.

The host application sets the actor for each request (middleware, CLI
options); the event service reads it when no explicit creator is given.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from eventlog.auth.types import SYSTEM_ACTOR, ActorContext

_current_actor: ContextVar[ActorContext] = ContextVar(
    "eventlog_current_actor", default=SYSTEM_ACTOR
)


def get_current_actor() -> ActorContext:
    """Return the actor for the running request, or the system actor."""
    return _current_actor.get()


@contextmanager
def acting_as(actor: ActorContext) -> Iterator[ActorContext]:
    """Set the current actor for the duration of a block.

    Usage:
        with acting_as(ActorContext(user_id=7, url="/account/password")):
            service.create("password_changed")
    """
    token = _current_actor.set(actor)
    try:
        yield actor
    finally:
        _current_actor.reset(token)
