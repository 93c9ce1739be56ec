"""Type definitions for the acting user."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ActorContext:
    """Who is responsible for the current unit of work.

    Attributes:
        user_id: The authenticated user's ID, None for system activity
        was_admin: True when an administrator is logged in as another user
        url: Originating URL or other context string for the request
    """

    user_id: int | None = None
    was_admin: bool = False
    url: str | None = None


SYSTEM_ACTOR = ActorContext()
