"""Core types for the event log.

- EventType: a registered category of event with display metadata and hooks
- EventActor: the user credited with an event (id None = system)
- Event: a persisted event as returned by the read operations
- EventQuery: keyword/where/sort options shared by list and count
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from eventlog.hooks.types import HookSpec


@dataclass(frozen=True)
class EventType:
    """A named category of event.

    Attributes:
        slug: Unique key calling code refers to the type by
        label: Human friendly name
        description: Human friendly description of the event's purpose
        hooks: Hooks fired after an event of this type is created
    """

    slug: str
    label: str = ""
    description: str = ""
    hooks: tuple[HookSpec, ...] = ()

    @property
    def display_label(self) -> str:
        """Label, or the slug title-cased with underscores as spaces."""
        if self.label:
            return self.label
        words = self.slug.replace("_", " ").split(" ")
        return " ".join(w[:1].upper() + w[1:] for w in words)

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "label": self.label,
            "description": self.description,
            "hooks": [h.to_dict() for h in self.hooks],
        }


@dataclass
class EventActor:
    """Identity columns joined in from the user tables."""

    id: int | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_img: str | None = None
    gender: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "profileImg": self.profile_img,
            "gender": self.gender,
        }


@dataclass
class Event:
    """A recorded event, formatted for presentation."""

    id: int
    type: EventType
    url: str | None = None
    data: Any = None
    ref: int | None = None
    created: datetime | None = None
    user: EventActor = field(default_factory=EventActor)

    def to_dict(self) -> dict[str, Any]:
        """Convert to API response dict."""
        return {
            "id": self.id,
            "type": self.type.to_dict(),
            "url": self.url,
            "data": self.data,
            "ref": self.ref,
            "created": self.created.isoformat() if self.created else None,
            "user": self.user.to_dict(),
        }


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class EventQuery:
    """Filtering and ordering for list/count operations.

    Attributes:
        keywords: Free text matched against the type slug and actor email
        where: Conditions, either {"field", "operator", "value"} dicts or
            (field, value) pairs meaning equality
        sort_column: Column to order by
        sort_direction: asc or desc
    """

    keywords: str | None = None
    where: list[Any] = field(default_factory=list)
    sort_column: str = "created"
    sort_direction: SortDirection = SortDirection.DESC
