"""Event type registry.

Holds the slug -> EventType mapping the recorder validates against.
Populated once at startup (see EventTypeLoader) and read-only afterwards.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from eventlog.events.types import EventType
from eventlog.hooks.types import HookSpec


class EventTypeRegistry:
    """Registry of event types, keyed by slug in registration order.

    Registering an existing slug replaces the earlier definition entirely,
    which is what lets application config override module config.
    """

    def __init__(self) -> None:
        self._types: dict[str, EventType] = {}

    def register(
        self,
        slug: "str | Mapping[str, Any]",
        label: str = "",
        description: str = "",
        hooks: Iterable[Any] = (),
    ) -> bool:
        """Add or replace an event type.

        Args:
            slug: The event's slug, or a mapping holding all values
                (slug, label, description, hooks) as read from config
            label: Human friendly name
            description: Human friendly description
            hooks: HookSpecs, hook names, or {"name", "description"} dicts;
                a single entry is accepted in place of a list

        Returns:
            False if no slug was given, True otherwise
        """
        if isinstance(slug, Mapping):
            data = slug
            slug = data.get("slug") or ""
            label = data.get("label") or ""
            description = data.get("description") or ""
            hooks = data.get("hooks") or ()

        if not slug:
            return False

        if isinstance(hooks, (str, HookSpec, Mapping)):
            hooks = (hooks,)

        self._types[slug] = EventType(
            slug=slug,
            label=label or "",
            description=description or "",
            hooks=tuple(HookSpec.from_config(h) for h in hooks),
        )
        return True

    def lookup(self, slug: str) -> EventType | None:
        """Get an event type by slug."""
        return self._types.get(slug)

    def __contains__(self, slug: object) -> bool:
        return slug in self._types

    def __len__(self) -> int:
        return len(self._types)

    def all(self) -> dict[str, EventType]:
        """All event types in registration order."""
        return dict(self._types)

    def all_flat(self) -> dict[str, str]:
        """Slug -> display label for every registered type."""
        return {slug: t.display_label for slug, t in self._types.items()}

    def hooks_for(self, slug: str) -> list[HookSpec]:
        """Hooks to fire for a slug, empty if the slug is unknown."""
        event_type = self._types.get(slug)
        if event_type is None:
            return []
        return list(event_type.hooks)
