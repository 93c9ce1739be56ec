"""Hook handler registry.

Event type configuration names the hooks an event fires; this registry
maps those names to the callables that handle them. Handlers are
registered at startup, either directly or with @event_hook in a module
listed in EVENTLOG_HOOK_MODULES.
"""

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

# (event_type, event_data) -> ignored
HookFn = Callable[[str, dict[str, Any]], Any]


class HookRegistry:
    """Process-wide name -> handler mapping.

    A name keeps the first handler registered for it. Registering the same
    handler again is harmless; registering a different one is logged and
    ignored, so a later import cannot silently replace a hook.
    """

    _handlers: dict[str, HookFn] = {}

    @classmethod
    def register(cls, name: str, hook_fn: HookFn) -> bool:
        """Register a handler under a hook name.

        Returns:
            True if the name now maps to hook_fn
        """
        existing = cls._handlers.get(name)
        if existing is None:
            cls._handlers[name] = hook_fn
            return True
        if existing is hook_fn:
            return True

        logger.warning(
            "Hook '%s' is already handled by %s; ignoring %s",
            name,
            _describe(existing),
            _describe(hook_fn),
        )
        return False

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._handlers.pop(name, None)

    @classmethod
    def get(cls, name: str) -> HookFn:
        """Handler for a hook name.

        Raises:
            ValueError: If nothing is registered under the name
        """
        try:
            return cls._handlers[name]
        except KeyError:
            raise ValueError(f"Hook '{name}' is not registered") from None

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._handlers

    @classmethod
    def list_registered(cls) -> list[str]:
        """Registered hook names, sorted."""
        return sorted(cls._handlers)

    @classmethod
    def names_for(cls, hook_fn: HookFn) -> list[str]:
        """Every hook name a handler is registered under, sorted."""
        return sorted(name for name, fn in cls._handlers.items() if fn is hook_fn)

    @classmethod
    def clear(cls) -> None:
        cls._handlers.clear()


def event_hook(*names: str) -> Callable[[HookFn], HookFn]:
    """Register the decorated function under one or more hook names.

    One handler can serve several event types by being listed under
    different names in their configuration:

        @event_hook("notifyAdmins", "auditTrail")
        def record_for_admins(event_type, event_data):
            ...
    """
    if not names:
        raise ValueError("event_hook needs at least one hook name")

    def decorator(fn: HookFn) -> HookFn:
        for name in names:
            HookRegistry.register(name, fn)
        return fn

    return decorator


def _describe(fn: HookFn) -> str:
    module = getattr(fn, "__module__", None) or "?"
    return f"{module}.{getattr(fn, '__qualname__', repr(fn))}"
