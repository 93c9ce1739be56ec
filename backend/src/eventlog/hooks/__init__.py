"""eventlog post-create hook system.

Hooks run after an event row has been written. Each event type lists
the hooks it fires; the handlers themselves are registered by name at
application startup.

Usage:
    from eventlog.hooks import event_hook

    @event_hook("notifyAdmins")
    def notify_admins(event_type: str, event_data: dict) -> None:
        send_mail(event_type, event_data["created_by"])
"""

from eventlog.hooks.registry import HookFn, HookRegistry, event_hook
from eventlog.hooks.service import HookService
from eventlog.hooks.types import HookSpec

__all__ = [
    "HookFn",
    "HookRegistry",
    "HookService",
    "HookSpec",
    "event_hook",
]
