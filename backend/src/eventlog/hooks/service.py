"""Hook execution service for eventlog.

Fires the hooks attached to an event type once the event row exists.
Hook failures never propagate to the caller.
"""

import logging
from typing import Any

from eventlog.hooks.registry import HookRegistry
from eventlog.hooks.types import HookSpec

logger = logging.getLogger(__name__)


class HookService:
    """Runs the hooks of an event type sequentially in declared order."""

    def fire(
        self,
        event_type: str,
        hooks: list[HookSpec],
        event_data: dict[str, Any],
    ) -> list[str]:
        """Invoke each hook with (event_type, event_data).

        Args:
            event_type: Slug of the event that was recorded
            hooks: Hook specs from the event type (in declared order)
            event_data: The row data as it was written

        Returns:
            Names of the hooks that ran to completion.
        """
        completed: list[str] = []

        for spec in hooks:
            if not spec.name:
                continue

            # Resolve the hook function
            try:
                hook_fn = HookRegistry.get(spec.name)
            except ValueError:
                logger.warning(
                    "Hook '%s' for event '%s' is not registered, skipping",
                    spec.name,
                    event_type,
                )
                continue

            # Hooks get their own copy so one cannot alter what the next sees
            try:
                hook_fn(event_type, dict(event_data))
            except Exception as e:
                logger.error(
                    "Hook '%s' for event '%s' failed: %s",
                    spec.name,
                    event_type,
                    e,
                )
                continue

            completed.append(spec.name)

        return completed
