"""Hook system types for eventlog.

Defines the data structure an event type uses to reference its hooks:
- HookSpec: a named reference to a registered hook handler
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class HookSpec:
    """Reference to a hook handler from event type configuration.

    Attributes:
        name: Registered hook name (e.g., "notifyAdmins")
        description: Human-readable description
    """

    name: str
    description: str = ""

    @classmethod
    def from_config(cls, data: "str | dict[str, Any] | HookSpec") -> "HookSpec":
        """Create HookSpec from a YAML entry (bare name or mapping)."""
        if isinstance(data, HookSpec):
            return data
        if isinstance(data, str):
            return cls(name=data)
        if not data.get("name"):
            raise ValueError(f"Hook entry {data!r} has no name")
        return cls(
            name=data["name"],
            description=data.get("description") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description}
