"""Load event type definitions from YAML files.

Modules contribute defaults in their declared load order, then the
application config file is applied last so it can redefine any of them:

    # <module>/config/event_types.yaml
    event_types:
      - slug: user_login
        label: User logged in
        description: A user signed in with a password
        hooks:
          - notifyAdmins
"""

import logging
from pathlib import Path

import yaml

from eventlog.events.errors import EventConfigError
from eventlog.events.registry import EventTypeRegistry

logger = logging.getLogger(__name__)

MODULE_CONFIG_PATH = Path("config") / "event_types.yaml"


class EventTypeLoader:
    """Builds an EventTypeRegistry from module and application config."""

    def __init__(
        self,
        module_paths: list[Path] | None = None,
        app_config_path: Path | None = None,
    ):
        self.module_paths = [Path(p) for p in module_paths or []]
        self.app_config_path = Path(app_config_path) if app_config_path else None

    def load(self, registry: EventTypeRegistry | None = None) -> EventTypeRegistry:
        """Register every configured event type.

        Args:
            registry: Registry to populate; a new one is created if omitted

        Returns:
            The populated registry
        """
        registry = registry if registry is not None else EventTypeRegistry()

        for module_path in self.module_paths:
            self._load_file(module_path / MODULE_CONFIG_PATH, registry)

        if self.app_config_path:
            self._load_file(self.app_config_path, registry)

        logger.debug("Loaded %d event type(s)", len(registry))
        return registry

    def _load_file(self, path: Path, registry: EventTypeRegistry) -> None:
        """Register the event types declared in one file, if it exists."""
        if not path.exists():
            return

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise EventConfigError(f"Invalid YAML in {path}: {e}") from e

        if not data:
            return
        if not isinstance(data, dict):
            raise EventConfigError(f"{path} must be a mapping with an 'event_types' key")
        if not data.get("event_types"):
            return

        definitions = data["event_types"]
        if not isinstance(definitions, list):
            raise EventConfigError(f"'event_types' in {path} must be a list")

        for definition in definitions:
            if not isinstance(definition, dict):
                raise EventConfigError(
                    f"Event type entries in {path} must be mappings, got {definition!r}"
                )
            self._check_hooks(definition, path)
            if not registry.register(definition):
                logger.warning("Skipping event type without a slug in %s", path)
                continue
            logger.debug("Registered event type '%s' from %s", definition["slug"], path)

    @staticmethod
    def _check_hooks(definition: dict, path: Path) -> None:
        """Hooks must be a list of names or {name, description} mappings."""
        hooks = definition.get("hooks")
        if hooks is None:
            return

        slug = definition.get("slug", "?")
        if not isinstance(hooks, list):
            raise EventConfigError(
                f"'hooks' for event type '{slug}' in {path} must be a list, got {hooks!r}"
            )
        for hook in hooks:
            if isinstance(hook, str) and hook:
                continue
            if isinstance(hook, dict) and isinstance(hook.get("name"), str) and hook["name"]:
                continue
            raise EventConfigError(
                f"Hook entry {hook!r} for event type '{slug}' in {path} needs a name"
            )
