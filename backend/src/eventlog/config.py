"""Application settings for eventlog."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from eventlog.environment import ENV_DEVELOPMENT, KNOWN_ENVIRONMENTS, is_production
from eventlog.persistence.config import DatabaseConfig

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Runtime settings.

    Attributes:
        database: Database connection config
        environment: Deployment profile (production, staging, development, testing)
        module_paths: Module directories, in load order, that may ship
            config/event_types.yaml
        app_config_path: Application-level event type overrides
        hook_modules: Importable modules whose @event_hook handlers should
            be registered at startup
    """

    database: DatabaseConfig
    environment: str = ENV_DEVELOPMENT
    module_paths: list[Path] = field(default_factory=list)
    app_config_path: Path | None = None
    hook_modules: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> Settings:
        """Create settings from environment variables.

        - Database: see DatabaseConfig.from_env
        - EVENTLOG_ENV: deployment profile (default: development)
        - EVENTLOG_MODULES: os.pathsep-separated module directories
        - EVENTLOG_APP_CONFIG: app override file
          (default: {base_path}/config/event_types.yaml)
        - EVENTLOG_HOOK_MODULES: comma-separated dotted module names
        """
        environment = os.environ.get("EVENTLOG_ENV", "").strip().lower() or ENV_DEVELOPMENT
        if environment not in KNOWN_ENVIRONMENTS:
            logger.warning(
                "Unknown EVENTLOG_ENV '%s' (expected one of %s); treating it as non-production",
                environment,
                ", ".join(KNOWN_ENVIRONMENTS),
            )

        modules = os.environ.get("EVENTLOG_MODULES", "")
        module_paths = [Path(p) for p in modules.split(os.pathsep) if p]

        app_config = os.environ.get("EVENTLOG_APP_CONFIG")
        if app_config:
            app_config_path: Path | None = Path(app_config)
        elif base_path:
            app_config_path = base_path / "config" / "event_types.yaml"
        else:
            app_config_path = None

        hook_modules = [
            m.strip() for m in os.environ.get("EVENTLOG_HOOK_MODULES", "").split(",") if m.strip()
        ]

        return cls(
            database=DatabaseConfig.from_env(base_path),
            environment=environment,
            module_paths=module_paths,
            app_config_path=app_config_path,
            hook_modules=hook_modules,
        )

    @property
    def is_production(self) -> bool:
        return is_production(self.environment)
