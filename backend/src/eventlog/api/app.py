"""FastAPI application for the admin activity feed."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from eventlog.api.endpoints import create_events_router
from eventlog.config import Settings
from eventlog.events import EventService
from eventlog.services import build_event_service, set_event_service

logger = logging.getLogger(__name__)


def create_app(service: EventService | None = None) -> FastAPI:
    """Create the API app.

    Args:
        service: EventService to serve. When omitted, one is built from
            environment settings at startup and installed as the
            process-wide service used by create_event().
    """
    state: dict[str, EventService] = {}

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if service is not None:
            state["service"] = service
        else:
            cwd = Path.cwd()
            base_path = cwd.parent if cwd.name == "backend" else cwd
            settings = Settings.from_env(base_path)
            state["service"] = build_event_service(settings)
            set_event_service(state["service"])
            logger.info(
                "Event log ready (%s, %d event type(s))",
                settings.environment,
                len(state["service"].get_all_types()),
            )
            if settings.is_production:
                logger.info("Production: events by impersonating admins are not recorded")
        yield
        if service is None:
            set_event_service(None)
        state.clear()

    app = FastAPI(title="eventlog API", lifespan=lifespan)
    app.include_router(create_events_router(get_event_service=lambda: state["service"]))
    return app
