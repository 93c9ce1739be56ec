"""Activity feed API endpoints."""

from typing import Any, Callable

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel

from eventlog.auth.context import acting_as
from eventlog.auth.types import ActorContext
from eventlog.events import (
    EventQuery,
    EventService,
    SortDirection,
    UnrecognisedEventTypeError,
)


class CreateEventRequest(BaseModel):
    """Request body for recording an event."""

    type: str
    data: Any = None
    createdBy: int | None = None
    ref: int | None = None
    recorded: str | None = None


def actor_from_request(request: Request) -> ActorContext:
    """Actor set on request state by the host app, else an anonymous actor."""
    actor = getattr(request.state, "actor", None)
    if actor is not None:
        return actor
    return ActorContext(url=request.url.path)


def create_events_router(
    get_event_service: Callable[[], EventService],
    get_actor: Callable[[Request], ActorContext] = actor_from_request,
) -> APIRouter:
    """Create the activity feed router.

    Args:
        get_event_service: Returns the EventService to use
        get_actor: Resolves the acting user for a request
    """
    router = APIRouter(prefix="/api", tags=["events"])

    @router.get("/event-types")
    async def list_event_types() -> dict[str, Any]:
        """List registered event types."""
        service = get_event_service()
        return {
            "data": [
                {**t.to_dict(), "displayLabel": t.display_label}
                for t in service.get_all_types().values()
            ]
        }

    @router.get("/events")
    async def list_events(
        page: int = Query(1, ge=1),
        per_page: int = Query(50, ge=1, le=500, alias="perPage"),
        keywords: str | None = None,
        type: str | None = None,
        user: int | None = None,
        sort: str = "created",
        direction: SortDirection = SortDirection.DESC,
    ) -> dict[str, Any]:
        """List events for the activity feed, newest first by default."""
        service = get_event_service()

        where: list[Any] = []
        if type:
            where.append(("type", type))
        if user is not None:
            where.append(("created_by", user))
        query = EventQuery(
            keywords=keywords,
            where=where,
            sort_column=sort,
            sort_direction=direction,
        )

        try:
            total = service.count_all(query)
            results = service.get_all(page, per_page, query)
        except ValueError as e:
            raise HTTPException(400, str(e))

        return {
            "data": [e.to_dict() for e in results],
            "pagination": {
                "total": total,
                "page": page,
                "perPage": per_page,
                "hasMore": page * per_page < total,
            },
        }

    @router.get("/events/{event_id}")
    async def get_event(event_id: int) -> dict[str, Any]:
        """Get a single event."""
        event = get_event_service().get_by_id(event_id)
        if event is None:
            raise HTTPException(404, f"Event {event_id} not found")
        return {"data": event.to_dict()}

    @router.post("/events", status_code=201)
    async def create_event(body: CreateEventRequest, request: Request) -> dict[str, Any]:
        """Record an event as the requesting actor."""
        service = get_event_service()

        with acting_as(get_actor(request)):
            try:
                result = service.create(
                    body.type, body.data, body.createdBy, body.ref, body.recorded
                )
            except UnrecognisedEventTypeError as e:
                raise HTTPException(422, str(e))

        if result is False:
            raise HTTPException(400, service.last_error())

        return {"id": None if result is True else result, "recorded": result is not True}

    @router.delete("/events/{event_id}")
    async def delete_event(event_id: int) -> dict[str, Any]:
        """Delete an event."""
        service = get_event_service()
        if not service.destroy(event_id):
            raise HTTPException(404, service.last_error())
        return {"deleted": True}

    return router
