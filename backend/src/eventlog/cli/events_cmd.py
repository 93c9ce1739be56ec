"""Event CLI commands: list types, list/show/create/delete events."""

import json
from pathlib import Path

import click

from eventlog.config import Settings
from eventlog.events import (
    Event,
    EventConfigError,
    EventQuery,
    EventService,
    UnrecognisedEventTypeError,
)
from eventlog.services import build_event_service


def _resolve_base_path() -> Path:
    """Resolve the project base path from cwd."""
    cwd = Path.cwd()
    if cwd.name == "backend":
        return cwd.parent
    return cwd


def _load_service() -> EventService:
    try:
        return build_event_service(Settings.from_env(_resolve_base_path()))
    except EventConfigError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)


def _format_actor(event: Event) -> str:
    if event.user.id is None:
        return "system"
    return event.user.email or f"user #{event.user.id}"


@click.group()
def types():
    """Event type commands."""
    pass


@types.command("list")
def list_types():
    """List registered event types."""
    service = _load_service()
    event_types = service.get_all_types()

    if not event_types:
        click.echo("No event types registered.")
        return

    click.echo(f"{len(event_types)} event type(s):")
    for slug, event_type in event_types.items():
        hooks = ", ".join(h.name for h in event_type.hooks)
        line = f"  {slug}: {event_type.display_label}"
        if hooks:
            line += f" (hooks: {hooks})"
        click.echo(line)


@click.group()
def events():
    """Event commands."""
    pass


@events.command("list")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--per-page", type=int, default=20, show_default=True)
@click.option("--keywords", "-k", default=None, help="Match type slug or actor email.")
@click.option("--type", "event_type", default=None, help="Only events of this type.")
@click.option("--user", "user_id", type=int, default=None, help="Only events by this user.")
def list_events(
    page: int,
    per_page: int,
    keywords: str | None,
    event_type: str | None,
    user_id: int | None,
):
    """List recorded events, newest first."""
    service = _load_service()

    where: list = []
    if event_type:
        where.append(("type", event_type))
    if user_id is not None:
        where.append(("created_by", user_id))
    query = EventQuery(keywords=keywords, where=where)

    total = service.count_all(query)
    results = service.get_all(page, per_page, query)

    if not results:
        click.echo("No events found.")
        return

    click.echo(f"Showing {len(results)} of {total} event(s):")
    for event in results:
        created = event.created.isoformat(sep=" ") if event.created else "-"
        ref = f" ref={event.ref}" if event.ref is not None else ""
        click.echo(
            f"  #{event.id} {created} {event.type.display_label} "
            f"by {_format_actor(event)}{ref}"
        )


@events.command("show")
@click.argument("event_id", type=int)
def show_event(event_id: int):
    """Show a single event as JSON."""
    service = _load_service()
    event = service.get_by_id(event_id)
    if event is None:
        click.echo(f"Event {event_id} not found.", err=True)
        raise SystemExit(1)
    click.echo(json.dumps(event.to_dict(), indent=2))


@events.command("create")
@click.argument("event_type")
@click.option("--data", default=None, help="JSON payload to store with the event.")
@click.option("--created-by", type=int, default=None, help="Acting user id (default: system).")
@click.option("--ref", type=int, default=None, help="Numeric reference.")
@click.option(
    "--recorded",
    default=None,
    help="Date to use instead of now, e.g. 2024-01-05T14:30 or \"5 January 2024\".",
)
def create_event_cmd(
    event_type: str,
    data: str | None,
    created_by: int | None,
    ref: int | None,
    recorded: str | None,
):
    """Record an event."""
    payload = None
    if data is not None:
        try:
            payload = json.loads(data)
        except json.JSONDecodeError as e:
            click.echo(f"Error: --data is not valid JSON: {e}", err=True)
            raise SystemExit(1)

    service = _load_service()
    try:
        result = service.create(event_type, payload, created_by, ref, recorded)
    except UnrecognisedEventTypeError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    if result is False:
        click.echo(f"Error: {service.last_error()}", err=True)
        raise SystemExit(1)

    if result is True:
        click.echo("Event not recorded (suppressed for this environment).")
        return

    click.echo(f"Created event {result}.")


@events.command("delete")
@click.argument("event_id", type=int)
def delete_event(event_id: int):
    """Delete an event by id."""
    service = _load_service()
    if not service.destroy(event_id):
        click.echo(f"Error: {service.last_error()}", err=True)
        raise SystemExit(1)
    click.echo(f"Deleted event {event_id}.")
