"""eventlog CLI entry point."""

import logging

import click


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool):
    """eventlog: application event log CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommand groups
from eventlog.cli.events_cmd import events, types  # noqa: E402
from eventlog.cli.migrate_cmd import migrate  # noqa: E402

cli.add_command(events)
cli.add_command(types)
cli.add_command(migrate)
