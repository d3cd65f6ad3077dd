"""Main CLI entry point for events-handler."""

import click

from events_handler.cli.commands import config, events, server
from events_handler.infra.logging.config import setup_logging


@click.group()
@click.version_option(version="1.0.0", prog_name="events-handler")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Events Handler CLI.

    \b
    Commands:
      process FILE   Run the pipeline for one event stored as JSON
      serve          Run the webhook server
      config show    Print the resolved settings, secrets masked
    """
    ctx.ensure_object(dict)


cli.add_command(events.process)
cli.add_command(server.serve)
cli.add_command(config.config)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
