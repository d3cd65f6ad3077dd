"""Configuration management commands."""

import json
from typing import Any

import click
from pydantic import SecretStr

from events_handler.cli.utils import section
from events_handler.core.settings import get_settings

MASK = "***"


def _masked(value: Any, show_secrets: bool) -> Any:
    if isinstance(value, SecretStr):
        return value.get_secret_value() if show_secrets else MASK
    if isinstance(value, dict):
        return {key: _masked(item, show_secrets) for key, item in value.items()}
    if isinstance(value, list):
        return [_masked(item, show_secrets) for item in value]
    return value


def resolved_settings(show_secrets: bool = False) -> dict[str, dict[str, Any]]:
    """All settings sections as plain data, secrets masked unless asked for."""
    settings = get_settings()
    sections: dict[str, dict[str, Any]] = {}
    for name in type(settings).model_fields:
        values = dict(getattr(settings, name))
        masked = _masked(values, show_secrets)
        sections[name] = json.loads(json.dumps(masked, default=str))
    return sections


@click.group(name="config")
def config() -> None:
    """Configuration management commands."""


@config.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
@click.option(
    "--show-secrets/--hide-secrets",
    default=False,
    help="Show sensitive values (tokens, API keys)",
)
def show(output_format: str, show_secrets: bool) -> None:
    """Display the resolved configuration."""
    sections = resolved_settings(show_secrets)

    if output_format == "json":
        click.echo(json.dumps(sections, indent=2))
        return

    section("CONFIGURATION SETTINGS")
    for name, values in sections.items():
        click.echo(f"\n[{name.upper()}]")
        for key, value in values.items():
            click.echo(f"  {key:36} = {value}")
