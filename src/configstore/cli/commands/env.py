"""Environment inspection command."""

from typing import Optional

import click

from configstore.rendering import OutputFormat, get_format_manager, render, string_to_format
from configstore.store import ConfigStore

from .common import reports_errors
from .file import FORMAT_CHOICE


@click.command(name="env")
@click.option("--prefix", "-p", default="", help="Only show variables starting with this prefix")
@click.option(
    "--format", "-f", "format_name",
    type=FORMAT_CHOICE,
    default=None,
    help="Output format (default: Plain Text)",
)
@reports_errors
def env(prefix: str, format_name: Optional[str]):
    """Show the keys an environment import would produce."""
    store = ConfigStore(name="environment", validators={})
    if not store.load_from_env():
        raise click.ClickException("Could not read the process environment")

    values = {key: value for key, value in sorted(store.get_all().items()) if key.startswith(prefix)}
    if not values:
        click.echo(f"No environment variables start with '{prefix}'", err=True)
        return

    fmt: OutputFormat = (
        string_to_format(format_name) if format_name else get_format_manager().get_format()
    )
    click.echo(render(values, fmt), nl=False)
