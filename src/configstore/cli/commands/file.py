"""Commands operating on a configuration file."""

import json
from pathlib import Path
from typing import Optional

import click

from configstore.exceptions import collect_errors
from configstore.formats import detect_format
from configstore.persistence import DEFAULT_VERSION
from configstore.rendering import OutputFormat, get_format_manager, string_to_format

from .common import ensure_written, open_store, parse_value, reports_errors

FORMAT_CHOICE = click.Choice([fmt.value for fmt in OutputFormat], case_sensitive=False)
FILE_ARG = click.Path(dir_okay=False, path_type=Path)


@click.command(name="show")
@click.argument("file", type=FILE_ARG)
@click.option(
    "--format", "-f", "format_name",
    type=FORMAT_CHOICE,
    default=None,
    help="Output format (default: Plain Text)",
)
@reports_errors
def show(file: Path, format_name: Optional[str]):
    """Print every key of FILE."""
    store, _ = open_store(file)
    fmt = string_to_format(format_name) if format_name else get_format_manager().get_format()
    store.output_config(fmt=fmt)


@click.command(name="get")
@click.argument("file", type=FILE_ARG)
@click.argument("key")
@reports_errors
def get(file: Path, key: str):
    """Print the value of KEY in FILE as JSON."""
    store, _ = open_store(file)
    click.echo(json.dumps(store.get(key), indent=4, ensure_ascii=False))


@click.command(name="set")
@click.argument("file", type=FILE_ARG)
@click.argument("key")
@click.argument("value")
@click.option("--raw", is_flag=True, help="Store VALUE as a string without JSON parsing")
@click.option("--version", "version", default=None, help="Version to write (default: keep the file's)")
@reports_errors
def set_value(file: Path, key: str, value: str, raw: bool, version: Optional[str]):
    """
    Set KEY to VALUE in FILE and save it.

    VALUE is parsed as JSON (42, true, [1, 2], {"a": 1}); text that is not
    valid JSON is stored as a string. FILE is created if it does not exist.
    """
    detect_format(file)
    store, file_version = open_store(file, missing_ok=True)
    store.set(key, parse_value(value, raw))
    ensure_written(store.save_to_file(file, version or file_version or DEFAULT_VERSION), file)
    click.echo(f"Set {key} in {file}")


@click.command(name="convert")
@click.argument("source", type=FILE_ARG)
@click.argument("destination", type=FILE_ARG)
@click.option("--version", "version", default=None, help="Version to write (default: keep the source's)")
@click.option("--keys", "-k", multiple=True, help="Only copy these keys (repeatable, no version field)")
@reports_errors
def convert(source: Path, destination: Path, version: Optional[str], keys: tuple[str, ...]):
    """Rewrite SOURCE as DESTINATION; the format follows each file's extension."""
    detect_format(destination)
    store, source_version = open_store(source)
    if keys:
        ensure_written(store.save_partial_to_file(destination, keys), destination)
    else:
        ensure_written(
            store.save_to_file(destination, version or source_version or DEFAULT_VERSION),
            destination,
        )
    click.echo(f"Wrote {destination}")


@click.command(name="backup")
@click.argument("file", type=FILE_ARG)
@click.argument("destination", type=FILE_ARG)
@reports_errors
def backup(file: Path, destination: Path):
    """Write a JSON backup of FILE to DESTINATION."""
    store, _ = open_store(file)
    ensure_written(store.backup_to_file(destination), destination)
    click.echo(f"Backed up {len(store)} key(s) to {destination}")


@click.command(name="check")
@click.argument("file", type=FILE_ARG)
@click.option("--require", "-r", "required", multiple=True, required=True, help="Key that must be present (repeatable)")
@reports_errors
def check(file: Path, required: tuple[str, ...]):
    """Verify that FILE defines every required key; report all that are missing."""
    store, _ = open_store(file)
    collector = collect_errors(f"check {file}")

    for key in required:
        with collector.try_operation(key):
            store.get(key)

    if collector.has_errors:
        click.echo(collector.get_summary(), err=True)
        raise SystemExit(1)

    click.echo(f"[OK] {collector.success_count} required key(s) present in {file}")
