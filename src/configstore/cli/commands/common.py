"""Helpers shared by the file commands."""

import json
import logging
import sys
from functools import wraps
from pathlib import Path
from typing import Callable, Optional

import click

from configstore.exceptions import ConfigStoreError, FileOpenFailedError, format_error_for_display
from configstore.persistence import DocumentPersistence
from configstore.store import ConfigStore
from configstore.values import Value

logger = logging.getLogger(__name__)


def reports_errors(func: Callable) -> Callable:
    """
    Show ConfigStoreError failures as a short message and exit with code 1.

    Anything else propagates so click prints the traceback.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ConfigStoreError as e:
            logger.debug(f"Command failed: {e.technical_message}")
            user_message, recovery_hint = format_error_for_display(e)
            click.echo(f"Error: {user_message}", err=True)
            if recovery_hint:
                click.echo(recovery_hint, err=True)
            sys.exit(1)

    return wrapper


def open_store(path: Path, missing_ok: bool = False) -> tuple[ConfigStore, Optional[str]]:
    """
    Read a configuration file into a fresh, unregistered store.

    The file is parsed up front so that failures surface as typed errors
    (ConfigStore.load_from_file only reports them through the log).

    Args:
        path: JSON or YAML file
        missing_ok: Return an empty store when the file does not exist

    Returns:
        (store, version declared by the file or None)
    """
    store = ConfigStore(name=path.name, validators={})
    if missing_ok and not path.exists():
        logger.info(f"{path} does not exist yet, starting from an empty configuration")
        return store, None

    document = DocumentPersistence.read_document(path)
    values, version = DocumentPersistence.split_version(document)
    store.update_multiple(values)
    return store, None if version is None else str(version)


def ensure_written(written: bool, path: Path) -> None:
    """Turn a False result from a store save method into an error."""
    if not written:
        raise FileOpenFailedError(path, "writing", "see the log output above")


def parse_value(text: str, raw: bool) -> Value:
    """Interpret a command-line VALUE as JSON, falling back to a plain string."""
    if raw:
        return text
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text
