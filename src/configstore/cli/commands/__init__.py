"""CLI commands for configstore."""

from .env import env
from .file import backup, check, convert, get, set_value, show

__all__ = ["backup", "check", "convert", "env", "get", "set_value", "show"]
