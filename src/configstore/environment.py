"""Environment variable import.

The merge runs in two passes over a snapshot of the environment:

1. Override pass: every key already in the store whose name is also an
   environment variable takes the variable's string value, and the key is
   recorded as an override.
2. Import pass: every ``NAME=VALUE`` entry becomes a string key.

The net effect is that environment variables win over stored values, and
that a typed value (``db_port: 5432``) silently becomes a string
(``"5432"``) when a variable of the same name exists. Keys affected this
way are returned by merge_environment so callers can log them.
"""

import logging
import os
from collections.abc import Mapping, MutableMapping

from configstore.values import Value

logger = logging.getLogger(__name__)


def read_environment(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """
    Take a snapshot of the process environment.

    Args:
        environ: Mapping to read instead of os.environ (used by tests)
    """
    source = os.environ if environ is None else environ
    return {str(name): str(value) for name, value in source.items()}


def merge_environment(
    values: MutableMapping[str, Value],
    overrides: MutableMapping[str, str],
    environment: Mapping[str, str],
) -> list[str]:
    """
    Apply both passes to a store's map in place.

    The caller is responsible for holding the store lock.

    Args:
        values: The store's key/value map
        overrides: The store's record of environment-sourced keys
        environment: Snapshot from read_environment()

    Returns:
        Keys that existed before the merge and were overridden, in store order
    """
    overridden: list[str] = []
    for key in list(values):
        if key in environment:
            env_value = environment[key]
            if values[key] != env_value:
                logger.debug(
                    f"Environment overrides '{key}': {type(values[key]).__name__} -> str"
                )
            values[key] = env_value
            overrides[key] = env_value
            overridden.append(key)

    for name, env_value in environment.items():
        if not name:
            continue
        values[name] = env_value

    return overridden
