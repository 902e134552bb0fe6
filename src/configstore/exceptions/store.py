"""Store-level exceptions.

This module defines exceptions raised by key lookups and mutations:
- StoreError: Base class for key/value errors
- KeyNotFoundError: get/remove on an absent key
- InvalidKeyError: set with an empty or non-string key
- UnsupportedValueError: value outside the supported value model
- ValidationFailedError: validate() found a missing key or a rejected value
- InvalidValueError: a per-key validator rejected a set()
"""

import json
from typing import Any, Optional

from .base import ConfigStoreError


def _preview(value: Any) -> str:
    """Compact, bounded rendering of a value for error messages."""
    try:
        text = json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        text = repr(value)
    if len(text) > 80:
        text = text[:77] + "..."
    return text


class StoreError(ConfigStoreError):
    """A key lookup or mutation on a store failed."""
    pass


class KeyNotFoundError(StoreError, KeyError):
    """The requested key is not present in the store."""

    def __init__(self, key: str, store_name: Optional[str] = None):
        """
        Initialize key not found error.

        Args:
            key: The missing key
            store_name: Name of the store that was searched (optional)
        """
        where = f" in store '{store_name}'" if store_name else ""
        super().__init__(
            user_message=f"Unknown configuration key: {key}",
            technical_message=f"Key '{key}' not found{where}",
            recoverable=True,
            recovery_hint="Use exists() to check for optional keys before reading them",
        )
        self.key = key
        self.store_name = store_name


class InvalidKeyError(StoreError, ValueError):
    """Keys must be non-empty strings."""

    def __init__(self, key: Any):
        if isinstance(key, str):
            user_msg = "Key cannot be empty"
        else:
            user_msg = f"Key must be a string, got {type(key).__name__}"
        super().__init__(
            user_message=user_msg,
            technical_message=f"Rejected key {key!r}: {user_msg}",
            recoverable=True,
        )
        self.key = key


class UnsupportedValueError(StoreError, TypeError):
    """Value (or a nested node) is not null/bool/int/float/str/list/dict."""

    def __init__(self, value: Any, location: str = ""):
        """
        Initialize unsupported value error.

        Args:
            value: The offending node
            location: Path of the node inside the value tree (e.g. "servers[2].port")
        """
        type_name = type(value).__name__
        where = f" at '{location}'" if location else ""
        super().__init__(
            user_message=f"Unsupported value type {type_name}{where}",
            technical_message=f"Cannot store {value!r}{where}: type {type_name} is not part of the value model",
            recoverable=True,
            recovery_hint="Use only None, bool, int, float, str, list and dict with string keys",
        )
        self.value = value
        self.location = location


class ValidationFailedError(StoreError):
    """A key failed its validation predicate, or was missing."""

    def __init__(
        self,
        key: str,
        value: Any = None,
        missing: bool = False,
        reason: Optional[str] = None,
    ):
        """
        Initialize validation failure.

        Args:
            key: The key that failed validation
            value: The offending value (ignored when missing=True)
            missing: True if the key was absent from the store
            reason: Extra detail, e.g. the message of a raising predicate
        """
        if missing:
            user_msg = f"Validation failed: key not found: {key}"
            technical = user_msg
        else:
            user_msg = f"Validation failed for key: {key} with value: {_preview(value)}"
            technical = f"Predicate rejected {key}={value!r}"
        if reason:
            technical += f" ({reason})"

        super().__init__(
            user_message=user_msg,
            technical_message=technical,
            recoverable=True,
            recovery_hint=f"Update the '{key}' value in your configuration",
        )
        self.key = key
        self.value = None if missing else value
        self.missing = missing
        self.reason = reason


class InvalidValueError(ValidationFailedError):
    """A per-key validator rejected the value passed to set()."""

    def __init__(self, key: str, value: Any, reason: Optional[str] = None):
        super().__init__(key, value=value, missing=False, reason=reason)
        self.user_message = f"Invalid value for '{key}': {_preview(value)}"
        if reason:
            self.user_message += f" ({reason})"
