"""Protocol definitions for configstore.

- ChangeListener: callback invoked after a key is set
- Validator: per-key predicate consulted by set() and validate()
- ConfigStorage: the storage interface ConfigStore implements
"""

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from configstore.values import Value


@runtime_checkable
class ChangeListener(Protocol):
    """
    Callback receiving every successful set().

    Threading:
        Called from the thread that performed the set, after the store's
        lock has been released. Listeners may read or write the same store,
        but must not assume that no other set() ran in between.

    Error Handling:
        Exceptions are caught and logged by the store; they never reach the
        caller of set() and do not stop later listeners.
    """

    def __call__(self, key: str, value: "Value") -> None: ...


@runtime_checkable
class Validator(Protocol):
    """Predicate returning True when a value is acceptable for its key."""

    def __call__(self, value: "Value") -> bool: ...


@runtime_checkable
class ConfigStorage(Protocol):
    """
    Interface of a configuration store.

    ConfigStore is the implementation shipped with the package; the protocol
    exists so that callers (and tests) can depend on the behavior rather than
    the class.
    """

    def get(self, key: str) -> "Value":
        """Return the value for key; raise KeyNotFoundError if absent."""
        ...

    def set(self, key: str, value: "Value") -> None:
        """Store value under key and notify listeners."""
        ...

    def get_all(self) -> dict[str, "Value"]:
        """Return a snapshot copy of every key and value."""
        ...

    def remove(self, key: str) -> None:
        """Delete key; raise KeyNotFoundError if absent."""
        ...

    def exists(self, key: str) -> bool:
        ...

    def clear(self) -> None:
        ...

    def load_from_file(self, path: str | Path, version: str = ...) -> bool:
        """Merge a JSON/YAML file into the store."""
        ...

    def save_to_file(self, path: str | Path, version: str = ...) -> bool:
        """Write the store plus a version field to a JSON/YAML file."""
        ...

    def load_partial_from_file(self, path: str | Path, keys: Iterable[str]) -> bool:
        ...

    def save_partial_to_file(self, path: str | Path, keys: Iterable[str]) -> bool:
        ...

    def load_from_env(self, environ: Mapping[str, str] | None = None) -> bool:
        """Import environment variables as string keys."""
        ...

    def add_change_listener(self, listener: ChangeListener) -> None:
        ...

    def backup_to_file(self, path: str | Path) -> bool:
        """Write the full store as JSON, regardless of extension."""
        ...
