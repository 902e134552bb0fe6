"""Thread-safe key/value configuration store."""

import json
import logging
import sys
from collections.abc import Iterable, Mapping
from pathlib import Path
from threading import Lock
from typing import IO, Optional

from configstore.environment import merge_environment, read_environment
from configstore.exceptions import (
    ConfigStoreError,
    InvalidKeyError,
    KeyNotFoundError,
    ValidationFailedError,
    handle_errors,
)
from configstore.formats import FileFormat, detect_format
from configstore.listeners import ListenerManager
from configstore.persistence import DEFAULT_VERSION, DocumentPersistence
from configstore.protocols import ChangeListener, Validator
from configstore.rendering import OutputFormat, get_format_manager, render
from configstore.validators import check, default_validators, enforce
from configstore.values import Value, copy_value, empty_placeholder, validate_value

logger = logging.getLogger(__name__)

# Failures of the load/save paths are reported and turned into False
_IO_ERRORS = (ConfigStoreError, OSError)


class ConfigStore:
    """
    Named, lock-guarded mapping from string keys to configuration values.

    Values come from three sources that can be freely mixed: programmatic
    set() calls, JSON/YAML files and environment variables. Every value is
    a tree of None/bool/int/float/str/list/dict (see configstore.values).

    Design Philosophy:
        - Strict reads: get() on a missing key raises, it never invents a default
        - Isolated state: values are copied on the way in and on the way out
        - Observable: every set() is reported to the change listeners
        - Forgiving I/O: a failed load/save is logged and returns False,
          leaving the store exactly as it was

    Threading:
        All public methods are thread-safe. One non-reentrant lock per store
        guards the key map, the version string, the environment overrides and
        the validator map; readers and writers serialize on it. User code
        (listeners and validators) never runs while the lock is held, so
        listeners may call back into the same store. The consequence is that
        another thread's set() can land before this thread's listeners have
        finished running.

    Usage Example:
        ```python
        store = ConfigStore("app")
        store.add_change_listener(lambda key, value: print(f"{key} -> {value}"))

        store.set("name", "example")
        store.set("complex", {"key1": "value1", "key2": 42})

        store.save_to_file("config.yaml", version="1.0.0")
        store.clear()
        store.load_from_file("config.yaml", "1.0.0")
        ```
    """

    def __init__(self, name: str = "default", validators: Optional[Mapping[str, Validator]] = None):
        """
        Initialize an empty store.

        Args:
            name: Registry name, used in logs and error messages
            validators: Per-key predicates enforced by set(). Defaults to
                default_validators(); pass {} to disable all checks.
        """
        self._name = name
        self._values: dict[str, Value] = {}
        self._version = DEFAULT_VERSION
        self._env_overrides: dict[str, str] = {}
        self._validators: dict[str, Validator] = dict(
            default_validators() if validators is None else validators
        )
        self._lock = Lock()
        self._listeners = ListenerManager(store_name=name)

        logger.info(f"ConfigStore '{name}' created")

    def __repr__(self) -> str:
        return f"ConfigStore(name={self._name!r}, keys={len(self)})"

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.exists(key)

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> str:
        """Version recorded by the last successful versioned load or save."""
        with self._lock:
            return self._version

    @property
    def env_overrides(self) -> dict[str, str]:
        """Keys whose current value came from the environment override pass."""
        with self._lock:
            return dict(self._env_overrides)

    # =================================================================
    # Listeners and validators
    # =================================================================

    def add_change_listener(self, listener: ChangeListener) -> None:
        """
        Register a callback invoked as listener(key, value) after each set().

        Listeners run in registration order on the thread that called set(),
        after the store lock is released. A listener that raises is logged
        and skipped.
        """
        self._listeners.register(listener)

    def remove_change_listener(self, listener: ChangeListener) -> bool:
        return self._listeners.unregister(listener)

    def add_validator(self, key: str, predicate: Validator) -> None:
        """Install (or replace) the predicate set() enforces for key."""
        with self._lock:
            self._validators[key] = predicate
        logger.debug(f"Validator for '{key}' installed on store '{self._name}'")

    def remove_validator(self, key: str) -> None:
        with self._lock:
            self._validators.pop(key, None)

    @property
    def validators(self) -> dict[str, Validator]:
        with self._lock:
            return dict(self._validators)

    # =================================================================
    # Access
    # =================================================================

    def get(self, key: str) -> Value:
        """
        Get the value stored under key (exact match, no defaults).

        Returns:
            A copy of the stored value

        Raises:
            KeyNotFoundError: If the key is not present
        """
        with self._lock:
            try:
                value = self._values[key]
            except KeyError:
                raise KeyNotFoundError(key, self._name) from None
            return copy_value(value)

    def get_all(self) -> dict[str, Value]:
        """
        Snapshot of every key and value.

        The returned dict is a deep copy; mutating it does not affect the store.
        """
        with self._lock:
            return {key: copy_value(value) for key, value in self._values.items()}

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._values)

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._values

    def inspect(self, keys: Iterable[str]) -> list[Value]:
        """
        Look up several keys leniently.

        Returns one value per requested key, in input order; a missing key
        yields an empty dict instead of raising. The lock is taken per key,
        so the result is not an atomic snapshot: a concurrent writer can
        change later keys while earlier ones are being read.
        """
        results: list[Value] = []
        for key in keys:
            try:
                results.append(self.get(key))
            except KeyNotFoundError:
                results.append(empty_placeholder())
        return results

    def validate(self, validators: Mapping[str, Validator]) -> None:
        """
        Check current values against a map of predicates.

        Keys are checked in the mapping's order and the first violation is
        raised. The values are read under one lock acquisition; the
        predicates run after it is released.

        Raises:
            ValidationFailedError: For a missing key (missing=True) or a
                value its predicate rejects (or raises on)
        """
        with self._lock:
            snapshot = {
                key: copy_value(self._values[key]) for key in validators if key in self._values
            }

        for key, predicate in validators.items():
            if key not in snapshot:
                raise ValidationFailedError(key, missing=True)
            accepted, error = check(predicate, snapshot[key])
            if not accepted:
                reason = f"{type(error).__name__}: {error}" if error else None
                raise ValidationFailedError(key, snapshot[key], reason=reason) from error

        logger.debug(f"Store '{self._name}' passed validation of {len(validators)} key(s)")

    # =================================================================
    # Mutation
    # =================================================================

    def set(self, key: str, value: Value) -> None:
        """
        Store value under key, replacing any previous value.

        Args:
            key: Non-empty string
            value: Any value-model tree; a copy is stored

        Raises:
            InvalidKeyError: If key is empty or not a string
            UnsupportedValueError: If value contains a foreign type
            InvalidValueError: If the key's validator rejects the value

        Events:
            Every registered listener is called with (key, value) once the
            new value is visible to other threads.
        """
        if not isinstance(key, str) or not key:
            raise InvalidKeyError(key)
        validate_value(value)
        stored = copy_value(value)

        with self._lock:
            predicate = self._validators.get(key)

        # Predicate runs outside the lock; it may read the store
        enforce(key, predicate, stored)

        with self._lock:
            self._values[key] = stored
            pending = self._listeners.snapshot()

        logger.debug(f"Store '{self._name}' set {key}")

        # Notify listeners (outside lock)
        self._listeners.dispatch(pending, key, value)

    def update_multiple(self, values: Mapping[str, Value]) -> None:
        """
        set() each pair in turn.

        Not atomic: if one pair is rejected the error propagates and the
        pairs applied before it stay applied. Listeners fire once per pair.
        """
        for key, value in values.items():
            self.set(key, value)

    def remove(self, key: str) -> None:
        """
        Delete a key.

        Raises:
            KeyNotFoundError: If the key is not present
        """
        with self._lock:
            if key not in self._values:
                raise KeyNotFoundError(key, self._name)
            del self._values[key]
            self._env_overrides.pop(key, None)
        logger.debug(f"Store '{self._name}' removed {key}")

    def clear(self) -> None:
        """Remove every key. Listeners, validators and version are kept."""
        with self._lock:
            count = len(self._values)
            self._values.clear()
            self._env_overrides.clear()
        logger.debug(f"Store '{self._name}' cleared ({count} key(s))")

    # =================================================================
    # Persistence
    # =================================================================

    def _merge_loaded(self, values: dict[str, Value], source: Path, version: Optional[str] = None) -> int:
        accepted = {key: value for key, value in values.items() if key}
        if len(accepted) != len(values):
            logger.warning(f"Ignored empty key in {source}")

        with self._lock:
            self._values.update(accepted)
            if version is not None:
                self._version = version
        return len(accepted)

    @handle_errors(operation_name="load configuration file", re_raise=False, fallback_value=False, catch=_IO_ERRORS)
    def load_from_file(self, path: str | Path, version: str = DEFAULT_VERSION) -> bool:
        """
        Merge a JSON or YAML file into the store.

        Same-named keys are overwritten, other keys are added, nothing is
        removed. The document's "version" field is not loaded as a key; the
        store records the requested version instead (a mismatch with the
        file is logged).

        Returns:
            True on success. False if the file is missing, unreadable,
            malformed or has an unsupported extension; the store is then
            left unchanged and the reason is logged.
        """
        path = Path(path)
        document = DocumentPersistence.read_document(path)
        values, file_version = DocumentPersistence.split_version(document)

        if file_version is not None and str(file_version) != version:
            logger.warning(
                f"{path} declares version {file_version!r}, loading it as version {version!r}"
            )

        count = self._merge_loaded(values, path, version)
        logger.info(f"Loaded {count} key(s) from {path} into store '{self._name}' (version {version})")
        return True

    @handle_errors(operation_name="save configuration file", re_raise=False, fallback_value=False, catch=_IO_ERRORS)
    def save_to_file(self, path: str | Path, version: str = DEFAULT_VERSION) -> bool:
        """
        Write every key plus a "version" field to a JSON or YAML file.

        Returns:
            True if the file was written, False otherwise (reason logged;
            an existing target file is left untouched)
        """
        path = Path(path)
        fmt = detect_format(path)

        with self._lock:
            snapshot = dict(self._values)

        document = DocumentPersistence.build_versioned_document(snapshot, version, fmt)
        DocumentPersistence.write_document(path, document, fmt)

        with self._lock:
            self._version = version

        logger.info(f"Saved {len(snapshot)} key(s) from store '{self._name}' to {path} (version {version})")
        return True

    @handle_errors(operation_name="load partial configuration", re_raise=False, fallback_value=False, catch=_IO_ERRORS)
    def load_partial_from_file(self, path: str | Path, keys: Iterable[str]) -> bool:
        """
        Merge only the requested keys that the file contains.

        No version handling: "version" is loaded like any other key if requested.
        """
        path = Path(path)
        values = DocumentPersistence.read_partial(path, keys)
        count = self._merge_loaded(values, path)
        logger.info(f"Loaded {count} requested key(s) from {path} into store '{self._name}'")
        return True

    @handle_errors(operation_name="save partial configuration", re_raise=False, fallback_value=False, catch=_IO_ERRORS)
    def save_partial_to_file(self, path: str | Path, keys: Iterable[str]) -> bool:
        """Write only the requested keys that exist in the store; no version field."""
        path = Path(path)
        fmt = detect_format(path)

        with self._lock:
            subset = {key: self._values[key] for key in dict.fromkeys(keys) if key in self._values}

        DocumentPersistence.write_document(path, subset, fmt)
        logger.info(f"Saved {len(subset)} key(s) from store '{self._name}' to {path}")
        return True

    @handle_errors(operation_name="back up configuration", re_raise=False, fallback_value=False, catch=_IO_ERRORS)
    def backup_to_file(self, path: str | Path) -> bool:
        """Write the full store as JSON (whatever the extension), without a version field."""
        path = Path(path)
        with self._lock:
            snapshot = dict(self._values)

        DocumentPersistence.write_document(path, snapshot, FileFormat.JSON)
        logger.info(f"Backed up {len(snapshot)} key(s) from store '{self._name}' to {path}")
        return True

    # =================================================================
    # Environment
    # =================================================================

    @handle_errors(operation_name="load environment variables", re_raise=False, fallback_value=False)
    def load_from_env(self, environ: Optional[Mapping[str, str]] = None) -> bool:
        """
        Import environment variables as string-valued keys.

        Existing keys that share a name with a variable are overwritten by
        the variable's string value even if they held another type, and are
        recorded in env_overrides. Listeners are not notified.

        Args:
            environ: Mapping to import instead of os.environ
        """
        environment = read_environment(environ)

        with self._lock:
            overridden = merge_environment(self._values, self._env_overrides, environment)

        if overridden:
            logger.info(
                f"Environment overrode {len(overridden)} existing key(s) in store "
                f"'{self._name}': {', '.join(overridden)}"
            )
        logger.info(f"Imported {len(environment)} environment variable(s) into store '{self._name}'")
        return True

    # =================================================================
    # Display
    # =================================================================

    def output_config(self, stream: Optional[IO[str]] = None, fmt: Optional[OutputFormat] = None) -> IO[str]:
        """
        Render the store to a stream.

        Args:
            stream: Destination (defaults to stdout)
            fmt: Output format (defaults to the process-wide current format)

        Returns:
            The stream, for chaining
        """
        stream = stream if stream is not None else sys.stdout
        fmt = fmt if fmt is not None else get_format_manager().get_format()
        stream.write(render(self.get_all(), fmt))
        return stream

    def display(self, stream: Optional[IO[str]] = None) -> None:
        """Write one "key: <indented JSON>" entry per key."""
        stream = stream if stream is not None else sys.stdout
        for key, value in self.get_all().items():
            stream.write(f"{key}: {json.dumps(value, indent=4, ensure_ascii=False)}\n")
