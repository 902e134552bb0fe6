"""Change-listener list with thread-safe registration and isolated delivery.

ConfigStore keeps one ListenerManager per store. Delivery is split in two
steps so the store can take the snapshot while it still holds its own lock
and run the callbacks after releasing it:

```python
with self._lock:
    self._values[key] = value
    pending = self._listeners.snapshot()

self._listeners.dispatch(pending, key, value)
```
"""

import logging
from collections.abc import Sequence
from threading import Lock

from configstore.protocols import ChangeListener
from configstore.values import Value

logger = logging.getLogger(__name__)


class ListenerManager:
    """
    Ordered list of change listeners.

    Unlike a set of observers, the same callable may be registered more
    than once; it is then called once per registration.

    Thread Safety:
        Registration and snapshots are guarded by an internal lock. Callbacks
        always run without that lock held, so a listener may register further
        listeners (they take effect from the next change).

    Error Handling:
        A listener that raises is logged with its traceback and skipped;
        later listeners and the caller of set() are unaffected.
    """

    def __init__(self, store_name: str = "default"):
        self._listeners: list[ChangeListener] = []
        self._lock = Lock()
        self._store_name = store_name

    def register(self, listener: ChangeListener) -> None:
        """
        Append a listener.

        Raises:
            TypeError: If listener is not callable
        """
        if not callable(listener):
            raise TypeError(f"Change listener must be callable, got {type(listener).__name__}")
        with self._lock:
            self._listeners.append(listener)
            count = len(self._listeners)
        logger.debug(f"Registered change listener #{count} on store '{self._store_name}': {listener!r}")

    def unregister(self, listener: ChangeListener) -> bool:
        """
        Remove the first registration of a listener.

        Returns:
            True if the listener was registered, False otherwise
        """
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                logger.warning(
                    f"Attempted to unregister unknown listener on store '{self._store_name}': {listener!r}"
                )
                return False
        logger.debug(f"Unregistered change listener on store '{self._store_name}': {listener!r}")
        return True

    def snapshot(self) -> list[ChangeListener]:
        """Copy of the current listener list, in registration order."""
        with self._lock:
            return list(self._listeners)

    def dispatch(self, listeners: Sequence[ChangeListener], key: str, value: Value) -> int:
        """
        Call each listener with (key, value), isolating failures.

        Args:
            listeners: Usually the result of snapshot()
            key: The key that changed
            value: The new value

        Returns:
            Number of listeners that raised
        """
        failures = 0
        for listener in listeners:
            try:
                listener(key, value)
            except Exception as e:
                failures += 1
                logger.error(
                    f"Change listener {listener!r} failed for '{key}' on store '{self._store_name}': {e}",
                    exc_info=True,
                )
        return failures

    def notify(self, key: str, value: Value) -> int:
        """Snapshot and dispatch in one call."""
        return self.dispatch(self.snapshot(), key, value)

    def clear(self) -> None:
        """Remove all listeners."""
        with self._lock:
            count = len(self._listeners)
            self._listeners.clear()
        if count:
            logger.info(f"Cleared {count} change listener(s) on store '{self._store_name}'")

    def __contains__(self, listener: ChangeListener) -> bool:
        with self._lock:
            return listener in self._listeners

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def __bool__(self) -> bool:
        with self._lock:
            return bool(self._listeners)
