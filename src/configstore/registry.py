"""
Named store instances.

StoreRegistry
=============

A registry maps names to ConfigStore objects. The first reference to a
name creates the store; every later reference returns the same object:

    registry.instance("db")  ──►  no "db" yet  ──►  ConfigStore("db") created
    registry.instance("db")  ──►  same object

Stores are never destroyed; they live as long as the registry. The
registry lock guards only the name table and is never held while a store
lock is taken, so creating or fetching a store cannot deadlock with work
on another store.

StorePool
=========

A second table in front of a registry. It hands out the registry's store
for a name and records which names it has already handed out, which is
only visible in the logs (created vs reused).

Most code uses the process-wide default from get_registry(); tests and
embedding applications construct their own and inject them into
StoreFactory.
"""

import logging
from threading import Lock
from typing import Optional

from configstore.store import ConfigStore

logger = logging.getLogger(__name__)


class StoreRegistry:
    """
    Create-on-first-use table of named stores.

    Thread Safety:
        instance() is safe to call from any thread; concurrent first calls
        for the same name create exactly one store.
    """

    def __init__(self):
        self._stores: dict[str, ConfigStore] = {}
        self._lock = Lock()

    def instance(self, name: str = "default") -> ConfigStore:
        """
        Get the store registered under name, creating it if absent.

        Args:
            name: Store name (any string, "" included)

        Returns:
            The same ConfigStore object for every call with this name
        """
        with self._lock:
            store = self._stores.get(name)
            if store is None:
                store = ConfigStore(name)
                self._stores[name] = store
                logger.debug(f"Registry created store '{name}'")
            return store

    def names(self) -> list[str]:
        with self._lock:
            return list(self._stores)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._stores

    def __len__(self) -> int:
        with self._lock:
            return len(self._stores)

    def __repr__(self) -> str:
        return f"StoreRegistry(names={self.names()!r})"


class StorePool:
    """Pooled access to a registry's stores."""

    def __init__(self, registry: Optional[StoreRegistry] = None):
        self._registry = registry if registry is not None else get_registry()
        self._handles: dict[str, ConfigStore] = {}
        self._lock = Lock()

    @property
    def registry(self) -> StoreRegistry:
        return self._registry

    def get(self, name: str = "default") -> ConfigStore:
        """Get the pooled handle for name (the registry's store)."""
        with self._lock:
            handle = self._handles.get(name)
            if handle is not None:
                logger.info(f"Reusing pooled store '{name}'")
                return handle

        # Registry lookup happens outside the pool lock
        store = self._registry.instance(name)

        with self._lock:
            handle = self._handles.setdefault(name, store)
        logger.info(f"Added store '{name}' to pool")
        return handle

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._handles

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)


# Singleton instance
_registry: StoreRegistry | None = None
_registry_lock = Lock()


def get_registry() -> StoreRegistry:
    """Get the process-wide StoreRegistry."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = StoreRegistry()
        return _registry
