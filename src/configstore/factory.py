"""Convenience constructors for populated stores."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from configstore.exceptions import ErrorContext
from configstore.presets import get_preset
from configstore.registry import StorePool, StoreRegistry, get_registry
from configstore.store import ConfigStore
from configstore.values import Value

logger = logging.getLogger(__name__)


class StoreFactory:
    """
    Builds stores through a registry.

    Every method returns the registry's store for the requested name, so two
    factories sharing a registry hand out the same objects. Factory methods
    that populate from an external source (file, environment) return None
    when that source cannot be read; the store itself stays registered.

    Example:
        ```python
        factory = StoreFactory()
        store = factory.create_for_environment("api", "production")
        store.get("db_host")  # "prod.db.server"
        ```
    """

    def __init__(self, registry: Optional[StoreRegistry] = None, pool: Optional[StorePool] = None):
        if registry is None:
            registry = pool.registry if pool is not None else get_registry()
        self._registry = registry
        self._pool = pool if pool is not None else StorePool(registry)

    @property
    def registry(self) -> StoreRegistry:
        return self._registry

    def create(self, name: str = "default") -> ConfigStore:
        return self._registry.instance(name)

    def create_from_file(self, name: str, path: str | Path) -> Optional[ConfigStore]:
        """
        Get the named store and merge a JSON/YAML file into it.

        Returns:
            The store, or None if the file could not be loaded
        """
        store = self._registry.instance(name)
        if not store.load_from_file(path):
            logger.error(f"Could not create store '{name}' from {path}")
            return None
        return store

    def create_with_defaults(self, name: str, defaults: Mapping[str, Value]) -> ConfigStore:
        """
        Get the named store and set every default on it.

        Defaults go through set(), so listeners fire and validators apply.
        """
        store = self._registry.instance(name)
        store.update_multiple(defaults)
        return store

    def create_for_environment(self, name: str, environment: str) -> ConfigStore:
        """
        Get the named store and apply an environment preset.

        Args:
            name: Store name
            environment: "development", "production" or "testing"

        Raises:
            UnsupportedEnvironmentError: For any other environment name
                (raised before the store is touched)
        """
        preset = get_preset(environment)
        store = self._registry.instance(name)
        store.update_multiple(preset.as_values())
        logger.info(f"Applied '{environment}' preset to store '{name}'")
        return store

    def create_from_env(
        self, name: str, environ: Optional[Mapping[str, str]] = None
    ) -> Optional[ConfigStore]:
        """Get the named store and import the environment; None on failure."""
        store = self._registry.instance(name)
        if not store.load_from_env(environ):
            logger.error(f"Could not create store '{name}' from the environment")
            return None
        return store

    def create_thread_safe(self, name: str = "default") -> Optional[ConfigStore]:
        """Get the named store, returning None instead of raising."""
        with ErrorContext(f"create store '{name}'", logger_instance=logger, re_raise=False):
            return self._registry.instance(name)
        return None

    def get_pooled(self, name: str = "default") -> ConfigStore:
        return self._pool.get(name)
