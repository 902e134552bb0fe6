"""Pytest fixtures for tests."""

import logging
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from configstore import ConfigStore, StoreFactory, StoreRegistry


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store():
    """Create an empty store with the default validators."""
    return ConfigStore("test")


@pytest.fixture
def registry():
    """Create an isolated registry (not the process-wide one)."""
    return StoreRegistry()


@pytest.fixture
def factory(registry):
    """Create a factory bound to the isolated registry."""
    return StoreFactory(registry=registry)


@pytest.fixture
def sample_values():
    """Values covering every kind of the value model."""
    return {
        "name": "example",
        "count": 42,
        "ratio": 0.25,
        "enabled": True,
        "missing": None,
        "tags": ["a", "b", 3],
        "complex": {"key1": "value1", "key2": 42, "nested": {"deep": [1.5, False]}},
        "tricky_strings": ["yes", "42", "null", "1e5", "0x1F", "~", "", "on"],
    }


@pytest.fixture(autouse=True)
def _drop_cli_log_handlers():
    """Remove root handlers the CLI installs so they don't outlive a CliRunner."""
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "_configstore_cli", False):
            root_logger.removeHandler(handler)
            handler.close()
