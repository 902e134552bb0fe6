"""Configstore: thread-safe configuration store backed by JSON, YAML and the environment."""

__version__ = "0.1.0"

# Core store
from .store import ConfigStore

# Named instances
from .factory import StoreFactory
from .registry import StorePool, StoreRegistry, get_registry

# Files and values
from .formats import FileFormat
from .persistence import DEFAULT_VERSION
from .values import Value, ValueKind

# Display
from .rendering import OutputFormat, set_output_format

__all__ = [
    "ConfigStore",
    "DEFAULT_VERSION",
    "FileFormat",
    "OutputFormat",
    "StoreFactory",
    "StorePool",
    "StoreRegistry",
    "Value",
    "ValueKind",
    "get_registry",
    "set_output_format",
]
