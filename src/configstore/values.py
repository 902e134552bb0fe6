"""Generic value model shared by the store and both file formats.

A value is a tree built from plain Python objects:

    None | bool | int | float | str | list[Value] | dict[str, Value]

which is exactly pydantic's ``JsonValue``. Nothing else may enter a store:
tuples, sets, bytes, datetimes and dicts with non-string keys are rejected
at the boundary so that every stored value can be written to JSON and YAML
and read back unchanged.
"""

import copy
from enum import Enum
from typing import Any

from pydantic import JsonValue

from configstore.exceptions import UnsupportedValueError

# Public alias used in signatures throughout the package
Value = JsonValue


class ValueKind(Enum):
    """Tags of the value model."""

    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    LIST = "list"
    MAP = "map"

    @property
    def is_scalar(self) -> bool:
        return self not in (ValueKind.LIST, ValueKind.MAP)


def kind_of(value: Any) -> ValueKind:
    """
    Classify a single node (children are not inspected).

    Raises:
        UnsupportedValueError: If the node is not part of the value model
    """
    match value:
        case None:
            return ValueKind.NULL
        # bool must be tested before int (bool is an int subclass)
        case bool():
            return ValueKind.BOOL
        case int():
            return ValueKind.INT
        case float():
            return ValueKind.FLOAT
        case str():
            return ValueKind.STRING
        case list():
            return ValueKind.LIST
        case dict():
            return ValueKind.MAP
        case _:
            raise UnsupportedValueError(value)


def validate_value(value: Any, location: str = "") -> Value:
    """
    Check a whole tree against the value model and return it unchanged.

    Args:
        value: Root of the tree
        location: Path prefix used in error messages

    Raises:
        UnsupportedValueError: On the first foreign node, with its location
    """
    try:
        kind = kind_of(value)
    except UnsupportedValueError:
        raise UnsupportedValueError(value, location) from None

    if kind is ValueKind.LIST:
        for index, item in enumerate(value):
            validate_value(item, f"{location}[{index}]")
    elif kind is ValueKind.MAP:
        for key, item in value.items():
            if not isinstance(key, str):
                raise UnsupportedValueError(key, f"{location}<key>")
            validate_value(item, f"{location}.{key}" if location else key)
    return value


def copy_value(value: Value) -> Value:
    """Deep copy so that callers never share mutable nodes with a store."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return copy.deepcopy(value)


def empty_placeholder() -> Value:
    """Value returned by lenient lookups for a missing key."""
    return {}
