"""Per-key validation predicates.

A store consults its validator map on every set(); validate() takes a map
of the same shape and checks the current contents. Predicates are plain
callables ``value -> bool``.

``type_validator`` builds predicates from type annotations with a strict
pydantic TypeAdapter, so ``type_validator(int)`` rejects ``True`` and
``"5"`` while ``type_validator(list[str])`` checks every item.
"""

import logging
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from configstore.exceptions import InvalidValueError
from configstore.protocols import Validator
from configstore.values import Value

logger = logging.getLogger(__name__)


def is_string(value: Value) -> bool:
    return isinstance(value, str)


def type_validator(annotation: Any) -> Validator:
    """
    Build a predicate accepting values that strictly match a type.

    Args:
        annotation: Any type pydantic understands (int, list[str], Literal[...], ...)

    Example:
        ```python
        store.add_validator("db_port", type_validator(int))
        store.add_validator("hosts", type_validator(list[str]))
        ```
    """
    adapter = TypeAdapter(annotation)

    def predicate(value: Value) -> bool:
        try:
            adapter.validate_python(value, strict=True)
        except ValidationError:
            return False
        return True

    name = getattr(annotation, "__name__", None) or str(annotation)
    predicate.__name__ = f"is_{name}"
    predicate.__qualname__ = predicate.__name__
    return predicate


def one_of(*choices: Value) -> Validator:
    """Predicate accepting only the given values."""
    allowed = list(choices)

    def predicate(value: Value) -> bool:
        return value in allowed

    predicate.__name__ = f"one_of{tuple(allowed)!r}"
    return predicate


def default_validators() -> dict[str, Validator]:
    """
    Validators installed on a new store unless the caller passes its own.

    "example" is a reserved key that must hold a string.
    """
    return {"example": is_string}


def check(predicate: Validator, value: Value) -> tuple[bool, Optional[Exception]]:
    """
    Run a predicate, treating an exception as a rejection.

    Returns:
        (accepted, error) where error is what a raising predicate raised
    """
    try:
        return bool(predicate(value)), None
    except Exception as e:
        logger.debug(f"Validator {predicate!r} raised on {value!r}: {e}")
        return False, e


def enforce(key: str, predicate: Optional[Validator], value: Value) -> None:
    """
    Raise InvalidValueError unless predicate accepts value.

    A missing predicate accepts everything.
    """
    if predicate is None:
        return
    accepted, error = check(predicate, value)
    if accepted:
        return
    if error is None:
        raise InvalidValueError(key, value)
    raise InvalidValueError(key, value, f"{type(error).__name__}: {error}") from error
