"""
Centralized error handling utilities.

The store separates two kinds of failure:

1. **Caller mistakes** (unknown key, empty key, rejected value) raise straight
   to the caller as ConfigStoreError subclasses.
2. **Environment failures** (file missing, unreadable, malformed) are caught
   at the persistence boundary, logged, and converted to a falsy result so a
   failed load never takes the process down.

## Quick Reference

| Scenario | Use This |
|----------|----------|
| Log and swallow, return fallback | `@handle_errors(operation_name="load", re_raise=False, fallback_value=False)` |
| Log and re-raise | `@handle_errors(operation_name="init", re_raise=True)` |
| Check many things, report all | `collector = collect_errors("check"); with collector.try_operation(k): ...` |
| Critical section with auto-logging | `with ErrorContext("import environment"): ...` |
| Low-level OSError to typed error | `raise wrap_os_error(e, path, "reading") from e` |

## Layers

```
┌─────────────────────────────────────┐
│  CLI                                │
│  - prints error.user_message        │
│  - prints error.recovery_hint       │
└─────────────────────────────────────┘
                  ↑ ConfigStoreError / bool
┌─────────────────────────────────────┐
│  ConfigStore / StoreFactory         │
│  - converts I/O failure to False    │
│  - factories return None            │
└─────────────────────────────────────┘
                  ↑ ConfigStoreError
┌─────────────────────────────────────┐
│  DocumentPersistence / formats      │
│  - wraps OSError, JSON/YAML errors  │
└─────────────────────────────────────┘
                  ↑ OSError, json/yaml errors
```
"""

import logging
from functools import wraps
from pathlib import Path
from typing import Callable, Optional, TypeVar

from .base import ConfigStoreError
from .persistence import FileOpenFailedError, ParseFailedError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def handle_errors(
    *,
    operation_name: str,
    user_notification: Optional[Callable[[str], None]] = None,
    fallback_value: Optional[T] = None,
    re_raise: bool = True,
    catch: tuple[type[BaseException], ...] = (Exception,),
    log_level: int = logging.ERROR
) -> Callable:
    """
    Decorator for consistent error handling.

    Args:
        operation_name: Name of the operation for logging (e.g., "load config")
        user_notification: Optional callback to notify user
        fallback_value: Value to return if an error occurs and re_raise=False
        re_raise: Whether to re-raise the exception after handling
        catch: Exception types to handle; anything else propagates untouched
        log_level: Logging level for the error (default: ERROR)

    Example:
        ```python
        @handle_errors(operation_name="save config", re_raise=False, fallback_value=False)
        def save(self, path):
            DocumentPersistence.write_document(path, self.get_all())
            return True
        ```
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)

            except ConfigStoreError as e:
                if not isinstance(e, catch):
                    raise
                logger.log(log_level, f"Failed to {operation_name}: {e.technical_message}")

                if user_notification:
                    user_notification(e.get_full_message())

                if re_raise:
                    raise
                return fallback_value

            except catch as e:
                logger.log(
                    log_level,
                    f"Unexpected error during {operation_name}: {e}",
                    exc_info=True
                )

                if user_notification:
                    user_notification(f"Error: {e}")

                if re_raise:
                    raise
                return fallback_value

        return wrapper
    return decorator


class ErrorContext:
    """
    Context manager for error handling with automatic logging.

    Example:
        ```python
        with ErrorContext("import environment", re_raise=False) as ctx:
            store.load_from_env()

        if ctx.error:
            print(f"Failed: {ctx.error}")
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True
    ):
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[Exception] = None

    def __enter__(self):
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        self.error = exc_val

        if isinstance(exc_val, ConfigStoreError):
            self.logger.error(f"Failed to {self.operation}: {exc_val.technical_message}")
        else:
            self.logger.error(f"Failed to {self.operation}: {exc_val}", exc_info=True)

        # True suppresses the exception
        return not self.re_raise


def wrap_os_error(error: OSError, path: str | Path, mode: str) -> FileOpenFailedError:
    """
    Convert an OSError from opening/reading/writing a file.

    Args:
        error: The original OSError
        path: The file involved
        mode: "reading" or "writing"
    """
    reason = error.strerror or str(error)
    return FileOpenFailedError(path, mode, reason)


def wrap_parse_error(error: Exception, path: str | Path, fmt: str) -> ParseFailedError:
    """
    Convert a json/yaml parser exception to ParseFailedError.

    PyYAML marked errors span several lines (problem, context, position);
    they are collapsed to one line for the log.
    """
    if isinstance(error, ParseFailedError):
        return error
    message = " ".join(str(error).split())
    return ParseFailedError(path, fmt, message)


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, ConfigStoreError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None


def collect_errors(operation: str) -> "ErrorCollector":
    """
    Create an error collector for batch operations.

    Example:
        ```python
        collector = collect_errors("check required keys")

        for key in required:
            with collector.try_operation(key):
                store.get(key)

        if collector.has_errors:
            print(collector.get_summary())
        ```
    """
    return ErrorCollector(operation)


class ErrorCollector:
    """
    Collects multiple errors during batch operations.

    Allows operations to continue even if some fail, then
    report all failures at once.
    """

    def __init__(self, operation: str):
        self.operation = operation
        self.errors: list[tuple[str, Exception]] = []
        self.success_count = 0

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def try_operation(self, sub_operation: str):
        """Context manager that records the outcome of one step."""
        return self._OperationContext(self, sub_operation)

    def get_summary(self) -> str:
        """Multi-line summary of collected errors."""
        if not self.has_errors:
            return f"All operations completed successfully ({self.success_count} total)"

        total = self.error_count + self.success_count
        lines = [f"Failed {self.error_count} of {total} operations ({self.operation}):"]
        for sub_op, error in self.errors:
            message = error.user_message if isinstance(error, ConfigStoreError) else str(error)
            lines.append(f"  - {sub_op}: {message}")
        return "\n".join(lines)

    class _OperationContext:
        """Internal context manager for individual operations."""

        def __init__(self, collector: "ErrorCollector", sub_operation: str):
            self.collector = collector
            self.sub_operation = sub_operation

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_type is None:
                self.collector.success_count += 1
                return False

            # Only Exception subclasses are collected; KeyboardInterrupt etc. propagate
            if not isinstance(exc_val, Exception):
                return False

            self.collector.errors.append((self.sub_operation, exc_val))
            return True
