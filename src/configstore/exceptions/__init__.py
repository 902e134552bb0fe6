"""
Custom exception hierarchy for configstore.

## Exception Hierarchy

```
ConfigStoreError (base)
├── StoreError
│   ├── KeyNotFoundError          (also KeyError)
│   ├── InvalidKeyError           (also ValueError)
│   ├── UnsupportedValueError     (also TypeError)
│   └── ValidationFailedError
│       └── InvalidValueError
├── PersistenceError
│   ├── UnsupportedFormatError
│   ├── FileOpenFailedError
│   └── ParseFailedError
│       └── ConversionError
└── UnsupportedEnvironmentError   (also ValueError)
```

All custom exceptions inherit from `ConfigStoreError`, which provides
`user_message`, `technical_message`, `recoverable` and `recovery_hint`.
The builtin mix-ins let existing `except KeyError` / `except ValueError`
code keep working.

### Example: Missing key

```python
from configstore.exceptions import KeyNotFoundError

try:
    port = store.get("db_port")
except KeyNotFoundError as e:
    logger.warning(e.technical_message)
    port = 5432
```

See `configstore.exceptions.handlers` for utilities to handle these
exceptions systematically.
"""

from .base import ConfigStoreError
from .handlers import (
    ErrorCollector,
    ErrorContext,
    collect_errors,
    format_error_for_display,
    handle_errors,
    wrap_os_error,
    wrap_parse_error,
)
from .persistence import (
    ConversionError,
    FileOpenFailedError,
    ParseFailedError,
    PersistenceError,
    UnsupportedFormatError,
)
from .registry import UnsupportedEnvironmentError
from .store import (
    InvalidKeyError,
    InvalidValueError,
    KeyNotFoundError,
    StoreError,
    UnsupportedValueError,
    ValidationFailedError,
)

__all__ = [
    # Base
    "ConfigStoreError",
    # Store
    "InvalidKeyError",
    "InvalidValueError",
    "KeyNotFoundError",
    "StoreError",
    "UnsupportedValueError",
    "ValidationFailedError",
    # Persistence
    "ConversionError",
    "FileOpenFailedError",
    "ParseFailedError",
    "PersistenceError",
    "UnsupportedFormatError",
    # Registry
    "UnsupportedEnvironmentError",
    # Handlers
    "ErrorCollector",
    "ErrorContext",
    "collect_errors",
    "format_error_for_display",
    "handle_errors",
    "wrap_os_error",
    "wrap_parse_error",
]
