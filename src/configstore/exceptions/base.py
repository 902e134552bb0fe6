"""Root of the configstore exception tree.

Every error the library raises on purpose derives from ConfigStoreError,
so callers can guard a whole block of store calls with a single except
clause. Each error carries two renderings of the same failure:

- `user_message`: short text safe to print in a CLI or UI
- `technical_message`: the detailed variant that goes to the log

plus an optional `recovery_hint` and a `recoverable` flag.
"""

from typing import Optional


class ConfigStoreError(Exception):
    """
    Base exception for configstore.

    Attributes:
        user_message: Human-friendly message for display
        technical_message: Detailed message for logging
        recoverable: Whether retrying or correcting input can succeed
        recovery_hint: Optional hint for how to fix the issue
    """

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.user_message!r})"

    def get_full_message(self) -> str:
        """Return the user message followed by the recovery hint, if any."""
        if not self.recovery_hint:
            return self.user_message
        return f"{self.user_message}\n\nSuggestion: {self.recovery_hint}"
