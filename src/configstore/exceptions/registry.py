"""Registry and factory exceptions."""

from collections.abc import Iterable

from .base import ConfigStoreError


class UnsupportedEnvironmentError(ConfigStoreError, ValueError):
    """No preset exists for the requested environment name."""

    def __init__(self, environment: str, known: Iterable[str] = ()):
        """
        Initialize unsupported environment error.

        Args:
            environment: The name that was requested
            known: Names of the presets that do exist
        """
        known = sorted(known)
        hint = None
        if known:
            hint = "Choose one of: " + ", ".join(known)
        super().__init__(
            user_message=f"Unsupported environment: {environment}",
            technical_message=f"No preset registered for environment '{environment}' (known: {known})",
            recoverable=True,
            recovery_hint=hint,
        )
        self.environment = environment
        self.known = known
