"""Persistence-related exceptions.

This module defines exceptions for the load/save pipeline:
- PersistenceError: Base class for file errors
- UnsupportedFormatError: File extension has no codec
- FileOpenFailedError: File cannot be opened for reading or writing
- ParseFailedError: File content is not valid JSON/YAML
- ConversionError: Parsed tree holds a node the value model cannot express
"""

from pathlib import Path
from typing import Optional

from .base import ConfigStoreError


class PersistenceError(ConfigStoreError):
    """A configuration file could not be loaded or saved."""

    def __init__(self, path: str | Path, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.path = str(path)


class UnsupportedFormatError(PersistenceError):
    """No codec is registered for the file's extension."""

    def __init__(self, path: str | Path, extension: str):
        """
        Initialize unsupported format error.

        Args:
            path: The file that was requested
            extension: The extension that failed dispatch (without the dot)
        """
        shown = extension or "<none>"
        super().__init__(
            path,
            user_message=f"Unsupported config file format: {shown}",
            technical_message=f"No codec for extension '{shown}' (file: {path})",
            recoverable=True,
            recovery_hint="Use a .json, .yaml or .yml file",
        )
        self.extension = extension


class FileOpenFailedError(PersistenceError):
    """The file could not be opened (missing, permissions, directory, ...)."""

    def __init__(self, path: str | Path, mode: str, reason: str):
        """
        Initialize file open error.

        Args:
            path: The file that failed to open
            mode: "reading" or "writing"
            reason: The underlying OS error message
        """
        super().__init__(
            path,
            user_message=f"Failed to open config file for {mode}: {path}",
            technical_message=f"Failed to open {path} for {mode}: {reason}",
            recoverable=True,
            recovery_hint="Check that the path exists and that you have the required permissions",
        )
        self.mode = mode
        self.reason = reason


class ParseFailedError(PersistenceError):
    """The file content is not a valid document for its format."""

    def __init__(self, path: str | Path, fmt: str, parse_error: str):
        """
        Initialize parse error.

        Args:
            path: Path to the invalid file
            fmt: Format name ("JSON" or "YAML")
            parse_error: The parser's message
        """
        user_msg = f"Configuration file has invalid {fmt} syntax"
        recovery = f"Fix the syntax error in {path}"

        lowered = parse_error.lower()
        if "root" in lowered or "top-level" in lowered:
            user_msg = f"Configuration file must contain a {fmt} mapping at the top level"
            recovery = "Wrap the settings in an object/mapping of key: value pairs"
        elif fmt == "JSON" and ("expecting" in lowered or "comma" in lowered):
            recovery += "\nCommon causes: trailing commas, missing quotes, unclosed braces"
        elif fmt == "YAML" and "indent" in lowered:
            recovery += "\nCheck indentation: YAML requires consistent spaces (no tabs)"

        super().__init__(
            path,
            user_message=user_msg,
            technical_message=f"{fmt} parse error in {path}: {parse_error}",
            recoverable=True,
            recovery_hint=recovery,
        )
        self.format = fmt
        self.parse_error = parse_error


class ConversionError(ParseFailedError):
    """A node in the parsed tree has no value-model equivalent."""

    def __init__(self, detail: str, path: Optional[str | Path] = None, fmt: str = "YAML"):
        super().__init__(path or "<memory>", fmt, detail)
        self.user_message = f"Unsupported {fmt} content: {detail}"
        self.detail = detail
