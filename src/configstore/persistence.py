"""Reading and writing configuration documents.

Stateless helpers used by ConfigStore's load/save methods. They know about
paths, extensions and atomic writes; they know nothing about locks or
listeners.

Error Handling:
    Low-level failures are converted to typed exceptions here:

    - OSError while opening/reading/writing -> FileOpenFailedError
    - malformed JSON/YAML                    -> ParseFailedError
    - unknown extension                      -> UnsupportedFormatError

    ConfigStore decides whether to raise or to report and return False.

Safety Features:
    - Atomic writes using temp file + rename
    - Format is resolved before the target is touched, so an unsupported
      extension never truncates an existing file
"""

import logging
import os
import tempfile
from collections.abc import Iterable, Mapping
from pathlib import Path

from configstore.exceptions import ParseFailedError, wrap_os_error
from configstore.formats import FileFormat, decode, detect_format, encode
from configstore.values import Value

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "1.0.0"
VERSION_KEY = "version"


class DocumentPersistence:
    """
    Utility class for loading and saving configuration documents.

    All methods are static and thread-safe: they operate only on their
    arguments.

    Example Usage:
        ```python
        values = DocumentPersistence.read_document(Path("config.yaml"))

        DocumentPersistence.write_document(
            Path("config.json"),
            DocumentPersistence.build_versioned_document(values, "2.0.0", FileFormat.JSON),
        )
        ```
    """

    @staticmethod
    def read_document(path: str | Path, fmt: FileFormat | None = None) -> dict[str, Value]:
        """
        Read and parse a whole document.

        Args:
            path: File to read
            fmt: Force a format instead of dispatching on the extension

        Returns:
            Top-level mapping of the document

        Raises:
            UnsupportedFormatError: If the extension has no codec
            FileOpenFailedError: If the file cannot be opened or read
            ParseFailedError: If the content is malformed
        """
        path = Path(path)
        fmt = fmt or detect_format(path)

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise wrap_os_error(e, path, "reading") from e
        except UnicodeDecodeError as e:
            raise ParseFailedError(path, fmt.label, f"file is not valid UTF-8: {e}") from e

        document = decode(text, fmt, path)
        logger.debug(f"Read {len(document)} top-level key(s) from {path} ({fmt.label})")
        return document

    @staticmethod
    def read_partial(path: str | Path, keys: Iterable[str]) -> dict[str, Value]:
        """
        Read a document and keep only the requested keys that it contains.

        Keys are returned in the order they were requested.
        """
        document = DocumentPersistence.read_document(path)
        return {key: document[key] for key in dict.fromkeys(keys) if key in document}

    @staticmethod
    def write_document(
        path: str | Path,
        document: Mapping[str, Value],
        fmt: FileFormat | None = None,
        create_parents: bool = True,
    ) -> None:
        """
        Serialize a mapping and write it atomically.

        Args:
            path: Target file (overwritten)
            document: Top-level mapping to write
            fmt: Force a format instead of dispatching on the extension
            create_parents: Create missing parent directories (default: True)

        Raises:
            UnsupportedFormatError: If the extension has no codec
            ConversionError: If the mapping holds a foreign type
            FileOpenFailedError: If the file cannot be written
        """
        path = Path(path)
        fmt = fmt or detect_format(path)

        # Serialize first: a conversion failure must not touch the disk
        content = encode(dict(document), fmt)

        temp_path: Path | None = None
        try:
            if create_parents:
                path.parent.mkdir(parents=True, exist_ok=True)
            # One temp file per writer, so concurrent saves never share it
            fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=path.name + ".", suffix=".tmp")
            temp_path = Path(temp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            temp_path.replace(path)
        except OSError as e:
            raise wrap_os_error(e, path, "writing") from e
        finally:
            # Clean up temp file if the rename did not happen
            if temp_path is not None and temp_path.exists():
                temp_path.unlink()

        logger.debug(f"Wrote {len(document)} top-level key(s) to {path} ({fmt.label})")

    @staticmethod
    def build_versioned_document(
        values: Mapping[str, Value], version: str, fmt: FileFormat
    ) -> dict[str, Value]:
        """
        Lay out a full save: config keys plus a "version" field.

        JSON puts the version after the config keys, YAML puts it first.
        The injected version replaces a stored key of the same name.
        """
        if VERSION_KEY in values:
            logger.warning(
                f"Stored key '{VERSION_KEY}' ({values[VERSION_KEY]!r}) is replaced by the "
                f"document version {version!r} and will not be saved"
            )
        body = {key: value for key, value in values.items() if key != VERSION_KEY}
        if fmt is FileFormat.YAML:
            return {VERSION_KEY: version, **body}
        body[VERSION_KEY] = version
        return body

    @staticmethod
    def split_version(document: dict[str, Value]) -> tuple[dict[str, Value], Value]:
        """Separate the "version" field from the config keys of a loaded document."""
        values = dict(document)
        version = values.pop(VERSION_KEY, None)
        return values, version
