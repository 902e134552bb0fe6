"""Human-facing rendering of a configuration snapshot.

Six output formats are available. The process keeps one "current" format
in a FormatManager; ConfigStore.output_config() uses it when the caller
does not pass one explicitly.

```python
set_output_format(OutputFormat.YAML)
store.output_config()          # YAML on stdout
store.output_config(fmt=OutputFormat.CSV)
```
"""

import csv
import html
import io
import json
import logging
import re
from collections.abc import Mapping
from enum import Enum
from threading import Lock
from xml.sax.saxutils import escape, quoteattr

from configstore.formats import FileFormat, encode
from configstore.values import Value

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    """Display formats, valued by their human-readable label."""

    PLAIN_TEXT = "Plain Text"
    JSON = "JSON"
    XML = "XML"
    YAML = "YAML"
    HTML = "HTML"
    CSV = "CSV"


def format_to_string(fmt: OutputFormat) -> str:
    return fmt.value


def string_to_format(text: str) -> OutputFormat:
    """
    Parse a format label ("Plain Text", "json", "plain_text", ...).

    Raises:
        ValueError: If the text names no known format
    """
    wanted = text.strip().casefold().replace("_", " ")
    for fmt in OutputFormat:
        if wanted in (fmt.value.casefold(), fmt.name.casefold().replace("_", " ")):
            return fmt
    raise ValueError(f"Unknown output format: {text!r}")


class FormatManager:
    """Thread-safe holder of the current output format."""

    def __init__(self, initial: OutputFormat = OutputFormat.PLAIN_TEXT):
        self._format = initial
        self._lock = Lock()

    def set_format(self, fmt: OutputFormat) -> None:
        with self._lock:
            self._format = fmt
        logger.debug(f"Output format set to {fmt.value}")

    def get_format(self) -> OutputFormat:
        with self._lock:
            return self._format

    @staticmethod
    def list_formats() -> list[str]:
        return [fmt.value for fmt in OutputFormat]


# Singleton instance
_format_manager: FormatManager | None = None
_format_manager_lock = Lock()


def get_format_manager() -> FormatManager:
    """Get the process-wide FormatManager."""
    global _format_manager
    with _format_manager_lock:
        if _format_manager is None:
            _format_manager = FormatManager()
        return _format_manager


def set_output_format(fmt: OutputFormat | str) -> None:
    if isinstance(fmt, str) and not isinstance(fmt, OutputFormat):
        fmt = string_to_format(fmt)
    get_format_manager().set_format(fmt)


def _compact(value: Value) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


_XML_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_.-]*")


def _xml_element(key: str, value: Value) -> str:
    text = escape(_compact(value))
    # Keys that are not valid XML names are written as attributes
    if _XML_NAME.fullmatch(key) and not key.lower().startswith("xml"):
        return f"<{key}>{text}</{key}>"
    return f"<entry key={quoteattr(key)}>{text}</entry>"


def render(mapping: Mapping[str, Value], fmt: OutputFormat) -> str:
    """
    Render a key/value snapshot as text.

    Args:
        mapping: Snapshot to render, usually ConfigStore.get_all()
        fmt: Output format

    Returns:
        The rendered text, ending with a newline (empty for an empty
        plain-text or CSV snapshot)
    """
    match fmt:
        case OutputFormat.PLAIN_TEXT:
            return "".join(f"{key}: {_compact(value)}\n" for key, value in mapping.items())
        case OutputFormat.JSON:
            return encode(dict(mapping), FileFormat.JSON)
        case OutputFormat.XML:
            lines = ["<output>"]
            lines.extend(f"  {_xml_element(key, value)}" for key, value in mapping.items())
            lines.append("</output>")
            return "\n".join(lines) + "\n"
        case OutputFormat.YAML:
            return encode(dict(mapping), FileFormat.YAML)
        case OutputFormat.HTML:
            body = html.escape(json.dumps(dict(mapping), indent=4, ensure_ascii=False))
            return f"<html><body><pre>{body}</pre></body></html>\n"
        case OutputFormat.CSV:
            buffer = io.StringIO()
            writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
            for key, value in mapping.items():
                writer.writerow([key, _compact(value)])
            return buffer.getvalue()
    raise ValueError(f"Unsupported output format: {fmt!r}")
