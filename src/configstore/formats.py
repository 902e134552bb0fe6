"""Format bridge between the value model and JSON / YAML documents.

JSON maps onto the value model one to one, so that direction is a
validating walk over what ``json.loads`` returns.

YAML is handled at the node level (``yaml.compose`` / ``yaml.serialize``)
rather than through PyYAML's constructors. Plain scalars are read as text
and coerced here, in a fixed order:

    null -> boolean -> integer -> float -> string

Quoted and block scalars are always strings. On the way out, any string
that the coercion would turn into something else (``"yes"``, ``"42"``,
``"null"``, ``"1e5"``) is written single-quoted, so a value survives
JSON -> store -> YAML -> store unchanged.
"""

import json
import logging
import math
import re
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode
from yaml.resolver import BaseResolver, Resolver

from configstore.exceptions import (
    ConversionError,
    ParseFailedError,
    UnsupportedFormatError,
    wrap_parse_error,
)
from configstore.values import Value, ValueKind, kind_of

logger = logging.getLogger(__name__)

NULL_TAG = "tag:yaml.org,2002:null"
BOOL_TAG = "tag:yaml.org,2002:bool"
INT_TAG = "tag:yaml.org,2002:int"
FLOAT_TAG = "tag:yaml.org,2002:float"
STR_TAG = BaseResolver.DEFAULT_SCALAR_TAG
SEQ_TAG = BaseResolver.DEFAULT_SEQUENCE_TAG
MAP_TAG = BaseResolver.DEFAULT_MAPPING_TAG

JSON_INDENT = 4


class FileFormat(Enum):
    """File formats the persistence pipeline can read and write."""

    JSON = "json"
    YAML = "yaml"

    @property
    def label(self) -> str:
        return self.name


_EXTENSIONS: dict[str, FileFormat] = {
    ".json": FileFormat.JSON,
    ".yaml": FileFormat.YAML,
    ".yml": FileFormat.YAML,
}


def detect_format(path: str | Path) -> FileFormat:
    """
    Pick a codec from the file extension (case-insensitive).

    Raises:
        UnsupportedFormatError: For any extension other than .json/.yaml/.yml
    """
    suffix = Path(path).suffix.lower()
    try:
        return _EXTENSIONS[suffix]
    except KeyError:
        raise UnsupportedFormatError(path, suffix.lstrip(".")) from None


# =================================================================
# Scalar coercion
# =================================================================

_NULL_WORDS = frozenset({"", "~", "null", "Null", "NULL"})
_TRUE_WORDS = frozenset({"true", "True", "TRUE", "yes", "Yes", "YES", "on", "On", "ON", "y", "Y"})
_FALSE_WORDS = frozenset({"false", "False", "FALSE", "no", "No", "NO", "off", "Off", "OFF", "n", "N"})
_DEC_INT = re.compile(r"[-+]?[0-9]+")
_HEX_INT = re.compile(r"[-+]?0x[0-9a-fA-F]+")
_OCT_INT = re.compile(r"[-+]?0o[0-7]+")
_FLOAT = re.compile(r"[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?")
_INF = re.compile(r"([-+]?)\.(?:inf|Inf|INF)")
_NAN_WORDS = frozenset({".nan", ".NaN", ".NAN"})


def coerce_scalar(text: str) -> Value:
    """
    Recover a typed value from the text of a plain YAML scalar.

    Tries null, then boolean, then integer, then float; anything that
    matches none of them stays a string.

    Example:
        ```python
        coerce_scalar("on")     # True
        coerce_scalar("0x1F")   # 31
        coerce_scalar("2.5e3")  # 2500.0
        coerce_scalar("v1.2")   # "v1.2"
        ```
    """
    if text in _NULL_WORDS:
        return None
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    if _DEC_INT.fullmatch(text):
        return int(text)
    if _HEX_INT.fullmatch(text):
        return int(text, 16)
    if _OCT_INT.fullmatch(text):
        return int(text, 8)
    if _FLOAT.fullmatch(text):
        return float(text)
    match = _INF.fullmatch(text)
    if match:
        return -math.inf if match.group(1) == "-" else math.inf
    if text in _NAN_WORDS:
        return math.nan
    return text


def _float_text(value: float) -> str:
    if math.isnan(value):
        return ".nan"
    if math.isinf(value):
        return ".inf" if value > 0 else "-.inf"
    text = repr(value).lower()
    # "1e+16" is not a YAML 1.1 float; "1.0e+16" is
    if "." not in text and "e" in text:
        text = text.replace("e", ".0e", 1)
    return text


# =================================================================
# YAML nodes <-> values
# =================================================================

_QUOTED_STYLES = frozenset({"'", '"', "|", ">"})
_TAG_KINDS = {
    NULL_TAG: ValueKind.NULL,
    BOOL_TAG: ValueKind.BOOL,
    INT_TAG: ValueKind.INT,
    FLOAT_TAG: ValueKind.FLOAT,
}
_RESOLVER = Resolver()


def _string_node(text: str) -> ScalarNode:
    style = None
    if not isinstance(coerce_scalar(text), str):
        style = "'"
    return ScalarNode(STR_TAG, text, style=style)


def value_to_yaml_node(value: Any, location: str = "") -> Node:
    """
    Build a PyYAML node tree for a value.

    Raises:
        ConversionError: If the tree contains a foreign type
    """
    match value:
        case None:
            return ScalarNode(NULL_TAG, "null")
        case bool():
            return ScalarNode(BOOL_TAG, "true" if value else "false")
        case int():
            return ScalarNode(INT_TAG, str(value))
        case float():
            return ScalarNode(FLOAT_TAG, _float_text(value))
        case str():
            return _string_node(value)
        case list():
            items = [value_to_yaml_node(item, f"{location}[{i}]") for i, item in enumerate(value)]
            return SequenceNode(SEQ_TAG, items, flow_style=False)
        case dict():
            pairs = []
            for key, item in value.items():
                if not isinstance(key, str):
                    raise ConversionError(f"non-string key {key!r} at '{location or '<root>'}'")
                child = f"{location}.{key}" if location else key
                pairs.append((_string_node(key), value_to_yaml_node(item, child)))
            return MappingNode(MAP_TAG, pairs, flow_style=False)
        case _:
            where = f" at '{location}'" if location else ""
            raise ConversionError(f"cannot represent {type(value).__name__}{where}")


def _scalar_to_value(node: ScalarNode) -> Value:
    plain = node.style is None
    implicit_tag = _RESOLVER.resolve(ScalarNode, node.value, (plain, True))

    if node.tag == implicit_tag:
        # No explicit tag in the document
        return coerce_scalar(node.value) if plain else node.value

    match node.tag:
        case tag if tag == STR_TAG:
            return node.value
        case tag if tag in _TAG_KINDS:
            value = coerce_scalar(node.value)
            expected = _TAG_KINDS[tag]
            if expected is ValueKind.FLOAT and kind_of(value) is ValueKind.INT:
                return float(value)
            if kind_of(value) is not expected:
                raise ConversionError(
                    f"scalar {node.value!r} is not a valid {expected.value} "
                    f"(line {node.start_mark.line + 1})"
                )
            return value
        case tag:
            raise ConversionError(
                f"unsupported tag {tag} on scalar {node.value!r} (line {node.start_mark.line + 1})"
            )


def yaml_node_to_value(node: Node, _active: Optional[set[int]] = None) -> Value:
    """
    Convert a composed PyYAML node tree to a value.

    An alias may repeat a node anywhere except inside that node itself.

    Raises:
        ConversionError: For non-scalar mapping keys, tagged collections
            (!!set, !!omap, ...), unknown scalar tags and recursive aliases
    """
    if isinstance(node, ScalarNode):
        return _scalar_to_value(node)

    active = set() if _active is None else _active
    if id(node) in active:
        raise ConversionError(f"recursive alias (line {node.start_mark.line + 1})")
    active.add(id(node))
    try:
        return _collection_to_value(node, active)
    finally:
        active.discard(id(node))


def _collection_to_value(node: Node, active: set[int]) -> Value:
    match node:
        case SequenceNode(tag=tag) if tag == SEQ_TAG:
            return [yaml_node_to_value(item, active) for item in node.value]
        case MappingNode(tag=tag) if tag == MAP_TAG:
            result: dict[str, Value] = {}
            for key_node, value_node in node.value:
                if not isinstance(key_node, ScalarNode):
                    raise ConversionError(
                        f"mapping keys must be scalars (line {key_node.start_mark.line + 1})"
                    )
                result[key_node.value] = yaml_node_to_value(value_node, active)
            return result
        case _:
            raise ConversionError(f"unsupported YAML node {node.tag} (line {node.start_mark.line + 1})")


# =================================================================
# JSON trees <-> values
# =================================================================

def json_to_value(obj: Any, location: str = "") -> Value:
    """Validate a ``json.loads`` result against the value model."""
    match obj:
        case None | bool() | int() | float() | str():
            return obj
        case list():
            return [json_to_value(item, f"{location}[{i}]") for i, item in enumerate(obj)]
        case dict():
            return {
                key: json_to_value(item, f"{location}.{key}" if location else key)
                for key, item in obj.items()
            }
        case _:
            where = f" at '{location}'" if location else ""
            raise ConversionError(f"cannot represent {type(obj).__name__}{where}", fmt="JSON")


# =================================================================
# Documents
# =================================================================

def decode(text: str, fmt: FileFormat, path: Optional[str | Path] = None) -> dict[str, Value]:
    """
    Parse a whole document into a top-level mapping.

    An empty YAML document decodes to an empty mapping.

    Raises:
        ParseFailedError: For malformed content or a non-mapping root
    """
    source = path or "<memory>"
    try:
        if fmt is FileFormat.JSON:
            try:
                tree = json.loads(text)
            except json.JSONDecodeError as e:
                raise wrap_parse_error(e, source, fmt.label) from e
            if not isinstance(tree, dict):
                raise ParseFailedError(
                    source, fmt.label, f"document root must be an object, got {type(tree).__name__}"
                )
            return json_to_value(tree)

        try:
            root = yaml.compose(text, Loader=yaml.SafeLoader)
        except yaml.YAMLError as e:
            raise wrap_parse_error(e, source, fmt.label) from e
        if root is None:
            return {}
        if not isinstance(root, MappingNode):
            raise ParseFailedError(source, fmt.label, "document root must be a mapping")
        return yaml_node_to_value(root)

    except ConversionError as e:
        if e.path == str(source):
            raise
        raise ConversionError(e.detail, source, fmt.label) from e
    except RecursionError as e:
        raise ParseFailedError(source, fmt.label, "document is nested too deeply") from e


def encode(mapping: dict[str, Value], fmt: FileFormat) -> str:
    """
    Serialize a top-level mapping; key order follows the dict.

    Raises:
        ConversionError: If the mapping holds a foreign type
    """
    if fmt is FileFormat.JSON:
        tree = json_to_value(mapping)
        return json.dumps(tree, indent=JSON_INDENT, ensure_ascii=False) + "\n"

    node = value_to_yaml_node(mapping)
    return yaml.serialize(node, Dumper=yaml.SafeDumper, allow_unicode=True)
