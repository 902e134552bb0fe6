"""Tests for the JSON/YAML format bridge."""

import json
import math

import pytest

from configstore.exceptions import ConversionError, ParseFailedError, UnsupportedFormatError
from configstore.formats import FileFormat, coerce_scalar, decode, detect_format, encode


class TestDetectFormat:

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name, fmt",
        [
            ("config.json", FileFormat.JSON),
            ("config.yaml", FileFormat.YAML),
            ("config.yml", FileFormat.YAML),
            ("CONFIG.YML", FileFormat.YAML),
            ("dir.d/settings.Json", FileFormat.JSON),
        ],
    )
    def test_known_extensions(self, name, fmt):
        assert detect_format(name) is fmt

    @pytest.mark.unit
    def test_unknown_extension(self):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            detect_format("config.txt")
        assert exc_info.value.extension == "txt"
        assert exc_info.value.recovery_hint

    @pytest.mark.unit
    def test_missing_extension(self):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            detect_format("config")
        assert exc_info.value.extension == ""


class TestCoerceScalar:
    """Test plain-scalar coercion order: null, bool, int, float, string."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("", None),
            ("~", None),
            ("null", None),
            ("NULL", None),
            ("true", True),
            ("Yes", True),
            ("on", True),
            ("y", True),
            ("FALSE", False),
            ("no", False),
            ("Off", False),
            ("n", False),
            ("42", 42),
            ("-7", -7),
            ("0x1F", 31),
            ("0o17", 15),
            ("2.5", 2.5),
            ("2.5e3", 2500.0),
            (".5", 0.5),
            ("1.0e+16", 1e16),
            ("v1.2", "v1.2"),
            ("1.0.0", "1.0.0"),
            ("hello world", "hello world"),
        ],
    )
    def test_coercion(self, text, expected):
        result = coerce_scalar(text)
        assert result == expected
        assert type(result) is type(expected)

    @pytest.mark.unit
    def test_special_floats(self):
        assert coerce_scalar(".inf") == math.inf
        assert coerce_scalar("-.Inf") == -math.inf
        assert math.isnan(coerce_scalar(".nan"))


class TestYamlDecode:

    @pytest.mark.unit
    def test_plain_and_quoted_scalars(self):
        text = (
            "flag: yes\n"
            "off_flag: Off\n"
            "hex: 0x1F\n"
            "octal: 0o17\n"
            "exponent: 2.5e3\n"
            "low: -.inf\n"
            "nothing: ~\n"
            "empty:\n"
            "quoted: \"yes\"\n"
            "single: '42'\n"
            "version_like: 1.0.0\n"
            "date_like: 2024-01-15\n"
            "tagged: !!str 123\n"
            "forced_float: !!float 3\n"
            "block: |\n"
            "  true\n"
            "items:\n"
            "  - 1\n"
            "  - two\n"
        )

        values = decode(text, FileFormat.YAML)

        assert values == {
            "flag": True,
            "off_flag": False,
            "hex": 31,
            "octal": 15,
            "exponent": 2500.0,
            "low": -math.inf,
            "nothing": None,
            "empty": None,
            "quoted": "yes",
            "single": "42",
            "version_like": "1.0.0",
            "date_like": "2024-01-15",
            "tagged": "123",
            "forced_float": 3.0,
            "block": "true\n",
            "items": [1, "two"],
        }
        assert isinstance(values["forced_float"], float)

    @pytest.mark.unit
    def test_aliases_are_resolved(self):
        values = decode("base: &b {x: 1}\nother: *b\n", FileFormat.YAML)
        assert values["other"] == {"x": 1}

    @pytest.mark.unit
    def test_alias_repeated_in_siblings_is_not_recursive(self):
        values = decode("base: &b [1]\npair: [*b, *b]\n", FileFormat.YAML)
        assert values["pair"] == [[1], [1]]

    @pytest.mark.unit
    def test_recursive_alias(self):
        with pytest.raises(ConversionError) as exc_info:
            decode("a: &x [*x]\n", FileFormat.YAML, path="cycle.yaml")
        assert "recursive alias" in exc_info.value.detail
        assert exc_info.value.path == "cycle.yaml"

    @pytest.mark.unit
    def test_empty_document_is_empty_mapping(self):
        assert decode("", FileFormat.YAML) == {}
        assert decode("# only a comment\n", FileFormat.YAML) == {}

    @pytest.mark.unit
    def test_non_mapping_root(self):
        with pytest.raises(ParseFailedError) as exc_info:
            decode("- a\n- b\n", FileFormat.YAML)
        assert "top level" in exc_info.value.user_message

    @pytest.mark.unit
    def test_malformed_yaml(self):
        with pytest.raises(ParseFailedError) as exc_info:
            decode("key: [unclosed\n", FileFormat.YAML, path="bad.yaml")
        assert exc_info.value.path == "bad.yaml"
        assert exc_info.value.format == "YAML"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text",
        [
            "values: !!set {a, b}\n",
            "number: !!int abc\n",
            "blob: !!binary aGVsbG8=\n",
            "? [a, b]\n: 1\n",
        ],
    )
    def test_unsupported_nodes(self, text):
        with pytest.raises(ConversionError) as exc_info:
            decode(text, FileFormat.YAML, path="odd.yaml")
        assert exc_info.value.path == "odd.yaml"
        assert isinstance(exc_info.value, ParseFailedError)


class TestJsonDecode:

    @pytest.mark.unit
    def test_object_root(self):
        values = decode('{"a": 1, "b": [true, null, 2.5], "c": {"d": "e"}}', FileFormat.JSON)
        assert values == {"a": 1, "b": [True, None, 2.5], "c": {"d": "e"}}

    @pytest.mark.unit
    def test_array_root_rejected(self):
        with pytest.raises(ParseFailedError) as exc_info:
            decode("[1, 2]", FileFormat.JSON)
        assert "top level" in exc_info.value.user_message

    @pytest.mark.unit
    def test_trailing_comma(self):
        with pytest.raises(ParseFailedError) as exc_info:
            decode('{"a": 1,}', FileFormat.JSON, path="bad.json")
        assert "trailing commas" in exc_info.value.recovery_hint


class TestEncode:

    @pytest.mark.unit
    def test_json_layout(self):
        text = encode({"name": "café", "n": 1}, FileFormat.JSON)
        assert text.endswith("\n")
        assert '\n    "name": "café"' in text
        assert json.loads(text) == {"name": "café", "n": 1}

    @pytest.mark.unit
    def test_yaml_quotes_ambiguous_strings(self):
        text = encode({"answer": "yes", "count": "42", "real": 42}, FileFormat.YAML)
        assert "answer: 'yes'" in text
        assert "count: '42'" in text
        assert "real: 42" in text

    @pytest.mark.unit
    def test_yaml_float_always_has_marker(self):
        text = encode({"big": 1e16, "whole": 3.0, "top": math.inf}, FileFormat.YAML)
        assert "big: 1.0e+16" in text
        assert "whole: 3.0" in text
        assert "top: .inf" in text

    @pytest.mark.unit
    def test_yaml_preserves_key_order(self):
        text = encode({"z": 1, "a": 2, "m": 3}, FileFormat.YAML)
        assert [line.split(":")[0] for line in text.splitlines()] == ["z", "a", "m"]

    @pytest.mark.unit
    @pytest.mark.parametrize("fmt", [FileFormat.JSON, FileFormat.YAML])
    def test_round_trip(self, fmt, sample_values):
        assert decode(encode(sample_values, fmt), fmt) == sample_values

    @pytest.mark.unit
    @pytest.mark.parametrize("fmt", [FileFormat.JSON, FileFormat.YAML])
    def test_foreign_type_rejected(self, fmt):
        with pytest.raises(ConversionError):
            encode({"bad": (1, 2)}, fmt)
