"""Tests for the value model."""

import pytest

from configstore.exceptions import UnsupportedValueError
from configstore.values import ValueKind, copy_value, empty_placeholder, kind_of, validate_value


class TestKindOf:
    """Test node classification."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value, kind",
        [
            (None, ValueKind.NULL),
            (True, ValueKind.BOOL),
            (False, ValueKind.BOOL),
            (0, ValueKind.INT),
            (2.5, ValueKind.FLOAT),
            ("text", ValueKind.STRING),
            ([], ValueKind.LIST),
            ({}, ValueKind.MAP),
        ],
    )
    def test_kinds(self, value, kind):
        """Each supported node maps to its tag; bool is not an int."""
        assert kind_of(value) is kind

    @pytest.mark.unit
    def test_scalar_flag(self):
        assert ValueKind.STRING.is_scalar
        assert not ValueKind.LIST.is_scalar
        assert not ValueKind.MAP.is_scalar

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [(1, 2), {1, 2}, b"raw", object()])
    def test_foreign_types_rejected(self, value):
        with pytest.raises(UnsupportedValueError):
            kind_of(value)


class TestValidateValue:
    """Test deep validation."""

    @pytest.mark.unit
    def test_valid_tree_returned_unchanged(self, sample_values):
        assert validate_value(sample_values) is sample_values

    @pytest.mark.unit
    def test_nested_foreign_type_reports_location(self):
        with pytest.raises(UnsupportedValueError) as exc_info:
            validate_value({"servers": [{"port": 80}, {"port": (1, 2)}]})

        assert exc_info.value.location == "servers[1].port"
        assert "servers[1].port" in exc_info.value.user_message

    @pytest.mark.unit
    def test_non_string_key_rejected(self):
        with pytest.raises(UnsupportedValueError):
            validate_value({"map": {1: "one"}})

    @pytest.mark.unit
    def test_error_is_also_type_error(self):
        with pytest.raises(TypeError):
            validate_value({"x"})


class TestCopyValue:

    @pytest.mark.unit
    def test_copy_is_deep(self):
        original = {"list": [1, {"a": 2}]}
        copied = copy_value(original)
        copied["list"][1]["a"] = 99
        assert original["list"][1]["a"] == 2

    @pytest.mark.unit
    def test_placeholder_is_fresh_empty_dict(self):
        first = empty_placeholder()
        first["x"] = 1
        assert empty_placeholder() == {}
