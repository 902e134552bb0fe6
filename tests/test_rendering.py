"""Tests for output rendering."""

import json

import pytest

from configstore.rendering import (
    FormatManager,
    OutputFormat,
    format_to_string,
    get_format_manager,
    render,
    set_output_format,
    string_to_format,
)


@pytest.fixture
def snapshot():
    return {"name": "a<b>", "port": 5432, "tags": ["x", "y"]}


@pytest.fixture
def restore_format():
    """Put the process-wide format back after the test."""
    manager = get_format_manager()
    previous = manager.get_format()
    yield manager
    manager.set_format(previous)


class TestFormatNames:

    @pytest.mark.unit
    def test_labels(self):
        assert format_to_string(OutputFormat.PLAIN_TEXT) == "Plain Text"
        assert FormatManager.list_formats() == ["Plain Text", "JSON", "XML", "YAML", "HTML", "CSV"]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text, fmt",
        [
            ("Plain Text", OutputFormat.PLAIN_TEXT),
            ("plain_text", OutputFormat.PLAIN_TEXT),
            ("json", OutputFormat.JSON),
            (" YAML ", OutputFormat.YAML),
            ("csv", OutputFormat.CSV),
        ],
    )
    def test_parse(self, text, fmt):
        assert string_to_format(text) is fmt

    @pytest.mark.unit
    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            string_to_format("toml")


class TestFormatManager:

    @pytest.mark.unit
    def test_default_is_plain_text(self):
        assert FormatManager().get_format() is OutputFormat.PLAIN_TEXT

    @pytest.mark.unit
    def test_set_output_format(self, restore_format):
        set_output_format("xml")
        assert restore_format.get_format() is OutputFormat.XML
        set_output_format(OutputFormat.CSV)
        assert restore_format.get_format() is OutputFormat.CSV


class TestRender:

    @pytest.mark.unit
    def test_plain_text(self, snapshot):
        assert render(snapshot, OutputFormat.PLAIN_TEXT) == (
            'name: "a<b>"\nport: 5432\ntags: ["x","y"]\n'
        )

    @pytest.mark.unit
    def test_json(self, snapshot):
        assert json.loads(render(snapshot, OutputFormat.JSON)) == snapshot

    @pytest.mark.unit
    def test_xml_escapes_text(self, snapshot):
        text = render(snapshot, OutputFormat.XML)
        assert text.startswith("<output>\n")
        assert '  <name>"a&lt;b&gt;"</name>' in text
        assert text.rstrip().endswith("</output>")

    @pytest.mark.unit
    def test_xml_keys_that_are_not_element_names(self):
        text = render({"my key": 1, "a<b": 2, "9lives": 3, "PATH": "/bin"}, OutputFormat.XML)
        assert '  <entry key="my key">1</entry>' in text
        assert '  <entry key="a&lt;b">2</entry>' in text
        assert '  <entry key="9lives">3</entry>' in text
        assert '  <PATH>"/bin"</PATH>' in text

    @pytest.mark.unit
    def test_yaml(self, snapshot):
        assert "port: 5432" in render(snapshot, OutputFormat.YAML)

    @pytest.mark.unit
    def test_html(self, snapshot):
        text = render(snapshot, OutputFormat.HTML)
        assert text.startswith("<html><body><pre>")
        assert "a&lt;b&gt;" in text

    @pytest.mark.unit
    def test_csv(self, snapshot):
        lines = render(snapshot, OutputFormat.CSV).splitlines()
        assert lines[1] == '"port","5432"'
        assert lines[0] == '"name","""a<b>"""'

    @pytest.mark.unit
    def test_empty_snapshot(self):
        assert render({}, OutputFormat.PLAIN_TEXT) == ""
        assert json.loads(render({}, OutputFormat.JSON)) == {}
