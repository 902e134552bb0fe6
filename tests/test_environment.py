"""Tests for environment variable import."""

import logging
from unittest.mock import Mock

import pytest

from configstore.environment import merge_environment, read_environment


class TestReadEnvironment:

    @pytest.mark.unit
    def test_injected_mapping_is_copied(self):
        environ = {"A": "1"}
        snapshot = read_environment(environ)
        environ["B"] = "2"
        assert snapshot == {"A": "1"}

    @pytest.mark.unit
    def test_defaults_to_process_environment(self, monkeypatch):
        monkeypatch.setenv("CONFIGSTORE_TEST_MARKER", "present")
        assert read_environment()["CONFIGSTORE_TEST_MARKER"] == "present"


class TestMergeEnvironment:

    @pytest.mark.unit
    def test_overrides_and_imports(self):
        values = {"x": "old", "port": 5432, "untouched": True}
        overrides = {}

        overridden = merge_environment(values, overrides, {"x": "new", "port": "6543", "EXTRA": "1"})

        assert overridden == ["x", "port"]
        assert values == {"x": "new", "port": "6543", "untouched": True, "EXTRA": "1"}
        assert overrides == {"x": "new", "port": "6543"}

    @pytest.mark.unit
    def test_empty_names_skipped(self):
        values = {}
        merge_environment(values, {}, {"": "nameless", "OK": "yes"})
        assert values == {"OK": "yes"}


class TestStoreLoadFromEnv:

    @pytest.mark.unit
    def test_environment_wins(self, store):
        store.set("x", "old")
        assert store.load_from_env({"x": "new"}) is True
        assert store.get("x") == "new"

    @pytest.mark.unit
    def test_typed_value_becomes_string(self, store, caplog):
        store.set("db_port", 5432)

        with caplog.at_level(logging.INFO, logger="configstore.store"):
            store.load_from_env({"db_port": "6543"})

        assert store.get("db_port") == "6543"
        assert store.env_overrides == {"db_port": "6543"}
        assert "db_port" in caplog.text

    @pytest.mark.unit
    def test_values_are_strings(self, store):
        store.load_from_env({"HOME": "/home/user", "COUNT": "3", "FLAG": "true"})
        assert store.get_all() == {"HOME": "/home/user", "COUNT": "3", "FLAG": "true"}
        assert store.env_overrides == {}

    @pytest.mark.unit
    def test_listeners_not_notified(self, store):
        listener = Mock()
        store.add_change_listener(listener)
        store.load_from_env({"A": "1"})
        listener.assert_not_called()

    @pytest.mark.unit
    def test_process_environment(self, store, monkeypatch):
        monkeypatch.setenv("CONFIGSTORE_TEST_VALUE", "from-env")
        assert store.load_from_env()
        assert store.get("CONFIGSTORE_TEST_VALUE") == "from-env"

    @pytest.mark.unit
    def test_remove_forgets_override(self, store):
        store.set("x", 1)
        store.load_from_env({"x": "2"})
        store.remove("x")
        assert store.env_overrides == {}
