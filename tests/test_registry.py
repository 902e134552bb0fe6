"""Tests for StoreRegistry, StorePool, StoreFactory and presets."""

import json
from threading import Barrier, Thread

import pytest
from pydantic import ValidationError

from configstore import ConfigStore, StoreFactory, StorePool, get_registry
from configstore.exceptions import UnsupportedEnvironmentError
from configstore.presets import ENVIRONMENT_PRESETS, EnvironmentPreset, get_preset


class TestStoreRegistry:

    @pytest.mark.unit
    def test_same_instance_per_name(self, registry):
        assert registry.instance("default") is registry.instance("default")
        assert registry.instance() is registry.instance("default")

    @pytest.mark.unit
    def test_distinct_names_distinct_stores(self, registry):
        db = registry.instance("db")
        api = registry.instance("api")
        assert db is not api
        assert db.name == "db"
        assert registry.names() == ["db", "api"]
        assert "db" in registry
        assert len(registry) == 2

    @pytest.mark.unit
    def test_empty_name_allowed(self, registry):
        assert registry.instance("") is registry.instance("")

    @pytest.mark.unit
    def test_registries_are_isolated(self, registry):
        registry.instance("shared").set("a", 1)
        other = type(registry)()
        assert not other.instance("shared").exists("a")

    @pytest.mark.unit
    def test_default_registry_is_singleton(self):
        assert get_registry() is get_registry()

    @pytest.mark.integration
    def test_concurrent_first_use_creates_one_store(self, registry):
        barrier = Barrier(8)
        seen = []

        def fetch():
            barrier.wait()
            seen.append(registry.instance("racy"))

        threads = [Thread(target=fetch) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len({id(store) for store in seen}) == 1


class TestStorePool:

    @pytest.mark.unit
    def test_pooled_handle_is_registry_store(self, registry):
        pool = StorePool(registry)
        assert pool.get("db") is registry.instance("db")
        assert pool.get("db") is pool.get("db")
        assert "db" in pool
        assert len(pool) == 1

    @pytest.mark.integration
    def test_concurrent_first_get_hands_out_one_store(self, registry):
        pool = StorePool(registry)
        barrier = Barrier(16)
        seen = []

        def fetch():
            barrier.wait()
            seen.append(pool.get("x"))

        threads = [Thread(target=fetch) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(seen) == 16
        assert all(store is registry.instance("x") for store in seen)
        assert len(pool) == 1


class TestStoreFactory:

    @pytest.mark.unit
    def test_create(self, factory, registry):
        assert factory.create("svc") is registry.instance("svc")
        assert factory.get_pooled("svc") is registry.instance("svc")

    @pytest.mark.unit
    def test_create_thread_safe(self, factory):
        assert isinstance(factory.create_thread_safe(), ConfigStore)

    @pytest.mark.unit
    def test_create_from_file(self, factory, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"a": 1, "version": "1.0.0"}), encoding="utf-8")

        store = factory.create_from_file("from_file", path)

        assert store is not None
        assert store.get_all() == {"a": 1}

    @pytest.mark.unit
    def test_create_from_missing_file_returns_none(self, factory, temp_dir):
        assert factory.create_from_file("broken", temp_dir / "absent.yaml") is None

    @pytest.mark.unit
    def test_create_with_defaults(self, factory):
        store = factory.create_with_defaults("defaults", {"timeout": 30, "retries": [1, 2]})
        assert store.get("timeout") == 30
        assert store.get("retries") == [1, 2]

    @pytest.mark.unit
    def test_create_from_env(self, factory):
        store = factory.create_from_env("env", {"APP_MODE": "test"})
        assert store.get("APP_MODE") == "test"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "environment, host, level, feature",
        [
            ("development", "localhost", "debug", True),
            ("production", "prod.db.server", "error", False),
            ("testing", "test.db.server", "info", True),
        ],
    )
    def test_create_for_environment(self, factory, environment, host, level, feature):
        store = factory.create_for_environment(environment, environment)

        assert store.get("db_host") == host
        assert store.get("db_port") == 5432
        assert store.get("log_level") == level
        assert store.get("feature_x_enabled") is feature
        assert store.get("api_endpoint").startswith("https://")

    @pytest.mark.unit
    def test_unknown_environment(self, factory, registry):
        with pytest.raises(UnsupportedEnvironmentError) as exc_info:
            factory.create_for_environment("staging_store", "staging")

        assert exc_info.value.environment == "staging"
        assert exc_info.value.known == ["development", "production", "testing"]
        assert "staging_store" not in registry

    @pytest.mark.unit
    def test_factories_share_registry(self, registry):
        first = StoreFactory(registry=registry)
        second = StoreFactory(pool=StorePool(registry))
        assert first.create("x") is second.create("x")


class TestPresets:

    @pytest.mark.unit
    def test_known_presets(self):
        assert set(ENVIRONMENT_PRESETS) == {"development", "production", "testing"}
        assert get_preset("production").api_endpoint == "https://api.example.com"

    @pytest.mark.unit
    def test_preset_values_in_field_order(self):
        assert list(get_preset("development").as_values()) == [
            "db_host",
            "db_port",
            "api_endpoint",
            "log_level",
            "feature_x_enabled",
        ]

    @pytest.mark.unit
    def test_lookup_is_case_sensitive(self):
        with pytest.raises(UnsupportedEnvironmentError):
            get_preset("Production")

    @pytest.mark.unit
    def test_preset_model_validation(self):
        with pytest.raises(ValidationError):
            EnvironmentPreset(db_host="h", db_port=0, api_endpoint="https://x")
        with pytest.raises(ValidationError):
            EnvironmentPreset(db_host="h", api_endpoint="https://x", log_level="loud")
