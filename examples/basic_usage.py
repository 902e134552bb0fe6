"""
Walk through the main ConfigStore features.

Run with: python examples/basic_usage.py (after pip install -e .)
"""

import logging
import tempfile
from pathlib import Path

from configstore import OutputFormat, StoreFactory, get_registry, set_output_format
from configstore.exceptions import InvalidValueError, KeyNotFoundError


def on_change(key, value):
    print(f"  [listener] {key} -> {value!r}")


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    workdir = Path(tempfile.mkdtemp(prefix="configstore-demo-"))

    print("1. Named store with a change listener")
    print("-" * 60)
    store = get_registry().instance("default")
    store.add_change_listener(on_change)
    store.set("name", "example")
    store.set("complex", {"key1": "value1", "key2": 42})
    print(f"  name = {store.get('name')}\n")

    print("2. Versioned YAML round trip")
    print("-" * 60)
    yaml_path = workdir / "config.yaml"
    store.save_to_file(yaml_path, version="1.0.0")
    print(yaml_path.read_text(encoding="utf-8"))
    store.clear()
    store.load_from_file(yaml_path, "1.0.0")
    print(f"  reloaded complex = {store.get('complex')}\n")

    print("3. Partial save as JSON")
    print("-" * 60)
    json_path = workdir / "partial.json"
    store.save_partial_to_file(json_path, ["complex"])
    print(json_path.read_text(encoding="utf-8"))

    print("4. Environment overrides")
    print("-" * 60)
    store.set("db_port", 5432)
    store.load_from_env({"db_port": "6543"})
    print(f"  db_port = {store.get('db_port')!r} (now a string)")
    print(f"  env overrides = {store.env_overrides}\n")

    print("5. Presets and display formats")
    print("-" * 60)
    production = StoreFactory().create_for_environment("production", "production")
    set_output_format(OutputFormat.YAML)
    production.output_config()
    print()

    print("6. Errors")
    print("-" * 60)
    try:
        store.get("absent")
    except KeyNotFoundError as e:
        print(f"  {e}")
    try:
        store.set("example", 5)
    except InvalidValueError as e:
        print(f"  {e}")
    print(f"\nFiles written to {workdir}")


if __name__ == "__main__":
    main()
