"""Fixtures for CLI tests."""

import sys
from pathlib import Path
from types import ModuleType

import orjson
import pytest

from schemaward.config import ConfigManager

CATALOG_URL = "https://catalog.test/catalog.json"
CARGO_SCHEMA_URL = "https://json.test/cargo.json"
CATALOG = {
    "schemas": [
        {"name": "Cargo", "fileMatch": ["Cargo.toml"], "url": CARGO_SCHEMA_URL}
    ]
}


@pytest.fixture
def config_manager(tmp_path: Path) -> ConfigManager:
    """Config manager whose settings point at test URLs and tmp dirs."""
    manager = ConfigManager(config_dir=tmp_path / "config")
    manager.config_dir.mkdir(parents=True)
    manager.settings_file.write_text(
        f"""[DEFAULT]
validator_module = fake_native

[network]
catalog_url = {CATALOG_URL}
catalog_retry_cooldown_seconds = 0

[cache]
directory = {tmp_path / "schemas"}
""",
        encoding="utf-8",
    )
    return manager


@pytest.fixture
def native_result():
    """Mutable results returned by the fake native module."""
    return {
        "syntax": {"valid": True},
        "schema": {"valid": True, "errors": []},
    }


@pytest.fixture
def fake_native(monkeypatch, native_result) -> ModuleType:
    """Install an importable fake native validator module."""
    module = ModuleType("fake_native")
    module.validate_toml = lambda text: orjson.dumps(
        native_result["syntax"]
    ).decode()
    module.validate_with_schema = lambda text, schema: orjson.dumps(
        native_result["schema"]
    ).decode()
    monkeypatch.setitem(sys.modules, "fake_native", module)
    return module
