import json

import pytest

from services.config_manager import ConfigManager


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("ARTIFACT_DIFF_CONFIG_DIR", str(tmp_path))
    ConfigManager.reset_instance()
    yield tmp_path
    ConfigManager.reset_instance()


def test_defaults(config_dir):
    config = ConfigManager()

    cache = config.cache_settings()
    assert cache["backend"] == "sqlite"
    assert cache["maxEntriesPerSession"] == 50
    assert cache["evictionBatch"] == 10
    assert cache["maxBytes"] is None
    assert config.diff_settings() == {"contextLines": 3}


def test_save_and_reload(config_dir):
    config = ConfigManager()
    config.save_config({"diff": {"contextLines": 5}})

    saved = json.loads((config_dir / "config.json").read_text())
    assert saved["diff"] == {"contextLines": 5}

    assert ConfigManager().diff_settings()["contextLines"] == 5


def test_partial_section_keeps_defaults(config_dir):
    (config_dir / "config.json").write_text(json.dumps({"cache": {"maxBytes": 1024}}))

    cache = ConfigManager().cache_settings()

    assert cache["maxBytes"] == 1024
    assert cache["maxEntriesPerSession"] == 50


def test_corrupt_config_falls_back_to_defaults(config_dir):
    (config_dir / "config.json").write_text("{broken")

    assert ConfigManager().cache_settings()["backend"] == "sqlite"


def test_set_and_get(config_dir):
    config = ConfigManager()
    config.set("server", {"host": "0.0.0.0", "port": 9000})

    assert config.get("server")["port"] == 9000
    assert config.get("missing", "fallback") == "fallback"
    assert ConfigManager().get_config()["server"]["port"] == 9000


def test_singleton(config_dir):
    assert ConfigManager.get_instance() is ConfigManager.get_instance()
