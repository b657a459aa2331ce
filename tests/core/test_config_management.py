# tests/core/test_config_management.py
import json

import pytest

from idx_wrapper.managers.config_manager import ConfigManager
from idx_wrapper.utils.path_utils import PathUtils

# Een standaard, voorspelbare configuratie voor onze tests
MOCK_SETTINGS_CONTENT = {
    "debug": {
        "level": "WARNING"
    },
    "session": {
        "time_out": 30,
        "user_agent": "TestAgent/1.0"
    },
    "conflicts": {
        "replace_dollar_sign": True
    }
}


@pytest.fixture
def config_manager(tmp_path, monkeypatch):
    """
    Zet een geïsoleerde ConfigManager op die een nep 'settings.json' leest.
    Na de test wordt de echte configuratie opnieuw geladen.
    """
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))
    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: settings_file)

    manager = ConfigManager()
    manager.reset()
    yield manager

    monkeypatch.undo()
    manager.reset()


def test_config_manager_is_singleton():
    assert ConfigManager() is ConfigManager()


def test_bundled_settings_file_exists():
    assert PathUtils.get_settings_file().exists()


def test_config_manager_load(config_manager):
    """Test of de manager de configuratie correct laadt."""
    config = config_manager.get_all()
    assert config["debug"]["level"] == "WARNING"
    assert config["session"]["time_out"] == 30


def test_config_manager_get_nested(config_manager):
    """Test het ophalen van geneste waarden."""
    assert config_manager.get_nested("session.user_agent") == "TestAgent/1.0"
    assert config_manager.get_nested("non.existent.key", "default") == "default"


def test_config_manager_set_nested(config_manager):
    """Test het aanpassen van waarden in het geheugen, inclusief type-casting."""
    config_manager.set_nested("debug.level", "INFO")
    assert config_manager.get_nested("debug.level") == "INFO"

    config_manager.set_nested("session.time_out", "20")
    assert config_manager.get_nested("session.time_out") == 20

    config_manager.set_nested("conflicts.replace_dollar_sign", "false")
    assert config_manager.get_nested("conflicts.replace_dollar_sign") is False

    config_manager.set_nested("server.port", 8080)
    assert config_manager.get_nested("server.port") == 8080


def test_config_manager_reset(config_manager):
    """Test of reset de configuratie opnieuw van schijf laadt."""
    config_manager.set_nested("debug.level", "DEBUG")
    config_manager.reset()
    assert config_manager.get_nested("debug.level") == "WARNING"


def test_config_manager_missing_file(tmp_path, monkeypatch):
    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: tmp_path / "missing.json")
    manager = ConfigManager()
    manager.reset()
    try:
        assert manager.get_all() == {}
    finally:
        monkeypatch.undo()
        manager.reset()
