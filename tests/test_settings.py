import json

import pytest

from pyoracle.settings_manager import SettingsManager
from pyoracle.settings_store import JsonSettingsStore, split_key

DEFAULTS = {"oracle": {"command": "oracle", "go_command": "go"}, "window": {"last_open_dir": ""}}


def test_stored_values_override_section_defaults(tmp_path):
    path = tmp_path / "s.json"
    path.write_text(json.dumps({"oracle": {"command": "/x"}, "stale": {"k": 1}}), encoding="utf-8")
    store = JsonSettingsStore(path, DEFAULTS)

    assert store.load() == {"oracle": {"command": "/x", "go_command": "go"}, "window": {"last_open_dir": ""}}
    assert not store.dirty


def test_keys_address_a_value_or_a_whole_section(tmp_path):
    store = JsonSettingsStore(tmp_path / "s.json", DEFAULTS, persistent=False)
    store.load()

    assert store.set("window.last_open_dir", "/src") is True
    assert store.set("window.last_open_dir", "/src") is False
    assert store.get("window") == {"last_open_dir": "/src"}
    assert store.get("oracle.missing", "d") == "d"
    assert store.get("nosuch.key", "d") == "d"
    assert split_key("oracle.gopath") == ("oracle", "gopath")
    with pytest.raises(ValueError):
        split_key(" ")


def test_missing_file_loads_defaults_and_is_dirty(tmp_path):
    store = JsonSettingsStore(tmp_path / "s.json", DEFAULTS)
    assert store.load() == DEFAULTS
    assert store.dirty
    store.save()
    assert json.loads((tmp_path / "s.json").read_text()) == DEFAULTS
    assert not store.dirty


def test_invalid_json_is_reported_and_defaults_used(tmp_path):
    path = tmp_path / "s.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonSettingsStore(path, DEFAULTS)
    assert store.load() == DEFAULTS
    assert store.last_error
    assert path.read_text(encoding="utf-8") == "{not json"


def test_non_object_root_is_reported(tmp_path):
    path = tmp_path / "s.json"
    path.write_text("[1, 2]", encoding="utf-8")
    store = JsonSettingsStore(path, DEFAULTS)
    store.load()
    assert "must be a JSON object" in store.last_error


def test_manager_normalizes_oracle_settings(tmp_path):
    (tmp_path / "settings.json").write_text(
        json.dumps(
            {
                "oracle": {
                    "command": "  ",
                    "gopath": "/a:/b:/a",
                    "history_limit": "9999",
                    "panel_max_lines": "oops",
                    "focus_panel": 0,
                }
            }
        ),
        encoding="utf-8",
    )
    manager = SettingsManager(tmp_path)
    manager.load_all()

    cfg = manager.oracle_config()
    assert cfg["command"] == "oracle"
    assert cfg["go_command"] == "go"
    assert cfg["gopath"] == ["/a", "/b"]
    assert cfg["history_limit"] == 500
    assert cfg["panel_max_lines"] == 20
    assert cfg["focus_panel"] is False


def test_manager_round_trips_through_disk(tmp_path):
    manager = SettingsManager(tmp_path)
    manager.load_all()
    manager.set("oracle.command", "/usr/bin/oracle")
    assert manager.save_all(only_dirty=True)

    reloaded = SettingsManager(tmp_path)
    reloaded.load_all()
    assert reloaded.get("oracle.command") == "/usr/bin/oracle"
    assert reloaded.load_error() == ""
