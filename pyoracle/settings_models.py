from __future__ import annotations

import os
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypedDict


class OracleSettings(TypedDict, total=False):
    command: str
    go_command: str
    goroot: str
    gopath: list[str]
    history_limit: int
    panel_max_lines: int
    focus_panel: bool


class WindowSettings(TypedDict, total=False):
    last_open_dir: str


class AppSettings(TypedDict, total=False):
    oracle: OracleSettings
    window: WindowSettings


@dataclass(slots=True, frozen=True)
class SettingsPaths:
    app_dir: Path
    filename: str = "settings.json"
    settings_file: Path = field(init=False)

    def __post_init__(self) -> None:
        app_dir = Path(self.app_dir).expanduser().resolve()
        object.__setattr__(self, "app_dir", app_dir)
        object.__setattr__(self, "settings_file", app_dir / self.filename)


def default_app_dir() -> Path:
    override = str(os.environ.get("PYORACLE_HOME") or "").strip()
    if override:
        return Path(override).expanduser()
    config_home = str(os.environ.get("XDG_CONFIG_HOME") or "").strip()
    base = Path(config_home).expanduser() if config_home else Path.home() / ".config"
    return base / "pyoracle"


def default_app_settings() -> AppSettings:
    defaults: AppSettings = {
        "oracle": {
            "command": "oracle",
            "go_command": "go",
            "goroot": "",
            "gopath": [],
            "history_limit": 32,
            "panel_max_lines": 20,
            "focus_panel": True,
        },
        "window": {
            "last_open_dir": "",
        },
    }
    return deepcopy(defaults)
