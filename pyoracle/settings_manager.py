from __future__ import annotations

from pathlib import Path
from typing import Any

from pyoracle.settings_models import SettingsPaths, default_app_dir, default_app_settings
from pyoracle.settings_store import JsonSettingsStore

_HISTORY_LIMIT_RANGE = (1, 500)
_PANEL_LINES_RANGE = (3, 200)


def _clamp_int(value: object, default: int, bounds: tuple[int, int]) -> int:
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        number = default
    lo, hi = bounds
    return max(lo, min(hi, number))


class SettingsManager:
    def __init__(
        self,
        app_dir: str | Path | None = None,
        *,
        filename: str = "settings.json",
        persistent: bool = True,
    ) -> None:
        self.paths = SettingsPaths(
            app_dir=Path(app_dir) if app_dir is not None else default_app_dir(),
            filename=filename,
        )
        self.store = JsonSettingsStore(
            self.paths.settings_file,
            default_app_settings(),
            persistent=persistent,
        )

    @property
    def settings_path(self) -> Path:
        return self.paths.settings_file

    def load_all(self) -> None:
        self.store.load()
        self._normalize()

    def save_all(self, *, only_dirty: bool = False) -> bool:
        if only_dirty and not self.store.dirty:
            return False
        self.store.save()
        return True

    def load_error(self) -> str:
        return str(self.store.last_error or "")

    def get(self, key: str, default: Any = None) -> Any:
        return self.store.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.store.set(key, value)

    def oracle_config(self) -> dict[str, Any]:
        cfg = self.store.get("oracle", {})
        return dict(cfg) if isinstance(cfg, dict) else {}

    def _normalize(self) -> bool:
        defaults = default_app_settings()["oracle"]
        cfg = self.oracle_config()
        normalized = {
            "command": str(cfg.get("command") or "").strip() or defaults["command"],
            "go_command": str(cfg.get("go_command") or "").strip() or defaults["go_command"],
            "goroot": str(cfg.get("goroot") or "").strip(),
            "gopath": self._normalize_gopath(cfg.get("gopath")),
            "history_limit": _clamp_int(cfg.get("history_limit"), defaults["history_limit"], _HISTORY_LIMIT_RANGE),
            "panel_max_lines": _clamp_int(
                cfg.get("panel_max_lines"), defaults["panel_max_lines"], _PANEL_LINES_RANGE
            ),
            "focus_panel": bool(cfg.get("focus_panel", defaults["focus_panel"])),
        }
        return self.store.set("oracle", normalized)

    @staticmethod
    def _normalize_gopath(value: object) -> list[str]:
        if isinstance(value, str):
            value = value.split(":")
        if not isinstance(value, list):
            return []
        out: list[str] = []
        for item in value:
            text = str(item or "").strip()
            if text and text not in out:
                out.append(text)
        return out
