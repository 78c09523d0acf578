"""Sectioned JSON settings file.

The file holds one object per section (``oracle``, ``window``). Keys are
addressed as ``"section.name"``; a bare ``"section"`` addresses the whole
section.
"""

from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping


class SettingsStoreError(RuntimeError):
    """Raised when the settings file cannot be written."""


def split_key(key: str) -> tuple[str, str]:
    section, _, name = str(key or "").strip().partition(".")
    if not section:
        raise ValueError("Settings key cannot be empty.")
    return section, name


class JsonSettingsStore:
    def __init__(self, path: Path, defaults: Mapping[str, Mapping[str, Any]], *, persistent: bool = True) -> None:
        self.path = Path(path)
        self.defaults = {str(section): dict(values) for section, values in defaults.items()}
        self.data: dict[str, dict[str, Any]] = {}
        self.dirty = False
        self.last_error: str | None = None
        self.persistent = bool(persistent)

    def load(self) -> dict[str, dict[str, Any]]:
        """Read the file and fill every section with its defaults.

        An unreadable or malformed file is left untouched; the error is kept
        in ``last_error`` and defaults are used.
        """
        self.last_error = None
        missing = self.persistent and not self.path.exists()
        stored: dict[str, Any] = {}
        if self.persistent and not missing:
            stored = self._read()
        self.data = self._with_defaults(stored)
        self.dirty = missing
        return self.data

    def _read(self) -> dict[str, Any]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            self.last_error = str(exc)
            return {}
        if not isinstance(raw, dict):
            self.last_error = f"Settings in '{self.path}' must be a JSON object, found {type(raw).__name__}."
            return {}
        return raw

    def _with_defaults(self, stored: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
        data: dict[str, dict[str, Any]] = {}
        for section, defaults in self.defaults.items():
            values = deepcopy(defaults)
            section_data = stored.get(section)
            if isinstance(section_data, dict):
                values.update(deepcopy(section_data))
            data[section] = values
        return data

    def save(self) -> None:
        if self.persistent:
            payload = json.dumps(self.data, indent=2, sort_keys=True)
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(payload, encoding="utf-8")
            except OSError as exc:
                raise SettingsStoreError(f"Could not write settings file '{self.path}': {exc}") from exc
            self.last_error = None
        self.dirty = False

    def get(self, key: str, default: Any = None) -> Any:
        section, name = split_key(key)
        values = self.data.get(section)
        if values is None:
            return default
        if not name:
            return dict(values)
        return values.get(name, default)

    def set(self, key: str, value: Any) -> bool:
        """Store ``value``; returns False when nothing changed."""
        section, name = split_key(key)
        values = self.data.setdefault(section, {})
        if not name:
            if values == value:
                return False
            self.data[section] = dict(value)
        else:
            if name in values and values[name] == value:
                return False
            values[name] = value
        self.dirty = True
        return True
