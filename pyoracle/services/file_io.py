"""Source file read/write helpers that keep the on-disk line endings."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def detect_newline(raw: str) -> str:
    return "\r\n" if "\r\n" in raw else "\n"


def read_source(path: str, *, encoding: str = "utf-8") -> tuple[str, str]:
    """Return ``(text, newline)`` with ``text`` using ``\\n`` line breaks."""
    with open(path, "r", encoding=encoding, errors="replace", newline="") as handle:
        raw = handle.read()
    newline = detect_newline(raw)
    return raw.replace("\r\n", "\n"), newline


def atomic_write_source(
    path: str,
    text: str,
    *,
    newline: str = "\n",
    encoding: str = "utf-8",
) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = text.replace("\r\n", "\n")
    if newline != "\n":
        payload = payload.replace("\n", newline)

    fd, tmp_path = tempfile.mkstemp(prefix=target.name + ".", suffix=".tmp", dir=str(target.parent))
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(payload)
        os.replace(tmp_path, target)
    finally:
        if os.path.exists(tmp_path):
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
