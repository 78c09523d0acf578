from __future__ import annotations

import os
import subprocess

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from pyoracle.oracle.toolchain import GoToolchain  # noqa: E402


class FakeRun:
    """Stands in for ``subprocess.run`` and records every launch."""

    def __init__(self, stdout: str = "", returncode: int = 0, exc: BaseException | None = None):
        self.stdout = stdout
        self.returncode = returncode
        self.exc = exc
        self.calls: list[dict] = []

    def __call__(self, cmd, **kwargs):
        self.calls.append({"cmd": list(cmd), **kwargs})
        if self.exc is not None:
            raise self.exc
        return subprocess.CompletedProcess(args=cmd, returncode=self.returncode, stdout=self.stdout)


@pytest.fixture
def fake_run(monkeypatch):
    runner = FakeRun()
    monkeypatch.setattr(subprocess, "run", runner)
    return runner


@pytest.fixture
def toolchain():
    return GoToolchain(goroot="/usr/lib/go", gopath=["/home/dev/go", "/srv/go"])


@pytest.fixture
def go_file(tmp_path):
    path = tmp_path / "main.go"
    path.write_text('package main\n\nimport "fmt"\n\nfunc main() {\n\tfmt.Println("hi")\n}\n', encoding="utf-8")
    return path
