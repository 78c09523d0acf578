"""Go toolchain discovery for the oracle subprocess environment."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass, field


@dataclass(slots=True)
class GoToolchain:
    goroot: str = ""
    gopath: list[str] = field(default_factory=list)
    debug_lines: list[str] = field(default_factory=list)

    def environment(self) -> dict[str, str]:
        return {
            "GOROOT": self.goroot,
            "GOPATH": ":".join(self.gopath),
            "CGO_ENABLED": "0",
        }


def split_gopath(value: object) -> list[str]:
    if isinstance(value, (list, tuple)):
        parts = [str(item or "").strip() for item in value]
    else:
        parts = [part.strip() for part in str(value or "").split(os.pathsep)]
    return [part for part in parts if part]


def resolve_executable(name: str) -> str:
    text = str(name or "").strip()
    if not text:
        return ""
    return shutil.which(text) or text


def resolve_toolchain(
    *,
    go_command: str = "go",
    goroot_override: str = "",
    gopath_override: object = None,
) -> GoToolchain:
    """Find GOROOT and GOPATH, preferring explicit overrides.

    Falls back to ``go env GOROOT GOPATH`` and then to the host environment.
    """
    goroot = str(goroot_override or "").strip()
    gopath = split_gopath(gopath_override)
    debug: list[str] = []

    if goroot and gopath:
        debug.append("[Toolchain] using configured GOROOT and GOPATH")
        return GoToolchain(goroot=goroot, gopath=gopath, debug_lines=debug)

    reported_root, reported_path, go_debug = _query_go_env(go_command)
    debug.extend(go_debug)

    if not goroot:
        goroot = reported_root or str(os.environ.get("GOROOT") or "").strip()
    if not gopath:
        gopath = split_gopath(reported_path) if reported_path else split_gopath(os.environ.get("GOPATH"))

    debug.append(f"[Toolchain] GOROOT={goroot or '<unset>'}")
    debug.append(f"[Toolchain] GOPATH={':'.join(gopath) or '<unset>'}")
    return GoToolchain(goroot=goroot, gopath=gopath, debug_lines=debug)


def _query_go_env(go_command: str) -> tuple[str, str, list[str]]:
    go_bin = resolve_executable(go_command or "go")
    if not go_bin:
        return "", "", []
    cmd = [go_bin, "env", "GOROOT", "GOPATH"]
    debug = [f"[Toolchain] cmd: {' '.join(cmd)}"]
    try:
        proc = subprocess.run(
            cmd,
            text=True,
            capture_output=True,
            timeout=15,
            check=False,
        )
    except FileNotFoundError:
        debug.append(f"[Toolchain] Command not found: {go_bin}")
        return "", "", debug
    except (OSError, subprocess.SubprocessError) as exc:
        debug.append(f"[Toolchain] {exc}")
        return "", "", debug

    if proc.returncode != 0:
        stderr = str(proc.stderr or "").strip()
        debug.append(f"[Toolchain][stderr] {stderr or f'exit {proc.returncode}'}")
        return "", "", debug

    lines = str(proc.stdout or "").splitlines()
    goroot = lines[0].strip() if lines else ""
    gopath = lines[1].strip() if len(lines) > 1 else ""
    return goroot, gopath, debug
