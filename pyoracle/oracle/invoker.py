"""Builds and runs oracle subprocess invocations."""

from __future__ import annotations

import os
import subprocess
import threading
from dataclasses import replace
from typing import Callable

from pyoracle.oracle.errors import LaunchError, NoFileError, UnknownModeError, UnsavedChangesError
from pyoracle.oracle.models import MODES, EditorTarget, Invocation, RunResult
from pyoracle.oracle.position import PositionEncoder
from pyoracle.oracle.session import OracleSession, ScopeManager, ScopePrompt
from pyoracle.oracle.toolchain import GoToolchain, resolve_executable, resolve_toolchain


class ProcessInvoker:
    def __init__(
        self,
        session: OracleSession,
        *,
        command: str = "oracle",
        toolchain_provider: Callable[[], GoToolchain] | None = None,
        encoder: PositionEncoder | None = None,
    ) -> None:
        self.session = session
        self.scopes = ScopeManager(session)
        self.encoder = encoder or PositionEncoder()
        self._command = str(command or "oracle")
        self._toolchain_provider = toolchain_provider or resolve_toolchain
        self._toolchain: GoToolchain | None = None
        self._pending_debug: list[str] = []
        self._lock = threading.Lock()

    def configure(self, *, command: str | None = None, toolchain_provider: Callable[[], GoToolchain] | None = None) -> None:
        if command is not None:
            self._command = str(command or "oracle")
        if toolchain_provider is not None:
            self._toolchain_provider = toolchain_provider
        with self._lock:
            self._toolchain = None
            self._pending_debug = []

    def toolchain(self) -> GoToolchain:
        """Resolve the Go toolchain once; this may run `go env`, so call it off the UI thread."""
        with self._lock:
            if self._toolchain is None:
                self._toolchain = self._toolchain_provider()
                self._pending_debug = list(self._toolchain.debug_lines)
            return self._toolchain

    def _take_pending_debug(self) -> list[str]:
        with self._lock:
            lines, self._pending_debug = self._pending_debug, []
        return lines

    def run(self, mode: str, target: EditorTarget, *, prompt_scope: ScopePrompt | None = None) -> RunResult:
        """Check preconditions, then run the oracle and block until it exits."""
        invocation = self.prepare(mode, target, prompt_scope=prompt_scope)
        return self.execute(invocation)

    def prepare(self, mode: str, target: EditorTarget, *, prompt_scope: ScopePrompt | None = None) -> Invocation:
        mode_name = str(mode or "").strip()
        if mode_name not in MODES:
            raise UnknownModeError(mode_name)
        file_path = str(target.file_path or "").strip()
        if not file_path:
            raise NoFileError()
        if target.modified:
            raise UnsavedChangesError(file_path)

        scope = self.scopes.ensure_scope(prompt_scope)
        position = self.encoder.encode(file_path, target.selection, target.text)
        return Invocation(mode=mode_name, scope=scope, position=position)

    def build_command(self, invocation: Invocation) -> list[str]:
        return invocation.argv(resolve_executable(self._command) or self._command)

    @staticmethod
    def build_environment(invocation: Invocation) -> dict[str, str]:
        env = dict(os.environ)
        env.update({str(k): str(v) for k, v in invocation.extra_env.items()})
        return env

    def execute(self, invocation: Invocation) -> RunResult:
        if not invocation.extra_env:
            invocation = replace(invocation, extra_env=self.toolchain().environment())
        cmd = self.build_command(invocation)
        debug = self._take_pending_debug()
        debug.append(f"[Oracle] cmd: {' '.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=self.build_environment(invocation),
                cwd=os.path.dirname(invocation.position.file_path) or None,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError as exc:
            raise LaunchError(cmd[0], "command not found") from exc
        except PermissionError as exc:
            raise LaunchError(cmd[0], "permission denied") from exc
        except OSError as exc:
            raise LaunchError(cmd[0], str(exc)) from exc

        if proc.returncode != 0:
            debug.append(f"[Oracle] exit {proc.returncode}")
        return RunResult(
            invocation=invocation,
            command=cmd,
            output=str(proc.stdout or ""),
            returncode=int(proc.returncode),
            debug_lines=debug,
        )
