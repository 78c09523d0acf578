"""Controller wiring editor selections to oracle queries and the output panel."""

from __future__ import annotations

import concurrent.futures
import os
import queue
from functools import partial
from typing import Callable

from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtWidgets import QInputDialog, QMessageBox

from pyoracle.oracle.annotator import OutputAnnotator
from pyoracle.oracle.errors import EmptyScopeError, LaunchError, NoScopeError, OracleError
from pyoracle.oracle.invoker import ProcessInvoker
from pyoracle.oracle.models import MODE_LABELS, Invocation, RunResult
from pyoracle.oracle.session import OracleSession, ScopeManager
from pyoracle.oracle.toolchain import resolve_toolchain
from pyoracle.ui.widgets.oracle_panel import OracleOutputPanel

SCOPE_DIALOG_TITLE = "Go Oracle Scope"
SCOPE_DIALOG_LABEL = "Packages, files or main package to analyze:"


class OracleController(QObject):
    statusMessage = Signal(str, int)  # text, timeout ms
    debugLines = Signal(object)  # list[str]
    navigateRequested = Signal(str, int, int)  # file, line, col
    queryFinished = Signal(object)  # RunResult

    def __init__(
        self,
        ide,
        panel: OracleOutputPanel,
        editor_provider: Callable[[], object],
        *,
        session: OracleSession | None = None,
        invoker: ProcessInvoker | None = None,
        parent=None,
    ):
        super().__init__(parent or ide)
        self.ide = ide
        self.panel = panel
        self.session = session or OracleSession()
        self.invoker = invoker or ProcessInvoker(self.session)
        self.scopes = ScopeManager(self.session)
        self.annotator = OutputAnnotator()
        self._editor_provider = editor_provider
        self._focus_panel = True
        self._base_dir = ""
        self.prompt_scope = self._prompt_scope_dialog

        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="pyoracle-query",
        )
        self._active_futures: set[concurrent.futures.Future] = set()
        self._result_queue: queue.Queue[tuple[int, object]] = queue.Queue()
        self._latest_token = 0
        self._result_pump = QTimer(self)
        self._result_pump.setInterval(35)
        self._result_pump.timeout.connect(self._drain_result_queue)
        self._result_pump.start()

        self.panel.locationActivated.connect(self._on_location_activated)

    # ---------- Public API ----------

    def apply_settings(self, oracle_cfg: dict) -> None:
        cfg = oracle_cfg if isinstance(oracle_cfg, dict) else {}
        self.invoker.configure(
            command=str(cfg.get("command") or "oracle"),
            toolchain_provider=partial(
                resolve_toolchain,
                go_command=str(cfg.get("go_command") or "go"),
                goroot_override=str(cfg.get("goroot") or ""),
                gopath_override=cfg.get("gopath") or [],
            ),
        )
        self.scopes.set_history_limit(int(cfg.get("history_limit") or 32))
        self.panel.set_max_lines(int(cfg.get("panel_max_lines") or 20))
        self._focus_panel = bool(cfg.get("focus_panel", True))

    def run_mode(self, mode: str) -> bool:
        """Validate and start one oracle query; returns True once it is launched."""
        editor = self._editor_provider()
        if editor is None:
            self.statusMessage.emit("No active editor for the oracle.", 2200)
            return False

        try:
            invocation = self.invoker.prepare(mode, editor.oracle_target(), prompt_scope=self.prompt_scope)
        except NoScopeError as exc:
            self.statusMessage.emit(str(exc), 2200)
            return False
        except OracleError as exc:
            self.statusMessage.emit(str(exc), 3500)
            return False

        self._start_worker(invocation)
        label = MODE_LABELS.get(invocation.mode, invocation.mode)
        self.statusMessage.emit(f"Running oracle: {label}...", 0)
        return True

    def set_scope_interactively(self) -> str | None:
        current = self.scopes.get_scope()
        while True:
            candidate = self.prompt_scope(current, self.scopes.recall_items())
            if candidate is None:
                return None
            try:
                scope = self.scopes.set_scope(candidate)
            except EmptyScopeError as exc:
                self._warn(SCOPE_DIALOG_TITLE, str(exc))
                continue
            self.statusMessage.emit(f"Oracle scope: {scope}", 2200)
            return scope

    def shutdown(self) -> None:
        self._result_pump.stop()
        for fut in list(self._active_futures):
            fut.cancel()
        self._executor.shutdown(wait=False, cancel_futures=True)

    # ---------- Scope prompt ----------

    def _prompt_scope_dialog(self, current: str, history: list[str]) -> str | None:
        items = list(history)
        if current and current not in items:
            items.insert(0, current)
        while True:
            value, ok = QInputDialog.getItem(
                self.ide,
                SCOPE_DIALOG_TITLE,
                SCOPE_DIALOG_LABEL,
                items,
                0,
                True,
            )
            if not ok:
                return None
            if str(value or "").strip():
                return str(value)
            self._warn(SCOPE_DIALOG_TITLE, str(EmptyScopeError()))

    def _warn(self, title: str, message: str) -> None:
        QMessageBox.warning(self.ide, title, message)

    # ---------- Scheduling ----------

    def _start_worker(self, invocation: Invocation) -> None:
        self._latest_token += 1
        token = self._latest_token
        self._base_dir = os.path.dirname(invocation.position.file_path)
        future = self._executor.submit(self.invoker.execute, invocation)
        self._active_futures.add(future)
        future.add_done_callback(lambda fut, tok=token: self._queue_future_result(tok, fut))

    def _queue_future_result(self, token: int, future: concurrent.futures.Future) -> None:
        self._active_futures.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        self._result_queue.put((token, exc if exc is not None else future.result()))

    def _drain_result_queue(self) -> None:
        while True:
            try:
                token, result_obj = self._result_queue.get_nowait()
            except queue.Empty:
                return
            # Only the newest query may replace the panel.
            if token != self._latest_token:
                continue
            self._on_worker_finished(result_obj)

    def _on_worker_finished(self, result_obj: object) -> None:
        if isinstance(result_obj, LaunchError):
            self.statusMessage.emit(str(result_obj), 3500)
            self.debugLines.emit([f"[Oracle] {result_obj}"])
            self._warn("Go Oracle", str(result_obj))
            return
        if isinstance(result_obj, BaseException):
            self.statusMessage.emit(f"Oracle query failed: {result_obj}", 3500)
            self.debugLines.emit([f"[Oracle] unexpected error: {result_obj!r}"])
            return
        if not isinstance(result_obj, RunResult):
            return

        document = self.annotator.annotate(result_obj.output)
        label = MODE_LABELS.get(result_obj.invocation.mode, result_obj.invocation.mode)
        count = len(document.annotations())
        summary = f"{label}: {count} location(s)."
        if not result_obj.ok:
            summary = f"{label}: oracle exited with status {result_obj.returncode}."
        self.panel.present(document, summary_text=summary)
        if self._focus_panel:
            self.panel.view.setFocus()
        if result_obj.debug_lines:
            self.debugLines.emit(list(result_obj.debug_lines))
        self.statusMessage.emit(summary, 2200)
        self.queryFinished.emit(result_obj)

    # ---------- Navigation ----------

    def _on_location_activated(self, file_path: str, line: int, col: int) -> None:
        path = str(file_path or "").strip()
        if not path:
            return
        if not os.path.isabs(path) and self._base_dir:
            path = os.path.join(self._base_dir, path)
        self.navigateRequested.emit(os.path.normpath(path), int(line), int(col))
