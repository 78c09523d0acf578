"""Main window: source editors, the oracle output dock and a debug log dock."""

from __future__ import annotations

import os
import time

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QKeySequence, QTextCursor
from PySide6.QtWidgets import (
    QDockWidget,
    QFileDialog,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QTabWidget,
)

from pyoracle.oracle.models import MODE_LABELS, MODES
from pyoracle.oracle.session import OracleSession
from pyoracle.settings_manager import SettingsManager
from pyoracle.settings_store import SettingsStoreError
from pyoracle.ui.controllers.oracle_controller import OracleController
from pyoracle.ui.widgets.oracle_panel import OracleOutputPanel
from pyoracle.ui.widgets.source_editor import SourceEditor


class OracleWindow(QMainWindow):
    APP_NAME = "PyOracle"

    def __init__(self, settings_manager: SettingsManager | None = None, parent=None):
        super().__init__(parent)
        self.settings_manager = settings_manager or SettingsManager(persistent=False)
        self._last_status_debug_message = ""
        self._last_status_debug_at = 0.0
        self.setWindowTitle(self.APP_NAME)
        self.resize(1100, 760)

        self.tabs = QTabWidget(self)
        self.tabs.setTabsClosable(True)
        self.tabs.setDocumentMode(True)
        self.tabs.tabCloseRequested.connect(self._close_tab)
        self.setCentralWidget(self.tabs)

        self.oracle_panel = OracleOutputPanel(self)
        self.dock_oracle = QDockWidget("Oracle", self)
        self.dock_oracle.setObjectName("dock_oracle")
        self.dock_oracle.setWidget(self.oracle_panel)
        self.addDockWidget(Qt.BottomDockWidgetArea, self.dock_oracle)
        self.dock_oracle.hide()

        self.debug_output = QPlainTextEdit(self)
        self.debug_output.setReadOnly(True)
        self.dock_debug = QDockWidget("Debug Output", self)
        self.dock_debug.setObjectName("dock_debug")
        self.dock_debug.setWidget(self.debug_output)
        self.addDockWidget(Qt.BottomDockWidgetArea, self.dock_debug)
        self.tabifyDockWidget(self.dock_debug, self.dock_oracle)
        self.dock_debug.hide()

        self.session = OracleSession()
        self.oracle_controller = OracleController(
            self,
            self.oracle_panel,
            self.current_editor,
            session=self.session,
        )
        self.oracle_controller.statusMessage.connect(self._show_status)
        self.oracle_controller.debugLines.connect(lambda lines: self._append_debug_output_lines(lines))
        self.oracle_controller.navigateRequested.connect(self.open_location)
        self.oracle_panel.revealRequested.connect(self._reveal_oracle_dock)
        self.statusBar().messageChanged.connect(self._on_status_bar_message_changed)

        self._load_settings()
        self.setup_menus()

    # ---------- Setup ----------

    def _load_settings(self) -> None:
        self.settings_manager.load_all()
        error = self.settings_manager.load_error()
        if error:
            self._append_debug_output_lines(
                [f"[Settings][{self.settings_manager.settings_path.name}] Load error: {error}"],
                reveal=True,
            )
        self.oracle_controller.apply_settings(self.settings_manager.oracle_config())

    def setup_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        act_open = QAction("&Open...", self)
        act_open.setShortcut(QKeySequence.Open)
        act_open.triggered.connect(self.open_file_dialog)
        file_menu.addAction(act_open)

        act_save = QAction("&Save", self)
        act_save.setShortcut(QKeySequence.Save)
        act_save.triggered.connect(self.save_current_editor)
        file_menu.addAction(act_save)

        file_menu.addSeparator()
        act_quit = QAction("&Quit", self)
        act_quit.setShortcut(QKeySequence.Quit)
        act_quit.triggered.connect(self.close)
        file_menu.addAction(act_quit)

        oracle_menu = self.menuBar().addMenu("&Oracle")
        self.oracle_actions: dict[str, QAction] = {}
        for mode in MODES:
            action = QAction(MODE_LABELS.get(mode, mode), self)
            action.triggered.connect(lambda _checked=False, m=mode: self.oracle_controller.run_mode(m))
            oracle_menu.addAction(action)
            self.oracle_actions[mode] = action

        oracle_menu.addSeparator()
        act_scope = QAction("Set &Scope...", self)
        act_scope.triggered.connect(self.oracle_controller.set_scope_interactively)
        oracle_menu.addAction(act_scope)

    # ---------- Editors ----------

    def current_editor(self) -> SourceEditor | None:
        widget = self.tabs.currentWidget()
        return widget if isinstance(widget, SourceEditor) else None

    def editor_for_path(self, file_path: str) -> SourceEditor | None:
        target = os.path.realpath(file_path)
        for index in range(self.tabs.count()):
            editor = self.tabs.widget(index)
            if isinstance(editor, SourceEditor) and editor.file_path == target:
                return editor
        return None

    def open_file(self, file_path: str) -> SourceEditor | None:
        existing = self.editor_for_path(file_path)
        if existing is not None:
            self.tabs.setCurrentWidget(existing)
            return existing

        editor = SourceEditor(self)
        try:
            editor.load_file(file_path)
        except OSError as exc:
            QMessageBox.warning(self, "Open File", f"Could not open file:\n{exc}")
            editor.deleteLater()
            return None
        editor.document().modificationChanged.connect(lambda _m, ed=editor: self._refresh_tab_title(ed))
        index = self.tabs.addTab(editor, editor.display_name())
        self.tabs.setTabToolTip(index, editor.file_path or "")
        self.tabs.setCurrentIndex(index)
        self.settings_manager.set("window.last_open_dir", os.path.dirname(editor.file_path or ""))
        return editor

    def open_file_dialog(self) -> None:
        start_dir = str(self.settings_manager.get("window.last_open_dir", "") or os.getcwd())
        file_path, _ = QFileDialog.getOpenFileName(self, "Open File", start_dir, "Go files (*.go);;All files (*)")
        if file_path:
            self.open_file(file_path)

    def save_current_editor(self) -> None:
        editor = self.current_editor()
        if editor is None:
            return
        target = editor.file_path
        if not target:
            target, _ = QFileDialog.getSaveFileName(self, "Save File", os.getcwd())
            if not target:
                return
        try:
            saved = editor.save_file(target)
        except OSError as exc:
            QMessageBox.warning(self, "Save File", f"Could not save file:\n{exc}")
            return
        self._refresh_tab_title(editor)
        self.statusBar().showMessage(f"Saved {saved}", 1500)

    def open_location(self, file_path: str, line: int, col: int) -> None:
        editor = self.open_file(file_path)
        if editor is None:
            return
        editor.go_to_line_column(line, col)

    def _refresh_tab_title(self, editor: SourceEditor) -> None:
        index = self.tabs.indexOf(editor)
        if index < 0:
            return
        title = editor.display_name()
        if editor.is_modified():
            title += " *"
        self.tabs.setTabText(index, title)

    def _close_tab(self, index: int) -> None:
        editor = self.tabs.widget(index)
        if isinstance(editor, SourceEditor) and editor.is_modified():
            answer = QMessageBox.question(
                self,
                "Close File",
                f"Discard unsaved changes to {editor.display_name()}?",
            )
            if answer != QMessageBox.Yes:
                return
        self.tabs.removeTab(index)
        if editor is not None:
            editor.deleteLater()

    # ---------- Output ----------

    def _reveal_oracle_dock(self, preferred_height: int) -> None:
        self.dock_oracle.show()
        self.dock_oracle.raise_()
        if preferred_height > 0:
            self.resizeDocks([self.dock_oracle], [int(preferred_height)], Qt.Vertical)

    def _show_status(self, text: str, timeout_ms: int) -> None:
        self.statusBar().showMessage(str(text or ""), int(timeout_ms))

    def _on_status_bar_message_changed(self, message: str) -> None:
        text = str(message or "").strip()
        if not text:
            return
        now = time.monotonic()
        if text == self._last_status_debug_message and (now - self._last_status_debug_at) < 0.75:
            return
        self._last_status_debug_message = text
        self._last_status_debug_at = now
        self._append_debug_output_lines([f"[Status] {text}"], reveal=False)

    def _append_debug_output_lines(self, lines: list[str], *, reveal: bool = False) -> None:
        for line in lines:
            self.debug_output.appendPlainText(str(line))
        cursor = self.debug_output.textCursor()
        cursor.movePosition(QTextCursor.End)
        self.debug_output.setTextCursor(cursor)
        if reveal:
            self.dock_debug.show()
            self.dock_debug.raise_()

    # ---------- Lifecycle ----------

    def closeEvent(self, event):
        self.oracle_controller.shutdown()
        try:
            self.settings_manager.save_all(only_dirty=True)
        except SettingsStoreError as exc:
            print(f"[PyOracle] {exc}")
        super().closeEvent(event)
