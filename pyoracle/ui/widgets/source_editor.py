"""Plain source editor that can describe its selection to the oracle."""

from __future__ import annotations

import os

from PySide6.QtCore import Signal
from PySide6.QtGui import QFont, QTextCursor
from PySide6.QtWidgets import QPlainTextEdit

from pyoracle.oracle.models import EditorTarget, Selection
from pyoracle.oracle.position import PositionEncoder, canonical_file_path, utf16_to_char_index
from pyoracle.services.file_io import atomic_write_source, read_source


def _utf16_length(text: str) -> int:
    return sum(2 if ord(ch) > 0xFFFF else 1 for ch in text)


class SourceEditor(QPlainTextEdit):
    filePathChanged = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._file_path: str | None = None
        self._newline = "\n"
        self.setLineWrapMode(QPlainTextEdit.NoWrap)
        font = QFont("Monospace")
        font.setStyleHint(QFont.TypeWriter)
        self.setFont(font)

    @property
    def file_path(self) -> str | None:
        return self._file_path

    @property
    def newline(self) -> str:
        return self._newline

    def set_file_path(self, file_path: str | None):
        self._file_path = canonical_file_path(file_path) if file_path else None
        self.filePathChanged.emit(self._file_path or "")

    def load_file(self, file_path: str) -> None:
        text, newline = read_source(file_path)
        self.setPlainText(text)
        self._newline = newline
        self.set_file_path(file_path)
        self.document().setModified(False)

    def save_file(self, file_path: str | None = None) -> str:
        target = canonical_file_path(file_path or self._file_path or "")
        if not target:
            return ""
        atomic_write_source(target, self.source_text(), newline=self._newline)
        if target != self._file_path:
            self.set_file_path(target)
        self.document().setModified(False)
        return target

    def source_text(self) -> str:
        """Document text with non-breaking spaces and line separators left as typed."""
        return self.document().toRawText().replace("\u2029", "\n")

    def is_modified(self) -> bool:
        return bool(self.document().isModified())

    def current_selection(self) -> Selection:
        """The cursor or selected range in 1-based character positions."""
        cursor = self.textCursor()
        text = self.source_text()
        start = utf16_to_char_index(text, cursor.selectionStart()) + 1
        if not cursor.hasSelection():
            return Selection(start)
        end = utf16_to_char_index(text, cursor.selectionEnd()) + 1
        return Selection.from_bounds(start, end)

    def oracle_target(self) -> EditorTarget:
        return EditorTarget(
            file_path=self._file_path,
            modified=self.is_modified(),
            text=self.source_text(),
            selection=self.current_selection(),
        )

    def go_to_line_column(self, line: int, column: int = 1) -> None:
        """Move to ``line``/``column``; the column counts bytes like Go positions."""
        doc = self.document()
        block = doc.findBlockByNumber(max(0, int(line) - 1))
        if not block.isValid():
            block = doc.lastBlock()
        block_text = block.text()
        char_pos = PositionEncoder.decode(block_text, max(0, int(column) - 1))
        offset = _utf16_length(block_text[: char_pos - 1])
        cursor = QTextCursor(block)
        cursor.setPosition(block.position() + offset)
        self.setTextCursor(cursor)
        self.centerCursor()
        self.setFocus()

    def display_name(self) -> str:
        if not self._file_path:
            return "untitled"
        return os.path.basename(self._file_path)
