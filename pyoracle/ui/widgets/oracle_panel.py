from __future__ import annotations

from PySide6.QtCore import QEvent, Qt, Signal
from PySide6.QtGui import QColor, QTextCharFormat, QTextCursor
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QToolTip,
    QVBoxLayout,
    QWidget,
)

from pyoracle.oracle.models import Annotation, OutputDocument

BANNER = "Go Oracle"


class _OracleOutputView(QPlainTextEdit):
    markerClicked = Signal(int, int)  # block, position in block
    lineActivated = Signal(int)  # block

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setLineWrapMode(QPlainTextEdit.NoWrap)
        self.setMouseTracking(True)
        self.marker_at = None  # callable(block, column) -> Annotation | None

    def _block_and_column(self, point) -> tuple[int, int]:
        cursor = self.cursorForPosition(point)
        return cursor.blockNumber(), cursor.positionInBlock()

    def mouseReleaseEvent(self, event):
        super().mouseReleaseEvent(event)
        if event.button() != Qt.LeftButton or self.textCursor().hasSelection():
            return
        block, column = self._block_and_column(event.position().toPoint())
        self.markerClicked.emit(block, column)

    def mouseDoubleClickEvent(self, event):
        block, _column = self._block_and_column(event.position().toPoint())
        self.lineActivated.emit(block)

    def mouseMoveEvent(self, event):
        super().mouseMoveEvent(event)
        block, column = self._block_and_column(event.position().toPoint())
        over_marker = callable(self.marker_at) and self.marker_at(block, column) is not None
        self.viewport().setCursor(Qt.PointingHandCursor if over_marker else Qt.IBeamCursor)

    def keyPressEvent(self, event):
        if event.key() in (Qt.Key_Return, Qt.Key_Enter):
            self.lineActivated.emit(self.textCursor().blockNumber())
            return
        super().keyPressEvent(event)

    def viewportEvent(self, event):
        if event.type() == QEvent.ToolTip and callable(self.marker_at):
            block, column = self._block_and_column(event.pos())
            annotation = self.marker_at(block, column)
            if annotation is not None:
                QToolTip.showText(event.globalPos(), annotation.location.label(), self)
            else:
                QToolTip.hideText()
            return True
        return super().viewportEvent(event)


class OracleOutputPanel(QWidget):
    """Reusable result panel; each ``present`` call replaces its contents."""

    locationActivated = Signal(str, int, int)  # file, line, col
    revealRequested = Signal(int)  # preferred height in pixels

    def __init__(self, parent=None, *, max_lines: int = 20):
        super().__init__(parent)
        self._max_lines = max(3, int(max_lines))
        self._annotations: dict[int, Annotation] = {}

        self.status_label = QLabel("No oracle query yet.", self)

        self.view = _OracleOutputView(self)
        self.view.marker_at = self.annotation_at
        self.view.markerClicked.connect(self._on_marker_clicked)
        self.view.lineActivated.connect(self._on_line_activated)

        top = QHBoxLayout()
        top.setContentsMargins(0, 0, 0, 0)
        top.addWidget(self.status_label, 1)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addLayout(top)
        lay.addWidget(self.view)

    def set_max_lines(self, max_lines: int) -> None:
        self._max_lines = max(3, int(max_lines))

    def present(self, document: OutputDocument, *, summary_text: str = "") -> None:
        self._annotations = {}
        lines = [BANNER, *(line.text for line in document.lines)]
        self.view.setPlainText("\n".join(lines) + "\n")

        marker_format = self._marker_format()
        for row, annotation in document.annotations():
            block_number = row + 1  # banner occupies block 0
            self._annotations[block_number] = annotation
            block = self.view.document().findBlockByNumber(block_number)
            cursor = QTextCursor(block)
            cursor.setPosition(block.position() + annotation.start)
            cursor.setPosition(block.position() + annotation.end, QTextCursor.KeepAnchor)
            fmt = QTextCharFormat(marker_format)
            fmt.setAnchorHref(annotation.location.label())
            cursor.mergeCharFormat(fmt)

        count = len(self._annotations)
        self.status_label.setText(summary_text or f"{count} location(s).")

        self.view.moveCursor(QTextCursor.Start)
        self.view.verticalScrollBar().setValue(0)
        self.view.horizontalScrollBar().setValue(0)
        self.revealRequested.emit(self.preferred_height())

    def text(self) -> str:
        return self.view.toPlainText()

    def annotation_at(self, block_number: int, column: int) -> Annotation | None:
        annotation = self._annotations.get(int(block_number))
        if annotation is None:
            return None
        if annotation.start <= int(column) <= annotation.end:
            return annotation
        return None

    def annotation_for_line(self, block_number: int) -> Annotation | None:
        return self._annotations.get(int(block_number))

    def preferred_height(self) -> int:
        line_count = max(1, self.view.document().blockCount())
        shown = min(line_count, self._max_lines)
        spacing = self.view.fontMetrics().lineSpacing()
        frame = 2 * self.view.frameWidth() + int(self.view.document().documentMargin() * 2)
        return shown * spacing + frame + self.status_label.sizeHint().height()

    def _marker_format(self) -> QTextCharFormat:
        fmt = QTextCharFormat()
        fmt.setAnchor(True)
        fmt.setForeground(QColor("#2f7fd6"))
        fmt.setFontUnderline(False)
        return fmt

    def _on_marker_clicked(self, block_number: int, column: int) -> None:
        annotation = self.annotation_at(block_number, column)
        if annotation is not None:
            self._emit_location(annotation)

    def _on_line_activated(self, block_number: int) -> None:
        annotation = self.annotation_for_line(block_number)
        if annotation is not None:
            self._emit_location(annotation)

    def _emit_location(self, annotation: Annotation) -> None:
        loc = annotation.location
        self.locationActivated.emit(loc.file_path, int(loc.line), int(loc.column))
