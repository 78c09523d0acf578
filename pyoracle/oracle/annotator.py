"""Replaces ``file:line:col:`` prefixes in oracle output with navigation glyphs."""

from __future__ import annotations

import re

from pyoracle.oracle.models import Annotation, OutputDocument, OutputLine, SourceLocation

NAV_GLYPH = "▶"
SEPARATOR = " "

# "path:line:col:" and the GNU range form "path:line.col-line.col:".
# One blank after the colon belongs to the marker; the separator replaces it.
_MARKER_RE = re.compile(
    r"(?P<path>[^\s:][^:\n]*)"
    r":(?P<line>\d+)[:.](?P<col>\d+)"
    r"(?:-(?P<end_line>\d+)[:.](?P<end_col>\d+))?"
    r":[ \t]?"
)


def parse_marker(text: str) -> tuple[SourceLocation, int] | None:
    """Location at the start of ``text`` and the length of the marker."""
    match = _MARKER_RE.match(text)
    if match is None:
        return None
    end_line = match.group("end_line")
    end_col = match.group("end_col")
    location = SourceLocation(
        file_path=match.group("path"),
        line=int(match.group("line")),
        column=int(match.group("col")),
        end_line=int(end_line) if end_line else None,
        end_column=int(end_col) if end_col else None,
    )
    return location, match.end()


class OutputAnnotator:
    def __init__(self, glyph: str = NAV_GLYPH, separator: str = SEPARATOR) -> None:
        self.glyph = glyph
        self.separator = separator

    def annotate(self, document: OutputDocument | str) -> OutputDocument:
        if not isinstance(document, OutputDocument):
            document = OutputDocument.from_text(str(document or ""))
        return OutputDocument([self._annotate_line(line) for line in document.lines])

    def _annotate_line(self, line: OutputLine) -> OutputLine:
        if line.annotation is not None:
            return line
        parsed = parse_marker(line.text)
        if parsed is None:
            return line
        location, marker_end = parsed
        annotation = Annotation(start=0, end=len(self.glyph), location=location)
        return OutputLine(self.glyph + self.separator + line.text[marker_end:], annotation)


def annotate_output(raw_text: str) -> OutputDocument:
    return OutputAnnotator().annotate(raw_text)
