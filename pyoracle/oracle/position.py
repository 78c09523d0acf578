"""Selection to byte-offset position encoding for the oracle ``-pos`` flag.

Editors address text in characters; the oracle parses source bytes. A
position is converted by measuring the UTF-8 encoding of everything before
it. Editor counters are 1-based, the oracle wants zero-based offsets, so
every endpoint is shifted down by one.
"""

from __future__ import annotations

import os
from pathlib import Path

from pyoracle.oracle.models import PositionDescriptor, Selection


def canonical_file_path(file_path: str) -> str:
    text = str(file_path or "").strip()
    if not text:
        return ""
    candidate = Path(text).expanduser()
    try:
        return str(candidate.resolve())
    except Exception:
        return os.path.abspath(str(candidate))


def utf16_to_char_index(text: str, utf16_pos: int) -> int:
    """Map a Qt text position (UTF-16 code units) to a Python string index."""
    pos = max(0, int(utf16_pos))
    units = 0
    for index, ch in enumerate(text):
        if units >= pos:
            return index
        units += 2 if ord(ch) > 0xFFFF else 1
    return len(text)


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8", errors="surrogatepass"))


def disk_char_widths(file_path: str) -> list[int] | None:
    """Byte width of every editor character of ``file_path`` as stored on disk.

    A ``\\r\\n`` pair is one editor character two bytes wide, so files with
    mixed line endings are measured break by break.
    """
    try:
        raw = Path(file_path).read_bytes()
    except OSError:
        return None
    text = raw.decode("utf-8", errors="surrogateescape")
    widths: list[int] = []
    index = 0
    while index < len(text):
        ch = text[index]
        if ch == "\r" and text[index + 1:index + 2] == "\n":
            widths.append(2)
            index += 2
            continue
        widths.append(len(ch.encode("utf-8", errors="surrogateescape")))
        index += 1
    return widths


class PositionEncoder:
    def encode(self, file_path: str, selection: Selection, text: str | None = None) -> PositionDescriptor:
        """Build the ``-pos`` descriptor for ``selection`` in ``file_path``.

        ``text`` is the editor's view of the file. Offsets are measured
        against the bytes on disk whenever that view has one character per
        disk character, so line-ending conversions and editor-side character
        substitutions do not shift them. When ``text`` is omitted the file is
        read from disk and positions count its raw characters.
        """
        path = canonical_file_path(file_path)
        widths: list[int] | None = None
        if text is None:
            text = Path(path).read_bytes().decode("utf-8", errors="replace")
        else:
            widths = disk_char_widths(path)
            if widths is not None and len(widths) != len(text):
                widths = None

        def offset(position: int) -> int:
            if widths is None:
                return self.byte_offset(text, position)
            point = min(max(1, int(position)), len(widths) + 1)
            return sum(widths[: point - 1])

        start = offset(selection.start)
        if selection.end is None:
            return PositionDescriptor(path, start)
        end = offset(selection.end)
        if end < start:
            start, end = end, start
        return PositionDescriptor(path, start, end)

    @staticmethod
    def byte_offset(text: str, position: int) -> int:
        point = min(max(1, int(position)), len(text) + 1)
        return _byte_length(text[: point - 1])

    @staticmethod
    def decode(text: str, offset: int) -> int:
        """Inverse of ``byte_offset``: the 1-based position at ``offset`` bytes."""
        target = max(0, int(offset))
        count = 0
        for index, ch in enumerate(text):
            if count >= target:
                return index + 1
            count += _byte_length(ch)
        return len(text) + 1

    def decode_selection(self, text: str, descriptor: PositionDescriptor) -> Selection:
        start = self.decode(text, descriptor.start)
        if descriptor.end is None:
            return Selection(start)
        return Selection(start, self.decode(text, descriptor.end))
