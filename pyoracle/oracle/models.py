"""Value types shared by the oracle pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

MODES: tuple[str, ...] = (
    "callees",
    "callers",
    "callgraph",
    "callstack",
    "describe",
    "implements",
    "freevars",
    "peers",
)

MODE_LABELS: dict[str, str] = {
    "callees": "Callees",
    "callers": "Callers",
    "callgraph": "Call Graph",
    "callstack": "Call Stack",
    "describe": "Describe",
    "implements": "Implements",
    "freevars": "Free Variables",
    "peers": "Channel Peers",
}


@dataclass(slots=True, frozen=True)
class Selection:
    """Editor selection in 1-based character positions.

    ``end`` is ``None`` for a plain cursor. For a range, ``end`` is the
    position just past the last selected character, like the editor's own
    region end.
    """

    start: int
    end: int | None = None

    @property
    def is_point(self) -> bool:
        return self.end is None

    @classmethod
    def from_bounds(cls, start: int, end: int) -> Selection:
        lo, hi = sorted((int(start), int(end)))
        if lo == hi:
            return cls(lo)
        return cls(lo, hi)


@dataclass(slots=True, frozen=True)
class PositionDescriptor:
    file_path: str
    start: int
    end: int | None = None

    def format(self) -> str:
        if self.end is None:
            return f"{self.file_path}:{self.start}"
        return f"{self.file_path}:{self.start}-{self.end}"

    def __str__(self) -> str:
        return self.format()


@dataclass(slots=True, frozen=True)
class Invocation:
    mode: str
    scope: str
    position: PositionDescriptor
    extra_env: Mapping[str, str] = field(default_factory=dict)

    @property
    def scope_tokens(self) -> list[str]:
        return str(self.scope or "").split()

    def argv(self, tool: str) -> list[str]:
        return [
            str(tool),
            f"-pos={self.position.format()}",
            f"-mode={self.mode}",
            *self.scope_tokens,
        ]


@dataclass(slots=True)
class EditorTarget:
    """Snapshot of the editor state an oracle query is issued against."""

    file_path: str | None
    modified: bool
    text: str
    selection: Selection


@dataclass(slots=True, frozen=True)
class SourceLocation:
    file_path: str
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None

    def label(self) -> str:
        text = f"{self.file_path}:{self.line}:{self.column}"
        if self.end_line is not None and self.end_column is not None:
            text += f"-{self.end_line}:{self.end_column}"
        return text


@dataclass(slots=True, frozen=True)
class Annotation:
    start: int  # span of the glyph within the displayed line
    end: int
    location: SourceLocation


@dataclass(slots=True, frozen=True)
class OutputLine:
    text: str
    annotation: Annotation | None = None


@dataclass(slots=True)
class OutputDocument:
    lines: list[OutputLine] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> OutputDocument:
        return cls([OutputLine(line) for line in str(text or "").splitlines()])

    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)

    def annotations(self) -> list[tuple[int, Annotation]]:
        return [(row, line.annotation) for row, line in enumerate(self.lines) if line.annotation is not None]

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(slots=True)
class RunResult:
    invocation: Invocation
    command: list[str]
    output: str
    returncode: int
    debug_lines: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.returncode == 0
