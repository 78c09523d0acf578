from .annotator import NAV_GLYPH, OutputAnnotator, annotate_output
from .errors import (
    EmptyScopeError,
    LaunchError,
    NoFileError,
    NoScopeError,
    OracleError,
    UnknownModeError,
    UnsavedChangesError,
)
from .invoker import ProcessInvoker
from .models import (
    MODE_LABELS,
    MODES,
    Annotation,
    EditorTarget,
    Invocation,
    OutputDocument,
    OutputLine,
    PositionDescriptor,
    RunResult,
    Selection,
    SourceLocation,
)
from .position import PositionEncoder
from .session import OracleSession, ScopeManager
from .toolchain import GoToolchain, resolve_toolchain

__all__ = [
    "Annotation",
    "EditorTarget",
    "EmptyScopeError",
    "GoToolchain",
    "Invocation",
    "LaunchError",
    "MODES",
    "MODE_LABELS",
    "NAV_GLYPH",
    "NoFileError",
    "NoScopeError",
    "OracleError",
    "OracleSession",
    "OutputAnnotator",
    "OutputDocument",
    "OutputLine",
    "PositionDescriptor",
    "PositionEncoder",
    "ProcessInvoker",
    "RunResult",
    "ScopeManager",
    "Selection",
    "SourceLocation",
    "UnknownModeError",
    "UnsavedChangesError",
    "annotate_output",
    "resolve_toolchain",
]
