"""Errors raised by the oracle command pipeline."""

from __future__ import annotations


class OracleError(RuntimeError):
    """Base class for failures that stop an oracle query before it runs."""


class NoFileError(OracleError):
    def __init__(self, message: str = "Cannot use the oracle on a buffer without a file name.") -> None:
        super().__init__(message)


class UnsavedChangesError(OracleError):
    def __init__(self, file_path: str = "") -> None:
        self.file_path = str(file_path or "")
        name = self.file_path or "buffer"
        super().__init__(f"Save {name} before invoking the oracle.")


class EmptyScopeError(OracleError):
    def __init__(self) -> None:
        super().__init__("You must specify a non-empty scope for the Go oracle.")


class NoScopeError(OracleError):
    def __init__(self) -> None:
        super().__init__("No oracle scope set; query canceled.")


class UnknownModeError(OracleError):
    def __init__(self, mode: str) -> None:
        self.mode = str(mode or "")
        super().__init__(f"Unknown oracle mode '{self.mode}'.")


class LaunchError(OracleError):
    def __init__(self, command: str, reason: str) -> None:
        self.command = str(command or "")
        self.reason = str(reason or "")
        super().__init__(f"Could not start '{self.command}': {self.reason}")
