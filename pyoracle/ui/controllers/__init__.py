"""Qt-aware controllers used by the main window."""

from .oracle_controller import OracleController

__all__ = ["OracleController"]
