"""Analysis scope state for one editor session."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from pyoracle.oracle.errors import EmptyScopeError, NoScopeError

DEFAULT_HISTORY_LIMIT = 32

# (current_scope, history) -> candidate, or None when the user cancels.
ScopePrompt = Callable[[str, list[str]], "str | None"]


@dataclass
class OracleSession:
    """Cross-invocation state owned by the window that created it."""

    scope: str = ""
    history: list[str] = field(default_factory=list)
    history_limit: int = DEFAULT_HISTORY_LIMIT


class ScopeManager:
    def __init__(self, session: OracleSession) -> None:
        self.session = session

    def get_scope(self) -> str:
        return self.session.scope

    def set_scope(self, candidate: str) -> str:
        scope = str(candidate or "").strip()
        if not scope:
            raise EmptyScopeError()
        self.session.scope = scope
        self._push_history(scope)
        return scope

    def history(self) -> list[str]:
        return list(self.session.history)

    def recall_items(self) -> list[str]:
        """History for a prompt: current scope first, each value shown once."""
        items: list[str] = []
        seen: set[str] = set()
        for value in [self.session.scope, *self.session.history]:
            if value and value not in seen:
                seen.add(value)
                items.append(value)
        return items

    def ensure_scope(self, prompt: ScopePrompt | None) -> str:
        current = self.get_scope()
        if current:
            return current
        if prompt is None:
            raise NoScopeError()
        candidate = prompt(current, self.recall_items())
        if candidate is None:
            raise NoScopeError()
        return self.set_scope(candidate)

    def set_history_limit(self, limit: int) -> None:
        self.session.history_limit = max(1, int(limit))
        del self.session.history[self.session.history_limit:]

    def _push_history(self, scope: str) -> None:
        self.session.history.insert(0, scope)
        del self.session.history[max(1, int(self.session.history_limit)):]
