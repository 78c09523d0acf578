import pytest

from pyoracle.oracle.errors import EmptyScopeError, NoScopeError
from pyoracle.oracle.session import OracleSession, ScopeManager


def test_initial_scope_is_empty():
    assert ScopeManager(OracleSession()).get_scope() == ""


@pytest.mark.parametrize("candidate", ["", "   ", "\t\n"])
def test_blank_scope_is_rejected(candidate):
    manager = ScopeManager(OracleSession(scope="main"))
    with pytest.raises(EmptyScopeError):
        manager.set_scope(candidate)
    assert manager.get_scope() == "main"
    assert manager.history() == []


def test_set_scope_commits_and_records_history():
    manager = ScopeManager(OracleSession())
    assert manager.set_scope("pkg/foo") == "pkg/foo"
    assert manager.get_scope() == "pkg/foo"
    assert manager.history() == ["pkg/foo"]


def test_set_scope_trims_surrounding_whitespace():
    manager = ScopeManager(OracleSession())
    assert manager.set_scope("  net/http  fmt ") == "net/http  fmt"


def test_history_is_most_recent_first_and_keeps_duplicates():
    manager = ScopeManager(OracleSession())
    for scope in ("a", "b", "a"):
        manager.set_scope(scope)
    assert manager.history() == ["a", "b", "a"]
    assert manager.recall_items() == ["a", "b"]


def test_history_is_bounded():
    manager = ScopeManager(OracleSession(history_limit=3))
    for scope in ("one", "two", "three", "four"):
        manager.set_scope(scope)
    assert manager.history() == ["four", "three", "two"]

    manager.set_history_limit(1)
    assert manager.history() == ["four"]


def test_ensure_scope_returns_existing_scope_without_prompting():
    manager = ScopeManager(OracleSession(scope="main"))

    def prompt(current, history):
        raise AssertionError("prompt should not run")

    assert manager.ensure_scope(prompt) == "main"


def test_ensure_scope_prompts_when_empty():
    session = OracleSession(history=["old/pkg"])
    manager = ScopeManager(session)
    seen = {}

    def prompt(current, history):
        seen["args"] = (current, history)
        return "cmd/tool"

    assert manager.ensure_scope(prompt) == "cmd/tool"
    assert seen["args"] == ("", ["old/pkg"])
    assert session.scope == "cmd/tool"
    assert session.history == ["cmd/tool", "old/pkg"]


def test_ensure_scope_cancel_raises_no_scope():
    manager = ScopeManager(OracleSession())
    with pytest.raises(NoScopeError):
        manager.ensure_scope(lambda current, history: None)
    with pytest.raises(NoScopeError):
        manager.ensure_scope(None)


def test_ensure_scope_blank_answer_raises_empty_scope():
    manager = ScopeManager(OracleSession())
    with pytest.raises(EmptyScopeError):
        manager.ensure_scope(lambda current, history: "  ")
    assert manager.get_scope() == ""
