"""Tests for pdfmanager.core.prompts."""

import pytest

from pdfmanager.core.prompts import confirm, prompt_user, select_from_list


@pytest.fixture
def answers(monkeypatch):
    """Feed canned lines to rich prompts."""
    def _feed(*lines):
        replies = iter(lines)
        monkeypatch.setattr("builtins.input", lambda *args: next(replies))

    return _feed


def test_prompt_user_returns_text(answers):
    answers("hello")
    assert prompt_user("Say something") == "hello"


def test_prompt_user_default(answers):
    answers("")
    assert prompt_user("Name", default="anon") == "anon"


def test_confirm(answers):
    answers("y")
    assert confirm("Sure?") is True


def test_confirm_auto_yes_does_not_ask(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda *args: pytest.fail("asked"))
    assert confirm("Sure?", auto_yes=True) is True


def test_select_from_list(answers):
    answers("2")
    assert select_from_list(["a", "b", "c"]) == "b"


def test_select_from_list_rejects_then_accepts(answers):
    answers("7", "x", "1")
    assert select_from_list(["a", "b"]) == "a"


def test_select_from_list_cancel(answers):
    answers("q")
    assert select_from_list(["a"]) is None


def test_select_from_empty_list():
    assert select_from_list([]) is None
