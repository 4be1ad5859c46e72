"""Tests for confirmation prompts."""

from io import StringIO
from typing import Iterator, List

import pytest
from rich.console import Console

from wmdot.core.prompt import confirm, console_confirmer, parse_answer


@pytest.mark.parametrize(
    "answer, expected",
    [
        ("y", True),
        ("Y", True),
        ("yes", True),
        ("YES please", True),
        ("  yep ", True),
        ("n", False),
        ("No", False),
        ("nope", False),
        ("", False),
        ("   ", False),
        ("maybe", None),
        ("1", None),
    ],
)
def test_parse_answer(answer: str, expected) -> None:
    assert parse_answer(answer) is expected


def replay(monkeypatch: pytest.MonkeyPatch, answers: List[str]) -> None:
    lines: Iterator[str] = iter(answers)

    def fake_input(*args: str) -> str:
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr("builtins.input", fake_input)


def test_confirm_repeats_until_clear(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that unclear answers are asked again."""
    replay(monkeypatch, ["what?", "perhaps", "yes"])
    output = StringIO()

    assert confirm("Continue?", Console(file=output)) is True
    assert output.getvalue().count("Continue? [y/N]") == 3
    assert "Please answer yes or no." in output.getvalue()


def test_confirm_blank_is_no(monkeypatch: pytest.MonkeyPatch) -> None:
    replay(monkeypatch, [""])
    assert confirm("Continue?", Console(file=StringIO())) is False


def test_confirm_end_of_input_is_no(monkeypatch: pytest.MonkeyPatch) -> None:
    replay(monkeypatch, [])
    assert confirm("Continue?", Console(file=StringIO())) is False


def test_console_confirmer(monkeypatch: pytest.MonkeyPatch) -> None:
    replay(monkeypatch, ["n", "y"])
    ask = console_confirmer(Console(file=StringIO()))

    assert ask("First?") is False
    assert ask("Second?") is True


def test_confirm_defaults_to_stderr(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    replay(monkeypatch, ["y"])

    assert console_confirmer()("Continue?") is True

    captured = capsys.readouterr()
    assert "Continue? [y/N]" in captured.err
    assert captured.out == ""
