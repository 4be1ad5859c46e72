"""Test configuration."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest
from rich.console import Console

from wmdot.core.config import Config
from wmdot.core.repository import DotRepository, GitRunner


class FakeGit:
    """Stands in for ``subprocess.run`` and records git invocations.

    Calls are recorded without the ``--git-dir``/``--work-tree`` flags.
    Unscripted commands succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, ...]] = []
        self.cwds: List[Optional[str]] = []
        self.responses: Dict[Tuple[str, ...], Tuple[int, str, Optional[Callable[[], None]]]] = {}

    def respond(
        self,
        *args: str,
        stdout: str = "",
        returncode: int = 0,
        effect: Optional[Callable[[], None]] = None,
    ) -> None:
        self.responses[args] = (returncode, stdout, effect)

    def __call__(self, argv: Sequence[str], cwd: Optional[str] = None, **kwargs) -> subprocess.CompletedProcess:
        if len(argv) > 2 and argv[1].startswith("--git-dir="):
            args = tuple(argv[3:])
        else:
            args = tuple(argv[1:])
        self.calls.append(args)
        self.cwds.append(cwd)

        returncode, stdout, effect = self.responses.get(args, (0, "", None))
        if effect is not None:
            effect()
        captured = stdout if kwargs.get("stdout") is subprocess.PIPE else None
        return subprocess.CompletedProcess(list(argv), returncode, stdout=captured)

    def called(self, *prefix: str) -> List[Tuple[str, ...]]:
        """Return the recorded calls starting with ``prefix``."""
        return [call for call in self.calls if call[: len(prefix)] == prefix]


class Answers:
    """A confirmer that replays queued answers and records the questions."""

    def __init__(self, *answers: bool) -> None:
        self.answers = list(answers)
        self.questions: List[str] = []

    def __call__(self, question: str) -> bool:
        self.questions.append(question)
        return self.answers.pop(0)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Create a home directory for tests."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def config(home: Path) -> Config:
    """Create a configuration rooted in the test home directory."""
    return Config(
        home=home,
        user="tester",
        repo=home / ".local" / "var" / "wmdot",
        backup=home / ".local" / "var" / "original",
    )


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture
def repo(config: Config, fake_git: FakeGit) -> DotRepository:
    """Create a repository whose git invocations go to ``fake_git``."""
    return DotRepository(config, GitRunner(config.repo, config.home, run=fake_git))


@pytest.fixture
def console() -> Console:
    """A console that records output instead of printing it."""
    return Console(record=True, soft_wrap=True, width=200)


def tracked(*paths: str) -> str:
    """Format ``paths`` like ``git ls-tree -z --name-only`` output."""
    return "".join(f"{path}\0" for path in paths)


LS_TREE = ("ls-tree", "--full-tree", "-r", "-z", "--name-only", "HEAD")
LS_FILES = ("ls-files", "--stage", "-z")
