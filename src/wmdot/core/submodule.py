"""Submodule management for dotfiles tracked with submodules."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .errors import Aborted, WmdotError
from .prompt import Confirmer, console_confirmer
from .repository import DotRepository

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Strip trailing path separators, so ``foo/bar///`` becomes ``foo/bar``."""
    stripped = path.rstrip(os.sep)
    if os.altsep:
        stripped = stripped.rstrip(os.altsep)
    return stripped or os.sep


class SubmodulePath(NamedTuple):
    """A user-supplied path resolved against the work tree.

    Attributes:
        relative: Path relative to the work tree top level.
        absolute: Absolute path inside the work tree.
    """

    relative: str
    absolute: Path


class SubmoduleManager:
    """Lists, adds, removes, updates and re-initializes submodules.

    Attributes:
        repo (DotRepository): The dotfiles repository.
        confirm (Confirmer): Asks the user yes/no questions.
        console (Console): Rich console for output formatting.
    """

    def __init__(
        self,
        repo: DotRepository,
        confirm: Optional[Confirmer] = None,
        console: Optional[Console] = None,
        cwd: Optional[Path] = None,
    ) -> None:
        self.repo = repo
        self.console = console or Console(soft_wrap=True)
        self.confirm = confirm or console_confirmer()
        self.cwd = cwd

    def resolve(self, path: str) -> SubmodulePath:
        """Resolve ``path`` to its location relative to the work tree.

        The directory containing the path must exist and lie inside the work
        tree.

        Raises:
            WmdotError: If the containing directory is missing or outside the
                work tree.
        """
        candidate = Path(self.cwd or Path.cwd()) / normalize_path(path)
        directory = candidate.parent
        if not directory.is_dir():
            raise WmdotError(f"{directory} is not a directory")

        toplevel = self.repo.toplevel(directory)
        try:
            prefix = directory.resolve().relative_to(toplevel.resolve())
        except ValueError:
            raise WmdotError(f"{directory} is not inside the work tree {toplevel}")

        relative = (prefix / candidate.name).as_posix()
        return SubmodulePath(relative, toplevel / relative)

    def require(self, path: str) -> SubmodulePath:
        """Resolve ``path`` and check that it is a registered submodule.

        Raises:
            WmdotError: If the path is not a submodule.
        """
        resolved = self.resolve(path)
        if resolved.relative not in self.repo.submodule_paths():
            raise WmdotError(f"{resolved.absolute} is not a submodule")
        return resolved

    def _git(self, *args: str) -> None:
        self.repo.git.run(*args, cwd=self.repo.home)

    def list(self) -> int:
        """Print the path of every submodule."""
        for rel_path in self.repo.submodule_paths():
            self.console.print(rel_path, markup=False, highlight=False)
        return 0

    def add(self, args: Sequence[str]) -> int:
        """Add the repository ``args[0]`` as a submodule at ``args[1]``."""
        if len(args) != 2:
            raise WmdotError("sm-add requires a repository and a path")
        url, path = args
        target = self.resolve(path)

        if not self.confirm(f"Add submodule {url} at {target.absolute}?"):
            raise Aborted()

        self._git("submodule", "add", "--", url, target.relative)
        self._git("submodule", "update", "--init", "--recursive", "--", target.relative)
        self.console.print(f"[green]Added submodule {escape(target.relative)}")
        return 0

    def delete(self, paths: Sequence[str]) -> int:
        """Deinitialize and remove each submodule in ``paths``.

        The submodule's working directory and its storage under the
        repository's ``modules`` directory are deleted as well.
        """
        if not paths:
            raise WmdotError("sm-del requires at least one path")

        for path in paths:
            target = self.require(path)
            if not self.confirm(f"Delete submodule {target.absolute}?"):
                raise Aborted()

            name = self.repo.submodule_name(target.relative)
            self._git("submodule", "deinit", "-f", "--", target.relative)
            self._git("rm", "-f", "--cached", "--quiet", "--", target.relative)
            for leftover in (
                self.repo.home / target.relative,
                self.repo.path / "modules" / name,
            ):
                if leftover.exists():
                    logger.debug("Removing %s", leftover)
                    shutil.rmtree(leftover)
            self.console.print(f"[green]Deleted submodule {escape(target.relative)}")
        return 0

    def update(self, paths: Sequence[str]) -> int:
        """Update submodules from their remotes and stage the result.

        Every submodule is updated when ``paths`` is empty.
        """
        if paths:
            targets: List[str] = [self.require(path).relative for path in paths]
        else:
            targets = self.repo.submodule_paths()

        for rel_path in targets:
            self._git("submodule", "update", "--remote", "--recursive", "--", rel_path)
            self._git("add", "--", rel_path)
        return 0

    def reinit(self, paths: Sequence[str]) -> int:
        """Deinitialize each submodule in ``paths`` and initialize it again."""
        if not paths:
            raise WmdotError("sm-reinit requires at least one path")

        for path in paths:
            target = self.require(path)
            if not self.confirm(f"Re-initialize submodule {target.absolute}?"):
                raise Aborted()

            self._git("submodule", "deinit", "-f", "--", target.relative)
            self._git("submodule", "update", "--init", "--recursive", "--", target.relative)
        return 0
