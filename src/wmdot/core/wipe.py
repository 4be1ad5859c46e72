"""Wipe functionality: stop tracking dotfiles and remove the repository."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable, List, Optional

from rich.console import Console
from rich.markup import escape

from .errors import Aborted, WmdotError
from .prompt import Confirmer, console_confirmer
from .repository import DotRepository

logger = logging.getLogger(__name__)


def parent_directories(home: Path, files: Iterable[str]) -> List[Path]:
    """Return every directory between the home directory and ``files``.

    The home directory itself is excluded. Duplicates are dropped and the
    result is sorted in reverse, so nested directories come before the
    directories that contain them.
    """
    dirs = set()
    for rel_path in files:
        for parent in Path(rel_path).parents:
            if parent == Path("."):
                break
            dirs.add(home / parent)
    return sorted(dirs, reverse=True)


def remove_path(path: Path) -> bool:
    """Delete a file, symlink or directory tree if it still exists."""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)
    else:
        return False
    logger.debug("Removed %s", path)
    return True


def prune_empty_directories(home: Path, dirs: Iterable[Path]) -> List[Path]:
    """Remove each directory that is empty and lies under ``home``.

    Missing directories, non-empty ones and directories outside the home
    directory are skipped.

    Returns:
        The directories that were removed.
    """
    home = home.resolve()
    removed = []
    for path in dirs:
        if not path.is_dir() or path.is_symlink():
            continue
        resolved = path.resolve()
        if resolved == home or home not in resolved.parents:
            continue
        if any(path.iterdir()):
            continue
        logger.debug("Removing empty directory %s", path)
        path.rmdir()
        removed.append(path)
    return removed


class WipeManager:
    """Removes every tracked file from the home directory and the repository.

    Attributes:
        repo (DotRepository): The repository to cancel.
        confirm (Confirmer): Asks the user yes/no questions.
        console (Console): Rich console for output formatting.
    """

    def __init__(
        self,
        repo: DotRepository,
        confirm: Optional[Confirmer] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.repo = repo
        self.console = console or Console(soft_wrap=True)
        self.confirm = confirm or console_confirmer()

    def cancel(self) -> int:
        """Untrack and delete every tracked file, then delete the repository.

        Asks twice: once up front and once after listing the tracked files.
        Declining either question leaves everything as it was.

        Raises:
            Aborted: If the user declines.
            WmdotError: If the repository does not exist.
            GitCommandError: If removing a file fails.
        """
        if not self.repo.exists():
            raise WmdotError(f"{self.repo.path} does not exist")

        self.console.print(
            "[yellow]Warning: this removes every tracked file from "
            f"{escape(str(self.repo.home))} and deletes {escape(str(self.repo.path))}."
        )
        if not self.confirm("Continue?"):
            raise Aborted()

        files = self.repo.tracked_files()
        if files:
            self.console.print("\nThe following files will be removed:")
            for rel_path in files:
                self.console.print(f"  - {escape(rel_path)}")
        else:
            self.console.print("\nNo files are tracked.")
        if not self.confirm("Really remove them?"):
            raise Aborted()

        for rel_path in files:
            self.repo.git.run(
                "rm", "-f", "--quiet", "--ignore-unmatch", "--", rel_path, cwd=self.repo.home
            )
            # Files already dropped from the index are left behind by git
            remove_path(self.repo.home / rel_path)

        prune_empty_directories(self.repo.home, parent_directories(self.repo.home, files))

        logger.debug("Removing %s", self.repo.path)
        shutil.rmtree(self.repo.path)

        self.console.print("[green]Dotfiles repository removed.")
        return 0
