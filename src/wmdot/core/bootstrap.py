"""Creating the dotfiles repository, either empty or from an upstream."""

from __future__ import annotations

import logging
import shutil
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .backup import BackupManager
from .commands import SUBMODULE_UPDATE
from .errors import Aborted, WmdotError
from .prompt import Confirmer, console_confirmer
from .repository import DotRepository

logger = logging.getLogger(__name__)


class BootstrapManager:
    """Manages repository bootstrapping operations.

    Attributes:
        repo (DotRepository): The repository to create.
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
        self.backup_manager = BackupManager(
            repo.config.home, repo.config.backup, console=self.console
        )

    def _require_absent(self) -> None:
        if self.repo.exists():
            raise WmdotError(f"{self.repo.path} already exists")

    def _summary(self, **rows: str) -> None:
        for key, value in rows.items():
            self.console.print(f"[bold cyan]{key}:[/] {escape(value)}")

    def init(self) -> int:
        """Create an empty repository tracking the home directory.

        Raises:
            WmdotError: If the repository location already exists.
            Aborted: If the user declines.
            GitCommandError: If ``git init`` fails.
        """
        self._require_absent()

        self.console.print("[bold]Initializing a new dotfiles repository")
        self._summary(Home=str(self.repo.home), Repository=str(self.repo.path))
        if not self.confirm("Continue?"):
            raise Aborted()

        self.repo.path.mkdir(parents=True)
        logger.debug("Created %s", self.repo.path)
        self.repo.git.run("init", "--quiet")

        self.console.print(f"[green]Initialized empty repository in {escape(str(self.repo.path))}")
        return 0

    def clone(self, upstream: Optional[str]) -> int:
        """Clone ``upstream`` and check it out into the home directory.

        The clone happens without confirmation. Tracked files that already
        exist in the home directory are listed and, once confirmed, moved to
        the backup location before the checkout. Declining removes the new
        repository again and leaves the home directory untouched.

        Raises:
            WmdotError: If no upstream is given or the repository location
                already exists.
            Aborted: If the user declines to move the overlapping files.
            GitCommandError: If cloning or checking out fails.
        """
        if not upstream:
            raise WmdotError("clone requires an upstream repository")
        self._require_absent()

        self.console.print("[bold]Cloning dotfiles repository")
        self._summary(
            Upstream=upstream,
            Home=str(self.repo.home),
            Repository=str(self.repo.path),
            Backup=str(self.backup_manager.backup_dir),
        )

        self.repo.git.unbound("clone", "--bare", upstream, str(self.repo.path))

        overlaps = self.backup_manager.find_overlaps(self.repo.tracked_files())
        if overlaps:
            self.console.print("\nThe following files already exist and will be moved to the backup:")
            for rel_path in overlaps:
                self.console.print(f"  - {escape(rel_path)}")
            if not self.confirm("Continue?"):
                logger.debug("Removing %s", self.repo.path)
                shutil.rmtree(self.repo.path)
                raise Aborted()
            self.backup_manager.relocate(overlaps)

        self.repo.git.run("checkout", "-f", cwd=self.repo.home)
        self.repo.git.run(*SUBMODULE_UPDATE, cwd=self.repo.home)

        self.console.print("[green]Dotfiles checked out successfully.")
        return 0
