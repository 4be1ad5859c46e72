"""Backup of home directory files that a clone would overwrite.

Before a freshly cloned repository is checked out into the home directory,
every tracked path that already exists there is moved aside into the
backup location, keeping its path relative to the home directory.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable, List, Optional

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)


class BackupManager:
    """Finds and relocates files that overlap with tracked paths.

    Attributes:
        home (Path): The home directory (work tree).
        backup_dir (Path): Root of the backup location.
        console (Console): Rich console for output formatting.
    """

    def __init__(self, home: Path, backup_dir: Path, console: Optional[Console] = None):
        self.home = Path(home)
        self.backup_dir = Path(backup_dir)
        self.console = console or Console(soft_wrap=True)

    def find_overlaps(self, paths: Iterable[str]) -> List[str]:
        """Return the tracked paths that already exist in the home directory.

        Symlinks count as existing even when they dangle.

        Args:
            paths: Paths relative to the home directory.

        Returns:
            The overlapping paths, in the order given.
        """
        overlaps = []
        for rel_path in paths:
            target = self.home / rel_path
            if target.exists() or target.is_symlink():
                overlaps.append(rel_path)
        return overlaps

    def backup_path(self, rel_path: str) -> Path:
        """Get the backup location for a path relative to the home directory."""
        return self.backup_dir / rel_path

    def relocate(self, paths: Iterable[str]) -> List[Path]:
        """Move each path from the home directory into the backup location.

        Parent directories are created as needed. The relative path is
        preserved, so ``sub/dir/file`` ends up at ``<backup>/sub/dir/file``.

        Args:
            paths: Paths relative to the home directory.

        Returns:
            The backup paths the files were moved to.
        """
        moved: List[Path] = []
        for rel_path in paths:
            src_path = self.home / rel_path
            dst_path = self.backup_path(rel_path)
            dst_path.parent.mkdir(parents=True, exist_ok=True)

            logger.debug("Moving %s to %s", src_path, dst_path)
            shutil.move(str(src_path), str(dst_path))
            moved.append(dst_path)
            self.console.print(f"[green]Backed up:[/] {escape(rel_path)}")

        return moved
