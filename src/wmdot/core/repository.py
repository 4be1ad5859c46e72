"""Repository functionality for wmdot."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from .config import Config
from .errors import GitCommandError

logger = logging.getLogger(__name__)

SUBMODULE_MODE = "160000"

Runner = Callable[..., "subprocess.CompletedProcess[str]"]
PathLike = Union[str, Path]


class GitRunner:
    """Runs git bound to a separate git directory and work tree.

    Every bound invocation is prefixed with ``--git-dir`` and
    ``--work-tree`` so the home directory can be tracked by a repository
    that lives elsewhere.

    Attributes:
        git_dir (Path): The repository location.
        work_tree (Path): The work tree, normally the home directory.
        executable (str): git executable name or path.
    """

    def __init__(
        self,
        git_dir: Path,
        work_tree: Path,
        executable: str = "git",
        run: Optional[Runner] = None,
    ) -> None:
        self.git_dir = Path(git_dir)
        self.work_tree = Path(work_tree)
        self.executable = executable
        self._run = run or subprocess.run

    def __repr__(self) -> str:
        return f"GitRunner(git_dir={self.git_dir}, work_tree={self.work_tree})"

    def argv(self, *args: str) -> List[str]:
        """Return the full bound argument vector for a git command."""
        return [
            self.executable,
            f"--git-dir={self.git_dir}",
            f"--work-tree={self.work_tree}",
            *args,
        ]

    def _launch(self, argv: List[str], cwd: Optional[PathLike], **kwargs: Any) -> Any:
        logger.debug("Running %s (cwd=%s)", " ".join(argv), cwd or ".")
        return self._run(argv, cwd=str(cwd) if cwd is not None else None, **kwargs)

    def call(self, *args: str, cwd: Optional[PathLike] = None) -> int:
        """Run a bound git command with inherited stdio and return its exit status."""
        result = self._launch(self.argv(*args), cwd, check=False)
        return result.returncode

    def run(self, *args: str, cwd: Optional[PathLike] = None) -> None:
        """Run a bound git command, raising if it fails.

        Raises:
            GitCommandError: If git exits with a non-zero status.
        """
        argv = self.argv(*args)
        result = self._launch(argv, cwd, check=False)
        if result.returncode != 0:
            raise GitCommandError(argv, result.returncode)

    def output(self, *args: str, cwd: Optional[PathLike] = None, check: bool = True) -> str:
        """Run a bound git command and return its stdout.

        stderr is left attached to the terminal so git's diagnostics show up
        unchanged.

        Raises:
            GitCommandError: If git exits with a non-zero status and ``check``
                is set.
        """
        argv = self.argv(*args)
        result = self._launch(argv, cwd, check=False, stdout=subprocess.PIPE, text=True)
        if check and result.returncode != 0:
            raise GitCommandError(argv, result.returncode)
        return result.stdout

    def succeeds(self, *args: str, cwd: Optional[PathLike] = None) -> bool:
        """Run a bound git command quietly and report whether it succeeded."""
        result = self._launch(
            self.argv(*args),
            cwd,
            check=False,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        return result.returncode == 0

    def unbound(self, *args: str, cwd: Optional[PathLike] = None) -> None:
        """Run git without the git-dir and work-tree flags, raising on failure.

        Raises:
            GitCommandError: If git exits with a non-zero status.
        """
        argv = [self.executable, *args]
        result = self._launch(argv, cwd, check=False)
        if result.returncode != 0:
            raise GitCommandError(argv, result.returncode)


class DotRepository:
    """The bare dotfiles repository and its home-directory work tree.

    Attributes:
        config (Config): Resolved configuration.
        git (GitRunner): Runner bound to the repository and home directory.
    """

    def __init__(self, config: Config, git: Optional[GitRunner] = None) -> None:
        self.config = config
        self.git = git or GitRunner(config.repo, config.home)

    def __str__(self) -> str:
        return f"DotRepository({self.config.repo})"

    def __repr__(self) -> str:
        return self.__str__()

    @property
    def path(self) -> Path:
        return self.config.repo

    @property
    def home(self) -> Path:
        return self.config.home

    def exists(self) -> bool:
        """Check whether anything exists at the repository location."""
        return self.path.exists() or self.path.is_symlink()

    def has_head(self) -> bool:
        """Check whether HEAD resolves to a commit."""
        return self.git.succeeds("rev-parse", "--verify", "--quiet", "HEAD")

    def tracked_files(self) -> List[str]:
        """List every path tracked at HEAD, relative to the home directory.

        An unborn HEAD has no tracked files.
        """
        if not self.has_head():
            return []
        output = self.git.output(
            "ls-tree", "--full-tree", "-r", "-z", "--name-only", "HEAD", cwd=self.home
        )
        return [path for path in output.split("\0") if path]

    def submodule_paths(self) -> List[str]:
        """List the paths of all registered submodules.

        Submodules are the gitlink entries of the index.
        """
        output = self.git.output("ls-files", "--stage", "-z", cwd=self.home)
        paths = []
        for line in output.split("\0"):
            # <mode> <object> <stage>\t<path>
            meta, _, path = line.partition("\t")
            if meta.split(" ", 1)[0] == SUBMODULE_MODE:
                paths.append(path)
        return paths

    def submodule_name(self, path: str) -> str:
        """Return the name a submodule at ``path`` is registered under.

        The name picks the submodule's storage below ``modules/`` and stays
        the same when the submodule is moved. Submodules missing from
        ``.gitmodules`` are assumed to be named after their path.
        """
        gitmodules = self.home / ".gitmodules"
        if not gitmodules.is_file():
            return path

        # Exits with 1 when nothing matches
        output = self.git.output(
            "config", "-f", str(gitmodules), "-z", "--get-regexp", r"^submodule\..*\.path$",
            cwd=self.home,
            check=False,
        )
        for entry in output.split("\0"):
            # submodule.<name>.path\n<path>
            key, _, value = entry.partition("\n")
            if value == path:
                return key[len("submodule."):-len(".path")]
        return path

    def toplevel(self, directory: Path) -> Path:
        """Return the top level of the work tree enclosing ``directory``."""
        return Path(self.git.output("rev-parse", "--show-toplevel", cwd=directory).strip())
