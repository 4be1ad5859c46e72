"""Exceptions raised by wmdot operations.

Operations never terminate the process themselves. They either return an
exit status or raise one of the exceptions below, and the command line
layer decides how the process exits.
"""

from __future__ import annotations

from typing import Sequence


class WmdotError(Exception):
    """A fatal, user-facing error.

    Attributes:
        message (str): Text shown to the user.
        exit_code (int): Process exit status the CLI should use.
    """

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class Aborted(WmdotError):
    """The user declined a confirmation prompt."""

    def __init__(self, message: str = "Aborted.") -> None:
        super().__init__(message, exit_code=1)


class GitCommandError(WmdotError):
    """A git invocation exited with a non-zero status.

    git has already written its own diagnostics to stderr, so the message
    only names the failed command.
    """

    def __init__(self, argv: Sequence[str], returncode: int) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        super().__init__(
            f"Command failed with exit status {returncode}: {' '.join(self.argv)}",
            exit_code=returncode,
        )
