"""Translation of wmdot subcommands into git invocations.

Each passthrough subcommand becomes a plan: a list of git argument vectors
run in order against the bound repository and work tree. Rewriting is a
pure function of the subcommand, its arguments and the configured
remote/branch pair, so it can be tested without running git.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, List, NamedTuple, Optional, Sequence

from .config import FLAVOR_SIMPLE, FLAVOR_SUBMODULES

if TYPE_CHECKING:
    from .repository import GitRunner

logger = logging.getLogger(__name__)


class Step(NamedTuple):
    """One git invocation in a plan.

    Attributes:
        args: git arguments, without the git-dir and work-tree flags.
        stop_on_error: Whether a failure skips the remaining steps.
    """

    args: List[str]
    stop_on_error: bool = True


Plan = List[Step]
Rewrite = Callable[[List[str], str, str], Plan]

SUBMODULE_UPDATE = ["submodule", "update", "--init", "--recursive"]


def _simple(*prefix: str) -> Rewrite:
    def rewrite(args: List[str], remote: str, branch: str) -> Plan:
        return [Step([*prefix, *args])]

    return rewrite


def _checkout(args: List[str], remote: str, branch: str) -> Plan:
    if not args:
        return [Step(["checkout", "--", ":/"])]
    return [Step(["checkout", "--", *args])]


def _push(args: List[str], remote: str, branch: str) -> Plan:
    return [Step(["push", remote, branch, *args])]


def _ls(args: List[str], remote: str, branch: str) -> Plan:
    return [Step(["ls-tree", "--full-tree", "-r", "--name-only", "HEAD", *args])]


def _pull_then_update(args: List[str], remote: str, branch: str) -> Plan:
    # The submodule update runs even when the pull fails
    return [
        Step(["pull", "--no-recurse-submodules", remote, branch, *args], stop_on_error=False),
        Step(list(SUBMODULE_UPDATE)),
    ]


def _pull_only(args: List[str], remote: str, branch: str) -> Plan:
    return [Step(["pull", "--no-recurse-submodules", remote, branch, *args])]


def _pullx(args: List[str], remote: str, branch: str) -> Plan:
    return [
        Step(["pull", "--recurse-submodules", remote, branch, *args]),
        Step(list(SUBMODULE_UPDATE)),
    ]


def _reinit(args: List[str], remote: str, branch: str) -> Plan:
    return [
        Step(["submodule", "deinit", "--all", "-f"]),
        Step(list(SUBMODULE_UPDATE)),
    ]


# Shared by both flavors
COMMON_REWRITES: Dict[str, Rewrite] = {
    "add": _simple("add", "-f"),
    "track": _simple("add", "-f"),
    "untrack": _simple("rm", "--cached"),
    "au": _simple("add", "-u"),
    "add-update": _simple("add", "-u"),
    "mv": _simple("mv", "-k"),
    "co": _checkout,
    "checkout": _checkout,
    "rm": _simple("rm"),
    "commit": _simple("commit"),
    "push": _push,
    "status": _simple("status", "-uno"),
    "diff": _simple("diff"),
    "log": _simple("log"),
    "ls": _ls,
    "x": _simple(),
}

FLAVOR_REWRITES: Dict[str, Dict[str, Rewrite]] = {
    FLAVOR_SUBMODULES: {
        "pull": _pull_then_update,
    },
    FLAVOR_SIMPLE: {
        "pull": _pull_only,
        "pullx": _pullx,
        "reinit": _reinit,
    },
}


def passthrough_commands(flavor: str) -> List[str]:
    """Return the passthrough subcommand names available in ``flavor``."""
    return sorted({**COMMON_REWRITES, **FLAVOR_REWRITES[flavor]})


def rewrite(
    flavor: str,
    name: str,
    args: Sequence[str],
    remote: str = "origin",
    branch: str = "master",
) -> Optional[Plan]:
    """Rewrite a passthrough subcommand into a plan of git invocations.

    Args:
        flavor: Active command vocabulary.
        name: The wmdot subcommand.
        args: Remaining command line arguments, appended to the git command.
        remote: Remote used by push and pull.
        branch: Branch used by push and pull.

    Returns:
        The plan, or None if ``name`` is not a passthrough command of
        ``flavor``.

    Example:
        ```python
        rewrite("submodules", "status", ["--short"])
        # [Step(args=['status', '-uno', '--short'], stop_on_error=True)]
        ```
    """
    table = {**COMMON_REWRITES, **FLAVOR_REWRITES[flavor]}
    handler = table.get(name)
    if handler is None:
        return None
    return handler(list(args), remote, branch)


def run_plan(git: "GitRunner", plan: Plan) -> int:
    """Run a plan from the caller's working directory.

    Returns:
        The first non-zero exit status, or 0 if every step succeeded.
    """
    status = 0
    for step in plan:
        returncode = git.call(*step.args)
        if returncode != 0:
            logger.debug("git %s exited with %d", " ".join(step.args), returncode)
            status = status or returncode
            if step.stop_on_error:
                break
    return status
