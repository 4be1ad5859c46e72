"""Usage text for the wmdot command line."""

from __future__ import annotations

from typing import List, NamedTuple, Optional, Tuple

from rich.console import Console

from .config import FLAVOR_SIMPLE, FLAVOR_SUBMODULES


class Entry(NamedTuple):
    command: str
    description: str
    example: str
    flavor: Optional[str] = None


SECTIONS: List[Tuple[str, List[Entry]]] = [
    (
        "Setting up",
        [
            Entry("init", "Create an empty repository for the home directory", "init"),
            Entry(
                "clone <url>",
                "Clone dotfiles, moving files that would be overwritten to the backup",
                "clone git@example.com:me/dotfiles.git",
            ),
            Entry("cancel", "Delete every tracked file and the repository", "cancel"),
        ],
    ),
    (
        "Working with files",
        [
            Entry("add|track <paths>", "Start tracking files, even ignored ones", "add .bashrc"),
            Entry("untrack <paths>", "Stop tracking files but keep them", "untrack .vimrc"),
            Entry("au|add-update [paths]", "Stage changes to tracked files", "au"),
            Entry("mv <src> <dst>", "Move or rename a tracked file", "mv .vimrc .config/vimrc"),
            Entry("rm <paths>", "Remove tracked files", "rm .inputrc"),
            Entry(
                "co|checkout [paths]",
                "Restore files from the index, all of them without paths",
                "co .bashrc",
            ),
            Entry("ls", "List tracked files", "ls"),
        ],
    ),
    (
        "Working with the repository",
        [
            Entry("commit [args]", "Record staged changes", "commit -m 'Add bashrc'"),
            Entry("push [args]", "Push to the configured remote and branch", "push"),
            Entry(
                "pull [args]",
                "Pull from the configured remote and branch, then update submodules",
                "pull",
                FLAVOR_SUBMODULES,
            ),
            Entry(
                "pull [args]",
                "Pull from the configured remote and branch without submodules",
                "pull",
                FLAVOR_SIMPLE,
            ),
            Entry(
                "pullx [args]",
                "Pull including submodules, then update submodules",
                "pullx",
                FLAVOR_SIMPLE,
            ),
            Entry(
                "reinit",
                "Deinitialize every submodule and initialize them again",
                "reinit",
                FLAVOR_SIMPLE,
            ),
            Entry("status [args]", "Show changes to tracked files", "status --short"),
            Entry("diff [args]", "Show unstaged changes", "diff"),
            Entry("log [args]", "Show the commit history", "log --oneline"),
            Entry("x <args>", "Run any git command against the repository", "x branch -a"),
        ],
    ),
    (
        "Submodules",
        [
            Entry("sm-ls", "List submodules", "sm-ls", FLAVOR_SUBMODULES),
            Entry(
                "sm-add <url> <path>",
                "Add a submodule",
                "sm-add https://github.com/tpope/vim-sensible .vim/pack/plugins/start/sensible",
                FLAVOR_SUBMODULES,
            ),
            Entry(
                "sm-del <paths>",
                "Remove submodules and their checkouts",
                "sm-del .vim/pack/plugins/start/sensible",
                FLAVOR_SUBMODULES,
            ),
            Entry(
                "sm-update [paths]",
                "Update submodules from their remotes and stage them",
                "sm-update",
                FLAVOR_SUBMODULES,
            ),
            Entry(
                "sm-reinit <paths>",
                "Deinitialize submodules and initialize them again",
                "sm-reinit .vim/pack/plugins/start/sensible",
                FLAVOR_SUBMODULES,
            ),
        ],
    ),
]

ENVIRONMENT = [
    ("WMDOT_REPO", "Repository location (default: ~/.local/var/wmdot)"),
    ("WMDOT_BACKUP", "Backup location (default: ~/.local/var/original)"),
    ("WMDOT_REMOTE", "Remote for push and pull (default: origin)"),
    ("WMDOT_BRANCH", "Branch for push and pull (default: master)"),
    ("WMDOT_FLAVOR", "Command set, 'submodules' or 'simple' (default: submodules)"),
    ("WMDOT_CONFIG", "Config file (default: ~/.config/wmdot/config.yaml)"),
    ("WMDOT_DEBUG", "Set to 1 to log every git invocation"),
]


def render_usage(prog_name: str, flavor: str, message: Optional[str] = None) -> str:
    """Render the usage document for the commands of ``flavor``."""
    lines = [
        f"Usage: {prog_name} [--debug] <command> [args...]",
        "",
        "Track dotfiles in your home directory with a separate git repository.",
    ]

    for title, entries in SECTIONS:
        visible = [e for e in entries if e.flavor in (None, flavor)]
        if not visible:
            continue
        lines.extend(["", f"{title}:"])
        width = max(len(e.command) for e in visible)
        for entry in visible:
            lines.append(f"  {entry.command.ljust(width)}  {entry.description}")
            lines.append(f"  {''.ljust(width)}  e.g. {prog_name} {entry.example}")

    lines.extend(["", "Environment:"])
    width = max(len(name) for name, _ in ENVIRONMENT)
    for name, description in ENVIRONMENT:
        lines.append(f"  {name.ljust(width)}  {description}")

    if message:
        lines.extend(["", message])
    return "\n".join(lines)


def print_usage(
    prog_name: str,
    flavor: str,
    message: Optional[str] = None,
    console: Optional[Console] = None,
) -> int:
    """Print the usage document and return the exit status to use, always 1."""
    console = console or Console(soft_wrap=True)
    console.print(render_usage(prog_name, flavor, message), markup=False, highlight=False)
    return 1
