"""Command line interface for wmdot."""

import logging
from typing import Callable, Dict, List

import click
from rich.console import Console
from rich.markup import escape

from .core.bootstrap import BootstrapManager
from .core.commands import rewrite, run_plan
from .core.config import FLAVOR_SIMPLE, FLAVOR_SUBMODULES, Config
from .core.errors import Aborted, GitCommandError, WmdotError
from .core.logging import setup_logging
from .core.repository import DotRepository
from .core.submodule import SubmoduleManager
from .core.usage import print_usage
from .core.wipe import WipeManager

logger = logging.getLogger(__name__)

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

Handler = Callable[[Config, List[str]], int]

HELP_COMMANDS = ("help", "-h", "--help")


def _init(config: Config, args: List[str]) -> int:
    return BootstrapManager(DotRepository(config), console=console).init()


def _clone(config: Config, args: List[str]) -> int:
    upstream = args[0] if args else None
    return BootstrapManager(DotRepository(config), console=console).clone(upstream)


def _cancel(config: Config, args: List[str]) -> int:
    return WipeManager(DotRepository(config), console=console).cancel()


def _submodules(config: Config) -> SubmoduleManager:
    return SubmoduleManager(DotRepository(config), console=console)


# Commands with their own behavior; everything else is rewritten into git calls
COMMANDS: Dict[str, Handler] = {
    "init": _init,
    "clone": _clone,
    "cancel": _cancel,
}

FLAVOR_COMMANDS: Dict[str, Dict[str, Handler]] = {
    FLAVOR_SUBMODULES: {
        "sm-ls": lambda config, args: _submodules(config).list(),
        "sm-add": lambda config, args: _submodules(config).add(args),
        "sm-del": lambda config, args: _submodules(config).delete(args),
        "sm-update": lambda config, args: _submodules(config).update(args),
        "sm-reinit": lambda config, args: _submodules(config).reinit(args),
    },
    FLAVOR_SIMPLE: {},
}


def dispatch(config: Config, command: str, args: List[str]) -> int:
    """Run ``command`` and return the exit status.

    Raises:
        WmdotError: If the command fails.
    """
    if command in HELP_COMMANDS:
        return print_usage(config.prog_name, config.flavor, console=console)

    handler = COMMANDS.get(command) or FLAVOR_COMMANDS[config.flavor].get(command)
    if handler is not None:
        return handler(config, args)

    plan = rewrite(config.flavor, command, args, remote=config.remote, branch=config.branch)
    if plan is None:
        return print_usage(
            config.prog_name,
            config.flavor,
            message=f"unrecognized command: {command}",
            console=err_console,
        )
    return run_plan(DotRepository(config).git, plan)


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        "help_option_names": [],
    }
)
@click.option(
    "--debug", is_flag=True, envvar="WMDOT_DEBUG", help="Log every git invocation to stderr"
)
@click.argument("command", required=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(ctx: click.Context, debug: bool, command: str, args: List[str]) -> None:
    """Track dotfiles in the home directory with a separate git repository.

    The repository lives outside the home directory (~/.local/var/wmdot by
    default) and the home directory is its work tree. Most commands are
    short names for git commands run against that pair; init, clone and
    cancel set the repository up and tear it down again.

    Examples:

      # Start tracking dotfiles
      wmdot init
      wmdot add .bashrc
      wmdot commit -m "Add bashrc"

      # Set up a new machine from an existing repository
      wmdot clone git@example.com:me/dotfiles.git

      # Run any other git command
      wmdot x remote -v
    """
    setup_logging(debug)
    prog_name = ctx.find_root().info_name or "wmdot"

    try:
        config = Config.load(prog_name=prog_name)
        if config.log_file:
            setup_logging(debug, config.log_file)

        if command is None:
            status = print_usage(config.prog_name, config.flavor, console=err_console)
        else:
            status = dispatch(config, command, list(args))
    except GitCommandError as e:
        # git has already reported the problem
        logger.debug(e.message)
        status = e.exit_code
    except Aborted as e:
        err_console.print(f"[yellow]{escape(e.message)}")
        status = e.exit_code
    except WmdotError as e:
        err_console.print(f"[red]Error: {escape(e.message)}")
        status = e.exit_code
    except KeyboardInterrupt:
        err_console.print("\nInterrupted")
        status = 130

    ctx.exit(status)


def main() -> None:
    """Entry point for the wmdot CLI."""
    cli()


if __name__ == "__main__":
    main()
