"""Core functionality for wmdot."""

from .backup import BackupManager
from .bootstrap import BootstrapManager
from .config import Config
from .errors import Aborted, GitCommandError, WmdotError
from .repository import DotRepository, GitRunner
from .submodule import SubmoduleManager
from .wipe import WipeManager

__all__ = [
    "Aborted",
    "BackupManager",
    "BootstrapManager",
    "Config",
    "DotRepository",
    "GitCommandError",
    "GitRunner",
    "SubmoduleManager",
    "WipeManager",
    "WmdotError",
]
