"""Configuration management for wmdot."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

import yaml

from .errors import WmdotError

logger = logging.getLogger(__name__)

FLAVOR_SUBMODULES = "submodules"
FLAVOR_SIMPLE = "simple"
FLAVORS = (FLAVOR_SUBMODULES, FLAVOR_SIMPLE)

DEFAULT_REPO = ".local/var/wmdot"
DEFAULT_BACKUP = ".local/var/original"
DEFAULT_CONFIG_FILE = ".config/wmdot/config.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "repo": None,
    "backup": None,
    "remote": "origin",
    "branch": "master",
    "flavor": FLAVOR_SUBMODULES,
    "log_file": None,
}

# Environment variables that override config file keys
ENV_OVERRIDES = {
    "repo": "WMDOT_REPO",
    "backup": "WMDOT_BACKUP",
    "remote": "WMDOT_REMOTE",
    "branch": "WMDOT_BRANCH",
    "flavor": "WMDOT_FLAVOR",
}


def load_config_file(path: Path) -> Dict[str, Any]:
    """Load the YAML config file, returning an empty mapping if it is absent.

    Raises:
        WmdotError: If the file cannot be parsed, is not a mapping, or
            contains unknown keys.
    """
    if not path.is_file():
        return {}

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise WmdotError(f"Error loading config file {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise WmdotError(f"Config file {path} must contain a mapping")

    unknown = sorted(set(data) - set(DEFAULT_CONFIG))
    if unknown:
        raise WmdotError(f"Unknown keys in config file {path}: {', '.join(unknown)}")

    for key, value in data.items():
        if value is not None and not isinstance(value, str):
            raise WmdotError(f"Config key '{key}' in {path} must be a string")

    return data


def _expand(value: str, home: Path) -> Path:
    if value == "~" or value.startswith("~/"):
        return home / value[2:]
    return Path(value).absolute()


@dataclass(frozen=True)
class Config:
    """Resolved wmdot configuration.

    Built once per invocation by :meth:`Config.load` and passed to every
    operation.

    Attributes:
        home (Path): Home directory, always the git work tree.
        user (str): Name of the invoking user.
        repo (Path): Location of the bare repository.
        backup (Path): Where files overwritten by a clone are moved.
        remote (str): Remote used by push and pull.
        branch (str): Branch used by push and pull.
        flavor (str): Active command vocabulary, "submodules" or "simple".
        prog_name (str): Name the program was invoked as.
        log_file (Optional[Path]): Optional debug log file.
    """

    home: Path
    user: str
    repo: Path
    backup: Path
    remote: str = "origin"
    branch: str = "master"
    flavor: str = FLAVOR_SUBMODULES
    prog_name: str = "wmdot"
    log_file: Optional[Path] = field(default=None)

    @classmethod
    def load(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        prog_name: str = "wmdot",
        which: Optional[Callable[[str], Optional[str]]] = None,
    ) -> "Config":
        """Validate the environment and resolve the configuration.

        Args:
            environ: Environment to read, defaults to ``os.environ``.
            prog_name: Display name used in help output.
            which: Executable lookup, defaults to ``shutil.which``.

        Raises:
            WmdotError: If git is missing, ``HOME`` or ``USER`` is empty, or
                the config file or flavor is invalid.
        """
        if environ is None:
            environ = os.environ
        which = which or shutil.which

        if not which("git"):
            raise WmdotError("git is not installed or not in PATH")

        home_value = environ.get("HOME", "")
        if not home_value:
            raise WmdotError("HOME is not set")
        user = environ.get("USER", "")
        if not user:
            raise WmdotError("USER is not set")

        home = Path(home_value).absolute()
        config_file = _expand(
            environ.get("WMDOT_CONFIG") or str(home / DEFAULT_CONFIG_FILE), home
        )

        values = dict(DEFAULT_CONFIG)
        values.update({k: v for k, v in load_config_file(config_file).items() if v is not None})
        for key, variable in ENV_OVERRIDES.items():
            if environ.get(variable):
                values[key] = environ[variable]

        if values["flavor"] not in FLAVORS:
            raise WmdotError(
                f"Unknown flavor '{values['flavor']}' (expected one of: {', '.join(FLAVORS)})"
            )

        config = cls(
            home=home,
            user=user,
            repo=_expand(values["repo"], home) if values["repo"] else home / DEFAULT_REPO,
            backup=_expand(values["backup"], home) if values["backup"] else home / DEFAULT_BACKUP,
            remote=values["remote"],
            branch=values["branch"],
            flavor=values["flavor"],
            prog_name=prog_name,
            log_file=_expand(values["log_file"], home) if values["log_file"] else None,
        )
        logger.debug("Resolved configuration: %s", config)
        return config
