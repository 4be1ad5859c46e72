"""Tests for configuration resolution."""

from pathlib import Path
from typing import Dict

import pytest

from wmdot.core.config import Config
from wmdot.core.errors import WmdotError


def has_git(name: str) -> str:
    return "/usr/bin/git"


def no_git(name: str) -> None:
    return None


@pytest.fixture
def environ(tmp_path: Path) -> Dict[str, str]:
    return {"HOME": str(tmp_path), "USER": "tester"}


def test_defaults(environ: Dict[str, str], tmp_path: Path) -> None:
    """Test default locations rooted at the home directory."""
    config = Config.load(environ, prog_name="dot", which=has_git)

    assert config.home == tmp_path
    assert config.user == "tester"
    assert config.repo == tmp_path / ".local" / "var" / "wmdot"
    assert config.backup == tmp_path / ".local" / "var" / "original"
    assert config.remote == "origin"
    assert config.branch == "master"
    assert config.flavor == "submodules"
    assert config.prog_name == "dot"
    assert config.log_file is None


def test_missing_git(environ: Dict[str, str]) -> None:
    with pytest.raises(WmdotError, match="git is not installed"):
        Config.load(environ, which=no_git)


@pytest.mark.parametrize("variable", ["HOME", "USER"])
def test_missing_variable(environ: Dict[str, str], variable: str) -> None:
    """Test that HOME and USER must be non-empty."""
    environ[variable] = ""
    with pytest.raises(WmdotError, match=f"{variable} is not set") as excinfo:
        Config.load(environ, which=has_git)
    assert excinfo.value.exit_code == 1


def test_environment_overrides(environ: Dict[str, str], tmp_path: Path) -> None:
    environ.update(
        {
            "WMDOT_REPO": str(tmp_path / "repo"),
            "WMDOT_BACKUP": "~/saved",
            "WMDOT_REMOTE": "upstream",
            "WMDOT_BRANCH": "main",
            "WMDOT_FLAVOR": "simple",
        }
    )
    config = Config.load(environ, which=has_git)

    assert config.repo == tmp_path / "repo"
    assert config.backup == tmp_path / "saved"
    assert config.remote == "upstream"
    assert config.branch == "main"
    assert config.flavor == "simple"


def test_config_file(environ: Dict[str, str], tmp_path: Path) -> None:
    """Test values from the YAML config file, with the environment winning."""
    config_file = tmp_path / ".config" / "wmdot" / "config.yaml"
    config_file.parent.mkdir(parents=True)
    config_file.write_text(
        "repo: ~/dotfiles.git\n"
        "branch: main\n"
        "flavor: simple\n"
        "log_file: ~/wmdot.log\n"
    )
    environ["WMDOT_BRANCH"] = "trunk"

    config = Config.load(environ, which=has_git)

    assert config.repo == tmp_path / "dotfiles.git"
    assert config.branch == "trunk"
    assert config.flavor == "simple"
    assert config.log_file == tmp_path / "wmdot.log"


def test_config_file_location(environ: Dict[str, str], tmp_path: Path) -> None:
    config_file = tmp_path / "custom.yaml"
    config_file.write_text("remote: github\n")
    environ["WMDOT_CONFIG"] = str(config_file)

    assert Config.load(environ, which=has_git).remote == "github"


@pytest.mark.parametrize(
    "content, message",
    [
        ("- just\n- a list\n", "must contain a mapping"),
        ("colour: blue\n", "Unknown keys"),
        ("branch: [main]\n", "must be a string"),
        ("repo: [unclosed\n", "Error loading config file"),
    ],
)
def test_invalid_config_file(
    environ: Dict[str, str], tmp_path: Path, content: str, message: str
) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(content)
    environ["WMDOT_CONFIG"] = str(config_file)

    with pytest.raises(WmdotError, match=message):
        Config.load(environ, which=has_git)


def test_unknown_flavor(environ: Dict[str, str]) -> None:
    environ["WMDOT_FLAVOR"] = "fancy"
    with pytest.raises(WmdotError, match="Unknown flavor 'fancy'"):
        Config.load(environ, which=has_git)


def test_config_is_immutable(environ: Dict[str, str]) -> None:
    config = Config.load(environ, which=has_git)
    with pytest.raises(AttributeError):
        config.repo = Path("/elsewhere")  # type: ignore[misc]
