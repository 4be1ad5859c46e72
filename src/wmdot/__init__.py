"""Track dotfiles in the home directory with a separate git repository."""

__version__ = "0.1.0"
