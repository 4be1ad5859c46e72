"""Allow running wmdot with ``python -m wmdot``."""

from .cli import main

main()
