"""Logging configuration for wmdot.

Log records go to stderr through rich so they never mix with output that
git writes to stdout. Debug logging shows every git invocation and every
filesystem change wmdot makes on its own.

Example:
    ```python
    from wmdot.core.logging import setup_logging

    setup_logging(debug=True, log_file="~/.local/var/wmdot.log")

    import logging
    logger = logging.getLogger(__name__)
    logger.debug("Running git status")
    ```
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

# Log output goes to stderr
console = Console(stderr=True, soft_wrap=True)


def setup_logging(
    debug: bool = False,
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
) -> None:
    """Set up logging configuration.

    Calling this again replaces the previous handlers, so the CLI can set
    up console logging first and add the file handler once the
    configuration has been resolved.

    Args:
        debug: Whether to enable debug logging on the console.
        log_file: Optional path to a log file. The file always receives
            debug records. ``~`` is expanded.
        log_format: Format string for the log file.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug or log_file else logging.INFO)

    # Remove existing handlers
    root_logger.handlers.clear()

    console_handler = RichHandler(
        console=console,
        show_path=debug,
        show_time=debug,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=debug,
    )
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(log_format))
        root_logger.addHandler(file_handler)

    logger = logging.getLogger(__name__)
    logger.debug("Logging initialized (debug=%s)", debug)
    if log_file:
        logger.debug("Log file: %s", log_file)
