"""Logging setup.

Console records go through a RichHandler on the shared error console.
Once the configuration has been validated, every record is also written
in full to a log file.
"""

import logging
from pathlib import Path

from rich.logging import RichHandler

from tarbs.core.paths import ensure_state_dir, get_log_path
from tarbs.utils.formatting import err_console, print_warning

LOGGER_NAME = "tarbs"
FILE_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the ``tarbs`` logger with a console handler.

    Args:
        verbose: Show DEBUG records on the console instead of INFO.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.addHandler(console_handler)

    logger.propagate = False
    return logger


def attach_log_file(log_file: Path | None = None) -> Path | None:
    """Send DEBUG records of the ``tarbs`` logger to a file.

    Failure to open the file only disables file logging.

    Args:
        log_file: Target file. Defaults to the state directory's ``tarbs.log``.

    Returns:
        The log file path, or None if it could not be opened.
    """
    logger = logging.getLogger(LOGGER_NAME)
    try:
        if log_file is None:
            ensure_state_dir()
            log_file = get_log_path()
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
    except (OSError, RuntimeError) as e:
        print_warning(f"Could not open log file: {e}")
        return None

    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, "%Y-%m-%d %H:%M:%S"))
    logger.addHandler(file_handler)
    logger.debug("Logging to %s", log_file)
    return log_file
