"""Logging configuration for hookgen.

Usage in modules:
    from hookgen.logging_config import get_logger
    logger = get_logger(__name__)

All loggers live under the "hookgen" hierarchy. Levels are set by the CLI.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_NAME = "hookgen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a child logger under the hookgen hierarchy.

    Args:
        name: Module ``__name__``, or None for the root hookgen logger.

    Returns:
        logging.Logger instance.
    """
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    if name.startswith(f"{_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name.rsplit('.', 1)[-1]}")


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the hookgen logger hierarchy.

    Levels:
        --verbose -> DEBUG
        (default) -> WARNING
        --quiet   -> ERROR

    Args:
        verbose: Enable DEBUG-level output.
        quiet: Only report errors.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    root_logger = logging.getLogger(_LOGGER_NAME)
    root_logger.setLevel(level)

    # Avoid duplicate handlers when called multiple times
    if root_logger.handlers:
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=verbose,
        rich_tracebacks=verbose,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root_logger.addHandler(handler)

    # Generated code goes to stdout; keep log records off the root logger
    root_logger.propagate = False
