"""Logging setup for Cochange Insight.

Library modules only ask for loggers under ``cochange_insight``; the CLI
installs handlers once the configuration (and with it the verbosity) is known.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_ROOT = "cochange_insight"

# AnalysisConfig.verbosity -> logging level
LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """Route log records to a rich stderr handler at the level for ``verbosity``.

    Args:
        verbosity: "quiet", "normal" or "verbose"
        log_file: Also append plain-text records to this file

    Returns:
        The ``cochange_insight`` logger

    Raises:
        ValueError: If ``verbosity`` is unknown
    """
    try:
        level = LEVELS[verbosity]
    except KeyError:
        raise ValueError(f"Unknown verbosity: {verbosity!r}") from None
    verbose = verbosity == "verbose"

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_path=verbose,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    # force=True: every CLI invocation in one process re-applies its own level
    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)

    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger namespaced under ``cochange_insight``."""
    if name is None:
        return logging.getLogger(_ROOT)
    if not name.startswith(_ROOT):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)
