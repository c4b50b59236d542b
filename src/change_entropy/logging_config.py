"""
Logging for change-entropy runs.

Handlers are attached to the ``change_entropy`` logger only, so libraries
logging through the root logger stay quiet and repeated setup (one per CLI
invocation in tests) replaces rather than stacks handlers. Records go to
stderr through rich so they never mix with the results file.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "change_entropy"

_FILE_FORMAT = "%(asctime)s %(levelname)-7s [%(repository)s] %(name)s: %(message)s"


class _RunContextFilter(logging.Filter):
    """Stamp every record with the repository being analysed."""

    def __init__(self, repository: str):
        super().__init__()
        self.repository = repository

    def filter(self, record: logging.LogRecord) -> bool:
        record.repository = self.repository
        return True


def resolve_level(verbose: bool = False, quiet: bool = False) -> int:
    """ERROR when quiet (it wins over verbose), DEBUG when verbose, else INFO.

    INFO is the default so that commit and period counts and per-period
    entropy are shown; DEBUG adds every commit, file and refactoring.
    """
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.INFO


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[str] = None,
    repository: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the package logger for one run.

    Args:
        verbose: Log per-commit, per-file and per-refactoring detail
        quiet: Only log errors
        log_file: Also append plain-text records to this file
        repository: Repository path written into each log file record

    Returns:
        The ``change_entropy`` logger
    """
    level = resolve_level(verbose, quiet)
    logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            level=level,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_path=verbose,
        )
    )

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.addFilter(_RunContextFilter(str(Path(repository)) if repository else "-"))
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a module, always inside the ``change_entropy`` namespace."""
    if name is None:
        return logging.getLogger(PACKAGE_LOGGER)
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
