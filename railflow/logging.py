"""Logging for railflow.

Modules log through ``get_logger(__name__)``, a child of the ``railflow``
logger. That logger owns one handler writing to stderr, so command output on
stdout stays clean. Its level and format come from ``FLOW_CONFIG.log_level``
and ``FLOW_CONFIG.log_format`` unless given explicitly; the CLI maps
``--verbose``/``--quiet`` onto it through ``verbosity_level``.
"""

import logging
import sys
from typing import Optional

from railflow.config import FLOW_CONFIG

PACKAGE_LOGGER = "railflow"

# Handler installed by setup_root_logger; None until the first call
_handler: Optional[logging.Handler] = None


def setup_root_logger(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """Install the package handler and return the ``railflow`` logger.

    Only the first call configures anything; later calls return the logger
    untouched until ``reset_logging`` runs.

    Args:
        level: Logger level; defaults to ``FLOW_CONFIG.log_level``.
        format_string: Record format; defaults to ``FLOW_CONFIG.log_format``.
        handler: Handler to install instead of a stderr stream handler.
    """
    global _handler

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        return package_logger

    _handler = handler if handler is not None else logging.StreamHandler(sys.stderr)
    _handler.setFormatter(
        logging.Formatter(format_string or FLOW_CONFIG.log_format)
    )
    package_logger.addHandler(_handler)
    package_logger.setLevel(FLOW_CONFIG.log_level if level is None else level)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a railflow module, typically ``get_logger(__name__)``."""
    setup_root_logger()
    return logging.getLogger(name)


def set_global_log_level(level: int) -> None:
    """Set the level every railflow logger inherits."""
    setup_root_logger().setLevel(level)


def verbosity_level(verbose: bool = False, quiet: bool = False) -> int:
    """Log level for the CLI's ``--verbose`` and ``--quiet`` switches."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return FLOW_CONFIG.log_level


def reset_logging() -> None:
    """Remove the package handler and level so the next setup starts fresh."""
    global _handler

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        package_logger.removeHandler(_handler)
        _handler = None
    package_logger.setLevel(logging.NOTSET)
