"""
Logging for the pool filter wizard.

Everything logs under the ``poolwizard`` logger to stdout. The level comes from
``POOLWIZARD_LOG_LEVEL``, falling back to ``LOG_LEVEL`` and then INFO; DEBUG
adds a line per scored catalog item.
"""
import logging
import os
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "poolwizard"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level_from_env() -> str:
    return (os.getenv("POOLWIZARD_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO").upper()


def configure_logging(level: Optional[Union[str, int]] = None) -> logging.Logger:
    """
    Set up the package logger. Safe to call more than once.

    Args:
        level: Level name or number; read from the environment when omitted

    Returns:
        The ``poolwizard`` logger
    """
    if level is None:
        level = _level_from_env()
    elif isinstance(level, str):
        level = level.upper()

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
    for handler in root.handlers:
        handler.setLevel(level)

    # uvicorn configures the root logger too; keep wizard lines from printing twice
    root.propagate = False
    return root


logger = configure_logging()


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a child of the package logger.

    ``get_logger("matching.ranking")`` and ``get_logger(__name__)`` from inside
    ``poolwizard.matching.ranking`` return the same logger.
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logger
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
