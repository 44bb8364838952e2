"""
Ragbot - Logging
=================
Every module logger hangs off one package logger, ``ragbot``, which owns
the only handler.  Levels are therefore set in one place and a module
never prints the same record twice.

Level resolution (first match wins):
  1. ``settings.LOG_LEVEL`` when set (``DEBUG`` / ``INFO`` / ...)
  2. ``settings.ENV``: ``"dev"`` → DEBUG, ``"prod"`` → WARNING

``set_log_level()`` changes it at runtime (the ``ask`` CLI exposes it as
``--log-level``).

Usage:
    from ragbot.src.utils.logger import get_logger
    logger = get_logger(__name__)
    logger.info("[RAG] Something happened")
"""

import logging
import sys

from ragbot.config.settings import settings

ROOT_LOGGER_NAME = "ragbot"

_ENV_LEVEL_MAP = {
    "dev": logging.DEBUG,
    "prod": logging.WARNING,
}

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(log_level: str | None = None, env: str | None = None) -> int:
    """Map the configured ``LOG_LEVEL`` / ``ENV`` pair to a ``logging`` level."""
    log_level = settings.LOG_LEVEL if log_level is None else log_level
    if log_level:
        return logging.getLevelName(log_level.upper())
    return _ENV_LEVEL_MAP.get(settings.ENV if env is None else env, logging.INFO)


def _root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
        root.addHandler(handler)
        root.setLevel(resolve_level())
        root.propagate = False
    return root


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Return the logger for *name*, nested under the ``ragbot`` package logger.

    Args:
        name:  Typically ``__name__``.  Names outside the package
               (``__main__`` for scripts) are prefixed with ``ragbot.``.
        level: Optional per-logger override; otherwise the package
               level applies.
    """
    root = _root_logger()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = root if name == ROOT_LOGGER_NAME else logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger


def set_log_level(level: int | str) -> None:
    """Change the level of every Ragbot logger that has no override."""
    if isinstance(level, str):
        level = resolve_level(log_level=level)
    _root_logger().setLevel(level)
