"""Package logger setup.

Modules log through ``get_logger(__name__)`` and never touch handlers; the
package logger only carries a NullHandler until an application opts in with
``configure_logging()``, which attaches one stderr handler to the
``nicetimechart`` logger and leaves the root logger alone.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "nicetimechart"
LOG_LEVEL_ENV_VAR = "NICETIMECHART_LOG_LEVEL"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """Send nicetimechart records to stderr.

    Args:
        level: Level name or number; falls back to ``$NICETIMECHART_LOG_LEVEL``
            and then INFO. Unknown names mean INFO.
        fmt: Record format, DEFAULT_FMT if omitted.
        datefmt: Timestamp format, DEFAULT_DATEFMT if omitted.
        force: Replace the handlers already on the package logger. Without
            it a second call is a no-op once a stderr handler exists.
    """
    resolved = _resolve_level(level)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(resolved)

    if force:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
    elif _has_stderr_handler(logger):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FMT, datefmt or DEFAULT_DATEFMT))
    logger.addHandler(handler)


def _resolve_level(level: Optional[Union[str, int]]) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR) or "INFO"
    if isinstance(level, int):
        return level
    value = getattr(logging, level.strip().upper(), None)
    return value if isinstance(value, int) else logging.INFO


def _has_stderr_handler(logger: logging.Logger) -> bool:
    return any(isinstance(h, logging.StreamHandler) and h.stream is sys.stderr for h in logger.handlers)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Named logger; the package logger when ``name`` is None."""
    if name is None:
        name = ROOT_LOGGER_NAME
    return logging.getLogger(name)
