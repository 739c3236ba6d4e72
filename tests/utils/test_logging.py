"""Tests for nicetimechart logging helpers."""

from __future__ import annotations

import logging
import sys

import pytest

import nicetimechart
from nicetimechart.utils.logging import LOG_LEVEL_ENV_VAR, ROOT_LOGGER_NAME, configure_logging, get_logger


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    saved_handlers = logger.handlers[:]
    saved_level = logger.level
    yield logger
    for h in logger.handlers[:]:
        logger.removeHandler(h)
    for h in saved_handlers:
        logger.addHandler(h)
    logger.setLevel(saved_level)


def test_package_logger_has_null_handler() -> None:
    assert nicetimechart.__version__
    assert any(isinstance(h, logging.NullHandler) for h in logging.getLogger(ROOT_LOGGER_NAME).handlers)


def test_get_logger_defaults_to_package_logger() -> None:
    assert get_logger().name == ROOT_LOGGER_NAME
    assert get_logger("nicetimechart.core.binning").parent is not None


def test_configure_logging_adds_one_stderr_handler(clean_logger: logging.Logger) -> None:
    configure_logging("DEBUG", force=True)
    configure_logging("DEBUG")
    stderr_handlers = [
        h for h in clean_logger.handlers if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
    ]
    assert len(stderr_handlers) == 1
    assert clean_logger.level == logging.DEBUG


def test_configure_logging_reads_env(clean_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "WARNING")
    configure_logging(force=True)
    assert clean_logger.level == logging.WARNING


def test_configure_logging_leaves_root_alone(clean_logger: logging.Logger) -> None:
    root_handlers = logging.getLogger().handlers[:]
    configure_logging("INFO", force=True)
    assert logging.getLogger().handlers == root_handlers


@pytest.mark.parametrize(
    "level, expected",
    [("debug", logging.DEBUG), (" Error ", logging.ERROR), ("verbose", logging.INFO), (5, 5)],
)
def test_configure_logging_level_names(clean_logger: logging.Logger, level, expected: int) -> None:
    configure_logging(level, force=True)
    assert clean_logger.level == expected
