"""Tests for package logging setup."""

from __future__ import annotations

import logging

import pytest

from cacheimport.core.logger_setup import configure_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("cacheimport")
    saved_handlers, saved_level = list(logger.handlers), logger.level
    logger.handlers.clear()
    yield logger
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)


def test_adds_single_handler_when_called_twice(package_logger):
    configure_logging("INFO")
    configure_logging("DEBUG")
    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.DEBUG


def test_unknown_level_falls_back_to_info(package_logger):
    configure_logging("chatty")
    assert package_logger.level == logging.INFO
