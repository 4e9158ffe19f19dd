"""Shared pytest fixtures for the shapeslicer test suite."""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging (e.g. via main()) after each test."""
    yield
    logger = logging.getLogger("shapeslicer")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
