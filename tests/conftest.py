"""Pytest configuration for spectr tests."""

import logging

import pytest

from spectr.constants import LOG_LEVEL_ENV


@pytest.fixture(autouse=True)
def _isolate_spectr_logging(monkeypatch):
    """setup_logging mutates the environment and the spectr logger; undo both per test."""
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    yield
    logger = logging.getLogger("spectr")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def pytest_collection_modifyitems(config, items):
    """Set per-marker timeouts: unit=1s, integration=5s."""
    for item in items:
        if "unit" in item.keywords:
            item.add_marker(pytest.mark.timeout(1))
        elif "integration" in item.keywords:
            item.add_marker(pytest.mark.timeout(5))
