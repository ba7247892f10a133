"""Pytest configuration and fixtures for schemaward tests."""

import logging
import os
import tempfile

import pytest

# Must be set before any schemaward module initializes the root logger
os.environ.setdefault(
    "SCHEMAWARD_LOG_DIR", tempfile.mkdtemp(prefix="schemaward-test-logs-")
)


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("schemaward"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value
