"""
Shared fixtures for the solver test suite.
"""

import logging

import pytest

from component_6_logging_config import SolverLogFormatter
from solver_config import reset_config


@pytest.fixture(autouse=True)
def isolated_logging_and_config():
    """Drop handlers installed by setup_logging and forget cached config."""
    root = logging.getLogger()
    level = root.level
    reset_config()
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, SolverLogFormatter):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    reset_config()
