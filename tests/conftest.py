"""
Global pytest configuration and fixtures for the application_shell test suite.

This file provides:
1. Concrete application doubles for exercising the abstract shell
2. Shared registry, input and dispatcher fixtures
3. Root logger isolation for tests that reconfigure logging
4. Automatic unit/integration marking by file location
"""

import logging
from typing import Generator
from unittest.mock import MagicMock

import pytest

from application_shell import EventDispatcher, Input, Registry
from fixtures.applications import DummyApplication


@pytest.fixture
def app() -> DummyApplication:
    """Application built with default collaborators."""
    return DummyApplication()


@pytest.fixture
def registry() -> Registry:
    return Registry(
        {
            "database": {"host": "localhost", "port": 5432},
            "debug": False,
            "name": "demo",
        }
    )


@pytest.fixture
def app_input() -> Input:
    return Input({"task": "sync", "limit": "25", "verbose": "yes"})


@pytest.fixture
def dispatcher() -> EventDispatcher:
    return EventDispatcher()


@pytest.fixture
def mock_dispatcher():
    """Mock satisfying the Dispatcher protocol."""
    dispatcher = MagicMock()
    dispatcher.dispatch = MagicMock(side_effect=lambda name, event=None: event)
    return dispatcher


@pytest.fixture
def isolated_root_logger() -> Generator[logging.Logger, None, None]:
    """Restore root logger handlers and level after a test reconfigures logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def pytest_configure(config):
    """Register the markers used across the suite."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Tests spanning several components")


def pytest_collection_modifyitems(config, items):
    """Mark tests based on their file location."""
    for item in items:
        if "tests/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
