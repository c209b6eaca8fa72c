"""Test configuration."""

import os
from pathlib import Path
from typing import List

import pytest
from pytest import Config

from tntsearch.core.logging import configure_logging

fixture = pytest.fixture

# Keep the suite away from a developer's real database.
os.environ["TESTING"] = "true"


@fixture(scope="session")
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


pytest_plugins: List[str] = [
    "tests.fixtures.db",
    "tests.fixtures.api",
]


def pytest_configure(config: Config) -> None:
    """Configure pytest.

    Args:
        config: Pytest configuration object
    """
    # Configure logging for test environment
    configure_logging(testing=True)
    config.addinivalue_line("markers", "integration: mark test as an integration test")
