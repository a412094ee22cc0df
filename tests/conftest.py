"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from app.main import create_app
from app.config import Settings
from app.calculations.categorization import CategorizationEngine


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def settings():
    """Settings isolated from any local env file."""
    return Settings(_env_file=None)


@pytest.fixture
def client(settings):
    """Create test client with a fresh application."""
    return TestClient(create_app(settings))


@pytest.fixture
def engine():
    """Fresh categorization engine."""
    return CategorizationEngine()
