"""Pytest configuration and fixtures."""

import json
import os
from pathlib import Path

import pytest

from util.cache import MemoryCache

# Set test environment variables before any imports that might use them
os.environ.setdefault("REDIS_SSL", "false")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("CACHE_BACKEND", "memory")
os.environ.setdefault("CWA_AUTH_KEY", "test-cwa-key")
os.environ.setdefault("GOOGLE_MAPS_API_KEY", "test-maps-key")

# Disable OpenTelemetry during tests to prevent connection errors to localhost:3000
os.environ.setdefault("OTEL_SDK_DISABLED", "true")

MOCKS_DIR = Path(__file__).parent / "mocks"


def load_mock(category: str, name: str) -> dict:
    """Load a mock JSON file from tests/mocks/{category}/{name}.json"""
    path = MOCKS_DIR / category / f"{name}.json"
    with open(path, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def memory_cache():
    """A process-local response cache."""
    return MemoryCache()


@pytest.fixture
def mock_data():
    """Loader for canned upstream API responses under tests/mocks."""
    return load_mock
