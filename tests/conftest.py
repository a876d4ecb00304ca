"""
Pytest configuration and shared fixtures for the package lifecycle tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_package = _common.make_package
make_function = _common.make_function
make_manager = _common.make_manager
FakeStorage = _common.FakeStorage

from controller import InMemoryResourceClient


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep FISSION_* variables from the developer's shell out of tests."""
    for var in [
        "FISSION_URL",
        "FISSION_NAMESPACE",
        "FISSION_HTTP_TIMEOUT",
        "FISSION_HTTP_PROXY",
        "FISSION_LOG_LEVEL",
        "FISSION_LOG_FILE",
    ]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def store():
    """Empty in-memory resource store."""
    return InMemoryResourceClient()


@pytest.fixture
def storage():
    """Fake storage service that records uploads."""
    return FakeStorage()


@pytest.fixture
def manager(tmp_path, store, storage):
    """PackageManager over the in-memory store and fake storage."""
    return make_manager(tmp_path / "downloads", storage=storage, client=store)


@pytest.fixture
def write_file(tmp_path):
    """Write ``size`` bytes (or given content) to a file under tmp_path."""
    def _write(name: str, content: bytes | None = None, size: int | None = None) -> Path:
        path = tmp_path / name
        if content is None:
            content = bytes(i % 251 for i in range(size or 0))
        path.write_bytes(content)
        return path
    return _write


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
