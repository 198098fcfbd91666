"""
Pytest configuration and shared fixtures for hashtree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Isolates every test from HASHTREE_* environment variables and the
   process-wide default config
3. Provides commonly-used fixtures via pytest's autodiscovery
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

from hashtree.config.runtime import RuntimeConfig, set_default_config  # noqa: E402
from hashtree.crypto.providers import Blake2bProvider, Keccak256Provider  # noqa: E402

from fixtures import make_items  # noqa: E402


_ENV_VARS = [
    "HASHTREE_HASH",
    "HASHTREE_SALT",
    "HASHTREE_PARALLEL_THRESHOLD",
    "HASHTREE_MAX_WORKERS",
    "HASHTREE_LOG_LEVEL",
    "HASHTREE_LOG_FILE",
]


# =============================================================================
# Isolation
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Every test starts from pure defaults, whatever the shell exported."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_default_config(RuntimeConfig())
    yield
    set_default_config(None)


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def blake2b():
    """Provide the default BLAKE2b-256 provider."""
    return Blake2bProvider()


@pytest.fixture
def keccak256():
    """Provide the legacy Keccak-256 provider."""
    return Keccak256Provider()


@pytest.fixture
def seven_items():
    """Seven distinct items (not a power of two, so padding is exercised)."""
    return make_items(7)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
