"""
Pytest configuration and shared fixtures for capsule simulator tests.

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

if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from core.config.runtime import RuntimeConfig, SimulationConfig  # noqa: E402
from core.sim import CommitmentGenerator, CommitmentVerifier  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _clean_capsule_env(monkeypatch):
    """Keep CAPSULE_* variables from the developer's shell out of tests."""
    import os
    for name in list(os.environ):
        if name.startswith("CAPSULE_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sim_config():
    """Provide default simulation constants."""
    return SimulationConfig()


@pytest.fixture
def runtime_config():
    """Provide a default RuntimeConfig (no file, no env)."""
    return RuntimeConfig()


@pytest.fixture
def generator(sim_config):
    """Provide a CommitmentGenerator with default constants."""
    return CommitmentGenerator(sim_config)


@pytest.fixture
def verifier(sim_config):
    """Provide a CommitmentVerifier with default constants."""
    return CommitmentVerifier(sim_config)


@pytest.fixture
def client(runtime_config):
    """Provide a TestClient bound to an app built from the default config."""
    from fastapi.testclient import TestClient

    from api.app import create_app

    return TestClient(create_app(runtime_config))


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


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def flip_hex_char():
    """Helper that changes one hex character of a string at a position."""
    def _flip(value: str, position: int = 0) -> str:
        replacement = "0" if value[position] != "0" else "1"
        return value[:position] + replacement + value[position + 1:]
    return _flip
