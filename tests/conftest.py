"""
Pytest configuration and shared fixtures for entitlement engine tests.

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

# Import fixture modules
_common = importlib.import_module("fixtures.common")
_chain = importlib.import_module("fixtures.chain")

# Extract factory functions
make_record = _common.make_record
make_store = _common.make_store
make_tree = _common.make_tree
FakeChain = _chain.FakeChain


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def store():
    """Provide an empty ProofStore over an in-memory backend."""
    return make_store()


@pytest.fixture
def pair_tree():
    """Provide the two-recipient tree: [(0xAAA.., 1000), (0xBBB.., 500)]."""
    return make_tree()


@pytest.fixture
def pair_record():
    """Provide the two-recipient record without a contract alias."""
    return make_record()


@pytest.fixture
def chain():
    """Provide a FakeChain where every account is eligible by default."""
    return FakeChain()


@pytest.fixture(autouse=True)
def _reset_default_config():
    """Keep the process-wide RuntimeConfig from leaking between tests."""
    from core.config.runtime import set_default_config
    set_default_config(None)
    yield
    set_default_config(None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
