"""
Pytest configuration and shared fixtures for arbor tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import os
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

make_blocks = _common.make_blocks
make_tree = _common.make_tree


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def four_blocks():
    """Provide the blocks [0x00]..[0x03]."""
    return make_blocks(4)


@pytest.fixture
def eight_blocks():
    """Provide the blocks [0x00]..[0x07]."""
    return make_blocks(8)


@pytest.fixture
def four_leaf_tree(four_blocks):
    """Provide a tree over [0x00]..[0x03]."""
    return make_tree(len(four_blocks))


@pytest.fixture
def eight_leaf_tree(eight_blocks):
    """Provide a tree over [0x00]..[0x07]."""
    return make_tree(len(eight_blocks))


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Run in an empty directory with no ARBOR_* variables or home config."""
    for key in list(os.environ):
        if key.startswith("ARBOR_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


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
