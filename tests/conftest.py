"""
Pytest configuration and shared fixtures for tinychain tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Keeps TINYCHAIN_* environment variables out of every test
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

if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Drop TINYCHAIN_* variables so host settings never leak into tests."""
    for key in list(os.environ):
        if key.startswith("TINYCHAIN_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sample_records():
    """The four records of the end-to-end scenario, as raw bytes."""
    return [f"test data {i}".encode() for i in range(4)]


@pytest.fixture
def odd_records():
    """Seven records: odd counts at the leaf level and above."""
    return [f"record-{i}".encode() for i in range(7)]


@pytest.fixture
def records_file(tmp_path):
    """A records file with one record per line."""
    path = tmp_path / "records.txt"
    path.write_text("alpha\nbravo\ncharlie\n")
    return path
