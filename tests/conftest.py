"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from mysalary.core import config as config_module
from mysalary.core.config import reload_config
from mysalary.ledger.service import LedgerService
from mysalary.ledger.store import LedgerStore
from tests.fixtures.ledger_data import FixedClock, seed_household

# Friday, mid-month
NOW = datetime(2025, 3, 14, 10, 30)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def clock():
    """Deterministic clock pinned to NOW."""
    return FixedClock(NOW)


@pytest.fixture
def store(clock):
    """Empty in-memory ledger store."""
    return LedgerStore(lock_timeout=1.0, clock=clock)


@pytest.fixture
def household(store):
    """Store seeded with two owners' accounts and categories."""
    return seed_household(store)


@pytest.fixture
def service(store, household):
    """Ledger service over the seeded store."""
    return LedgerService(store)


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables."""
    # Ensure tests don't use real ledger data
    monkeypatch.setenv("MYSALARY_ENV", "test")
    monkeypatch.setenv("MYSALARY_DATA_DIR", str(tmp_path / "mysalary_data"))
    for name in (
        "DEFAULT_CURRENCY",
        "LEDGER_LOCK_TIMEOUT",
        "RECONCILE_TOLERANCE",
        "RECONCILE_INTERVAL",
        "RECONCILE_FIX",
        "LOG_LEVEL",
        "DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)

    reload_config()
    yield
    config_module._config = None


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for currency handling and precision")
    config.addinivalue_line("markers", "ledger: Tests for balances, writes and confirmation")
    config.addinivalue_line("markers", "budget: Tests for budget progress")
    config.addinivalue_line("markers", "reconciliation: Tests for balance reconciliation")
    config.addinivalue_line("markers", "slow: Tests that take significant time to run")
