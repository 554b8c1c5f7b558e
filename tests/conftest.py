"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import tempfile
from pathlib import Path

import pytest

from ledgermatch.core import config as config_module
from ledgermatch.matching.retailers import AMAZON, WALMART

from tests.fixtures.builders import RecordingUpdater, make_order, make_transaction


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def amazon_profile():
    return AMAZON


@pytest.fixture
def walmart_profile():
    return WALMART


@pytest.fixture
def headphones_transaction():
    """Amazon purchase that exactly matches headphones_order."""
    return make_transaction()


@pytest.fixture
def headphones_order():
    return make_order()


@pytest.fixture
def recording_updater():
    return RecordingUpdater()


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Isolate every test from real data and from cached configuration."""
    monkeypatch.setenv("LEDGERMATCH_ENV", "test")
    monkeypatch.setenv("LEDGERMATCH_DATA_DIR", str(tmp_path / "ledgermatch_data"))
    monkeypatch.setenv("YNAB_BUDGET_ID", "test-budget")
    for name in (
        "LEDGERMATCH_CONFIG",
        "LEDGERMATCH_PROCESSED_FILE",
        "LEDGERMATCH_RETAILERS",
        "LEDGERMATCH_RETAILERS_FILE",
        "LEDGERMATCH_MEMO_THRESHOLD",
        "LEDGERMATCH_DRY_RUN",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_config", None)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for currency handling and precision")
    config.addinivalue_line("markers", "matching: Tests for the matching engine")
    config.addinivalue_line("markers", "ynab: Tests for YNAB integration")
    config.addinivalue_line("markers", "slow: Long-running tests")
    config.addinivalue_line("markers", "performance: Tests with realistic data volumes")
