#!/usr/bin/env python3
"""
Integration tests for configuration module.

Tests environment-driven configuration loading and validation.
"""

from decimal import Decimal
from pathlib import Path

import pytest

from mysalary.core.config import (
    Config,
    Environment,
    get_config,
    get_data_dir,
    is_development,
    is_production,
    is_test,
    reload_config,
)


@pytest.mark.integration
class TestConfigLoading:
    """Test configuration loading and structure."""

    def test_config_loads_in_test_environment(self):
        """Test that config loads without errors under the test fixture."""
        config = get_config()

        assert config.environment == Environment.TEST
        assert is_test()
        assert not is_development()
        assert not is_production()

    def test_data_dir_from_environment(self, tmp_path):
        """Test MYSALARY_DATA_DIR is honored and created."""
        data_dir = get_data_dir()

        assert isinstance(data_dir, Path)
        assert data_dir == tmp_path / "mysalary_data"
        assert data_dir.exists()

    def test_ledger_files_live_in_data_dir(self):
        config = get_config()

        assert config.ledger.ledger_file == config.data_dir / "ledger.json"
        assert config.ledger.rates_file == config.data_dir / "rates.yaml"

    def test_defaults(self):
        """Test default settings."""
        config = get_config()

        assert config.ledger.default_currency == "USD"
        assert config.ledger.lock_timeout_seconds == 5.0
        assert config.reconciliation.tolerance == Decimal("0.01")
        assert config.reconciliation.tolerance_cents == 1
        assert config.reconciliation.interval_seconds == 0.0
        assert config.reconciliation.fix is False
        assert config.log_level == "INFO"

    def test_environment_overrides(self, monkeypatch):
        """Test every setting can be overridden from the environment."""
        monkeypatch.setenv("DEFAULT_CURRENCY", "eur")
        monkeypatch.setenv("LEDGER_LOCK_TIMEOUT", "2.5")
        monkeypatch.setenv("RECONCILE_TOLERANCE", "0.05")
        monkeypatch.setenv("RECONCILE_INTERVAL", "300")
        monkeypatch.setenv("RECONCILE_FIX", "true")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = reload_config()

        assert config.ledger.default_currency == "EUR"
        assert config.ledger.lock_timeout_seconds == 2.5
        assert config.reconciliation.tolerance_cents == 5
        assert config.reconciliation.interval_seconds == 300.0
        assert config.reconciliation.fix is True
        assert config.log_level == "DEBUG"

    def test_to_dict_is_displayable(self):
        data = get_config().to_dict()

        assert data["environment"] == "test"
        assert data["ledger"]["default_currency"] == "USD"
        assert data["reconciliation"]["tolerance"] == "0.01"
        assert isinstance(data["data_dir"], str)


@pytest.mark.integration
class TestConfigValidation:
    """Test validate() error reporting."""

    @pytest.mark.parametrize(
        "name,value,fragment",
        [
            ("DEFAULT_CURRENCY", "DOLLARS", "DEFAULT_CURRENCY"),
            ("LEDGER_LOCK_TIMEOUT", "0", "LEDGER_LOCK_TIMEOUT"),
            ("LEDGER_LOCK_TIMEOUT", "soon", "LEDGER_LOCK_TIMEOUT"),
            ("RECONCILE_TOLERANCE", "-0.01", "RECONCILE_TOLERANCE"),
            ("RECONCILE_TOLERANCE", "lots", "RECONCILE_TOLERANCE"),
            ("RECONCILE_INTERVAL", "-5", "RECONCILE_INTERVAL"),
            ("LOG_LEVEL", "CHATTY", "LOG_LEVEL"),
        ],
    )
    def test_invalid_values_are_reported(self, monkeypatch, name, value, fragment):
        monkeypatch.setenv(name, value)

        errors = Config.from_environment().validate()
        assert any(fragment in error for error in errors)

        with pytest.raises(ValueError, match="Configuration validation failed"):
            reload_config()

    def test_valid_configuration_has_no_errors(self):
        assert Config.from_environment().validate() == []
