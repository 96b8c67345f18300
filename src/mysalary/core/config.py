#!/usr/bin/env python3
"""
Configuration Management for the MySalary Ledger

Handles environment-based configuration with secure defaults and validation.
Supports multiple environments (development, test, production).
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class LedgerConfig:
    """Ledger store settings."""

    ledger_file: Path
    rates_file: Path
    default_currency: str = "USD"
    lock_timeout_seconds: float = 5.0


@dataclass
class ReconciliationConfig:
    """Balance reconciliation settings."""

    tolerance: Decimal = Decimal("0.01")
    interval_seconds: float = 0.0  # 0 disables the periodic scheduler
    fix: bool = False

    @property
    def tolerance_cents(self) -> int:
        return int(self.tolerance * 100)


@dataclass
class Config:
    """
    Main configuration class for the ledger application.

    Loads configuration from environment variables with secure defaults
    and validation for each environment type.
    """

    environment: Environment

    data_dir: Path

    ledger: LedgerConfig
    reconciliation: ReconciliationConfig

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("MYSALARY_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_mysalary"
            data_dir = Path(os.getenv("MYSALARY_DATA_DIR", str(default_test_dir)))
        else:
            data_dir = Path(os.getenv("MYSALARY_DATA_DIR", "./data")).expanduser().resolve()

        data_dir.mkdir(parents=True, exist_ok=True)

        ledger = LedgerConfig(
            ledger_file=data_dir / "ledger.json",
            rates_file=data_dir / "rates.yaml",
            default_currency=os.getenv("DEFAULT_CURRENCY", "USD").strip().upper(),
            lock_timeout_seconds=_parse_float(os.getenv("LEDGER_LOCK_TIMEOUT", "5.0")),
        )

        reconciliation = ReconciliationConfig(
            tolerance=_parse_decimal(os.getenv("RECONCILE_TOLERANCE", "0.01")),
            interval_seconds=_parse_float(os.getenv("RECONCILE_INTERVAL", "0")),
            fix=os.getenv("RECONCILE_FIX", "false").lower() == "true",
        )

        return cls(
            environment=env,
            data_dir=data_dir,
            ledger=ledger,
            reconciliation=reconciliation,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.data_dir.exists():
            errors.append(f"data_dir does not exist: {self.data_dir}")

        currency = self.ledger.default_currency
        if len(currency) != 3 or not currency.isalpha():
            errors.append(f"DEFAULT_CURRENCY must be a 3-letter code, got {currency!r}")

        if not self.ledger.lock_timeout_seconds > 0:
            errors.append("LEDGER_LOCK_TIMEOUT must be positive")
        tolerance = self.reconciliation.tolerance
        if tolerance.is_nan() or tolerance < 0:
            errors.append("RECONCILE_TOLERANCE must be non-negative")
        if not self.reconciliation.interval_seconds >= 0:
            errors.append("RECONCILE_INTERVAL must be non-negative")

        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"Unknown LOG_LEVEL: {self.log_level}")

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a display dictionary."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if hasattr(field_value, "__dict__") and not isinstance(field_value, Enum):
                result[field_name] = {name: _display(value) for name, value in field_value.__dict__.items()}
            else:
                result[field_name] = _display(field_value)

        return result


def _display(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    return value


def _parse_float(value: str) -> float:
    """Parse a float setting; invalid values become NaN so validate() reports them."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def _parse_decimal(value: str) -> Decimal:
    try:
        return Decimal(value.strip())
    except (AttributeError, InvalidOperation):
        return Decimal("NaN")


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_environment()

        errors = _config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        _config.setup_logging()

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()


def get_data_dir() -> Path:
    """Get the data directory path."""
    return get_config().data_dir


def is_development() -> bool:
    return get_config().environment == Environment.DEVELOPMENT


def is_test() -> bool:
    return get_config().environment == Environment.TEST


def is_production() -> bool:
    return get_config().environment == Environment.PRODUCTION
