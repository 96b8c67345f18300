"""
Core Utilities Package

Primitives shared by the ledger, budgets and analysis packages.

This package provides:
- Money and FinancialDate value types with integer-cent arithmetic
- Closed enums and record types for accounts, categories, transactions and budgets
- The ledger error taxonomy
- Configuration management for environment-specific settings
"""

from .config import (
    Config,
    Environment,
    get_config,
    get_data_dir,
    is_development,
    is_production,
    is_test,
    reload_config,
)
from .currency import (
    RateLookup,
    RateNotAvailable,
    StaticRates,
    cents_to_decimal,
    decimal_to_cents,
    format_cents,
    parse_amount_to_cents,
)
from .dates import FinancialDate
from .errors import (
    AccountNotFound,
    AlreadyPosted,
    BudgetNotFound,
    CategoryNotFound,
    CategoryTypeMismatch,
    ConcurrentModification,
    CurrencyMismatch,
    InvalidAmount,
    InvalidTransactionShape,
    LedgerError,
    LedgerValidationError,
    MissingTransferTarget,
    SameAccountTransfer,
    TransactionNotFound,
)
from .models import (
    Account,
    AccountKind,
    Budget,
    BudgetStatus,
    Category,
    CategoryType,
    ConfirmMode,
    PeriodKind,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from .money import Money

__all__ = [
    # Data models
    "Account",
    "AccountKind",
    "Budget",
    "BudgetStatus",
    "Category",
    "CategoryType",
    "ConfirmMode",
    "PeriodKind",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    # Errors
    "AccountNotFound",
    "AlreadyPosted",
    "BudgetNotFound",
    "CategoryNotFound",
    "CategoryTypeMismatch",
    "ConcurrentModification",
    "CurrencyMismatch",
    "InvalidAmount",
    "InvalidTransactionShape",
    "LedgerError",
    "LedgerValidationError",
    "MissingTransferTarget",
    "SameAccountTransfer",
    "TransactionNotFound",
    # Configuration
    "Config",
    "Environment",
    "get_config",
    "get_data_dir",
    "is_development",
    "is_production",
    "is_test",
    "reload_config",
    # Currency utilities
    "FinancialDate",
    "Money",
    "RateLookup",
    "RateNotAvailable",
    "StaticRates",
    "cents_to_decimal",
    "decimal_to_cents",
    "format_cents",
    "parse_amount_to_cents",
]
