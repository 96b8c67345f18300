"""
MySalary Ledger - Account Balances from a Transaction Log

Keeps per-account balances derived from an append-only log of income, expense
and transfer transactions, reconciles cached balances against that log, and
tracks budget progress over monthly, weekly and custom periods.

Domain Packages:
- core: Money, dates, data models, errors, configuration
- ledger: store, balance calculator, writer, confirmation, reconciliation
- budgets: budget progress aggregation
- analysis: account statements and net worth
- cli: operator command-line interface

Example Usage:
    from mysalary import LedgerService, LedgerStore

    service = LedgerService(LedgerStore())
    account = service.store.add_account(owner_id=1, name="Wallet", kind="cash", currency="USD")
    salary = service.store.add_category("income", "Salary")
    service.create_transaction(1, account.id, "1000", "income", category_id=salary.id)
    service.get_account_balance(account.id)  # Decimal("1000.00")
"""

__version__ = "0.3.0"
__author__ = "MySalary Maintainers"

from .core.config import Environment, get_config
from .core.errors import LedgerError
from .core.models import Account, Budget, Category, Transaction, TransactionStatus, TransactionType
from .core.money import Money
from .ledger.reconciliation import ReconciliationScope
from .ledger.service import LedgerService
from .ledger.store import LedgerStore

__all__ = [
    # Core models
    "Account",
    "Budget",
    "Category",
    "Money",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    # Ledger
    "LedgerError",
    "LedgerService",
    "LedgerStore",
    "ReconciliationScope",
    # Configuration
    "Environment",
    "get_config",
]
