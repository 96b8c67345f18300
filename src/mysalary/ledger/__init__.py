"""
Ledger Package

Account balances derived from an append-only transaction log.

This package provides:
- LedgerStore / JsonLedgerStore: records, per-account locks and atomic units
- Balance calculator: the authoritative fold over posted transactions
- TransactionWriter and ConfirmationService: the only balance-moving write paths
- ReconciliationValidator: drift detection and opt-in correction

The LedgerService facade lives in ``mysalary.ledger.service``.
"""

from .calculator import BalanceStep, balance_delta, balance_trail, compute_balance, posted_delta, posted_deltas
from .confirmation import ConfirmationService
from .datastore import JsonLedgerStore
from .reconciliation import (
    BalanceCorrection,
    BalanceMismatch,
    OrphanedTransaction,
    ReconciliationReport,
    ReconciliationScheduler,
    ReconciliationScope,
    ReconciliationValidator,
)
from .store import LedgerState, LedgerStore, LedgerUnit
from .writer import NewTransaction, TransactionWriter, parse_amount

__all__ = [
    "BalanceCorrection",
    "BalanceMismatch",
    "BalanceStep",
    "ConfirmationService",
    "JsonLedgerStore",
    "LedgerState",
    "LedgerStore",
    "LedgerUnit",
    "NewTransaction",
    "OrphanedTransaction",
    "ReconciliationReport",
    "ReconciliationScheduler",
    "ReconciliationScope",
    "ReconciliationValidator",
    "TransactionWriter",
    "balance_delta",
    "balance_trail",
    "compute_balance",
    "parse_amount",
    "posted_delta",
    "posted_deltas",
]
