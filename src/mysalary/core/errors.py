#!/usr/bin/env python3
"""
Ledger Error Taxonomy

Every failure the ledger core raises derives from LedgerError and carries a
stable ``code`` so outer layers can map it to a response without string matching:

- LedgerValidationError subclasses: rejected before any mutation (4xx)
- AlreadyPosted: double confirmation attempt (409)
- ConcurrentModification: lock contention, safe to retry (409)

Balance drift is deliberately absent here. Reconciliation reports it as a
finding (see ledger.reconciliation.BalanceMismatch) and never raises it.
"""


class LedgerError(Exception):
    """Base class for all ledger core errors."""

    code = "LedgerError"
    retryable = False

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "retryable": self.retryable}


class LedgerValidationError(LedgerError):
    """Input rejected before any state was touched."""

    code = "ValidationError"


class InvalidAmount(LedgerValidationError):
    code = "InvalidAmount"


class CategoryTypeMismatch(LedgerValidationError):
    code = "CategoryTypeMismatch"


class CategoryNotFound(LedgerValidationError):
    code = "CategoryNotFound"


class MissingTransferTarget(LedgerValidationError):
    code = "MissingTransferTarget"


class SameAccountTransfer(LedgerValidationError):
    code = "SameAccountTransfer"


class AccountNotFound(LedgerValidationError):
    code = "AccountNotFound"


class CurrencyMismatch(LedgerValidationError):
    code = "CurrencyMismatch"


class InvalidTransactionShape(LedgerValidationError):
    """Fields present or missing in a way the transaction type does not allow."""

    code = "InvalidTransactionShape"


class TransactionNotFound(LedgerValidationError):
    code = "TransactionNotFound"


class BudgetNotFound(LedgerValidationError):
    code = "BudgetNotFound"


class AlreadyPosted(LedgerError):
    """Confirmation requested for a transaction that is already posted."""

    code = "AlreadyPosted"


class ConcurrentModification(LedgerError):
    """Account locks could not be acquired in time; the caller may retry."""

    code = "ConcurrentModification"
    retryable = True
