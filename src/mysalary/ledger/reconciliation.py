#!/usr/bin/env python3
"""
Reconciliation Validator

Recomputes balances from the transaction log and compares them with the cached
balances. Drift is reported as a finding, never raised. Corrections happen only
when ``fix=True`` is requested, and each one is made while holding the same
account lock the writers use, after recomputing under that lock.

Usage:
    validator = ReconciliationValidator(store)
    report = validator.validate(ReconciliationScope.for_owner(7), fix=False)
    for mismatch in report.mismatches:
        print(mismatch.account_id, mismatch.delta)
"""

import logging
import threading
from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar

from ..core.models import Account, Transaction
from ..core.money import Money
from .calculator import compute_balance
from .store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationScope:
    """Which accounts to check: all, one owner's, or an explicit set."""

    owner_id: int | None = None
    account_ids: frozenset[int] | None = None

    @classmethod
    def all(cls) -> "ReconciliationScope":
        return cls()

    @classmethod
    def for_owner(cls, owner_id: int) -> "ReconciliationScope":
        return cls(owner_id=owner_id)

    @classmethod
    def for_accounts(cls, account_ids: Iterable[int]) -> "ReconciliationScope":
        return cls(account_ids=frozenset(account_ids))

    def includes(self, account: Account) -> bool:
        if self.owner_id is not None and account.owner_id != self.owner_id:
            return False
        return self.account_ids is None or account.id in self.account_ids

    def includes_orphan(self, transaction: Transaction, missing_account_id: int) -> bool:
        if self.owner_id is not None and transaction.owner_id != self.owner_id:
            return False
        return self.account_ids is None or missing_account_id in self.account_ids

    def describe(self) -> str:
        if self.account_ids is not None:
            return f"accounts {sorted(self.account_ids)}"
        if self.owner_id is not None:
            return f"owner {self.owner_id}"
        return "all accounts"


@dataclass(frozen=True)
class BalanceMismatch:
    """Cached balance differs from the recomputed one by more than the tolerance."""

    code: ClassVar[str] = "BalanceMismatchDetected"

    account_id: int
    owner_id: int
    currency: str
    cached: Money
    computed: Money
    posted_count: int
    scheduled_count: int

    @property
    def delta(self) -> Money:
        """Correction that would bring the cached balance to the computed one."""
        return self.computed - self.cached

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "account_id": self.account_id,
            "owner_id": self.owner_id,
            "currency": self.currency,
            "cached": str(self.cached.to_decimal()),
            "computed": str(self.computed.to_decimal()),
            "delta": str(self.delta.to_decimal()),
            "posted_transactions": self.posted_count,
            "scheduled_transactions": self.scheduled_count,
        }


@dataclass(frozen=True)
class BalanceCorrection:
    account_id: int
    previous: Money
    corrected: Money

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "previous": str(self.previous.to_decimal()),
            "corrected": str(self.corrected.to_decimal()),
        }


@dataclass(frozen=True)
class OrphanedTransaction:
    """Transaction referencing an account id with no account record."""

    transaction_id: int
    owner_id: int
    missing_account_id: int
    role: str  # "source" or "target"

    def to_dict(self) -> dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "owner_id": self.owner_id,
            "missing_account_id": self.missing_account_id,
            "role": self.role,
        }


@dataclass
class ReconciliationReport:
    """Findings of one reconciliation run."""

    scope: ReconciliationScope
    fix: bool
    started_at: datetime
    accounts_checked: int = 0
    mismatches: list[BalanceMismatch] = field(default_factory=list)
    corrections: list[BalanceCorrection] = field(default_factory=list)
    orphans: list[OrphanedTransaction] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.mismatches and not self.orphans

    @property
    def total_discrepancy(self) -> Money:
        return sum((m.delta.abs() for m in self.mismatches), Money.zero())

    def to_dict(self) -> dict[str, Any]:
        return {
            "scope": self.scope.describe(),
            "mode": "fix" if self.fix else "report",
            "started_at": self.started_at.isoformat(),
            "accounts_checked": self.accounts_checked,
            "accounts_mismatched": len(self.mismatches),
            "total_discrepancy": str(self.total_discrepancy.to_decimal()),
            "mismatches": [m.to_dict() for m in self.mismatches],
            "corrections": [c.to_dict() for c in self.corrections],
            "orphaned_transactions": [o.to_dict() for o in self.orphans],
        }

    def summary_text(self) -> str:
        text = (
            f"{self.accounts_checked} accounts checked ({self.scope.describe()}), "
            f"{len(self.mismatches)} mismatched, total discrepancy {self.total_discrepancy}"
        )
        if self.fix:
            text += f", {len(self.corrections)} corrected"
        if self.orphans:
            text += f", {len(self.orphans)} orphaned transactions"
        return text


class ReconciliationValidator:
    """Compares cached balances with the transaction log and optionally corrects them."""

    def __init__(self, store: LedgerStore, tolerance: Decimal = Decimal("0.01"), clock=None):
        self.store = store
        self.tolerance_cents = int(Decimal(tolerance) * 100)
        self.clock = clock or store.clock

    def validate(self, scope: ReconciliationScope | None = None, fix: bool = False) -> ReconciliationReport:
        """
        Check every account in scope.

        Args:
            scope: Accounts to check (default: all)
            fix: Overwrite mismatched cached balances with the recomputed value

        Returns:
            ReconciliationReport with mismatches, corrections and orphans
        """
        scope = scope or ReconciliationScope.all()
        report = ReconciliationReport(scope=scope, fix=fix, started_at=self.clock())
        state = self.store.snapshot()

        by_account: dict[int, list[Transaction]] = defaultdict(list)
        for transaction in state.transactions.values():
            for account_id in transaction.account_ids:
                by_account[account_id].append(transaction)

        accounts = sorted((a for a in state.accounts.values() if scope.includes(a)), key=lambda a: a.id)
        for account in accounts:
            report.accounts_checked += 1
            related = by_account.get(account.id, [])
            computed = compute_balance(account.id, related)
            if not self._drifted(account.balance, computed):
                continue

            posted = sum(1 for t in related if t.is_posted)
            mismatch = BalanceMismatch(
                account_id=account.id,
                owner_id=account.owner_id,
                currency=account.currency,
                cached=account.balance,
                computed=computed,
                posted_count=posted,
                scheduled_count=len(related) - posted,
            )
            report.mismatches.append(mismatch)
            logger.warning(
                f"Balance mismatch on account {account.id}: cached {account.balance}, "
                f"computed {computed} {account.currency} (delta {mismatch.delta})"
            )

        for transaction in sorted(state.transactions.values(), key=lambda t: t.id):
            for role, account_id in (("source", transaction.source_account_id), ("target", transaction.target_account_id)):
                if account_id is None or account_id in state.accounts:
                    continue
                if not scope.includes_orphan(transaction, account_id):
                    continue
                report.orphans.append(
                    OrphanedTransaction(
                        transaction_id=transaction.id,
                        owner_id=transaction.owner_id,
                        missing_account_id=account_id,
                        role=role,
                    )
                )
                logger.warning(f"Transaction {transaction.id} references missing {role} account {account_id}")

        if fix:
            for mismatch in report.mismatches:
                correction = self._correct(mismatch.account_id)
                if correction is not None:
                    report.corrections.append(correction)

        logger.info(f"Reconciliation finished: {report.summary_text()}")
        return report

    def _drifted(self, cached: Money, computed: Money) -> bool:
        return abs((computed - cached).to_cents()) > self.tolerance_cents

    def _correct(self, account_id: int) -> BalanceCorrection | None:
        """Recompute under the account lock and overwrite the cached balance if still drifted."""
        with self.store.atomic([account_id]) as unit:
            account = unit.account(account_id)
            computed = compute_balance(account_id, self.store.transactions_for_account(account_id))
            if not self._drifted(account.balance, computed):
                return None
            unit.overwrite_balance(account_id, computed)

        logger.info(f"Account {account_id} balance corrected: {account.balance} -> {computed}")
        return BalanceCorrection(account_id=account_id, previous=account.balance, corrected=computed)


class ReconciliationScheduler:
    """
    Runs reconciliation periodically on a daemon thread.

    Each report is logged and handed to ``on_report`` when given. A failing run
    is logged and the schedule continues.
    """

    def __init__(
        self,
        validator: ReconciliationValidator,
        interval_seconds: float,
        scope: ReconciliationScope | None = None,
        fix: bool = False,
        on_report: Callable[[ReconciliationReport], None] | None = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("Reconciliation interval must be positive")
        self.validator = validator
        self.interval_seconds = interval_seconds
        self.scope = scope
        self.fix = fix
        self.on_report = on_report
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="reconciliation-scheduler", daemon=True)
        self._thread.start()
        logger.info(f"Reconciliation scheduled every {self.interval_seconds}s (fix={self.fix})")

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def run_once(self) -> ReconciliationReport:
        report = self.validator.validate(self.scope, fix=self.fix)
        if self.on_report is not None:
            self.on_report(report)
        return report

    def _loop(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            try:
                self.run_once()
            except Exception:
                logger.exception("Scheduled reconciliation failed")
