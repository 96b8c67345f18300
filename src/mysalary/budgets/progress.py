#!/usr/bin/env python3
"""
Budget Progress Aggregator

Sums posted expense transactions in a budget's linked categories over the
budget's resolved window. Read-only: works from a snapshot and never waits on
account locks.

Window resolution:
- month: calendar month containing "now"
- week: Monday..Sunday week containing "now"
- custom: the stored start and end

Both window ends are inclusive.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from ..core.currency import RateLookup, RateNotAvailable, convert_cents
from ..core.dates import FinancialDate
from ..core.errors import CurrencyMismatch
from ..core.models import Budget, BudgetStatus, PeriodKind, TransactionType
from ..core.money import Money
from ..ledger.store import LedgerStore

logger = logging.getLogger(__name__)

PERCENT = Decimal("0.01")


def resolve_window(budget: Budget, today: FinancialDate) -> tuple[FinancialDate, FinancialDate]:
    """Inclusive (start, end) window of a budget as of ``today``."""
    if budget.period is PeriodKind.CUSTOM:
        return budget.custom_start, budget.custom_end
    if budget.period is PeriodKind.WEEK:
        return today.iso_week_window()
    return today.month_window()


def spent_percentage(spent: Money, limit: Money) -> Decimal:
    """spent / limit * 100 rounded half-up to two places; 0 for a zero limit."""
    if limit.is_zero():
        return Decimal("0.00")
    ratio = Decimal(spent.to_cents()) * 100 / Decimal(limit.to_cents())
    return ratio.quantize(PERCENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class BudgetProgress:
    """Progress of one budget over its resolved window."""

    budget_id: int
    currency: str
    window_start: FinancialDate
    window_end: FinancialDate
    limit: Money
    spent: Money
    remaining: Money  # negative when overspent
    percentage: Decimal
    status: BudgetStatus
    transaction_count: int = 0

    @property
    def is_overspent(self) -> bool:
        return self.remaining.to_cents() < 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "budget_id": self.budget_id,
            "currency": self.currency,
            "window_start": self.window_start.to_iso_string(),
            "window_end": self.window_end.to_iso_string(),
            "limit": str(self.limit.to_decimal()),
            "spent": str(self.spent.to_decimal()),
            "remaining": str(self.remaining.to_decimal()),
            "percentage": str(self.percentage),
            "status": self.status.value,
            "transaction_count": self.transaction_count,
        }


class BudgetProgressAggregator:
    """
    Computes BudgetProgress from the ledger.

    Expenses booked on accounts in another currency are converted into the
    budget currency with ``rate_lookup``; without one they are a CurrencyMismatch.
    """

    def __init__(self, store: LedgerStore, clock=None, rate_lookup: RateLookup | None = None):
        self.store = store
        self.clock = clock or store.clock
        self.rate_lookup = rate_lookup

    def progress(self, budget: Budget) -> BudgetProgress:
        """
        Compute progress for a budget.

        Raises:
            CurrencyMismatch: An expense in another currency cannot be converted
        """
        today = FinancialDate(date=self.clock().date())
        start, end = resolve_window(budget, today)
        linked = set(budget.category_ids)
        state = self.store.snapshot()

        spent_cents = 0
        count = 0
        for transaction in state.transactions.values():
            if not transaction.is_posted or transaction.type is not TransactionType.EXPENSE:
                continue
            if transaction.owner_id != budget.owner_id or transaction.category_id not in linked:
                continue
            if not start <= transaction.occurred_on <= end:
                continue

            account = state.accounts.get(transaction.source_account_id)
            currency = account.currency if account else budget.currency
            spent_cents += self._in_budget_currency(transaction.amount.to_cents(), currency, budget.currency)
            count += 1

        spent = Money.from_cents(spent_cents)
        if start > today:
            status = BudgetStatus.FUTURE
        elif end < today:
            status = BudgetStatus.COMPLETED
        else:
            status = BudgetStatus.ACTIVE

        result = BudgetProgress(
            budget_id=budget.id,
            currency=budget.currency,
            window_start=start,
            window_end=end,
            limit=budget.limit,
            spent=spent,
            remaining=budget.limit - spent,
            percentage=spent_percentage(spent, budget.limit),
            status=status,
            transaction_count=count,
        )
        logger.debug(f"Budget {budget.id} {start}..{end}: spent {spent} of {budget.limit} ({result.percentage}%)")
        return result

    def _in_budget_currency(self, cents: int, currency: str, budget_currency: str) -> int:
        if currency == budget_currency:
            return cents
        if self.rate_lookup is None:
            raise CurrencyMismatch(f"No rate lookup to convert {currency} expenses into a {budget_currency} budget")
        try:
            rate = self.rate_lookup(currency, budget_currency)
        except RateNotAvailable as e:
            raise CurrencyMismatch(str(e)) from e
        return convert_cents(cents, rate)
