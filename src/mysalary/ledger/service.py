#!/usr/bin/env python3
"""
Ledger Service

Facade over the ledger components, exposing the operations the surrounding
API or CLI layer calls:

- create_transaction / confirm_transaction (write paths)
- get_account_balance (cached balance read)
- validate_integrity (reconciliation, report or fix mode)
- get_budget_progress
- list_transactions / net_worth (read paths)
"""

import logging
from datetime import date
from decimal import Decimal

from ..analysis.net_worth import NetWorthCalculator, NetWorthSummary
from ..budgets.progress import BudgetProgress, BudgetProgressAggregator
from ..core.config import Config
from ..core.currency import RateLookup, StaticRates
from ..core.dates import FinancialDate
from ..core.errors import BudgetNotFound
from ..core.models import ConfirmMode, Transaction, TransactionStatus
from .confirmation import ConfirmationService
from .datastore import JsonLedgerStore
from .reconciliation import ReconciliationReport, ReconciliationScope, ReconciliationValidator
from .store import LedgerStore
from .writer import NewTransaction, TransactionWriter

logger = logging.getLogger(__name__)


class LedgerService:
    """Entry point wiring the store, writer, confirmation, reconciliation and budgets together."""

    def __init__(
        self,
        store: LedgerStore,
        rate_lookup: RateLookup | None = None,
        tolerance: Decimal = Decimal("0.01"),
        default_currency: str = "USD",
        clock=None,
    ):
        self.store = store
        self.clock = clock or store.clock
        self.rate_lookup = rate_lookup
        self.default_currency = default_currency
        self.writer = TransactionWriter(store, clock=self.clock)
        self.confirmation = ConfirmationService(store, clock=self.clock)
        self.validator = ReconciliationValidator(store, tolerance=tolerance, clock=self.clock)
        self.budgets = BudgetProgressAggregator(store, clock=self.clock, rate_lookup=rate_lookup)
        self.net_worth_calculator = NetWorthCalculator(store, rate_lookup=rate_lookup)

    @classmethod
    def from_config(cls, config: Config) -> "LedgerService":
        """Open the JSON ledger and rate table named by the configuration."""
        store = JsonLedgerStore(config.ledger.ledger_file, lock_timeout=config.ledger.lock_timeout_seconds)
        rates = None
        if config.ledger.rates_file.exists():
            rates = StaticRates.from_yaml(config.ledger.rates_file)
        return cls(
            store,
            rate_lookup=rates,
            tolerance=config.reconciliation.tolerance,
            default_currency=config.ledger.default_currency,
        )

    def create_transaction(
        self,
        owner_id: int,
        source_account_id: int,
        amount,
        type,
        occurred_on=None,
        status=None,
        target_account_id: int | None = None,
        category_id: int | None = None,
        description: str = "",
    ) -> Transaction:
        return self.writer.create(
            NewTransaction(
                owner_id=owner_id,
                source_account_id=source_account_id,
                amount=amount,
                type=type,
                occurred_on=occurred_on,
                status=status,
                target_account_id=target_account_id,
                category_id=category_id,
                description=description,
            )
        )

    def confirm_transaction(
        self,
        transaction_id: int,
        mode: ConfirmMode | str = ConfirmMode.SCHEDULED_DATE,
        owner_id: int | None = None,
    ) -> Transaction:
        return self.confirmation.confirm(transaction_id, mode=mode, owner_id=owner_id)

    def get_account_balance(self, account_id: int) -> Decimal:
        """Cached balance of an account."""
        return self.store.require_account(account_id).balance.to_decimal()

    def validate_integrity(self, scope: ReconciliationScope | None = None, fix: bool = False) -> ReconciliationReport:
        return self.validator.validate(scope, fix=fix)

    def get_budget_progress(self, budget_id: int, owner_id: int | None = None) -> BudgetProgress:
        budget = self.store.require_budget(budget_id)
        if owner_id is not None and budget.owner_id != owner_id:
            raise BudgetNotFound(f"Budget {budget_id} not found")
        return self.budgets.progress(budget)

    def list_transactions(
        self,
        owner_id: int,
        account_id: int | None = None,
        status: TransactionStatus | str | None = None,
        exclude_future: bool = False,
        max_date: FinancialDate | date | str | None = None,
    ) -> list[Transaction]:
        """
        An owner's transactions, newest first.

        Args:
            owner_id: Owner whose transactions are listed
            account_id: Only transactions with this account as source or target
            status: Only transactions in this status
            exclude_future: Drop transactions dated after today
            max_date: Drop transactions dated after this day
        """
        wanted_status = TransactionStatus.parse(status) if status is not None else None
        bound = FinancialDate.coerce(max_date) if max_date is not None else None
        if exclude_future:
            today = FinancialDate(date=self.clock().date())
            bound = today if bound is None else min(bound, today)

        rows = [
            t
            for t in self.store.transactions(owner_id=owner_id)
            if (account_id is None or t.touches(account_id))
            and (wanted_status is None or t.status is wanted_status)
            and (bound is None or t.occurred_on <= bound)
        ]
        return sorted(rows, key=lambda t: (t.occurred_on.date, t.sequence), reverse=True)

    def net_worth(self, owner_id: int, currency: str | None = None) -> NetWorthSummary:
        return self.net_worth_calculator.calculate(owner_id, currency or self.default_currency)
