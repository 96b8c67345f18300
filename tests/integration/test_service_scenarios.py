#!/usr/bin/env python3
"""
Integration tests for LedgerService end-to-end scenarios.

Walks the service through the household workflows (salary, spending, bills,
transfers, budgets) and checks the ledger-wide properties that must hold after
any sequence of operations.
"""

from decimal import Decimal

import pytest

from mysalary.core.config import get_config
from mysalary.core.errors import (
    AlreadyPosted,
    BudgetNotFound,
    CategoryNotFound,
    CategoryTypeMismatch,
    TransactionNotFound,
)
from mysalary.core.models import BudgetStatus, TransactionStatus
from mysalary.core.money import Money
from mysalary.ledger.calculator import compute_balance
from mysalary.ledger.datastore import JsonLedgerStore
from mysalary.ledger.reconciliation import ReconciliationScope
from mysalary.ledger.service import LedgerService
from tests.fixtures.ledger_data import OTHER_OWNER, OWNER, generate_synthetic_transactions


@pytest.mark.integration
class TestHouseholdScenarios:
    """Test the canonical household workflows."""

    def test_salary_spending_and_scheduled_bill(self, service, household):
        checking = household.checking.id

        service.create_transaction(OWNER, checking, "1000", "income", category_id=household.salary.id)
        assert service.get_account_balance(checking) == Decimal("1000.00")

        service.create_transaction(OWNER, checking, "200", "expense", category_id=household.food.id)
        assert service.get_account_balance(checking) == Decimal("800.00")

        bill = service.create_transaction(
            OWNER, checking, "500", "expense", occurred_on="2025-04-01", category_id=household.rent.id
        )
        assert bill.status is TransactionStatus.SCHEDULED
        assert service.get_account_balance(checking) == Decimal("800.00")

        posted = service.confirm_transaction(bill.id)
        assert posted.status is TransactionStatus.POSTED
        assert posted.occurred_on.to_iso_string() == "2025-04-01"
        assert service.get_account_balance(checking) == Decimal("300.00")
        assert service.validate_integrity().is_clean

    def test_transfer_between_accounts(self, service, household):
        checking, wallet = household.checking.id, household.wallet.id
        service.create_transaction(OWNER, checking, "1000", "income", category_id=household.salary.id)

        transfer = service.create_transaction(OWNER, checking, "300", "transfer", target_account_id=wallet)

        assert transfer.account_ids == (checking, wallet)
        assert service.get_account_balance(checking) == Decimal("700.00")
        assert service.get_account_balance(wallet) == Decimal("300.00")

    def test_monthly_food_budget(self, service, household):
        budget = service.store.add_budget(
            OWNER, "Food", Money.from_decimal("500"), "USD", "month", category_ids=[household.food.id]
        )
        for amount, day in (("120", "2025-03-03"), ("80", "2025-03-12")):
            service.create_transaction(
                OWNER, household.checking.id, amount, "expense", occurred_on=day, category_id=household.food.id
            )
        service.create_transaction(
            OWNER, household.checking.id, "1000", "expense",
            occurred_on="2025-03-28", category_id=household.food.id,
        )

        progress = service.get_budget_progress(budget.id, owner_id=OWNER)

        assert progress.spent == Money.from_decimal("200")
        assert progress.remaining == Money.from_decimal("300")
        assert progress.percentage == Decimal("40.00")
        assert progress.status is BudgetStatus.ACTIVE
        assert progress.to_dict()["percentage"] == "40.00"

    def test_budget_hidden_from_other_owner(self, service, household):
        budget = service.store.add_budget(OWNER, "Food", Money.from_decimal("500"), "USD", "month")

        with pytest.raises(BudgetNotFound):
            service.get_budget_progress(budget.id, owner_id=OTHER_OWNER)

    def test_confirm_today_moves_future_date(self, service, household, clock):
        scheduled = service.create_transaction(
            OWNER, household.checking.id, "50", "expense", occurred_on="2025-05-01", category_id=household.food.id
        )

        posted = service.confirm_transaction(scheduled.id, mode="today")

        assert posted.occurred_on.date == clock().date()
        assert posted.confirmed_at == clock()

    def test_confirm_other_owner_not_found(self, service, household):
        scheduled = service.create_transaction(
            OWNER, household.checking.id, "50", "expense", occurred_on="2025-05-01", category_id=household.food.id
        )

        with pytest.raises(TransactionNotFound):
            service.confirm_transaction(scheduled.id, owner_id=OTHER_OWNER)


@pytest.mark.integration
class TestLedgerProperties:
    """Test properties that hold after any sequence of operations."""

    def test_reconcile_is_idempotent_on_consistent_ledger(self, service, household):
        generate_synthetic_transactions(service, household, count=60, seed=3)

        first = service.validate_integrity(fix=True)
        second = service.validate_integrity(fix=True)

        assert first.is_clean and second.is_clean
        assert first.corrections == second.corrections == []

    def test_cached_balance_equals_fold(self, service, household):
        generate_synthetic_transactions(service, household, count=60, seed=11)

        for account in service.store.accounts():
            transactions = service.store.transactions_for_account(account.id)
            assert service.store.get_account(account.id).balance == compute_balance(account.id, transactions)

    def test_scheduled_transactions_are_inert(self, service, household):
        before = {a.id: a.balance for a in service.store.accounts()}

        for day in ("2025-03-20", "2025-04-01", "2026-01-01"):
            service.create_transaction(
                OWNER, household.checking.id, "75", "transfer", occurred_on=day, target_account_id=household.wallet.id
            )
        service.create_transaction(
            OWNER, household.checking.id, "10", "expense", status="scheduled", category_id=household.food.id
        )

        assert {a.id: a.balance for a in service.store.accounts()} == before

    def test_transfers_conserve_money(self, service, household):
        service.create_transaction(OWNER, household.checking.id, "500", "income", category_id=household.salary.id)
        total_before = service.store.get_account(household.checking.id).balance + service.store.get_account(
            household.wallet.id
        ).balance

        for amount in ("10", "25.50", "0.01", "100"):
            service.create_transaction(
                OWNER, household.checking.id, amount, "transfer", target_account_id=household.wallet.id
            )
        service.create_transaction(
            OWNER, household.wallet.id, "40", "transfer", target_account_id=household.checking.id
        )

        total_after = service.store.get_account(household.checking.id).balance + service.store.get_account(
            household.wallet.id
        ).balance
        assert total_after == total_before

    def test_confirm_twice_changes_nothing(self, service, household):
        scheduled = service.create_transaction(
            OWNER, household.checking.id, "60", "expense", occurred_on="2025-03-30", category_id=household.food.id
        )
        service.confirm_transaction(scheduled.id)
        balance = service.get_account_balance(household.checking.id)

        with pytest.raises(AlreadyPosted):
            service.confirm_transaction(scheduled.id)

        assert service.get_account_balance(household.checking.id) == balance
        assert len(service.store.transactions()) == 1

    def test_category_type_must_match(self, service, household):
        with pytest.raises(CategoryTypeMismatch):
            service.create_transaction(OWNER, household.checking.id, "5", "expense", category_id=household.salary.id)
        with pytest.raises(CategoryTypeMismatch):
            service.create_transaction(OWNER, household.checking.id, "5", "income", category_id=household.food.id)
        with pytest.raises(CategoryNotFound):
            service.create_transaction(
                OWNER, household.checking.id, "5", "expense", category_id=household.other_fun.id
            )

        assert service.store.transactions() == []


@pytest.mark.integration
class TestListTransactions:
    """Test transaction listing order and filters."""

    @pytest.fixture
    def listed(self, service, household):
        checking, wallet = household.checking.id, household.wallet.id
        rows = {
            "old": service.create_transaction(
                OWNER, checking, "10", "income", occurred_on="2025-03-01", category_id=household.salary.id
            ),
            "same_day_a": service.create_transaction(
                OWNER, checking, "1", "expense", occurred_on="2025-03-10", category_id=household.food.id
            ),
            "same_day_b": service.create_transaction(
                OWNER, wallet, "2", "expense", occurred_on="2025-03-10", category_id=household.food.id
            ),
            "transfer": service.create_transaction(
                OWNER, checking, "3", "transfer", occurred_on="2025-03-12", target_account_id=wallet
            ),
            "future": service.create_transaction(
                OWNER, checking, "4", "expense", occurred_on="2025-04-02", category_id=household.rent.id
            ),
        }
        service.create_transaction(
            OTHER_OWNER, household.other_checking.id, "9", "income", category_id=household.salary.id
        )
        return rows

    def test_newest_first_with_sequence_tiebreak(self, service, listed):
        ids = [t.id for t in service.list_transactions(OWNER)]

        assert ids == [
            listed["future"].id,
            listed["transfer"].id,
            listed["same_day_b"].id,
            listed["same_day_a"].id,
            listed["old"].id,
        ]

    def test_account_filter_includes_transfer_targets(self, service, household, listed):
        ids = [t.id for t in service.list_transactions(OWNER, account_id=household.wallet.id)]

        assert ids == [listed["transfer"].id, listed["same_day_b"].id]

    def test_status_and_date_filters(self, service, listed):
        scheduled = service.list_transactions(OWNER, status="scheduled")
        current = service.list_transactions(OWNER, exclude_future=True)
        capped = service.list_transactions(OWNER, max_date="2025-03-10")

        assert [t.id for t in scheduled] == [listed["future"].id]
        assert listed["future"].id not in [t.id for t in current]
        assert len(current) == 4
        assert [t.id for t in capped] == [listed["same_day_b"].id, listed["same_day_a"].id, listed["old"].id]

    def test_other_owner_isolated(self, service, listed):
        assert len(service.list_transactions(OTHER_OWNER)) == 1


@pytest.mark.integration
class TestPersistentService:
    """Test the service over the JSON-backed store."""

    def test_from_config_round_trip(self):
        config = get_config()
        service = LedgerService.from_config(config)
        account = service.store.add_account(OWNER, "Checking", "bank_account", "USD")
        salary = service.store.add_category("income", "Salary")
        service.create_transaction(OWNER, account.id, "42.50", "income", category_id=salary.id)

        reopened = LedgerService.from_config(config)

        assert isinstance(reopened.store, JsonLedgerStore)
        assert reopened.get_account_balance(account.id) == Decimal("42.50")
        assert reopened.validate_integrity(ReconciliationScope.for_owner(OWNER)).is_clean
