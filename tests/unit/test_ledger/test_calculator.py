#!/usr/bin/env python3
"""
Unit tests for the balance calculator.

The calculator is pure: these tests build Transaction records directly and
never touch a store.
"""

from datetime import date

import pytest

from mysalary.core.dates import FinancialDate
from mysalary.core.models import Transaction, TransactionStatus, TransactionType
from mysalary.core.money import Money
from mysalary.ledger.calculator import (
    balance_delta,
    balance_trail,
    compute_balance,
    fold_order,
    posted_delta,
    posted_deltas,
)

A, B, C = 1, 2, 3


def txn(id, type, amount, day=1, status="posted", source=A, target=None, category=None):
    return Transaction(
        id=id,
        owner_id=1,
        source_account_id=source,
        target_account_id=target,
        category_id=category,
        amount=Money.from_decimal(amount),
        type=TransactionType.parse(type),
        occurred_on=FinancialDate(date=date(2025, 3, day)),
        status=TransactionStatus.parse(status),
    )


@pytest.mark.ledger
class TestPerLegRule:
    """Test the signed contribution of each transaction type."""

    def test_income_adds_on_source(self):
        assert posted_delta(txn(1, "income", "100"), A) == Money.from_decimal("100")

    def test_expense_subtracts_on_source(self):
        assert posted_delta(txn(1, "expense", "40"), A) == Money.from_decimal("-40")

    def test_transfer_legs(self):
        transfer = txn(1, "transfer", "300", target=B)

        assert posted_delta(transfer, A) == Money.from_decimal("-300")
        assert posted_delta(transfer, B) == Money.from_decimal("300")
        assert posted_delta(transfer, C) == Money.zero()

    def test_unrelated_account_gets_nothing(self):
        assert posted_delta(txn(1, "income", "100"), B) == Money.zero()

    def test_scheduled_contributes_zero(self):
        scheduled = txn(1, "expense", "500", status="scheduled")

        assert balance_delta(scheduled, A) == Money.zero()
        # The posting delta is still known for confirmation
        assert posted_delta(scheduled, A) == Money.from_decimal("-500")

    def test_posted_deltas_for_transfer_sum_to_zero(self):
        deltas = posted_deltas(txn(1, "transfer", "300", target=B))

        assert set(deltas) == {A, B}
        assert sum(deltas.values(), Money.zero()) == Money.zero()


@pytest.mark.ledger
class TestComputeBalance:
    """Test folding transactions into a balance."""

    def test_empty_set_is_zero(self):
        assert compute_balance(A, []) == Money.zero()

    def test_mixed_transactions(self):
        transactions = [
            txn(1, "income", "1000", day=1),
            txn(2, "expense", "200", day=2),
            txn(3, "expense", "500", day=3, status="scheduled"),
            txn(4, "transfer", "300", day=4, target=B),
            txn(5, "transfer", "50", day=5, source=B, target=A),
        ]

        assert compute_balance(A, transactions) == Money.from_decimal("550")
        assert compute_balance(B, transactions) == Money.from_decimal("250")

    def test_order_does_not_change_result(self):
        transactions = [
            txn(1, "income", "10.01", day=3),
            txn(2, "expense", "3.33", day=1),
            txn(3, "income", "7.77", day=2),
        ]

        assert compute_balance(A, transactions) == compute_balance(A, list(reversed(transactions)))

    def test_can_go_negative(self):
        assert compute_balance(A, [txn(1, "expense", "25")]) == Money.from_decimal("-25")


@pytest.mark.ledger
class TestBalanceTrail:
    """Test the ordered audit trail."""

    def test_fold_order_by_date_then_sequence(self):
        transactions = [txn(3, "income", "1", day=2), txn(2, "income", "1", day=2), txn(9, "income", "1", day=1)]
        assert [t.id for t in fold_order(transactions)] == [9, 2, 3]

    def test_trail_records_running_balance(self):
        transactions = [
            txn(2, "expense", "200", day=2),
            txn(1, "income", "1000", day=1),
            txn(3, "transfer", "300", day=3, target=B),
            txn(4, "expense", "999", day=4, status="scheduled"),
        ]

        trail = balance_trail(A, transactions)

        assert [step.transaction_id for step in trail] == [1, 2, 3]
        assert [step.leg for step in trail] == ["income", "expense", "transfer_out"]
        assert [str(step.balance) for step in trail] == ["1000.00", "800.00", "500.00"]

    def test_trail_for_target_uses_incoming_leg(self):
        trail = balance_trail(B, [txn(1, "transfer", "300", target=B)])

        assert len(trail) == 1
        assert trail[0].leg == "transfer_in"
        assert trail[0].delta == Money.from_decimal("300")
