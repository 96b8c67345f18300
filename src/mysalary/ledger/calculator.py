#!/usr/bin/env python3
"""
Balance Calculator

Pure functions deriving an account's authoritative balance from the
transaction log. Nothing here reads or writes stored state.

Per-leg rule for an account A:
- income with source A: +amount
- expense with source A: -amount
- transfer with source A: -amount (outgoing leg)
- transfer with target A: +amount (incoming leg)
- anything not posted: 0

The same rule drives the incremental updates applied by the writer and the
confirmation service, which is what keeps cached balances reconcilable.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..core.dates import FinancialDate
from ..core.models import Transaction, TransactionType
from ..core.money import Money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceStep:
    """One leg of the ordered fold, kept for audit output."""

    transaction_id: int
    occurred_on: FinancialDate
    type: TransactionType
    leg: str  # "income", "expense", "transfer_out", "transfer_in"
    delta: Money
    balance: Money


def fold_order(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Order by occurrence date, then creation sequence."""
    return sorted(transactions, key=lambda t: (t.occurred_on.date, t.sequence))


def _leg(transaction: Transaction, account_id: int) -> tuple[str, Money] | None:
    if transaction.type is TransactionType.TRANSFER:
        if transaction.source_account_id == account_id:
            return "transfer_out", -transaction.amount
        if transaction.target_account_id == account_id:
            return "transfer_in", transaction.amount
        return None

    if transaction.source_account_id != account_id:
        return None
    if transaction.type is TransactionType.INCOME:
        return "income", transaction.amount
    return "expense", -transaction.amount


def posted_delta(transaction: Transaction, account_id: int) -> Money:
    """
    Balance change a transaction contributes to one account once posted.

    Ignores the transaction's current status; callers applying a delta at
    posting time use this directly.
    """
    leg = _leg(transaction, account_id)
    return leg[1] if leg else Money.zero()


def balance_delta(transaction: Transaction, account_id: int) -> Money:
    """Balance change a transaction contributes to an account right now (zero unless posted)."""
    if not transaction.is_posted:
        return Money.zero()
    return posted_delta(transaction, account_id)


def posted_deltas(transaction: Transaction) -> dict[int, Money]:
    """Posting deltas for every account the transaction touches."""
    return {account_id: posted_delta(transaction, account_id) for account_id in transaction.account_ids}


def balance_trail(account_id: int, transactions: Iterable[Transaction]) -> list[BalanceStep]:
    """
    Fold posted transactions into a running balance, one step per leg.

    Transactions that are not posted or do not touch the account are skipped.
    """
    running = Money.zero()
    steps: list[BalanceStep] = []

    for transaction in fold_order(transactions):
        if not transaction.is_posted:
            continue
        leg = _leg(transaction, account_id)
        if leg is None:
            continue

        name, delta = leg
        running = running + delta
        steps.append(
            BalanceStep(
                transaction_id=transaction.id,
                occurred_on=transaction.occurred_on,
                type=transaction.type,
                leg=name,
                delta=delta,
                balance=running,
            )
        )
        logger.debug(f"account {account_id}: {name} {delta} -> {running} (txn {transaction.id})")

    return steps


def compute_balance(account_id: int, transactions: Iterable[Transaction]) -> Money:
    """
    Authoritative balance of an account from its transaction set.

    Args:
        account_id: Account to compute
        transactions: Transactions referencing the account as source or target;
            unrelated and non-posted transactions are ignored

    Returns:
        Balance as Money
    """
    trail = balance_trail(account_id, transactions)
    return trail[-1].balance if trail else Money.zero()
