#!/usr/bin/env python3
"""
Transaction Writer

Validates a new transaction and appends it. When the transaction is posted at
creation, the cached balance of every affected account moves in the same atomic
unit as the insert. Every validation runs before any lock is taken or any row is
staged, so a rejected request leaves no trace.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from ..core.dates import FinancialDate
from ..core.errors import (
    AccountNotFound,
    CategoryNotFound,
    CategoryTypeMismatch,
    CurrencyMismatch,
    InvalidAmount,
    InvalidTransactionShape,
    MissingTransferTarget,
    SameAccountTransfer,
)
from ..core.models import Account, Transaction, TransactionStatus, TransactionType
from ..core.money import Money
from .calculator import posted_deltas
from .store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewTransaction:
    """
    Request to append a transaction.

    ``status`` may be left out: the writer then schedules transactions dated
    after today and posts everything else. ``occurred_on`` defaults to today.
    """

    owner_id: int
    source_account_id: int
    amount: Money | Decimal | str | int
    type: TransactionType | str
    occurred_on: FinancialDate | date | str | None = None
    status: TransactionStatus | str | None = None
    target_account_id: int | None = None
    category_id: int | None = None
    description: str = ""


def parse_amount(value: Money | Decimal | str | int) -> Money:
    """
    Parse a transaction amount.

    Raises:
        InvalidAmount: If the value is not a number or not strictly positive
    """
    try:
        amount = value if isinstance(value, Money) else Money.from_decimal(value)
    except (ValueError, TypeError, ArithmeticError) as e:
        raise InvalidAmount(f"Amount is not a number: {value!r}") from e

    if not amount.is_positive():
        raise InvalidAmount(f"Amount must be greater than zero, got {amount}")
    return amount


class TransactionWriter:
    """Creates transactions and applies their balance effect atomically."""

    def __init__(self, store: LedgerStore, clock=None):
        self.store = store
        self.clock = clock or store.clock

    def create(self, request: NewTransaction) -> Transaction:
        """
        Validate and append a transaction.

        Returns:
            The stored Transaction

        Raises:
            InvalidAmount, InvalidTransactionShape, MissingTransferTarget,
            SameAccountTransfer, AccountNotFound, CategoryNotFound,
            CategoryTypeMismatch, CurrencyMismatch: before any mutation
            ConcurrentModification: if the account locks could not be taken
        """
        amount = parse_amount(request.amount)
        transaction_type = TransactionType.parse(request.type)
        now = self.clock()
        occurred_on = self._occurrence_date(request.occurred_on, now)
        status = self._status(request.status, occurred_on, now)

        self._check_shape(request, transaction_type)
        source = self._usable_account(request.source_account_id, request.owner_id)

        if transaction_type is TransactionType.TRANSFER:
            target = self._usable_account(request.target_account_id, request.owner_id)
            if source.currency != target.currency:
                raise CurrencyMismatch(
                    f"Transfers must stay in one currency: {source.currency} -> {target.currency}"
                )
        else:
            self._check_category(request.category_id, request.owner_id, transaction_type)

        account_ids = [source.id]
        if transaction_type is TransactionType.TRANSFER:
            account_ids.append(request.target_account_id)

        with self.store.atomic(account_ids) as unit:
            # Deactivation may have committed while we waited for the locks
            for account_id in account_ids:
                if not unit.account(account_id).active:
                    raise AccountNotFound(f"Account {account_id} is not active")

            transaction = Transaction(
                id=unit.next_transaction_id(),
                owner_id=request.owner_id,
                source_account_id=source.id,
                target_account_id=request.target_account_id,
                category_id=request.category_id,
                amount=amount,
                type=transaction_type,
                occurred_on=occurred_on,
                status=status,
                description=request.description or "",
                confirmed_at=now if status is TransactionStatus.POSTED else None,
                created_at=now,
            )
            unit.put_transaction(transaction)

            if transaction.is_posted:
                for account_id, delta in posted_deltas(transaction).items():
                    unit.apply_delta(account_id, delta)

        logger.info(
            f"Transaction {transaction.id} appended: {transaction.type.value} {transaction.amount} "
            f"on {transaction.occurred_on} ({transaction.status.value})"
        )
        return transaction

    def _occurrence_date(self, value, now: datetime) -> FinancialDate:
        if value is None:
            return FinancialDate(date=now.date())
        try:
            return FinancialDate.coerce(value)
        except (TypeError, ValueError) as e:
            raise InvalidTransactionShape(f"Invalid occurrence date {value!r}; use YYYY-MM-DD") from e

    def _status(self, value, occurred_on: FinancialDate, now: datetime) -> TransactionStatus:
        if value is not None:
            return TransactionStatus.parse(value)
        if occurred_on.date > now.date():
            return TransactionStatus.SCHEDULED
        return TransactionStatus.POSTED

    def _check_shape(self, request: NewTransaction, transaction_type: TransactionType) -> None:
        if transaction_type is TransactionType.TRANSFER:
            if request.category_id is not None:
                raise InvalidTransactionShape("Transfers do not take a category")
            if request.target_account_id is None:
                raise MissingTransferTarget("Transfers need a target account")
            if request.target_account_id == request.source_account_id:
                raise SameAccountTransfer("Cannot transfer to the same account")
        else:
            if request.target_account_id is not None:
                raise InvalidTransactionShape(f"Only transfers take a target account, not {transaction_type.value}")
            if request.category_id is None:
                raise CategoryNotFound(f"A category is required for {transaction_type.value} transactions")

    def _usable_account(self, account_id: int, owner_id: int) -> Account:
        account = self.store.get_account(account_id)
        if account is None or account.owner_id != owner_id:
            raise AccountNotFound(f"Account {account_id} not found")
        if not account.active:
            raise AccountNotFound(f"Account {account_id} is not active")
        return account

    def _check_category(self, category_id: int, owner_id: int, transaction_type: TransactionType) -> None:
        category = self.store.get_category(category_id)
        if category is None or not category.usable_by(owner_id):
            raise CategoryNotFound(f"Category {category_id} not found")
        if category.type is not transaction_type.category_type:
            raise CategoryTypeMismatch(
                f"Category {category.name!r} is {category.type.value}, transaction is {transaction_type.value}"
            )
