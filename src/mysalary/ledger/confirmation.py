#!/usr/bin/env python3
"""
Confirmation Service

Posts scheduled transactions. The status flip and the balance delta for every
affected account commit together, and the scheduled check is repeated while the
account locks are held, so a transaction is posted (and its delta applied)
exactly once no matter how many confirmations race.
"""

import logging
from dataclasses import replace

from ..core.dates import FinancialDate
from ..core.errors import AlreadyPosted, TransactionNotFound
from ..core.models import ConfirmMode, Transaction, TransactionStatus
from .calculator import posted_deltas
from .store import LedgerStore

logger = logging.getLogger(__name__)


class ConfirmationService:
    """Transitions transactions from scheduled to posted."""

    def __init__(self, store: LedgerStore, clock=None):
        self.store = store
        self.clock = clock or store.clock

    def confirm(
        self,
        transaction_id: int,
        mode: ConfirmMode | str = ConfirmMode.SCHEDULED_DATE,
        owner_id: int | None = None,
    ) -> Transaction:
        """
        Post a scheduled transaction and apply its balance effect.

        Args:
            transaction_id: Transaction to post
            mode: SCHEDULED_DATE keeps the occurrence date; TODAY moves a
                future occurrence date to today
            owner_id: When given, transactions of other owners are not found

        Returns:
            The posted Transaction

        Raises:
            TransactionNotFound: Unknown id (or another owner's transaction)
            AlreadyPosted: The transaction was already posted; nothing changes
            AccountNotFound: An affected account no longer exists
            ConcurrentModification: Account locks could not be taken
        """
        mode = ConfirmMode.parse(mode)
        transaction = self.store.require_transaction(transaction_id)
        if owner_id is not None and transaction.owner_id != owner_id:
            raise TransactionNotFound(f"Transaction {transaction_id} not found")
        if transaction.is_posted:
            raise AlreadyPosted(f"Transaction {transaction_id} is already posted")

        with self.store.atomic(transaction.account_ids) as unit:
            current = unit.transaction(transaction_id)
            if current.is_posted:
                raise AlreadyPosted(f"Transaction {transaction_id} is already posted")

            now = self.clock()
            occurred_on = current.occurred_on
            if mode is ConfirmMode.TODAY and occurred_on.date > now.date():
                occurred_on = FinancialDate(date=now.date())

            posted = replace(
                current,
                status=TransactionStatus.POSTED,
                confirmed_at=now,
                occurred_on=occurred_on,
            )
            unit.put_transaction(posted)
            for account_id, delta in posted_deltas(posted).items():
                unit.apply_delta(account_id, delta)

        logger.info(f"Transaction {transaction_id} posted ({posted.type.value} {posted.amount} on {occurred_on})")
        return posted
