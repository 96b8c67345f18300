#!/usr/bin/env python3
"""
Ledger Store

In-memory tables for accounts, categories, transactions and budgets, plus the
single write primitive the rest of the ledger goes through: ``atomic()``.

Concurrency model:
- One lock per account row. ``atomic()`` acquires the locks for the accounts a
  unit will touch in ascending id order, so two transfers over the same pair of
  accounts in opposite directions cannot deadlock.
- Lock acquisition is bounded by a timeout; expiry raises ConcurrentModification
  and nothing is applied.
- Changes are staged on a LedgerUnit and applied in one step when the ``with``
  block exits cleanly. An exception inside the block discards the unit.
- Writers (units, admin rows, id reservation) are serialized by a commit lock
  that is held across ``_persist``. Readers take only the short state lock used
  to swap the new state in, so they never wait on account locks or disk I/O and
  see either the state before or after a unit, never a half-applied one.

Subclasses persist state by overriding ``_persist``; it runs before the new
state is swapped in, so a failed write leaves memory untouched.
"""

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from ..core.dates import FinancialDate
from ..core.errors import (
    AccountNotFound,
    BudgetNotFound,
    CategoryNotFound,
    CategoryTypeMismatch,
    ConcurrentModification,
    TransactionNotFound,
)
from ..core.models import (
    Account,
    AccountKind,
    Budget,
    Category,
    CategoryType,
    PeriodKind,
    Transaction,
    TransactionStatus,
)
from ..core.money import Money

logger = logging.getLogger(__name__)

ID_KINDS = ("account", "category", "transaction", "budget")


@dataclass
class LedgerState:
    """Plain container for every ledger table plus the id sequences."""

    accounts: dict[int, Account] = field(default_factory=dict)
    categories: dict[int, Category] = field(default_factory=dict)
    transactions: dict[int, Transaction] = field(default_factory=dict)
    budgets: dict[int, Budget] = field(default_factory=dict)
    next_ids: dict[str, int] = field(default_factory=lambda: dict.fromkeys(ID_KINDS, 1))

    def copy(self) -> "LedgerState":
        return LedgerState(
            accounts=dict(self.accounts),
            categories=dict(self.categories),
            transactions=dict(self.transactions),
            budgets=dict(self.budgets),
            next_ids=dict(self.next_ids),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize as the conceptual table layout (accounts, transactions, ...)."""
        return {
            "next_ids": dict(self.next_ids),
            "accounts": [a.to_dict() for a in sorted(self.accounts.values(), key=lambda a: a.id)],
            "categories": [c.to_dict() for c in sorted(self.categories.values(), key=lambda c: c.id)],
            "transactions": [t.to_dict() for t in sorted(self.transactions.values(), key=lambda t: t.id)],
            "budgets": [b.to_dict() for b in sorted(self.budgets.values(), key=lambda b: b.id)],
            "budget_categories": [
                {"budget_id": b.id, "category_id": category_id}
                for b in sorted(self.budgets.values(), key=lambda b: b.id)
                for category_id in b.category_ids
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LedgerState":
        state = cls(
            accounts={a.id: a for a in map(Account.from_dict, data.get("accounts", []))},
            categories={c.id: c for c in map(Category.from_dict, data.get("categories", []))},
            transactions={t.id: t for t in map(Transaction.from_dict, data.get("transactions", []))},
            budgets={b.id: b for b in map(Budget.from_dict, data.get("budgets", []))},
        )

        # The link table is authoritative when present
        links: dict[int, list[int]] = {}
        for link in data.get("budget_categories", []):
            links.setdefault(int(link["budget_id"]), []).append(int(link["category_id"]))
        for budget_id, category_ids in links.items():
            if budget_id in state.budgets:
                state.budgets[budget_id] = replace(state.budgets[budget_id], category_ids=tuple(category_ids))

        state.next_ids = _next_ids_for(state, data.get("next_ids", {}))
        return state


def _next_ids_for(state: LedgerState, stored: dict[str, int]) -> dict[str, int]:
    """Id sequences never fall behind the highest id actually present."""
    tables = {
        "account": state.accounts,
        "category": state.categories,
        "transaction": state.transactions,
        "budget": state.budgets,
    }
    return {kind: max(int(stored.get(kind, 1)), max(tables[kind], default=0) + 1) for kind in ID_KINDS}


class LedgerUnit:
    """
    Staged changes for one atomic unit.

    Only accounts locked by the enclosing ``atomic()`` call may have their
    balance changed; anything else is a programming error.
    """

    def __init__(self, store: "LedgerStore", locked_account_ids: frozenset[int]):
        self._store = store
        self.locked_account_ids = locked_account_ids
        self.accounts: dict[int, Account] = {}
        self.transactions: dict[int, Transaction] = {}

    def account(self, account_id: int) -> Account:
        """Current view of an account, including changes staged in this unit."""
        if account_id in self.accounts:
            return self.accounts[account_id]
        return self._store.require_account(account_id)

    def transaction(self, transaction_id: int) -> Transaction:
        if transaction_id in self.transactions:
            return self.transactions[transaction_id]
        return self._store.require_transaction(transaction_id)

    def next_transaction_id(self) -> int:
        return self._store._reserve_id("transaction")

    def put_transaction(self, transaction: Transaction) -> None:
        """Stage an appended or transitioned transaction record."""
        self.transactions[transaction.id] = transaction

    def apply_delta(self, account_id: int, delta: Money) -> Account:
        """Stage an incremental change to an account's cached balance."""
        account = self._locked_account(account_id)
        updated = replace(account, balance=account.balance + delta)
        self.accounts[account_id] = updated
        return updated

    def overwrite_balance(self, account_id: int, balance: Money) -> Account:
        """Stage a full overwrite of a cached balance (reconciliation only)."""
        account = self._locked_account(account_id)
        updated = replace(account, balance=balance)
        self.accounts[account_id] = updated
        return updated

    def set_active(self, account_id: int, active: bool) -> Account:
        account = self._locked_account(account_id)
        updated = replace(account, active=active)
        self.accounts[account_id] = updated
        return updated

    def _locked_account(self, account_id: int) -> Account:
        if account_id not in self.locked_account_ids:
            raise RuntimeError(f"Account {account_id} is not locked by this unit")
        return self.account(account_id)

    @property
    def is_empty(self) -> bool:
        return not self.accounts and not self.transactions


class LedgerStore:
    """
    Thread-safe in-memory ledger.

    Account, category and budget rows are created through the admin methods
    (``add_account`` and friends); transaction rows and cached balances change
    only through ``atomic()``.
    """

    def __init__(self, state: LedgerState | None = None, lock_timeout: float = 5.0, clock=datetime.now):
        self._state = state.copy() if state else LedgerState()
        self._state.next_ids = _next_ids_for(self._state, self._state.next_ids)
        self._state_lock = threading.Lock()
        self._commit_lock = threading.RLock()
        self._account_locks: dict[int, threading.Lock] = {}
        self.lock_timeout = lock_timeout
        self.clock = clock

    # ------------------------------------------------------------------
    # Atomic write path
    # ------------------------------------------------------------------

    @contextmanager
    def atomic(self, account_ids: Iterable[int], timeout: float | None = None) -> Iterator[LedgerUnit]:
        """
        Lock the given accounts and stage changes on a LedgerUnit.

        Locks are taken in ascending account id order. The staged changes are
        applied when the block exits without an exception.

        Raises:
            ConcurrentModification: If a lock is not acquired within the timeout
        """
        ordered = sorted(set(account_ids))
        wait = self.lock_timeout if timeout is None else timeout
        acquired: list[threading.Lock] = []
        try:
            for account_id in ordered:
                lock = self._lock_for(account_id)
                if not lock.acquire(timeout=wait):
                    raise ConcurrentModification(
                        f"Timed out after {wait}s waiting for account {account_id}; retry the operation"
                    )
                acquired.append(lock)
            logger.debug(f"Locked accounts {ordered}")

            unit = LedgerUnit(self, frozenset(ordered))
            yield unit

            if not unit.is_empty:
                self._commit(unit)
        finally:
            for lock in reversed(acquired):
                lock.release()

    def _lock_for(self, account_id: int) -> threading.Lock:
        with self._state_lock:
            return self._account_locks.setdefault(account_id, threading.Lock())

    def _commit(self, unit: LedgerUnit) -> None:
        with self._commit_lock:
            next_state = self._state.copy()
            next_state.accounts.update(unit.accounts)
            next_state.transactions.update(unit.transactions)
            self._publish(next_state)

    def _apply_rows(self, **tables: dict) -> None:
        """Apply admin-layer row upserts (accounts, categories, budgets)."""
        with self._commit_lock:
            next_state = self._state.copy()
            for table, rows in tables.items():
                getattr(next_state, table).update(rows)
            self._publish(next_state)

    def _publish(self, next_state: LedgerState) -> None:
        # Caller holds the commit lock; readers only wait for the swap
        self._persist(next_state)
        with self._state_lock:
            self._state = next_state

    def _reserve_id(self, kind: str) -> int:
        with self._commit_lock:
            value = self._state.next_ids[kind]
            self._state.next_ids[kind] = value + 1
            return value

    def _persist(self, state: LedgerState) -> None:
        """Hook for durable stores; the in-memory store keeps nothing else."""
        pass

    # ------------------------------------------------------------------
    # Admin surface (rows assumed validated by the owning layer)
    # ------------------------------------------------------------------

    def add_account(self, owner_id: int, name: str, kind: AccountKind | str, currency: str) -> Account:
        """Create an account with a zero cached balance."""
        account = Account(
            id=self._reserve_id("account"),
            owner_id=owner_id,
            name=name,
            kind=kind,
            currency=currency,
            created_at=self.clock(),
        )
        self._apply_rows(accounts={account.id: account})
        logger.info(f"Account {account.id} ({account.name}, {account.currency}) created for owner {owner_id}")
        return account

    def deactivate_account(self, account_id: int) -> Account:
        """Soft-deactivate an account; its history and balance stay in place."""
        with self.atomic([account_id]) as unit:
            account = unit.set_active(account_id, False)
        logger.info(f"Account {account_id} deactivated")
        return account

    def add_category(
        self,
        type: CategoryType | str,
        name: str,
        owner_id: int | None = None,
        icon: str | None = None,
        color: str | None = None,
    ) -> Category:
        category = Category(
            id=self._reserve_id("category"),
            type=type,
            name=name,
            owner_id=owner_id,
            icon=icon,
            color=color,
        )
        self._apply_rows(categories={category.id: category})
        return category

    def add_budget(
        self,
        owner_id: int,
        name: str,
        limit: Money,
        currency: str,
        period: PeriodKind | str,
        category_ids: Iterable[int] = (),
        custom_start: FinancialDate | None = None,
        custom_end: FinancialDate | None = None,
        rollover: bool = False,
    ) -> Budget:
        """
        Create a budget linked to expense categories.

        Raises:
            CategoryNotFound: If a linked category does not exist or belongs to someone else
            CategoryTypeMismatch: If a linked category is not an expense category
        """
        links = self._validated_budget_links(owner_id, category_ids)
        budget = Budget(
            id=self._reserve_id("budget"),
            owner_id=owner_id,
            name=name,
            limit=limit,
            currency=currency,
            period=period,
            custom_start=custom_start,
            custom_end=custom_end,
            rollover=rollover,
            category_ids=links,
        )
        self._apply_rows(budgets={budget.id: budget})
        return budget

    def link_budget_categories(self, budget_id: int, category_ids: Iterable[int]) -> Budget:
        """Add category links to an existing budget (validated the same way as creation)."""
        # Read, merge and write as one step so concurrent links are not lost
        with self._commit_lock:
            budget = self.require_budget(budget_id)
            links = self._validated_budget_links(budget.owner_id, category_ids)
            merged = tuple(dict.fromkeys(budget.category_ids + links))
            updated = replace(budget, category_ids=merged)
            self._apply_rows(budgets={budget_id: updated})
        return updated

    def _validated_budget_links(self, owner_id: int, category_ids: Iterable[int]) -> tuple[int, ...]:
        links = tuple(dict.fromkeys(int(c) for c in category_ids))
        for category_id in links:
            category = self.get_category(category_id)
            if category is None or not category.usable_by(owner_id):
                raise CategoryNotFound(f"Category {category_id} not found")
            if category.type is not CategoryType.EXPENSE:
                raise CategoryTypeMismatch(
                    f"Budgets track expense categories only; {category.name!r} is {category.type.value}"
                )
        return links

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> LedgerState:
        """Consistent copy of every table."""
        with self._state_lock:
            return self._state.copy()

    def get_account(self, account_id: int) -> Account | None:
        with self._state_lock:
            return self._state.accounts.get(account_id)

    def require_account(self, account_id: int) -> Account:
        account = self.get_account(account_id)
        if account is None:
            raise AccountNotFound(f"Account {account_id} not found")
        return account

    def accounts(self, owner_id: int | None = None, active_only: bool = False) -> list[Account]:
        with self._state_lock:
            rows = list(self._state.accounts.values())
        return sorted(
            (a for a in rows if (owner_id is None or a.owner_id == owner_id) and (a.active or not active_only)),
            key=lambda a: a.id,
        )

    def get_category(self, category_id: int) -> Category | None:
        with self._state_lock:
            return self._state.categories.get(category_id)

    def categories(self, owner_id: int | None = None) -> list[Category]:
        """Categories usable by an owner (own + shared), or all when owner is None."""
        with self._state_lock:
            rows = list(self._state.categories.values())
        return sorted((c for c in rows if owner_id is None or c.usable_by(owner_id)), key=lambda c: c.id)

    def get_transaction(self, transaction_id: int) -> Transaction | None:
        with self._state_lock:
            return self._state.transactions.get(transaction_id)

    def require_transaction(self, transaction_id: int) -> Transaction:
        transaction = self.get_transaction(transaction_id)
        if transaction is None:
            raise TransactionNotFound(f"Transaction {transaction_id} not found")
        return transaction

    def transactions(self, owner_id: int | None = None) -> list[Transaction]:
        with self._state_lock:
            rows = list(self._state.transactions.values())
        return sorted((t for t in rows if owner_id is None or t.owner_id == owner_id), key=lambda t: t.id)

    def transactions_for_account(
        self, account_id: int, status: TransactionStatus | None = None
    ) -> list[Transaction]:
        """Transactions touching an account as source or transfer target."""
        with self._state_lock:
            rows = list(self._state.transactions.values())
        return sorted(
            (t for t in rows if t.touches(account_id) and (status is None or t.status is status)),
            key=lambda t: t.id,
        )

    def get_budget(self, budget_id: int) -> Budget | None:
        with self._state_lock:
            return self._state.budgets.get(budget_id)

    def require_budget(self, budget_id: int) -> Budget:
        budget = self.get_budget(budget_id)
        if budget is None:
            raise BudgetNotFound(f"Budget {budget_id} not found")
        return budget

    def budgets(self, owner_id: int | None = None, active_only: bool = True) -> list[Budget]:
        with self._state_lock:
            rows = list(self._state.budgets.values())
        return sorted(
            (b for b in rows if (owner_id is None or b.owner_id == owner_id) and (b.active or not active_only)),
            key=lambda b: b.id,
        )
