#!/usr/bin/env python3
"""
Core Data Models for the MySalary Ledger

Closed enums for every lifecycle literal and immutable record types for the
ledger tables (accounts, categories, transactions, budgets). Literals are parsed
into enums once at the boundary; inside the core they are only ever compared as
enum members.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .currency import normalize_currency_code
from .dates import FinancialDate
from .errors import InvalidTransactionShape
from .money import Money


class _ParseableEnum(Enum):
    @classmethod
    def parse(cls, value: Any):
        """Accept a member or its literal value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"Invalid {cls.__name__} {value!r}; expected one of: {allowed}") from None


class AccountKind(_ParseableEnum):
    """Kinds of money holdings."""

    CASH = "cash"
    DEBIT_CARD = "debit_card"
    CREDIT_CARD = "credit_card"
    BANK_ACCOUNT = "bank_account"
    DIGITAL_WALLET = "digital_wallet"


class CategoryType(_ParseableEnum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionType(_ParseableEnum):
    """Types of financial transactions."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"

    @classmethod
    def parse(cls, value: Any) -> "TransactionType":
        try:
            return super().parse(value)
        except ValueError as e:
            raise InvalidTransactionShape(str(e)) from None

    @property
    def category_type(self) -> CategoryType | None:
        """Category type a transaction of this type must reference (None for transfers)."""
        if self is TransactionType.TRANSFER:
            return None
        return CategoryType(self.value)


class TransactionStatus(_ParseableEnum):
    SCHEDULED = "scheduled"
    POSTED = "posted"

    @classmethod
    def parse(cls, value: Any) -> "TransactionStatus":
        try:
            return super().parse(value)
        except ValueError as e:
            raise InvalidTransactionShape(str(e)) from None


class ConfirmMode(_ParseableEnum):
    """What happens to the occurrence date when a scheduled transaction is posted."""

    SCHEDULED_DATE = "scheduled_date"  # keep the planned date
    TODAY = "today"  # move a future date to today


class PeriodKind(_ParseableEnum):
    MONTH = "month"
    WEEK = "week"
    CUSTOM = "custom"


class BudgetStatus(Enum):
    FUTURE = "FUTURE"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _from_iso(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


@dataclass(frozen=True)
class Account:
    """
    A holding of money in one currency.

    ``balance`` is the cached balance. It must always equal the fold of the
    account's posted transactions; only the ledger writers touch it.
    """

    id: int
    owner_id: int
    name: str
    kind: AccountKind
    currency: str
    balance: Money = field(default_factory=Money.zero)
    active: bool = True
    created_at: datetime | None = None

    def __post_init__(self):
        object.__setattr__(self, "kind", AccountKind.parse(self.kind))
        object.__setattr__(self, "currency", normalize_currency_code(self.currency))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "kind": self.kind.value,
            "currency": self.currency,
            "balance": str(self.balance.to_decimal()),
            "active": self.active,
            "created_at": _iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Account":
        return cls(
            id=int(data["id"]),
            owner_id=int(data["owner_id"]),
            name=data.get("name", ""),
            kind=AccountKind.parse(data["kind"]),
            currency=data["currency"],
            balance=Money.from_decimal(str(data.get("balance", "0"))),
            active=bool(data.get("active", True)),
            created_at=_from_iso(data.get("created_at")),
        )


@dataclass(frozen=True)
class Category:
    """
    Classification for income and expense transactions.

    A null owner marks a shared (system) category usable by every owner.
    """

    id: int
    type: CategoryType
    name: str
    owner_id: int | None = None
    icon: str | None = None
    color: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "type", CategoryType.parse(self.type))

    @property
    def is_shared(self) -> bool:
        return self.owner_id is None

    def usable_by(self, owner_id: int) -> bool:
        return self.is_shared or self.owner_id == owner_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "type": self.type.value,
            "name": self.name,
            "icon": self.icon,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Category":
        owner = data.get("owner_id")
        return cls(
            id=int(data["id"]),
            type=CategoryType.parse(data["type"]),
            name=data.get("name", ""),
            owner_id=int(owner) if owner is not None else None,
            icon=data.get("icon"),
            color=data.get("color"),
        )


@dataclass(frozen=True)
class Transaction:
    """
    A financial event in the append-only log.

    Only ``status``, ``confirmed_at`` and (on confirmation "today") the
    occurrence date ever change, and only through the scheduled -> posted
    transition. The id doubles as the creation sequence used to break ties
    between transactions on the same date.
    """

    id: int
    owner_id: int
    source_account_id: int
    amount: Money
    type: TransactionType
    occurred_on: FinancialDate
    status: TransactionStatus
    target_account_id: int | None = None
    category_id: int | None = None
    description: str = ""
    confirmed_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def sequence(self) -> int:
        return self.id

    @property
    def is_posted(self) -> bool:
        return self.status is TransactionStatus.POSTED

    @property
    def is_transfer(self) -> bool:
        return self.type is TransactionType.TRANSFER

    @property
    def account_ids(self) -> tuple[int, ...]:
        """Accounts whose balance this transaction moves."""
        if self.is_transfer and self.target_account_id is not None:
            return (self.source_account_id, self.target_account_id)
        return (self.source_account_id,)

    def touches(self, account_id: int) -> bool:
        return account_id in self.account_ids

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "source_account_id": self.source_account_id,
            "target_account_id": self.target_account_id,
            "category_id": self.category_id,
            "amount": str(self.amount.to_decimal()),
            "type": self.type.value,
            "occurred_on": self.occurred_on.to_iso_string(),
            "status": self.status.value,
            "description": self.description,
            "confirmed_at": _iso(self.confirmed_at),
            "created_at": _iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        target = data.get("target_account_id")
        category = data.get("category_id")
        return cls(
            id=int(data["id"]),
            owner_id=int(data["owner_id"]),
            source_account_id=int(data["source_account_id"]),
            target_account_id=int(target) if target is not None else None,
            category_id=int(category) if category is not None else None,
            amount=Money.from_decimal(str(data["amount"])),
            type=TransactionType.parse(data["type"]),
            occurred_on=FinancialDate.from_string(data["occurred_on"]),
            status=TransactionStatus.parse(data["status"]),
            description=data.get("description") or "",
            confirmed_at=_from_iso(data.get("confirmed_at")),
            created_at=_from_iso(data.get("created_at")),
        )


@dataclass(frozen=True)
class Budget:
    """
    Spending target over a set of expense categories.

    Month and week budgets resolve their window against "now" at query time;
    custom budgets use the stored window. ``rollover`` is recorded but carries
    no arithmetic.
    """

    id: int
    owner_id: int
    name: str
    limit: Money
    currency: str
    period: PeriodKind
    custom_start: FinancialDate | None = None
    custom_end: FinancialDate | None = None
    rollover: bool = False
    active: bool = True
    category_ids: tuple[int, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "period", PeriodKind.parse(self.period))
        object.__setattr__(self, "currency", normalize_currency_code(self.currency))
        object.__setattr__(self, "category_ids", tuple(self.category_ids))

        if self.limit.to_cents() < 0:
            raise ValueError(f"Budget limit must not be negative: {self.limit}")
        if self.period is PeriodKind.CUSTOM:
            if self.custom_start is None or self.custom_end is None:
                raise ValueError("Custom budgets need both a start and an end date")
            if self.custom_start > self.custom_end:
                raise ValueError(f"Budget window starts after it ends: {self.custom_start} > {self.custom_end}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "limit": str(self.limit.to_decimal()),
            "currency": self.currency,
            "period": self.period.value,
            "custom_start": self.custom_start.to_iso_string() if self.custom_start else None,
            "custom_end": self.custom_end.to_iso_string() if self.custom_end else None,
            "rollover": self.rollover,
            "active": self.active,
            "category_ids": list(self.category_ids),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Budget":
        start = data.get("custom_start")
        end = data.get("custom_end")
        return cls(
            id=int(data["id"]),
            owner_id=int(data["owner_id"]),
            name=data.get("name", ""),
            limit=Money.from_decimal(str(data["limit"])),
            currency=data["currency"],
            period=PeriodKind.parse(data["period"]),
            custom_start=FinancialDate.from_string(start) if start else None,
            custom_end=FinancialDate.from_string(end) if end else None,
            rollover=bool(data.get("rollover", False)),
            active=bool(data.get("active", True)),
            category_ids=tuple(int(c) for c in data.get("category_ids", [])),
        )
