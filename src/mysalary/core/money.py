#!/usr/bin/env python3
"""
Money Primitive Type

Immutable fixed-point amount with two fraction digits, stored as integer cents.
Balances, transaction amounts and budget limits all flow through this type so
that no ledger arithmetic ever touches floating point.
"""

from dataclasses import dataclass
from decimal import Decimal

from .currency import cents_to_decimal, decimal_to_cents, format_cents, parse_amount_to_cents


@dataclass(frozen=True)
class Money:
    """
    Immutable money value in cents (minor units of the account currency).

    The value is currency-agnostic: the currency lives on the account or budget
    that owns the amount. Supports signed values since cached balances of credit
    accounts legitimately go negative.

    Examples:
        >>> income = Money.from_decimal("1000")
        >>> expense = Money.from_decimal("200.50")
        >>> str(income - expense)
        '799.50'
        >>> (expense - income).to_decimal()
        Decimal('-799.50')
    """

    cents: int

    @classmethod
    def zero(cls) -> "Money":
        """Create a zero amount."""
        return cls(cents=0)

    @classmethod
    def from_cents(cls, cents: int) -> "Money":
        """Create Money from cents."""
        return cls(cents=int(cents))

    @classmethod
    def from_decimal(cls, value: Decimal | str | int) -> "Money":
        """
        Create Money from a decimal amount, rounding half-up to two places.

        Args:
            value: Decimal, numeric string like "12.34" / "$1,234.5", or integer units

        Returns:
            Money object

        Raises:
            ValueError: If the value cannot be parsed as an amount
        """
        if isinstance(value, bool):
            raise ValueError(f"Not an amount: {value!r}")
        if isinstance(value, int):
            return cls(cents=value * 100)
        if isinstance(value, Decimal):
            return cls(cents=decimal_to_cents(value))
        return cls(cents=parse_amount_to_cents(value))

    def to_cents(self) -> int:
        """Get value in cents."""
        return self.cents

    def to_decimal(self) -> Decimal:
        """Get value as a two-place Decimal."""
        return cents_to_decimal(self.cents)

    def format(self, currency: str | None = None) -> str:
        """Format with an optional currency code suffix."""
        return format_cents(self.cents, currency)

    def is_positive(self) -> bool:
        return self.cents > 0

    def is_zero(self) -> bool:
        return self.cents == 0

    def abs(self) -> "Money":
        """Return absolute value of Money."""
        return Money(cents=abs(self.cents))

    def __neg__(self) -> "Money":
        return Money(cents=-self.cents)

    def __add__(self, other: "Money") -> "Money":
        """Add two Money objects."""
        return Money(cents=self.cents + other.cents)

    def __sub__(self, other: "Money") -> "Money":
        """Subtract two Money objects."""
        return Money(cents=self.cents - other.cents)

    def __mul__(self, scalar: int) -> "Money":
        """Multiply Money by integer scalar."""
        return Money(cents=self.cents * scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.cents == other.cents

    def __hash__(self) -> int:
        return hash(self.cents)

    def __lt__(self, other: "Money") -> bool:
        return self.cents < other.cents

    def __le__(self, other: "Money") -> bool:
        return self.cents <= other.cents

    def __gt__(self, other: "Money") -> bool:
        return self.cents > other.cents

    def __ge__(self, other: "Money") -> bool:
        return self.cents >= other.cents

    def __str__(self) -> str:
        """Format as plain two-place amount."""
        return format_cents(self.cents)

    def __repr__(self) -> str:
        return f"Money(cents={self.cents})"
