#!/usr/bin/env python3
"""
FinancialDate Primitive Type

Immutable date wrapper used for transaction occurrence dates and budget windows.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta


@dataclass(frozen=True)
class FinancialDate:
    """Immutable financial date wrapper with consistent formatting."""

    date: date

    @classmethod
    def from_string(cls, date_str: str, date_format: str = "%Y-%m-%d") -> "FinancialDate":
        """
        Parse from string in specified format.

        Args:
            date_str: Date string to parse
            date_format: Date format (default: ISO format "%Y-%m-%d")

        Returns:
            FinancialDate object

        Raises:
            ValueError: If the string does not match the format
        """
        return cls(date=datetime.strptime(date_str, date_format).date())

    @classmethod
    def coerce(cls, value: "FinancialDate | date | str") -> "FinancialDate":
        """Accept a FinancialDate, a date/datetime or an ISO string."""
        if isinstance(value, FinancialDate):
            return value
        if isinstance(value, datetime):
            return cls(date=value.date())
        if isinstance(value, date):
            return cls(date=value)
        return cls.from_string(value)

    @classmethod
    def today(cls) -> "FinancialDate":
        """Get today's date."""
        return cls(date=date.today())

    def to_iso_string(self) -> str:
        """Format as YYYY-MM-DD."""
        return self.date.isoformat()

    def age_days(self, other: "FinancialDate | None" = None) -> int:
        """
        Calculate days between this date and another (or today).

        Args:
            other: Other date to compare to (default: today)

        Returns:
            Number of days difference
        """
        if other is None:
            other = FinancialDate.today()
        return (other.date - self.date).days

    def month_window(self) -> tuple["FinancialDate", "FinancialDate"]:
        """First and last day of the calendar month containing this date."""
        last_day = calendar.monthrange(self.date.year, self.date.month)[1]
        return (
            FinancialDate(date=self.date.replace(day=1)),
            FinancialDate(date=self.date.replace(day=last_day)),
        )

    def iso_week_window(self) -> tuple["FinancialDate", "FinancialDate"]:
        """Monday and Sunday of the ISO week containing this date."""
        monday = self.date - timedelta(days=self.date.weekday())
        return FinancialDate(date=monday), FinancialDate(date=monday + timedelta(days=6))

    def __str__(self) -> str:
        return self.to_iso_string()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FinancialDate):
            return NotImplemented
        return self.date == other.date

    def __hash__(self) -> int:
        return hash(self.date)

    def __lt__(self, other: "FinancialDate") -> bool:
        return self.date < other.date

    def __le__(self, other: "FinancialDate") -> bool:
        return self.date <= other.date

    def __gt__(self, other: "FinancialDate") -> bool:
        return self.date > other.date

    def __ge__(self, other: "FinancialDate") -> bool:
        return self.date >= other.date

    def __repr__(self) -> str:
        return f"FinancialDate(date={self.date!r})"
