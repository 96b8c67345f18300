#!/usr/bin/env python3
"""Tests for FinancialDate primitive type."""

from datetime import date, datetime

import pytest

from mysalary.core.dates import FinancialDate


class TestFinancialDateConstruction:
    """Test FinancialDate construction."""

    @pytest.mark.parametrize(
        "constructor,expected_date",
        [
            (lambda: FinancialDate(date=date(2024, 1, 15)), date(2024, 1, 15)),
            (lambda: FinancialDate.from_string("2024-01-15"), date(2024, 1, 15)),
            (lambda: FinancialDate.from_string("01/15/2024", date_format="%m/%d/%Y"), date(2024, 1, 15)),
            (lambda: FinancialDate.coerce(datetime(2024, 1, 15, 23, 59)), date(2024, 1, 15)),
            (lambda: FinancialDate.coerce(date(2024, 1, 15)), date(2024, 1, 15)),
            (lambda: FinancialDate.coerce("2024-01-15"), date(2024, 1, 15)),
        ],
        ids=["from_date", "from_string", "from_string_custom_format", "coerce_datetime", "coerce_date", "coerce_str"],
    )
    def test_financial_date_construction(self, constructor, expected_date):
        """Test FinancialDate construction from various sources."""
        assert constructor().date == expected_date

    def test_invalid_string_raises(self):
        with pytest.raises(ValueError):
            FinancialDate.from_string("2024-13-01")

    def test_today(self):
        """Test creating today's date."""
        assert FinancialDate.today().date == date.today()


class TestFinancialDateWindows:
    """Test month and week window helpers."""

    def test_month_window(self):
        start, end = FinancialDate(date=date(2024, 2, 10)).month_window()
        assert start.date == date(2024, 2, 1)
        assert end.date == date(2024, 2, 29)  # leap year

    def test_month_window_december(self):
        start, end = FinancialDate(date=date(2024, 12, 31)).month_window()
        assert (start.date, end.date) == (date(2024, 12, 1), date(2024, 12, 31))

    @pytest.mark.parametrize(
        "day,monday,sunday",
        [
            (date(2025, 3, 14), date(2025, 3, 10), date(2025, 3, 16)),  # Friday
            (date(2025, 3, 10), date(2025, 3, 10), date(2025, 3, 16)),  # Monday
            (date(2025, 3, 16), date(2025, 3, 10), date(2025, 3, 16)),  # Sunday
            (date(2025, 1, 1), date(2024, 12, 30), date(2025, 1, 5)),  # crosses the year
        ],
    )
    def test_iso_week_window_is_monday_to_sunday(self, day, monday, sunday):
        start, end = FinancialDate(date=day).iso_week_window()
        assert start.date == monday
        assert end.date == sunday


class TestFinancialDateComparison:
    """Test FinancialDate ordering and formatting."""

    def test_ordering(self):
        early = FinancialDate.from_string("2024-01-01")
        late = FinancialDate.from_string("2024-06-01")

        assert early < late
        assert late >= early
        assert early == FinancialDate(date=date(2024, 1, 1))
        assert early <= late <= late

    def test_iso_string(self):
        fd = FinancialDate(date=date(2024, 7, 4))
        assert fd.to_iso_string() == "2024-07-04"
        assert str(fd) == "2024-07-04"

    def test_age_days(self):
        fd = FinancialDate(date=date(2024, 1, 1))
        assert fd.age_days(FinancialDate(date=date(2024, 1, 31))) == 30
