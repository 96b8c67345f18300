#!/usr/bin/env python3
"""
Unit tests for currency utilities.

Covers cent conversion, amount parsing and the static rate table.
"""

import tempfile
from decimal import Decimal
from pathlib import Path

import pytest
import yaml

from mysalary.core.currency import (
    RateNotAvailable,
    StaticRates,
    cents_to_decimal,
    convert_cents,
    decimal_to_cents,
    format_cents,
    normalize_currency_code,
    parse_amount_to_cents,
)


@pytest.mark.currency
class TestCentConversion:
    """Test Decimal <-> cents conversion."""

    def test_decimal_to_cents_rounds_half_up(self):
        assert decimal_to_cents(Decimal("12.345")) == 1235
        assert decimal_to_cents(Decimal("-12.345")) == -1235
        assert decimal_to_cents(Decimal("0.004")) == 0

    def test_decimal_to_cents_rejects_non_finite(self):
        with pytest.raises(ValueError):
            decimal_to_cents(Decimal("NaN"))
        with pytest.raises(ValueError):
            decimal_to_cents(Decimal("Infinity"))

    def test_cents_to_decimal(self):
        assert cents_to_decimal(-4599) == Decimal("-45.99")
        assert str(cents_to_decimal(100)) == "1.00"


@pytest.mark.currency
class TestAmountParsing:
    """Test parsing amount strings."""

    @pytest.mark.parametrize(
        "text,cents",
        [("12.34", 1234), ("$1,234.5", 123450), ("-7", -700), (" 0.10 ", 10)],
    )
    def test_parse_amount_to_cents(self, text, cents):
        assert parse_amount_to_cents(text) == cents

    @pytest.mark.parametrize("text", ["", "   ", "twelve", "1,2,3.4.5"])
    def test_parse_amount_rejects_garbage(self, text):
        with pytest.raises(ValueError):
            parse_amount_to_cents(text)

    def test_format_cents(self):
        assert format_cents(123456) == "1234.56"
        assert format_cents(123456, "EUR") == "1234.56 EUR"


@pytest.mark.currency
class TestCurrencyCodes:
    """Test currency code normalization."""

    def test_normalize_uppercases(self):
        assert normalize_currency_code(" eur ") == "EUR"

    @pytest.mark.parametrize("code", ["", "EU", "EURO", "12A", None])
    def test_normalize_rejects_bad_codes(self, code):
        with pytest.raises(ValueError):
            normalize_currency_code(code)


@pytest.mark.currency
class TestStaticRates:
    """Test StaticRates cross-rate lookup."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.rates = StaticRates("USD", {"EUR": "0.80", "GBP": Decimal("0.50")})

    def teardown_method(self):
        """Clean up test fixtures."""
        import shutil

        shutil.rmtree(self.temp_dir)

    def test_same_currency_is_one(self):
        assert self.rates("EUR", "EUR") == Decimal(1)

    def test_base_to_other(self):
        assert self.rates("USD", "EUR") == Decimal("0.80")

    def test_cross_rate(self):
        # 1 EUR = 1.25 USD = 0.625 GBP
        assert self.rates.rate("EUR", "GBP") == Decimal("0.625")

    def test_unknown_currency_raises(self):
        with pytest.raises(RateNotAvailable):
            self.rates("USD", "JPY")

    def test_non_positive_rate_rejected(self):
        with pytest.raises(ValueError):
            StaticRates("USD", {"EUR": 0})

    def test_convert_cents_rounds(self):
        assert convert_cents(1000, self.rates("EUR", "USD")) == 1250
        assert convert_cents(333, Decimal("0.5")) == 167

    def test_from_yaml(self):
        """Test loading a rate table from YAML."""
        rates_file = self.temp_dir / "rates.yaml"
        rates_file.write_text(yaml.safe_dump({"base": "usd", "rates": {"EUR": "0.85", "GBP": 0.73}}))

        rates = StaticRates.from_yaml(rates_file)
        assert rates.base == "USD"
        assert rates("USD", "EUR") == Decimal("0.85")
        assert rates("USD", "GBP") == Decimal("0.73")

    def test_from_yaml_requires_base(self):
        rates_file = self.temp_dir / "rates.yaml"
        rates_file.write_text(yaml.safe_dump({"rates": {"EUR": 1}}))

        with pytest.raises(ValueError):
            StaticRates.from_yaml(rates_file)

    @pytest.mark.parametrize(
        "content",
        [
            "base: USD\nrates: {EUR: [0.85\n",  # unterminated flow sequence
            "just a string\n",
            "- USD\n- EUR\n",
            "base: USD\nrates:\n  - EUR\n",
            "base: USD\nrates:\n  EUR: lots\n",
            "base: 840\nrates: {}\n",
            "base: USD\nrates:\n  1: 0.5\n",
        ],
    )
    def test_from_yaml_malformed_is_value_error(self, content):
        rates_file = self.temp_dir / "rates.yaml"
        rates_file.write_text(content)

        with pytest.raises(ValueError):
            StaticRates.from_yaml(rates_file)

    def test_from_yaml_empty_file_requires_base(self):
        rates_file = self.temp_dir / "rates.yaml"
        rates_file.write_text("")

        with pytest.raises(ValueError, match="base"):
            StaticRates.from_yaml(rates_file)
