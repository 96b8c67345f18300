#!/usr/bin/env python3
"""
Currency Conversion and Handling Utilities

Amount handling for the MySalary ledger. Every stored amount is an integer number
of cents (two fraction digits); Decimal is used at the edges for parsing,
display and rate conversion.

Key Principles:
- Never use floating-point arithmetic for ledger amounts
- Round half-up to two places whenever a Decimal becomes cents
- Currency conversion is an injected lookup, never fetched by the core
"""

import logging
from collections.abc import Callable, Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# (from_currency, to_currency) -> multiplier such that amount_to = amount_from * rate
RateLookup = Callable[[str, str], Decimal]


class RateNotAvailable(LookupError):
    """Raised when a rate lookup has no rate for a currency pair."""

    pass


def decimal_to_cents(value: Decimal) -> int:
    """
    Convert a Decimal amount to integer cents, rounding half-up.

    Example:
        decimal_to_cents(Decimal("12.345")) -> 1235
    """
    if not value.is_finite():
        raise ValueError(f"Not a finite amount: {value}")
    return int((value.quantize(CENT, rounding=ROUND_HALF_UP) * 100).to_integral_value())


def cents_to_decimal(cents: int) -> Decimal:
    """
    Convert integer cents to a two-place Decimal.

    Example:
        cents_to_decimal(-4599) -> Decimal("-45.99")
    """
    return (Decimal(int(cents)) / 100).quantize(CENT)


def parse_amount_to_cents(amount_str: str) -> int:
    """
    Parse an amount string to cents.

    Accepts an optional leading sign, a currency symbol and thousands separators.

    Examples:
        parse_amount_to_cents("12.34") -> 1234
        parse_amount_to_cents("$1,234.5") -> 123450
        parse_amount_to_cents("-7") -> -700

    Raises:
        ValueError: If the string is empty or not a number
    """
    clean = str(amount_str).replace("$", "").replace(",", "").replace(" ", "").strip()
    if not clean:
        raise ValueError("Empty amount")
    try:
        return decimal_to_cents(Decimal(clean))
    except InvalidOperation as e:
        raise ValueError(f"Not an amount: {amount_str!r}") from e


def format_cents(cents: int, currency: str | None = None) -> str:
    """
    Format cents as a plain two-place amount, optionally followed by a currency code.

    Example:
        format_cents(123456, "EUR") -> "1234.56 EUR"
    """
    text = str(cents_to_decimal(cents))
    if currency:
        return f"{text} {currency}"
    return text


def normalize_currency_code(code: str) -> str:
    """
    Normalize an ISO-4217 style currency code.

    Raises:
        ValueError: If the code is not three letters
    """
    normalized = code.strip().upper() if isinstance(code, str) else ""
    if len(normalized) != 3 or not normalized.isalpha():
        raise ValueError(f"Invalid currency code: {code!r}")
    return normalized


def convert_cents(cents: int, rate: Decimal) -> int:
    """Apply a conversion rate to cents, rounding half-up."""
    return decimal_to_cents(cents_to_decimal(cents) * rate)


class StaticRates:
    """
    Cross-rate table relative to a single base currency.

    ``rates[code]`` is how many units of ``code`` one unit of ``base`` buys,
    so ``rate(a, b) == rates[b] / rates[a]``. Instances are callable and can be
    injected anywhere a ``RateLookup`` is expected.
    """

    def __init__(self, base: str, rates: Mapping[str, Decimal | str | int | float]):
        self.base = normalize_currency_code(base)
        self.rates: dict[str, Decimal] = {self.base: Decimal(1)}
        for code, value in rates.items():
            try:
                rate = Decimal(str(value))
            except InvalidOperation as e:
                raise ValueError(f"Rate for {code} is not a number: {value!r}") from e
            if not rate.is_finite() or rate <= 0:
                raise ValueError(f"Rate for {code} must be positive, got {value}")
            self.rates[normalize_currency_code(code)] = rate

    @classmethod
    def from_yaml(cls, path: Path) -> "StaticRates":
        """
        Load a rate table from YAML.

        Expected layout::

            base: USD
            rates:
              EUR: 0.85
              GBP: "0.73"

        Raises:
            ValueError: If the file is not valid YAML or not laid out as above
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Rate file {path} is not valid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Rate file {path} must be a mapping with 'base' and 'rates'")
        if "base" not in data:
            raise ValueError(f"Rate file {path} has no 'base' currency")
        rates = data.get("rates") or {}
        if not isinstance(rates, dict):
            raise ValueError(f"Rate file {path}: 'rates' must map currency codes to rates")

        table = cls(base=data["base"], rates=rates)
        logger.debug(f"Loaded {len(table.rates)} rates from {path}")
        return table

    def rate(self, from_currency: str, to_currency: str) -> Decimal:
        """Get the multiplier converting ``from_currency`` amounts to ``to_currency``."""
        source = normalize_currency_code(from_currency)
        target = normalize_currency_code(to_currency)
        if source == target:
            return Decimal(1)
        if source not in self.rates or target not in self.rates:
            raise RateNotAvailable(f"No rate for {source} -> {target}")
        return self.rates[target] / self.rates[source]

    def __call__(self, from_currency: str, to_currency: str) -> Decimal:
        return self.rate(from_currency, to_currency)
