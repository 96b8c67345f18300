#!/usr/bin/env python3
"""
Net Worth Calculation

Values an owner's active accounts in one primary currency using an injected
rate lookup. Cached balances are used as-is; run reconciliation first if they
are in doubt.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from ..core.currency import RateLookup, RateNotAvailable, convert_cents, normalize_currency_code
from ..core.errors import CurrencyMismatch
from ..core.money import Money
from ..ledger.store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountValuation:
    account_id: int
    name: str
    currency: str
    balance: Money
    rate: Decimal
    converted: Money

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "name": self.name,
            "currency": self.currency,
            "balance": str(self.balance.to_decimal()),
            "rate": str(self.rate),
            "converted": str(self.converted.to_decimal()),
        }


@dataclass
class NetWorthSummary:
    owner_id: int
    currency: str
    accounts: list[AccountValuation] = field(default_factory=list)

    @property
    def total(self) -> Money:
        return sum((a.converted for a in self.accounts), Money.zero())

    def to_dict(self) -> dict[str, Any]:
        return {
            "owner_id": self.owner_id,
            "currency": self.currency,
            "total": str(self.total.to_decimal()),
            "accounts": [a.to_dict() for a in self.accounts],
        }


class NetWorthCalculator:
    """Sums active account balances converted into a primary currency."""

    def __init__(self, store: LedgerStore, rate_lookup: RateLookup | None = None):
        self.store = store
        self.rate_lookup = rate_lookup

    def calculate(self, owner_id: int, currency: str) -> NetWorthSummary:
        """
        Value every active account of an owner.

        Raises:
            CurrencyMismatch: An account currency has no rate into ``currency``
        """
        primary = normalize_currency_code(currency)
        summary = NetWorthSummary(owner_id=owner_id, currency=primary)

        for account in self.store.accounts(owner_id=owner_id, active_only=True):
            rate = self._rate(account.currency, primary)
            converted = account.balance if rate == 1 else Money.from_cents(convert_cents(account.balance.to_cents(), rate))
            summary.accounts.append(
                AccountValuation(
                    account_id=account.id,
                    name=account.name,
                    currency=account.currency,
                    balance=account.balance,
                    rate=rate,
                    converted=converted,
                )
            )

        logger.info(f"Net worth for owner {owner_id}: {summary.total.format(primary)} over {len(summary.accounts)} accounts")
        return summary

    def _rate(self, source: str, target: str) -> Decimal:
        if source == target:
            return Decimal(1)
        if self.rate_lookup is None:
            raise CurrencyMismatch(f"No rate lookup to value {source} accounts in {target}")
        try:
            return self.rate_lookup(source, target)
        except RateNotAvailable as e:
            raise CurrencyMismatch(str(e)) from e
