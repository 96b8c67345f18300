#!/usr/bin/env python3
"""
Account Statement Module

Audit output of the balance fold: the running-balance trail of one account as a
pandas DataFrame, plus a monthly summary of inflow, outflow, net change and
closing balance. All amounts stay in integer cents.
"""

import logging

import pandas as pd

from ..ledger.calculator import balance_trail
from ..ledger.store import LedgerStore

logger = logging.getLogger(__name__)

TRAIL_COLUMNS = ["Transaction", "Type", "Leg", "Delta", "Balance"]
MONTHLY_COLUMNS = ["Inflow", "Outflow", "Net_Change", "End_Balance"]


class AccountStatement:
    """
    Running-balance statement for one account.

    Usage:
        statement = AccountStatement(store, account_id=3)
        statement.load()
        print(statement.trail_df.tail())
        print(statement.monthly_df)
    """

    def __init__(self, store: LedgerStore, account_id: int):
        self.store = store
        self.account_id = account_id
        self.trail_df: pd.DataFrame | None = None
        self.monthly_df: pd.DataFrame | None = None

    def load(self) -> None:
        """Fold the account's posted transactions and build both frames."""
        account = self.store.require_account(self.account_id)
        steps = balance_trail(account.id, self.store.transactions_for_account(account.id))

        df_data = [
            {
                "Date": pd.to_datetime(step.occurred_on.date),
                "Transaction": step.transaction_id,
                "Type": step.type.value,
                "Leg": step.leg,
                "Delta": step.delta.to_cents(),
                "Balance": step.balance.to_cents(),
            }
            for step in steps
        ]

        if df_data:
            self.trail_df = pd.DataFrame(df_data).set_index("Date")
        else:
            self.trail_df = pd.DataFrame(columns=TRAIL_COLUMNS, index=pd.DatetimeIndex([], name="Date"))

        self._calculate_monthly_aggregates()
        logger.debug(f"Statement for account {self.account_id}: {len(self.trail_df)} legs")

    def _calculate_monthly_aggregates(self) -> None:
        """Calculate monthly inflow/outflow/net and closing balance."""
        if self.trail_df is None:
            raise RuntimeError("Statement not loaded. Call load() first.")

        if self.trail_df.empty:
            self.monthly_df = pd.DataFrame(columns=MONTHLY_COLUMNS, index=pd.DatetimeIndex([], name="Date"))
            return

        delta = self.trail_df["Delta"]
        frame = pd.DataFrame(
            {
                "Inflow": delta.clip(lower=0),
                "Outflow": -delta.clip(upper=0),
                "Net_Change": delta,
                "Balance": self.trail_df["Balance"],
            }
        )
        monthly = frame.resample("ME").agg(
            {"Inflow": "sum", "Outflow": "sum", "Net_Change": "sum", "Balance": "last"}
        )
        # Months without activity carry the previous closing balance
        monthly["Balance"] = monthly["Balance"].ffill()
        monthly.columns = MONTHLY_COLUMNS
        self.monthly_df = monthly.astype("int64")

    def closing_balance_cents(self) -> int:
        if self.trail_df is None:
            raise RuntimeError("Statement not loaded. Call load() first.")
        if self.trail_df.empty:
            return 0
        return int(self.trail_df["Balance"].iloc[-1])
