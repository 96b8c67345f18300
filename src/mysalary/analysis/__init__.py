"""
Analysis Package

Reporting on top of the ledger: account statements and net worth.
"""

from .net_worth import AccountValuation, NetWorthCalculator, NetWorthSummary
from .statement import AccountStatement

__all__ = [
    "AccountStatement",
    "AccountValuation",
    "NetWorthCalculator",
    "NetWorthSummary",
]
