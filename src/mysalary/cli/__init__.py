"""
Command Line Interface Package

Operator CLI for the ledger (``mysalary``).

Command Structure:
- mysalary: entry point with utility commands (version, config, status)
- mysalary accounts / categories / transactions: ledger records and write paths
- mysalary budgets: budget creation and progress
- mysalary reconcile: balance integrity checks, optionally on a schedule
- mysalary networth / statement: reporting
"""

from .main import main

__all__ = ["main"]
