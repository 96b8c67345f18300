"""
Budgets Package

Budget progress over month, week and custom windows.
"""

from .progress import BudgetProgress, BudgetProgressAggregator, resolve_window, spent_percentage

__all__ = [
    "BudgetProgress",
    "BudgetProgressAggregator",
    "resolve_window",
    "spent_percentage",
]
