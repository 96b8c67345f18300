#!/usr/bin/env python3
"""
Budgets CLI - Budget Creation and Progress

Commands for defining spending budgets over expense categories and reporting
how much of each budget has been spent in its current window.
"""

import click

from ..core.dates import FinancialDate
from ..core.json_utils import format_json
from ..core.models import PeriodKind
from ..core.money import Money
from .common import get_service, ledger_errors


def _parse_date(value: str | None, option: str) -> FinancialDate | None:
    if value is None:
        return None
    try:
        return FinancialDate.from_string(value)
    except ValueError as e:
        raise click.ClickException(f"Invalid {option} date: {value}. Use YYYY-MM-DD") from e


@click.group()
def budgets() -> None:
    """Budget commands."""
    pass


@budgets.command("add")
@click.option("--owner", "owner_id", type=int, required=True, help="Owner id")
@click.option("--name", required=True, help="Display name")
@click.option("--limit", "limit_amount", required=True, help="Spending limit, e.g. 500")
@click.option("--period", type=click.Choice([p.value for p in PeriodKind]), default="month", show_default=True)
@click.option("--category", "category_ids", type=int, multiple=True, help="Linked expense category (repeatable)")
@click.option("--currency", help="Budget currency (default: DEFAULT_CURRENCY)")
@click.option("--start", help="Custom window start (YYYY-MM-DD)")
@click.option("--end", help="Custom window end (YYYY-MM-DD)")
@click.option("--rollover", is_flag=True, help="Mark the budget as rolling over")
@click.pass_context
def add_budget(
    ctx: click.Context,
    owner_id: int,
    name: str,
    limit_amount: str,
    period: str,
    category_ids: tuple,
    currency: str | None,
    start: str | None,
    end: str | None,
    rollover: bool,
) -> None:
    """
    Create a budget linked to expense categories.

    Examples:
      mysalary budgets add --owner 1 --name Food --limit 500 --category 2
      mysalary budgets add --owner 1 --name Trip --limit 900 --period custom --start 2025-07-01 --end 2025-07-14
    """
    service = get_service(ctx)
    custom_start = _parse_date(start, "start")
    custom_end = _parse_date(end, "end")

    with ledger_errors():
        try:
            budget = service.store.add_budget(
                owner_id,
                name,
                Money.from_decimal(limit_amount),
                currency or service.default_currency,
                period,
                category_ids=category_ids,
                custom_start=custom_start,
                custom_end=custom_end,
                rollover=rollover,
            )
        except ValueError as e:
            raise click.ClickException(str(e)) from e

    click.echo(
        f"Created budget {budget.id}: {budget.name} "
        f"({budget.limit.format(budget.currency)} per {budget.period.value}, {len(budget.category_ids)} categories)"
    )


@budgets.command("progress")
@click.argument("budget_id", type=int)
@click.option("--owner", "owner_id", type=int, help="Require the budget to belong to this owner")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
@click.pass_context
def budget_progress(ctx: click.Context, budget_id: int, owner_id: int | None, as_json: bool) -> None:
    """Show spent, remaining and percentage for a budget's current window."""
    service = get_service(ctx)
    with ledger_errors():
        budget = service.store.require_budget(budget_id)
        progress = service.get_budget_progress(budget_id, owner_id=owner_id)

    if as_json:
        click.echo(format_json(progress.to_dict()))
        return

    click.echo(f"{budget.name} ({progress.window_start} to {progress.window_end}) [{progress.status.value}]")
    click.echo(f"  Limit:     {progress.limit.format(progress.currency)}")
    click.echo(f"  Spent:     {progress.spent.format(progress.currency)} ({progress.percentage}%)")
    click.echo(f"  Remaining: {progress.remaining.format(progress.currency)}")
    if progress.is_overspent:
        click.echo("  ⚠️  Over budget")
