#!/usr/bin/env python3
"""
Analysis CLI - Net Worth and Account Statements
"""

import click

from ..analysis import AccountStatement
from ..core.currency import format_cents
from ..core.json_utils import format_json
from .common import get_service, ledger_errors


@click.command()
@click.option("--owner", "owner_id", type=int, required=True, help="Owner id")
@click.option("--currency", help="Primary currency (default: DEFAULT_CURRENCY)")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
@click.pass_context
def networth(ctx: click.Context, owner_id: int, currency: str | None, as_json: bool) -> None:
    """
    Show an owner's net worth across active accounts.

    Accounts in other currencies are converted with rates.yaml in the data directory.
    """
    with ledger_errors():
        try:
            summary = get_service(ctx).net_worth(owner_id, currency)
        except ValueError as e:
            raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(format_json(summary.to_dict()))
        return

    click.echo(f"Net Worth (owner {owner_id}, {summary.currency})")
    click.echo("=" * 60)
    for row in summary.accounts:
        line = f"  {row.name:<24} {row.balance.format(row.currency):>18}"
        if row.currency != summary.currency:
            line += f"  = {row.converted.format(summary.currency)} @ {row.rate}"
        click.echo(line)
    click.echo(f"{'-' * 60}")
    click.echo(f"Total: {summary.total.format(summary.currency)}")


@click.command()
@click.argument("account_id", type=int)
@click.option("--monthly", is_flag=True, help="Show the monthly summary instead of every leg")
@click.pass_context
def statement(ctx: click.Context, account_id: int, monthly: bool) -> None:
    """Show the running-balance trail of an account."""
    service = get_service(ctx)
    with ledger_errors():
        account = service.store.require_account(account_id)
        report = AccountStatement(service.store, account_id)
        report.load()

    click.echo(f"Statement: {account.name} ({account.currency})")
    click.echo("=" * 60)

    if monthly:
        if report.monthly_df.empty:
            click.echo("No posted transactions.")
        for month, row in report.monthly_df.iterrows():
            click.echo(
                f"  {month:%Y-%m}  in {format_cents(row['Inflow']):>12}  out {format_cents(row['Outflow']):>12}  "
                f"net {format_cents(row['Net_Change']):>12}  balance {format_cents(row['End_Balance']):>12}"
            )
    else:
        if report.trail_df.empty:
            click.echo("No posted transactions.")
        for day, row in report.trail_df.iterrows():
            click.echo(
                f"  {day:%Y-%m-%d}  #{row['Transaction']:<5} {row['Leg']:<13} "
                f"{format_cents(row['Delta']):>12}  {format_cents(row['Balance']):>12}"
            )

    click.echo(f"{'-' * 60}")
    click.echo(f"Closing balance: {format_cents(report.closing_balance_cents())}")
    if report.closing_balance_cents() != account.balance.to_cents():
        click.echo(f"⚠️  Cached balance is {account.balance}; run 'mysalary reconcile --account {account_id}'")
