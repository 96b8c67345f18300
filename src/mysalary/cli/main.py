#!/usr/bin/env python3
"""
Main CLI Entry Point for the MySalary Ledger

Operator command-line interface for accounts, transactions, budgets and
balance reconciliation.
"""

import logging
import os

import click

from ..core.config import get_config, reload_config
from .common import get_service


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    MySalary Ledger - account balances from a transaction log

    Record income, expenses and transfers, confirm scheduled transactions,
    track budgets and reconcile cached balances.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["MYSALARY_ENV"] = config_env
    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"

    try:
        config_obj = reload_config() if (config_env or debug) else get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("mysalary").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config_obj

    if verbose:
        click.echo(f"Environment: {config_obj.environment.value}")
        click.echo(f"Data directory: {config_obj.data_dir}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
def version() -> None:
    """Show version information."""
    from mysalary import __author__, __version__

    click.echo(f"MySalary Ledger v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    config_obj = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  Data Directory: {config_obj.data_dir}")
    click.echo(f"  Ledger File: {config_obj.ledger.ledger_file}")
    click.echo(f"  Rates File: {config_obj.ledger.rates_file}")
    click.echo(f"  Default Currency: {config_obj.ledger.default_currency}")
    click.echo(f"  Lock Timeout: {config_obj.ledger.lock_timeout_seconds}s")
    click.echo(f"  Reconcile Tolerance: {config_obj.reconciliation.tolerance}")
    click.echo(f"  Reconcile Interval: {config_obj.reconciliation.interval_seconds}s")
    click.echo(f"  Reconcile Fix: {config_obj.reconciliation.fix}")
    click.echo(f"  Debug Mode: {config_obj.debug}")
    click.echo(f"  Log Level: {config_obj.log_level}")


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show ledger file status."""
    store = get_service(ctx).store

    click.echo(f"Ledger: {store.ledger_file}")
    click.echo(f"  {store.summary_text()}")
    if store.exists():
        click.echo(f"  Size: {store.size_bytes()} bytes")
        click.echo(f"  Last modified: {store.last_modified():%Y-%m-%d %H:%M:%S} ({store.age_days()} days ago)")


from .analysis import networth, statement  # noqa: E402
from .budgets import budgets  # noqa: E402
from .ledger import accounts, categories, transactions  # noqa: E402
from .reconcile import reconcile  # noqa: E402

main.add_command(accounts)
main.add_command(categories)
main.add_command(transactions)
main.add_command(budgets)
main.add_command(reconcile)
main.add_command(networth)
main.add_command(statement)


if __name__ == "__main__":
    main()
