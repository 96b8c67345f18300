#!/usr/bin/env python3
"""
Reconcile CLI - Balance Integrity Checks

Recomputes every balance in scope from the transaction log and reports drift.
Corrections are written only with --fix.
"""

import time

import click

from ..core.json_utils import format_json
from ..ledger.reconciliation import ReconciliationReport, ReconciliationScheduler, ReconciliationScope
from .common import get_service, ledger_errors


def _echo_report(report: ReconciliationReport) -> None:
    click.echo(f"Reconciliation ({report.scope.describe()}, {'fix' if report.fix else 'report'} mode)")
    click.echo("=" * 60)

    for mismatch in report.mismatches:
        click.echo(
            f"⚠️  Account {mismatch.account_id} (owner {mismatch.owner_id}): "
            f"cached {mismatch.cached.format(mismatch.currency)}, "
            f"computed {mismatch.computed.format(mismatch.currency)}, delta {mismatch.delta}"
        )
        click.echo(f"    {mismatch.posted_count} posted, {mismatch.scheduled_count} scheduled transactions")

    for correction in report.corrections:
        click.echo(f"✅ Account {correction.account_id} corrected: {correction.previous} -> {correction.corrected}")

    for orphan in report.orphans:
        click.echo(
            f"⚠️  Transaction {orphan.transaction_id} references missing "
            f"{orphan.role} account {orphan.missing_account_id}"
        )

    click.echo(f"\n{'-' * 60}")
    click.echo(f"Accounts checked: {report.accounts_checked}")
    click.echo(f"Mismatched: {len(report.mismatches)}")
    click.echo(f"Total discrepancy: {report.total_discrepancy}")
    if report.fix:
        click.echo(f"Corrected: {len(report.corrections)}")
    if report.orphans:
        click.echo(f"Orphaned transactions: {len(report.orphans)}")
    if report.is_clean:
        click.echo("✅ All balances match the transaction log")


@click.command()
@click.option("--owner", "owner_id", type=int, help="Only this owner's accounts")
@click.option("--account", "account_ids", type=int, multiple=True, help="Only these accounts (repeatable)")
@click.option("--fix", is_flag=True, help="Overwrite drifted cached balances with the recomputed value")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.option("--watch", is_flag=True, help="Keep running on a schedule until interrupted")
@click.option("--interval", type=float, help="Seconds between runs with --watch (default: RECONCILE_INTERVAL)")
@click.pass_context
def reconcile(
    ctx: click.Context,
    owner_id: int | None,
    account_ids: tuple,
    fix: bool,
    as_json: bool,
    watch: bool,
    interval: float | None,
) -> None:
    """
    Check cached balances against the transaction log.

    Examples:
      mysalary reconcile
      mysalary reconcile --owner 1 --json
      mysalary reconcile --account 3 --account 4 --fix
      mysalary reconcile --watch --interval 300
    """
    if owner_id is not None and account_ids:
        raise click.ClickException("Use either --owner or --account, not both")

    if account_ids:
        scope = ReconciliationScope.for_accounts(account_ids)
    elif owner_id is not None:
        scope = ReconciliationScope.for_owner(owner_id)
    else:
        scope = ReconciliationScope.all()

    service = get_service(ctx)
    show = (lambda r: click.echo(format_json(r.to_dict()))) if as_json else _echo_report

    if not watch:
        with ledger_errors():
            report = service.validate_integrity(scope, fix=fix)
        show(report)
        return

    config = ctx.obj["config"]
    seconds = interval if interval is not None else config.reconciliation.interval_seconds
    if not seconds or seconds <= 0:
        raise click.ClickException("--watch needs a positive --interval or RECONCILE_INTERVAL")

    scheduler = ReconciliationScheduler(
        service.validator, seconds, scope=scope, fix=fix or config.reconciliation.fix, on_report=show
    )
    click.echo(f"Reconciling every {seconds}s; press Ctrl+C to stop")
    show(scheduler.run_once())
    scheduler.start()
    try:
        while scheduler.is_running:
            time.sleep(1)
    except KeyboardInterrupt:
        click.echo("\nStopping")
    finally:
        scheduler.stop()
