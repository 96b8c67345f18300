#!/usr/bin/env python3
"""
Ledger CLI - Accounts, Categories and Transactions

Operator commands driving the admin surface and the two balance-moving write
paths (transaction creation and confirmation).
"""

import click

from ..core.json_utils import format_json
from ..core.models import AccountKind, CategoryType, ConfirmMode, TransactionStatus, TransactionType
from .common import get_service, ledger_errors


@click.group()
def accounts() -> None:
    """Account management commands."""
    pass


@accounts.command("add")
@click.option("--owner", "owner_id", type=int, required=True, help="Owner id")
@click.option("--name", required=True, help="Display name")
@click.option("--kind", type=click.Choice([k.value for k in AccountKind]), default="bank_account", show_default=True)
@click.option("--currency", help="Currency code (default: DEFAULT_CURRENCY)")
@click.pass_context
def add_account(ctx: click.Context, owner_id: int, name: str, kind: str, currency: str | None) -> None:
    """
    Create an account with a zero balance.

    Example:
      mysalary accounts add --owner 1 --name "Checking" --kind bank_account --currency EUR
    """
    service = get_service(ctx)
    try:
        account = service.store.add_account(owner_id, name, kind, currency or service.default_currency)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Created account {account.id}: {account.name} ({account.kind.value}, {account.currency})")


@accounts.command("list")
@click.option("--owner", "owner_id", type=int, help="Only this owner's accounts")
@click.option("--active-only", is_flag=True, help="Hide deactivated accounts")
@click.pass_context
def list_accounts(ctx: click.Context, owner_id: int | None, active_only: bool) -> None:
    """List accounts with their cached balances."""
    rows = get_service(ctx).store.accounts(owner_id=owner_id, active_only=active_only)

    if not rows:
        click.echo("No accounts found.")
        return

    for account in rows:
        flag = "" if account.active else " [inactive]"
        click.echo(
            f"{account.id:>4}  {account.name:<24} {account.kind.value:<15} "
            f"{account.balance.format(account.currency):>18}  owner {account.owner_id}{flag}"
        )


@accounts.command("balance")
@click.argument("account_id", type=int)
@click.pass_context
def account_balance(ctx: click.Context, account_id: int) -> None:
    """Show the cached balance of an account."""
    service = get_service(ctx)
    with ledger_errors():
        account = service.store.require_account(account_id)
        balance = service.get_account_balance(account_id)

    click.echo(f"{account.name}: {balance} {account.currency}")


@accounts.command("deactivate")
@click.argument("account_id", type=int)
@click.pass_context
def deactivate_account(ctx: click.Context, account_id: int) -> None:
    """Soft-deactivate an account; history and balance are kept."""
    with ledger_errors():
        account = get_service(ctx).store.deactivate_account(account_id)

    click.echo(f"Deactivated account {account.id}: {account.name}")


@click.group()
def categories() -> None:
    """Category management commands."""
    pass


@categories.command("add")
@click.option("--type", "category_type", type=click.Choice([t.value for t in CategoryType]), required=True)
@click.option("--name", required=True, help="Display name")
@click.option("--owner", "owner_id", type=int, help="Owner id (omit for a shared category)")
@click.option("--icon", help="Icon name")
@click.option("--color", help="Color, e.g. #ff8800")
@click.pass_context
def add_category(
    ctx: click.Context, category_type: str, name: str, owner_id: int | None, icon: str | None, color: str | None
) -> None:
    """Create an income or expense category."""
    category = get_service(ctx).store.add_category(category_type, name, owner_id=owner_id, icon=icon, color=color)
    scope = "shared" if category.is_shared else f"owner {category.owner_id}"
    click.echo(f"Created {category.type.value} category {category.id}: {category.name} ({scope})")


@categories.command("list")
@click.option("--owner", "owner_id", type=int, help="Categories usable by this owner")
@click.pass_context
def list_categories(ctx: click.Context, owner_id: int | None) -> None:
    """List categories."""
    rows = get_service(ctx).store.categories(owner_id=owner_id)

    if not rows:
        click.echo("No categories found.")
        return

    for category in rows:
        scope = "shared" if category.is_shared else f"owner {category.owner_id}"
        click.echo(f"{category.id:>4}  {category.name:<24} {category.type.value:<8} {scope}")


@click.group()
def transactions() -> None:
    """Transaction commands."""
    pass


@transactions.command("add")
@click.option("--owner", "owner_id", type=int, required=True, help="Owner id")
@click.option("--account", "account_id", type=int, required=True, help="Source account id")
@click.option("--amount", required=True, help="Positive amount, e.g. 12.50")
@click.option("--type", "transaction_type", type=click.Choice([t.value for t in TransactionType]), required=True)
@click.option("--category", "category_id", type=int, help="Category id (income/expense)")
@click.option("--target", "target_account_id", type=int, help="Target account id (transfer)")
@click.option("--date", "occurred_on", help="Occurrence date (YYYY-MM-DD, default: today)")
@click.option(
    "--status",
    type=click.Choice([s.value for s in TransactionStatus]),
    help="Default: scheduled when dated after today, else posted",
)
@click.option("--description", default="", help="Free-text description")
@click.pass_context
def add_transaction(
    ctx: click.Context,
    owner_id: int,
    account_id: int,
    amount: str,
    transaction_type: str,
    category_id: int | None,
    target_account_id: int | None,
    occurred_on: str | None,
    status: str | None,
    description: str,
) -> None:
    """
    Record an income, expense or transfer.

    Examples:
      mysalary transactions add --owner 1 --account 1 --amount 1000 --type income --category 1
      mysalary transactions add --owner 1 --account 1 --amount 300 --type transfer --target 2
      mysalary transactions add --owner 1 --account 1 --amount 500 --type expense --category 2 --date 2030-01-01
    """
    with ledger_errors():
        transaction = get_service(ctx).create_transaction(
            owner_id=owner_id,
            source_account_id=account_id,
            amount=amount,
            type=transaction_type,
            occurred_on=occurred_on,
            status=status,
            target_account_id=target_account_id,
            category_id=category_id,
            description=description,
        )

    click.echo(
        f"Transaction {transaction.id}: {transaction.type.value} {transaction.amount} "
        f"on {transaction.occurred_on} ({transaction.status.value})"
    )


@transactions.command("confirm")
@click.argument("transaction_id", type=int)
@click.option("--mode", type=click.Choice([m.value for m in ConfirmMode]), default="scheduled_date", show_default=True)
@click.option("--owner", "owner_id", type=int, help="Require the transaction to belong to this owner")
@click.pass_context
def confirm_transaction(ctx: click.Context, transaction_id: int, mode: str, owner_id: int | None) -> None:
    """Post a scheduled transaction."""
    with ledger_errors():
        transaction = get_service(ctx).confirm_transaction(transaction_id, mode=mode, owner_id=owner_id)

    click.echo(f"Transaction {transaction.id} posted on {transaction.occurred_on}")


@transactions.command("list")
@click.option("--owner", "owner_id", type=int, required=True, help="Owner id")
@click.option("--account", "account_id", type=int, help="Only transactions touching this account")
@click.option("--status", type=click.Choice([s.value for s in TransactionStatus]))
@click.option("--exclude-future", is_flag=True, help="Hide transactions dated after today")
@click.option("--max-date", help="Hide transactions dated after this day (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
@click.pass_context
def list_transactions(
    ctx: click.Context,
    owner_id: int,
    account_id: int | None,
    status: str | None,
    exclude_future: bool,
    max_date: str | None,
    as_json: bool,
) -> None:
    """List an owner's transactions, newest first."""
    try:
        rows = get_service(ctx).list_transactions(
            owner_id, account_id=account_id, status=status, exclude_future=exclude_future, max_date=max_date
        )
    except ValueError as e:
        raise click.ClickException(f"Invalid date format: {max_date}. Use YYYY-MM-DD") from e

    if as_json:
        click.echo(format_json([t.to_dict() for t in rows]))
        return

    if not rows:
        click.echo("No transactions found.")
        return

    for t in rows:
        link = f"-> {t.target_account_id}" if t.is_transfer else f"cat {t.category_id}"
        click.echo(
            f"{t.id:>5}  {t.occurred_on}  {t.type.value:<8} {str(t.amount):>12}  "
            f"acct {t.source_account_id} {link}  {t.status.value}  {t.description}"
        )
