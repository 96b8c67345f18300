#!/usr/bin/env python3
"""
Shared CLI helpers: service construction and error translation.
"""

from collections.abc import Iterator
from contextlib import contextmanager

import click

from ..core.config import get_config
from ..core.errors import LedgerError
from ..ledger.service import LedgerService


def get_service(ctx: click.Context) -> LedgerService:
    """Ledger service for the configured data directory, created once per invocation."""
    ctx.ensure_object(dict)
    if "service" not in ctx.obj:
        config = ctx.obj.get("config") or get_config()
        try:
            ctx.obj["service"] = LedgerService.from_config(config)
        except ValueError as e:
            raise click.ClickException(f"Cannot open ledger: {e}") from e
    return ctx.obj["service"]


@contextmanager
def ledger_errors() -> Iterator[None]:
    """Report ledger errors as CLI errors with their code."""
    try:
        yield
    except LedgerError as e:
        hint = " (retry the command)" if e.retryable else ""
        raise click.ClickException(f"{e.code}: {e.message}{hint}") from e
