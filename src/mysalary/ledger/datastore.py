#!/usr/bin/env python3
"""
Ledger DataStore

JSON-file persistence for the ledger tables. Every committed unit rewrites the
file atomically before the in-memory state changes, so the file and memory never
disagree about a committed write.
"""

import logging
from datetime import datetime
from pathlib import Path

from ..core.datastore_mixin import DataStoreMixin
from ..core.json_utils import read_json, write_json
from .store import LedgerState, LedgerStore

logger = logging.getLogger(__name__)


class JsonLedgerStore(LedgerStore, DataStoreMixin):
    """
    LedgerStore persisted to a single JSON file (data/ledger.json).

    The file holds the conceptual table layout: accounts, categories,
    transactions, budgets and the budget_categories link table.
    """

    def __init__(self, ledger_file: Path, lock_timeout: float = 5.0, clock=datetime.now):
        """
        Open (or start) a ledger file.

        Args:
            ledger_file: Path of the JSON ledger file; created on first write
            lock_timeout: Seconds to wait for an account lock
            clock: Source of "now" for created_at stamps

        Raises:
            ValueError: If the file exists but is not a valid ledger
        """
        self.ledger_file = Path(ledger_file)
        super().__init__(state=self._load_state(), lock_timeout=lock_timeout, clock=clock)

    def _load_state(self) -> LedgerState | None:
        if not self.ledger_file.exists():
            logger.debug(f"No ledger file at {self.ledger_file}; starting empty")
            return None

        data = read_json(self.ledger_file)
        if not isinstance(data, dict):
            raise ValueError(f"Ledger file {self.ledger_file} does not contain a ledger object")

        try:
            state = LedgerState.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Ledger file {self.ledger_file} is invalid: {e}") from e

        logger.info(
            f"Loaded ledger {self.ledger_file}: {len(state.accounts)} accounts, "
            f"{len(state.transactions)} transactions"
        )
        return state

    def _persist(self, state: LedgerState) -> None:
        write_json(self.ledger_file, state.to_dict())

    def exists(self) -> bool:
        """Check if the ledger file exists."""
        return self.ledger_file.exists()

    def last_modified(self) -> datetime | None:
        if not self.exists():
            return None
        return datetime.fromtimestamp(self.ledger_file.stat().st_mtime)

    def item_count(self) -> int | None:
        """Get count of transactions in the ledger."""
        if not self.exists():
            return None
        return len(self.snapshot().transactions)

    def size_bytes(self) -> int | None:
        if not self.exists():
            return None
        return self.ledger_file.stat().st_size

    def summary_text(self) -> str:
        """Get human-readable summary of current ledger state."""
        if not self.exists():
            return f"No ledger yet at {self.ledger_file}"

        state = self.snapshot()
        scheduled = sum(1 for t in state.transactions.values() if not t.is_posted)
        return (
            f"{len(state.accounts)} accounts, {len(state.transactions)} transactions "
            f"({scheduled} scheduled), {len(state.budgets)} budgets"
        )
