#!/usr/bin/env python3
"""
DataStore Mixin - Common metadata contract for persisted stores.

Operator commands (``mysalary status``) report on a store through these
methods without knowing how it is persisted.
"""

from abc import abstractmethod
from datetime import datetime


class DataStoreMixin:
    """
    Mixin providing the shared metadata methods.

    Subclasses must implement:
    - exists() -> bool
    - last_modified() -> datetime | None
    - item_count() -> int | None
    - size_bytes() -> int | None
    - summary_text() -> str
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if data exists in storage."""
        ...

    @abstractmethod
    def last_modified(self) -> datetime | None:
        """Get timestamp of most recent data modification."""
        ...

    @abstractmethod
    def item_count(self) -> int | None:
        """Get count of items/records in stored data."""
        ...

    @abstractmethod
    def size_bytes(self) -> int | None:
        """Get total storage size in bytes."""
        ...

    @abstractmethod
    def summary_text(self) -> str:
        """Get human-readable summary of current data state."""
        ...

    def age_days(self) -> int | None:
        """
        Get age of data in days since last modification.

        Returns:
            Number of days since last modification, or None if data doesn't exist
        """
        last_mod = self.last_modified()
        if last_mod is None:
            return None
        return (datetime.now() - last_mod).days
