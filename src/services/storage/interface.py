"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the JSON file for a real embedded database later
2. Use in-memory storage for testing
3. Guard the read-modify-write cycle with a lock without touching callers

The contract is deliberately whole-collection: every request loads the
full list of entries and every mutation rewrites it. There is no partial
update and no append log for expenses.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional
from uuid import UUID

from src.models.audit import AuditEvent
from src.models.expense import ExpenseEntry


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense collection storage.

    Any storage implementation (JSON file, SQLite, etc.)
    must implement these methods.
    """

    # Set by load() when unreadable content was replaced by an empty
    # collection; None after a clean load.
    last_recovery: Optional[str] = None

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable identifier of the backing store (for logs)."""
        pass

    @abstractmethod
    def load(self) -> list[ExpenseEntry]:
        """
        Load the full collection, oldest entry first.

        Returns:
            All stored entries. An absent store yields an empty list.

        Raises:
            CorruptStoreError: If the content is unreadable and the
                implementation is configured to refuse recovery
            StorageError: If the store exists but cannot be read
        """
        pass

    @abstractmethod
    def save(self, entries: list[ExpenseEntry]) -> None:
        """
        Replace the stored collection with `entries`.

        After save returns, readers see either the old document or the
        new one in full, never a partial write.

        Raises:
            StorageWriteError: If the medium is unwritable
        """
        pass

    @abstractmethod
    def locked(self) -> AbstractContextManager[None]:
        """
        Mutual-exclusion scope for one load-mutate-save cycle.

        Usage:
            with storage.locked():
                entries = storage.load()
                storage.save(entries + [entry])
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events raised while handling one request.

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptStoreError(StorageError):
    """Stored content is not a JSON array of entries."""
    pass


class StorageWriteError(StorageError, IOError):
    """The backing medium could not be written."""
    pass
