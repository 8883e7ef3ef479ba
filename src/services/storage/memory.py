"""In-memory storage, for tests and throwaway sessions."""

import contextlib
import threading
from typing import Iterator, Optional

from src.models.expense import ExpenseEntry
from src.services.storage.interface import ExpenseStorageInterface


class InMemoryExpenseStorage(ExpenseStorageInterface):
    """Keeps the collection in a list. Nothing survives the process."""

    def __init__(self, entries: Optional[list[ExpenseEntry]] = None):
        self._entries: list[ExpenseEntry] = list(entries or [])
        self._lock = threading.Lock()
        self.last_recovery: Optional[str] = None
        self.save_count = 0

    @property
    def location(self) -> str:
        return "memory"

    def load(self) -> list[ExpenseEntry]:
        return list(self._entries)

    def save(self, entries: list[ExpenseEntry]) -> None:
        self._entries = list(entries)
        self.save_count += 1

    @contextlib.contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield
