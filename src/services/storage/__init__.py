"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements a flat JSON file as the backend, but designed to be swappable.
"""

from src.services.storage.interface import (
    AuditStorageInterface,
    CorruptStoreError,
    ExpenseStorageInterface,
    StorageError,
    StorageWriteError,
)
from src.services.storage.json_file import (
    JsonFileExpenseStorage,
    JsonLinesAuditStorage,
)
from src.services.storage.memory import InMemoryExpenseStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "ExpenseStorageInterface",
    # Exceptions
    "CorruptStoreError",
    "StorageError",
    "StorageWriteError",
    # Implementations
    "InMemoryExpenseStorage",
    "JsonFileExpenseStorage",
    "JsonLinesAuditStorage",
]
