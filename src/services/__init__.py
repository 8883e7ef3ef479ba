"""Services package."""

from src.services.storage import (
    AuditStorageInterface,
    CorruptStoreError,
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    JsonFileExpenseStorage,
    JsonLinesAuditStorage,
    StorageError,
    StorageWriteError,
)

__all__ = [
    "AuditStorageInterface",
    "CorruptStoreError",
    "ExpenseStorageInterface",
    "InMemoryExpenseStorage",
    "JsonFileExpenseStorage",
    "JsonLinesAuditStorage",
    "StorageError",
    "StorageWriteError",
]
