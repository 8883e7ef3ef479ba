"""Shared fixtures: every test gets its own data file and ledger."""

from typing import Optional
from uuid import UUID

import pytest

from src.audit import AuditLogger
from src.config import get_settings
from src.models.audit import AuditEvent
from src.orchestrator import ExpenseLedger
from src.services.storage import (
    AuditStorageInterface,
    InMemoryExpenseStorage,
    JsonFileExpenseStorage,
)
from src.validation import ExpenseValidator


CATEGORIES = [
    "Food", "Transport", "Shopping", "Bills", "Health",
    "Entertainment", "Study", "Travel", "Other",
]


class RecordingAuditStorage(AuditStorageInterface):
    """Keeps audit events in a list so tests can inspect them."""

    def __init__(self, fail: bool = False):
        self.events: list[AuditEvent] = []
        self._fail = fail

    def append_event(self, event: AuditEvent) -> bool:
        if self._fail:
            raise RuntimeError("audit store offline")
        self.events.append(event)
        return True

    def get_events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        return [e for e in self.events if e.correlation_id == correlation_id]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self.events))[:limit]

    def event_types(self) -> list[str]:
        return [e.event_type.value for e in self.events]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Point configuration at a temp directory and drop cached settings."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "LEDGER_STORAGE_DATA_FILE",
        "LEDGER_STORAGE_AUDIT_LOG_FILE",
        "LEDGER_STORAGE_STRICT_LOAD",
        "LEDGER_DEFAULT_CATEGORY",
        "LEDGER_SUGGESTED_CATEGORIES",
        "LEDGER_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "expenses.json"


@pytest.fixture
def json_storage(data_file):
    return JsonFileExpenseStorage(data_file, indent=4, strict=False)


@pytest.fixture
def memory_storage():
    return InMemoryExpenseStorage()


@pytest.fixture
def audit_store():
    return RecordingAuditStorage()


def make_ledger(storage, audit_store: Optional[RecordingAuditStorage] = None) -> ExpenseLedger:
    return ExpenseLedger(
        storage=storage,
        validator=ExpenseValidator("Other"),
        audit_logger=AuditLogger(audit_store),
        categories=CATEGORIES,
    )


@pytest.fixture
def ledger(memory_storage, audit_store):
    return make_ledger(memory_storage, audit_store)


@pytest.fixture
def file_ledger(json_storage, audit_store):
    return make_ledger(json_storage, audit_store)
