"""Tests for the audit logger and logging setup."""

import logging

import pytest

from conftest import RecordingAuditStorage
from src.audit import AuditLogger, configure_logging
from src.models.audit import AuditEventBuilder


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_persists_to_storage(self):
        store = RecordingAuditStorage()
        logger = AuditLogger(store)

        logger.log_entry_added("e_1", "Food", "12.50")
        logger.log_save_failed("data/expenses.json", "disk full")

        assert store.event_types() == ["entry_added", "save_failed"]

    def test_local_only_logging_succeeds(self):
        assert AuditLogger().log(AuditEventBuilder.entry_deleted("e_1", 1)) is True

    def test_storage_failure_is_reported_not_raised(self):
        logger = AuditLogger(RecordingAuditStorage(fail=True))
        assert logger.log(AuditEventBuilder.entry_deleted("e_1", 1)) is False

    def test_log_error(self):
        store = RecordingAuditStorage()
        AuditLogger(store).log_error("CorruptStoreError", "bad data", details={"path": "x"})
        assert store.events[0].severity.value == "error"
        assert store.events[0].details == {"path": "x"}

    def test_entry_added_description_is_fixed_text(self):
        event = AuditEventBuilder.entry_added("e_1", "X" * 1000, "5.00")
        assert event.description == "Expense added"
        assert event.details["category"] == "X" * 1000


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    ledger = logging.getLogger("ledger")
    handlers, level = list(root.handlers), ledger.level
    yield
    root.handlers[:] = handlers
    ledger.setLevel(level)


class TestConfigureLogging:
    """configure_logging only touches the ledger namespace."""

    def test_existing_root_handlers_are_kept(self, restore_logging):
        handler = logging.NullHandler()
        logging.getLogger().addHandler(handler)

        configure_logging("DEBUG")

        assert handler in logging.getLogger().handlers

    def test_level_applies_to_ledger_loggers(self, restore_logging):
        configure_logging("WARNING")
        assert logging.getLogger("ledger").level == logging.WARNING
        assert not logging.getLogger("ledger.audit").isEnabledFor(logging.INFO)
