"""Tests for the request flows in ExpenseLedger."""

import json
import threading
from decimal import Decimal

import pytest

from conftest import RecordingAuditStorage, make_ledger
from src.audit import AuditLogger
from src.models.audit import AuditEventType
from src.models.expense import ExpenseSubmission
from src.models.results import PageView, Redirect
from src.orchestrator import create_app_components
from src.services.storage import (
    CorruptStoreError,
    InMemoryExpenseStorage,
    JsonFileExpenseStorage,
    StorageWriteError,
)
from src.validation import AMOUNT_INVALID, DATE_REQUIRED, DESCRIPTION_REQUIRED


LUNCH = {
    "date": "2024-03-01",
    "description": " Lunch ",
    "category": "Food",
    "amount": "12.5",
}


class BrokenStorage(InMemoryExpenseStorage):
    """Loads fine, refuses every write."""

    def save(self, entries):
        raise StorageWriteError("read-only medium")


class TestView:
    """The read path: no action."""

    def test_empty_store(self, file_ledger):
        view = file_ledger.handle(None)
        assert isinstance(view, PageView)
        assert view.is_empty
        assert view.summary.total == Decimal("0")
        assert view.errors == []
        assert view.categories[0] == "Food"

    def test_unknown_action_renders(self, ledger):
        assert isinstance(ledger.handle("export", {}), PageView)

    def test_entries_newest_first(self, ledger):
        ledger.handle("add", dict(LUNCH, description="first"))
        ledger.handle("add", dict(LUNCH, description="second"))
        view = ledger.view()
        assert [e.description for e in view.entries] == ["second", "first"]


class TestAdd:
    """Add flow."""

    def test_lunch_scenario(self, file_ledger, data_file):
        result = file_ledger.handle("add", LUNCH)

        assert isinstance(result, Redirect)
        stored = json.loads(data_file.read_text(encoding="utf-8"))
        assert len(stored) == 1
        assert stored[0]["description"] == "Lunch"
        assert stored[0]["amount"] == 12.5
        assert stored[0]["id"] == result.entry_id

        view = file_ledger.view()
        assert view.summary.by_category["Food"] == Decimal("12.5")
        assert view.summary.by_month["2024-03"] == Decimal("12.5")

    def test_valid_add_grows_collection_by_one(self, ledger, memory_storage):
        ledger.handle("add", LUNCH)
        ledger.handle("add", dict(LUNCH, amount="3.333"))

        entries = memory_storage.load()
        assert len(entries) == 2
        assert entries[-1].amount == Decimal("3.33")

    def test_missing_date_scenario(self, ledger, memory_storage):
        result = ledger.handle("add", {"date": "", "description": "Bus", "amount": "5"})

        assert isinstance(result, PageView)
        assert result.errors == [DATE_REQUIRED]
        assert memory_storage.load() == []
        assert memory_storage.save_count == 0

    def test_every_failing_rule_reported_in_order(self, ledger, memory_storage):
        ledger.handle("add", LUNCH)
        result = ledger.handle("add", {"date": "", "description": "  ", "amount": "free"})

        assert result.errors == [DATE_REQUIRED, DESCRIPTION_REQUIRED, AMOUNT_INVALID]
        assert len(memory_storage.load()) == 1
        assert len(result.entries) == 1

    def test_rejected_submission_is_returned_for_redisplay(self, ledger):
        result = ledger.handle("add", {"date": "2024-03-01", "description": "Bus", "amount": "-1"})
        assert result.submission == ExpenseSubmission(
            date="2024-03-01", description="Bus", amount="-1"
        )

    def test_missing_category_defaults_to_other(self, ledger, memory_storage):
        ledger.handle("add", {"date": "2024-03-01", "description": "Gift", "amount": "9"})
        assert memory_storage.load()[0].category == "Other"

    def test_long_category_still_redirects(self, ledger, memory_storage, audit_store):
        """Any category string is accepted, however long."""
        category = "C" * 600
        result = ledger.handle("add", dict(LUNCH, category=category))

        assert isinstance(result, Redirect)
        assert memory_storage.load()[0].category == category
        assert audit_store.events[-1].details["category"] == category

    def test_very_large_amount_is_stored(self, file_ledger, json_storage):
        result = file_ledger.handle("add", dict(LUNCH, amount="1e30"))

        assert isinstance(result, Redirect)
        assert json_storage.load()[0].amount == Decimal("1e30")

    def test_add_is_audited(self, ledger, audit_store):
        ledger.handle("add", LUNCH)
        ledger.handle("add", {})
        assert audit_store.event_types() == ["entry_added", "validation_failed"]


class TestDelete:
    """Delete flow."""

    def test_delete_present_entry(self, file_ledger, json_storage):
        file_ledger.handle("add", LUNCH)
        keep = file_ledger.handle("add", dict(LUNCH, description="Dinner"))
        target = json_storage.load()[0].id

        result = file_ledger.handle("delete", {"id": target})

        assert isinstance(result, Redirect)
        remaining = json_storage.load()
        assert [e.id for e in remaining] == [keep.entry_id]

    def test_delete_absent_entry_is_noop(self, ledger, memory_storage, audit_store):
        ledger.handle("add", LUNCH)
        before = memory_storage.load()

        result = ledger.handle("delete", {"id": "e_does_not_exist"})

        assert isinstance(result, Redirect)
        assert memory_storage.load() == before
        assert audit_store.events[-1].event_type == AuditEventType.DELETE_NOT_FOUND

    def test_delete_without_id(self, ledger, memory_storage):
        ledger.handle("add", LUNCH)
        assert isinstance(ledger.handle("delete", {}), Redirect)
        assert len(memory_storage.load()) == 1


class TestFailures:
    """Storage problems are surfaced, not swallowed."""

    def test_write_failure_propagates_and_is_audited(self, audit_store):
        ledger = make_ledger(BrokenStorage(), audit_store)

        with pytest.raises(StorageWriteError):
            ledger.handle("add", LUNCH)

        assert audit_store.event_types() == ["save_failed"]
        assert audit_store.events[0].error_message == "read-only medium"

    def test_delete_write_failure_propagates(self, audit_store):
        ledger = make_ledger(BrokenStorage(), audit_store)
        with pytest.raises(StorageWriteError):
            ledger.handle("delete", {"id": "e_1"})

    def test_corrupt_store_recovered_and_audited(self, file_ledger, data_file, audit_store):
        data_file.parent.mkdir(parents=True)
        data_file.write_text("<<< not json >>>", encoding="utf-8")

        view = file_ledger.view()

        assert view.is_empty
        assert audit_store.event_types() == ["store_recovered"]

    def test_strict_store_refuses_and_audits(self, data_file, audit_store):
        data_file.parent.mkdir(parents=True)
        data_file.write_text("{}", encoding="utf-8")
        ledger = make_ledger(JsonFileExpenseStorage(data_file, indent=4, strict=True), audit_store)

        with pytest.raises(CorruptStoreError):
            ledger.view()

        assert audit_store.event_types() == ["system_error"]
        assert data_file.read_text(encoding="utf-8") == "{}"

    def test_add_after_corruption_starts_fresh(self, file_ledger, json_storage, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_text('"just a string"', encoding="utf-8")

        file_ledger.handle("add", LUNCH)

        assert len(json_storage.load()) == 1

    def test_audit_store_failure_does_not_break_requests(self, memory_storage):
        ledger = make_ledger(memory_storage, RecordingAuditStorage(fail=True))
        assert isinstance(ledger.handle("add", LUNCH), Redirect)
        assert len(memory_storage.load()) == 1


class TestConcurrency:
    """Concurrent requests in one process do not lose updates."""

    def test_parallel_adds_are_all_kept(self, file_ledger, json_storage):
        barrier = threading.Barrier(8)

        def worker(n: int):
            barrier.wait()
            for i in range(5):
                file_ledger.handle("add", dict(LUNCH, description=f"w{n}-{i}"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(json_storage.load()) == 40


class TestAppComponents:
    """Tests for the factory used by the front end."""

    def test_factory_uses_configured_files(self, monkeypatch, tmp_path):
        data_file = tmp_path / "store" / "expenses.json"
        audit_file = tmp_path / "store" / "audit.jsonl"
        monkeypatch.setenv("LEDGER_STORAGE_DATA_FILE", str(data_file))
        monkeypatch.setenv("LEDGER_STORAGE_AUDIT_LOG_FILE", str(audit_file))
        monkeypatch.setenv("LEDGER_DEFAULT_CATEGORY", "Misc")

        ledger, audit_logger = create_app_components()
        ledger.handle("add", {"date": "2024-03-01", "description": "Pens", "amount": "2"})

        assert isinstance(audit_logger, AuditLogger)
        assert ledger.storage.location == str(data_file)
        assert json.loads(data_file.read_text(encoding="utf-8"))[0]["category"] == "Misc"
        assert "entry_added" in audit_file.read_text(encoding="utf-8")

    def test_factory_accepts_storage_override(self):
        storage = InMemoryExpenseStorage()
        ledger, _ = create_app_components(storage=storage)
        assert ledger.storage is storage
