"""
Main Orchestrator for Expense Ledger

This module ties together all the components and defines the
request flows:
1. Add (submission → validate → load → append → save → redirect)
2. Delete (id → load → filter → save → redirect)
3. View (load → aggregate → page view)

DESIGN DECISION: Every handler returns an explicit result, a Redirect
after a successful mutation or a PageView to render. The front end maps
those onto its own transport; nothing here exits early or writes a
response.

DESIGN DECISION: Each load-mutate-save cycle runs inside the storage's
locked() scope, so two requests in the same process cannot lose each
other's writes.
"""

from datetime import date
from typing import Any, Iterable, Mapping, Optional, Union
from uuid import UUID

from src.audit import AuditLogger, configure_logging, create_correlation_id
from src.config import get_settings
from src.models.expense import ExpenseEntry, ExpenseSubmission
from src.models.results import PageView, Redirect
from src.queries import ExpenseAggregator, newest_first, remove_entry
from src.services.storage import (
    CorruptStoreError,
    ExpenseStorageInterface,
    JsonFileExpenseStorage,
    JsonLinesAuditStorage,
    StorageWriteError,
)
from src.validation import ExpenseValidator


RequestResult = Union[Redirect, PageView]

ADD_ACTION = "add"
DELETE_ACTION = "delete"


class ExpenseLedger:
    """
    Orchestrates every request against the expense store.

    The collection is reloaded at the start of each operation; no state
    is carried between requests.
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        validator: Optional[ExpenseValidator] = None,
        aggregator: Optional[ExpenseAggregator] = None,
        audit_logger: Optional[AuditLogger] = None,
        categories: Optional[Iterable[str]] = None,
    ):
        self._storage = storage
        self._validator = validator or ExpenseValidator()
        self._aggregator = aggregator or ExpenseAggregator()
        self._audit_logger = audit_logger
        self._categories = (
            list(categories) if categories is not None
            else get_settings().app.categories_list
        )

    @property
    def storage(self) -> ExpenseStorageInterface:
        return self._storage

    def _load(self) -> list[ExpenseEntry]:
        try:
            entries = self._storage.load()
        except CorruptStoreError as e:
            if self._audit_logger:
                self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"path": self._storage.location},
                )
            raise

        if self._storage.last_recovery and self._audit_logger:
            self._audit_logger.log_store_recovered(
                path=self._storage.location,
                reason=self._storage.last_recovery,
            )

        return entries

    def _save(
        self,
        entries: list[ExpenseEntry],
        correlation_id: UUID,
    ) -> None:
        try:
            self._storage.save(entries)
        except StorageWriteError as e:
            if self._audit_logger:
                self._audit_logger.log_save_failed(
                    path=self._storage.location,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

    def add_expense(
        self,
        submission: ExpenseSubmission,
        correlation_id: Optional[UUID] = None,
    ) -> RequestResult:
        """
        Validate a submission and append it to the store.

        Returns:
            Redirect on success; PageView carrying the errors otherwise
            (no mutation happens on failure)

        Raises:
            StorageWriteError: If the store could not be written
        """
        correlation_id = correlation_id or create_correlation_id()

        result = self._validator.validate(submission)
        if not result.is_valid:
            if self._audit_logger:
                self._audit_logger.log_validation_failed(
                    errors=result.errors,
                    correlation_id=correlation_id,
                )
            return self.view(errors=result.errors, submission=submission)

        entry = self._validator.build_entry(submission)

        with self._storage.locked():
            entries = self._load()
            entries.append(entry)
            self._save(entries, correlation_id)

        if self._audit_logger:
            self._audit_logger.log_entry_added(
                entry_id=entry.id,
                category=entry.category,
                amount=str(entry.amount),
                correlation_id=correlation_id,
            )

        return Redirect(entry_id=entry.id)

    def delete_expense(
        self,
        entry_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> Redirect:
        """
        Remove the entry with `entry_id`. Unknown ids are a no-op.

        The store is rewritten either way, matching the add flow.

        Raises:
            StorageWriteError: If the store could not be written
        """
        correlation_id = correlation_id or create_correlation_id()

        with self._storage.locked():
            entries = self._load()
            remaining = remove_entry(entries, entry_id)
            self._save(remaining, correlation_id)

        if self._audit_logger:
            self._audit_logger.log_entry_deleted(
                entry_id=entry_id,
                removed=len(entries) - len(remaining),
                correlation_id=correlation_id,
            )

        return Redirect(entry_id=entry_id)

    def view(
        self,
        errors: Iterable[str] = (),
        submission: Optional[ExpenseSubmission] = None,
    ) -> PageView:
        """Load the collection and compute everything the page shows."""
        entries = self._load()

        return PageView(
            entries=newest_first(entries),
            summary=self._aggregator.summarize(entries),
            errors=list(errors),
            submission=submission,
            categories=self._categories,
            default_date=date.today().isoformat(),
        )

    def handle(
        self,
        action: Optional[str],
        form: Optional[Mapping[str, Any]] = None,
    ) -> RequestResult:
        """
        Route one request.

        Args:
            action: "add", "delete", or anything else for a plain view
            form: Submitted fields (date, description, category, amount, id)
        """
        form = form or {}

        if action == ADD_ACTION:
            return self.add_expense(ExpenseSubmission.from_form(form))
        if action == DELETE_ACTION:
            return self.delete_expense(str(form.get("id") or ""))
        return self.view()


def create_app_components(
    storage: Optional[ExpenseStorageInterface] = None,
) -> tuple[ExpenseLedger, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        storage: Expense store to use. Defaults to the configured JSON file.

    Returns:
        (ledger, audit_logger)
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    audit_storage = None
    if settings.storage.audit_log_file:
        audit_storage = JsonLinesAuditStorage(settings.storage.audit_log_file)
    audit_logger = AuditLogger(audit_storage)

    ledger = ExpenseLedger(
        storage=storage or JsonFileExpenseStorage(),
        validator=ExpenseValidator(settings.app.default_category),
        audit_logger=audit_logger,
        categories=settings.app.categories_list,
    )

    return ledger, audit_logger
