"""
Audit Logger

DESIGN DECISION: Every mutation of the ledger is logged.
This provides:
1. Traceability of additions and deletions
2. A visible record of corruption the UI silently recovers from
3. Debugging capability when a save fails

The audit logger:
- Gracefully handles storage failures (doesn't crash the app if logging fails)
- Supports correlation IDs to tie together the events of one request
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from src.models.audit import AuditEvent, AuditEventBuilder
from src.services.storage import AuditStorageInterface


LOGGER_NAMESPACE = "ledger"


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route ledger logs to stderr at `level`.

    Handlers the host process already installed on the root logger are
    left alone; the level is applied to the "ledger" logger namespace only.
    """
    logging.basicConfig(format="%(message)s")
    logging.getLogger(LOGGER_NAMESPACE).setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit store, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(f"{LOGGER_NAMESPACE}.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_entry_added(
        self,
        entry_id: str,
        category: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new expense."""
        self.log(AuditEventBuilder.entry_added(
            entry_id=entry_id,
            category=category,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_entry_deleted(
        self,
        entry_id: str,
        removed: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a delete request, including ones that matched nothing."""
        self.log(AuditEventBuilder.entry_deleted(
            entry_id=entry_id,
            removed=removed,
            correlation_id=correlation_id,
        ))

    def log_validation_failed(
        self,
        errors: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected submission."""
        self.log(AuditEventBuilder.validation_failed(
            errors=errors,
            correlation_id=correlation_id,
        ))

    def log_store_recovered(
        self,
        path: str,
        reason: str,
    ) -> None:
        """Log corrupted content that was replaced by an empty ledger."""
        self.log(AuditEventBuilder.store_recovered(path=path, reason=reason))

    def log_save_failed(
        self,
        path: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed write of the data file."""
        self.log(AuditEventBuilder.save_failed(
            path=path,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of each request and pass it through
    all subsequent operations.
    """
    return uuid4()
