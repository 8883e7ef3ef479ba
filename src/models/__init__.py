"""
Data Models Package

This package contains all Pydantic models used in the Expense Ledger.
All data flowing through the system must conform to these schemas.
"""

from src.models.expense import (
    ExpenseEntry,
    ExpenseSubmission,
    ExpenseSummary,
    SuggestedCategory,
    ValidationIssue,
    ValidationResult,
    new_entry_id,
)
from src.models.results import PageView, Redirect
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "ExpenseEntry",
    "ExpenseSubmission",
    "ExpenseSummary",
    "SuggestedCategory",
    "ValidationIssue",
    "ValidationResult",
    "new_entry_id",
    # Request results
    "PageView",
    "Redirect",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
