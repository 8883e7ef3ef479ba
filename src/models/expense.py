"""
Core Data Models for Expense Ledger

These models define the schemas for all data flowing through the system:
1. Raw form submissions (untrusted strings)
2. Validation results (ordered, human-readable issues)
3. Stored expense entries (the unit of persistence)
4. Derived summaries (totals for charting)

DESIGN DECISION: Entries store RAW text. Escaping is a rendering concern
and happens only at render time (see src.presentation). The stored
document can therefore be re-rendered anywhere without loss.

DESIGN DECISION: Amounts are Decimal in memory and a plain JSON number on
disk. Sums are accumulated as Decimal so totals do not drift.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


# =============================================================================
# ENUMS - Suggested values (not enforced)
# =============================================================================

class SuggestedCategory(str, Enum):
    """
    Categories offered in the entry form.

    DESIGN DECISION: These are suggestions only. The server accepts any
    category string; the form just makes the common ones one click away.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    HEALTH = "Health"
    ENTERTAINMENT = "Entertainment"
    STUDY = "Study"
    TRAVEL = "Travel"
    OTHER = "Other"


def new_entry_id() -> str:
    """Generate an opaque, practically unique entry identifier."""
    return f"e_{uuid4().hex}"


# =============================================================================
# CORE ENTRY MODEL
# =============================================================================

class ExpenseEntry(BaseModel):
    """
    One recorded expense.

    Entries are created only by the entry builder and never updated in
    place. They are not re-validated on load: only the shape is checked,
    the business rules (positive amount, non-empty description) are
    enforced once, at creation.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default_factory=new_entry_id,
        description="Opaque unique identifier, used for delete lookup"
    )
    date: str = Field(
        ...,
        description="ISO YYYY-MM-DD date, stored verbatim"
    )
    description: str = Field(
        ...,
        description="Free text, stored raw"
    )
    category: str = Field(
        ...,
        description="Category name, stored raw"
    )
    amount: Decimal = Field(
        ...,
        description="Amount rounded to 2 decimals at creation"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_float_amount(cls, v: Any) -> Any:
        # JSON numbers arrive as floats; go through str() to keep 12.5 as 12.5
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_serializer('amount')
    def serialize_amount(self, v: Decimal) -> float:
        return float(v)

    @property
    def month(self) -> str:
        """YYYY-MM bucket this entry falls into (first 7 chars of date)."""
        return self.date[:7]


# =============================================================================
# FORM SUBMISSION
# =============================================================================

class ExpenseSubmission(BaseModel):
    """
    Raw field values from the entry form.

    CRITICAL: Nothing here is trusted. Every field is a free-form string
    and goes through ExpenseValidator before an entry is built.
    """

    date: str = ""
    description: str = ""
    category: Optional[str] = None
    amount: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "ExpenseSubmission":
        """Build a submission from a request-style mapping of form fields."""
        def text(key: str) -> str:
            value = form.get(key)
            return "" if value is None else str(value)

        return cls(
            date=text("date"),
            description=text("description"),
            category=text("category") or None,
            amount=text("amount"),
        )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """
    Result of validating one submission.

    Issues are accumulated, not fail-fast, and kept in rule order.
    """

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def errors(self) -> list[str]:
        """Messages in rule order, ready for display."""
        return [issue.message for issue in self.issues]


# =============================================================================
# AGGREGATE MODELS
# =============================================================================

class ExpenseSummary(BaseModel):
    """
    Totals derived from a collection.

    by_category keeps first-seen order; by_month is sorted ascending.
    """

    total: Decimal = Decimal("0")
    by_category: dict[str, Decimal] = Field(default_factory=dict)
    by_month: dict[str, Decimal] = Field(default_factory=dict)

    @property
    def category_labels(self) -> list[str]:
        return list(self.by_category.keys())

    @property
    def category_values(self) -> list[float]:
        return [float(v) for v in self.by_category.values()]

    @property
    def month_labels(self) -> list[str]:
        return list(self.by_month.keys())

    @property
    def month_values(self) -> list[float]:
        return [float(v) for v in self.by_month.values()]
