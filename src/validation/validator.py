"""
Submission Validation and Entry Building

DESIGN DECISION: Validation accumulates every failing rule instead of
stopping at the first one, so the user sees all problems at once. Rules
always run in the same order (date, description, amount) and each rule
contributes at most one message.

RULES:
- date must be present (no calendar check beyond that)
- description must be non-empty after trimming
- amount must be a finite number and still positive after rounding to
  2 decimals
- amount must stay below MAX_AMOUNT so it survives the JSON round trip

IMPORTANT: Validation NEVER silently fixes issues. The only normalization
applied when building an entry is trimming the description, defaulting a
missing category and rounding the amount.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Optional

from src.config import get_settings
from src.models.expense import (
    ExpenseEntry,
    ExpenseSubmission,
    ValidationIssue,
    ValidationResult,
    new_entry_id,
)


DATE_REQUIRED = "Date is required."
DESCRIPTION_REQUIRED = "Description is required."
AMOUNT_INVALID = "Amount must be a positive number."
AMOUNT_TOO_LARGE = "Amount is too large."

CENTS = Decimal("0.01")

# Amounts are written to disk as JSON numbers (doubles); anything from here
# up would be stored as infinity.
MAX_AMOUNT = Decimal("1e308")


def parse_amount(raw: str) -> Optional[Decimal]:
    """
    Parse a form amount and round it to 2 decimals (half up).

    Returns None when the text is not a finite number. Values at or above
    MAX_AMOUNT are returned unrounded; the validator rejects them.
    """
    text = raw.strip()
    if not text or "_" in text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    if value.copy_abs() >= MAX_AMOUNT:
        return value

    with localcontext() as ctx:
        # Room for every integer digit plus the two decimals
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)


class InvalidSubmissionError(ValueError):
    """Raised when building an entry from a submission that fails validation."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__("; ".join(result.errors))


class ExpenseValidator:
    """
    Validates raw submissions and turns valid ones into entries.
    """

    def __init__(self, default_category: Optional[str] = None):
        """
        Initialize validator.

        Args:
            default_category: Category used when the submission has none.
                              Defaults to the configured default_category.
        """
        self._default_category = (
            default_category or get_settings().app.default_category
        )

    def validate(self, submission: ExpenseSubmission) -> ValidationResult:
        """
        Check a submission against every rule.

        Returns:
            ValidationResult with one issue per failing rule, in rule order
        """
        issues = []

        if not submission.date.strip():
            issues.append(ValidationIssue(field="date", message=DATE_REQUIRED))

        if not submission.description.strip():
            issues.append(ValidationIssue(
                field="description",
                message=DESCRIPTION_REQUIRED,
            ))

        amount = parse_amount(submission.amount)
        if amount is None or amount <= 0:
            issues.append(ValidationIssue(field="amount", message=AMOUNT_INVALID))
        elif amount >= MAX_AMOUNT:
            issues.append(ValidationIssue(field="amount", message=AMOUNT_TOO_LARGE))

        return ValidationResult(issues=issues)

    def build_entry(self, submission: ExpenseSubmission) -> ExpenseEntry:
        """
        Construct a normalized entry from a valid submission.

        Raises:
            InvalidSubmissionError: If the submission fails validation
        """
        result = self.validate(submission)
        if not result.is_valid:
            raise InvalidSubmissionError(result)

        return ExpenseEntry(
            id=new_entry_id(),
            date=submission.date,
            description=submission.description.strip(),
            category=submission.category or self._default_category,
            amount=parse_amount(submission.amount),
        )
