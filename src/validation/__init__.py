"""Submission validation package."""

from src.validation.validator import (
    AMOUNT_INVALID,
    AMOUNT_TOO_LARGE,
    DATE_REQUIRED,
    DESCRIPTION_REQUIRED,
    MAX_AMOUNT,
    ExpenseValidator,
    InvalidSubmissionError,
    parse_amount,
)

__all__ = [
    "AMOUNT_INVALID",
    "AMOUNT_TOO_LARGE",
    "DATE_REQUIRED",
    "DESCRIPTION_REQUIRED",
    "MAX_AMOUNT",
    "ExpenseValidator",
    "InvalidSubmissionError",
    "parse_amount",
]
