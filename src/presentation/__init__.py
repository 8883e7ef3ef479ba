"""Presentation helpers package."""

from src.presentation.formatting import (
    EMPTY_LEDGER_MESSAGE,
    category_chart,
    error_box_html,
    escape_text,
    format_amount,
    month_chart,
    storage_error_message,
)

__all__ = [
    "EMPTY_LEDGER_MESSAGE",
    "category_chart",
    "error_box_html",
    "escape_text",
    "format_amount",
    "month_chart",
    "storage_error_message",
]
