"""Aggregation package."""

from src.queries.aggregator import (
    ExpenseAggregator,
    month_key,
    newest_first,
    remove_entry,
)

__all__ = ["ExpenseAggregator", "month_key", "newest_first", "remove_entry"]
