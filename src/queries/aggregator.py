"""
Expense Aggregation

DESIGN DECISION: Aggregation is DETERMINISTIC and recomputed from the full
collection on every request. Nothing is cached between requests, so the
totals can never disagree with the stored entries.

Sums are accumulated as Decimal. Every stored amount already has at most
2 decimals, so the category sums, the month sums and the grand total are
exactly equal to each other.
"""

from decimal import Decimal
from typing import Callable, Iterable

from src.models.expense import ExpenseEntry, ExpenseSummary


def month_key(date: str) -> str:
    """
    Bucket key for a date: its first 7 characters (YYYY-MM).

    Malformed dates are not guarded; "2024-3" yields "2024-3".
    """
    return date[:7]


def remove_entry(entries: list[ExpenseEntry], entry_id: str) -> list[ExpenseEntry]:
    """Return a new collection without any entry whose id matches."""
    return [entry for entry in entries if entry.id != entry_id]


def newest_first(entries: list[ExpenseEntry]) -> list[ExpenseEntry]:
    """Display order: storage order reversed."""
    return list(reversed(entries))


class ExpenseAggregator:
    """
    Computes totals over a collection of entries.

    GUARANTEES:
    - by_category preserves first-seen category order
    - by_month is sorted ascending by key
    - sum(by_category) == sum(by_month) == total
    """

    def summarize(self, entries: Iterable[ExpenseEntry]) -> ExpenseSummary:
        entries = list(entries)

        total = sum((entry.amount for entry in entries), Decimal("0"))
        by_category = self._group(entries, lambda e: e.category)
        by_month = self._group(entries, lambda e: month_key(e.date))

        return ExpenseSummary(
            total=total,
            by_category=by_category,
            by_month=dict(sorted(by_month.items())),
        )

    def _group(
        self,
        entries: list[ExpenseEntry],
        key: Callable[[ExpenseEntry], str],
    ) -> dict[str, Decimal]:
        """Sum amounts per key, keys in first-seen order."""
        groups: dict[str, Decimal] = {}

        for entry in entries:
            k = key(entry)
            groups[k] = groups.get(k, Decimal("0")) + entry.amount

        return groups
