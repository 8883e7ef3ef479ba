"""
Request Result Models

DESIGN DECISION: Every request handled by the ledger returns one of two
explicit results instead of exiting early:

- Redirect: a mutation succeeded; the front end should reload the page
  (GET-after-POST) so a refresh cannot resubmit the form.
- PageView: everything the page needs to render (entries, totals, errors).

The outer router (the Streamlit app) decides what each result means for
its own transport.
"""

from typing import Optional

from pydantic import BaseModel, Field

from src.models.expense import ExpenseEntry, ExpenseSubmission, ExpenseSummary


class Redirect(BaseModel):
    """A completed mutation. Carries no body."""

    location: str = Field(
        default="/",
        description="Where the client should navigate next"
    )
    entry_id: Optional[str] = Field(
        default=None,
        description="Entry that was added or targeted for deletion"
    )


class PageView(BaseModel):
    """Data handed to the presentation layer for one page render."""

    entries: list[ExpenseEntry] = Field(
        default_factory=list,
        description="Entries, newest first"
    )
    summary: ExpenseSummary = Field(
        default_factory=ExpenseSummary
    )
    errors: list[str] = Field(
        default_factory=list,
        description="Validation messages to show above the form"
    )
    submission: Optional[ExpenseSubmission] = Field(
        default=None,
        description="Rejected submission, redisplayed in the form"
    )
    categories: list[str] = Field(
        default_factory=list,
        description="Suggested categories for the form"
    )
    default_date: str = Field(
        ...,
        description="Pre-filled value for the date field (today)"
    )

    @property
    def is_empty(self) -> bool:
        return not self.entries
