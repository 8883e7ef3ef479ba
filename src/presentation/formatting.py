"""
Render-time Formatting

DESIGN DECISION: Stored text is raw. Everything that ends up inside HTML
goes through escape_text() here, at render time, and nowhere else.
"""

import html
from decimal import Decimal
from typing import Iterable, Union

import plotly.graph_objects as go

from src.models.expense import ExpenseSummary
from src.services.storage import StorageError, StorageWriteError


EMPTY_LEDGER_MESSAGE = "No expenses yet. Add your first above!"


def escape_text(text: str) -> str:
    """Escape &, <, >, " and ' for safe inclusion in HTML."""
    return html.escape(text, quote=True)


def format_amount(amount: Union[Decimal, float, int], symbol: str = "$") -> str:
    """Two decimals with thousands separators, e.g. $1,234.50."""
    return f"{symbol}{Decimal(str(amount)):,.2f}"


def error_box_html(errors: Iterable[str]) -> str:
    """Alert box listing validation messages, one per line."""
    lines = "".join(f"<div>{escape_text(err)}</div>" for err in errors)
    if not lines:
        return ""
    return f'<div class="error-box">{lines}</div>'


def category_chart(summary: ExpenseSummary) -> go.Figure:
    """Pie chart of spending per category, first-seen order."""
    fig = go.Figure(
        go.Pie(
            labels=summary.category_labels,
            values=summary.category_values,
            sort=False,
        )
    )
    fig.update_layout(
        title="By Category",
        legend=dict(orientation="h", y=-0.1),
    )
    return fig


def month_chart(summary: ExpenseSummary, symbol: str = "$") -> go.Figure:
    """Line chart of spending per month, oldest month first."""
    fig = go.Figure(
        go.Scatter(
            x=summary.month_labels,
            y=summary.month_values,
            mode="lines+markers",
            name=f"Total ({symbol})",
            line=dict(shape="spline", smoothing=0.25),
        )
    )
    fig.update_layout(
        title="By Month",
        xaxis=dict(type="category"),
    )
    return fig


def storage_error_message(error: StorageError) -> str:
    """User-facing text for a storage failure, split by read vs write."""
    if isinstance(error, StorageWriteError):
        return f"Could not save your change: {error}"
    return f"Could not load your expenses: {error}"
