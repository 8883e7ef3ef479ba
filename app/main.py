"""
Streamlit Frontend for Expense Ledger

One page: an entry form, two charts and the list of expenses.

The page is a thin router over ExpenseLedger:
- Form submit  → ledger.handle("add", fields)
- Delete click → ledger.handle("delete", {"id": ...})
- Anything else → ledger.handle(None)

A Redirect result becomes st.rerun(), so the next run renders fresh data
and a browser refresh cannot resubmit the form. A PageView is rendered.
"""

from datetime import date
from typing import Optional

import streamlit as st

from src.config import get_settings, validate_all_settings
from src.models.results import PageView, Redirect
from src.orchestrator import ExpenseLedger, create_app_components
from src.presentation import (
    EMPTY_LEDGER_MESSAGE,
    category_chart,
    error_box_html,
    format_amount,
    month_chart,
    storage_error_message,
)
from src.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💸",
    layout="wide",
)

st.markdown("""
<style>
    .error-box {
        padding: 12px 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .muted {
        color: #6c757d;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def dispatch(ledger: ExpenseLedger, action: Optional[str], form: dict) -> Optional[PageView]:
    """
    Run one request and act on its result.

    Returns the PageView to render, or None when a storage error was shown.
    """
    try:
        result = ledger.handle(action, form)
    except StorageError as e:
        st.error(storage_error_message(e))
        return None

    if isinstance(result, Redirect):
        st.rerun()
    return result


def check_settings() -> bool:
    """Show every invalid settings group; True when all of them load."""
    status = validate_all_settings()

    ok = True
    for name, key in [("Storage", "storage"), ("Application", "app")]:
        if not status.get(key, False):
            ok = False
            error = status.get(f"{key}_error", "Invalid configuration")
            st.error(f"❌ {name} settings - {error}")

    if not ok:
        st.info("Check your LEDGER_* environment variables or .env file. See .env.example.")
    return ok


def main():
    """Main application entry point."""
    if not check_settings():
        st.stop()

    ledger, _ = get_components()
    symbol = get_settings().app.currency_symbol

    st.title("Expense Tracker")
    st.caption("File-based storage with charts for expense tracking")

    view = render_add_form(ledger)
    if view is None:
        view = dispatch(ledger, None, {})
        if view is None:
            st.stop()

    render_charts(view, symbol)
    render_entries(ledger, view, symbol)

    st.markdown("---")
    st.markdown(
        f'<div class="muted">© {date.today().year} • Expense Tracker</div>',
        unsafe_allow_html=True,
    )


def render_add_form(ledger: ExpenseLedger) -> Optional[PageView]:
    """
    Render the entry form and handle its submission.

    Returns the PageView produced by a rejected submission, if any.
    """
    st.subheader("Add Expense")

    rejected: Optional[PageView] = None
    error_slot = st.empty()

    categories = get_settings().app.categories_list

    with st.form("add_expense", clear_on_submit=True):
        col1, col2, col3, col4 = st.columns([1, 2, 1, 1])

        with col1:
            entry_date = st.date_input("Date", value=date.today())
        with col2:
            description = st.text_input(
                "Description",
                placeholder="e.g., Lunch, Bus pass",
            )
        with col3:
            category = st.selectbox("Category", options=categories)
        with col4:
            amount = st.text_input("Amount", placeholder="e.g., 12.50")

        submitted = st.form_submit_button("Add", type="primary")

    if submitted:
        rejected = dispatch(ledger, "add", {
            "date": entry_date.isoformat() if entry_date else "",
            "description": description,
            "category": category,
            "amount": amount,
        })
        if rejected is not None and rejected.errors:
            error_slot.markdown(
                error_box_html(rejected.errors),
                unsafe_allow_html=True,
            )
            if rejected.submission:
                st.caption(
                    "Not saved: "
                    f"{rejected.submission.description or '(no description)'} "
                    f"{rejected.submission.amount}"
                )

    return rejected


def render_charts(view: PageView, symbol: str):
    """Render the category pie and the monthly line chart."""
    col1, col2 = st.columns(2)

    with col1:
        st.subheader("By Category")
        if view.summary.by_category:
            st.plotly_chart(category_chart(view.summary), use_container_width=True)
        else:
            st.info("Nothing to chart yet.")

    with col2:
        st.subheader("By Month")
        if view.summary.by_month:
            st.plotly_chart(month_chart(view.summary, symbol), use_container_width=True)
        else:
            st.info("Nothing to chart yet.")


def render_entries(ledger: ExpenseLedger, view: PageView, symbol: str):
    """Render all entries, newest first, with a delete control per row."""
    header, total = st.columns([3, 1])
    with header:
        st.subheader("All Expenses")
    with total:
        st.markdown(f"Total: **{format_amount(view.summary.total, symbol)}**")

    if view.is_empty:
        st.markdown(
            f'<div class="muted">{EMPTY_LEDGER_MESSAGE}</div>',
            unsafe_allow_html=True,
        )
        return

    widths = [1, 3, 2, 1, 1]
    for col, title in zip(st.columns(widths), ["Date", "Description", "Category", "Amount", ""]):
        col.markdown(f"**{title}**" if title else "")

    for entry in view.entries:
        c_date, c_desc, c_cat, c_amount, c_action = st.columns(widths)
        # st.text renders verbatim, so raw stored text is safe here
        c_date.text(entry.date)
        c_desc.text(entry.description)
        c_cat.text(entry.category)
        c_amount.text(format_amount(entry.amount, symbol))

        with c_action.popover("Delete"):
            st.write("Delete this expense?")
            if st.button("Yes, delete", key=f"delete_{entry.id}", type="primary"):
                dispatch(ledger, "delete", {"id": entry.id})


if __name__ == "__main__":
    main()
