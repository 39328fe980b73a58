"""Streamlit front end for the weekly expense tracker.

Run with::

    streamlit run weekly_expenses/dashboard.py

``WEEKLY_EXPENSES_MODE=local`` keeps a single user's data in a JSON
file and skips sign-in; the default multi-user mode asks for an email
and password and scopes all data to the signed-in account.
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional

import streamlit as st

# Allow `streamlit run weekly_expenses/dashboard.py` without installing the package
project_root = Path(__file__).parent.parent.resolve()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from weekly_expenses import config  # noqa: E402
from weekly_expenses.alerts import alert_message  # noqa: E402
from weekly_expenses.auth import SqliteAuthProvider  # noqa: E402
from weekly_expenses.db import Database, SqliteBudgetStore, SqliteExpenseStore  # noqa: E402
from weekly_expenses.errors import AuthError, StoreError, ValidationError  # noqa: E402
from weekly_expenses.formatting import escape_dollar_for_markdown, format_currency, format_percent  # noqa: E402
from weekly_expenses.local_storage import LocalBudgetStore, LocalExpenseStore, LocalStorage  # noqa: E402
from weekly_expenses.models import User  # noqa: E402
from weekly_expenses.tracker import ExpenseTracker  # noqa: E402
from weekly_expenses.visualization import create_budget_gauge, create_category_pie  # noqa: E402

logger = logging.getLogger(__name__)

BACKEND_KEY = 'backend'
TRACKER_KEY = 'tracker'
AUTH_NOTICE_KEY = 'auth_notice'


def _rerun() -> None:
    rerun = getattr(st, 'rerun', None)
    if callable(rerun):
        rerun()
        return
    experimental = getattr(st, 'experimental_rerun', None)
    if callable(experimental):
        experimental()


def build_backend(mode: Optional[str] = None) -> Dict[str, Any]:
    """Create the stores (and auth provider) for the configured mode."""
    mode = mode or config.STORAGE_MODE
    if mode == config.MODE_LOCAL:
        storage = LocalStorage()
        return {
            'mode': mode,
            'expenses': LocalExpenseStore(storage),
            'budgets': LocalBudgetStore(storage),
            'auth': None,
        }
    if mode != config.MODE_MULTI:
        raise ValueError(f"Unknown storage mode '{mode}'")
    database = Database()
    return {
        'mode': mode,
        'expenses': SqliteExpenseStore(database),
        'budgets': SqliteBudgetStore(database),
        'auth': SqliteAuthProvider(database),
    }


def get_backend() -> Dict[str, Any]:
    if BACKEND_KEY not in st.session_state:
        st.session_state[BACKEND_KEY] = build_backend()
    return st.session_state[BACKEND_KEY]


def get_tracker(backend: Dict[str, Any], user: Optional[User]) -> ExpenseTracker:
    """Return the session's tracker, building a fresh one when the user changes."""
    owner = user.id if user else None
    tracker = st.session_state.get(TRACKER_KEY)
    if tracker is None or tracker.owner != owner:
        tracker = ExpenseTracker(backend['expenses'], backend['budgets'], owner=owner)
        tracker.load()
        st.session_state[TRACKER_KEY] = tracker
    return tracker


def render_auth(auth: SqliteAuthProvider) -> Optional[User]:
    """Sign-in / sign-up forms, or the signed-in banner."""
    user = auth.current_user()
    if user is not None:
        notice = st.session_state.pop(AUTH_NOTICE_KEY, None)
        if notice:
            st.success(notice)
        cols = st.columns([4, 1])
        cols[0].caption(f"Signed in as: {user.email}")
        if cols[1].button("Sign out"):
            auth.sign_out()
            st.session_state.pop(TRACKER_KEY, None)
            _rerun()
        return user

    st.title("Weekly Expenses")
    st.caption("Sign in or create an account to get started")
    signin_tab, signup_tab = st.tabs(["Sign in", "Create account"])
    with signin_tab:
        with st.form('signin'):
            email = st.text_input("Email", placeholder="you@example.com")
            password = st.text_input("Password", type='password')
            submitted = st.form_submit_button("Sign in")
        if submitted:
            try:
                auth.sign_in(email, password)
                _rerun()
            except (AuthError, StoreError) as exc:
                st.error(str(exc))
    with signup_tab:
        with st.form('signup'):
            email = st.text_input("Email", placeholder="you@example.com", key='signup_email')
            password = st.text_input("Password", type='password', key='signup_password')
            submitted = st.form_submit_button("Create account")
        if submitted:
            try:
                auth.sign_up(email, password)
                st.session_state[AUTH_NOTICE_KEY] = "Account ready, you are signed in!"
                _rerun()
            except (AuthError, StoreError) as exc:
                st.error(str(exc))
    return None


def render_alert(tracker: ExpenseTracker) -> None:
    summary = tracker.summary
    if summary.needs_alert:
        st.warning(alert_message(summary.progress_percent), icon="⚠️")


def render_expense_form(tracker: ExpenseTracker) -> None:
    st.subheader("➕ New expense")
    labels = {category.value: category.label for category in tracker.categories}
    with st.form('new_expense', clear_on_submit=True):
        amount = st.text_input("Amount ($)", placeholder="0.00")
        category = st.selectbox(
            "Category",
            options=list(labels),
            format_func=lambda value: labels.get(value, value),
            index=None,
            placeholder="Choose a category",
        )
        description = st.text_input("Description (optional)", placeholder="e.g. Lunch downtown")
        submitted = st.form_submit_button("Add expense", disabled=tracker.submitting)
    if not submitted:
        return
    try:
        expense = tracker.add_expense(amount, category, description)
    except ValidationError as exc:
        st.error(str(exc))
        return
    if expense is None and tracker.expense_feedback is not None:
        st.error(tracker.expense_feedback.text)
    elif expense is not None:
        st.toast(f"Added {format_currency(expense.amount)} for {labels.get(expense.category, expense.category)}")
        _rerun()


def render_budget_card(tracker: ExpenseTracker) -> None:
    st.subheader("💵 Weekly budget")
    summary = tracker.summary
    if summary.has_budget:
        cols = st.columns(2)
        cols[0].metric("Spent", format_currency(summary.weekly_spent))
        cols[1].metric("Budget", format_currency(summary.budget_amount))
        st.progress(min(summary.progress_percent, 100.0) / 100)
        left, right = st.columns(2)
        left.caption(f"{format_percent(summary.progress_percent)} used")
        right.caption(escape_dollar_for_markdown(f"{format_currency(summary.remaining)} remaining"))
    else:
        st.info("No budget set for this week")

    label = "Change budget" if summary.has_budget else "Set budget"
    if not tracker.editor_open and st.button(label, use_container_width=True):
        tracker.open_editor()
        _rerun()
    if tracker.editor_open:
        render_budget_editor(tracker)


def render_budget_editor(tracker: ExpenseTracker) -> None:
    """Budget form; closes itself shortly after a successful change."""
    with st.container(border=True):
        st.markdown("**Weekly budget settings**")
        feedback = tracker.budget_feedback
        if feedback is not None:
            (st.success if feedback.success else st.error)(feedback.text)
            if feedback.success:
                time.sleep(config.FEEDBACK_DISMISS_SECONDS)
                tracker.dismiss_expired_feedback()
                _rerun()
                return

        amount = st.text_input("Budget amount ($)", placeholder="0.00", key='budget_amount')
        save_col, delete_col, cancel_col = st.columns(3)
        if save_col.button("Save budget", disabled=tracker.submitting or not amount):
            try:
                tracker.set_budget(amount)
            except ValidationError as exc:
                st.error(str(exc))
                return
            _rerun()
        if tracker.budget is not None and delete_col.button("Delete budget", type='primary', disabled=tracker.submitting):
            tracker.delete_budget()
            _rerun()
        if cancel_col.button("Cancel"):
            tracker.close_editor()
            _rerun()


def render_report(tracker: ExpenseTracker) -> None:
    st.subheader("📈 This week's report")
    summary = tracker.summary
    if not summary.category_totals:
        st.info("No expenses recorded this week. Add a few to see the report.")
        return
    pie_col, gauge_col = st.columns([3, 2])
    pie_col.plotly_chart(create_category_pie(summary.category_totals, tracker.categories), use_container_width=True)
    if summary.has_budget:
        gauge = create_budget_gauge(summary.weekly_spent, summary.budget_amount, summary.needs_alert)
        gauge_col.plotly_chart(gauge, use_container_width=True)


def render_recent(tracker: ExpenseTracker) -> None:
    recent = tracker.recent()
    if not recent:
        return
    labels = {category.value: category.label for category in tracker.categories}
    st.subheader("This week's expenses")
    for expense in recent:
        cols = st.columns([3, 1])
        cols[0].markdown(
            escape_dollar_for_markdown(f"**{expense.description}**  \n{labels.get(expense.category, expense.category)}")
        )
        cols[1].markdown(escape_dollar_for_markdown(format_currency(expense.amount)))


def main() -> None:
    st.set_page_config(page_title="Weekly Expenses", page_icon="💸", layout="wide")
    config.configure_logging()
    backend = get_backend()

    user = None
    if backend['auth'] is not None:
        user = render_auth(backend['auth'])
        if user is None:
            return

    try:
        tracker = get_tracker(backend, user)
    except StoreError as exc:
        st.error(f"Could not load your data: {exc}")
        return

    st.title("💸 Weekly Expenses")
    st.caption("Keep your weekly spending simple")
    render_alert(tracker)
    left, right = st.columns(2)
    with left:
        render_expense_form(tracker)
    with right:
        render_budget_card(tracker)
    render_report(tracker)
    render_recent(tracker)


if __name__ == '__main__':
    main()
