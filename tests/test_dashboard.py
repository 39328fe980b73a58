"""Tests for the Streamlit glue that do not need a running app."""

from __future__ import annotations

import contextlib
import types
from datetime import date

import pytest

from weekly_expenses import dashboard
from weekly_expenses.errors import StoreError
from weekly_expenses.local_storage import LocalExpenseStore
from weekly_expenses.models import User
from weekly_expenses.storage import InMemoryBudgetStore, InMemoryExpenseStore
from weekly_expenses.tracker import BUDGET_SAVE_FAILED, BUDGET_SAVED, ExpenseTracker


def test_build_backend_local(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr('weekly_expenses.local_storage.LOCAL_STORAGE_PATH', tmp_path / 'device.json')
    backend = dashboard.build_backend('local')
    assert backend['auth'] is None
    assert isinstance(backend['expenses'], LocalExpenseStore)
    backend['expenses'].insert(None, 3.0, 'food')
    assert (tmp_path / 'device.json').exists()


def test_build_backend_multi(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr('weekly_expenses.db.DB_PATH', tmp_path / 'multi.db')
    backend = dashboard.build_backend('multi')
    assert backend['auth'] is not None
    assert (tmp_path / 'multi.db').exists()


def test_build_backend_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError):
        dashboard.build_backend('cloud')


def test_get_tracker_rebuilds_when_user_changes(monkeypatch) -> None:
    state = {}
    monkeypatch.setattr(dashboard, 'st', types.SimpleNamespace(session_state=state))
    backend = {'expenses': InMemoryExpenseStore(), 'budgets': InMemoryBudgetStore()}
    backend['expenses'].insert('u1', 10.0, 'food')

    alice = User(id='u1', email='alice@example.com')
    tracker = dashboard.get_tracker(backend, alice)
    assert tracker.loaded
    assert len(tracker.expenses) == 1
    assert dashboard.get_tracker(backend, alice) is tracker

    bob = User(id='u2', email='bob@example.com')
    other = dashboard.get_tracker(backend, bob)
    assert other is not tracker
    assert other.expenses == []
    assert state[dashboard.TRACKER_KEY] is other


def test_render_alert_warns_over_threshold(monkeypatch) -> None:
    warnings = []
    monkeypatch.setattr(
        dashboard,
        'st',
        types.SimpleNamespace(warning=lambda text, icon=None: warnings.append(text)),
    )
    tracker = ExpenseTracker(
        InMemoryExpenseStore(),
        InMemoryBudgetStore(),
        owner='u1',
        today=lambda: date(2024, 5, 15),
    )
    tracker.load()
    tracker.add_expense('85', 'food')
    dashboard.render_alert(tracker)
    assert warnings == []

    tracker.set_budget('100')
    dashboard.render_alert(tracker)
    assert len(warnings) == 1
    assert '85%' in warnings[0]


def test_rerun_prefers_streamlit_rerun(monkeypatch) -> None:
    called = {}
    st_mock = types.SimpleNamespace(rerun=lambda: called.setdefault('method', 'rerun'))
    monkeypatch.setattr(dashboard, 'st', st_mock)
    dashboard._rerun()
    assert called['method'] == 'rerun'


def test_rerun_falls_back_to_experimental(monkeypatch) -> None:
    called = {}
    st_mock = types.SimpleNamespace(experimental_rerun=lambda: called.setdefault('method', 'experimental'))
    monkeypatch.setattr(dashboard, 'st', st_mock)
    dashboard._rerun()
    assert called['method'] == 'experimental'


class _FakeClock:
    def __init__(self) -> None:
        self.now = 10.0

    def __call__(self) -> float:
        return self.now


class _FakeColumn:
    def __init__(self, clicks, shown) -> None:
        self.clicks = clicks
        self.shown = shown

    def button(self, label, **kwargs):
        return self.clicks.get(label, False)

    def markdown(self, text, **kwargs):
        self.shown.append(('markdown', text))

    def caption(self, text, **kwargs):
        self.shown.append(('caption', text))


def _fake_streamlit(shown, clicks=None, typed='', state=None):
    clicks = clicks or {}
    return types.SimpleNamespace(
        session_state={} if state is None else state,
        container=lambda **kwargs: contextlib.nullcontext(),
        markdown=lambda text, **kwargs: shown.append(('markdown', text)),
        subheader=lambda text, **kwargs: shown.append(('subheader', text)),
        success=lambda text, **kwargs: shown.append(('success', text)),
        error=lambda text, **kwargs: shown.append(('error', text)),
        text_input=lambda *args, **kwargs: typed,
        columns=lambda spec: [_FakeColumn(clicks, shown) for _ in range(spec if isinstance(spec, int) else len(spec))],
        rerun=lambda: shown.append(('rerun', None)),
    )


class _FailingBudgetStore(InMemoryBudgetStore):
    def upsert(self, *args, **kwargs):
        raise StoreError("connection reset")


def _editor_tracker(budgets=None, clock=None) -> ExpenseTracker:
    tracker = ExpenseTracker(
        InMemoryExpenseStore(),
        budgets or InMemoryBudgetStore(),
        owner='u1',
        today=lambda: date(2024, 5, 15),
        clock=clock or _FakeClock(),
    )
    tracker.load()
    tracker.open_editor()
    return tracker


def test_budget_editor_closes_after_successful_save(monkeypatch) -> None:
    clock = _FakeClock()
    tracker = _editor_tracker(clock=clock)
    slept = []

    def fake_sleep(seconds):
        slept.append(seconds)
        clock.now += seconds

    monkeypatch.setattr(dashboard.time, 'sleep', fake_sleep)

    shown = []
    monkeypatch.setattr(dashboard, 'st', _fake_streamlit(shown, clicks={'Save budget': True}, typed='150'))
    dashboard.render_budget_editor(tracker)
    assert tracker.budget.amount == 150.0
    assert tracker.editor_open
    assert ('rerun', None) in shown

    shown = []
    monkeypatch.setattr(dashboard, 'st', _fake_streamlit(shown))
    dashboard.render_budget_editor(tracker)
    assert ('success', BUDGET_SAVED) in shown
    assert slept == [dashboard.config.FEEDBACK_DISMISS_SECONDS]
    assert not tracker.editor_open
    assert tracker.budget_feedback is None
    assert shown[-1] == ('rerun', None)


def test_budget_editor_stays_open_after_failure(monkeypatch) -> None:
    tracker = _editor_tracker(budgets=_FailingBudgetStore())
    slept = []
    monkeypatch.setattr(dashboard.time, 'sleep', slept.append)

    shown = []
    monkeypatch.setattr(dashboard, 'st', _fake_streamlit(shown, clicks={'Save budget': True}, typed='150'))
    dashboard.render_budget_editor(tracker)
    assert tracker.budget is None

    shown = []
    monkeypatch.setattr(dashboard, 'st', _fake_streamlit(shown))
    dashboard.render_budget_editor(tracker)
    assert ('error', BUDGET_SAVE_FAILED) in shown
    assert slept == []
    assert tracker.editor_open


def test_recent_list_escapes_dollar_signs(monkeypatch) -> None:
    tracker = _editor_tracker()
    tracker.add_expense('5', 'food', 'Paid $5 for $2 coffee')
    shown = []
    monkeypatch.setattr(dashboard, 'st', _fake_streamlit(shown))
    dashboard.render_recent(tracker)
    texts = [text for kind, text in shown if kind == 'markdown']
    assert any('Paid \\$5 for \\$2 coffee' in text for text in texts)
    assert not any('$' in text.replace('\\$', '') for text in texts)


def test_sign_up_notice_is_shown_on_next_run(monkeypatch) -> None:
    user = User(id='u1', email='alice@example.com')
    auth = types.SimpleNamespace(current_user=lambda: user)
    state = {dashboard.AUTH_NOTICE_KEY: "Account ready, you are signed in!"}
    shown = []
    monkeypatch.setattr(dashboard, 'st', _fake_streamlit(shown, state=state))

    assert dashboard.render_auth(auth) is user
    assert ('success', "Account ready, you are signed in!") in shown
    assert dashboard.AUTH_NOTICE_KEY not in state

    shown.clear()
    dashboard.render_auth(auth)
    assert not any(kind == 'success' for kind, _ in shown)
