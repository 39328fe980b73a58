from weekly_expenses.alerts import alert_message, needs_alert


def test_alert_at_threshold() -> None:
    assert needs_alert(80.0, has_budget=True)
    assert needs_alert(130.0, has_budget=True)


def test_no_alert_below_threshold() -> None:
    assert not needs_alert(0.0, has_budget=True)
    assert not needs_alert(79.99, has_budget=True)


def test_no_alert_without_budget() -> None:
    assert not needs_alert(500.0, has_budget=False)


def test_alert_message_rounds_percent() -> None:
    assert '83%' in alert_message(82.6)
