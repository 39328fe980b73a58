import plotly.graph_objects as go

from weekly_expenses.config import DEFAULT_CATEGORIES
from weekly_expenses.formatting import format_currency, format_percent
from weekly_expenses.visualization import create_budget_gauge, create_category_pie


def test_category_pie_uses_labels_and_colors() -> None:
    fig = create_category_pie({'food': 50.0, 'transport': 30.0}, DEFAULT_CATEGORIES)
    assert isinstance(fig, go.Figure)
    pie = fig.data[0]
    assert list(pie.labels) == ["Food", "Transport"]
    assert list(pie.values) == [50.0, 30.0]
    assert list(pie.marker.colors) == ["#FF6384", "#36A2EB"]


def test_category_pie_empty() -> None:
    fig = create_category_pie({})
    assert len(fig.data) == 0
    assert 'No expenses' in fig.layout.title.text


def test_budget_gauge_axis_covers_overspend() -> None:
    fig = create_budget_gauge(150.0, 100.0, alert=True)
    indicator = fig.data[0]
    assert indicator.value == 150.0
    assert list(indicator.gauge.axis.range) == [0, 150.0]


def test_formatting() -> None:
    assert format_currency(1234.5) == '$1,234.50'
    assert format_currency(-20) == '-$20.00'
    assert format_percent(79.6) == '80%'
