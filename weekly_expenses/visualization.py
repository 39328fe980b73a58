"""Plotly figures for the weekly report.

Each function takes derived numbers from :mod:`weekly_expenses.aggregator`
and returns a `plotly.graph_objects.Figure` that Streamlit renders via
``st.plotly_chart``.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence

import plotly.graph_objects as go

from .config import load_categories
from .models import Category


def create_category_pie(
    totals: Dict[str, float],
    categories: Optional[Sequence[Category]] = None,
    title: str | None = None,
) -> go.Figure:
    """Pie chart of this week's spend per category.

    Parameters
    ----------
    totals : dict
        Category value to amount, as produced by ``category_totals``.
        Slices keep the dict order.
    categories : sequence of Category, optional
        Supplies the display label and colour of each slice.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Interactive pie chart; an empty figure when there is no spend.
    """
    if not totals:
        fig = go.Figure()
        fig.update_layout(title="No expenses recorded this week")
        return fig

    lookup = {category.value: category for category in (categories or load_categories())}
    labels = [lookup[value].label if value in lookup else value for value in totals]
    colors = [lookup[value].color if value in lookup else "#9E9E9E" for value in totals]
    fig = go.Figure(go.Pie(
        labels=labels,
        values=list(totals.values()),
        marker=dict(colors=colors),
        textinfo="label+percent",
        hovertemplate="%{label}: $%{value:,.2f}<extra></extra>",
        sort=False,
    ))
    fig.update_layout(title=title or "Spending by category")
    return fig


def create_budget_gauge(spent: float, budget_amount: float, alert: bool = False) -> go.Figure:
    """Gauge of spend against the weekly budget.

    The bar turns orange once the alert threshold is reached.
    """
    upper = max(budget_amount, spent, 1.0)
    fig = go.Figure(go.Indicator(
        mode='gauge+number',
        value=spent,
        number={'prefix': '$', 'valueformat': ',.2f'},
        gauge={
            'axis': {'range': [0, upper]},
            'bar': {'color': '#FB8C00' if alert else '#1E88E5'},
            'threshold': {
                'line': {'color': '#E53935', 'width': 3},
                'value': budget_amount,
            },
        },
    ))
    fig.update_layout(title="Weekly budget", height=260, margin=dict(l=20, r=20, t=50, b=10))
    return fig
