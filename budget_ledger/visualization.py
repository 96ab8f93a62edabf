"""Plotly figures for spending trends and budget allocation.

Each function accepts the objects produced by :mod:`aggregation` or
:mod:`engine` and returns a ``plotly.graph_objects.Figure``.  Amounts
are converted to floats here, at the display boundary, and nowhere else.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from budget_ledger.aggregation import NO_DATA_KEY, series_frame
from budget_ledger.categories import TRACKED_GROUPS, group_label
from budget_ledger.models import AllocationSnapshot, SeriesPoint


def create_trend_chart(points: Iterable[SeriesPoint], title: str | None = None) -> go.Figure:
    """Generate a line chart for a bucketed spending series.

    Parameters
    ----------
    points : iterable of SeriesPoint
        Output of :func:`budget_ledger.aggregation.bucket`.
    title : str, optional
        Chart title.  Defaults to ``"Spending over time"``.

    Returns
    -------
    plotly.graph_objects.Figure
        Interactive line chart.
    """
    df = series_frame(points)
    if df.empty or (len(df) == 1 and df.loc[0, 'Period'] == NO_DATA_KEY):
        fig = go.Figure()
        fig.update_layout(title="No data to display")
        return fig
    fig = px.line(df, x="Period", y="Amount", markers=True)
    fig.update_layout(
        title=title or "Spending over time",
        xaxis_title="Period",
        yaxis_title="Amount",
    )
    return fig


def create_allocation_chart(snapshot: AllocationSnapshot, title: str | None = None) -> go.Figure:
    """Grouped bar chart of allocated vs spent per budget group."""
    rows = []
    for group in TRACKED_GROUPS:
        entry = snapshot[group]
        label = group_label(group)
        rows.append({"Group": label, "Metric": "Allocated", "Amount": float(entry.allocated)})
        rows.append({"Group": label, "Metric": "Spent", "Amount": float(entry.spent)})
    df = pd.DataFrame(rows)
    fig = px.bar(df, x="Group", y="Amount", color="Metric", barmode="group")
    fig.update_layout(
        title=title or "Budget allocation",
        xaxis_title="Budget group",
        yaxis_title="Amount",
    )
    return fig
