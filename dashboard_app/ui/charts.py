"""Plotly figures for the three dashboard charts."""
from typing import Optional

import plotly.graph_objects as go

from fraudcore.api.models import FraudReport
from fraudcore.report.derive import (
    BAR_COLOR, LINE_COLOR, TIER_COLORS, bar_series, line_series, pie_is_empty, pie_series,
)

CHART_HEIGHT = 260


def _layout(fig: go.Figure, title: str) -> go.Figure:
    fig.update_layout(
        title=dict(text=title, x=0.02, font=dict(size=14)),
        height=CHART_HEIGHT,
        margin=dict(l=40, r=20, t=50, b=40),
        plot_bgcolor="#ffffff",
        paper_bgcolor="#ffffff",
    )
    return fig


def bar_figure(report: Optional[FraudReport]) -> Optional[go.Figure]:
    series = bar_series(report)
    if not series:
        return None
    fig = go.Figure(go.Bar(
        x=[p["name"] for p in series],
        y=[p["value"] for p in series],
        marker_color=BAR_COLOR,
    ))
    fig.update_yaxes(gridcolor="#e0e0e0", griddash="dash")
    return _layout(fig, "Top Suspicious Drugs")


def line_figure(report: Optional[FraudReport]) -> Optional[go.Figure]:
    series = line_series(report)
    if not series:
        return None
    fig = go.Figure(go.Scatter(
        x=[p.get("month") for p in series],
        y=[p.get("value") for p in series],
        mode="lines+markers",
        line=dict(color=LINE_COLOR, shape="spline"),
    ))
    fig.update_xaxes(type="category")
    fig.update_yaxes(gridcolor="#e0e0e0", griddash="dash")
    return _layout(fig, "Fraud Trend (Last 3 Months)")


def pie_figure(report: Optional[FraudReport]) -> Optional[go.Figure]:
    series = pie_series(report)
    if pie_is_empty(series):
        return None
    fig = go.Figure(go.Pie(
        labels=[p["name"] for p in series],
        values=[p["value"] for p in series],
        marker=dict(colors=[TIER_COLORS[p["name"]] for p in series]),
        sort=False,
        textinfo="value",
    ))
    return _layout(fig, "Risk Distribution")
