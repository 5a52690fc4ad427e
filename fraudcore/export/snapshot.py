"""
Rasterize the active dashboard tab into a PIL image.

The overview tab is drawn as risk banner + six metric cards + the three
charts; the cases tab as the top-cases table. Rendering uses the Agg
backend at EXPORT_SCALE x the base DPI.
"""
import io
import textwrap

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from PIL import Image

from fraudcore.api.models import FraudReport, TopCase
from fraudcore.report.derive import (
    BAR_COLOR, CASE_HEADERS, EMPTY_BAR_MSG, EMPTY_LINE_MSG, EMPTY_PIE_MSG,
    HIGH_COLOR, LINE_COLOR, LOW_COLOR, MEDIUM_COLOR, TIER_COLORS,
    bar_series, case_rows, line_series, metric_values, pie_is_empty, pie_series,
    period_label, risk_band_class, risk_level_color, risk_level_label,
)

BASE_DPI = 96
TONE_COLORS = {"high": HIGH_COLOR, "medium": MEDIUM_COLOR, "low": LOW_COLOR, "": "#202124"}


def _empty(ax, title: str, msg: str) -> None:
    ax.set_title(title, fontsize=11, loc="left")
    ax.set_xticks([])
    ax.set_yticks([])
    ax.text(0.5, 0.5, msg, ha="center", va="center", color="#5f6368", fontsize=10, transform=ax.transAxes)


def _banner(ax, report: FraudReport) -> None:
    ax.axis("off")
    label = risk_level_label(report)
    ax.text(0.0, 0.8, "Hospital Risk Level", fontsize=13, fontweight="bold", transform=ax.transAxes)
    ax.text(
        0.16, 0.8, label or "N/A", fontsize=12, color="white", fontweight="bold", transform=ax.transAxes,
        bbox=dict(boxstyle="round,pad=0.4", facecolor=risk_level_color(label), edgecolor="none"),
    )
    header = report.hospital_name or report.hospital_id
    period = period_label(report)
    ax.text(1.0, 0.8, f"{header}  |  {period}", ha="right", fontsize=11, color="#5f6368", transform=ax.transAxes)
    if report.summary:
        ax.text(0.0, 0.45, textwrap.fill(report.summary, 170), va="top", fontsize=9.5,
                color="#3c4043", transform=ax.transAxes)


def _metric_card(ax, label: str, value, tone: str) -> None:
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_facecolor("#f8f9fa")
    for spine in ax.spines.values():
        spine.set_edgecolor("#e0e0e0")
    ax.text(0.5, 0.72, textwrap.fill(label, 18), ha="center", va="center", fontsize=8.5,
            color="#5f6368", transform=ax.transAxes)
    ax.text(0.5, 0.3, str(value), ha="center", va="center", fontsize=18, fontweight="bold",
            color=TONE_COLORS.get(tone, "#202124"), transform=ax.transAxes)


def _bar_chart(ax, report: FraudReport) -> None:
    series = bar_series(report)
    title = "Top Suspicious Drugs"
    if not series:
        _empty(ax, title, EMPTY_BAR_MSG)
        return
    ax.set_title(title, fontsize=11, loc="left")
    ax.bar([str(p["name"]) for p in series], [p["value"] or 0 for p in series], color=BAR_COLOR)
    ax.tick_params(axis="x", rotation=30, labelsize=8)
    ax.grid(axis="y", linestyle="--", alpha=0.5)


def _line_chart(ax, report: FraudReport) -> None:
    series = line_series(report)
    title = "Fraud Trend (Last 3 Months)"
    if not series:
        _empty(ax, title, EMPTY_LINE_MSG)
        return
    ax.set_title(title, fontsize=11, loc="left")
    ax.plot([str(p.get("month")) for p in series], [p.get("value") or 0 for p in series],
            color=LINE_COLOR, marker="o")
    ax.tick_params(axis="x", labelsize=8)
    ax.grid(linestyle="--", alpha=0.5)


def _pie_chart(ax, report: FraudReport) -> None:
    series = pie_series(report)
    title = "Risk Distribution"
    if pie_is_empty(series):
        _empty(ax, title, EMPTY_PIE_MSG)
        return
    ax.set_title(title, fontsize=11, loc="left")
    slices = [p for p in series if p["value"]]
    ax.pie(
        [p["value"] for p in slices],
        labels=[f"{p['name']} ({p['value']})" for p in slices],
        colors=[TIER_COLORS[p["name"]] for p in slices],
        startangle=90,
        textprops={"fontsize": 8},
    )
    ax.set_aspect("equal")


def _overview_figure(report: FraudReport, dpi: int):
    fig = plt.figure(figsize=(14, 9), dpi=dpi)
    gs = fig.add_gridspec(3, 6, height_ratios=[1.1, 1, 3.2], hspace=0.45, wspace=0.35)
    _banner(fig.add_subplot(gs[0, :]), report)
    for i, (label, value, tone) in enumerate(metric_values(report)):
        _metric_card(fig.add_subplot(gs[1, i]), label, value, tone)
    _bar_chart(fig.add_subplot(gs[2, 0:2]), report)
    _line_chart(fig.add_subplot(gs[2, 2:4]), report)
    _pie_chart(fig.add_subplot(gs[2, 4:6]), report)
    return fig


def _cases_figure(report: FraudReport, cases: list[TopCase], dpi: int):
    rows = case_rows(cases)
    fig = plt.figure(figsize=(14, 1.6 + 0.42 * (len(rows) + 1)), dpi=dpi)
    ax = fig.add_subplot(1, 1, 1)
    ax.axis("off")
    ax.set_title(f"Top Suspicious Prescriptions: {report.hospital_name or report.hospital_id}",
                 fontsize=12, loc="left")
    if not rows:
        ax.text(0.5, 0.5, "No suspicious cases for this selection.", ha="center", va="center",
                color="#5f6368", transform=ax.transAxes)
        return fig

    table = ax.table(cellText=rows, colLabels=CASE_HEADERS, loc="upper center", cellLoc="left")
    table.auto_set_font_size(False)
    table.set_fontsize(8)
    table.scale(1, 1.6)
    for col in range(len(CASE_HEADERS)):
        header = table[(0, col)]
        header.set_facecolor("#f1f3f4")
        header.set_text_props(fontweight="bold")
    for i, case in enumerate(cases, start=1):
        band_cell = table[(i, 1)]
        band_cell.set_facecolor(TONE_COLORS[risk_band_class(case.risk_band)])
        band_cell.set_text_props(color="white", fontweight="bold")
    return fig


def rasterize_tab(
    report: FraudReport,
    cases: list[TopCase],
    tab: str = "overview",
    scale: int = 2,
) -> Image.Image:
    """Render the given tab and return it as an RGB image."""
    dpi = BASE_DPI * max(1, scale)
    fig = _cases_figure(report, cases, dpi) if tab == "cases" else _overview_figure(report, dpi)
    buf = io.BytesIO()
    try:
        fig.savefig(buf, format="png", facecolor="white", bbox_inches="tight")
    finally:
        plt.close(fig)
    buf.seek(0)
    image = Image.open(buf)
    image.load()
    return image.convert("RGB")
