"""
Reusable HTML components for the fraud dashboard.

Provides rendering functions for the risk banner, metric cards, empty-chart
placeholders and the top-cases table. All values are escaped before they are
interpolated.
"""
import html
from typing import Optional

from fraudcore.api.models import FraudReport, TopCase
from fraudcore.report.derive import (
    format_score, metric_values, period_label, risk_band_class, risk_level_color, risk_level_label,
)


def alert_html(msg: str, kind: str = "info") -> str:
    if not msg:
        return ""
    return f'<div class="fd-alert fd-alert-{kind}">{html.escape(msg)}</div>'


def placeholder_html() -> str:
    return '''
    <div class="fd-placeholder">
      <p>Select a hospital, year, and quarter, then click</p>
      <p class="fd-placeholder-cta">&ldquo;Run Fraud Detector&rdquo;</p>
    </div>'''


def risk_banner_html(report: Optional[FraudReport]) -> str:
    """Hospital risk level badge plus the backend's summary sentence."""
    if report is None:
        return ""
    label = risk_level_label(report)
    color = risk_level_color(label)
    period = period_label(report)
    return f'''
    <div class="fd-risk-banner">
      <div class="fd-risk-banner-main">
        <span class="fd-risk-label">Hospital Risk Level</span>
        <span class="fd-risk-badge" style="background-color:{color};">{html.escape(label or "N/A")}</span>
        <span class="fd-risk-period">{html.escape(report.hospital_name)} &middot; {html.escape(period)}</span>
      </div>
      <p class="fd-risk-summary">{html.escape(report.summary)}</p>
    </div>'''


def metric_cards_html(report: Optional[FraudReport]) -> str:
    """Six metric cards, three per row."""
    if report is None:
        return ""
    cards = []
    for label, value, tone in metric_values(report):
        tone_class = f" fd-metric-{tone}" if tone else ""
        cards.append(f'''
        <div class="fd-metric-card">
          <span class="fd-metric-label">{label}</span>
          <span class="fd-metric-value{tone_class}">{value}</span>
        </div>''')
    return f'<div class="fd-metrics-grid">{"".join(cards)}</div>'


def chart_empty_html(title: str, msg: str) -> str:
    return f'''
    <div class="fd-chart-card">
      <h3 class="fd-chart-title">{title}</h3>
      <p class="fd-chart-empty">{msg}</p>
    </div>'''


def top_cases_table_html(cases: list[TopCase]) -> str:
    """One row per case; risk-band pill coloured High / Medium / anything else."""
    if not cases:
        return "<p class='fd-chart-empty'>No suspicious cases for this selection.</p>"

    rows = []
    for c in cases:
        band = risk_band_class(c.risk_band)
        rows.append(f'''
        <tr>
          <td class="fd-td">{html.escape(c.prescription_id)}</td>
          <td class="fd-td"><span class="fd-pill fd-pill-{band}">{html.escape(c.risk_band)}</span></td>
          <td class="fd-td">{html.escape(c.drug_name)}</td>
          <td class="fd-td">{c.quantity}</td>
          <td class="fd-td">{html.escape(c.patient_id)}</td>
          <td class="fd-td">{html.escape(c.doctor_id)}</td>
          <td class="fd-td">{html.escape(c.date)}</td>
          <td class="fd-td fd-score">{format_score(c.final_fraud_score)}</td>
          <td class="fd-td" style="color:#3c4043;">{html.escape(c.recommended_action)}</td>
        </tr>''')

    return f'''
    <table class="fd-table">
      <thead>
        <tr>
          <th class="fd-th">Prescription</th>
          <th class="fd-th">Risk</th>
          <th class="fd-th">Drug</th>
          <th class="fd-th">Qty</th>
          <th class="fd-th">Patient</th>
          <th class="fd-th">Doctor</th>
          <th class="fd-th">Date</th>
          <th class="fd-th">Fraud Score</th>
          <th class="fd-th">Recommended Action</th>
        </tr>
      </thead>
      <tbody>{''.join(rows)}</tbody>
    </table>'''


def backend_status_html(base_url: str, online: Optional[bool]) -> str:
    if online is None:
        dot, text = "fd-dot-grey", "checking"
    elif online:
        dot, text = "fd-dot-green", "online"
    else:
        dot, text = "fd-dot-red", "unreachable"
    return (
        f'<div class="fd-backend-status"><span class="fd-dot {dot}"></span>'
        f'Backend <code>{html.escape(base_url)}</code> {text}</div>'
    )
