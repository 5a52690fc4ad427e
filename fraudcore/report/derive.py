"""
Chart series and display values derived from a FraudReport / TopCase list.

Nothing here fetches; every function is a pure transform of already-loaded data.
"""
from typing import Optional

from fraudcore.api.models import FraudReport, TopCase
from fraudcore.api.normalize import RISK_TIERS

HIGH_COLOR = "#FF4D4F"
MEDIUM_COLOR = "#FFA940"
LOW_COLOR = "#52C41A"

TIER_COLORS = {"High": HIGH_COLOR, "Medium": MEDIUM_COLOR, "Low": LOW_COLOR}

BAR_COLOR = "#3B82F6"
LINE_COLOR = "#9254DE"

EMPTY_BAR_MSG = "No data for this selection."
EMPTY_LINE_MSG = "No month data available."
EMPTY_PIE_MSG = "No risk distribution data."

METRIC_CARDS = [
    ("total_prescriptions", "Total Prescriptions", ""),
    ("high_risk_cases", "High Risk Cases", "high"),
    ("medium_risk_cases", "Medium Risk Cases", "medium"),
    ("low_risk_cases", "Low Risk Cases", "low"),
    ("controlled_drug_use", "Controlled Drug Prescriptions", ""),
    ("active_alerts", "Active Alerts", "high"),
]


def bar_series(report: Optional[FraudReport]) -> list[dict]:
    if report is None:
        return []
    return [
        {"name": d.get("drug_name"), "value": d.get("avg_fraud_score")}
        for d in report.top_suspicious_drugs
        if isinstance(d, dict)
    ]


def line_series(report: Optional[FraudReport]) -> list[dict]:
    if report is None:
        return []
    return [p for p in report.trend if isinstance(p, dict)]


def pie_series(report: Optional[FraudReport]) -> list[dict]:
    """Always three slices, High/Medium/Low, absent tiers as 0."""
    dist = report.risk_distribution if report is not None else {}
    return [{"name": tier, "value": dist.get(tier) or 0} for tier in RISK_TIERS]


def pie_is_empty(series: list[dict]) -> bool:
    return all(p["value"] == 0 for p in series)


def period_label(report: FraudReport) -> str:
    year = "" if report.year is None else report.year
    if report.quarter:
        return f"{year} {report.quarter}".strip()
    return f"{year} (full year)".strip()


def risk_level_label(report: Optional[FraudReport]) -> str:
    return (report.hospital_risk_level if report is not None else "") or ""


def risk_level_color(label: str) -> str:
    """Red for exactly HIGH, orange for exactly MEDIUM, green for anything else."""
    if label == "HIGH":
        return HIGH_COLOR
    if label == "MEDIUM":
        return MEDIUM_COLOR
    return LOW_COLOR


def risk_band_class(band: str) -> str:
    if band == "High":
        return "high"
    if band == "Medium":
        return "medium"
    return "low"


def format_score(score: float) -> str:
    return f"{score:.2f}"


def metric_values(report: FraudReport) -> list[tuple[str, int, str]]:
    """(label, value, tone) for the six metric cards, in display order."""
    return [(label, getattr(report, field), tone) for field, label, tone in METRIC_CARDS]


def case_rows(cases: list[TopCase]) -> list[list]:
    return [
        [
            c.prescription_id, c.risk_band, c.drug_name, c.quantity,
            c.patient_id, c.doctor_id, c.date, format_score(c.final_fraud_score),
            c.recommended_action,
        ]
        for c in cases
    ]


CASE_HEADERS = [
    "Prescription", "Risk", "Drug", "Qty", "Patient", "Doctor", "Date", "Fraud Score", "Recommended Action",
]


def export_basename(hospital_name: str, year, quarter: Optional[int]) -> str:
    """Fraud_Report_<hospitalName>_<year>[_Q<quarter>]"""
    name = f"Fraud_Report_{hospital_name}_{year}"
    if quarter is not None:
        name += f"_Q{quarter}"
    return name
