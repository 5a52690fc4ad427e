"""
Reshape raw backend payloads into the dashboard's record types.

The backend is not consistent about field names across deployments:
  - risk level arrives as `risk_level` or `hospital_risk_level`
  - the trend series arrives as `fraud_trend_last_3_months` or `trend_last_3_months`
  - risk distribution arrives as {High, Medium, Low} or as [{name, value}, ...]

The first non-empty alternative wins, in the order listed above.
"""
from typing import Any, Optional

from fraudcore.api.models import FraudReport, Hospital, TopCase

RISK_TIERS = ("High", "Medium", "Low")


def _first(data: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return default


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _opt_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_risk_distribution(raw: Any) -> dict:
    """
    Return the distribution as a {tier: count} mapping.

    List entries are matched to tiers by case-insensitive substring, so
    "High Risk" and "HIGH" both land on "High". Unmatched entries are dropped.
    """
    if isinstance(raw, dict):
        return dict(raw)
    if not isinstance(raw, list):
        return {}

    out: dict = {}
    for item in raw:
        if not item or not isinstance(item, dict):
            continue
        name = str(item.get("name") or "").lower()
        if "high" in name:
            out["High"] = item.get("value")
        elif "medium" in name:
            out["Medium"] = item.get("value")
        elif "low" in name:
            out["Low"] = item.get("value")
    return out


def normalize_hospital(raw: dict) -> Hospital:
    hospital_id = str(raw.get("id", ""))
    name = str(raw.get("name") or "")
    label = str(raw.get("label") or name or hospital_id)
    return Hospital(id=hospital_id, label=label, name=name)


def normalize_report(data: dict) -> FraudReport:
    quarter = data.get("quarter")
    return FraudReport(
        hospital_id=str(data.get("hospital_id") or ""),
        hospital_name=str(data.get("hospital_name") or ""),
        year=_opt_int(data.get("year")),
        quarter=None if quarter in (None, "") else str(quarter),
        total_prescriptions=_int(data.get("total_prescriptions")),
        high_risk_cases=_int(data.get("high_risk_cases")),
        medium_risk_cases=_int(data.get("medium_risk_cases")),
        low_risk_cases=_int(data.get("low_risk_cases")),
        controlled_drug_use=_int(data.get("controlled_drug_use")),
        active_alerts=_int(data.get("active_alerts")),
        hospital_risk_level=str(_first(data, "risk_level", "hospital_risk_level", default="")),
        summary=str(data.get("summary") or ""),
        trend=list(_first(data, "fraud_trend_last_3_months", "trend_last_3_months", default=[])),
        top_suspicious_drugs=list(data.get("top_suspicious_drugs") or []),
        risk_distribution=normalize_risk_distribution(data.get("risk_distribution")),
    )


def normalize_case(raw: dict) -> TopCase:
    try:
        score = float(raw.get("final_fraud_score") or 0)
    except (TypeError, ValueError):
        score = 0.0
    return TopCase(
        prescription_id=str(raw.get("prescription_id", "")),
        risk_band=str(raw.get("risk_band") or ""),
        drug_name=str(raw.get("drug_name") or ""),
        quantity=_int(raw.get("quantity")),
        patient_id=str(raw.get("patient_id", "")),
        doctor_id=str(raw.get("doctor_id", "")),
        date=str(raw.get("date") or ""),
        final_fraud_score=score,
        recommended_action=str(raw.get("recommended_action") or ""),
    )
