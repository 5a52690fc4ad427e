"""Read-only snapshots of the records the backend serves."""
from typing import NamedTuple, Optional


QUARTERS = (1, 2, 3, 4)


class Hospital(NamedTuple):
    id: str
    label: str
    name: str = ""


class FilterSelection(NamedTuple):
    hospital_id: str
    year: int
    quarter: Optional[int] = None  # None = full year

    def query_params(self) -> dict[str, str]:
        params = {"hospital_id": self.hospital_id, "year": str(self.year)}
        if self.quarter is not None:
            params["quarter"] = str(self.quarter)
        return params


class FraudReport(NamedTuple):
    hospital_id: str
    hospital_name: str
    year: Optional[int]
    quarter: Optional[str]
    total_prescriptions: int
    high_risk_cases: int
    medium_risk_cases: int
    low_risk_cases: int
    controlled_drug_use: int
    active_alerts: int
    hospital_risk_level: str
    summary: str
    trend: list[dict]
    top_suspicious_drugs: list[dict]
    risk_distribution: dict[str, int]


class TopCase(NamedTuple):
    prescription_id: str
    risk_band: str
    drug_name: str
    quantity: int
    patient_id: str
    doctor_id: str
    date: str
    final_fraud_score: float
    recommended_action: str
