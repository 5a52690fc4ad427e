"""
Pytest configuration and fixtures for the fraud dashboard tests.

HTTP is faked with FakeSession, injected into FraudApiClient in place of a
requests.Session. Routes are keyed by URL path.
"""

import os
import pytest

# Keep exports fast and out of the developer's temp dir
os.environ.setdefault("EXPORT_SETTLE_SECONDS", "0")

from fraudcore.api.client import FraudApiClient

BASE_URL = "http://backend.test"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ("" if payload is None else str(payload))

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeSession:
    """Records every GET and answers from a {path: response | exception} table."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def get(self, url, params=None):
        path = url[len(BASE_URL):] if url.startswith(BASE_URL) else url
        self.calls.append((path, dict(params or {})))
        route = self.routes.get(path)
        if route is None:
            return FakeResponse(404, text="not found")
        if isinstance(route, Exception):
            raise route
        return route

    def paths(self):
        return [p for p, _ in self.calls]


@pytest.fixture
def hospitals_payload():
    return {
        "hospitals": [
            {"id": "H001", "name": "King Fahad Hospital", "label": "King Fahad Hospital (H001)"},
            {"id": "H002", "name": "Al Noor Hospital", "label": "Al Noor Hospital (H002)"},
        ]
    }


@pytest.fixture
def report_payload():
    return {
        "hospital_id": "H001",
        "hospital_name": "King Fahad Hospital",
        "year": 2023,
        "quarter": "Q2",
        "hospital_risk_level": "MEDIUM",
        "total_prescriptions": 1200,
        "high_risk_cases": 150,
        "medium_risk_cases": 300,
        "low_risk_cases": 750,
        "controlled_drug_use": 85,
        "active_alerts": 150,
        "summary": "King Fahad Hospital had 1200 prescriptions in 2023 Q2.",
        "trend_last_3_months": [
            {"month": "2023-04", "value": 40},
            {"month": "2023-05", "value": 55},
            {"month": "2023-06", "value": 55},
        ],
        "top_suspicious_drugs": [
            {"drug_name": "Oxycodone", "avg_fraud_score": 0.91},
            {"drug_name": "Tramadol", "avg_fraud_score": 0.74},
        ],
        "risk_distribution": {"High": 150, "Medium": 300, "Low": 750},
    }


@pytest.fixture
def cases_payload():
    return {
        "hospital_id": "H001",
        "year": 2023,
        "quarter": "Q2",
        "cases": [
            {
                "prescription_id": "RX-1001",
                "patient_id": "P-77",
                "doctor_id": "D-12",
                "drug_name": "Oxycodone",
                "quantity": 120,
                "date": "2023-05-14",
                "final_fraud_score": 0.987,
                "risk_band": "High",
                "recommended_action": "Review immediately - high-risk prescription.",
            },
            {
                "prescription_id": "RX-1002",
                "patient_id": "P-78",
                "doctor_id": "D-19",
                "drug_name": "Tramadol",
                "quantity": 60,
                "date": "2023-06-02",
                "final_fraud_score": 0.5,
                "risk_band": "Medium",
                "recommended_action": "Flag for clinical review.",
            },
        ],
    }


@pytest.fixture
def backend_routes(hospitals_payload, report_payload, cases_payload):
    return {
        "/": FakeResponse(200, {"status": "ok"}),
        "/api/hospitals": FakeResponse(200, hospitals_payload),
        "/api/years": FakeResponse(200, {"years": [2021, 2022, 2023]}),
        "/api/fraud-report": FakeResponse(200, report_payload),
        "/api/top-cases": FakeResponse(200, cases_payload),
    }


@pytest.fixture
def make_client():
    def _make(routes, strict=True):
        session = FakeSession(routes)
        return FraudApiClient(BASE_URL, strict=strict, session=session), session
    return _make
