"""
Tests for the fraud backend API client.
"""

import pytest
import requests

from conftest import FakeResponse
from fraudcore.api.models import FilterSelection, Hospital
from fraudcore.errors import ApiError, ShapeError


class TestQueryParams:
    """Report and top-cases query strings."""

    def test_full_year_omits_quarter(self, make_client, backend_routes):
        client, session = make_client(backend_routes)
        client.run_fraud_check(FilterSelection("H001", 2023))

        path, params = session.calls[-1]
        assert path == "/api/fraud-report"
        assert params == {"hospital_id": "H001", "year": "2023"}

    @pytest.mark.parametrize("quarter", [1, 2, 3, 4])
    def test_quarter_sent_as_decimal_string(self, make_client, backend_routes, quarter):
        client, session = make_client(backend_routes)
        client.run_fraud_check(FilterSelection("H001", 2023, quarter))

        _, params = session.calls[-1]
        assert params["quarter"] == str(quarter)
        assert params["year"] == "2023"

    def test_top_cases_default_limit(self, make_client, backend_routes):
        client, session = make_client(backend_routes)
        client.get_top_cases(FilterSelection("H001", 2022))

        path, params = session.calls[-1]
        assert path == "/api/top-cases"
        assert params == {"hospital_id": "H001", "year": "2022", "limit": "8"}

    def test_top_cases_with_quarter_and_limit(self, make_client, backend_routes):
        client, session = make_client(backend_routes)
        client.get_top_cases(FilterSelection("H001", 2022, 3), limit=5)

        _, params = session.calls[-1]
        assert params["limit"] == "5"
        assert params["quarter"] == "3"

    def test_top_cases_shares_report_params(self, make_client, backend_routes):
        client, session = make_client(backend_routes)
        selection = FilterSelection("H001", 2023, 4)
        client.run_fraud_check(selection)
        client.get_top_cases(selection, limit=3)

        (_, report_params), (_, case_params) = session.calls
        assert case_params == {**report_params, "limit": "3"}
        assert selection.query_params() == report_params


class TestHospitalsAndYears:

    def test_get_hospitals(self, make_client, backend_routes):
        client, _ = make_client(backend_routes)
        hospitals = client.get_hospitals()

        assert hospitals[0] == Hospital(id="H001", label="King Fahad Hospital (H001)", name="King Fahad Hospital")
        assert [h.id for h in hospitals] == ["H001", "H002"]

    def test_get_years(self, make_client, backend_routes):
        client, _ = make_client(backend_routes)
        assert client.get_years() == [2021, 2022, 2023]

    def test_strict_rejects_missing_hospitals(self, make_client, backend_routes):
        backend_routes["/api/hospitals"] = FakeResponse(200, {"items": []})
        client, _ = make_client(backend_routes, strict=True)

        with pytest.raises(ShapeError) as exc:
            client.get_hospitals()
        assert "/api/hospitals" in str(exc.value)

    def test_strict_rejects_missing_years(self, make_client, backend_routes):
        backend_routes["/api/years"] = FakeResponse(200, {})
        client, _ = make_client(backend_routes, strict=True)

        with pytest.raises(ShapeError):
            client.get_years()

    def test_lenient_defaults_to_empty(self, make_client, backend_routes):
        backend_routes["/api/hospitals"] = FakeResponse(200, {})
        backend_routes["/api/years"] = FakeResponse(200, {"years": None})
        client, _ = make_client(backend_routes, strict=False)

        assert client.get_hospitals() == []
        assert client.get_years() == []

    def test_label_falls_back_to_name(self, make_client, backend_routes):
        backend_routes["/api/hospitals"] = FakeResponse(200, {"hospitals": [{"id": "H9", "name": "North"}]})
        client, _ = make_client(backend_routes)

        assert client.get_hospitals()[0].label == "North"


class TestReport:

    def test_report_normalized(self, make_client, backend_routes):
        client, _ = make_client(backend_routes)
        report = client.run_fraud_check(FilterSelection("H001", 2023, 2))

        assert report.hospital_name == "King Fahad Hospital"
        assert report.total_prescriptions == 1200
        assert report.hospital_risk_level == "MEDIUM"
        assert report.trend[0] == {"month": "2023-04", "value": 40}
        assert report.risk_distribution == {"High": 150, "Medium": 300, "Low": 750}

    def test_risk_level_preferred_over_hospital_risk_level(self, make_client, backend_routes, report_payload):
        report_payload["risk_level"] = "HIGH"
        backend_routes["/api/fraud-report"] = FakeResponse(200, report_payload)
        client, _ = make_client(backend_routes)

        assert client.run_fraud_check(FilterSelection("H001", 2023)).hospital_risk_level == "HIGH"

    def test_fraud_trend_preferred(self, make_client, backend_routes, report_payload):
        report_payload["fraud_trend_last_3_months"] = [{"month": "Jan", "value": 1}]
        backend_routes["/api/fraud-report"] = FakeResponse(200, report_payload)
        client, _ = make_client(backend_routes)

        assert client.run_fraud_check(FilterSelection("H001", 2023)).trend == [{"month": "Jan", "value": 1}]

    def test_top_cases_missing_defaults_empty(self, make_client, backend_routes):
        backend_routes["/api/top-cases"] = FakeResponse(200, {"hospital_id": "H001"})
        client, _ = make_client(backend_routes)

        assert client.get_top_cases(FilterSelection("H001", 2023)) == []

    def test_top_cases_normalized(self, make_client, backend_routes):
        client, _ = make_client(backend_routes)
        cases = client.get_top_cases(FilterSelection("H001", 2023))

        assert len(cases) == 2
        assert cases[0].prescription_id == "RX-1001"
        assert cases[0].final_fraud_score == pytest.approx(0.987)
        assert cases[1].risk_band == "Medium"


class TestErrors:

    @pytest.mark.parametrize("path", ["/api/hospitals", "/api/years", "/api/fraud-report", "/api/top-cases"])
    def test_non_2xx_carries_status_and_body(self, make_client, backend_routes, path):
        backend_routes[path] = FakeResponse(500, text="server error")
        client, _ = make_client(backend_routes)
        sel = FilterSelection("H001", 2023)
        calls = {
            "/api/hospitals": client.get_hospitals,
            "/api/years": client.get_years,
            "/api/fraud-report": lambda: client.run_fraud_check(sel),
            "/api/top-cases": lambda: client.get_top_cases(sel),
        }

        with pytest.raises(ApiError) as exc:
            calls[path]()
        assert exc.value.status_code == 500
        assert exc.value.body == "server error"
        assert str(exc.value) == "API error 500: server error"

    def test_transport_error_propagates(self, make_client, backend_routes):
        backend_routes["/api/hospitals"] = requests.ConnectionError("connection refused")
        client, _ = make_client(backend_routes)

        with pytest.raises(requests.ConnectionError):
            client.get_hospitals()

    def test_single_request_no_retry(self, make_client, backend_routes):
        backend_routes["/api/fraud-report"] = FakeResponse(503, text="down")
        client, session = make_client(backend_routes)

        with pytest.raises(ApiError):
            client.run_fraud_check(FilterSelection("H001", 2023))
        assert session.paths().count("/api/fraud-report") == 1


class TestPing:

    def test_ping_ok(self, make_client, backend_routes):
        client, _ = make_client(backend_routes)
        assert client.ping() is True

    def test_ping_unreachable(self, make_client, backend_routes):
        backend_routes["/"] = requests.Timeout("timed out")
        client, _ = make_client(backend_routes)
        assert client.ping() is False
