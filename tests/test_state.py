"""
Tests for page state transitions: startup, run, tab toggling and navigation.
"""

import requests

from conftest import FakeResponse
from dashboard_app import state as page_state
from fraudcore.api.models import FilterSelection


class TestStartup:

    def test_selects_first_hospital_and_latest_year(self, make_client, backend_routes):
        client, _ = make_client(backend_routes)
        st = page_state.startup(client, page_state.default_state())

        assert st["hospital_id"] == "H001"
        assert st["year"] == 2023
        assert st["hospitals_error"] == ""
        assert st["hospitals_loading"] is False
        assert st["page"] == "filters"

    def test_years_failure_uses_defaults(self, make_client, backend_routes):
        backend_routes["/api/years"] = FakeResponse(500, text="boom")
        client, _ = make_client(backend_routes)
        st = page_state.startup(client, page_state.default_state())

        assert st["years"] == [2021, 2022, 2023]
        assert st["year"] == 2023
        assert st["hospitals_error"] == ""

    def test_years_transport_failure_uses_defaults(self, make_client, backend_routes):
        backend_routes["/api/years"] = requests.ConnectionError("refused")
        client, _ = make_client(backend_routes)
        st = page_state.startup(client, page_state.default_state())

        assert st["years"] == [2021, 2022, 2023]

    def test_hospitals_failure_sets_page_error(self, make_client, backend_routes):
        backend_routes["/api/hospitals"] = FakeResponse(502, text="bad gateway")
        client, session = make_client(backend_routes)
        st = page_state.startup(client, page_state.default_state())

        assert st["hospitals"] == []
        assert st["hospital_id"] == ""
        assert st["hospitals_error"] == page_state.HOSPITALS_ERROR_MSG
        # years are fetched independently
        assert "/api/years" in session.paths()
        assert st["years"] == [2021, 2022, 2023]

    def test_malformed_hospitals_strict(self, make_client, backend_routes):
        backend_routes["/api/hospitals"] = FakeResponse(200, {"data": []})
        client, _ = make_client(backend_routes, strict=True)
        st = page_state.startup(client, page_state.default_state())

        assert st["hospitals_error"] == page_state.HOSPITALS_ERROR_MSG


class TestRun:

    def test_missing_hospital_blocks_request(self, make_client, backend_routes):
        client, session = make_client(backend_routes)
        st = page_state.run(client, page_state.default_state(), "", 2023)

        assert st["error"] == page_state.VALIDATION_MSG
        assert session.calls == []
        assert st["page"] == "filters"

    def test_missing_year_blocks_request(self, make_client, backend_routes):
        client, session = make_client(backend_routes)
        st = page_state.run(client, page_state.default_state(), "H001", None)

        assert st["error"] == page_state.VALIDATION_MSG
        assert session.calls == []

    def test_success_opens_dashboard_overview(self, make_client, backend_routes):
        client, session = make_client(backend_routes)
        st = page_state.default_state()
        st["tab"] = "cases"
        st = page_state.run(client, st, "H001", 2023, 2)

        assert st["error"] == ""
        assert st["page"] == "dashboard"
        assert st["tab"] == "overview"
        assert st["report"].hospital_name == "King Fahad Hospital"
        assert len(st["cases"]) == 2
        assert st["selection"] == FilterSelection("H001", 2023, 2)
        assert st["loading"] is False
        assert sorted(session.paths()) == ["/api/fraud-report", "/api/top-cases"]

    def test_full_year_dropdown_value(self, make_client, backend_routes):
        client, session = make_client(backend_routes)
        page_state.run(client, page_state.default_state(), "H001", "2023", "")

        for _, params in session.calls:
            assert "quarter" not in params
            assert params["year"] == "2023"

    def test_failure_clears_data_and_stays(self, make_client, backend_routes):
        client, session = make_client(backend_routes)
        st = page_state.run(client, page_state.default_state(), "H001", 2023)
        st = page_state.back_to_filters(st)

        session.routes["/api/fraud-report"] = FakeResponse(500, text="server error")
        st = page_state.run(client, st, "H001", 2022)

        assert st["page"] == "filters"
        assert st["report"] is None
        assert st["cases"] == []
        assert "500" in st["error"]
        assert "server error" in st["error"]

    def test_top_cases_failure_fails_the_run(self, make_client, backend_routes):
        backend_routes["/api/top-cases"] = requests.ConnectionError("connection reset")
        client, _ = make_client(backend_routes)
        st = page_state.run(client, page_state.default_state(), "H001", 2023)

        assert st["report"] is None
        assert "connection reset" in st["error"]


class TestNavigation:

    def test_toggle_tab_no_refetch(self, make_client, backend_routes):
        client, session = make_client(backend_routes)
        st = page_state.run(client, page_state.default_state(), "H001", 2023)
        n_calls = len(session.calls)

        st = page_state.toggle_tab(st)
        assert st["tab"] == "cases"
        st = page_state.toggle_tab(st)
        assert st["tab"] == "overview"
        assert len(session.calls) == n_calls

    def test_back_keeps_data(self, make_client, backend_routes):
        client, _ = make_client(backend_routes)
        st = page_state.run(client, page_state.default_state(), "H001", 2023)
        report = st["report"]

        st = page_state.back_to_filters(st)
        assert st["page"] == "filters"
        assert st["report"] is report


def test_parse_quarter():
    assert page_state.parse_quarter("") is None
    assert page_state.parse_quarter(None) is None
    assert page_state.parse_quarter(3) == 3
    assert page_state.parse_quarter("Q4") == 4
    assert page_state.parse_quarter("2") == 2
