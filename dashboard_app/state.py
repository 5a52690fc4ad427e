"""
Per-session page state and the transitions the UI drives.

The state is a plain dict held in gr.State:
  page:  "filters" (initial) | "dashboard"
  tab:   "overview" | "cases"   (only meaningful on the dashboard)

The dashboard is reachable only through a successful run. Going back to the
filters keeps report/cases in memory; the next run overwrites them.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import requests

from fraudcore import config
from fraudcore.api.client import FraudApiClient
from fraudcore.api.models import FilterSelection
from fraudcore.errors import FraudDashboardError

logger = logging.getLogger(__name__)

PAGES = ["filters", "dashboard"]
TABS = ["overview", "cases"]

# (label, value) pairs for the quarter dropdown; "" is the full year
QUARTER_CHOICES = [("Full year", ""), ("Q1", 1), ("Q2", 2), ("Q3", 3), ("Q4", 4)]

VALIDATION_MSG = "Please select a hospital and year."
HOSPITALS_ERROR_MSG = "Failed to load hospitals from backend."
RUN_ERROR_MSG = "Failed to run fraud detector."

# requests' JSONDecodeError is a ValueError
FETCH_ERRORS = (FraudDashboardError, requests.RequestException, ValueError)


def default_state() -> dict:
    return {
        "page": "filters",
        "tab": "overview",
        "hospitals": [],
        "years": [],
        "hospital_id": "",
        "year": None,
        "quarter": None,
        "hospitals_loading": True,
        "hospitals_error": "",
        "loading": False,
        "error": "",
        "report": None,
        "cases": [],
        "selection": None,  # FilterSelection behind the loaded report
    }


def parse_quarter(value) -> Optional[int]:
    if value in (None, "", "Full year"):
        return None
    if isinstance(value, str) and value.upper().startswith("Q"):
        value = value[1:]
    quarter = int(value)
    if quarter not in (1, 2, 3, 4):
        raise ValueError(f"Quarter must be 1-4, got {quarter}")
    return quarter


def startup(client: FraudApiClient, st: dict) -> dict:
    """Load hospitals and years concurrently, then apply both in one update."""
    st["hospitals_loading"] = True
    with ThreadPoolExecutor(max_workers=2) as pool:
        hospitals_f = pool.submit(client.get_hospitals)
        years_f = pool.submit(client.get_years)

        try:
            hospitals = hospitals_f.result()
            hospitals_error = ""
        except FETCH_ERRORS as e:
            logger.error("Loading hospitals failed: %s", e)
            hospitals = []
            hospitals_error = HOSPITALS_ERROR_MSG

        try:
            years = years_f.result()
        except FETCH_ERRORS as e:
            logger.warning("Loading years failed, using defaults %s: %s", config.DEFAULT_YEARS, e)
            years = list(config.DEFAULT_YEARS)

    st["hospitals"] = hospitals
    st["years"] = years
    st["hospitals_error"] = hospitals_error
    st["hospital_id"] = hospitals[0].id if hospitals else ""
    st["year"] = max(years) if years else None
    st["hospitals_loading"] = False
    return st


def run(client: FraudApiClient, st: dict, hospital_id: str, year, quarter=None, limit: Optional[int] = None) -> dict:
    """
    Validate the filters, then fetch report + top cases concurrently.

    Success replaces report/cases and opens dashboard/overview. Any failure
    clears report/cases, records the message, and leaves the page unchanged.
    """
    st["hospital_id"] = hospital_id or ""
    st["year"] = int(year) if year not in (None, "") else None
    st["quarter"] = parse_quarter(quarter)

    if not st["hospital_id"] or not st["year"]:
        st["error"] = VALIDATION_MSG
        return st

    selection = FilterSelection(st["hospital_id"], st["year"], st["quarter"])
    st["error"] = ""
    st["loading"] = True
    try:
        with ThreadPoolExecutor(max_workers=2) as pool:
            report_f = pool.submit(client.run_fraud_check, selection)
            cases_f = pool.submit(client.get_top_cases, selection, limit or config.TOP_CASES_LIMIT)
            report = report_f.result()
            cases = cases_f.result()
    except FETCH_ERRORS as e:
        logger.error("Fraud check failed for %s: %s", selection, e)
        st["report"] = None
        st["cases"] = []
        st["selection"] = None
        st["error"] = str(e) or RUN_ERROR_MSG
        return st
    finally:
        st["loading"] = False

    logger.info("Loaded report for %s with %d top cases", selection, len(cases))
    st["report"] = report
    st["cases"] = cases
    st["selection"] = selection
    st["page"] = "dashboard"
    st["tab"] = "overview"
    return st


def show_tab(st: dict, tab: str) -> dict:
    if tab not in TABS:
        raise ValueError(f"Unknown tab: {tab}")
    st["tab"] = tab
    return st


def toggle_tab(st: dict) -> dict:
    return show_tab(st, "cases" if st.get("tab") == "overview" else "overview")


def back_to_filters(st: dict) -> dict:
    st["page"] = "filters"
    return st
