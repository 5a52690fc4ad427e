"""
Fraud backend API client.

Four read-only endpoints, each a single GET with no retries, no timeout and
no caching:
  - /api/hospitals      -> list[Hospital]
  - /api/years          -> list[int]
  - /api/fraud-report   -> FraudReport
  - /api/top-cases      -> list[TopCase]

Non-2xx responses raise ApiError carrying the status code and raw body.
Transport failures propagate as the underlying requests exception.

Strict mode (the default, FRAUD_API_STRICT) raises ShapeError when the
hospitals or years payload is missing its list; lenient mode returns [].
"""
import logging
from typing import Optional

import requests

from fraudcore import config
from fraudcore.api.models import FilterSelection, FraudReport, Hospital, TopCase
from fraudcore.api.normalize import normalize_case, normalize_hospital, normalize_report
from fraudcore.errors import ApiError, ShapeError
from fraudcore.util.validation import HOSPITALS_SCHEMA, YEARS_SCHEMA, validate

logger = logging.getLogger(__name__)


class FraudApiClient:
    def __init__(self, base_url: str, strict: bool = True, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.strict = strict
        self._session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _get_json(self, path: str, params: Optional[dict] = None):
        url = self._url(path)
        logger.info("GET %s params=%s", url, params or {})
        res = self._session.get(url, params=params)
        if not 200 <= res.status_code < 300:
            logger.warning("GET %s failed with status %s", url, res.status_code)
            raise ApiError(res.status_code, res.text)
        return res.json()

    def _checked_list(self, path: str, data, key: str, schema: dict) -> list:
        errors = validate(data, schema)
        if errors:
            if self.strict:
                raise ShapeError(path, errors)
            logger.warning("Ignoring malformed %s response: %s", path, errors)
            if isinstance(data, dict) and isinstance(data.get(key), list):
                return data[key]
            return []
        return data[key]

    # ── Hospitals & years ────────────────────────────────────────────────

    def ping(self) -> bool:
        """True when the backend root answers with a 2xx status."""
        try:
            self._get_json("/")
        except (ApiError, ValueError, requests.RequestException) as e:
            logger.warning("Backend ping failed: %s", e)
            return False
        return True

    def get_hospitals(self) -> list[Hospital]:
        path = "/api/hospitals"
        data = self._get_json(path)
        items = self._checked_list(path, data, "hospitals", HOSPITALS_SCHEMA)
        return [normalize_hospital(h) for h in items if isinstance(h, dict)]

    def get_years(self) -> list[int]:
        path = "/api/years"
        data = self._get_json(path)
        items = self._checked_list(path, data, "years", YEARS_SCHEMA)
        years = []
        for y in items:
            try:
                years.append(int(y))
            except (TypeError, ValueError):
                continue
        return years

    # ── Fraud report ─────────────────────────────────────────────────────

    def run_fraud_check(self, selection: FilterSelection) -> FraudReport:
        data = self._get_json("/api/fraud-report", selection.query_params())
        return normalize_report(data or {})

    # ── Top suspicious cases ─────────────────────────────────────────────

    def get_top_cases(self, selection: FilterSelection, limit: int = 8) -> list[TopCase]:
        params = selection.query_params()
        params["limit"] = str(limit)
        data = self._get_json("/api/top-cases", params)
        # backend returns: { hospital_id, year, quarter, cases: [...] }
        cases = (data or {}).get("cases") or []
        return [normalize_case(c) for c in cases if isinstance(c, dict)]


# ─────────────────────────── Default client ──────────────────────────────────

_client: Optional[FraudApiClient] = None


def default_client() -> FraudApiClient:
    global _client
    if _client is None:
        _client = FraudApiClient(config.API_BASE_URL, strict=config.FRAUD_API_STRICT)
    return _client


def get_hospitals() -> list[Hospital]:
    return default_client().get_hospitals()


def get_years() -> list[int]:
    return default_client().get_years()


def run_fraud_check(hospital_id: str, year: int, quarter: Optional[int] = None) -> FraudReport:
    return default_client().run_fraud_check(FilterSelection(hospital_id, year, quarter))


def get_top_cases(hospital_id: str, year: int, quarter: Optional[int] = None, limit: int = 8) -> list[TopCase]:
    return default_client().get_top_cases(FilterSelection(hospital_id, year, quarter), limit=limit)
