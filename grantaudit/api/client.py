"""
Client for the remote grants API.

The API is a thin fetch-and-display collaborator: every request is a single
shot, failures are reported on the result and never raised, and callers get
the last-known-good payload (or a bundled default) instead.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from grantaudit.config import config
from grantaudit.data.sample import MINISTRIES, FISCAL_YEARS


ELEMENTS_ENDPOINT = "/api/grants/elements"
PROGRAMS_ENDPOINT = "/api/grants/programs"
TOP_ENDPOINT = "/api/grants/top"
GRANTS_ENDPOINT = "/api/grants"
TRENDS_ENDPOINT = "/api/grants/trends"
DATA_QUALITY_ENDPOINT = "/api/grants/data-quality"


def default_elements() -> dict:
    """Filter option lists shipped with the sample dataset."""
    return {
        "ministries": list(MINISTRIES),
        "displayFiscalYears": list(FISCAL_YEARS),
    }


def _is_list(data: Any) -> bool:
    return isinstance(data, list)


def _is_elements(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and isinstance(data.get("ministries"), list)
        and isinstance(data.get("displayFiscalYears"), list)
    )


def _is_number(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def _is_trend_rows(data: Any) -> bool:
    """A list of trend rows whose amounts are numeric (or absent)."""
    return isinstance(data, list) and all(
        isinstance(row, dict)
        and _is_number(row.get("totalAmount"))
        and _is_number(row.get("averageGrantAmount"))
        for row in data
    )


@dataclass
class FetchResult:
    """Outcome of one API request."""
    ok: bool
    data: Any
    error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return not self.ok


class GrantsAPIClient:
    """Client for the grants dashboard API."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or config.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config.api_timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        self._last_good: dict[str, Any] = {}

    def _request(
        self,
        method: str,
        endpoint: str,
        payload: Optional[dict] = None,
        default: Any = None,
        validate: Optional[Callable[[Any], bool]] = None,
    ) -> FetchResult:
        """
        Make an API request, falling back to the last good or default payload.

        Only payloads accepted by `validate` are returned as successful and
        remembered as last good.
        """
        url = f"{self.base_url}{endpoint}"

        try:
            if method == "GET":
                response = self.session.get(url, timeout=self.timeout)
            else:
                response = self.session.post(url, json=payload or {}, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            return self._fallback(endpoint, default, f"API error: {e}")
        except ValueError as e:
            return self._fallback(endpoint, default, f"Invalid API response: {e}")

        if validate is not None and not validate(data):
            return self._fallback(endpoint, default, f"Invalid API response from {endpoint}: unexpected shape")

        self._last_good[endpoint] = data
        return FetchResult(ok=True, data=data)

    def _fallback(self, endpoint: str, default: Any, error: str) -> FetchResult:
        print(f"  Warning: {error}")
        data = self._last_good.get(endpoint, default)
        return FetchResult(ok=False, data=data, error=error)

    def fetch_elements(self, filters: Optional[dict] = None) -> FetchResult:
        """Ministry and fiscal-year option lists."""
        return self._request("POST", ELEMENTS_ENDPOINT, filters, default_elements(), _is_elements)

    def fetch_programs(self, filters: Optional[dict] = None) -> FetchResult:
        """Program totals grouped by ministry."""
        return self._request("POST", PROGRAMS_ENDPOINT, filters, [], _is_list)

    def fetch_top_recipients(self, filters: Optional[dict] = None) -> FetchResult:
        """Recipients ranked by total amount."""
        return self._request("POST", TOP_ENDPOINT, filters, [], _is_list)

    def fetch_grants(self, filters: Optional[dict] = None) -> FetchResult:
        """Grant records matching the filters."""
        return self._request("POST", GRANTS_ENDPOINT, filters, [], _is_list)

    def fetch_trends(self, filters: Optional[dict] = None) -> FetchResult:
        """
        Yearly trend rows.

        Each row has fiscalYear, totalAmount, recipientCount and
        averageGrantAmount.
        """
        return self._request("POST", TRENDS_ENDPOINT, filters, [], _is_trend_rows)

    def fetch_data_quality(self) -> FetchResult:
        """Server-side data quality report."""
        return self._request("GET", DATA_QUALITY_ENDPOINT, default={}, validate=lambda d: isinstance(d, dict))

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
