"""Tests for the grants API client."""

import pytest
import requests

from grantaudit.api import GrantsAPIClient, default_elements


class FakeResponse:
    def __init__(self, payload=None, status=200, bad_json=False):
        self.payload = payload
        self.status_code = status
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value")
        return self.payload


@pytest.fixture
def client():
    return GrantsAPIClient(base_url="http://api.test/", timeout=5)


def test_elements_success(client, monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json, timeout))
        return FakeResponse({"ministries": ["HEALTH"], "displayFiscalYears": ["2023-2024"]})

    monkeypatch.setattr(client.session, "post", fake_post)
    result = client.fetch_elements()

    assert result.ok
    assert result.data["ministries"] == ["HEALTH"]
    assert calls == [("http://api.test/api/grants/elements", {}, 5)]


def test_network_failure_falls_back_to_defaults(client, monkeypatch, capsys):
    def fake_post(url, json=None, timeout=None):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(client.session, "post", fake_post)
    result = client.fetch_elements()

    assert not result.ok
    assert result.is_fallback
    assert result.data == default_elements()
    assert "connection refused" in result.error
    assert "Warning" in capsys.readouterr().out


def test_http_error_falls_back(client, monkeypatch):
    monkeypatch.setattr(client.session, "post", lambda url, json=None, timeout=None: FakeResponse(status=503))
    result = client.fetch_trends({"ministries": ["HEALTH"]})
    assert not result.ok
    assert result.data == []


def test_bad_json_falls_back(client, monkeypatch):
    monkeypatch.setattr(client.session, "post", lambda url, json=None, timeout=None: FakeResponse(bad_json=True))
    result = client.fetch_grants()
    assert not result.ok
    assert "Invalid API response" in result.error


def test_failure_returns_last_good_payload(client, monkeypatch):
    rows = [{"fiscalYear": "2023-2024", "totalAmount": 10, "recipientCount": 1, "averageGrantAmount": 10}]
    monkeypatch.setattr(client.session, "post", lambda url, json=None, timeout=None: FakeResponse(rows))
    assert client.fetch_trends().data == rows

    def fail(url, json=None, timeout=None):
        raise requests.Timeout("timed out")

    monkeypatch.setattr(client.session, "post", fail)
    result = client.fetch_trends()
    assert not result.ok
    assert result.data == rows


def test_elements_wrong_shape(client, monkeypatch):
    monkeypatch.setattr(client.session, "post", lambda url, json=None, timeout=None: FakeResponse(["HEALTH"]))
    result = client.fetch_elements()
    assert not result.ok
    assert result.data == default_elements()


@pytest.mark.parametrize("payload", [
    [{"fiscalYear": "2023-2024", "totalAmount": "n/a"}],
    [{"fiscalYear": "2023-2024", "averageGrantAmount": float("nan")}],
    [{"fiscalYear": "2023-2024", "totalAmount": True}],
    ["2023-2024"],
    {"rows": []},
])
def test_trends_malformed_rows(client, monkeypatch, payload):
    monkeypatch.setattr(client.session, "post", lambda url, json=None, timeout=None: FakeResponse(payload))
    result = client.fetch_trends()
    assert not result.ok
    assert result.data == []
    assert "unexpected shape" in result.error


def test_wrong_shape_not_remembered(client, monkeypatch):
    rows = [{"fiscalYear": "2023-2024", "totalAmount": 10}]
    monkeypatch.setattr(client.session, "post", lambda url, json=None, timeout=None: FakeResponse(rows))
    assert client.fetch_trends().ok

    monkeypatch.setattr(client.session, "post", lambda url, json=None, timeout=None: FakeResponse([{"totalAmount": "x"}]))
    result = client.fetch_trends()
    assert not result.ok
    assert result.data == rows


def test_data_quality_uses_get(client, monkeypatch):
    calls = []

    def fake_get(url, timeout=None):
        calls.append(url)
        return FakeResponse({"totalRecords": 10, "issuesCount": 0})

    monkeypatch.setattr(client.session, "get", fake_get)
    result = client.fetch_data_quality()

    assert result.ok
    assert calls == ["http://api.test/api/grants/data-quality"]


@pytest.mark.parametrize("method,endpoint", [
    ("fetch_programs", "/api/grants/programs"),
    ("fetch_top_recipients", "/api/grants/top"),
    ("fetch_grants", "/api/grants"),
    ("fetch_trends", "/api/grants/trends"),
])
def test_post_endpoints(client, monkeypatch, method, endpoint):
    urls = []

    def fake_post(url, json=None, timeout=None):
        urls.append(url)
        return FakeResponse([])

    monkeypatch.setattr(client.session, "post", fake_post)
    getattr(client, method)({"fiscalYears": ["2023-2024"]})
    assert urls == ["http://api.test" + endpoint]
