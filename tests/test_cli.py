"""Tests for the command line interface."""

import json

import pytest
import requests
from click.testing import CliRunner

from grantaudit.cli import cli
from grantaudit.data import SAMPLE_GRANTS


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "grantaudit" in result.output


def test_config_show(runner):
    result = runner.invoke(cli, ["config", "--show"])
    assert result.exit_code == 0
    assert "API URL" in result.output


class TestGrantCommands:
    """Tests for the grants command group."""

    def test_list_search(self, runner):
        result = runner.invoke(cli, ["grants", "list", "--search", "health"])
        assert result.exit_code == 0
        assert "Healthcare Facilities" in result.output
        assert "Mental Health Services" in result.output
        assert "2 of 12 grants" in result.output

    def test_list_no_results(self, runner):
        result = runner.invoke(cli, ["grants", "list", "--min", "10", "--max", "1"])
        assert result.exit_code == 0
        assert "No grants found" in result.output

    def test_list_from_data_file(self, runner, tmp_path):
        path = tmp_path / "grants.json"
        path.write_text(json.dumps(SAMPLE_GRANTS[:3]))
        result = runner.invoke(cli, ["grants", "list", "--data", str(path)])
        assert result.exit_code == 0
        assert "3 of 3 grants" in result.output

    def test_list_bad_data_file(self, runner, tmp_path):
        path = tmp_path / "grants.json"
        path.write_text("{not json")
        result = runner.invoke(cli, ["grants", "list", "--data", str(path)])
        assert result.exit_code == 1
        assert "Failed to load" in result.output

    def test_export(self, runner, tmp_path):
        result = runner.invoke(cli, ["grants", "export", "--ministry", "HEALTH", "--output", str(tmp_path)])
        assert result.exit_code == 0
        [path] = list(tmp_path.glob("grants_export_*.csv"))
        assert len(path.read_text().splitlines()) == 3

    def test_export_flagged_only(self, runner, tmp_path):
        result = runner.invoke(cli, ["grants", "export", "--flagged-only", "--output", str(tmp_path)])
        assert result.exit_code == 0
        assert "Exported 2 grants" in result.output
        assert list(tmp_path.glob("flagged_grants_*.csv"))

    def test_flagged(self, runner):
        result = runner.invoke(cli, ["grants", "flagged"])
        assert result.exit_code == 0
        assert "Flagged: 2 of 12 (16.7%)" in result.output
        assert "City of Calgary" in result.output

    def test_flagged_export_failure(self, runner, monkeypatch):
        import grantaudit.export

        def broken(content, prefix=None, directory=None, today=None):
            raise PermissionError("read-only file system")

        monkeypatch.setattr(grantaudit.export, "write_export", broken)
        result = runner.invoke(cli, ["grants", "flagged", "--export"])
        assert result.exit_code == 1
        assert "Export failed" in result.output
        assert "read-only file system" in result.output


class TestDashboardCommands:
    """Tests for the dashboard command group."""

    def test_summary(self, runner):
        result = runner.invoke(cli, ["dashboard", "summary"])
        assert result.exit_code == 0
        assert "Number of Grants" in result.output

    def test_summary_published(self, runner):
        result = runner.invoke(cli, ["dashboard", "summary", "--published"])
        assert result.exit_code == 0
        assert "1.77 Million" in result.output
        assert "$417.26 Billion" in result.output

    def test_ministries_published_year(self, runner):
        result = runner.invoke(cli, ["dashboard", "ministries", "--published", "--year", "2023-2024"])
        assert result.exit_code == 0
        assert "estimated" in result.output

    def test_ministries_consolidated(self, runner):
        result = runner.invoke(cli, ["dashboard", "ministries", "--threshold", "0.1"])
        assert result.exit_code == 0
        assert "Other Ministries" in result.output

    def test_years(self, runner):
        result = runner.invoke(cli, ["dashboard", "years"])
        assert result.exit_code == 0
        assert "2021-2022" in result.output

    def test_programs(self, runner):
        result = runner.invoke(cli, ["dashboard", "programs", "HEALTH"])
        assert result.exit_code == 0
        assert "Healthcare Facilities" in result.output


class TestAnalyzeCommands:
    """Tests for the analyze command group."""

    def test_run(self, runner):
        result = runner.invoke(cli, ["analyze", "run"])
        assert result.exit_code == 0
        assert "Large Amount" in result.output
        assert "2 grants labeled" in result.output

    def test_run_single_rule(self, runner):
        result = runner.invoke(cli, ["analyze", "run", "--rule", "operational-grant"])
        assert result.exit_code == 0
        assert "Alberta Health Services" in result.output

    def test_unknown_rule(self, runner):
        result = runner.invoke(cli, ["analyze", "run", "--rule", "nonsense"])
        assert result.exit_code == 1
        assert "Unknown rule" in result.output

    def test_disable_criterion(self, runner):
        result = runner.invoke(cli, ["analyze", "run", "--grant", "11", "--disable", "large_amount"])
        assert result.exit_code == 0
        assert "No risk labels" in result.output

    def test_unknown_criterion(self, runner):
        result = runner.invoke(cli, ["analyze", "run", "--enable", "nonsense"])
        assert result.exit_code == 1

    def test_rules(self, runner):
        result = runner.invoke(cli, ["analyze", "rules"])
        assert result.exit_code == 0
        assert "recipient_concentration" in result.output


def test_recipients_top(runner):
    result = runner.invoke(cli, ["recipients", "top", "--limit", "3"])
    assert result.exit_code == 0
    assert "Alberta Health Services" in result.output


def test_recipients_multiple_none(runner):
    result = runner.invoke(cli, ["recipients", "multiple"])
    assert result.exit_code == 0
    assert "No recipients" in result.output


def test_review_list(runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(cli, ["review", "list", "--type", "recipient", "--export"])
    assert result.exit_code == 0
    assert "Alberta Health Services" in result.output
    assert list(tmp_path.glob("review_list_*.csv"))


def test_quality(runner):
    result = runner.invoke(cli, ["quality"])
    assert result.exit_code == 0
    assert "Records: 12" in result.output
    assert "Warning" not in result.output


def test_api_elements_offline(runner, monkeypatch):
    def fail(self, url, json=None, timeout=None):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests.Session, "post", fail)
    result = runner.invoke(cli, ["api", "elements"])
    assert result.exit_code == 0
    assert "Using default options" in result.output
    assert "HEALTH" in result.output


def test_api_trends_offline(runner, monkeypatch):
    def fail(self, url, json=None, timeout=None):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests.Session, "post", fail)
    result = runner.invoke(cli, ["api", "trends"])
    assert result.exit_code == 0
    assert "No trend data available" in result.output


class StubResponse:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self.payload


def test_api_elements_unexpected_shape(runner, monkeypatch):
    monkeypatch.setattr(requests.Session, "post", lambda self, url, json=None, timeout=None: StubResponse(["HEALTH"]))
    result = runner.invoke(cli, ["api", "elements"])
    assert result.exit_code == 0
    assert "Using default options" in result.output
    assert "EDUCATION" in result.output


@pytest.mark.parametrize("payload", [
    [{"fiscalYear": "2023-2024", "totalAmount": "n/a", "recipientCount": 1, "averageGrantAmount": 5}],
    ["2023-2024"],
    {"fiscalYear": "2023-2024"},
])
def test_api_trends_malformed_rows(runner, monkeypatch, payload):
    monkeypatch.setattr(requests.Session, "post", lambda self, url, json=None, timeout=None: StubResponse(payload))
    result = runner.invoke(cli, ["api", "trends"])
    assert result.exit_code == 0
    assert "No trend data available" in result.output


def test_api_trends(runner, monkeypatch):
    rows = [{"fiscalYear": "2023-2024", "totalAmount": "1500", "recipientCount": 3, "averageGrantAmount": 500}]
    monkeypatch.setattr(requests.Session, "post", lambda self, url, json=None, timeout=None: StubResponse(rows))
    result = runner.invoke(cli, ["api", "trends"])
    assert result.exit_code == 0
    assert "2023-2024" in result.output
    assert "$1,500" in result.output
