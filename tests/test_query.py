"""Tests for grant filtering, searching and sorting."""

import pytest

from grantaudit.data import ALL_MINISTRIES
from grantaudit.normalization import ALL_YEARS
from grantaudit.query import GrantFilter, apply_filters, search_flagged, sort_grants, toggle_selection


class TestApplyFilters:
    """Tests for the grant explorer filters."""

    def test_defaults_match_everything(self, grants):
        assert apply_filters(grants) == grants

    def test_search_program_or_recipient(self, grants):
        results = apply_filters(grants, search_text="health")
        assert [g.id for g in results] == ["1", "8"]

    def test_search_is_case_insensitive(self, grants):
        assert apply_filters(grants, search_text="HEALTH") == apply_filters(grants, search_text="health")

    def test_ministry_and_year(self, grants):
        results = apply_filters(grants, ministry="EDUCATION", fiscal_year="2022-2023")
        assert [g.id for g in results] == ["9"]

    def test_conjunction(self, grants):
        filters = GrantFilter(ministry="HEALTH", search_text="health", min_amount=5_000_000)
        assert [g.id for g in apply_filters(grants, filters)] == ["1"]

    def test_amount_range_inclusive(self, grants):
        results = apply_filters(grants, min_amount=3_200_000, max_amount=4_200_000)
        assert sorted(g.id for g in results) == ["3", "7", "8"]

    def test_inverted_range_is_empty(self, grants):
        assert apply_filters(grants, min_amount=10, max_amount=1) == []

    def test_malformed_input_is_empty(self, grants):
        assert apply_filters(grants, min_amount="lots") == []

    def test_exclude_operational(self, grants):
        results = apply_filters(grants, exclude_operational=True)
        assert "1" not in [g.id for g in results]
        assert len(results) == 11

    def test_sentinels(self, grants):
        assert apply_filters(grants, ministry=ALL_MINISTRIES, fiscal_year=ALL_YEARS) == grants

    def test_input_not_modified(self, grants):
        before = list(grants)
        apply_filters(grants, ministry="HEALTH")
        assert grants == before


class TestSortGrants:
    """Tests for sorting."""

    def test_amount_desc(self, grants):
        results = sort_grants(grants, "amount", "desc")
        assert [g.id for g in results[:2]] == ["1", "11"]

    def test_fiscal_year_asc_is_stable(self, grants):
        results = sort_grants(grants, "fiscal_year", "asc")
        assert [g.id for g in results] == ["10", "11", "12", "6", "7", "8", "9", "1", "2", "3", "4", "5"]

    def test_fiscal_year_alias(self, grants):
        assert sort_grants(grants, "fiscalYear", "asc") == sort_grants(grants, "fiscal_year", "asc")

    def test_reverse_for_distinct_keys(self, grants):
        asc = sort_grants(grants, "amount", "asc")
        desc = sort_grants(grants, "amount", "desc")
        assert asc == list(reversed(desc))

    @pytest.mark.parametrize("key,direction", [("color", "asc"), ("amount", "sideways")])
    def test_unknown_key_or_direction_is_noop(self, grants, key, direction):
        assert sort_grants(grants, key, direction) == grants


def test_search_flagged(grants):
    assert [g.id for g in search_flagged(grants)] == ["4", "8"]
    assert [g.id for g in search_flagged(grants, "timing")] == ["8"]
    assert [g.id for g in search_flagged(grants, "calgary")] == ["4"]
    assert search_flagged(grants, "education") == []


class TestToggleSelection:
    """Tests for multi-select filter toggling."""

    def test_specific_value_drops_all(self):
        assert toggle_selection([ALL_MINISTRIES], "HEALTH", ALL_MINISTRIES) == ["HEALTH"]

    def test_toggle_off_last_value_falls_back(self):
        assert toggle_selection(["HEALTH"], "HEALTH", ALL_MINISTRIES) == [ALL_MINISTRIES]

    def test_choosing_all_clears(self):
        assert toggle_selection(["HEALTH", "EDUCATION"], ALL_MINISTRIES, ALL_MINISTRIES) == [ALL_MINISTRIES]

    def test_adds_value(self):
        assert toggle_selection(["HEALTH"], "EDUCATION", ALL_MINISTRIES) == ["HEALTH", "EDUCATION"]


def test_fiscal_year_sort_order(make_grant):
    grants = [make_grant(fiscal_year=y) for y in ["2022-2023", "2019-2020", "2021-2022"]]
    results = sort_grants(grants, "fiscalYear", "asc")
    assert [g.fiscal_year for g in results] == ["2019-2020", "2021-2022", "2022-2023"]


def test_sort_is_idempotent(grants):
    once = sort_grants(grants, "ministry", "asc")
    assert sort_grants(once, "ministry", "asc") == once


@pytest.mark.parametrize("a,b", [
    ({"ministry": "HEALTH"}, {"search_text": "health"}),
    ({"fiscal_year": "2023-2024"}, {"min_amount": 5_000_000}),
    ({"exclude_operational": True}, {"max_amount": 16_000_000}),
])
def test_filter_conjunction(grants, a, b):
    combined = {g.id for g in apply_filters(grants, **a, **b)}
    assert combined == {g.id for g in apply_filters(grants, **a)} & {g.id for g in apply_filters(grants, **b)}
