"""Shared fixtures for Grant Audit tests."""

import pytest

from grantaudit.data import Grant, GrantStore, sample_grants


@pytest.fixture
def grants():
    """The bundled sample grants."""
    return sample_grants()


@pytest.fixture
def store():
    return GrantStore.from_sample()


@pytest.fixture
def make_grant():
    """Factory for grants with sensible defaults."""
    counter = {"n": 0}

    def _make(**kwargs):
        counter["n"] += 1
        data = {
            "id": f"g{counter['n']}",
            "ministry": "HEALTH",
            "program": "Healthcare Facilities",
            "recipient": f"Recipient {counter['n']}",
            "fiscal_year": "2023-2024",
            "amount": 100.0,
        }
        data.update(kwargs)
        return Grant(**data)

    return _make
