"""Shared fixtures for the lead engine test suite."""

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from lead_engine.models.lead import Lead
from lead_engine.models.quote import Quote, QuoteLine

NOW = datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_lead():
    """Factory for leads with sensible defaults; keyword overrides win."""

    def _make(**overrides: Any) -> Lead:
        data: dict[str, Any] = {
            "id": "lead-001",
            "name": "Maria",
            "status": "new",
        }
        data.update(overrides)
        return Lead(**data)

    return _make


@pytest.fixture
def social_quote() -> Quote:
    """The quote produced for a 'social media' lead with a 15,000 budget."""
    return Quote(
        id="q-test",
        created_at=NOW,
        updated_at=NOW,
        services=[
            QuoteLine(name="Social Pro Pack", price=12000, service_id="social-pro"),
            QuoteLine(name="Social Basic Pack", price=6000, service_id="social-basic"),
        ],
        subtotal=18000,
        discount=1800,
        valid_until=NOW + timedelta(days=7),
    )


def minutes_from_now(minutes: float) -> datetime:
    return NOW + timedelta(minutes=minutes)
