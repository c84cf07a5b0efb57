"""Tests for the initial lead score."""

from dataclasses import replace

import pytest

from lead_engine.engine.playbook import DEFAULT_PLAYBOOK
from lead_engine.engine.scoring import LeadScorer, lead_scorer
from lead_engine.models.lead import LeadSource


class TestLeadScorer:
    """Score composition and bounds."""

    def test_bare_lead_gets_base_score(self, make_lead) -> None:
        assert lead_scorer.score(make_lead()) == 30

    def test_complete_referral_lead(self, make_lead) -> None:
        lead = make_lead(
            source="referral",
            email="maria@example.com",
            phone="+52 55 1234 5678",
            company="Acme",
            job_title="CEO",
            potential_value=60000,
        )
        # 30 base + 25 referral + 25 completeness + 15 value tier
        assert lead_scorer.score(lead) == 95

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, 30),
            (9_999, 30),
            (10_000, 35),
            (25_000, 40),
            (49_999, 40),
            (50_000, 45),
        ],
    )
    def test_value_tiers(self, make_lead, value, expected) -> None:
        assert lead_scorer.score(make_lead(potential_value=value)) == expected

    def test_source_bonus(self, make_lead) -> None:
        assert lead_scorer.score(make_lead(source="google_ads")) == 50
        assert lead_scorer.score(make_lead(source="manual")) == 35

    def test_unlisted_source_contributes_nothing(self, make_lead) -> None:
        scorer = LeadScorer(replace(DEFAULT_PLAYBOOK, source_bonus={}))
        assert scorer.score(make_lead(source="referral")) == 30

    def test_score_is_capped_at_100(self, make_lead) -> None:
        scorer = LeadScorer(
            replace(DEFAULT_PLAYBOOK, source_bonus={LeadSource.MANUAL: 90})
        )
        lead = make_lead(source="manual", email="a@b.c", company="Acme")
        assert scorer.score(lead) == 100

    def test_more_fields_never_lower_the_score(self, make_lead) -> None:
        fields = [
            ("email", "maria@example.com"),
            ("phone", "+52 55 1234 5678"),
            ("company", "Acme"),
            ("job_title", "CEO"),
        ]
        present: dict[str, str] = {}
        previous = lead_scorer.score(make_lead(source="organic"))
        for name, value in fields:
            present[name] = value
            current = lead_scorer.score(make_lead(source="organic", **present))
            assert current >= previous
            assert 0 <= current <= 100
            previous = current
