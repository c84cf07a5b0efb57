"""Tests for the proactive suggestion orchestrator."""

from datetime import timedelta

import pytest
from conftest import NOW, minutes_from_now

from lead_engine.engine.suggestions import (
    minutes_since_last_activity,
    suggestion_orchestrator,
)
from lead_engine.models.lead import PipelineStatus
from lead_engine.models.suggestion import PRIORITY_RANK, ActionId, Priority, SuggestionType


def _titles(suggestions) -> list[str]:
    return [s.title for s in suggestions]


def _scheduled_in(make_lead, minutes: float):
    return make_lead(
        status="scheduled",
        next_meeting={"scheduled_at": minutes_from_now(minutes)},
    )


class TestNewLead:
    def test_unscored_lead_without_contact(self, make_lead) -> None:
        suggestions = suggestion_orchestrator.evaluate(make_lead(lead_score=0), NOW)
        titles = _titles(suggestions)

        assert "Compute initial score" in titles
        assert "Send welcome message" in titles
        assert titles.index("Send welcome message") < titles.index("Compute initial score")

        by_title = {s.title: s for s in suggestions}
        assert by_title["Send welcome message"].priority == Priority.URGENT
        assert by_title["Compute initial score"].priority == Priority.HIGH
        assert by_title["Compute initial score"].action.action_id == ActionId.CALCULATE_SCORE
        assert by_title["Send welcome message"].suggested_content

    def test_no_contact_triggers_no_reply_follow_up(self, make_lead) -> None:
        suggestions = suggestion_orchestrator.evaluate(make_lead(lead_score=40), NOW)
        assert _titles(suggestions) == ["Send welcome message", "24h no-response follow-up"]

    def test_recent_contact_skips_follow_up(self, make_lead) -> None:
        lead = make_lead(lead_score=40, last_contact_at=NOW - timedelta(hours=2))
        assert _titles(suggestion_orchestrator.evaluate(lead, NOW)) == ["Send welcome message"]

    def test_follow_up_needs_our_message_last(self, make_lead) -> None:
        two_days_ago = NOW - timedelta(days=2)
        outbound = make_lead(
            lead_score=40,
            last_contact_at=two_days_ago,
            interactions=[{"timestamp": two_days_ago, "direction": "outbound"}],
        )
        inbound = make_lead(
            lead_score=40,
            last_contact_at=two_days_ago,
            interactions=[{"timestamp": two_days_ago, "direction": "inbound"}],
        )
        assert "24h no-response follow-up" in _titles(suggestion_orchestrator.evaluate(outbound, NOW))
        assert "24h no-response follow-up" not in _titles(suggestion_orchestrator.evaluate(inbound, NOW))


class TestScheduled:
    def test_final_reminder(self, make_lead) -> None:
        suggestions = suggestion_orchestrator.evaluate(_scheduled_in(make_lead, 10), NOW)
        reminders = [s for s in suggestions if s.type == SuggestionType.REMINDER]

        assert len(reminders) == 1
        assert reminders[0].priority == Priority.URGENT
        assert reminders[0].due_in == "now"
        assert reminders[0].action.action_id == ActionId.JOIN_MEETING

    def test_one_hour_reminder(self, make_lead) -> None:
        suggestions = suggestion_orchestrator.evaluate(_scheduled_in(make_lead, 40), NOW)
        assert len(suggestions) == 1
        assert suggestions[0].title == "1-hour reminder"
        assert suggestions[0].due_in == "in 40 min"
        assert suggestions[0].priority == Priority.URGENT

    def test_confirmation_when_far_away(self, make_lead) -> None:
        suggestions = suggestion_orchestrator.evaluate(_scheduled_in(make_lead, 180), NOW)
        assert _titles(suggestions) == ["Confirm meeting"]
        assert suggestions[0].priority == Priority.MEDIUM

    @pytest.mark.parametrize("minutes", [60, 16, 15, 1])
    def test_window_boundaries(self, make_lead, minutes) -> None:
        suggestions = suggestion_orchestrator.evaluate(_scheduled_in(make_lead, minutes), NOW)
        expected = "1-hour reminder" if minutes > 15 else "15-min reminder"
        assert _titles(suggestions) == [expected]

    def test_past_meeting_yields_nothing(self, make_lead) -> None:
        assert suggestion_orchestrator.evaluate(_scheduled_in(make_lead, -5), NOW) == []

    def test_without_meeting(self, make_lead) -> None:
        assert suggestion_orchestrator.evaluate(make_lead(status="scheduled"), NOW) == []


class TestLaterStages:
    def test_no_show_recovery(self, make_lead) -> None:
        suggestions = suggestion_orchestrator.evaluate(make_lead(status="no_show"), NOW)
        assert _titles(suggestions) == ["Recover no-show"]
        assert suggestions[0].priority == Priority.HIGH
        assert suggestions[0].action.action_id == ActionId.SEND_NOSHOW_RECOVERY

    @pytest.mark.parametrize(
        "direction, minutes_ago",
        [("inbound", 120), ("outbound", 5), ("outbound", 300)],
    )
    def test_no_show_recovery_ignores_reply_state(self, make_lead, direction, minutes_ago) -> None:
        when = NOW - timedelta(minutes=minutes_ago)
        lead = make_lead(
            status="no_show",
            last_contact_at=when,
            interactions=[{"timestamp": when, "direction": direction}],
        )
        suggestions = suggestion_orchestrator.evaluate(lead, NOW)
        assert _titles(suggestions) == ["Recover no-show"]
        assert "Maria" in suggestions[0].suggested_content

    def test_show_completed(self, make_lead) -> None:
        suggestions = suggestion_orchestrator.evaluate(make_lead(status="show"), NOW)
        assert _titles(suggestions) == ["Generate quote", "Post-call message"]
        assert suggestions[0].action.action_id == ActionId.GENERATE_QUOTE

    def test_stale_proposal(self, make_lead) -> None:
        lead = make_lead(status="proposal_sent", last_contact_at=NOW - timedelta(days=3))
        suggestions = suggestion_orchestrator.evaluate(lead, NOW)
        assert _titles(suggestions) == ["Proposal follow-up"]
        assert suggestions[0].priority == Priority.HIGH

    def test_fresh_proposal(self, make_lead) -> None:
        lead = make_lead(status="proposal_sent", last_contact_at=NOW - timedelta(days=1))
        suggestions = suggestion_orchestrator.evaluate(lead, NOW)
        assert _titles(suggestions) == ["Call to close"]
        assert suggestions[0].priority == Priority.MEDIUM

    def test_negotiation(self, make_lead) -> None:
        lead = make_lead(status="negotiation", psych_profile={"dominant_type": "emotional"})
        suggestions = suggestion_orchestrator.evaluate(lead, NOW)
        assert _titles(suggestions) == ["Attempt close", "Handle objections"]
        assert suggestions[0].description == (
            "Are you ready to start this transformation in your business?"
        )

    @pytest.mark.parametrize("status", ["contacted", "won", "lost"])
    def test_stages_without_rules(self, make_lead, status) -> None:
        assert suggestion_orchestrator.evaluate(make_lead(status=status), NOW) == []


class TestOrdering:
    @pytest.mark.parametrize("status", [s.value for s in PipelineStatus])
    def test_sorted_by_priority(self, make_lead, status) -> None:
        lead = make_lead(
            status=status,
            next_meeting={"scheduled_at": minutes_from_now(30)},
        )
        ranks = [PRIORITY_RANK[s.priority] for s in suggestion_orchestrator.evaluate(lead, NOW)]
        assert ranks == sorted(ranks)

    def test_fresh_ids_each_call(self, make_lead) -> None:
        first = suggestion_orchestrator.evaluate(make_lead(), NOW)
        second = suggestion_orchestrator.evaluate(make_lead(), NOW)
        assert _titles(first) == _titles(second)
        assert {s.id for s in first}.isdisjoint({s.id for s in second})


class TestBatch:
    def test_evaluate_many_omits_empty(self, make_lead) -> None:
        leads = [
            make_lead(id="a"),
            make_lead(id="b", status="won"),
            make_lead(id="c", status="show"),
        ]
        result = suggestion_orchestrator.evaluate_many(leads, NOW)
        assert set(result) == {"a", "c"}

    def test_count_urgent(self, make_lead) -> None:
        leads = [
            make_lead(id="a", lead_score=0),   # welcome, score, follow-up
            make_lead(id="b", status="show"),  # quote, post-call
            make_lead(id="c", status="proposal_sent", last_contact_at=NOW),  # medium call
        ]
        assert suggestion_orchestrator.count_urgent(leads, NOW) == 5


def test_no_contact_is_infinitely_long_ago(make_lead) -> None:
    assert minutes_since_last_activity(make_lead(), NOW) == float("inf")
