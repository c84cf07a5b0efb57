"""
Proactive suggestion orchestrator.

Looks at a lead's pipeline stage and timing and produces a prioritized
list of next-best-actions for the closer.

Design:
- Each stage has one rule method; a rule returns zero or more suggestions.
- Message bodies come from the ``TemplateMatcher``; coaching lines come
  from the ``CloserGuide``.
- Results are sorted by priority rank (urgent first). The sort is stable,
  so suggestions of equal priority keep the order their rules ran in.
- "No recorded contact" counts as infinitely long ago, so every
  "more than N minutes since last activity" rule fires for it.
"""

import logging
import math
import uuid
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from lead_engine.engine.guidance import CloserGuide, closer_guide
from lead_engine.engine.templates import (
    ON_ENTRY,
    AfterElapsed,
    TemplateMatcher,
    template_matcher,
)
from lead_engine.models.lead import Lead, PipelineStatus
from lead_engine.models.suggestion import (
    PRIORITY_RANK,
    ActionId,
    Priority,
    Suggestion,
    SuggestionAction,
    SuggestionType,
)

logger = logging.getLogger(__name__)

NO_REPLY_MINUTES = 1440          # 24h
NO_SHOW_RECOVERY_MINUTES = 30
PROPOSAL_FOLLOW_UP_MINUTES = 2880  # 48h
CONFIRM_BEFORE_MINUTES = 60
FINAL_REMINDER_MINUTES = 15


def minutes_since_last_activity(lead: Lead, now: datetime) -> float:
    """Whole minutes since the last contact, or +inf when there was none."""
    if lead.last_contact_at is None:
        return math.inf
    return math.floor((now - lead.last_contact_at).total_seconds() / 60)


def minutes_to_next_meeting(lead: Lead, now: datetime) -> int | None:
    """Whole minutes until the next meeting, or None without one."""
    if lead.next_meeting is None:
        return None
    return math.floor((lead.next_meeting.scheduled_at - now).total_seconds() / 60)


def _suggestion(
    kind: SuggestionType,
    priority: Priority,
    title: str,
    description: str,
    action_label: str,
    action_id: ActionId,
    suggested_content: str | None = None,
    due_in: str | None = None,
) -> Suggestion:
    return Suggestion(
        id=f"sug_{uuid.uuid4().hex[:12]}",
        type=kind,
        priority=priority,
        title=title,
        description=description,
        suggested_content=suggested_content,
        due_in=due_in,
        action=SuggestionAction(label=action_label, action_id=action_id),
    )


class SuggestionOrchestrator:
    """Evaluates stage rules for a lead and returns sorted suggestions."""

    def __init__(
        self,
        matcher: TemplateMatcher = template_matcher,
        guide: CloserGuide = closer_guide,
    ) -> None:
        self.matcher = matcher
        self.guide = guide
        self._rules: dict[PipelineStatus, Callable[[Lead, datetime], list[Suggestion]]] = {
            PipelineStatus.NEW: self._new_lead,
            PipelineStatus.SCHEDULED: self._scheduled,
            PipelineStatus.NO_SHOW: self._no_show,
            PipelineStatus.SHOW: self._show,
            PipelineStatus.PROPOSAL_SENT: self._proposal_sent,
            PipelineStatus.NEGOTIATION: self._negotiation,
        }

    # ── Stage rules ────────────────────────────────────────────────────

    def _new_lead(self, lead: Lead, now: datetime) -> list[Suggestion]:
        found: list[Suggestion] = []

        if lead.lead_score == 0:
            found.append(_suggestion(
                SuggestionType.FOLLOW_UP,
                Priority.HIGH,
                "Compute initial score",
                f"Analyze and qualify {lead.name} based on source and data.",
                "Calculate score",
                ActionId.CALCULATE_SCORE,
            ))

        welcome = self.matcher.select(lead, ON_ENTRY, now)
        if welcome is not None:
            found.append(_suggestion(
                SuggestionType.MESSAGE,
                Priority.URGENT,
                "Send welcome message",
                "First contact with the prospect via WhatsApp.",
                "Send WhatsApp",
                ActionId.SEND_WHATSAPP,
                suggested_content=welcome,
                due_in="now",
            ))

        if minutes_since_last_activity(lead, now) > NO_REPLY_MINUTES:
            follow_up = self.matcher.select(lead, AfterElapsed(NO_REPLY_MINUTES), now)
            if follow_up is not None:
                found.append(_suggestion(
                    SuggestionType.FOLLOW_UP,
                    Priority.HIGH,
                    "24h no-response follow-up",
                    f"{lead.name} has not replied in more than 24 hours.",
                    "Send follow-up",
                    ActionId.SEND_FOLLOWUP,
                    suggested_content=follow_up,
                    due_in="urgent",
                ))

        return found

    def _scheduled(self, lead: Lead, now: datetime) -> list[Suggestion]:
        minutes = minutes_to_next_meeting(lead, now)
        if minutes is None:
            return []

        found: list[Suggestion] = []

        if minutes > CONFIRM_BEFORE_MINUTES:
            confirmation = self.matcher.select(lead, ON_ENTRY, now)
            if confirmation is not None:
                found.append(_suggestion(
                    SuggestionType.MESSAGE,
                    Priority.MEDIUM,
                    "Confirm meeting",
                    f"Send the video call confirmation to {lead.name}.",
                    "Send confirmation",
                    ActionId.SEND_CONFIRMATION,
                    suggested_content=confirmation,
                ))

        if FINAL_REMINDER_MINUTES < minutes <= CONFIRM_BEFORE_MINUTES:
            found.append(_suggestion(
                SuggestionType.REMINDER,
                Priority.URGENT,
                "1-hour reminder",
                f"The video call with {lead.name} starts in {minutes} minutes.",
                "Send reminder",
                ActionId.SEND_REMINDER,
                suggested_content=(
                    f"Hi {lead.name}! Just a reminder that our video call is in 1 hour. All set?"
                ),
                due_in=f"in {minutes} min",
            ))

        if 0 < minutes <= FINAL_REMINDER_MINUTES:
            found.append(_suggestion(
                SuggestionType.REMINDER,
                Priority.URGENT,
                "15-min reminder",
                f"Get ready for the video call with {lead.name}.",
                "Join meeting",
                ActionId.JOIN_MEETING,
                due_in="now",
            ))

        return found

    def _no_show(self, lead: Lead, now: datetime) -> list[Suggestion]:
        # Offered whenever the stage has a recovery template, regardless of who spoke last
        recovery = self.matcher.select(
            lead, AfterElapsed(NO_SHOW_RECOVERY_MINUTES), now, check_timing=False
        )
        if recovery is None:
            return []
        return [_suggestion(
            SuggestionType.MESSAGE,
            Priority.HIGH,
            "Recover no-show",
            f"{lead.name} missed the meeting. Try to reschedule.",
            "Send message",
            ActionId.SEND_NOSHOW_RECOVERY,
            suggested_content=recovery,
            due_in="urgent",
        )]

    def _show(self, lead: Lead, now: datetime) -> list[Suggestion]:
        found = [_suggestion(
            SuggestionType.QUOTE,
            Priority.URGENT,
            "Generate quote",
            f"The call with {lead.name} went well. Time to send a proposal.",
            "Create quote",
            ActionId.GENERATE_QUOTE,
            due_in="today",
        )]

        post_call = self.matcher.select(lead, ON_ENTRY, now)
        if post_call is not None:
            found.append(_suggestion(
                SuggestionType.MESSAGE,
                Priority.HIGH,
                "Post-call message",
                "Send thanks and next steps.",
                "Send message",
                ActionId.SEND_POST_CALL,
                suggested_content=post_call,
            ))

        return found

    def _proposal_sent(self, lead: Lead, now: datetime) -> list[Suggestion]:
        if minutes_since_last_activity(lead, now) > PROPOSAL_FOLLOW_UP_MINUTES:
            return [_suggestion(
                SuggestionType.FOLLOW_UP,
                Priority.HIGH,
                "Proposal follow-up",
                f"More than 48h have passed since you sent the proposal to {lead.name}.",
                "Send follow-up",
                ActionId.SEND_PROPOSAL_FOLLOWUP,
                suggested_content=(
                    f"Hi {lead.name}, did you get a chance to review the proposal? "
                    "I'm here to answer any questions."
                ),
                due_in="urgent",
            )]
        return [_suggestion(
            SuggestionType.CALL,
            Priority.MEDIUM,
            "Call to close",
            "Call to resolve questions and speed up the decision.",
            "Dial number",
            ActionId.CALL_LEAD,
        )]

    def _negotiation(self, lead: Lead, now: datetime) -> list[Suggestion]:
        guidance = self.guide.guidance(lead)
        found = [_suggestion(
            SuggestionType.CALL,
            Priority.URGENT,
            "Attempt close",
            guidance.close_attempt,
            "View closing guide",
            ActionId.VIEW_CLOSING_GUIDE,
        )]

        handler_count = len(guidance.objection_handlers)
        if handler_count > 0:
            found.append(_suggestion(
                SuggestionType.FOLLOW_UP,
                Priority.HIGH,
                "Handle objections",
                f"{handler_count} objection scripts ready.",
                "View objections",
                ActionId.VIEW_OBJECTIONS,
            ))

        return found

    # ── Public API ─────────────────────────────────────────────────────

    def evaluate(self, lead: Lead, now: datetime | None = None) -> list[Suggestion]:
        """Return the lead's suggestions, most urgent first."""
        now = now or datetime.now(timezone.utc)
        rule = self._rules.get(lead.status)
        suggestions = rule(lead, now) if rule else []
        suggestions.sort(key=lambda s: PRIORITY_RANK[s.priority])

        logger.info(
            "Suggestions evaluated | lead=%s | stage=%s | suggestions=%d",
            lead.id,
            lead.status.value,
            len(suggestions),
        )
        return suggestions

    def evaluate_many(
        self,
        leads: Iterable[Lead],
        now: datetime | None = None,
    ) -> dict[str, list[Suggestion]]:
        """Suggestions per lead id; leads without suggestions are omitted."""
        now = now or datetime.now(timezone.utc)
        result: dict[str, list[Suggestion]] = {}
        for lead in leads:
            suggestions = self.evaluate(lead, now)
            if suggestions:
                result[lead.id] = suggestions
        return result

    def count_urgent(self, leads: Iterable[Lead], now: datetime | None = None) -> int:
        """Number of urgent or high priority suggestions across leads."""
        now = now or datetime.now(timezone.utc)
        return sum(
            1
            for lead in leads
            for s in self.evaluate(lead, now)
            if s.priority in (Priority.URGENT, Priority.HIGH)
        )


# ── Module-level singleton ────────────────────────────────────────────
suggestion_orchestrator = SuggestionOrchestrator()
