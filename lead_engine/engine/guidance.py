"""
Coaching for the human closer and the auto-close gate.

Everything here is table-driven from the ``SalesPlaybook``; the only
lead-specific part is the talking-point list.
"""

import logging

from lead_engine.config import get_settings
from lead_engine.engine.playbook import DEFAULT_PLAYBOOK, SalesPlaybook
from lead_engine.models.guidance import CloseDecision, CloserGuidance
from lead_engine.models.lead import Lead, PipelineStatus, PsychType

logger = logging.getLogger(__name__)

AUTO_CLOSE_MIN_SCORE = 85
AUTO_CLOSE_STAGES = {PipelineStatus.PROPOSAL_SENT, PipelineStatus.NEGOTIATION}


class CloserGuide:
    """Builds ``CloserGuidance`` and decides auto-close eligibility."""

    def __init__(
        self,
        playbook: SalesPlaybook = DEFAULT_PLAYBOOK,
        currency: str | None = None,
    ) -> None:
        self.playbook = playbook
        self.currency = currency or get_settings().currency

    def talking_points(self, lead: Lead) -> list[str]:
        points: list[str] = []
        profile = lead.psych_profile

        if lead.detected_needs:
            points.append(f"Needs: {', '.join(lead.detected_needs)}")
        if profile and profile.pain_points:
            points.append(f"Pain points: {', '.join(profile.pain_points)}")
        if lead.potential_value:
            points.append(f"Potential value: ${lead.potential_value:,.0f} {self.currency}")
        if profile and profile.recommended_strategy:
            points.append(f"Strategy: {profile.recommended_strategy}")

        return points

    def close_line(self, psych_type: PsychType) -> str:
        return self.playbook.close_lines[psych_type]

    def guidance(self, lead: Lead) -> CloserGuidance:
        return CloserGuidance(
            current_phase=self.playbook.phase_labels[lead.status],
            suggested_actions=list(self.playbook.stage_actions.get(lead.status, [])),
            talking_points=self.talking_points(lead),
            objection_handlers=dict(self.playbook.objection_handlers),
            close_attempt=self.close_line(lead.psych_type),
        )

    def can_ai_close(self, lead: Lead) -> CloseDecision:
        """
        Decide whether the assistant may attempt the close on its own.

        Requires a score of at least 85, an assertive profile, no open
        objections and a proposal already on the table.
        """
        high_intent = lead.lead_score >= AUTO_CLOSE_MIN_SCORE
        assertive = (
            lead.psych_profile is not None
            and lead.psych_profile.dominant_type == PsychType.ASSERTIVE
        )
        objections_cleared = not lead.objections
        proposal_out = lead.status in AUTO_CLOSE_STAGES

        if high_intent and assertive and objections_cleared and proposal_out:
            decision = CloseDecision(
                can_close=True,
                reason="High-intent lead with an assertive profile and no objections. Attempt a direct close.",
            )
        elif high_intent and objections_cleared:
            decision = CloseDecision(
                can_close=False,
                reason="High intent, but recommend a human closer takes the close for better conversion.",
            )
        else:
            decision = CloseDecision(
                can_close=False,
                reason="Needs more nurturing or objection handling before closing.",
            )

        logger.info(
            "Auto-close evaluated | lead=%s | score=%d | can_close=%s",
            lead.id,
            lead.lead_score,
            decision.can_close,
        )
        return decision


# ── Module-level singleton ────────────────────────────────────────────
closer_guide = CloserGuide()
