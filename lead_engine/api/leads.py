"""
Lead evaluation endpoints.

Thin wrappers over the engine: every request carries the full lead
snapshot, nothing is stored, and the response is recomputed each call.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status

from lead_engine.engine.guidance import closer_guide
from lead_engine.engine.scoring import lead_scorer
from lead_engine.engine.suggestions import suggestion_orchestrator
from lead_engine.engine.templates import (
    ON_ENTRY,
    AfterElapsed,
    BeforeScheduledEvent,
    Timing,
    render,
    template_matcher,
)
from lead_engine.models.guidance import CloseDecision, CloserGuidance
from lead_engine.models.lead import Lead
from lead_engine.models.requests import (
    BatchEvaluationRequest,
    EvaluationRequest,
    MessageRequest,
    MessageResponse,
    ScoreResponse,
    TimingKind,
)
from lead_engine.models.suggestion import BatchSuggestions, LeadSuggestions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leads", tags=["Leads"])


# ── Helpers ────────────────────────────────────────────────────────────

def _timing_from_request(body: MessageRequest) -> Timing:
    """Build the template timing variant, or raise 400 if minutes are missing."""
    if body.timing == TimingKind.ON_ENTRY:
        return ON_ENTRY
    if body.minutes is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"'minutes' is required for timing '{body.timing.value}'.",
        )
    if body.timing == TimingKind.AFTER_ELAPSED:
        return AfterElapsed(body.minutes)
    return BeforeScheduledEvent(body.minutes)


# ── Endpoints ──────────────────────────────────────────────────────────

@router.post(
    "/score",
    response_model=ScoreResponse,
    summary="Compute initial lead score",
    description="Scores a lead 0-100 from its acquisition source and data completeness.",
)
async def score_lead(lead: Lead) -> ScoreResponse:
    return ScoreResponse(lead_id=lead.id, score=lead_scorer.score(lead))


@router.post(
    "/suggestions",
    response_model=LeadSuggestions,
    summary="Get next-best-actions for a lead",
    description="Returns stage-driven suggestions sorted by priority (urgent first).",
)
async def get_suggestions(body: EvaluationRequest) -> LeadSuggestions:
    suggestions = suggestion_orchestrator.evaluate(body.lead, body.now)
    return LeadSuggestions(
        lead_id=body.lead.id,
        suggestions=suggestions,
        total_suggestions=len(suggestions),
    )


@router.post(
    "/suggestions/batch",
    response_model=BatchSuggestions,
    summary="Get suggestions for many leads",
    description="Evaluates every lead; leads with no suggestions are omitted.",
)
async def get_batch_suggestions(body: BatchEvaluationRequest) -> BatchSuggestions:
    now = body.now or datetime.now(timezone.utc)
    by_lead = suggestion_orchestrator.evaluate_many(body.leads, now)
    urgent = suggestion_orchestrator.count_urgent(body.leads, now)
    logger.info(
        "Batch evaluated | leads=%d | with_suggestions=%d | urgent=%d",
        len(body.leads),
        len(by_lead),
        urgent,
    )
    return BatchSuggestions(suggestions=by_lead, urgent_count=urgent)


@router.post(
    "/guidance",
    response_model=CloserGuidance,
    summary="Get closer coaching",
    description="Phase, suggested actions, talking points, objection scripts and a close line.",
)
async def get_guidance(lead: Lead) -> CloserGuidance:
    return closer_guide.guidance(lead)


@router.post(
    "/auto-close",
    response_model=CloseDecision,
    summary="Check auto-close eligibility",
    description="Whether the assistant may attempt the close without a human closer.",
)
async def get_auto_close(lead: Lead) -> CloseDecision:
    return closer_guide.can_ai_close(lead)


@router.post(
    "/message",
    response_model=MessageResponse,
    summary="Select a message template",
    description="Renders the first template matching the lead's stage and the requested timing.",
)
async def get_message(body: MessageRequest) -> MessageResponse:
    timing = _timing_from_request(body)
    template = template_matcher.find(body.lead, timing, body.now)
    if template is None:
        return MessageResponse(lead_id=body.lead.id)
    return MessageResponse(
        lead_id=body.lead.id,
        template_id=template.id.value,
        message=render(template.id, body.lead, template_matcher.context),
    )

