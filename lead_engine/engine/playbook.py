"""
Sales playbook: the static tables that shape scoring, pricing and coaching.

Source bonuses, psych-based discounts, rationale sentences, stage labels,
objection scripts, close lines and the edit-instruction vocabulary all
live here so they can be injected, localized or replaced in tests.
"""

from dataclasses import dataclass

from lead_engine.models.lead import LeadSource, PipelineStatus, PsychType


@dataclass(frozen=True)
class SalesPlaybook:
    """All lead-independent tables the engines consult."""

    source_bonus: dict[LeadSource, int]
    discount_percent: dict[PsychType, float]
    rationale: dict[PsychType, str]
    phase_labels: dict[PipelineStatus, str]
    stage_actions: dict[PipelineStatus, list[str]]
    objection_handlers: dict[str, str]
    close_lines: dict[PsychType, str]
    proposal_lines: dict[PsychType, str]
    negotiation_lines: dict[PsychType, str]
    discount_keywords: tuple[str, ...] = ("discount", "lower", "descuento", "bajar")
    add_keywords: tuple[str, ...] = ("add", "include", "agregar", "incluir")
    remove_keywords: tuple[str, ...] = ("remove", "eliminate", "quitar", "eliminar")
    proposal_fallback_line: str = "I reviewed every detail with your business in mind."


# ── Scoring ────────────────────────────────────────────────────────────

SOURCE_BONUS: dict[LeadSource, int] = {
    LeadSource.META_ADS: 15,
    LeadSource.GOOGLE_ADS: 20,
    LeadSource.REFERRAL: 25,
    LeadSource.LANDING: 10,
    LeadSource.ORGANIC: 15,
    LeadSource.WHATSAPP: 12,
    LeadSource.MANUAL: 5,
}

# ── Quoting ────────────────────────────────────────────────────────────

DISCOUNT_PERCENT: dict[PsychType, float] = {
    PsychType.ANALYTICAL: 0,   # prefers objective value over price cuts
    PsychType.EMOTIONAL: 5,    # small goodwill gesture
    PsychType.ASSERTIVE: 10,   # rewards a fast decision
    PsychType.INDECISIVE: 0,   # offered a pilot instead
}

RATIONALE: dict[PsychType, str] = {
    PsychType.ANALYTICAL: "ROI data and expected metrics are included to support an objective evaluation.",
    PsychType.EMOTIONAL: "The proposal emphasizes the transformation and results the client will achieve.",
    PsychType.ASSERTIVE: "A fast-decision discount is applied with clear, direct options.",
    PsychType.INDECISIVE: "A pilot option is included to reduce perceived risk.",
}

# ── Coaching ───────────────────────────────────────────────────────────

PHASE_LABELS: dict[PipelineStatus, str] = {
    PipelineStatus.NEW: "Initial qualification",
    PipelineStatus.CONTACTED: "Needs discovery",
    PipelineStatus.SCHEDULED: "Call preparation",
    PipelineStatus.SHOW: "Presentation and diagnosis",
    PipelineStatus.NO_SHOW: "Recovery",
    PipelineStatus.PROPOSAL_SENT: "Proposal follow-up",
    PipelineStatus.NEGOTIATION: "Closing",
    PipelineStatus.WON: "Onboarding",
    PipelineStatus.LOST: "Loss analysis",
}

STAGE_ACTIONS: dict[PipelineStatus, list[str]] = {
    PipelineStatus.NEW: ["Send welcome message", "Qualify the lead", "Gather business info"],
    PipelineStatus.CONTACTED: ["Identify main needs", "Propose booking a call"],
    PipelineStatus.SCHEDULED: ["Send reminder", "Prepare discovery questions"],
    PipelineStatus.SHOW: ["Run a full diagnosis", "Identify budget", "Create urgency"],
    PipelineStatus.NO_SHOW: ["Send recovery message", "Offer to reschedule", "Call within 24h"],
    PipelineStatus.PROPOSAL_SENT: ["Follow up", "Resolve objections", "Close"],
    PipelineStatus.NEGOTIATION: ["Negotiate terms", "Offer an incentive", "Close today"],
    PipelineStatus.WON: ["Start onboarding", "Ask for referrals"],
    PipelineStatus.LOST: ["Analyze loss reasons", "Schedule a future follow-up"],
}

OBJECTION_HANDLERS: dict[str, str] = {
    "Too expensive": (
        "I understand the investment. Let's look at the ROI: if we generate X leads "
        "that convert into clients worth $Y, does the investment make sense?"
    ),
    "I need to think about it": (
        "Of course, take your time. What additional information would help you decide?"
    ),
    "I already work with another agency": (
        "What results are you getting? We can show you how to improve those numbers."
    ),
    "I don't have time": (
        "That's exactly why we handle everything so you can focus on your business. "
        "How many hours a week do you spend on marketing today?"
    ),
    "I need to check with someone": (
        "Perfect. Can we book a call with your partner or team to answer questions together?"
    ),
}

CLOSE_LINES: dict[PsychType, str] = {
    PsychType.ANALYTICAL: "Based on the data we reviewed, which option makes the most financial sense to you?",
    PsychType.EMOTIONAL: "Are you ready to start this transformation in your business?",
    PsychType.ASSERTIVE: "Great, do we kick off with the full package or the basic one?",
    PsychType.INDECISIVE: "How about starting with a one-month trial with no long-term commitment?",
}

# ── Messaging ──────────────────────────────────────────────────────────

PROPOSAL_LINES: dict[PsychType, str] = {
    PsychType.ANALYTICAL: "I included ROI projections and key metrics so you can evaluate each service objectively.",
    PsychType.EMOTIONAL: "I put together something special thinking about the transformation you'll achieve. I'm excited about the potential!",
    PsychType.ASSERTIVE: "It goes straight to the point with 3 clear options. Just pick the one that fits and we start.",
    PsychType.INDECISIVE: "No pressure. Take your time to review it and we'll solve any questions together.",
}

NEGOTIATION_LINES: dict[PsychType, str] = {
    PsychType.ANALYTICAL: "{name}, looking at the numbers, starting this month gives you a head start on next quarter's results. Does that make sense to you?",
    PsychType.EMOTIONAL: "{name}, imagine how your business will look in 3 months with all of this running. Ready to start that transformation?",
    PsychType.ASSERTIVE: "{name}, let's do it. Which option do you pick to start this week?",
    PsychType.INDECISIVE: "{name}, how about starting with a small project so you can see results without a big upfront commitment?",
}

DEFAULT_PLAYBOOK = SalesPlaybook(
    source_bonus=SOURCE_BONUS,
    discount_percent=DISCOUNT_PERCENT,
    rationale=RATIONALE,
    phase_labels=PHASE_LABELS,
    stage_actions=STAGE_ACTIONS,
    objection_handlers=OBJECTION_HANDLERS,
    close_lines=CLOSE_LINES,
    proposal_lines=PROPOSAL_LINES,
    negotiation_lines=NEGOTIATION_LINES,
)
