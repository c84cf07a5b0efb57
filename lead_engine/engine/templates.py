"""
Outbound message templates and the matcher that picks one for a lead.

Design:
- Each template is plain data: which stage it belongs to, when it applies
  (its ``Timing``) and an optional extra condition.
- Rendering is a pure dispatch on ``TemplateId``, so the table can be
  tested and localized independently of the message text.
- Timing is an explicit tagged variant instead of a signed delay:
    * ``OnStageEntry``          applies as soon as the lead enters the stage
    * ``AfterElapsed(n)``       the last interaction was outbound (or there is
                                none) and more than ``n`` minutes have passed
    * ``BeforeScheduledEvent(n)`` the meeting starts within ``(0, n]`` minutes
- The matcher scans templates in declaration order and returns the first
  applicable one. No match means "no message available", never an error.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from lead_engine.config import get_settings
from lead_engine.engine.playbook import DEFAULT_PLAYBOOK, SalesPlaybook
from lead_engine.models.lead import InteractionDirection, Lead, PipelineStatus

logger = logging.getLogger(__name__)


# ── Timing variants ────────────────────────────────────────────────────

@dataclass(frozen=True)
class OnStageEntry:
    """Applies immediately when the lead enters the stage."""


@dataclass(frozen=True)
class AfterElapsed:
    """Applies once the lead has gone quiet after our last outbound message."""
    min_elapsed_since_entry: int  # minutes


@dataclass(frozen=True)
class BeforeScheduledEvent:
    """Applies while the scheduled meeting is at most N minutes away."""
    min_before_scheduled_event: int  # minutes


Timing = OnStageEntry | AfterElapsed | BeforeScheduledEvent

ON_ENTRY = OnStageEntry()


class TemplateId(str, Enum):
    WELCOME = "welcome"
    NO_REPLY_FOLLOW_UP = "no_reply_follow_up"
    BOOK_CALL = "book_call"
    MEETING_CONFIRMATION = "meeting_confirmation"
    REMINDER_1H = "reminder_1h"
    REMINDER_15M = "reminder_15m"
    NO_SHOW_RECOVERY = "no_show_recovery"
    POST_CALL = "post_call"
    PROPOSAL_DELIVERY = "proposal_delivery"
    PROPOSAL_FOLLOW_UP = "proposal_follow_up"
    NEGOTIATION = "negotiation"


class TemplateCondition(str, Enum):
    """Extra lead predicates a template may require."""
    HAS_MEETING = "has_meeting"


@dataclass(frozen=True)
class MessageTemplate:
    """A single outbound message template."""
    id: TemplateId
    trigger: PipelineStatus
    timing: Timing = ON_ENTRY
    condition: TemplateCondition | None = None


MESSAGE_TEMPLATES: list[MessageTemplate] = [
    MessageTemplate(TemplateId.WELCOME, PipelineStatus.NEW),
    MessageTemplate(TemplateId.NO_REPLY_FOLLOW_UP, PipelineStatus.NEW, AfterElapsed(1440)),
    MessageTemplate(TemplateId.BOOK_CALL, PipelineStatus.CONTACTED),
    MessageTemplate(
        TemplateId.MEETING_CONFIRMATION,
        PipelineStatus.SCHEDULED,
        condition=TemplateCondition.HAS_MEETING,
    ),
    MessageTemplate(TemplateId.REMINDER_1H, PipelineStatus.SCHEDULED, BeforeScheduledEvent(60)),
    MessageTemplate(TemplateId.REMINDER_15M, PipelineStatus.SCHEDULED, BeforeScheduledEvent(15)),
    MessageTemplate(TemplateId.NO_SHOW_RECOVERY, PipelineStatus.NO_SHOW, AfterElapsed(30)),
    MessageTemplate(TemplateId.POST_CALL, PipelineStatus.SHOW),
    MessageTemplate(TemplateId.PROPOSAL_DELIVERY, PipelineStatus.PROPOSAL_SENT),
    MessageTemplate(TemplateId.PROPOSAL_FOLLOW_UP, PipelineStatus.PROPOSAL_SENT, AfterElapsed(2880)),
    MessageTemplate(TemplateId.NEGOTIATION, PipelineStatus.NEGOTIATION),
]


# ── Rendering ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RenderContext:
    """Lead-independent inputs the message text needs."""
    agency_name: str
    playbook: SalesPlaybook


def _meeting_link(lead: Lead, placeholder: str = "") -> str:
    if lead.next_meeting and lead.next_meeting.meet_link:
        return lead.next_meeting.meet_link
    return placeholder


def _render_welcome(lead: Lead, ctx: RenderContext) -> str:
    return (
        f"Hi {lead.name}! I'm the assistant at {ctx.agency_name}. I saw you're interested "
        "in growing your business with digital marketing. Do you have 2 minutes to tell me "
        "about your project? That way we can prepare a personalized proposal for you."
    )


def _render_no_reply_follow_up(lead: Lead, ctx: RenderContext) -> str:
    return (
        f"Hi {lead.name}! Did you get a chance to read my previous message? I'd love to "
        "learn more about your business and how we can help you grow. Do you have 5 minutes today?"
    )


def _render_book_call(lead: Lead, ctx: RenderContext) -> str:
    return (
        f"Perfect, {lead.name}. To give you a personalized proposal, our specialist can "
        "book a 30-minute video call with you. Does tomorrow at 10am or 3pm work better?"
    )


def _render_meeting_confirmation(lead: Lead, ctx: RenderContext) -> str:
    when = lead.next_meeting.scheduled_at.strftime("%A, %B %d at %H:%M")
    return (
        f"All set, {lead.name}! Your call is confirmed for {when}. You'll get the Google Meet "
        "link by email. Any questions before the call?"
    )


def _render_reminder_1h(lead: Lead, ctx: RenderContext) -> str:
    return (
        f"{lead.name}! Your call with our specialist is in 1 hour. Here's your link: "
        f"{_meeting_link(lead, '[Link]')}. All good to connect?"
    )


def _render_reminder_15m(lead: Lead, ctx: RenderContext) -> str:
    return f"We start in 15 min, {lead.name}! {_meeting_link(lead)}".rstrip()


def _render_no_show_recovery(lead: Lead, ctx: RenderContext) -> str:
    return (
        f"{lead.name}! We couldn't connect on the call. Is everything ok? We understand "
        "things come up. Would you like to reschedule for a time that works better for you?"
    )


def _render_post_call(lead: Lead, ctx: RenderContext) -> str:
    return (
        f"{lead.name}! It was great talking with you. Our team is already preparing your "
        "personalized proposal and we'll send it in the next few hours. Any questions meanwhile?"
    )


def _render_proposal_delivery(lead: Lead, ctx: RenderContext) -> str:
    if lead.psych_profile is None:
        line = ctx.playbook.proposal_fallback_line
    else:
        line = ctx.playbook.proposal_lines[lead.psych_profile.dominant_type]
    return (
        f"{lead.name}, here is your personalized proposal. {line} "
        "When can we go over any questions together?"
    )


def _render_proposal_follow_up(lead: Lead, ctx: RenderContext) -> str:
    return (
        f"Hi {lead.name}! Did you get a chance to review the proposal? I'm here to answer "
        "any questions. Shall we book 10 minutes to go through it together?"
    )


def _render_negotiation(lead: Lead, ctx: RenderContext) -> str:
    return ctx.playbook.negotiation_lines[lead.psych_type].format(name=lead.name)


_RENDERERS: dict[TemplateId, Callable[[Lead, RenderContext], str]] = {
    TemplateId.WELCOME: _render_welcome,
    TemplateId.NO_REPLY_FOLLOW_UP: _render_no_reply_follow_up,
    TemplateId.BOOK_CALL: _render_book_call,
    TemplateId.MEETING_CONFIRMATION: _render_meeting_confirmation,
    TemplateId.REMINDER_1H: _render_reminder_1h,
    TemplateId.REMINDER_15M: _render_reminder_15m,
    TemplateId.NO_SHOW_RECOVERY: _render_no_show_recovery,
    TemplateId.POST_CALL: _render_post_call,
    TemplateId.PROPOSAL_DELIVERY: _render_proposal_delivery,
    TemplateId.PROPOSAL_FOLLOW_UP: _render_proposal_follow_up,
    TemplateId.NEGOTIATION: _render_negotiation,
}


def render(template_id: TemplateId, lead: Lead, ctx: RenderContext) -> str:
    """Render the text for a template id."""
    return _RENDERERS[template_id](lead, ctx)


# ── Timing helpers ─────────────────────────────────────────────────────

def minutes_until_meeting(lead: Lead, now: datetime) -> float | None:
    """Fractional minutes until the next meeting, or None without one."""
    if lead.next_meeting is None:
        return None
    return (lead.next_meeting.scheduled_at - now).total_seconds() / 60


def _awaiting_reply(lead: Lead, minutes: int, now: datetime) -> bool:
    last = lead.last_interaction
    if last is None:
        return True
    hours_since = (now - last.timestamp).total_seconds() / 3600
    return last.direction == InteractionDirection.OUTBOUND and hours_since > minutes / 60


def _timing_holds(timing: Timing, lead: Lead, now: datetime) -> bool:
    if isinstance(timing, AfterElapsed):
        return _awaiting_reply(lead, timing.min_elapsed_since_entry, now)
    if isinstance(timing, BeforeScheduledEvent):
        remaining = minutes_until_meeting(lead, now)
        return remaining is not None and 0 < remaining <= timing.min_before_scheduled_event
    return True


def _condition_holds(condition: TemplateCondition | None, lead: Lead) -> bool:
    if condition == TemplateCondition.HAS_MEETING:
        return lead.next_meeting is not None
    return True


# ── Matcher ────────────────────────────────────────────────────────────

class TemplateMatcher:
    """
    Picks the first applicable message template for a lead.

    A template applies when its trigger equals the lead's status, its
    timing equals the requested timing context and currently holds, and
    its condition (if any) is true. With ``check_timing=False`` the template
    must still declare the requested timing, but its window is not evaluated.
    """

    def __init__(
        self,
        templates: list[MessageTemplate] | None = None,
        playbook: SalesPlaybook = DEFAULT_PLAYBOOK,
        agency_name: str | None = None,
    ) -> None:
        self.templates = templates if templates is not None else MESSAGE_TEMPLATES
        self.context = RenderContext(
            agency_name=agency_name or get_settings().agency_name,
            playbook=playbook,
        )

    def find(
        self,
        lead: Lead,
        timing: Timing = ON_ENTRY,
        now: datetime | None = None,
        check_timing: bool = True,
    ) -> MessageTemplate | None:
        now = now or datetime.now(timezone.utc)
        for template in self.templates:
            if template.trigger != lead.status or template.timing != timing:
                continue
            if check_timing and not _timing_holds(template.timing, lead, now):
                continue
            if not _condition_holds(template.condition, lead):
                continue
            return template
        return None

    def select(
        self,
        lead: Lead,
        timing: Timing = ON_ENTRY,
        now: datetime | None = None,
        check_timing: bool = True,
    ) -> str | None:
        """Rendered text of the first matching template, or None."""
        template = self.find(lead, timing, now, check_timing)
        if template is None:
            logger.debug(
                "No template | lead=%s | status=%s | timing=%s",
                lead.id,
                lead.status.value,
                timing,
            )
            return None
        return render(template.id, lead, self.context)


# ── Module-level singleton ────────────────────────────────────────────
template_matcher = TemplateMatcher()
