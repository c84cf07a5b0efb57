"""
Pydantic models for the lead snapshot the engine reads.

The surrounding CRM owns and mutates leads; every engine operation
receives a snapshot and never writes back to it.

Designed for resilience:
- Optional contact and profile fields default to empty/absent
- Naive datetimes are interpreted as UTC
- Extra fields are ignored (the CRM stores far more than the engine needs)
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class PipelineStatus(str, Enum):
    """Stages of the sales pipeline."""

    NEW = "new"
    CONTACTED = "contacted"
    SCHEDULED = "scheduled"
    SHOW = "show"
    NO_SHOW = "no_show"
    PROPOSAL_SENT = "proposal_sent"
    NEGOTIATION = "negotiation"
    WON = "won"
    LOST = "lost"


class LeadSource(str, Enum):
    """Acquisition channel the lead arrived through."""

    META_ADS = "meta_ads"
    GOOGLE_ADS = "google_ads"
    ORGANIC = "organic"
    REFERRAL = "referral"
    LANDING = "landing"
    WHATSAPP = "whatsapp"
    MANUAL = "manual"


class PsychType(str, Enum):
    """Decision-making style of a lead."""

    ANALYTICAL = "analytical"
    EMOTIONAL = "emotional"
    ASSERTIVE = "assertive"
    INDECISIVE = "indecisive"


# Used wherever a lead has no psychological profile yet
DEFAULT_PSYCH_TYPE = PsychType.ASSERTIVE


class InteractionDirection(str, Enum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class InteractionType(str, Enum):
    WHATSAPP = "whatsapp"
    EMAIL = "email"
    CALL = "call"
    VIDEO_CALL = "video_call"
    SYSTEM = "system"
    AI = "ai"


class MeetingStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes so comparisons against "now" are valid."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PsychProfile(BaseModel):
    """Psychological profile produced by an upstream analysis step."""

    dominant_type: PsychType
    traits: list[str] = []
    pain_points: list[str] = []
    motivators: list[str] = []
    objections: list[str] = []
    recommended_strategy: str = ""
    confidence: int = Field(default=0, ge=0, le=100)

    model_config = {"extra": "ignore"}


class Meeting(BaseModel):
    """A scheduled video call with the lead."""

    scheduled_at: datetime
    meet_link: str = ""
    duration_minutes: int = Field(default=30, gt=0)
    status: MeetingStatus = MeetingStatus.PENDING

    model_config = {"extra": "ignore"}

    @field_validator("scheduled_at")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class Interaction(BaseModel):
    """A single touchpoint recorded in the lead's history."""

    type: InteractionType = InteractionType.WHATSAPP
    content: str = ""
    timestamp: datetime
    direction: InteractionDirection

    model_config = {"extra": "ignore"}

    @field_validator("timestamp")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class Lead(BaseModel):
    """
    Read-only snapshot of a sales lead.

    Example::

        {
            "id": "lead-001",
            "name": "Maria",
            "status": "new",
            "source": "referral",
            "lead_score": 0,
            "potential_value": 15000,
            "detected_needs": ["Social media"]
        }
    """

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    job_title: str | None = None

    status: PipelineStatus = PipelineStatus.NEW
    source: LeadSource | None = None
    lead_score: int = Field(default=0, ge=0, le=100)
    potential_value: float | None = Field(
        default=None,
        ge=0,
        description="Estimated deal size, also used as the quoting budget.",
    )

    detected_needs: list[str] = []
    interests: list[str] = []
    psych_profile: PsychProfile | None = None

    interactions: list[Interaction] = Field(
        default_factory=list,
        description="Interaction history, oldest first.",
    )
    last_contact_at: datetime | None = None
    next_meeting: Meeting | None = None
    created_at: datetime | None = None

    model_config = {"extra": "ignore"}

    @field_validator("last_contact_at", "created_at")
    @classmethod
    def ensure_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    @property
    def psych_type(self) -> PsychType:
        """Dominant psych type, falling back to assertive when unprofiled."""
        if self.psych_profile is None:
            return DEFAULT_PSYCH_TYPE
        return self.psych_profile.dominant_type

    @property
    def objections(self) -> list[str]:
        return self.psych_profile.objections if self.psych_profile else []

    @property
    def last_interaction(self) -> Interaction | None:
        return self.interactions[-1] if self.interactions else None
