"""
Request/response bodies for the HTTP surface.

The engine itself only deals in ``Lead``, ``Suggestion``, ``Quote`` and
``CloserGuidance``; these wrappers exist for the API layer.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from lead_engine.models.lead import Lead, as_utc


class EvaluationRequest(BaseModel):
    """A lead snapshot plus an optional evaluation instant."""

    lead: Lead
    now: datetime | None = Field(
        default=None,
        description="Evaluate as of this instant instead of the server clock.",
    )

    @field_validator("now")
    @classmethod
    def ensure_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


class BatchEvaluationRequest(BaseModel):
    leads: list[Lead] = Field(..., min_length=1)
    now: datetime | None = None

    @field_validator("now")
    @classmethod
    def ensure_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


class ScoreResponse(BaseModel):
    lead_id: str
    score: int = Field(..., ge=0, le=100)


class TimingKind(str, Enum):
    """Which kind of template timing to request."""

    ON_ENTRY = "on_entry"
    AFTER_ELAPSED = "after_elapsed"
    BEFORE_EVENT = "before_event"


class MessageRequest(BaseModel):
    """
    Ask for the message template that fits a lead right now.

    Example::

        {
            "lead": {"id": "lead-001", "name": "Maria", "status": "scheduled", ...},
            "timing": "before_event",
            "minutes": 15
        }
    """

    lead: Lead
    timing: TimingKind = TimingKind.ON_ENTRY
    minutes: int | None = Field(
        default=None,
        gt=0,
        description="Required for after_elapsed and before_event timings.",
    )
    now: datetime | None = None

    @field_validator("now")
    @classmethod
    def ensure_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


class MessageResponse(BaseModel):
    lead_id: str
    template_id: str | None = None
    message: str | None = None
