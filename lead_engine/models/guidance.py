"""
Response models for closer coaching.

Both models are derived on demand from a lead snapshot and never persisted.
"""

from pydantic import BaseModel, Field


class CloserGuidance(BaseModel):
    """Stage- and psych-keyed coaching for the human closer."""

    current_phase: str
    suggested_actions: list[str] = []
    talking_points: list[str] = []
    objection_handlers: dict[str, str] = Field(
        default_factory=dict,
        description="Canonical objection mapped to its rebuttal script.",
    )
    close_attempt: str


class CloseDecision(BaseModel):
    """Whether the assistant may attempt the close without a human."""

    can_close: bool
    reason: str
