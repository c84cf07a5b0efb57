"""
Pydantic models for next-best-action suggestions.

Suggestions are created fresh on every evaluation and never persisted
by the engine. The ``action`` identifier is an opaque string the calling
layer interprets and executes.
"""

from enum import Enum

from pydantic import BaseModel, Field


class SuggestionType(str, Enum):
    """Kind of touchpoint a suggestion recommends."""

    MESSAGE = "message"
    CALL = "call"
    EMAIL = "email"
    QUOTE = "quote"
    REMINDER = "reminder"
    FOLLOW_UP = "follow_up"


class Priority(str, Enum):
    """Suggestion urgency, ordered urgent > high > medium > low."""

    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_RANK: dict[Priority, int] = {
    Priority.URGENT: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


class ActionId(str, Enum):
    """
    Side-effecting operations the engine can recommend.

    These values are the contract with the calling layer and must stay stable.
    """

    CALCULATE_SCORE = "CALCULATE_SCORE"
    SEND_WHATSAPP = "SEND_WHATSAPP"
    SEND_FOLLOWUP = "SEND_FOLLOWUP"
    SEND_CONFIRMATION = "SEND_CONFIRMATION"
    SEND_REMINDER = "SEND_REMINDER"
    JOIN_MEETING = "JOIN_MEETING"
    SEND_NOSHOW_RECOVERY = "SEND_NOSHOW_RECOVERY"
    GENERATE_QUOTE = "GENERATE_QUOTE"
    SEND_POST_CALL = "SEND_POST_CALL"
    SEND_PROPOSAL_FOLLOWUP = "SEND_PROPOSAL_FOLLOWUP"
    CALL_LEAD = "CALL_LEAD"
    VIEW_CLOSING_GUIDE = "VIEW_CLOSING_GUIDE"
    VIEW_OBJECTIONS = "VIEW_OBJECTIONS"


class SuggestionAction(BaseModel):
    """Button label plus the action identifier it triggers."""

    label: str
    action_id: ActionId


class Suggestion(BaseModel):
    """A single recommended next step for the closer."""

    id: str
    type: SuggestionType
    priority: Priority
    title: str
    description: str
    suggested_content: str | None = Field(
        default=None,
        description="Draft message body, ready to send.",
    )
    due_in: str | None = Field(
        default=None,
        description="Human-readable due label, e.g. 'now' or 'in 40 min'.",
    )
    action: SuggestionAction | None = None


class LeadSuggestions(BaseModel):
    """Ordered suggestions for one lead."""

    lead_id: str
    suggestions: list[Suggestion] = []
    total_suggestions: int = 0


class BatchSuggestions(BaseModel):
    """Suggestions for many leads, keyed by lead id."""

    suggestions: dict[str, list[Suggestion]] = Field(
        default_factory=dict,
        description="Only leads with at least one suggestion are present.",
    )
    urgent_count: int = Field(
        default=0,
        description="Number of urgent or high priority suggestions across all leads.",
    )
