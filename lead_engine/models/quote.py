"""
Pydantic models for priced service quotes.

A quote always satisfies ``total == subtotal - discount``. The model
validator derives ``total`` when it is omitted and normalizes it when a
client sends a value that differs only by float rounding.
"""

import math
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class QuoteStatus(str, Enum):
    """Quote lifecycle: draft -> sent -> viewed -> accepted/rejected."""

    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class QuoteLine(BaseModel):
    """A single quoted service."""

    name: str
    description: str = ""
    price: float = Field(..., ge=0, description="Unit price.")
    quantity: int = Field(default=1, ge=1)
    service_id: str | None = Field(
        default=None,
        description="Catalog identifier, when the line came from the catalog.",
    )

    @property
    def amount(self) -> float:
        return self.price * self.quantity


class Quote(BaseModel):
    """A priced bundle of services offered to a lead."""

    id: str
    created_at: datetime
    updated_at: datetime
    services: list[QuoteLine] = []
    subtotal: float = Field(..., ge=0)
    discount: float = Field(default=0.0, ge=0)
    total: float | None = None
    currency: str = "MXN"
    valid_until: datetime
    status: QuoteStatus = QuoteStatus.DRAFT
    notes: str | None = None

    @model_validator(mode="after")
    def check_total(self) -> "Quote":
        expected = self.subtotal - self.discount
        if self.total is not None and not math.isclose(
            self.total, expected, rel_tol=1e-9, abs_tol=0.005
        ):
            raise ValueError(
                f"total {self.total} does not equal subtotal - discount ({expected})"
            )
        self.total = expected
        return self

    @property
    def service_names(self) -> list[str]:
        return [line.name for line in self.services]


class QuoteResult(BaseModel):
    """Main quote plus the explanation and alternative bundles."""

    quote: Quote
    rationale: str
    alternatives: list[Quote] = Field(
        default_factory=list,
        description="Economic and premium bundles, when enough services qualify.",
    )


class QuoteEditRequest(BaseModel):
    """Free-text instruction applied to an existing quote."""

    quote: Quote
    prompt: str = Field(..., min_length=1, description="e.g. 'add SEO and give a discount'")
