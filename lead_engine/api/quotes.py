"""
Quote endpoints.

Generates quotes from a lead snapshot and applies free-text edits to a
quote the caller sends back. Persistence, PDF rendering and delivery
belong to the calling layer.
"""

import logging
from typing import Any

from fastapi import APIRouter

from lead_engine.engine.interpreter import prompt_interpreter
from lead_engine.engine.quotes import quote_generator
from lead_engine.models.quote import Quote, QuoteEditRequest, QuoteResult
from lead_engine.models.requests import EvaluationRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotes", tags=["Quotes"])


@router.get(
    "/catalog",
    summary="List the service catalog",
    description="Offerable services grouped by category, plus the need -> service mapping.",
)
async def get_catalog() -> dict[str, Any]:
    catalog = quote_generator.catalog
    categories: dict[str, list[dict[str, Any]]] = {}
    for entry in catalog.entries:
        categories.setdefault(entry.category, []).append({
            "id": entry.id,
            "name": entry.name,
            "description": entry.description,
            "base_price": entry.base_price,
        })
    return {
        "currency": quote_generator.settings.currency,
        "categories": categories,
        "needs": {need: list(ids) for need, ids in catalog.need_to_services.items()},
    }


@router.post(
    "/generate",
    response_model=QuoteResult,
    summary="Generate a quote for a lead",
    description=(
        "Maps detected needs to services, fits them to the lead's budget, applies the "
        "psych-profile discount and returns economic/premium alternatives."
    ),
)
async def generate_quote(body: EvaluationRequest) -> QuoteResult:
    return quote_generator.generate(body.lead, body.now)


@router.post(
    "/edit",
    response_model=Quote,
    summary="Edit a quote with a free-text instruction",
    description=(
        "Keyword-driven edits: 'discount'/'lower' adds a discount, 'add'/'include' adds a "
        "catalog service, 'remove'/'eliminate' drops a quoted service."
    ),
)
async def edit_quote(body: QuoteEditRequest) -> Quote:
    return prompt_interpreter.apply(body.quote, body.prompt)
