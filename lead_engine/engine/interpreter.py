"""
Free-text quote editing.

Scans an instruction such as "add SEO and lower the price" for keywords
and turns it into typed edit instructions, which one mutation function
applies to a copy of the quote.

Design:
- The classifier lowercases the text and checks substrings against the
  playbook vocabulary. This is keyword matching, not language understanding.
- Discount, add and remove branches run in that order. Each one is checked
  against the quote as edited by the branches before it, so "add X, then
  remove X" removes the line it just added.
- The discount step always adds ``prompt_discount_percent`` of the subtotal.
  Percentages written in the text are deliberately not parsed.
- Unmatched text returns the quote unchanged apart from ``updated_at``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from lead_engine.config import Settings, get_settings
from lead_engine.engine.catalog import DEFAULT_CATALOG, ServiceCatalog
from lead_engine.engine.playbook import DEFAULT_PLAYBOOK, SalesPlaybook
from lead_engine.models.quote import Quote, QuoteLine

logger = logging.getLogger(__name__)

DISCOUNT_NOTE = "Additional discount applied."


# ── Instructions ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class AddDiscount:
    percent: float


@dataclass(frozen=True)
class AddService:
    service_id: str


@dataclass(frozen=True)
class RemoveService:
    name: str


EditInstruction = AddDiscount | AddService | RemoveService


def _mentions(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def _with_totals(
    quote: Quote,
    services: list[QuoteLine],
    subtotal: float,
    discount: float,
    **updates,
) -> Quote:
    return Quote(
        **{
            **quote.model_dump(exclude={"services", "subtotal", "discount", "total"}),
            **updates,
            "services": services,
            "subtotal": subtotal,
            "discount": discount,
            "total": subtotal - discount,
        }
    )


class PromptInterpreter:
    """Classifies edit text into instructions and applies them to quotes."""

    def __init__(
        self,
        catalog: ServiceCatalog = DEFAULT_CATALOG,
        playbook: SalesPlaybook = DEFAULT_PLAYBOOK,
        settings: Settings | None = None,
    ) -> None:
        self.catalog = catalog
        self.playbook = playbook
        self.settings = settings or get_settings()

    # ── Branches ───────────────────────────────────────────────────────

    def _discount(self, quote: Quote, text_lower: str) -> AddDiscount | None:
        if _mentions(text_lower, self.playbook.discount_keywords):
            return AddDiscount(self.settings.prompt_discount_percent)
        return None

    def _service_to_add(self, quote: Quote, text_lower: str) -> AddService | None:
        if not _mentions(text_lower, self.playbook.add_keywords):
            return None
        present = set(quote.service_names)
        for entry in self.catalog.entries:
            named = entry.name.lower() in text_lower or entry.category.lower() in text_lower
            if named and entry.name not in present:
                return AddService(entry.id)
        return None

    def _line_to_remove(self, quote: Quote, text_lower: str) -> RemoveService | None:
        if not _mentions(text_lower, self.playbook.remove_keywords):
            return None
        for line in quote.services:
            if line.name.lower() in text_lower:
                return RemoveService(line.name)
        return None

    def _run(self, quote: Quote, text: str) -> tuple[Quote, list[EditInstruction]]:
        # Each branch sees the quote as left by the previous one
        text_lower = text.lower()
        applied: list[EditInstruction] = []
        for branch in (self._discount, self._service_to_add, self._line_to_remove):
            instruction = branch(quote, text_lower)
            if instruction is not None:
                quote = self.apply_instruction(quote, instruction)
                applied.append(instruction)
        return quote, applied

    # ── Public API ─────────────────────────────────────────────────────

    def classify(self, quote: Quote, text: str) -> list[EditInstruction]:
        """Edit instructions the text yields, in the order they would be applied."""
        return self._run(quote, text)[1]

    def apply_instruction(self, quote: Quote, instruction: EditInstruction) -> Quote:
        """Apply one instruction, returning a new quote with recomputed totals."""
        services = [line.model_copy() for line in quote.services]

        if isinstance(instruction, AddDiscount):
            extra = quote.subtotal * instruction.percent / 100
            notes = f"{quote.notes} | {DISCOUNT_NOTE}" if quote.notes else DISCOUNT_NOTE
            return _with_totals(
                quote, services, quote.subtotal, quote.discount + extra, notes=notes
            )

        if isinstance(instruction, AddService):
            entry = self.catalog.get(instruction.service_id)
            if entry is None:
                return quote
            services.append(QuoteLine(
                name=entry.name,
                description=entry.description,
                price=entry.base_price,
                quantity=1,
                service_id=entry.id,
            ))
            return _with_totals(
                quote, services, quote.subtotal + entry.base_price, quote.discount
            )

        for index, line in enumerate(services):
            if line.name == instruction.name:
                del services[index]
                return _with_totals(
                    quote, services, max(quote.subtotal - line.amount, 0.0), quote.discount
                )
        return quote

    def apply(self, quote: Quote, text: str, now: datetime | None = None) -> Quote:
        """Apply a free-text edit to a quote; the input quote is not modified."""
        now = now or datetime.now(timezone.utc)
        edited = quote.model_copy(deep=True, update={"updated_at": now})
        edited, instructions = self._run(edited, text)

        logger.info(
            "Quote edited | quote=%s | instructions=%s | total=%.2f",
            quote.id,
            [type(i).__name__ for i in instructions] or "none",
            edited.total,
        )
        return edited


# ── Module-level singleton ────────────────────────────────────────────
prompt_interpreter = PromptInterpreter()
