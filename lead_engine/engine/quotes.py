"""
Quote generator.

Turns a lead's detected needs into a priced quote:

1. Union the catalog services mapped from every detected need; fall back
   to the catalog's default pair when nothing maps.
2. With a positive budget, run budget-fit: take candidates by price
   descending while the running total stays within ``budget * tolerance``.
   When nothing fits, the single cheapest candidate is taken instead.
3. Apply the psych-type discount and build the main quote.
4. Build an economic bundle (two cheapest candidates, no discount) and a
   premium bundle (four most expensive, flat bundle discount) from the
   full candidate set.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

from lead_engine.config import Settings, get_settings
from lead_engine.engine.catalog import DEFAULT_CATALOG, ServiceCatalog, ServiceCatalogEntry
from lead_engine.engine.playbook import DEFAULT_PLAYBOOK, SalesPlaybook
from lead_engine.models.lead import Lead
from lead_engine.models.quote import Quote, QuoteLine, QuoteResult, QuoteStatus

logger = logging.getLogger(__name__)

ECONOMIC_SIZE = 2
PREMIUM_SIZE = 4
PREMIUM_MIN_SIZE = 2


def fit_to_budget(
    candidates: list[ServiceCatalogEntry],
    budget: float,
    tolerance: float = 1.2,
) -> list[ServiceCatalogEntry]:
    """
    Greedy budget-fit, most expensive first.

    Never returns an empty list when ``candidates`` is non-empty.
    """
    cap = round(budget * tolerance, 2)
    ordered = sorted(candidates, key=lambda s: s.base_price, reverse=True)

    selected: list[ServiceCatalogEntry] = []
    running = 0.0
    for service in ordered:
        if running + service.base_price <= cap:
            selected.append(service)
            running += service.base_price

    if not selected and ordered:
        selected.append(min(ordered, key=lambda s: s.base_price))

    return selected


def _line(service: ServiceCatalogEntry) -> QuoteLine:
    return QuoteLine(
        name=service.name,
        description=service.description,
        price=service.base_price,
        quantity=1,
        service_id=service.id,
    )


class QuoteGenerator:
    """Builds a quote, its alternatives and a rationale for a lead."""

    def __init__(
        self,
        catalog: ServiceCatalog = DEFAULT_CATALOG,
        playbook: SalesPlaybook = DEFAULT_PLAYBOOK,
        settings: Settings | None = None,
    ) -> None:
        self.catalog = catalog
        self.playbook = playbook
        self.settings = settings or get_settings()

    def recommend(self, lead: Lead) -> list[ServiceCatalogEntry]:
        """Candidate services for the lead's needs, in catalog order."""
        service_ids: set[str] = set()
        for need in lead.detected_needs:
            service_ids.update(self.catalog.services_for_need(need))

        if not service_ids:
            service_ids.update(self.catalog.default_service_ids)

        return self.catalog.resolve(service_ids)

    def _build_quote(
        self,
        lines: list[QuoteLine],
        discount_percent: float,
        now: datetime,
        prefix: str = "q",
        notes: str | None = None,
    ) -> Quote:
        subtotal = sum(line.amount for line in lines)
        discount = subtotal * discount_percent / 100
        return Quote(
            id=f"{prefix}-{uuid.uuid4().hex[:12]}",
            created_at=now,
            updated_at=now,
            services=lines,
            subtotal=subtotal,
            discount=discount,
            total=subtotal - discount,
            currency=self.settings.currency,
            valid_until=now + timedelta(days=self.settings.quote_validity_days),
            status=QuoteStatus.DRAFT,
            notes=notes,
        )

    def alternatives(
        self,
        candidates: list[ServiceCatalogEntry],
        now: datetime,
    ) -> list[Quote]:
        """Economic and premium bundles; either is omitted when too few candidates."""
        bundles: list[Quote] = []

        economic = sorted(candidates, key=lambda s: s.base_price)[:ECONOMIC_SIZE]
        if economic:
            bundles.append(self._build_quote(
                [_line(s) for s in economic],
                0,
                now,
                prefix="q-eco",
                notes="Economic option - essential services",
            ))

        premium = sorted(candidates, key=lambda s: s.base_price, reverse=True)[:PREMIUM_SIZE]
        if len(premium) >= PREMIUM_MIN_SIZE:
            percent = self.settings.premium_bundle_discount_percent
            bundles.append(self._build_quote(
                [_line(s) for s in premium],
                percent,
                now,
                prefix="q-prem",
                notes=f"Premium option - {percent:g}% bundle discount included",
            ))

        return bundles

    def rationale(self, lead: Lead, lines: list[QuoteLine]) -> str:
        parts = [f"Quote generated for {lead.name}."]
        if lead.detected_needs:
            parts.append(
                f"Based on the detected needs ({', '.join(lead.detected_needs)}), "
                f"{len(lines)} services are recommended."
            )
        parts.append(self.playbook.rationale[lead.psych_type])
        return " ".join(parts)

    def generate(self, lead: Lead, now: datetime | None = None) -> QuoteResult:
        now = now or datetime.now(timezone.utc)
        psych_type = lead.psych_type

        candidates = self.recommend(lead)
        selected = candidates
        budget = lead.potential_value
        if budget and budget > 0:
            selected = fit_to_budget(candidates, budget, self.settings.budget_tolerance)

        lines = [_line(s) for s in selected]
        quote = self._build_quote(lines, self.playbook.discount_percent[psych_type], now)

        result = QuoteResult(
            quote=quote,
            rationale=self.rationale(lead, lines),
            alternatives=self.alternatives(candidates, now),
        )

        logger.info(
            "Quote generated | lead=%s | candidates=%d | selected=%d | total=%.2f %s",
            lead.id,
            len(candidates),
            len(selected),
            quote.total,
            quote.currency,
        )
        return result


# ── Module-level singleton ────────────────────────────────────────────
quote_generator = QuoteGenerator()
