"""
Initial lead quality score.

Score = base + source bonus + completeness bonuses + deal-size tier,
capped at 100. Deterministic and total: every lead gets a score.
"""

import logging

from lead_engine.engine.playbook import DEFAULT_PLAYBOOK, SalesPlaybook
from lead_engine.models.lead import Lead

logger = logging.getLogger(__name__)

BASE_SCORE = 30
MAX_SCORE = 100

# (minimum potential value, bonus), checked highest first
VALUE_TIERS: list[tuple[float, int]] = [
    (50_000, 15),
    (25_000, 10),
    (10_000, 5),
]


class LeadScorer:
    """Computes the 0-100 initial score from source and data completeness."""

    def __init__(self, playbook: SalesPlaybook = DEFAULT_PLAYBOOK) -> None:
        self.playbook = playbook

    def score(self, lead: Lead) -> int:
        score = BASE_SCORE

        if lead.source is not None:
            score += self.playbook.source_bonus.get(lead.source, 0)

        # Completeness
        if lead.email:
            score += 5
        if lead.phone:
            score += 5
        if lead.company:
            score += 10
        if lead.job_title:
            score += 5

        if lead.potential_value:
            for threshold, bonus in VALUE_TIERS:
                if lead.potential_value >= threshold:
                    score += bonus
                    break

        score = min(score, MAX_SCORE)
        logger.debug("Lead scored | lead=%s | score=%d", lead.id, score)
        return score


# ── Module-level singleton ────────────────────────────────────────────
lead_scorer = LeadScorer()
