"""
Result ranking.

Hard-filters the catalog on the identity answers (environment, system, brand,
series), scores the survivors and keeps the best few matches.
"""
from typing import Iterable, List, Optional

from poolwizard.core.models import CatalogItem, ConstraintSet, MatchResult
from poolwizard.matching.scoring import ScoringEngine
from poolwizard.utils.logger import get_logger

logger = get_logger("matching.ranking")

MAX_RESULTS = 5

# Answers that exclude an item outright when they differ
HARD_FILTER_FIELDS = ("environment", "system", "brand", "series")


def apply_hard_filters(
    constraints: ConstraintSet,
    catalog: Iterable[CatalogItem],
) -> List[CatalogItem]:
    """Keep only items whose identity fields equal every supplied answer, in catalog order."""
    active = {
        name: getattr(constraints, name)
        for name in HARD_FILTER_FIELDS
        if getattr(constraints, name) is not None
    }
    return [
        item for item in catalog
        if all(getattr(item, name) == value for name, value in active.items())
    ]


def rank_matches(
    constraints: ConstraintSet,
    catalog: Iterable[CatalogItem],
    *,
    scoring_engine: Optional[ScoringEngine] = None,
    limit: int = MAX_RESULTS,
) -> List[MatchResult]:
    """
    Rank catalog items for a constraint set.

    Args:
        constraints: Wizard answers so far
        catalog: Catalog items in their canonical order
        scoring_engine: Engine to score with (default tolerance when omitted)
        limit: Maximum number of matches to return

    Returns:
        Up to ``limit`` MatchResults with a positive score, best first. Ties keep
        catalog order.
    """
    engine = scoring_engine or ScoringEngine()
    catalog = list(catalog)

    candidates = apply_hard_filters(constraints, catalog)
    logger.info(f"Hard filters kept {len(candidates)} of {len(catalog)} catalog items")

    scored = []
    for item in candidates:
        result = engine.score(constraints, item)
        logger.debug("Scored %s: %d (%s)", item.id, result.score, "; ".join(result.reasoning))
        if result.score > 0:
            scored.append(result)

    # sorted() is stable, so equal scores stay in catalog order
    ranked = sorted(scored, key=lambda r: r.score, reverse=True)[:max(limit, 0)]

    logger.info(f"Ranked {len(scored)} scoring candidates, returning {len(ranked)}")
    return ranked


__all__ = ["rank_matches", "apply_hard_filters", "HARD_FILTER_FIELDS", "MAX_RESULTS"]
