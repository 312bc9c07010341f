"""
Weighted compatibility scoring.

Each wizard answer is a scoring factor with a fixed weight. Factors are
evaluated independently against one catalog item and the score is the plain
sum of the weights that matched; every matched factor contributes one line of
reasoning so the shopper can see why a filter was suggested.

Factor weights:
    environment 25, system 25, brand 20, series 10,
    diameter 10, length 10, top connector 5, bottom connector 5,
    pool volume in range 10
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from poolwizard.core.models import CatalogItem, ConnectorStyle, ConstraintSet, MatchResult
from poolwizard.matching.tolerance import DIMENSION_TOLERANCE_INCHES, within_tolerance

Predicate = Callable[[ConstraintSet, CatalogItem, float], bool]
Explainer = Callable[[ConstraintSet, CatalogItem, float], str]


@dataclass(frozen=True)
class ScoringFactor:
    """
    One row of the scoring table.

    Attributes:
        name: Factor identifier
        weight: Points awarded when the factor matches
        supplied: Whether the shopper answered this factor at all
        matches: Whether the item satisfies the answer
        reason: Reasoning line for a match
        miss_note: Optional informational line when supplied but not matched
            (never changes the score)
    """
    name: str
    weight: int
    supplied: Callable[[ConstraintSet], bool]
    matches: Predicate
    reason: Explainer
    miss_note: Optional[Explainer] = None


def _connector_supplied(style: Optional[ConnectorStyle]) -> bool:
    return style is not None and style is not ConnectorStyle.ANY


def _connector_matches(wanted: ConnectorStyle, actual: Optional[ConnectorStyle]) -> bool:
    return actual is None or actual == wanted


def _connector_label(style: Optional[ConnectorStyle]) -> str:
    return style.label if style else "Any"


def _format_gallons(value: float) -> str:
    return f"{value:,.0f}"


def _format_inches(tolerance: float) -> str:
    return f'±{tolerance:g}"'


SCORING_FACTORS: Sequence[ScoringFactor] = (
    ScoringFactor(
        name="environment",
        weight=25,
        supplied=lambda c: c.environment is not None,
        matches=lambda c, item, tol: item.environment == c.environment,
        reason=lambda c, item, tol: f"Designed for {c.environment.label} applications.",
    ),
    ScoringFactor(
        name="system",
        weight=25,
        supplied=lambda c: c.system is not None,
        matches=lambda c, item, tol: item.system == c.system,
        reason=lambda c, item, tol: f"Matches your {c.system.label} filter system.",
    ),
    ScoringFactor(
        name="brand",
        weight=20,
        supplied=lambda c: c.brand is not None,
        matches=lambda c, item, tol: item.brand == c.brand,
        reason=lambda c, item, tol: f"OEM fit for {c.brand} housings.",
    ),
    ScoringFactor(
        name="series",
        weight=10,
        supplied=lambda c: c.series is not None,
        matches=lambda c, item, tol: item.series == c.series,
        reason=lambda c, item, tol: f"Exact match for the {c.series} series.",
    ),
    ScoringFactor(
        name="diameter",
        weight=10,
        supplied=lambda c: c.diameter is not None,
        matches=lambda c, item, tol: within_tolerance(c.diameter, item.dimensions.diameter, tol),
        reason=lambda c, item, tol: f"Diameter within {_format_inches(tol)} tolerance.",
    ),
    ScoringFactor(
        name="length",
        weight=10,
        supplied=lambda c: c.length is not None,
        matches=lambda c, item, tol: within_tolerance(c.length, item.dimensions.length, tol),
        reason=lambda c, item, tol: f"Length within {_format_inches(tol)} tolerance.",
    ),
    ScoringFactor(
        name="top_connector",
        weight=5,
        supplied=lambda c: _connector_supplied(c.top_style),
        matches=lambda c, item, tol: _connector_matches(c.top_style, item.dimensions.top_style),
        reason=lambda c, item, tol: (
            f"Top connector style matches ({_connector_label(item.dimensions.top_style)})."
        ),
    ),
    ScoringFactor(
        name="bottom_connector",
        weight=5,
        supplied=lambda c: _connector_supplied(c.bottom_style),
        matches=lambda c, item, tol: _connector_matches(c.bottom_style, item.dimensions.bottom_style),
        reason=lambda c, item, tol: (
            f"Bottom connector style matches ({_connector_label(item.dimensions.bottom_style)})."
        ),
    ),
    ScoringFactor(
        name="pool_volume",
        weight=10,
        supplied=lambda c: c.pool_volume is not None,
        matches=lambda c, item, tol: item.recommended_volume.contains(c.pool_volume),
        reason=lambda c, item, tol: "Sized correctly for your pool volume.",
        miss_note=lambda c, item, tol: (
            f"Recommended for pools {_format_gallons(item.recommended_volume.min_gallons)}"
            f" - {_format_gallons(item.recommended_volume.max_gallons)} gallons."
        ),
    ),
)


class ScoringEngine:
    """Scores catalog items against wizard constraints using a factor table."""

    def __init__(
        self,
        tolerance: float = DIMENSION_TOLERANCE_INCHES,
        factors: Sequence[ScoringFactor] = SCORING_FACTORS,
    ):
        self.tolerance = tolerance
        self.factors = tuple(factors)

    def score(self, constraints: ConstraintSet, item: CatalogItem) -> MatchResult:
        score = 0
        reasoning: List[str] = []

        for factor in self.factors:
            if not factor.supplied(constraints):
                continue
            if factor.matches(constraints, item, self.tolerance):
                score += factor.weight
                reasoning.append(factor.reason(constraints, item, self.tolerance))
            elif factor.miss_note is not None:
                reasoning.append(factor.miss_note(constraints, item, self.tolerance))

        return MatchResult(product_id=item.id, score=score, reasoning=tuple(reasoning))


def score_item(
    constraints: ConstraintSet,
    item: CatalogItem,
    tolerance: float = DIMENSION_TOLERANCE_INCHES,
) -> MatchResult:
    """Score a single item with the default factor table."""
    return ScoringEngine(tolerance=tolerance).score(constraints, item)


__all__ = ["ScoringEngine", "ScoringFactor", "SCORING_FACTORS", "score_item"]
