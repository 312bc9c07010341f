"""
Wizard result assembly.

Composes ranking, flow planning and the promotion overlay into the result the
wizard renders. Every call recomputes from scratch; nothing is cached between
calls, so it is safe to run on each answer change and from concurrent requests.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from poolwizard.core.config import WizardConfig, get_config
from poolwizard.core.models import (
    CatalogItem,
    ConstraintSet,
    PromoCode,
    SeasonalPromotion,
    WizardMatch,
    WizardResult,
)
from poolwizard.data.catalog_store import CatalogRepository
from poolwizard.data.promo_registry import PromoCodeRegistry, PromoRegistryError
from poolwizard.matching.flow_rate import compute_flow_rate
from poolwizard.matching.ranking import rank_matches
from poolwizard.matching.scoring import ScoringEngine
from poolwizard.promotions.overlay import overlay_promotions, recommended_codes
from poolwizard.utils.logger import get_logger

logger = get_logger("core.assembler")


def build_maintenance_reminder(constraints: ConstraintSet) -> Optional[str]:
    """Circulation reminder, only when both pool volume and turnover time are known."""
    if constraints.pool_volume is None or constraints.desired_turnover_hours is None:
        return None
    return (
        "Aim for a pump and filter combination that circulates "
        f"{constraints.pool_volume:,.0f} gallons every "
        f"{constraints.desired_turnover_hours:g} hours."
    )


class WizardResultAssembler:
    """
    Builds WizardResults from an injected catalog repository and promo registry.

    Args:
        repository: Catalog and seasonal promotion calendar
        registry: Promo-code registry; promotions are shown without codes when None
        config: Matching configuration. Uses default config if not provided.
    """

    def __init__(
        self,
        repository: CatalogRepository,
        registry: Optional[PromoCodeRegistry] = None,
        config: Optional[WizardConfig] = None,
    ):
        self.config = config or get_config()
        self.repository = repository
        self.registry = registry
        self.scoring_engine = ScoringEngine(tolerance=self.config.dimension_tolerance_inches)

    def assemble(
        self,
        constraints: ConstraintSet,
        catalog: Optional[Iterable[CatalogItem]] = None,
        as_of: Optional[datetime] = None,
    ) -> WizardResult:
        """
        Rank the catalog for ``constraints`` and decorate the matches.

        Args:
            constraints: Wizard answers so far
            catalog: Items to rank; the repository's items when omitted
            as_of: Time used to decide which promo codes are live (now when omitted)

        Returns:
            WizardResult with up to ``config.max_results`` matches
        """
        constraints = self._with_default_turnover(constraints)
        if catalog is not None:
            # Raises CatalogLoadError on duplicate product ids
            items = CatalogRepository(items=tuple(catalog)).items
        else:
            items = self.repository.items

        ranked = rank_matches(
            constraints,
            items,
            scoring_engine=self.scoring_engine,
            limit=self.config.max_results,
        )

        by_id: Dict[str, CatalogItem] = {item.id: item for item in items}
        matched_items = [by_id[result.product_id] for result in ranked]

        calendar = self.repository.seasonal_promotions
        active_codes = self._snapshot_codes(matched_items, calendar, as_of)

        matches = tuple(
            WizardMatch(
                result=result,
                item=item,
                promotions=tuple(overlay_promotions(item, calendar, active_codes)),
            )
            for result, item in zip(ranked, matched_items)
        )

        result = WizardResult(
            inputs=constraints,
            matches=matches,
            calculated_flow_rate=compute_flow_rate(
                constraints.pool_volume, constraints.desired_turnover_hours
            ),
            maintenance_reminder=build_maintenance_reminder(constraints),
        )
        logger.info(
            f"Assembled wizard result: {len(matches)} matches, "
            f"flow rate={result.calculated_flow_rate}"
        )
        return result

    def _with_default_turnover(self, constraints: ConstraintSet) -> ConstraintSet:
        """Apply the configured turnover time when the wizard has not set one."""
        if "desired_turnover_hours" in constraints.model_fields_set:
            return constraints
        return constraints.with_changes(desired_turnover_hours=self.config.default_turnover_hours)

    def _snapshot_codes(
        self,
        items: List[CatalogItem],
        calendar: Iterable[SeasonalPromotion],
        as_of: Optional[datetime],
    ) -> Dict[str, PromoCode]:
        """Take the single registry read for this call; degrade to no codes on failure."""
        if self.registry is None:
            return {}

        tags = {tag for item in items for tag in item.promo_tags}
        codes = recommended_codes(season for season in calendar if season.tag in tags)
        if not codes:
            return {}

        try:
            return self.registry.snapshot(codes, as_of=as_of)
        except PromoRegistryError as exc:
            logger.warning(f"Promo registry unavailable, showing promotions without codes: {exc}")
            return {}


def assemble(
    constraints: ConstraintSet,
    catalog: Iterable[CatalogItem],
    calendar: Iterable[SeasonalPromotion] = (),
    registry: Optional[PromoCodeRegistry] = None,
    config: Optional[WizardConfig] = None,
    as_of: Optional[datetime] = None,
) -> WizardResult:
    """Convenience wrapper: assemble against an ad-hoc catalog and calendar."""
    repository = CatalogRepository(items=tuple(catalog), seasonal_promotions=tuple(calendar))
    return WizardResultAssembler(repository, registry=registry, config=config).assemble(
        constraints, as_of=as_of
    )


__all__ = ["WizardResultAssembler", "assemble", "build_maintenance_reminder"]
