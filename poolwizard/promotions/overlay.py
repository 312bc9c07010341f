"""
Seasonal promotion overlay.

Matches an item's promo tags against the seasonal calendar and attaches the
recommended codes that are live in the registry snapshot.
"""
from typing import Iterable, List, Mapping

from poolwizard.core.models import (
    CatalogItem,
    PromoCode,
    SeasonalPromotion,
    SeasonalPromotionView,
)


def overlay_promotions(
    item: CatalogItem,
    calendar: Iterable[SeasonalPromotion],
    active_codes: Mapping[str, PromoCode],
) -> List[SeasonalPromotionView]:
    """
    Seasonal promotions that apply to ``item``, in calendar order.

    Args:
        item: Catalog item whose ``promo_tags`` select promotions
        calendar: Seasonal promotion calendar
        active_codes: Live promo codes keyed by code (one registry snapshot)

    Returns:
        One view per promotion whose tag is on the item. Recommended codes that
        are missing from ``active_codes`` are dropped; an item without tags
        gets an empty list.
    """
    if not item.promo_tags:
        return []

    tags = set(item.promo_tags)
    views: List[SeasonalPromotionView] = []
    for season in calendar:
        if season.tag not in tags:
            continue
        promos = tuple(
            active_codes[code]
            for code in season.recommended_promo_codes
            if code in active_codes
        )
        views.append(
            SeasonalPromotionView(
                tag=season.tag,
                title=season.title,
                months=season.months,
                description=season.description,
                promos=promos,
            )
        )
    return views


def recommended_codes(calendar: Iterable[SeasonalPromotion]) -> List[str]:
    """Every code the calendar recommends, first-seen order, for a single registry snapshot."""
    return list(dict.fromkeys(
        code for season in calendar for code in season.recommended_promo_codes
    ))


__all__ = ["overlay_promotions", "recommended_codes"]
