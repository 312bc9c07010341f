"""
Flow planning helpers: required flow rate, turnover guidelines, volume estimates.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from poolwizard.core.models import Environment

# Gallons per cubic foot used by the storefront's volume hint
POOL_GALLONS_PER_CUBIC_FOOT = 7.5
SPA_GALLONS_PER_CUBIC_FOOT = 7.48


@dataclass(frozen=True)
class TurnoverGuideline:
    label: str
    hours: int


TURNOVER_GUIDELINES: List[TurnoverGuideline] = [
    TurnoverGuideline(label="Residential pools", hours=8),
    TurnoverGuideline(label="Heavy-use pools", hours=6),
    TurnoverGuideline(label="Spas & hot tubs", hours=4),
]


def _round_half_up(value: float, places: int = 1) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_flow_rate(
    pool_volume: Optional[float] = None,
    turnover_hours: Optional[float] = None,
) -> Optional[float]:
    """
    Required flow rate in gallons per minute to turn the pool over in time.

    Args:
        pool_volume: Water volume in gallons
        turnover_hours: Hours allowed for one full turnover

    Returns:
        GPM rounded to one decimal place, or None if either input is missing
        or the turnover time is not positive.
    """
    if pool_volume is None or turnover_hours is None:
        return None
    if turnover_hours <= 0:
        return None
    return _round_half_up(pool_volume / (turnover_hours * 60), 1)


def estimate_pool_volume(
    length_ft: float,
    width_ft: float,
    average_depth_ft: float,
    environment: Optional[Environment] = None,
) -> int:
    """Estimate water volume in gallons from basic measurements (length x width x depth)."""
    if min(length_ft, width_ft, average_depth_ft) <= 0:
        raise ValueError("Pool measurements must be positive")

    factor = (
        SPA_GALLONS_PER_CUBIC_FOOT
        if environment is Environment.SPA
        else POOL_GALLONS_PER_CUBIC_FOOT
    )
    return int(_round_half_up(length_ft * width_ft * average_depth_ft * factor, 0))


__all__ = [
    "compute_flow_rate",
    "estimate_pool_volume",
    "TurnoverGuideline",
    "TURNOVER_GUIDELINES",
]
