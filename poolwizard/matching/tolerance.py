"""
Dimension tolerance matching.
"""
from typing import Optional

DIMENSION_TOLERANCE_INCHES = 0.25

# Absorbs binary float error so 10.0 vs 10.25 sits on the inclusive boundary
_FLOAT_SLACK = 1e-9


def within_tolerance(
    expected: Optional[float] = None,
    actual: Optional[float] = None,
    tolerance: float = DIMENSION_TOLERANCE_INCHES,
) -> bool:
    """
    Compare two optional measurements within +/- ``tolerance`` (inclusive).

    A missing value on either side never disqualifies: the shopper may not
    have measured it, or the catalog may not list it.
    """
    if expected is None or actual is None:
        return True
    return abs(expected - actual) <= tolerance + _FLOAT_SLACK


__all__ = ["within_tolerance", "DIMENSION_TOLERANCE_INCHES"]
