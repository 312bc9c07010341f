"""
Compatibility matching for the pool filter wizard.

- tolerance: optional-measurement comparison within +/- inches
- flow_rate: required GPM from volume and turnover time
- scoring: weighted factor table with reasoning
- ranking: hard filters, scoring, top matches
"""
from poolwizard.matching.tolerance import within_tolerance
from poolwizard.matching.flow_rate import compute_flow_rate, estimate_pool_volume
from poolwizard.matching.scoring import ScoringEngine, score_item
from poolwizard.matching.ranking import rank_matches

__all__ = [
    "within_tolerance",
    "compute_flow_rate",
    "estimate_pool_volume",
    "ScoringEngine",
    "score_item",
    "rank_matches",
]
