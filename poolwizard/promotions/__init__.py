"""
Seasonal promotions for wizard matches.
"""
from poolwizard.promotions.overlay import overlay_promotions, recommended_codes

__all__ = ["overlay_promotions", "recommended_codes"]
