"""
API module for the pool filter wizard.

Provides REST API endpoints for the storefront UI.
"""
from poolwizard.api.models import (
    HealthResponse,
    PoolVolumeRequest,
    PoolVolumeResponse,
    TurnoverGuidelineResponse,
    TurnoverGuidelinesResponse,
)

__all__ = [
    "HealthResponse",
    "PoolVolumeRequest",
    "PoolVolumeResponse",
    "TurnoverGuidelineResponse",
    "TurnoverGuidelinesResponse",
]
