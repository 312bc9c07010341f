"""
Pydantic models for wizard API requests and responses.

Wizard answers travel as ``ConstraintSet`` and results as ``WizardResult``
(see poolwizard.core.models); the models here cover the remaining endpoints.
"""
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List

from poolwizard.core.models import Environment


class PoolVolumeRequest(BaseModel):
    """Request model for the pool volume estimate."""
    length_ft: float = Field(gt=0, allow_inf_nan=False, description="Pool length in feet")
    width_ft: float = Field(gt=0, allow_inf_nan=False, description="Pool width in feet")
    average_depth_ft: float = Field(gt=0, allow_inf_nan=False, description="Average depth in feet")
    environment: Optional[Environment] = Field(default=None, description="'spa' uses 7.48 gal/ft^3, pools 7.5")
    turnover_hours: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False, description="Turnover time for a flow-rate estimate")


class PoolVolumeResponse(BaseModel):
    """Response model for the pool volume estimate."""
    gallons: int = Field(description="Estimated water volume")
    calculated_flow_rate: Optional[float] = Field(default=None, description="Required GPM when turnover_hours was given")


class TurnoverGuidelineResponse(BaseModel):
    label: str
    hours: int


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str
    service: str
    version: str
    catalog_items: int
    config: Dict[str, Any]


class TurnoverGuidelinesResponse(BaseModel):
    guidelines: List[TurnoverGuidelineResponse]
