"""
Domain models for the pool filter wizard.

Catalog records, wizard constraints and engine results are immutable pydantic
models: enumerated fields reject unknown values at construction, and every
sequence is stored as a tuple so a loaded catalog cannot be mutated while a
match is running.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Environment(str, Enum):
    """Body of water the filter serves."""
    IN_GROUND = "in-ground"
    ABOVE_GROUND = "above-ground"
    SPA = "spa"

    @property
    def label(self) -> str:
        return _ENVIRONMENT_LABELS[self]


class FilterSystem(str, Enum):
    """Filtration technology on the equipment pad."""
    CARTRIDGE = "cartridge"
    SAND = "sand"
    DIATOMACEOUS_EARTH = "diatomaceous-earth"

    @property
    def label(self) -> str:
        return _SYSTEM_LABELS[self]


class ConnectorStyle(str, Enum):
    """End-cap style of a cartridge. ANY is only valid as a wizard answer."""
    OPEN_CENTER = "open-center"
    CLOSED_CENTER = "closed-center"
    MOLDED_HANDLE = "molded-handle"
    THREADED = "threaded"
    SLIP_FIT = "slip-fit"
    ANY = "any"

    @property
    def label(self) -> str:
        return " ".join(part.capitalize() for part in self.value.split("-"))


_ENVIRONMENT_LABELS = {
    Environment.IN_GROUND: "in-ground pool",
    Environment.ABOVE_GROUND: "above-ground pool",
    Environment.SPA: "spa & hot tub",
}

_SYSTEM_LABELS = {
    FilterSystem.CARTRIDGE: "CARTRIDGE",
    FilterSystem.SAND: "SAND",
    FilterSystem.DIATOMACEOUS_EARTH: "DE",
}


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so registry windows compare consistently."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ============================================================
# Catalog
# ============================================================

class FilterDimensions(_Frozen):
    diameter: Optional[float] = Field(default=None, gt=0, description="Diameter in inches")
    length: Optional[float] = Field(default=None, gt=0, description="Length in inches")
    top_style: Optional[ConnectorStyle] = None
    bottom_style: Optional[ConnectorStyle] = None
    connector_notes: str = ""

    @field_validator("top_style", "bottom_style")
    @classmethod
    def _concrete_style(cls, value: Optional[ConnectorStyle]) -> Optional[ConnectorStyle]:
        if value is ConnectorStyle.ANY:
            raise ValueError("catalog connector style must be concrete, not 'any'")
        return value


class VolumeRange(_Frozen):
    min_gallons: float = Field(ge=0)
    max_gallons: float = Field(ge=0)

    @model_validator(mode="after")
    def _ordered(self) -> "VolumeRange":
        if self.min_gallons > self.max_gallons:
            raise ValueError(
                f"min_gallons ({self.min_gallons}) exceeds max_gallons ({self.max_gallons})"
            )
        return self

    def contains(self, gallons: float) -> bool:
        return self.min_gallons <= gallons <= self.max_gallons


class CompatibilityEntry(_Frozen):
    brand: str
    sku: str
    notes: Optional[str] = None


class CatalogItem(_Frozen):
    """One filter specification from the static catalog."""
    id: str = Field(min_length=1)
    name: str
    environment: Environment
    system: FilterSystem
    brand: str
    series: Optional[str] = None
    dimensions: FilterDimensions = Field(default_factory=FilterDimensions)
    flow_rate_gpm: float = Field(ge=0)
    surface_area_sq_ft: Optional[float] = Field(default=None, ge=0)
    recommended_volume: VolumeRange
    compatibility: Tuple[CompatibilityEntry, ...] = ()
    promo_tags: Tuple[str, ...] = ()
    maintenance_tips: Tuple[str, ...] = ()
    features: Tuple[str, ...] = ()

    # Commerce
    price: float = Field(ge=0)
    original_price: Optional[float] = Field(default=None, ge=0)
    badges: Tuple[str, ...] = ()
    product_url: str = ""

    @field_validator("promo_tags")
    @classmethod
    def _unique_tags(cls, tags: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(tags))


# ============================================================
# Wizard input
# ============================================================

class ConstraintSet(_Frozen):
    """
    Answers collected by the wizard so far.

    Every field is optional; None means the step has not been answered yet.
    Numeric answers must be finite and positive.
    """
    environment: Optional[Environment] = None
    system: Optional[FilterSystem] = None
    brand: Optional[str] = None
    series: Optional[str] = None
    diameter: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    length: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    top_style: Optional[ConnectorStyle] = None
    bottom_style: Optional[ConnectorStyle] = None
    pool_volume: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    desired_turnover_hours: Optional[float] = Field(default=8.0, gt=0, allow_inf_nan=False)

    @field_validator("brand", "series", mode="before")
    @classmethod
    def _blank_is_unset(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    def with_changes(self, **changes) -> "ConstraintSet":
        """Return a new, validated constraint set with the given answers applied."""
        data = self.model_dump()
        data.update(changes)
        return ConstraintSet.model_validate(data)


# ============================================================
# Promotions
# ============================================================

class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    FREE_SHIPPING = "free_shipping"


class PromoCode(_Frozen):
    """A storefront promo code as held by the promo-code registry."""
    code: str = Field(min_length=1)
    description: str = ""
    discount_type: DiscountType = DiscountType.PERCENTAGE
    discount_value: float = Field(default=0, ge=0)
    start_date: datetime
    end_date: datetime
    active: bool = True

    @field_validator("start_date", "end_date")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    def is_active(self, as_of: datetime) -> bool:
        """True when the code is switched on and ``as_of`` falls inside its window."""
        as_of = as_utc(as_of)
        return self.active and self.start_date <= as_of <= self.end_date


class SeasonalPromotion(_Frozen):
    tag: str
    title: str
    months: str
    description: str
    recommended_promo_codes: Tuple[str, ...] = ()


class SeasonalPromotionView(_Frozen):
    """A seasonal promotion with the subset of its codes that are live right now."""
    tag: str
    title: str
    months: str
    description: str
    promos: Tuple[PromoCode, ...] = ()


# ============================================================
# Engine output
# ============================================================

class MatchResult(_Frozen):
    product_id: str
    score: int = Field(ge=0)
    reasoning: Tuple[str, ...] = ()


class WizardMatch(_Frozen):
    result: MatchResult
    item: CatalogItem
    promotions: Tuple[SeasonalPromotionView, ...] = ()


class WizardResult(_Frozen):
    inputs: ConstraintSet
    matches: Tuple[WizardMatch, ...] = ()
    calculated_flow_rate: Optional[float] = None
    maintenance_reminder: Optional[str] = None


class WizardOptions(_Frozen):
    """Choices offered at each wizard step, narrowed by the answers before it."""
    environments: Tuple[Environment, ...] = ()
    systems: Tuple[FilterSystem, ...] = ()
    brands: Tuple[str, ...] = ()
    series: Tuple[str, ...] = ()
    diameters: Tuple[float, ...] = ()
    lengths: Tuple[float, ...] = ()
    top_styles: Tuple[ConnectorStyle, ...] = ()
    bottom_styles: Tuple[ConnectorStyle, ...] = ()
