"""Shared fixtures: a small synthetic catalog and promotion calendar."""

from datetime import datetime, timezone

import pytest

from poolwizard.core.config import WizardConfig
from poolwizard.core.models import CatalogItem, PromoCode, SeasonalPromotion
from poolwizard.data.catalog_store import CatalogRepository
from poolwizard.data.promo_registry import InMemoryPromoCodeRegistry


def make_item(**overrides) -> CatalogItem:
    """Build a catalog item from sensible defaults plus overrides."""
    record = {
        "id": "item",
        "name": "Test Cartridge",
        "environment": "in-ground",
        "system": "cartridge",
        "brand": "Pentair",
        "series": "Clean & Clear",
        "dimensions": {
            "diameter": 7.0,
            "length": 20.0,
            "top_style": "open-center",
            "bottom_style": "open-center",
        },
        "flow_rate_gpm": 100,
        "recommended_volume": {"min_gallons": 10000, "max_gallons": 30000},
        "price": 99.0,
    }
    record.update(overrides)
    return CatalogItem.model_validate(record)


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def pentair_item():
    return make_item(
        id="pentair-5in",
        dimensions={"diameter": 5.0, "length": 12.0},
        recommended_volume={"min_gallons": 15000, "max_gallons": 25000},
        promo_tags=["summer-peak"],
    )


@pytest.fixture
def catalog(pentair_item):
    return [
        make_item(id="hayward-7in", brand="Hayward", series="Star-Clear"),
        pentair_item,
        make_item(id="pentair-8in", dimensions={"diameter": 8.5, "length": 23.5}),
        make_item(
            id="spa-filter",
            environment="spa",
            brand="Waterway",
            series=None,
            dimensions={"diameter": 5.0, "top_style": "molded-handle", "bottom_style": "threaded"},
            recommended_volume={"min_gallons": 200, "max_gallons": 800},
            promo_tags=["spa-season"],
        ),
        make_item(
            id="sand-media",
            system="sand",
            dimensions={},
            recommended_volume={"min_gallons": 15000, "max_gallons": 30000},
        ),
    ]


@pytest.fixture
def calendar():
    return [
        SeasonalPromotion(
            tag="summer-peak",
            title="Peak Season Filter Swap",
            months="June - August",
            description="Keep a spare on hand.",
            recommended_promo_codes=("SUMMER20", "EXPIRED5", "UNKNOWN"),
        ),
        SeasonalPromotion(
            tag="spa-season",
            title="Hot Tub Season",
            months="November - February",
            description="More soaks.",
            recommended_promo_codes=("SPASOAK15",),
        ),
    ]


@pytest.fixture
def promo_codes():
    return [
        PromoCode(
            code="SUMMER20",
            description="20% off",
            discount_type="percentage",
            discount_value=20,
            start_date=datetime(2026, 6, 1, tzinfo=timezone.utc),
            end_date=datetime(2026, 8, 31, tzinfo=timezone.utc),
        ),
        PromoCode(
            code="EXPIRED5",
            description="Old code",
            discount_type="fixed",
            discount_value=5,
            start_date=datetime(2025, 6, 1, tzinfo=timezone.utc),
            end_date=datetime(2025, 8, 31, tzinfo=timezone.utc),
        ),
        PromoCode(
            code="SPASOAK15",
            description="15% off spa filters",
            discount_type="percentage",
            discount_value=15,
            start_date=datetime(2026, 11, 1, tzinfo=timezone.utc),
            end_date=datetime(2027, 2, 28, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def registry(promo_codes):
    return InMemoryPromoCodeRegistry(promo_codes)


@pytest.fixture
def repository(catalog, calendar):
    return CatalogRepository(items=tuple(catalog), seasonal_promotions=tuple(calendar))


@pytest.fixture
def config():
    return WizardConfig()
