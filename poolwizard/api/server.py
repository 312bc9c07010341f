"""
FastAPI server for the pool filter wizard.

Thin HTTP adapter over the matching engine for the storefront UI.

Usage:
    python -m poolwizard.api.server
    # or
    uvicorn poolwizard.api.server:app --reload --port 8000
"""
import os
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from dotenv import load_dotenv
load_dotenv()

from poolwizard import __version__
from poolwizard.api.models import (
    HealthResponse,
    PoolVolumeRequest,
    PoolVolumeResponse,
    TurnoverGuidelineResponse,
    TurnoverGuidelinesResponse,
)
from poolwizard.core.assembler import WizardResultAssembler
from poolwizard.core.config import get_config
from poolwizard.core.models import CatalogItem, ConstraintSet, WizardOptions, WizardResult
from poolwizard.data.catalog_store import CatalogRepository
from poolwizard.data.promo_registry import (
    InMemoryPromoCodeRegistry,
    PromoCodeRegistry,
    PromoRegistryError,
    SqlitePromoCodeRegistry,
)
from poolwizard.matching.flow_rate import (
    TURNOVER_GUIDELINES,
    compute_flow_rate,
    estimate_pool_volume,
)
from poolwizard.utils.logger import get_logger

logger = get_logger("api.server")

app = FastAPI(
    title="Pool Filter Wizard API",
    description="Compatibility matching for pool & spa filters",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Loaded once and shared by every request (read-only)
_repository: Optional[CatalogRepository] = None
_registry: Optional[PromoCodeRegistry] = None


def get_repository() -> CatalogRepository:
    """Catalog repository, loaded from the configured JSON document on first use."""
    global _repository
    if _repository is None:
        _repository = CatalogRepository.from_json(Path(get_config().catalog_path))
    return _repository


def get_registry() -> Optional[PromoCodeRegistry]:
    """
    Promo registry: SQLite when ``promo_db`` is configured, bundled seed codes otherwise.

    Returns None when the registry cannot be opened; matches are then served
    without promo codes and the next request tries again.
    """
    global _registry
    if _registry is None:
        config = get_config()
        try:
            if config.promo_db:
                _registry = SqlitePromoCodeRegistry(db_path=Path(config.promo_db))
            else:
                _registry = InMemoryPromoCodeRegistry.from_json()
        except (FileNotFoundError, PromoRegistryError) as e:
            logger.warning(f"Promo registry unavailable, serving matches without codes: {e}")
            return None
    return _registry


def get_assembler(
    repository: CatalogRepository = Depends(get_repository),
    registry: Optional[PromoCodeRegistry] = Depends(get_registry),
) -> WizardResultAssembler:
    return WizardResultAssembler(repository, registry=registry, config=get_config())


@app.on_event("startup")
async def startup_event():
    """Load the catalog at startup so the first wizard request is fast."""
    if os.environ.get("POOLWIZARD_SKIP_PRELOAD", "").lower() in ("1", "true", "yes"):
        logger.info("Preloading SKIPPED (POOLWIZARD_SKIP_PRELOAD=1)")
        return
    repository = get_repository()
    logger.info(f"Catalog preloaded: {len(repository)} items")


# API Endpoints

@app.get("/", response_model=HealthResponse)
async def root(repository: CatalogRepository = Depends(get_repository)):
    """Health check endpoint."""
    config = get_config()
    return HealthResponse(
        status="online",
        service="Pool Filter Wizard API",
        version=__version__,
        catalog_items=len(repository),
        config={
            "dimension_tolerance_inches": config.dimension_tolerance_inches,
            "max_results": config.max_results,
            "default_turnover_hours": config.default_turnover_hours,
        },
    )


@app.post("/wizard/matches", response_model=WizardResult)
async def wizard_matches(
    constraints: ConstraintSet,
    as_of: Optional[datetime] = None,
    assembler: WizardResultAssembler = Depends(get_assembler),
):
    """
    Rank the catalog for the wizard's answers.

    An empty ``matches`` list is a normal outcome: the UI should suggest
    relaxing brand, series or dimensions.
    """
    try:
        return assembler.assemble(constraints, as_of=as_of)
    except Exception as e:
        logger.error(f"Error in /wizard/matches: {e}\n{traceback.format_exc()}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/wizard/options", response_model=WizardOptions)
async def wizard_options(
    constraints: ConstraintSet,
    repository: CatalogRepository = Depends(get_repository),
):
    """Choices for each wizard step, narrowed by the answers given so far."""
    return repository.options(constraints)


@app.get("/wizard/turnover-guidelines", response_model=TurnoverGuidelinesResponse)
async def turnover_guidelines():
    """Typical turnover times by use."""
    return TurnoverGuidelinesResponse(
        guidelines=[
            TurnoverGuidelineResponse(label=g.label, hours=g.hours)
            for g in TURNOVER_GUIDELINES
        ]
    )


@app.post("/wizard/pool-volume", response_model=PoolVolumeResponse)
async def pool_volume(request: PoolVolumeRequest):
    """Estimate gallons from length x width x average depth."""
    gallons = estimate_pool_volume(
        request.length_ft,
        request.width_ft,
        request.average_depth_ft,
        environment=request.environment,
    )
    return PoolVolumeResponse(
        gallons=gallons,
        calculated_flow_rate=compute_flow_rate(gallons, request.turnover_hours),
    )


@app.get("/catalog/{product_id}", response_model=CatalogItem)
async def get_catalog_item(
    product_id: str,
    repository: CatalogRepository = Depends(get_repository),
):
    """Fetch a single catalog item."""
    item = repository.get(product_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return item


if __name__ == "__main__":
    import uvicorn

    print("=" * 60)
    print("Pool Filter Wizard API Server")
    print("=" * 60)
    print("API Documentation: http://localhost:8000/docs")
    print("")
    print("Environment variables:")
    print("  POOLWIZARD_SKIP_PRELOAD=1   - Skip catalog preload at startup")
    print("  POOLWIZARD_LOG_LEVEL=DEBUG  - Log per-item scores (LOG_LEVEL also works)")
    print("=" * 60)

    uvicorn.run(app, host="0.0.0.0", port=8000)
