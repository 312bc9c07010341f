"""
Read-only catalog of pool & spa filter specifications.

The catalog and the seasonal promotion calendar are loaded once from a static
JSON document and handed to the engine as an immutable repository. Nothing in
the matching path mutates it, so a single instance can serve concurrent
requests.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, TypeVar

from pydantic import ValidationError

from poolwizard.core.config import DEFAULT_CATALOG_PATH
from poolwizard.core.models import (
    CatalogItem,
    ConstraintSet,
    SeasonalPromotion,
    WizardOptions,
)
from poolwizard.utils.logger import get_logger

logger = get_logger("data.catalog_store")

T = TypeVar("T")


class CatalogLoadError(RuntimeError):
    """Raised when the catalog document is missing or malformed."""


def _unique(values: Iterable[T]) -> List[T]:
    """De-duplicate while keeping first-seen order, skipping None."""
    return [value for value in dict.fromkeys(values) if value is not None]


@dataclass(frozen=True)
class CatalogRepository:
    """
    Immutable catalog plus seasonal promotion calendar.

    Args:
        items: Catalog items in canonical order (ties in ranking keep this order).
        seasonal_promotions: Promotion calendar matched against item promo tags.
    """

    items: Tuple[CatalogItem, ...] = ()
    seasonal_promotions: Tuple[SeasonalPromotion, ...] = ()
    _by_id: Dict[str, CatalogItem] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(self, "seasonal_promotions", tuple(self.seasonal_promotions))

        index: Dict[str, CatalogItem] = {}
        for item in self.items:
            if item.id in index:
                raise CatalogLoadError(f"Duplicate catalog product id: {item.id}")
            index[item.id] = item
        object.__setattr__(self, "_by_id", index)

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #

    @classmethod
    def from_records(
        cls,
        items: Iterable[Dict[str, Any]],
        seasonal_promotions: Iterable[Dict[str, Any]] = (),
    ) -> "CatalogRepository":
        """Build a repository from plain dict records (JSON-shaped)."""
        try:
            parsed_items = [CatalogItem.model_validate(record) for record in items]
            parsed_promotions = [
                SeasonalPromotion.model_validate(record) for record in seasonal_promotions
            ]
        except ValidationError as exc:
            raise CatalogLoadError(f"Invalid catalog record: {exc}") from exc
        return cls(items=tuple(parsed_items), seasonal_promotions=tuple(parsed_promotions))

    @classmethod
    def from_json(cls, path: Optional[Path] = None) -> "CatalogRepository":
        """Load the catalog document (``catalog`` and ``seasonal_promotions`` keys)."""
        path = Path(path) if path else DEFAULT_CATALOG_PATH
        if not path.exists():
            raise CatalogLoadError(f"Catalog file not found at {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as exc:
            raise CatalogLoadError(f"Catalog file {path} is not valid JSON: {exc}") from exc

        repository = cls.from_records(
            document.get("catalog", []),
            document.get("seasonal_promotions", []),
        )
        logger.info(
            "Loaded %d catalog items and %d seasonal promotions from %s",
            len(repository.items),
            len(repository.seasonal_promotions),
            path,
        )
        return repository

    # ------------------------------------------------------------------ #
    # Public interface
    # ------------------------------------------------------------------ #

    def __iter__(self) -> Iterator[CatalogItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def get(self, product_id: str) -> Optional[CatalogItem]:
        """Fetch a single item by product id."""
        return self._by_id.get(product_id)

    def options(self, constraints: Optional[ConstraintSet] = None) -> WizardOptions:
        """
        Choices for each wizard step given the answers so far.

        Systems narrow by environment; brands by environment and system;
        series and dimensions by environment, system and brand; connector
        styles by environment and system.
        """
        c = constraints or ConstraintSet()

        def narrowed(*fields: str) -> List[CatalogItem]:
            return [
                item for item in self.items
                if all(
                    getattr(c, name) is None or getattr(item, name) == getattr(c, name)
                    for name in fields
                )
            ]

        by_env_system = narrowed("environment", "system")
        by_env_system_brand = narrowed("environment", "system", "brand")

        return WizardOptions(
            environments=tuple(sorted(_unique(i.environment for i in self.items), key=lambda e: e.value)),
            systems=tuple(sorted(_unique(i.system for i in narrowed("environment")), key=lambda s: s.value)),
            brands=tuple(sorted(_unique(i.brand for i in by_env_system))),
            series=tuple(sorted(_unique(i.series for i in by_env_system_brand))),
            diameters=tuple(sorted(_unique(i.dimensions.diameter for i in by_env_system_brand))),
            lengths=tuple(sorted(_unique(i.dimensions.length for i in by_env_system_brand))),
            top_styles=tuple(_unique(i.dimensions.top_style for i in by_env_system)),
            bottom_styles=tuple(_unique(i.dimensions.bottom_style for i in by_env_system)),
        )


__all__ = ["CatalogRepository", "CatalogLoadError"]
