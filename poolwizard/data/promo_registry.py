"""
Promo-code registry.

The wizard only needs lookup-by-code: a seasonal promotion recommends a few
codes and the overlay shows the ones that are live. Two backends:

- InMemoryPromoCodeRegistry: bundled seed codes (or any iterable of codes)
- SqlitePromoCodeRegistry: the storefront's ``promo_codes`` table

Codes compare case-insensitively. A code is live when its ``active`` flag is
set and the lookup time falls inside its start/end window.
"""
from __future__ import annotations

import json
import sqlite3
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError

from poolwizard.core.models import PromoCode, as_utc
from poolwizard.utils.logger import get_logger

logger = get_logger("data.promo_registry")

DEFAULT_SEED_PATH = Path(__file__).resolve().parent / "promo_codes.json"

PROMO_CODES_SCHEMA = """
    CREATE TABLE IF NOT EXISTS promo_codes (
      id TEXT PRIMARY KEY,
      code TEXT UNIQUE NOT NULL COLLATE NOCASE,
      description TEXT NOT NULL,
      discount_type TEXT NOT NULL CHECK(discount_type IN ('percentage', 'fixed', 'free_shipping')),
      discount_value REAL NOT NULL,
      start_date INTEGER NOT NULL,
      end_date INTEGER NOT NULL,
      active INTEGER DEFAULT 1
    );
    CREATE INDEX IF NOT EXISTS idx_promo_code ON promo_codes(code);
"""


class PromoRegistryError(RuntimeError):
    """Raised when the promo-code registry cannot be read."""


def _to_epoch_ms(value: datetime) -> int:
    return int(as_utc(value).timestamp() * 1000)


def _from_epoch_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


class PromoCodeRegistry(ABC):
    """Lookup-only view of the storefront's promo codes."""

    @abstractmethod
    def get(self, code: str) -> Optional[PromoCode]:
        """Fetch a code regardless of whether it is live, or None if unknown."""

    def snapshot(self, codes: Iterable[str], as_of: Optional[datetime] = None) -> Dict[str, PromoCode]:
        """
        Resolve the live codes among ``codes`` at a single point in time.

        Args:
            codes: Codes to look up, as written in the promotion calendar
            as_of: Lookup time (now, UTC, when omitted)

        Returns:
            Mapping from each requested code string to its PromoCode, for live
            codes only. Unknown and inactive codes are left out.
        """
        as_of = as_of or datetime.now(timezone.utc)
        live: Dict[str, PromoCode] = {}
        for code in dict.fromkeys(codes):
            promo = self.get(code)
            if promo is not None and promo.is_active(as_of):
                live[code] = promo
        return live


class InMemoryPromoCodeRegistry(PromoCodeRegistry):
    """Registry over a fixed set of codes."""

    def __init__(self, codes: Iterable[PromoCode] = ()):
        self._codes: Dict[str, PromoCode] = {promo.code.casefold(): promo for promo in codes}

    @classmethod
    def from_json(cls, path: Optional[Path] = None) -> "InMemoryPromoCodeRegistry":
        """Load seed codes from a JSON list of promo code records."""
        path = Path(path) if path else DEFAULT_SEED_PATH
        try:
            with open(path, "r", encoding="utf-8") as f:
                records = json.load(f)
            codes = [PromoCode.model_validate(record) for record in records]
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            raise PromoRegistryError(f"Failed to load promo codes from {path}: {exc}") from exc

        logger.info("Loaded %d seed promo codes from %s", len(codes), path)
        return cls(codes)

    def get(self, code: str) -> Optional[PromoCode]:
        if not code:
            return None
        return self._codes.get(code.casefold())

    def __len__(self) -> int:
        return len(self._codes)


@dataclass
class SqlitePromoCodeRegistry(PromoCodeRegistry):
    """
    Registry backed by the storefront's SQLite ``promo_codes`` table.

    Dates are stored as epoch milliseconds. The database is opened read-only.

    Args:
        db_path: Location of the SQLite database.
    """

    db_path: Path

    def __post_init__(self) -> None:
        path = Path(self.db_path)
        if not path.exists():
            raise FileNotFoundError(f"Promo code database not found at {path}.")
        self.db_path = path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(f"file:{self.db_path}?mode=ro", uri=True)
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _row_to_promo(row: sqlite3.Row) -> PromoCode:
        return PromoCode(
            code=row["code"],
            description=row["description"],
            discount_type=row["discount_type"],
            discount_value=row["discount_value"],
            start_date=_from_epoch_ms(row["start_date"]),
            end_date=_from_epoch_ms(row["end_date"]),
            active=bool(row["active"]),
        )

    def _parse_rows(self, rows: List[sqlite3.Row]) -> Dict[str, PromoCode]:
        """Convert rows keyed by casefolded code, skipping rows that fail validation."""
        parsed: Dict[str, PromoCode] = {}
        for row in rows:
            try:
                parsed[row["code"].casefold()] = self._row_to_promo(row)
            except (ValidationError, ValueError, OverflowError) as exc:
                logger.warning(f"Skipping malformed promo code row {row['code']!r}: {exc}")
        return parsed

    def _fetch(self, codes: List[str]) -> List[sqlite3.Row]:
        placeholders = ", ".join("LOWER(?)" for _ in codes)
        sql = f"""SELECT code, description, discount_type, discount_value,
            start_date, end_date, active
            FROM promo_codes WHERE LOWER(code) IN ({placeholders})"""
        try:
            conn = self._connect()
            try:
                return conn.execute(sql, codes).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise PromoRegistryError(f"SQLite promo lookup failed: {exc}") from exc

    def get(self, code: str) -> Optional[PromoCode]:
        if not code:
            return None
        return self._parse_rows(self._fetch([code])).get(code.casefold())

    def snapshot(self, codes: Iterable[str], as_of: Optional[datetime] = None) -> Dict[str, PromoCode]:
        """Resolve all requested codes in one query so the result is a single consistent read."""
        requested = [code for code in dict.fromkeys(codes) if code]
        if not requested:
            return {}

        as_of = as_of or datetime.now(timezone.utc)
        found = self._parse_rows(self._fetch(requested))

        live: Dict[str, PromoCode] = {}
        for code in requested:
            promo = found.get(code.casefold())
            if promo is not None and promo.is_active(as_of):
                live[code] = promo
        return live

    @classmethod
    def create(cls, db_path: Path, codes: Iterable[PromoCode] = ()) -> "SqlitePromoCodeRegistry":
        """Create (or extend) a promo code database and return a registry over it."""
        conn = sqlite3.connect(db_path)
        try:
            with conn:
                conn.executescript(PROMO_CODES_SCHEMA)
                conn.executemany(
                    """INSERT OR REPLACE INTO promo_codes
                    (id, code, description, discount_type, discount_value, start_date, end_date, active)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                    [
                        (
                            promo.code.casefold(),
                            promo.code,
                            promo.description,
                            promo.discount_type.value,
                            promo.discount_value,
                            _to_epoch_ms(promo.start_date),
                            _to_epoch_ms(promo.end_date),
                            int(promo.active),
                        )
                        for promo in codes
                    ],
                )
        finally:
            conn.close()
        return cls(db_path=Path(db_path))


__all__ = [
    "PromoCodeRegistry",
    "InMemoryPromoCodeRegistry",
    "SqlitePromoCodeRegistry",
    "PromoRegistryError",
    "PROMO_CODES_SCHEMA",
]
