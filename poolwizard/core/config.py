"""
Configuration management for the pool filter wizard.

Loads settings from YAML config file and provides typed access.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import yaml

from dotenv import load_dotenv
load_dotenv()


def _project_root() -> Path:
    """Return project root (parent of poolwizard package)."""
    return Path(__file__).resolve().parent.parent.parent


DEFAULT_CONFIG_PATH = _project_root() / "config" / "default.yaml"
DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "pool_filters.json"


@dataclass
class WizardConfig:
    """Configuration for the matching engine."""

    # Matching parameters
    dimension_tolerance_inches: float = 0.25   # +/- window for diameter and length
    max_results: int = 5                       # Matches kept after ranking
    default_turnover_hours: float = 8.0        # Pre-filled turnover for a fresh wizard

    # Data paths
    catalog_path: str = str(DEFAULT_CATALOG_PATH)
    promo_db: Optional[str] = None             # SQLite promo codes; bundled seed when unset

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "WizardConfig":
        """Load configuration from YAML file."""
        path = config_path or DEFAULT_CONFIG_PATH
        if not path.exists():
            return cls()

        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        matching_config = data.get('matching', {})
        data_config = data.get('data', {})

        catalog_path = data_config.get('catalog_path') or str(DEFAULT_CATALOG_PATH)
        if not Path(catalog_path).is_absolute():
            catalog_path = str(_project_root() / catalog_path)

        promo_db = data_config.get('promo_db')
        if promo_db and not Path(promo_db).is_absolute():
            promo_db = str(_project_root() / promo_db)

        return cls(
            dimension_tolerance_inches=matching_config.get('dimension_tolerance_inches', 0.25),
            max_results=matching_config.get('max_results', 5),
            default_turnover_hours=matching_config.get('default_turnover_hours', 8.0),
            catalog_path=catalog_path,
            promo_db=promo_db,
        )


# Global config instance
_config: Optional[WizardConfig] = None


def get_config() -> WizardConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = WizardConfig.from_yaml()
    return _config


def set_config(config: WizardConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
