"""
Pool Filter Wizard - compatibility matching for pool & spa filters

Ranks a static catalog of filter specifications against the shopper's
answers with:
- Hard filters on environment, system, brand and series
- Weighted factor scoring with +/- 0.25" dimension tolerance
- Required flow rate from pool volume and turnover time
- Seasonal promotion overlay with live promo codes
"""

from poolwizard.core.assembler import WizardResultAssembler, assemble
from poolwizard.core.config import WizardConfig, get_config, set_config
from poolwizard.core.models import ConstraintSet, WizardResult
from poolwizard.data.catalog_store import CatalogRepository

__all__ = [
    'WizardResultAssembler',
    'assemble',
    'WizardConfig',
    'get_config',
    'set_config',
    'ConstraintSet',
    'WizardResult',
    'CatalogRepository',
]

__version__ = '0.1.0'
