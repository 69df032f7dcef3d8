"""
rates.py - Static Freight Rate Table

Rates are THB per kg and THB per CBM, China to Thailand. The table is
read-only and checked for completeness once, at import time.
"""

import itertools
import logging
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from exceptions import RateTableIncompleteError
from models import CustomerTier, ProductCategory, RateEntry, TransportMode

logger = logging.getLogger(__name__)

RateKey = Tuple[CustomerTier, TransportMode, ProductCategory]

_S, _D, _T = CustomerTier.SILVER, CustomerTier.DIAMOND, CustomerTier.STAR
_LAND, _SEA = TransportMode.LAND, TransportMode.SEA
_GEN, _T12, _SPC = ProductCategory.GENERAL, ProductCategory.TYPE_1_2, ProductCategory.SPECIAL

RATE_TABLE: Mapping[RateKey, RateEntry] = MappingProxyType({
    # Land (truck)
    (_S, _LAND, _GEN): RateEntry(per_kg=50, per_cbm=7500),
    (_S, _LAND, _T12): RateEntry(per_kg=60, per_cbm=8500),
    (_S, _LAND, _SPC): RateEntry(per_kg=120, per_cbm=12000),
    (_D, _LAND, _GEN): RateEntry(per_kg=45, per_cbm=7300),
    (_D, _LAND, _T12): RateEntry(per_kg=55, per_cbm=8300),
    (_D, _LAND, _SPC): RateEntry(per_kg=110, per_cbm=11000),
    (_T, _LAND, _GEN): RateEntry(per_kg=40, per_cbm=6800),
    (_T, _LAND, _T12): RateEntry(per_kg=50, per_cbm=7800),
    (_T, _LAND, _SPC): RateEntry(per_kg=100, per_cbm=10000),
    # Sea
    (_S, _SEA, _GEN): RateEntry(per_kg=45, per_cbm=5400),
    (_S, _SEA, _T12): RateEntry(per_kg=50, per_cbm=6900),
    (_S, _SEA, _SPC): RateEntry(per_kg=120, per_cbm=12000),
    (_D, _SEA, _GEN): RateEntry(per_kg=40, per_cbm=4900),
    (_D, _SEA, _T12): RateEntry(per_kg=50, per_cbm=6500),
    (_D, _SEA, _SPC): RateEntry(per_kg=110, per_cbm=11000),
    (_T, _SEA, _GEN): RateEntry(per_kg=35, per_cbm=4500),
    (_T, _SEA, _T12): RateEntry(per_kg=45, per_cbm=6300),
    (_T, _SEA, _SPC): RateEntry(per_kg=100, per_cbm=10000),
})


def check_completeness(table: Mapping[RateKey, RateEntry]) -> None:
    """
    Verify every (tier, mode, category) combination has an entry

    Raises:
        RateTableIncompleteError: if any combination is missing
    """
    missing = [
        (tier.value, mode.value, category.value)
        for tier, mode, category in itertools.product(CustomerTier, TransportMode, ProductCategory)
        if (tier, mode, category) not in table
    ]
    if missing:
        logger.error(f"Rate table incomplete, missing: {missing}")
        raise RateTableIncompleteError(missing)
    logger.debug(f"Rate table complete: {len(table)} entries")


check_completeness(RATE_TABLE)


def lookup(tier: CustomerTier, mode: TransportMode, category: ProductCategory) -> RateEntry:
    """
    Get the rate entry for a tier / transport mode / product category

    Arguments must already be enum members; the validator guarantees this.
    """
    return RATE_TABLE[(tier, mode, category)]


def rates_for(tier: CustomerTier, mode: TransportMode) -> Dict[ProductCategory, RateEntry]:
    """All category rates for one tier and transport mode"""
    return {category: RATE_TABLE[(tier, mode, category)] for category in ProductCategory}
