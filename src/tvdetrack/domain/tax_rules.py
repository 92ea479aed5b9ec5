"""Portuguese tax rule tables used for estimates.

Rates are fractions here; driver records hold percentages.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from tvdetrack.domain.entities import EntityType, Region

# VAT charged on TVDE income, by region
INCOME_VAT_RATES: Mapping[Region, float] = MappingProxyType(
    {
        Region.CONTINENTAL: 0.06,
        Region.ACORES: 0.04,
        Region.MADEIRA: 0.05,
    }
)

# Standard VAT rate assumed on expenses, by region
EXPENSE_VAT_RATES: Mapping[Region, float] = MappingProxyType(
    {
        Region.CONTINENTAL: 0.23,
        Region.ACORES: 0.18,
        Region.MADEIRA: 0.22,
    }
)

DEFAULT_EXPENSE_REGION = Region.CONTINENTAL

# Share of net income taken as the base for each estimate
IRS_BASE_COEFFICIENT = 0.75
SS_BASE_COEFFICIENT = 0.70

# Entity types whose income entries get per-entry IRS/SS estimates
PER_ENTRY_ESTIMATE_ENTITY_TYPES = frozenset({EntityType.ENI})

for _table in (INCOME_VAT_RATES, EXPENSE_VAT_RATES):
    _missing = set(Region) - set(_table)
    if _missing:
        raise RuntimeError(f"Tax table is missing regions: {sorted(_missing)}")


def income_vat_rate(region: Region) -> float:
    """Return the VAT rate applied to income for a region."""
    return INCOME_VAT_RATES[region]


def expense_vat_rate(region: Optional[Region]) -> float:
    """Return the VAT rate assumed on expenses, defaulting to the mainland."""
    if region is None:
        region = DEFAULT_EXPENSE_REGION
    return EXPENSE_VAT_RATES[region]


def split_gross(gross: float, rate: float) -> tuple[float, float]:
    """Split a VAT-inclusive amount into (net, vat)."""
    net = gross / (1 + rate)
    return net, gross - net


def has_per_entry_estimates(entity_type: EntityType) -> bool:
    return entity_type in PER_ENTRY_ESTIMATE_ENTITY_TYPES


def rate_fraction(percentage: Optional[float]) -> float:
    """Convert a stored percentage (None meaning unset) to a fraction."""
    return (percentage or 0) / 100
