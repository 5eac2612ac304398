"""
Surcharges Package

Exports all surcharge classes in processing order.

Every surcharge reads the tariff row joined onto the shipment. The
percentage surcharges (HAZARDOUS, TDE1, TDE2) also read base_charge_milli,
so the base charge must be resolved before any surcharge is applied.
"""

from .base import Surcharge
from .ad_valorem import ADV
from .dispatch import DSP
from .toll import TOLL
from .hazardous import HAZ
from .difficult_delivery import TDE1, TDE2


# All surcharges, in breakdown order
ALL = [ADV, DSP, TOLL, HAZ, TDE1, TDE2]

# Request flags that switch optional surcharges on
FLAG_FIELDS = sorted({s.flag_field for s in ALL if s.flag_field is not None})


# =============================================================================
# HELPERS
# =============================================================================

def get_by_flag(flag_field: str) -> list[type[Surcharge]]:
    """Get the surcharges switched on by a request flag."""
    return [s for s in ALL if s.flag_field == flag_field]


# =============================================================================
# VALIDATION
# =============================================================================

def validate_surcharges() -> None:
    """
    Validate surcharge configuration integrity.

    Raises ValueError if any configuration issues are found.
    Called at import time to fail fast on configuration errors.
    """
    errors = []

    names = [s.name for s in ALL]
    for name in {n for n in names if names.count(n) > 1}:
        errors.append(f"{name}: defined more than once in ALL")

    for s in ALL:
        if not isinstance(s.denominator, int) or s.denominator <= 0:
            errors.append(f"{s.name}: denominator must be a positive integer")

        if s.name.lower() == "weight":
            errors.append(f"{s.name}: 'weight' is reserved for the base charge")

    if errors:
        raise ValueError("Surcharge configuration errors:\n  " + "\n  ".join(errors))


# Run validation at import time
validate_surcharges()

__all__ = [
    # Base
    "Surcharge",
    # Surcharge classes
    "ADV",
    "DSP",
    "TOLL",
    "HAZ",
    "TDE1",
    "TDE2",
    # Lists
    "ALL",
    "FLAG_FIELDS",
    # Helpers
    "get_by_flag",
    "validate_surcharges",
]
