"""
Reference Data

Static reference data and configuration for the tariff calculator.
"""

from .scales import CENTS_PER_UNIT, GRAMS_PER_KG, AD_VALOREM_SCALE, PERCENT_SCALE
from .gross_up import ICMS_RATE, ICMS_DIVISOR, DEFAULT_DIVISOR, GROSSED_UP
from .weight_bands import WeightBand, WEIGHT_BANDS, HEAVY_THRESHOLD_G
from .tariff_schema import (
    ROUTE_COLS,
    WEIGHT_COLS,
    FEE_COLS,
    NUMERIC_COLS,
    TARIFF_COLS,
    TOLL_FALLBACK,
)

__all__ = [
    "CENTS_PER_UNIT",
    "GRAMS_PER_KG",
    "AD_VALOREM_SCALE",
    "PERCENT_SCALE",
    "ICMS_RATE",
    "ICMS_DIVISOR",
    "DEFAULT_DIVISOR",
    "GROSSED_UP",
    "WeightBand",
    "WEIGHT_BANDS",
    "HEAVY_THRESHOLD_G",
    "ROUTE_COLS",
    "WEIGHT_COLS",
    "FEE_COLS",
    "NUMERIC_COLS",
    "TARIFF_COLS",
    "TOLL_FALLBACK",
]
