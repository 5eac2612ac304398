"""
Column Schema Definitions

Documents all columns at each pipeline stage and provides validation utilities.
"""

import polars as pl

from .data import ROUTE_COLS, NUMERIC_COLS
from .request import COMPONENTS, InvalidInput
from .surcharges import ALL as ALL_SURCHARGES, FLAG_FIELDS


# =============================================================================
# REQUIRED INPUT COLUMNS (must be present from any source)
# =============================================================================

REQUIRED_INPUT_COLS = ROUTE_COLS + [
    "weight_kg",            # Shipment weight (kilograms)
    "merchandise_value",    # Declared value (major units)
]

# =============================================================================
# OPTIONAL INPUT COLUMNS (defaulted when absent)
# =============================================================================

FLAG_COLS = FLAG_FIELDS
# difficult_delivery, hazardous (default False)


# =============================================================================
# SUPPLEMENT COLUMNS (added by supplement_shipments)
# =============================================================================

QUANTISED_COLS = [
    "weight_g",                 # Weight in whole grams (half-up)
    "merchandise_value_cents",  # Value in whole cents (half-up)
]

SUPPLEMENT_COLS = QUANTISED_COLS + NUMERIC_COLS


# =============================================================================
# CALCULATE COLUMNS (added by calculate)
# =============================================================================

BASE_CHARGE_COLS = [
    "weight_band",          # Tariff column that priced the weight
    "base_charge_milli",    # Base charge in milli-cents (exact)
]

SURCHARGE_FLAG_COLS = [f"surcharge_{s.name.lower()}" for s in ALL_SURCHARGES]
# surcharge_ad_valorem, surcharge_dispatch, surcharge_toll,
# surcharge_hazardous, surcharge_tde1, surcharge_tde2

CENTS_COLS = [f"{c}_cents" for c in COMPONENTS] + ["total_cents"]

COST_COLS = [f"cost_{c}" for c in COMPONENTS] + ["cost_total"]
# Major units (float) for display and CSV export; exact values are in CENTS_COLS

# Breakdown order must follow the surcharge processing order
if ["weight"] + [s.name.lower() for s in ALL_SURCHARGES] != COMPONENTS:
    raise ValueError("Breakdown components do not match the surcharge list")


# =============================================================================
# METADATA COLUMNS
# =============================================================================

METADATA_COLS = [
    "calculator_version",   # Version stamp from martis/version.py
]


# =============================================================================
# COLUMN SETS
# =============================================================================

AFTER_SUPPLEMENT = REQUIRED_INPUT_COLS + FLAG_COLS + SUPPLEMENT_COLS

AFTER_CALCULATE = (
    AFTER_SUPPLEMENT +
    BASE_CHARGE_COLS +
    SURCHARGE_FLAG_COLS +
    CENTS_COLS +
    COST_COLS +
    METADATA_COLS
)


# =============================================================================
# VALIDATION
# =============================================================================

def validate_input_columns(df: pl.DataFrame) -> None:
    """
    Check that all required input columns are present.

    Raises:
        InvalidInput: If any required column is missing
    """
    missing = [c for c in REQUIRED_INPUT_COLS if c not in df.columns]
    if missing:
        raise InvalidInput(f"Missing required input columns: {missing}")


def validate_shipments(df: pl.DataFrame) -> None:
    """
    Check quantised shipment values before pricing.

    Expects QUANTISED_COLS to be present (see supplement_shipments).

    Raises:
        InvalidInput: Listing every problem found (counts of bad rows)
    """
    errors = []

    for col in ROUTE_COLS:
        bad = df.select(
            (pl.col(col).is_null() | (pl.col(col).str.strip_chars() == "")).sum()
        ).item()
        if bad:
            errors.append(f"{col}: {bad} shipment(s) with no value")

    bad_weight = df.select(
        (pl.col("weight_g").is_null() | (pl.col("weight_g") <= 0)).sum()
    ).item()
    if bad_weight:
        errors.append(f"weight_kg: {bad_weight} shipment(s) not positive (min 1 gram)")

    bad_value = df.select(
        (pl.col("merchandise_value_cents").is_null() | (pl.col("merchandise_value_cents") < 0)).sum()
    ).item()
    if bad_value:
        errors.append(f"merchandise_value: {bad_value} shipment(s) negative or missing")

    for col in FLAG_COLS:
        nulls = df[col].null_count()
        if nulls:
            errors.append(f"{col}: {nulls} shipment(s) with no value")

    if errors:
        raise InvalidInput("Invalid shipments:\n  " + "\n  ".join(errors))


__all__ = [
    "REQUIRED_INPUT_COLS",
    "FLAG_COLS",
    "QUANTISED_COLS",
    "SUPPLEMENT_COLS",
    "BASE_CHARGE_COLS",
    "SURCHARGE_FLAG_COLS",
    "CENTS_COLS",
    "COST_COLS",
    "METADATA_COLS",
    "AFTER_SUPPLEMENT",
    "AFTER_CALCULATE",
    "validate_input_columns",
    "validate_shipments",
]