"""
Martis Data

Reference data and loaders for the freight tariff table and configuration.

Structure:
    - reference/: Static reference data (tariff CSV, scales, gross-up, bands)
"""

import polars as pl
from pathlib import Path

from .reference.scales import CENTS_PER_UNIT, GRAMS_PER_KG, AD_VALOREM_SCALE, PERCENT_SCALE
from .reference.gross_up import ICMS_RATE, ICMS_DIVISOR, DEFAULT_DIVISOR, GROSSED_UP
from .reference.weight_bands import WeightBand, WEIGHT_BANDS, HEAVY_THRESHOLD_G
from .reference.tariff_schema import (
    ROUTE_COLS,
    WEIGHT_COLS,
    FEE_COLS,
    NUMERIC_COLS,
    TARIFF_COLS,
    TOLL_FALLBACK,
)


REFERENCE_DIR = Path(__file__).parent / "reference"


def load_tariffs(path: str | Path | None = None) -> pl.DataFrame:
    """
    Load the tariff table, ready for joining.

    Every column is read as text and cast by prepare_tariffs, so a bad
    value fails loudly instead of being inferred as float.

    Args:
        path: Tariff CSV (defaults to reference/tariffs.csv)

    Returns:
        DataFrame with TARIFF_COLS, one row per route
    """
    if path is None:
        path = REFERENCE_DIR / "tariffs.csv"

    return prepare_tariffs(pl.read_csv(path, infer_schema_length=0))


def prepare_tariffs(df: pl.DataFrame) -> pl.DataFrame:
    """
    Normalise and validate a tariff table from any source.

    - Fills toll columns from the hazardous floors when they are absent
    - Strips route labels and casts money/percent columns to Int64
      (values that are not whole numbers become nulls and fail validation)
    - Drops columns that are not part of the tariff layout

    Raises:
        ValueError: If required columns are missing or data is invalid
    """
    missing = [c for c in TARIFF_COLS if c not in df.columns and c not in TOLL_FALLBACK]
    if missing:
        raise ValueError(f"Tariff table is missing columns: {missing}")

    df = df.with_columns([
        pl.col(source).alias(target)
        for target, source in TOLL_FALLBACK.items()
        if target not in df.columns
    ])

    df = df.select(TARIFF_COLS).with_columns(
        [pl.col(c).cast(pl.Utf8).str.strip_chars() for c in ROUTE_COLS] +
        [pl.col(c).cast(pl.Int64, strict=False) for c in NUMERIC_COLS]
    )

    validate_tariffs(df)
    return df


def validate_tariffs(df: pl.DataFrame) -> None:
    """
    Validate tariff table integrity.

    Checks:
        - No missing values
        - No empty route labels
        - No negative money or percentage values
        - Route key (4 columns) is unique
        - tde1_min <= tde1_max

    Raises:
        ValueError: Listing every problem found
    """
    errors = []

    for col in TARIFF_COLS:
        nulls = df[col].null_count()
        if nulls:
            errors.append(f"{col}: {nulls} missing or non-integer value(s)")

    for col in ROUTE_COLS:
        empty = (df[col] == "").sum()
        if empty:
            errors.append(f"{col}: {empty} empty label(s)")

    for col in NUMERIC_COLS:
        negative = (df[col] < 0).sum()
        if negative:
            errors.append(f"{col}: {negative} negative value(s)")

    duplicated = df.select(ROUTE_COLS).is_duplicated().sum()
    if duplicated:
        errors.append(f"{duplicated} row(s) share a route with another row")

    inverted = (df["tde1_min"] > df["tde1_max"]).sum()
    if inverted:
        errors.append(f"tde1_min > tde1_max on {inverted} row(s)")

    if errors:
        raise ValueError("Tariff table errors:\n  " + "\n  ".join(errors))


__all__ = [
    # Loaders
    "load_tariffs",
    "prepare_tariffs",
    "validate_tariffs",
    "REFERENCE_DIR",
    # Scales
    "CENTS_PER_UNIT",
    "GRAMS_PER_KG",
    "AD_VALOREM_SCALE",
    "PERCENT_SCALE",
    # Gross-up config
    "ICMS_RATE",
    "ICMS_DIVISOR",
    "DEFAULT_DIVISOR",
    "GROSSED_UP",
    # Weight bands
    "WeightBand",
    "WEIGHT_BANDS",
    "HEAVY_THRESHOLD_G",
    # Tariff layout
    "ROUTE_COLS",
    "WEIGHT_COLS",
    "FEE_COLS",
    "NUMERIC_COLS",
    "TARIFF_COLS",
    "TOLL_FALLBACK",
]
