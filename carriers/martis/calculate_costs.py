"""
Martis Freight Cost Calculator

DataFrame in, DataFrame out. The input can come from any source (CSV,
order system export, manual creation) as long as it contains the required
columns. The output is the same DataFrame with tariff, charge and total
columns appended.

REQUIRED INPUT COLUMNS
----------------------
    origin_region       - Origin state code (e.g. "MG")
    origin_class        - Origin classification (e.g. "METROPOLITANA")
    dest_region         - Destination state code
    dest_class          - Destination classification
    weight_kg           - Shipment weight in kilograms (> 0)
    merchandise_value   - Declared merchandise value in major units (>= 0)

OPTIONAL INPUT COLUMNS
----------------------
    hazardous           - Chemical / hazardous goods (default False)
    difficult_delivery  - Apply TDE1 and TDE2 (default False)

OUTPUT COLUMNS ADDED
--------------------
    supplement_shipments() adds:
        - weight_g, merchandise_value_cents (quantised half-up)
        - the route's tariff columns (see data/reference/tariff_schema.py)

    calculate() adds:
        - weight_band, base_charge_milli
        - surcharge_* flags (ad_valorem, dispatch, toll, hazardous, tde1, tde2)
        - *_cents amounts (weight, ad_valorem, ..., tde2, total) - exact
        - cost_* amounts in major units (float, for display and export)
        - calculator_version

ROUNDING
--------
Every component is rounded to whole cents exactly once, half-up, and the
total is the sum of the rounded components.

TAX GROSS-UP
------------
gross_up_divisor=None (default) prices without gross-up. Passing a divisor
(e.g. data.ICMS_DIVISOR = 0.88) divides the GROSSED_UP components by it
before rounding. See data/reference/gross_up.py.

USAGE
-----
    from carriers.martis.calculate_costs import calculate_costs, price_shipment
    result = calculate_costs(df)
    breakdown = price_shipment(PricingRequest("MG", "METROPOLITANA", "SP", "CAPITAL", 580, 17500))
"""

from decimal import Decimal

import polars as pl

from shared.surcharges import divisor_ratio, to_cents
from .version import VERSION
from .data import (
    load_tariffs,
    prepare_tariffs,
    ROUTE_COLS,
    NUMERIC_COLS,
    CENTS_PER_UNIT,
    GRAMS_PER_KG,
    DEFAULT_DIVISOR,
    GROSSED_UP,
)
from .columns import FLAG_COLS, validate_input_columns, validate_shipments
from .request import COMPONENTS, PricingRequest, PricingBreakdown
from .surcharges import ALL
from .tariffs import RouteNotFound, TariffRepository
from .weight_tiers import base_charge_expr, band_column_expr


# =============================================================================
# MAIN ENTRY POINTS
# =============================================================================

def calculate_costs(
    df: pl.DataFrame,
    tariffs: pl.DataFrame | TariffRepository | None = None,
    gross_up_divisor: Decimal | None = DEFAULT_DIVISOR
) -> pl.DataFrame:
    """
    Calculate freight costs for a shipment DataFrame.

    This is the main entry point. Takes raw shipment data and returns
    the same DataFrame with all calculation columns and costs appended.

    Args:
        df: Raw shipment DataFrame with required columns (see module docstring)
        tariffs: Tariff table or repository (loaded from tariffs.csv if not provided)
        gross_up_divisor: Tax gross-up divisor (None = no gross-up)

    Returns:
        DataFrame with tariff data, surcharge flags, and costs

    Raises:
        InvalidInput: If required columns or values are missing or invalid
        RouteNotFound: If any shipment's route has no tariff row
    """
    df = supplement_shipments(df, tariffs)
    df = calculate(df, gross_up_divisor)
    return df


def price_shipment(
    request: PricingRequest,
    tariffs: pl.DataFrame | TariffRepository | None = None,
    gross_up_divisor: Decimal | None = DEFAULT_DIVISOR
) -> PricingBreakdown:
    """
    Price a single shipment.

    Runs the same calculation as calculate_costs on a one-row DataFrame,
    with weight and value quantised from their decimal text by the request.

    Returns:
        PricingBreakdown with Decimal components and total

    Raises:
        InvalidInput: If the request fails validation
        RouteNotFound: If the route has no tariff row
    """
    request.validate()

    # to_frame() already holds the Decimal-quantised weight_g / value cents
    df = _lookup_tariffs(request.to_frame(), _resolve_tariffs(tariffs))
    df = calculate(df, gross_up_divisor)
    return PricingBreakdown.from_row(df.row(0, named=True))


class PricingEngine:
    """
    Calculator bound to one tariff repository and one gross-up choice.

    Holds no per-request state, so a single engine can serve concurrent
    callers.
    """

    def __init__(
        self,
        repository: TariffRepository | None = None,
        gross_up_divisor: Decimal | None = DEFAULT_DIVISOR
    ):
        # Fail on a bad divisor now, not on the first request
        divisor_ratio(gross_up_divisor)

        self.repository = repository if repository is not None else TariffRepository()
        self.gross_up_divisor = gross_up_divisor

    def compute(self, request: PricingRequest) -> PricingBreakdown:
        """Price one request (see price_shipment)."""
        return price_shipment(request, self.repository, self.gross_up_divisor)

    def compute_frame(self, df: pl.DataFrame) -> pl.DataFrame:
        """Price a shipment DataFrame (see calculate_costs)."""
        return calculate_costs(df, self.repository, self.gross_up_divisor)


# =============================================================================
# SUPPLEMENT SHIPMENTS
# =============================================================================

def supplement_shipments(
    df: pl.DataFrame,
    tariffs: pl.DataFrame | TariffRepository | None = None
) -> pl.DataFrame:
    """
    Supplement shipment data with quantised inputs and the route's tariff.

    Args:
        df: Raw shipment DataFrame
        tariffs: Tariff table or repository (loaded if not provided)

    Returns:
        DataFrame with added columns:
            - hazardous, difficult_delivery (defaulted to False if absent)
            - weight_g, merchandise_value_cents
            - tariff columns for the route
    """
    tariffs = _resolve_tariffs(tariffs)

    validate_input_columns(df)

    df = _add_default_flags(df)
    df = _quantize_inputs(df)
    validate_shipments(df)
    df = _lookup_tariffs(df, tariffs)

    return df


def _resolve_tariffs(tariffs: pl.DataFrame | TariffRepository | None) -> pl.DataFrame:
    """Validated tariff frame from a repository, a raw frame, or the reference CSV."""
    if tariffs is None:
        return load_tariffs()
    if isinstance(tariffs, TariffRepository):
        return tariffs.frame
    return prepare_tariffs(tariffs)


def _add_default_flags(df: pl.DataFrame) -> pl.DataFrame:
    """Default missing request flags to False and cast present ones to Boolean."""
    return df.with_columns([
        pl.col(c).cast(pl.Boolean) if c in df.columns else pl.lit(False).alias(c)
        for c in FLAG_COLS
    ])


def _half_up(expr: pl.Expr) -> pl.Expr:
    """Round a non-negative float expression to Int64, halves up (NaN -> null)."""
    return (expr + 0.5).floor().cast(pl.Int64, strict=False)


def _quantize_inputs(df: pl.DataFrame) -> pl.DataFrame:
    """
    Normalise route labels and quantise weight and value.

    weight_g / merchandise_value_cents are always recomputed from weight_kg /
    merchandise_value, replacing any values left by an earlier run.
    """
    return df.with_columns(
        [pl.col(c).cast(pl.Utf8).str.strip_chars() for c in ROUTE_COLS] + [
            _half_up(pl.col("weight_kg").cast(pl.Float64) * GRAMS_PER_KG).alias("weight_g"),
            _half_up(pl.col("merchandise_value").cast(pl.Float64) * CENTS_PER_UNIT)
            .alias("merchandise_value_cents"),
        ]
    )


def _lookup_tariffs(df: pl.DataFrame, tariffs: pl.DataFrame) -> pl.DataFrame:
    """
    Join the route's tariff row onto every shipment.

    Exact match on all four route columns. The route key is unique in a
    validated tariff table, so the join never multiplies rows.

    Raises:
        RouteNotFound: If any shipment has no matching tariff row.
            Nothing is priced in that case.
    """
    # Re-running on calculated output: replace old tariff columns
    df = df.drop([c for c in NUMERIC_COLS if c in df.columns])

    # Add row index to preserve order after join
    df = df.with_row_index("_row_id")

    df = df.join(tariffs, on=ROUTE_COLS, how="left")

    if df["weight_0_10"].null_count() > 0:
        raise RouteNotFound()

    df = df.sort("_row_id").drop("_row_id")

    return df


# =============================================================================
# CALCULATE COSTS
# =============================================================================

def calculate(
    df: pl.DataFrame,
    gross_up_divisor: Decimal | None = DEFAULT_DIVISOR
) -> pl.DataFrame:
    """
    Calculate freight costs for supplemented shipments.

    Args:
        df: Supplemented shipment DataFrame from supplement_shipments
        gross_up_divisor: Tax gross-up divisor (None = no gross-up)

    Returns:
        DataFrame with surcharge flags, costs, and totals

    Processing order:
        1. Base charge  - weight band lookup (surcharges read base_charge_milli)
        2. Surcharges   - ad valorem, dispatch, toll, hazardous, TDE1, TDE2
        3. Total        - sum of rounded components
        4. Major units  - cost_* columns
    """
    ratio = divisor_ratio(gross_up_divisor)

    # Step 1: Resolve base charge from weight band
    df = _resolve_base_charge(df, ratio)

    # Step 2: Apply surcharges
    df = _apply_surcharges(df, ALL, ratio)

    # Step 3: Total and major units
    df = _calculate_total(df)
    df = _to_major_units(df)

    # Step 4: Stamp version
    df = _stamp_version(df)

    return df


def _gross_up_for(component: str, ratio: tuple[int, int] | None) -> tuple[int, int] | None:
    """Gross-up ratio for a component, or None if it is not grossed up."""
    return ratio if component in GROSSED_UP else None


def _resolve_base_charge(df: pl.DataFrame, ratio: tuple[int, int] | None) -> pl.DataFrame:
    """
    Look up the weight band and base charge.

    base_charge_milli stays un-grossed; the percentage surcharges are
    billed on it. weight_cents is the (optionally grossed-up) component.
    """
    df = df.with_columns([
        band_column_expr().alias("weight_band"),
        base_charge_expr().alias("base_charge_milli"),
    ])

    return df.with_columns(
        to_cents(pl.col("base_charge_milli"), GRAMS_PER_KG, _gross_up_for("weight", ratio))
        .alias("weight_cents")
    )


def _apply_single_surcharge(
    df: pl.DataFrame,
    surcharge,
    ratio: tuple[int, int] | None
) -> pl.DataFrame:
    """
    Apply a single surcharge.

    Adds flag and cents columns for the surcharge. A surcharge whose
    conditions are not met costs exactly 0.
    """
    component = surcharge.name.lower()
    flag_col = f"surcharge_{component}"
    cents_col = f"{component}_cents"

    # Add flag column first
    df = df.with_columns(surcharge.conditions().alias(flag_col))

    # Add cost column referencing the flag
    df = df.with_columns(
        pl.when(pl.col(flag_col))
        .then(surcharge.cost(_gross_up_for(component, ratio)))
        .otherwise(pl.lit(0, dtype=pl.Int64))
        .alias(cents_col)
    )

    return df


def _apply_surcharges(
    df: pl.DataFrame,
    surcharges: list,
    ratio: tuple[int, int] | None
) -> pl.DataFrame:
    """Apply surcharges in order. Each is evaluated independently."""
    for surcharge in surcharges:
        df = _apply_single_surcharge(df, surcharge, ratio)
    return df


def _calculate_total(df: pl.DataFrame) -> pl.DataFrame:
    """Calculate total_cents as the sum of every component (disabled ones are 0)."""
    cents_cols = [f"{c}_cents" for c in COMPONENTS]
    return df.with_columns(pl.sum_horizontal(cents_cols).alias("total_cents"))


def _to_major_units(df: pl.DataFrame) -> pl.DataFrame:
    """Add cost_* columns in major units (cents / 100)."""
    return df.with_columns([
        (pl.col(f"{c}_cents") / CENTS_PER_UNIT).alias(f"cost_{c}")
        for c in COMPONENTS + ["total"]
    ])


def _stamp_version(df: pl.DataFrame) -> pl.DataFrame:
    """Stamp calculator version on output."""
    return df.with_columns(pl.lit(VERSION).alias("calculator_version"))


__all__ = [
    "calculate_costs",
    "price_shipment",
    "PricingEngine",
    "supplement_shipments",
    "calculate",
]
