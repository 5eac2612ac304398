"""
Weight Tier Resolution

Maps a shipment weight to the base (weight) charge using the tariff row's
band columns. See data/reference/weight_bands.py for the band layout.

The charge is produced in milli-cents so per-kg bands stay exact:
    flat band   -> band_cents * 1000
    per-kg band -> cents_per_kg * weight_g
"""

import polars as pl

from shared.surcharges import round_half_up
from .data import WEIGHT_BANDS, GRAMS_PER_KG
from .request import quantize_weight


def base_charge_expr(bands=WEIGHT_BANDS) -> pl.Expr:
    """
    Polars expression for the base charge in milli-cents.

    Requires weight_g and the band columns of the tariff row. Bands are
    checked in order against inclusive upper bounds; the last band must be
    open-ended.
    """
    if bands[-1].upper_g is not None:
        raise ValueError("Last weight band must be open-ended (upper_g=None)")

    expr = None
    for band in bands:
        if band.per_kg:
            amount = pl.col(band.column) * pl.col("weight_g")
        else:
            amount = pl.col(band.column) * GRAMS_PER_KG

        if band.upper_g is None:
            expr = expr.otherwise(amount)
        elif expr is None:
            expr = pl.when(pl.col("weight_g") <= band.upper_g).then(amount)
        else:
            expr = expr.when(pl.col("weight_g") <= band.upper_g).then(amount)

    return expr


def band_column_expr(bands=WEIGHT_BANDS) -> pl.Expr:
    """Polars expression naming the tariff column that priced the shipment."""
    expr = None
    for band in bands:
        if band.upper_g is None:
            expr = expr.otherwise(pl.lit(band.column))
        elif expr is None:
            expr = pl.when(pl.col("weight_g") <= band.upper_g).then(pl.lit(band.column))
        else:
            expr = expr.when(pl.col("weight_g") <= band.upper_g).then(pl.lit(band.column))

    return expr


def base_charge(row, weight_kg: float) -> int:
    """
    Base charge in whole cents for one tariff row and weight.

    Args:
        row: TariffRow (or any mapping with the band columns)
        weight_kg: Shipment weight in kilograms (must be positive)

    Returns:
        Base charge in cents, rounded half-up
    """
    values = row._asdict() if hasattr(row, "_asdict") else dict(row)
    columns = {band.column: [values[band.column]] for band in WEIGHT_BANDS}

    df = pl.DataFrame(
        {**columns, "weight_g": [quantize_weight(weight_kg)]},
        schema={**{c: pl.Int64 for c in columns}, "weight_g": pl.Int64},
    )

    return df.select(round_half_up(base_charge_expr(), GRAMS_PER_KG)).item()


__all__ = [
    "base_charge_expr",
    "band_column_expr",
    "base_charge",
]
