"""
Difficult Delivery Surcharges (TDE1, TDE2)

Two independent surcharges for deliveries to hard-to-serve locations.
Both apply only when the shipment is flagged as a difficult delivery, and
both are a percent of the base charge before any tax gross-up.

    TDE1: clamp(base_charge * tde1_rate / 100, tde1_min, tde1_max)
    TDE2: max(base_charge * tde2_rate / 100, tde2_min)     (no ceiling)
"""

import polars as pl
from shared.surcharges import Surcharge

from ..data import GRAMS_PER_KG, PERCENT_SCALE


class TDE1(Surcharge):
    """Difficult Delivery 1 - percent of base charge, clamped to [min, max]."""

    # Identity
    name = "TDE1"

    # Pricing (base_charge_milli * percent is in 1/100000 cents)
    denominator = GRAMS_PER_KG * PERCENT_SCALE

    # Trigger
    flag_field = "difficult_delivery"

    @classmethod
    def amount(cls) -> pl.Expr:
        return pl.min_horizontal(
            pl.max_horizontal(
                pl.col("base_charge_milli") * pl.col("tde1_rate"),
                pl.col("tde1_min") * cls.denominator,
            ),
            pl.col("tde1_max") * cls.denominator,
        )


class TDE2(Surcharge):
    """Difficult Delivery 2 - percent of base charge, floored at tde2_min."""

    # Identity
    name = "TDE2"

    # Pricing (base_charge_milli * percent is in 1/100000 cents)
    denominator = GRAMS_PER_KG * PERCENT_SCALE

    # Trigger
    flag_field = "difficult_delivery"

    @classmethod
    def amount(cls) -> pl.Expr:
        return pl.max_horizontal(
            pl.col("base_charge_milli") * pl.col("tde2_rate"),
            pl.col("tde2_min") * cls.denominator,
        )
