"""
Hazardous Goods Surcharge (HAZARDOUS)

Applies only when the shipment is flagged as hazardous (chemical products).

    floor = hazardous_up_to_100 if weight <= 100 kg else hazardous_over_100
    cents = max(base_charge * hazardous_rate / 100, floor)

Computed on the base charge before any tax gross-up.
"""

import polars as pl
from shared.surcharges import Surcharge

from ..data import GRAMS_PER_KG, PERCENT_SCALE, HEAVY_THRESHOLD_G


class HAZ(Surcharge):
    """Hazardous Goods - percent of base charge with a weight-dependent floor."""

    # Identity
    name = "HAZARDOUS"

    # Pricing (base_charge_milli * percent is in 1/100000 cents)
    denominator = GRAMS_PER_KG * PERCENT_SCALE

    # Trigger
    flag_field = "hazardous"

    @classmethod
    def floor(cls) -> pl.Expr:
        """Minimum charge in cents for the weight."""
        return (
            pl.when(pl.col("weight_g") <= HEAVY_THRESHOLD_G)
            .then(pl.col("hazardous_up_to_100"))
            .otherwise(pl.col("hazardous_over_100"))
        )

    @classmethod
    def amount(cls) -> pl.Expr:
        return pl.max_horizontal(
            pl.col("base_charge_milli") * pl.col("hazardous_rate"),
            cls.floor() * cls.denominator,
        )
