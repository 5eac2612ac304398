"""
Toll / Handling Fee (TOLL)

Applies to every shipment:
    weight <= 100 kg -> toll_up_to_100 (flat, not multiplied by weight)
    weight >  100 kg -> toll_per_kg_over_100 * weight

Shares the 100 kg threshold with the hazardous goods floor, not the
weight band threshold.
"""

import polars as pl
from shared.surcharges import Surcharge

from ..data import GRAMS_PER_KG, HEAVY_THRESHOLD_G


class TOLL(Surcharge):
    """Toll - flat up to 100 kg, per kg above."""

    # Identity
    name = "TOLL"

    # Pricing (per-kg rate * grams is in milli-cents)
    denominator = GRAMS_PER_KG

    @classmethod
    def amount(cls) -> pl.Expr:
        return (
            pl.when(pl.col("weight_g") <= HEAVY_THRESHOLD_G)
            .then(pl.col("toll_up_to_100") * cls.denominator)
            .otherwise(pl.col("toll_per_kg_over_100") * pl.col("weight_g"))
        )
