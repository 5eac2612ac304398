"""
Ad Valorem Surcharge (AD_VALOREM)

Freight charged in proportion to the declared merchandise value, with a
minimum charge per shipment.

    cents = max(value_cents * ad_valorem_rate / 10000, ad_valorem_min)

ad_valorem_rate is per 10,000 of value (35 = 0.35%).
"""

import polars as pl
from shared.surcharges import Surcharge

from ..data import AD_VALOREM_SCALE


class ADV(Surcharge):
    """Ad Valorem - percentage of merchandise value, floored at ad_valorem_min."""

    # Identity
    name = "AD_VALOREM"

    # Pricing (value_cents * rate is in 1/10000 cents)
    denominator = AD_VALOREM_SCALE

    @classmethod
    def amount(cls) -> pl.Expr:
        return pl.max_horizontal(
            pl.col("merchandise_value_cents") * pl.col("ad_valorem_rate"),
            pl.col("ad_valorem_min") * cls.denominator,
        )
