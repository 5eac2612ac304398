"""
Dispatch Fee (DISPATCH)

Flat fee per shipment, independent of weight and value.
"""

import polars as pl
from shared.surcharges import Surcharge


class DSP(Surcharge):
    """Dispatch - flat dispatch_fee on every shipment."""

    # Identity
    name = "DISPATCH"

    @classmethod
    def amount(cls) -> pl.Expr:
        return pl.col("dispatch_fee")
