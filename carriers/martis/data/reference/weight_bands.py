"""
Weight Bands

Tariff card weight bands. Bounds are inclusive upper bounds in grams.

The first six bands are flat fees for the whole band. The last two are
per-kg rates multiplied by the actual weight (not the band weight), so
the charge jumps at 100 kg and at 200 kg. That discontinuity is how the
tariff card works.

Bands are selected on the weight already rounded to whole grams, so a
weight less than half a gram over a bound stays in the lower band
(100.0004 kg -> 100000 g -> flat weight_71_100; 100.0005 kg -> per kg).
"""

from typing import NamedTuple


class WeightBand(NamedTuple):
    """A weight band and the tariff column that prices it."""
    upper_g: int | None     # Inclusive upper bound (None = open-ended)
    column: str             # Tariff column holding the charge
    per_kg: bool            # True if column is cents/kg, False if flat cents


WEIGHT_BANDS = [
    WeightBand(10_000, "weight_0_10", False),
    WeightBand(20_000, "weight_11_20", False),
    WeightBand(30_000, "weight_21_30", False),
    WeightBand(50_000, "weight_31_50", False),
    WeightBand(70_000, "weight_51_70", False),
    WeightBand(100_000, "weight_71_100", False),
    WeightBand(200_000, "weight_101_200", True),
    WeightBand(None, "weight_over_200", True),
]

# Toll and hazardous floors switch from flat to heavy at this weight
HEAVY_THRESHOLD_G = 100_000
