"""
Tariff Scales

Units every integer tariff column is stored in.
Last updated: 2025-11-28

MONEY
-----
All money columns are whole cents. Per-kg rates are cents per kilogram.

PERCENTAGES
-----------
Two scales are in use and they are NOT interchangeable:

    ad_valorem_rate     - 1/10000 of the merchandise value (35 = 0.35%)
    hazardous_rate,
    tde1_rate,
    tde2_rate           - whole percent of the base charge (40 = 40%)

WEIGHT
------
Weights are quantised to whole grams before pricing, so per-kg charges
are held in milli-cents (rate * grams) until they are rounded.
"""

CENTS_PER_UNIT = 100          # Minor units per major currency unit
GRAMS_PER_KG = 1000           # Weight quantisation (also milli-cent scale)

AD_VALOREM_SCALE = 10_000     # ad_valorem_rate is per 10,000 of value
PERCENT_SCALE = 100           # hazardous / TDE rates are whole percent
