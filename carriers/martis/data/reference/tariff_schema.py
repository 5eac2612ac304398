"""
Tariff Table Schema

Column layout of the tariff CSV. One row per directed route; the four
route columns together are unique.
"""

ROUTE_COLS = [
    "origin_region",        # 2-letter state code
    "origin_class",         # e.g. CAPITAL, INTERIOR, METROPOLITANA
    "dest_region",
    "dest_class",
]

WEIGHT_COLS = [
    "weight_0_10",          # cents
    "weight_11_20",         # cents
    "weight_21_30",         # cents
    "weight_31_50",         # cents
    "weight_51_70",         # cents
    "weight_71_100",        # cents
    "weight_101_200",       # cents per kg
    "weight_over_200",      # cents per kg
]

FEE_COLS = [
    "ad_valorem_rate",      # 1/10000 of value
    "ad_valorem_min",       # cents
    "dispatch_fee",         # cents
    "toll_up_to_100",       # cents
    "toll_per_kg_over_100", # cents per kg
    "hazardous_rate",       # whole percent
    "hazardous_up_to_100",  # cents
    "hazardous_over_100",   # cents
    "tde1_rate",            # whole percent
    "tde1_min",             # cents
    "tde1_max",             # cents
    "tde2_rate",            # whole percent
    "tde2_min",             # cents
]

NUMERIC_COLS = WEIGHT_COLS + FEE_COLS

TARIFF_COLS = ROUTE_COLS + NUMERIC_COLS

# Tariff files exported from the rate card have no toll columns; toll is
# billed from the hazardous floor columns in that case.
TOLL_FALLBACK = {
    "toll_up_to_100": "hazardous_up_to_100",
    "toll_per_kg_over_100": "hazardous_over_100",
}
