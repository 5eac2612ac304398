"""
Tax Gross-Up (ICMS)

Some quotes embed the state ICMS tax in the freight price by dividing
selected components by (1 - ICMS rate). Whether a quote is grossed up is
a caller choice, so the default is no gross-up.
Last updated: 2025-11-28

Only the components below are grossed up. Hazardous goods and the two
TDE surcharges are always billed on the un-grossed base charge.
"""

from decimal import Decimal

ICMS_RATE = Decimal("0.12")             # 12% interstate rate
ICMS_DIVISOR = 1 - ICMS_RATE            # 0.88

DEFAULT_DIVISOR = None                  # No gross-up unless asked for

GROSSED_UP = ("weight", "ad_valorem", "dispatch", "toll")
