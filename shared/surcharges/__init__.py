"""
Shared Surcharges

Base class and exact money utilities for tariff surcharges.
"""

from .base import Surcharge, divisor_ratio, round_half_up, to_cents, MAX_DIVISOR_PLACES

__all__ = [
    "Surcharge",
    "divisor_ratio",
    "round_half_up",
    "to_cents",
    "MAX_DIVISOR_PLACES",
]
