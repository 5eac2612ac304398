"""
Surcharge Base Class

Re-exports from shared.surcharges for Martis surcharges.
"""

from shared.surcharges import Surcharge

__all__ = [
    "Surcharge",
]
