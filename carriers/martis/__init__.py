"""
Martis Carrier Module

Expected freight cost calculator for Martis road freight (route tariff table).
"""

from .calculate_costs import calculate_costs, price_shipment, PricingEngine
from .request import PricingRequest, PricingBreakdown, InvalidInput
from .tariffs import TariffRepository, TariffRow, RouteNotFound
from .version import VERSION

__all__ = [
    "calculate_costs",
    "price_shipment",
    "PricingEngine",
    "PricingRequest",
    "PricingBreakdown",
    "InvalidInput",
    "TariffRepository",
    "TariffRow",
    "RouteNotFound",
    "VERSION",
]
