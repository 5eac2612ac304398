"""
Pricing Request and Breakdown

Value types at the boundary of the calculator.

    PricingRequest    - one shipment to price, optional flags defaulted
    PricingBreakdown  - priced components in major units (Decimal, 2 places)

Inputs are quantised once, here: weight to whole grams and merchandise
value to whole cents, both rounded half-up. Everything after this point is
integer arithmetic.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import NamedTuple

import polars as pl

from .data import CENTS_PER_UNIT, GRAMS_PER_KG


# Breakdown components, in response order ("weight" is the base charge)
COMPONENTS = ["weight", "ad_valorem", "dispatch", "toll", "hazardous", "tde1", "tde2"]

TWO_PLACES = Decimal("0.01")


class InvalidInput(ValueError):
    """Request fields are missing, malformed or out of range."""


# =============================================================================
# QUANTISATION
# =============================================================================

def _to_decimal(value) -> Decimal:
    """Exact decimal from user input (floats go through str to keep 100.01 as typed)."""
    if isinstance(value, bool):
        raise InvalidInput(f"Expected a number, got {value!r}")
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidInput(f"Expected a number, got {value!r}")


def quantize_weight(weight_kg) -> int:
    """
    Weight in whole grams, rounded half-up.

    Band and toll thresholds compare these grams, so sub-gram excess over a
    bound (e.g. 100.0004 kg) prices in the lower band.
    """
    grams = _to_decimal(weight_kg) * GRAMS_PER_KG
    return int(grams.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def quantize_value(value) -> int:
    """Merchandise value in whole cents, rounded half-up."""
    cents = _to_decimal(value) * CENTS_PER_UNIT
    return int(cents.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def cents_to_decimal(cents: int) -> Decimal:
    """Major units with exactly two decimal places."""
    return (Decimal(int(cents)) / CENTS_PER_UNIT).quantize(TWO_PLACES)


# =============================================================================
# REQUEST
# =============================================================================

class PricingRequest(NamedTuple):
    """A shipment to price on one route."""
    origin_region: str
    origin_class: str
    dest_region: str
    dest_class: str
    weight_kg: float
    merchandise_value: float
    hazardous: bool = False
    difficult_delivery: bool = False

    def validate(self) -> "PricingRequest":
        """
        Check every field before the request reaches the calculator.

        Returns:
            self, so calls can be chained

        Raises:
            InvalidInput: Listing every problem found
        """
        errors = []

        for field in ("origin_region", "origin_class", "dest_region", "dest_class"):
            value = getattr(self, field)
            if not isinstance(value, str) or not value.strip():
                errors.append(f"{field}: required")

        try:
            weight = _to_decimal(self.weight_kg)
            if not weight.is_finite() or weight <= 0:
                errors.append(f"weight_kg: must be positive, got {self.weight_kg}")
            elif quantize_weight(weight) == 0:
                errors.append(f"weight_kg: must be at least 1 gram, got {self.weight_kg}")
        except InvalidInput as e:
            errors.append(f"weight_kg: {e}")

        try:
            value = _to_decimal(self.merchandise_value)
            if not value.is_finite() or value < 0:
                errors.append(
                    f"merchandise_value: must be zero or more, got {self.merchandise_value}"
                )
        except InvalidInput as e:
            errors.append(f"merchandise_value: {e}")

        for field in ("hazardous", "difficult_delivery"):
            if not isinstance(getattr(self, field), bool):
                errors.append(f"{field}: must be True or False")

        if errors:
            raise InvalidInput("Invalid pricing request:\n  " + "\n  ".join(errors))

        return self

    def to_frame(self) -> pl.DataFrame:
        """Single-row shipment DataFrame with quantised weight and value."""
        return pl.DataFrame(
            {
                "origin_region": [self.origin_region.strip()],
                "origin_class": [self.origin_class.strip()],
                "dest_region": [self.dest_region.strip()],
                "dest_class": [self.dest_class.strip()],
                "weight_kg": [float(self.weight_kg)],
                "merchandise_value": [float(self.merchandise_value)],
                "hazardous": [bool(self.hazardous)],
                "difficult_delivery": [bool(self.difficult_delivery)],
                "weight_g": [quantize_weight(self.weight_kg)],
                "merchandise_value_cents": [quantize_value(self.merchandise_value)],
            },
            schema={
                "origin_region": pl.Utf8,
                "origin_class": pl.Utf8,
                "dest_region": pl.Utf8,
                "dest_class": pl.Utf8,
                "weight_kg": pl.Float64,
                "merchandise_value": pl.Float64,
                "hazardous": pl.Boolean,
                "difficult_delivery": pl.Boolean,
                "weight_g": pl.Int64,
                "merchandise_value_cents": pl.Int64,
            },
        )


# =============================================================================
# BREAKDOWN
# =============================================================================

class PricingBreakdown(NamedTuple):
    """Priced components in major units. total is the exact sum of the others."""
    weight: Decimal
    ad_valorem: Decimal
    dispatch: Decimal
    toll: Decimal
    hazardous: Decimal
    tde1: Decimal
    tde2: Decimal
    total: Decimal

    @classmethod
    def from_cents(cls, **cents: int) -> "PricingBreakdown":
        """Build from whole-cent components; total is summed here, in cents."""
        missing = [c for c in COMPONENTS if c not in cents]
        if missing:
            raise ValueError(f"Missing breakdown components: {missing}")

        total = sum(int(cents[c]) for c in COMPONENTS)
        return cls(
            *(cents_to_decimal(cents[c]) for c in COMPONENTS),
            total=cents_to_decimal(total),
        )

    @classmethod
    def from_row(cls, row: dict) -> "PricingBreakdown":
        """Build from a calculated row (uses the <component>_cents columns)."""
        return cls.from_cents(**{c: row[f"{c}_cents"] for c in COMPONENTS})

    def as_dict(self) -> dict[str, float]:
        """Response fields as plain floats (for JSON and printing)."""
        return {k: float(v) for k, v in self._asdict().items()}


__all__ = [
    "COMPONENTS",
    "InvalidInput",
    "PricingRequest",
    "PricingBreakdown",
    "quantize_weight",
    "quantize_value",
    "cents_to_decimal",
]
