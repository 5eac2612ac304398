"""
Surcharge Base Class

Shared base class for all tariff surcharges, plus the exact integer money
helpers every surcharge is rounded through.
"""

from abc import ABC
from decimal import Decimal
import polars as pl


# Gross-up divisors are tax factors such as 0.88 or 0.8825. Capping the
# precision keeps (amount * q) and (denominator * p) inside Int64.
MAX_DIVISOR_PLACES = 4


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def round_half_up(numerator: pl.Expr, denominator: int) -> pl.Expr:
    """
    Round numerator / denominator to a whole integer, halves rounded up.

    Pure integer arithmetic, so there is no float drift at half-cent
    boundaries (50.5 cents -> 51 cents, never 50).

    Args:
        numerator: Non-negative integer expression
        denominator: Positive integer scale of the numerator

    Returns:
        Polars Int64 expression
    """
    return (numerator * 2 + denominator) // (2 * denominator)


def divisor_ratio(divisor: Decimal | float | str | None) -> tuple[int, int] | None:
    """
    Convert a gross-up divisor into an exact (numerator, denominator) pair.

    None and 1 both mean "no gross-up" and return None.

    Raises:
        ValueError: If the divisor is not in (0, 1] or has more than
            MAX_DIVISOR_PLACES decimal places
    """
    if divisor is None:
        return None

    value = Decimal(str(divisor))
    if not value.is_finite() or value <= 0 or value > 1:
        raise ValueError(f"Gross-up divisor must be in (0, 1], got {divisor}")
    if value == 1:
        return None
    if value != value.quantize(Decimal(1).scaleb(-MAX_DIVISOR_PLACES)):
        raise ValueError(
            f"Gross-up divisor must have at most {MAX_DIVISOR_PLACES} decimal places, got {divisor}"
        )

    return value.as_integer_ratio()


def to_cents(
    numerator: pl.Expr,
    denominator: int,
    ratio: tuple[int, int] | None = None
) -> pl.Expr:
    """
    Whole cents from an exact numerator/denominator pair.

    When a gross-up ratio (p, q) is given the amount is divided by p/q
    before rounding, i.e. multiplied by q/p, still in integers.
    """
    if ratio is None:
        return round_half_up(numerator, denominator)

    p, q = ratio
    return round_half_up(numerator * q, denominator * p)


# =============================================================================
# BASE CLASS
# =============================================================================

class Surcharge(ABC):
    """
    Base class for all surcharges.

    Attributes:
        IDENTITY
            name            - Short code (e.g., "AD_VALOREM", "TDE1"). The
                              lowercased name names the output columns.

        PRICING
            denominator     - Integer scale of amount(); amount / denominator
                              is the charge in cents

        TRIGGER
            flag_field      - Request flag column that switches the
                              surcharge on (None = always applies)
    """

    # -------------------------------------------------------------------------
    # IDENTITY
    # -------------------------------------------------------------------------
    name: str

    # -------------------------------------------------------------------------
    # PRICING
    # -------------------------------------------------------------------------
    denominator: int = 1

    # -------------------------------------------------------------------------
    # TRIGGER
    # -------------------------------------------------------------------------
    flag_field: str | None = None

    # -------------------------------------------------------------------------
    # METHODS
    # -------------------------------------------------------------------------

    @classmethod
    def conditions(cls) -> pl.Expr:
        """
        Polars expression for when this surcharge triggers.

        Default follows the request flag, or True when there is none.
        """
        if cls.flag_field is None:
            return pl.lit(True)
        return pl.col(cls.flag_field)

    @classmethod
    def amount(cls) -> pl.Expr:
        """Exact integer amount, in units of 1 / denominator cents."""
        raise NotImplementedError(f"{cls.__name__} must define amount()")

    @classmethod
    def cost(cls, ratio: tuple[int, int] | None = None) -> pl.Expr:
        """Cost in whole cents (grossed up first when a ratio is given)."""
        return to_cents(cls.amount(), cls.denominator, ratio)
