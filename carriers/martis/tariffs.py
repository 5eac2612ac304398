"""
Tariff Repository

Read-only access to the tariff table: one rate card per directed route,
keyed by (origin_region, origin_class, dest_region, dest_class).

The pricing pipeline joins the whole table onto shipments; lookup() and
the list_* helpers serve single-route callers and selection inputs.
"""

from typing import NamedTuple

import polars as pl

from .data import load_tariffs, prepare_tariffs, ROUTE_COLS, TARIFF_COLS


ROUTE_NOT_FOUND = "Freight route not found"


class RouteNotFound(LookupError):
    """No tariff row matches the route. The message never echoes the route."""

    def __init__(self, message: str = ROUTE_NOT_FOUND):
        super().__init__(message)


class TariffRow(NamedTuple):
    """One rate card. Money in cents, percentages per data/reference/scales.py."""
    # Route
    origin_region: str
    origin_class: str
    dest_region: str
    dest_class: str
    # Weight bands
    weight_0_10: int
    weight_11_20: int
    weight_21_30: int
    weight_31_50: int
    weight_51_70: int
    weight_71_100: int
    weight_101_200: int
    weight_over_200: int
    # Fees
    ad_valorem_rate: int
    ad_valorem_min: int
    dispatch_fee: int
    toll_up_to_100: int
    toll_per_kg_over_100: int
    hazardous_rate: int
    hazardous_up_to_100: int
    hazardous_over_100: int
    tde1_rate: int
    tde1_min: int
    tde1_max: int
    tde2_rate: int
    tde2_min: int


if list(TariffRow._fields) != TARIFF_COLS:
    raise ValueError("TariffRow fields do not match the tariff table layout")


class TariffRepository:
    """
    Tariff table held in memory.

    The frame is validated on construction and never modified afterwards,
    so one repository can be shared between threads.
    """

    def __init__(self, tariffs: pl.DataFrame | None = None):
        if tariffs is None:
            self._frame = load_tariffs()
        else:
            self._frame = prepare_tariffs(tariffs)

    @classmethod
    def from_csv(cls, path) -> "TariffRepository":
        """Repository over a tariff CSV file."""
        return cls(load_tariffs(path))

    @property
    def frame(self) -> pl.DataFrame:
        """Validated tariff table (one row per route)."""
        return self._frame

    def __len__(self) -> int:
        return self._frame.height

    def lookup(
        self,
        origin_region: str,
        origin_class: str,
        dest_region: str,
        dest_class: str,
    ) -> TariffRow | None:
        """
        Exact match on all four route fields.

        Returns:
            The route's TariffRow, or None if there is no such route
        """
        key = (origin_region, origin_class, dest_region, dest_class)
        matches = self._frame.filter(
            pl.all_horizontal([pl.col(c) == v for c, v in zip(ROUTE_COLS, key)])
        )

        if matches.height == 0:
            return None

        return TariffRow(**matches.row(0, named=True))

    def get(
        self,
        origin_region: str,
        origin_class: str,
        dest_region: str,
        dest_class: str,
    ) -> TariffRow:
        """
        Like lookup(), but a missing route is an error.

        Raises:
            RouteNotFound: If no tariff row matches
        """
        row = self.lookup(origin_region, origin_class, dest_region, dest_class)
        if row is None:
            raise RouteNotFound()
        return row

    def list_regions(self) -> set[str]:
        """Every region code that appears as an origin or a destination."""
        return (
            set(self._frame["origin_region"].to_list()) |
            set(self._frame["dest_region"].to_list())
        )

    def list_classifications(self, region: str) -> set[str]:
        """Classification labels used with a region (empty set if unknown)."""
        origin = self._frame.filter(pl.col("origin_region") == region)["origin_class"]
        dest = self._frame.filter(pl.col("dest_region") == region)["dest_class"]
        return set(origin.to_list()) | set(dest.to_list())


__all__ = [
    "ROUTE_NOT_FOUND",
    "RouteNotFound",
    "TariffRow",
    "TariffRepository",
]
