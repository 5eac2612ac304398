"""
Calculate Freight Costs for a Shipment File
===========================================

Prices every shipment in a CSV against the tariff table and writes the
calculated rows to a new CSV.

Input columns: origin_region, origin_class, dest_region, dest_class,
weight_kg, merchandise_value, and optionally hazardous, difficult_delivery.

Usage:
    python -m carriers.martis.scripts.calculate_batch shipments.csv -o priced.csv
    python -m carriers.martis.scripts.calculate_batch shipments.csv -o priced.csv --icms
    python -m carriers.martis.scripts.calculate_batch shipments.csv --gross-up 0.88 --dry-run
"""

import argparse
import sys
from decimal import Decimal
from pathlib import Path

import polars as pl

from carriers.martis.calculate_costs import calculate_costs
from carriers.martis.columns import REQUIRED_INPUT_COLS, FLAG_COLS, COST_COLS
from carriers.martis.data import load_tariffs, ICMS_DIVISOR
from carriers.martis.tariffs import RouteNotFound


# =============================================================================
# CONFIGURATION
# =============================================================================

# Columns written to the output file
OUTPUT_COLUMNS = (
    REQUIRED_INPUT_COLS +
    FLAG_COLS +
    ["weight_band"] +
    COST_COLS +
    ["calculator_version"]
)


# =============================================================================
# HELPERS
# =============================================================================

def load_shipments(path: Path) -> pl.DataFrame:
    """Load shipments, keeping route labels as text."""
    return pl.read_csv(
        path,
        schema_overrides={
            "origin_region": pl.Utf8,
            "origin_class": pl.Utf8,
            "dest_region": pl.Utf8,
            "dest_class": pl.Utf8,
        },
    )


def print_summary(df: pl.DataFrame) -> None:
    """Print totals per route and overall."""
    print("\n" + "=" * 60)
    print("SUMMARY BY ROUTE")
    print("=" * 60)

    by_route = (
        df
        .group_by(["origin_region", "origin_class", "dest_region", "dest_class"])
        .agg([
            pl.len().alias("shipments"),
            pl.col("weight_kg").sum().alias("weight_kg"),
            (pl.col("total_cents").sum() / 100).alias("cost_total"),
        ])
        .sort("cost_total", descending=True)
    )
    print(by_route)

    print(f"\nShipments:   {len(df):,}")
    print(f"Total cost:  {df['total_cents'].sum() / 100:,.2f}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Calculate Martis freight costs for a shipment CSV"
    )
    parser.add_argument("input", type=Path, help="Shipment CSV")
    parser.add_argument("-o", "--output", type=Path,
                        help="Output CSV (default: <input>_priced.csv)")
    parser.add_argument("--tariffs", type=Path,
                        help="Tariff CSV (default: reference tariffs.csv)")

    gross_up = parser.add_mutually_exclusive_group()
    gross_up.add_argument("--icms", action="store_true",
                          help=f"Gross up for ICMS (divisor {ICMS_DIVISOR})")
    gross_up.add_argument("--gross-up", type=Decimal, metavar="DIVISOR",
                          help="Gross up with a custom divisor in (0, 1], at most 4 decimal places")

    parser.add_argument("--dry-run", action="store_true",
                        help="Calculate and print the summary without writing output")
    return parser.parse_args()


# =============================================================================
# MAIN
# =============================================================================

def main():
    args = parse_args()

    divisor = ICMS_DIVISOR if args.icms else args.gross_up
    output = args.output or args.input.with_name(f"{args.input.stem}_priced.csv")

    print(f"Loading shipments from {args.input}...")
    shipments = load_shipments(args.input)
    print(f"  {len(shipments):,} shipments")

    tariffs = load_tariffs(args.tariffs)
    print(f"  {len(tariffs):,} tariff routes")
    print(f"  Gross-up divisor: {divisor if divisor is not None else 'none'}")

    try:
        df = calculate_costs(shipments, tariffs, divisor)
    except (ValueError, RouteNotFound) as e:
        # InvalidInput is a ValueError, as are bad gross-up divisors
        print(f"\nError: {e}")
        sys.exit(1)

    print_summary(df)

    if args.dry_run:
        print("\nDry run - no output written.")
        return

    df.select([c for c in OUTPUT_COLUMNS if c in df.columns]).write_csv(output)
    print(f"\nOutput saved to: {output}")


if __name__ == "__main__":
    main()
