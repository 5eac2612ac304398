"""
Martis Freight Calculator
=========================

Interactive CLI tool to calculate expected freight costs for a single shipment.

Usage:
    python -m carriers.martis.scripts.calculator
    python -m carriers.martis.scripts.calculator --icms
"""

import argparse

from carriers.martis.calculate_costs import PricingEngine
from carriers.martis.data import ICMS_DIVISOR
from carriers.martis.request import PricingRequest
from carriers.martis.tariffs import TariffRepository
from carriers.martis.version import VERSION


def choose(prompt: str, options: list[str]) -> str:
    """Prompt for one of a numbered list of options."""
    for i, option in enumerate(options, start=1):
        print(f"  {i}. {option}")

    while True:
        choice = input(f"{prompt} (1-{len(options)}): ").strip()
        if choice.isdigit() and 1 <= int(choice) <= len(options):
            return options[int(choice) - 1]
        print("  Invalid choice, try again.")


def ask_yes_no(prompt: str) -> bool:
    """Prompt for a yes/no answer (default no)."""
    return input(f"{prompt} [y/N]: ").strip().lower() in ("y", "yes", "s", "sim")


def get_user_input(repository: TariffRepository) -> PricingRequest:
    """Prompt user for shipment details."""
    regions = sorted(repository.list_regions())

    # Origin
    print("\nOrigin state:")
    origin_region = choose("Select", regions)
    print(f"\nOrigin classification ({origin_region}):")
    origin_class = choose("Select", sorted(repository.list_classifications(origin_region)))

    # Destination
    print("\nDestination state:")
    dest_region = choose("Select", regions)
    print(f"\nDestination classification ({dest_region}):")
    dest_class = choose("Select", sorted(repository.list_classifications(dest_region)))

    # Shipment
    weight = float(input("\nWeight (kg): "))
    value = float(input("Merchandise value: "))
    hazardous = ask_yes_no("Hazardous / chemical goods?")
    difficult_delivery = ask_yes_no("Difficult delivery (TDE)?")

    return PricingRequest(
        origin_region=origin_region,
        origin_class=origin_class,
        dest_region=dest_region,
        dest_class=dest_class,
        weight_kg=weight,
        merchandise_value=value,
        hazardous=hazardous,
        difficult_delivery=difficult_delivery,
    )


def print_results(breakdown, request: PricingRequest, gross_up: bool) -> None:
    """Print calculation results."""
    print("\n" + "=" * 50)
    print("CALCULATION RESULTS")
    print("=" * 50)

    # Input summary
    print(f"\nRoute: {request.origin_region} {request.origin_class} -> "
          f"{request.dest_region} {request.dest_class}")
    print(f"Shipment: {request.weight_kg} kg, value {request.merchandise_value:.2f}")
    print(f"ICMS gross-up: {'yes (/' + str(ICMS_DIVISOR) + ')' if gross_up else 'no'}")

    # Cost breakdown
    print("\n--- Cost Breakdown ---")
    print(f"Weight charge:      {breakdown.weight:>10}")
    print(f"Ad valorem:         {breakdown.ad_valorem:>10}")
    print(f"Dispatch:           {breakdown.dispatch:>10}")
    print(f"Toll:               {breakdown.toll:>10}")

    if request.hazardous:
        print(f"Hazardous goods:    {breakdown.hazardous:>10}")
    if request.difficult_delivery:
        print(f"TDE 1:              {breakdown.tde1:>10}")
        print(f"TDE 2:              {breakdown.tde2:>10}")

    print(f"                    {'=' * 10}")
    print(f"TOTAL:              {breakdown.total:>10}")
    print()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Martis freight calculator")
    parser.add_argument("--icms", action="store_true",
                        help=f"Gross up charges for ICMS (divide by {ICMS_DIVISOR})")
    parser.add_argument("--tariffs", help="Tariff CSV (default: reference tariffs.csv)")
    args = parser.parse_args()

    print("\n=== Martis Freight Calculator ===")
    print(f"Version: {VERSION}")

    try:
        repository = (
            TariffRepository.from_csv(args.tariffs) if args.tariffs else TariffRepository()
        )
        engine = PricingEngine(repository, ICMS_DIVISOR if args.icms else None)

        # Get user input
        request = get_user_input(repository)

        # Run through pipeline
        breakdown = engine.compute(request)

        # Print results
        print_results(breakdown, request, args.icms)

    except KeyboardInterrupt:
        print("\n\nCancelled.")
    except Exception as e:
        print(f"\nError: {e}")
        raise


if __name__ == "__main__":
    main()
