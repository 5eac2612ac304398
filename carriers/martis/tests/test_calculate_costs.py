"""
Unit Tests for Martis Freight Cost Calculator

Tests the full pipeline against the reference tariff table: base charge,
surcharges, gross-up, totals, batch behaviour and error handling.

Run with: pytest carriers/martis/tests/test_calculate_costs.py -v
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
import polars as pl

from carriers.martis.calculate_costs import (
    calculate_costs,
    supplement_shipments,
    calculate,
    price_shipment,
    PricingEngine,
)
from carriers.martis.columns import AFTER_CALCULATE, COST_COLS
from carriers.martis.data import ICMS_DIVISOR
from carriers.martis.request import (
    PricingRequest,
    PricingBreakdown,
    InvalidInput,
    COMPONENTS,
    quantize_weight,
)
from carriers.martis.tariffs import TariffRepository, RouteNotFound, ROUTE_NOT_FOUND
from carriers.martis.version import VERSION


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture(scope="module")
def repository():
    """Repository over the reference tariff table."""
    return TariffRepository()


@pytest.fixture
def base_shipment():
    """Light shipment inside ES with no optional surcharges."""
    return pl.DataFrame({
        "origin_region": ["ES"],
        "origin_class": ["CAPITAL"],
        "dest_region": ["ES"],
        "dest_class": ["CAPITAL"],
        "weight_kg": [5.0],
        "merchandise_value": [1000.0],
    })


@pytest.fixture
def heavy_request():
    """580 kg shipment MG METROPOLITANA -> SP CAPITAL (per-kg band over 200)."""
    return PricingRequest("MG", "METROPOLITANA", "SP", "CAPITAL", 580, 17500)


def run_pipeline(df: pl.DataFrame, gross_up_divisor=None) -> pl.DataFrame:
    """Helper to run full pipeline."""
    df = supplement_shipments(df)
    df = calculate(df, gross_up_divisor)
    return df


def with_values(df: pl.DataFrame, **values) -> pl.DataFrame:
    """Replace columns of a one-row shipment."""
    return df.with_columns([pl.lit(v).alias(k) for k, v in values.items()])


# =============================================================================
# SUPPLEMENT TESTS
# =============================================================================

class TestSupplementShipments:
    """Tests for supplement_shipments."""

    def test_weight_quantised_to_grams(self, base_shipment):
        """Weight is held in whole grams."""
        df = supplement_shipments(with_values(base_shipment, weight_kg=10.0004))
        assert df["weight_g"][0] == 10000

    def test_request_weight_rounds_half_up(self):
        """Half a gram rounds up (requests quantise from the decimal text)."""
        assert quantize_weight(10.0005) == 10001
        assert quantize_weight("10.0004") == 10000

    def test_value_quantised_to_cents(self, base_shipment):
        """Merchandise value is held in whole cents."""
        df = supplement_shipments(with_values(base_shipment, merchandise_value=17500.0))
        assert df["merchandise_value_cents"][0] == 1_750_000

    def test_flags_default_to_false(self, base_shipment):
        """Missing optional flags are added as False."""
        df = supplement_shipments(base_shipment)
        assert df["hazardous"][0] == False
        assert df["difficult_delivery"][0] == False

    def test_tariff_joined(self, base_shipment):
        """Route tariff columns are joined onto the shipment."""
        df = supplement_shipments(base_shipment)
        assert df["weight_0_10"][0] == 2150
        assert df["dispatch_fee"][0] == 1250

    def test_route_labels_stripped(self, base_shipment):
        """Surrounding whitespace in route labels does not break the lookup."""
        df = supplement_shipments(with_values(base_shipment, origin_class=" CAPITAL "))
        assert df["origin_class"][0] == "CAPITAL"
        assert df["weight_0_10"][0] == 2150


# =============================================================================
# BASE CHARGE TESTS
# =============================================================================

class TestBaseCharge:
    """Tests for weight band resolution through the pipeline."""

    def test_flat_band(self, base_shipment):
        """5 kg uses the flat 0-10 band."""
        df = run_pipeline(base_shipment)
        assert df["weight_band"][0] == "weight_0_10"
        assert df["weight_cents"][0] == 2150

    def test_band_boundary_inclusive(self, base_shipment):
        """10 kg is still in the first band; 10.01 kg moves to the next."""
        df = run_pipeline(pl.concat([
            with_values(base_shipment, weight_kg=10.0),
            with_values(base_shipment, weight_kg=10.01),
        ]))
        assert df["weight_band"].to_list() == ["weight_0_10", "weight_11_20"]
        assert df["weight_cents"].to_list() == [2150, 2580]

    def test_per_kg_band_uses_actual_weight(self, base_shipment):
        """Above 200 kg the rate is multiplied by the actual weight."""
        df = run_pipeline(with_values(base_shipment, weight_kg=300.0))
        # 42 cents/kg * 300 kg
        assert df["weight_band"][0] == "weight_over_200"
        assert df["weight_cents"][0] == 12600


# =============================================================================
# SURCHARGE TESTS
# =============================================================================

class TestSurcharges:
    """Tests for surcharge application on the reference table."""

    def test_ad_valorem_minimum(self, base_shipment):
        """1000.00 at 0.30% is 3.00, below the 8.50 minimum."""
        df = run_pipeline(base_shipment)
        assert df["ad_valorem_cents"][0] == 850

    def test_ad_valorem_percentage(self, base_shipment):
        """100000.00 at 0.30% is 300.00."""
        df = run_pipeline(with_values(base_shipment, merchandise_value=100000.0))
        assert df["ad_valorem_cents"][0] == 30000

    def test_dispatch_always_applies(self, base_shipment):
        """Dispatch fee is charged on every shipment."""
        df = run_pipeline(base_shipment)
        assert df["surcharge_dispatch"][0] == True
        assert df["dispatch_cents"][0] == 1250

    def test_toll_flat_up_to_100kg(self, base_shipment):
        """Up to 100 kg toll is the flat amount, not multiplied by weight."""
        df = run_pipeline(base_shipment)
        assert df["toll_cents"][0] == 219

    def test_optional_surcharges_off_by_default(self, base_shipment):
        """Hazardous and TDE cost 0 without their flags."""
        df = run_pipeline(base_shipment)
        for component in ["hazardous", "tde1", "tde2"]:
            assert df[f"surcharge_{component}"][0] == False
            assert df[f"{component}_cents"][0] == 0

    def test_hazardous_percentage(self, base_shipment):
        """25% of 21.50 is 5.375, rounded half-up to 5.38 (above the 2.19 floor)."""
        df = run_pipeline(with_values(base_shipment, hazardous=True))
        assert df["surcharge_hazardous"][0] == True
        assert df["hazardous_cents"][0] == 538

    def test_difficult_delivery_minimums(self, base_shipment):
        """40% of 21.50 is below both TDE minimums of 35.00."""
        df = run_pipeline(with_values(base_shipment, difficult_delivery=True))
        assert df["tde1_cents"][0] == 3500
        assert df["tde2_cents"][0] == 3500

    def test_tde1_capped_tde2_not(self):
        """2500 kg: 40% of 1275.00 is 510.00; TDE1 caps at 450.00, TDE2 does not."""
        df = run_pipeline(pl.DataFrame({
            "origin_region": ["MG"],
            "origin_class": ["METROPOLITANA"],
            "dest_region": ["SP"],
            "dest_class": ["CAPITAL"],
            "weight_kg": [2500.0],
            "merchandise_value": [0.0],
            "difficult_delivery": [True],
        }))
        assert df["weight_cents"][0] == 127500
        assert df["tde1_cents"][0] == 45000
        assert df["tde2_cents"][0] == 51000


# =============================================================================
# TOTAL TESTS
# =============================================================================

class TestTotals:
    """Tests for totals and major-unit output."""

    def test_total_is_sum_of_components(self, base_shipment):
        """total_cents equals the sum of every component."""
        df = run_pipeline(with_values(base_shipment, hazardous=True, difficult_delivery=True))
        row = df.row(0, named=True)
        assert row["total_cents"] == sum(row[f"{c}_cents"] for c in COMPONENTS)

    def test_base_shipment_total(self, base_shipment):
        """21.50 + 8.50 + 12.50 + 2.19 = 44.69."""
        df = run_pipeline(base_shipment)
        assert df["total_cents"][0] == 4469
        assert df["cost_total"][0] == pytest.approx(44.69)

    def test_output_columns(self, base_shipment):
        """Every documented output column is present."""
        df = calculate_costs(base_shipment)
        missing = [c for c in AFTER_CALCULATE if c not in df.columns]
        assert missing == []

    def test_cost_columns_match_cents(self, base_shipment):
        """cost_* columns are the cents columns in major units."""
        df = calculate_costs(with_values(base_shipment, hazardous=True))
        for c in COMPONENTS + ["total"]:
            assert df[f"cost_{c}"][0] == pytest.approx(df[f"{c}_cents"][0] / 100)


# =============================================================================
# GROSS-UP TESTS
# =============================================================================

class TestGrossUp:
    """Tests for the optional ICMS gross-up."""

    def test_without_gross_up(self, heavy_request):
        """Default prices without gross-up."""
        result = price_shipment(heavy_request)
        assert result.weight == Decimal("295.80")
        assert result.ad_valorem == Decimal("61.25")
        assert result.dispatch == Decimal("18.56")
        assert result.toll == Decimal("11.60")
        assert result.total == Decimal("387.21")

    def test_with_icms_gross_up(self, heavy_request):
        """Divisor 0.88 grosses up weight, ad valorem, dispatch and toll."""
        result = price_shipment(heavy_request, gross_up_divisor=ICMS_DIVISOR)
        assert result.weight == Decimal("336.14")
        assert result.ad_valorem == Decimal("69.60")
        assert result.dispatch == Decimal("21.09")
        assert result.toll == Decimal("13.18")
        assert result.hazardous == Decimal("0.00")
        assert result.total == Decimal("440.01")

    def test_hazardous_not_grossed_up(self, heavy_request):
        """Hazardous is 25% of the un-grossed base charge either way."""
        request = heavy_request._replace(hazardous=True)
        plain = price_shipment(request)
        grossed = price_shipment(request, gross_up_divisor=ICMS_DIVISOR)
        # 25% of 295.80
        assert plain.hazardous == Decimal("73.95")
        assert grossed.hazardous == Decimal("73.95")

    def test_divisor_one_is_no_gross_up(self, heavy_request):
        """A divisor of 1 changes nothing."""
        assert price_shipment(heavy_request, gross_up_divisor=Decimal("1")) == \
            price_shipment(heavy_request)

    @pytest.mark.parametrize("divisor", [Decimal("0"), Decimal("-0.5"), Decimal("1.2")])
    def test_invalid_divisor(self, base_shipment, divisor):
        """Divisors outside (0, 1] are rejected."""
        with pytest.raises(ValueError):
            calculate_costs(base_shipment, gross_up_divisor=divisor)

    def test_long_precision_divisor_rejected(self, heavy_request):
        """Divisors with more than four decimal places are rejected, not mispriced."""
        with pytest.raises(ValueError, match="decimal places"):
            price_shipment(heavy_request, gross_up_divisor=Decimal("0.8800000000001"))

    def test_four_place_divisor(self, heavy_request):
        """0.8825: 295.80 / 0.8825 = 335.184 -> 335.18."""
        result = price_shipment(heavy_request, gross_up_divisor=Decimal("0.8825"))
        assert result.weight == Decimal("335.18")

    def test_trailing_zeros_allowed(self, heavy_request):
        """0.88000 is the same divisor as 0.88."""
        assert price_shipment(heavy_request, gross_up_divisor=Decimal("0.88000")).total == \
            Decimal("440.01")


# =============================================================================
# END-TO-END TESTS
# =============================================================================

class TestEndToEnd:
    """580 kg MG METROPOLITANA -> SP CAPITAL with every surcharge switched on."""

    @pytest.fixture
    def full_request(self, heavy_request):
        return heavy_request._replace(hazardous=True, difficult_delivery=True)

    @pytest.mark.parametrize("divisor", [None, ICMS_DIVISOR])
    def test_every_component_non_zero(self, full_request, divisor):
        """All seven components are charged and the total is their exact sum."""
        result = price_shipment(full_request, gross_up_divisor=divisor)
        components = [getattr(result, c) for c in COMPONENTS]
        assert all(c > 0 for c in components)
        assert result.total == sum(components)

    def test_without_gross_up(self, full_request):
        """295.80 + 61.25 + 18.56 + 11.60 + 73.95 + 118.32 + 118.32 = 697.80."""
        result = price_shipment(full_request)
        assert result.hazardous == Decimal("73.95")
        assert result.tde1 == Decimal("118.32")
        assert result.tde2 == Decimal("118.32")
        assert result.total == Decimal("697.80")

    def test_with_icms_gross_up(self, full_request):
        """440.01 grossed-up core plus the same 310.59 of surcharges = 750.60."""
        result = price_shipment(full_request, gross_up_divisor=ICMS_DIVISOR)
        assert result.weight == Decimal("336.14")
        assert result.hazardous == Decimal("73.95")
        assert result.tde1 == Decimal("118.32")
        assert result.tde2 == Decimal("118.32")
        assert result.total == Decimal("750.60")


# =============================================================================
# SINGLE REQUEST TESTS
# =============================================================================

class TestPriceShipment:
    """Tests for price_shipment and PricingEngine."""

    def test_returns_breakdown(self, heavy_request):
        """Result is a PricingBreakdown with two-place Decimals."""
        result = price_shipment(heavy_request)
        assert isinstance(result, PricingBreakdown)
        assert all(v.as_tuple().exponent == -2 for v in result)

    def test_matches_batch(self, repository, heavy_request):
        """Single and batch pricing agree."""
        single = price_shipment(heavy_request, repository)
        df = calculate_costs(heavy_request.to_frame(), repository)
        assert single == PricingBreakdown.from_row(df.row(0, named=True))

    def test_engine_compute(self, repository, heavy_request):
        """PricingEngine applies its configured divisor."""
        engine = PricingEngine(repository, ICMS_DIVISOR)
        assert engine.compute(heavy_request).total == Decimal("440.01")

    def test_engine_rejects_bad_divisor(self, repository):
        """A bad divisor fails when the engine is built."""
        with pytest.raises(ValueError):
            PricingEngine(repository, Decimal("2"))

    def test_engine_concurrent_requests(self, repository, heavy_request):
        """One engine serves concurrent callers with identical results."""
        engine = PricingEngine(repository)
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(engine.compute, [heavy_request] * 8))
        assert len(set(results)) == 1
        assert results[0].total == Decimal("387.21")

    def test_as_dict(self, heavy_request):
        """as_dict gives floats keyed by component."""
        result = price_shipment(heavy_request).as_dict()
        assert result["total"] == pytest.approx(387.21)
        assert list(result) == COMPONENTS + ["total"]


# =============================================================================
# ERROR TESTS
# =============================================================================

class TestErrors:
    """Tests for invalid input and unknown routes."""

    def test_unknown_route(self, heavy_request):
        """Unknown route raises RouteNotFound with the fixed message."""
        request = heavy_request._replace(dest_region="AM")
        with pytest.raises(RouteNotFound) as exc:
            price_shipment(request)
        assert str(exc.value) == ROUTE_NOT_FOUND
        assert "AM" not in str(exc.value)

    def test_unknown_route_in_batch(self, base_shipment):
        """One unknown route fails the whole batch."""
        df = pl.concat([base_shipment, with_values(base_shipment, dest_region="XX")])
        with pytest.raises(RouteNotFound):
            calculate_costs(df)

    def test_missing_column(self, base_shipment):
        """Missing required columns are reported."""
        with pytest.raises(InvalidInput, match="weight_kg"):
            calculate_costs(base_shipment.drop("weight_kg"))

    def test_zero_weight(self, base_shipment):
        """Zero weight is invalid."""
        with pytest.raises(InvalidInput, match="weight_kg"):
            calculate_costs(with_values(base_shipment, weight_kg=0.0))

    def test_negative_value(self, base_shipment):
        """Negative merchandise value is invalid."""
        with pytest.raises(InvalidInput, match="merchandise_value"):
            calculate_costs(with_values(base_shipment, merchandise_value=-1.0))

    def test_invalid_request_lists_every_problem(self):
        """validate() reports all bad fields at once."""
        request = PricingRequest("", "CAPITAL", "ES", "CAPITAL", -1, -5, hazardous="yes")
        with pytest.raises(InvalidInput) as exc:
            price_shipment(request)
        message = str(exc.value)
        assert "origin_region" in message
        assert "weight_kg" in message
        assert "merchandise_value" in message
        assert "hazardous" in message

    def test_weight_below_one_gram(self):
        """Weights that quantise to 0 grams are rejected."""
        with pytest.raises(InvalidInput, match="1 gram"):
            PricingRequest("ES", "CAPITAL", "ES", "CAPITAL", 0.0004, 10).validate()

    def test_non_numeric_weight(self):
        """Non-numeric weights are rejected, not coerced."""
        with pytest.raises(InvalidInput, match="weight_kg"):
            PricingRequest("ES", "CAPITAL", "ES", "CAPITAL", "heavy", 10).validate()


# =============================================================================
# BATCH TESTS
# =============================================================================

class TestBatch:
    """Tests for multi-row behaviour."""

    def test_row_order_preserved(self, base_shipment):
        """Output rows follow input order regardless of route."""
        df = pl.concat([
            with_values(base_shipment, dest_region="SP"),
            base_shipment,
            with_values(base_shipment, dest_region="MG"),
            with_values(base_shipment, dest_class="INTERIOR"),
        ])
        result = calculate_costs(df)
        assert result["dest_region"].to_list() == ["SP", "ES", "MG", "ES"]
        assert result["weight_cents"].to_list() == [3720, 2150, 3180, 2470]

    def test_row_count_preserved(self, base_shipment):
        """Join never multiplies or drops rows."""
        df = pl.concat([base_shipment] * 5)
        assert calculate_costs(df).height == 5

    def test_rows_independent(self, base_shipment):
        """A flag on one row does not affect another."""
        df = pl.concat([
            with_values(base_shipment, hazardous=False),
            with_values(base_shipment, hazardous=True),
        ])
        result = calculate_costs(df)
        assert result["hazardous_cents"].to_list() == [0, 538]

    def test_rerun_is_idempotent(self, base_shipment):
        """Running calculated output through again gives the same costs."""
        df = with_values(base_shipment, hazardous=True, difficult_delivery=True)
        first = calculate_costs(df)
        second = calculate_costs(first)
        assert second.select(COST_COLS).equals(first.select(COST_COLS))

    def test_reprice_after_weight_edit(self, base_shipment):
        """Editing weight_kg on calculated output re-prices at the new weight."""
        first = calculate_costs(base_shipment)
        second = calculate_costs(first.with_columns(pl.lit(300.0).alias("weight_kg")))
        assert second["weight_g"][0] == 300_000
        assert second["weight_band"][0] == "weight_over_200"
        assert second["weight_cents"][0] == 12600

    def test_reprice_after_value_edit(self, base_shipment):
        """Editing merchandise_value on calculated output re-prices ad valorem."""
        first = calculate_costs(base_shipment)
        second = calculate_costs(
            first.with_columns(pl.lit(100000.0).alias("merchandise_value"))
        )
        assert second["merchandise_value_cents"][0] == 10_000_000
        assert second["ad_valorem_cents"][0] == 30000


# =============================================================================
# VERSION STAMP TESTS
# =============================================================================

class TestVersionStamp:
    """Tests for version stamping."""

    def test_version_column_added(self, base_shipment):
        """Output includes calculator_version column."""
        df = calculate_costs(base_shipment)
        assert "calculator_version" in df.columns
        assert df["calculator_version"][0] == VERSION


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
