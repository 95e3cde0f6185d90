"""
Tests for allocation slices.

Tests: holdings/services/valuation/allocation.py
"""

from decimal import Decimal

import pytest

from holdings.domain.holdings import AllocationSlice
from holdings.domain.money import ValueIn
from holdings.domain.positions import HoldingContract
from holdings.services.valuation.allocation import (
    CATEGORY_COLORS,
    FALLBACK_COLORS,
    AllocationTransformer,
    parse_manual_assets,
    slice_color,
)
from holdings.services.valuation.types import GroupingMode

from ..conftest import build_contract
from ..factories import AssetCategoryFactory, AssetFactory, MarketFactory, PositionFactory


@pytest.fixture
def transformer() -> AllocationTransformer:
    return AllocationTransformer()


@pytest.mark.unit
@pytest.mark.services
class TestTransformToAllocationSlices:
    def test_category_slices(
        self, transformer: AllocationTransformer, scenario_contract: HoldingContract
    ) -> None:
        slices = transformer.transform_to_allocation_slices(
            scenario_contract, GroupingMode.CATEGORY, ValueIn.PORTFOLIO
        )

        assert [(s.key, s.value) for s in slices] == [("Equity", 8000.0), ("Cash", 1000.0)]
        assert slices[0].percentage == pytest.approx(8000 / 9000 * 100)
        assert slices[0].color == CATEGORY_COLORS["Equity"]

    @pytest.mark.parametrize("mode", list(GroupingMode))
    def test_percentages_sum_to_100(
        self,
        transformer: AllocationTransformer,
        scenario_contract: HoldingContract,
        mode: GroupingMode,
    ) -> None:
        slices = transformer.transform_to_allocation_slices(
            scenario_contract, mode, ValueIn.PORTFOLIO
        )
        assert sum(s.percentage for s in slices) == pytest.approx(100.0)

    def test_non_positive_buckets_are_dropped(self, transformer: AllocationTransformer) -> None:
        bonds = AssetCategoryFactory(id="BOND", name="Bond")
        contract = build_contract(
            PositionFactory(market_value=Decimal("500")),
            PositionFactory(asset=AssetFactory(asset_category=bonds), market_value=Decimal("0")),
            PositionFactory(asset=AssetFactory(sector="Loans"), market_value=Decimal("-50")),
        )

        by_category = transformer.transform_to_allocation_slices(
            contract, GroupingMode.CATEGORY, ValueIn.PORTFOLIO
        )
        assert [s.key for s in by_category] == ["Equity"]
        assert by_category[0].value == 450.0
        assert by_category[0].percentage == pytest.approx(100.0)

        by_sector = transformer.transform_to_allocation_slices(
            contract, GroupingMode.SECTOR, ValueIn.PORTFOLIO
        )
        assert [s.key for s in by_sector] == ["Technology"]

    def test_irr_is_value_weighted(self, transformer: AllocationTransformer) -> None:
        contract = build_contract(
            PositionFactory(market_value=Decimal("1000"), irr=Decimal("0.10")),
            PositionFactory(market_value=Decimal("3000"), irr=Decimal("0.20")),
        )
        slices = transformer.transform_to_allocation_slices(
            contract, GroupingMode.CATEGORY, ValueIn.PORTFOLIO
        )
        assert slices[0].irr == pytest.approx(0.175)

    def test_gain_on_day_is_summed(self, transformer: AllocationTransformer) -> None:
        contract = build_contract(
            PositionFactory(gain_on_day=Decimal("10")),
            PositionFactory(gain_on_day=Decimal("-4")),
        )
        slices = transformer.transform_to_allocation_slices(
            contract, GroupingMode.CATEGORY, ValueIn.PORTFOLIO
        )
        assert slices[0].gain_on_day == pytest.approx(6.0)

    def test_asset_mode_uses_name_as_label(self, transformer: AllocationTransformer) -> None:
        contract = build_contract(PositionFactory(asset=AssetFactory(code="AAPL", name="Apple")))
        slices = transformer.transform_to_allocation_slices(
            contract, GroupingMode.ASSET, ValueIn.PORTFOLIO
        )
        assert (slices[0].key, slices[0].label) == ("AAPL", "Apple")

    def test_market_mode(self, transformer: AllocationTransformer) -> None:
        contract = build_contract(
            PositionFactory(asset=AssetFactory(market=MarketFactory(code="SGX"))),
            PositionFactory(asset=AssetFactory(market=None), market_value=Decimal("2000")),
        )
        slices = transformer.transform_to_allocation_slices(
            contract, GroupingMode.MARKET, ValueIn.PORTFOLIO
        )
        assert [s.key for s in slices] == ["Unclassified", "SGX"]

    def test_skips_positions_without_perspective(self, transformer: AllocationTransformer) -> None:
        contract = build_contract(
            PositionFactory(market_value=Decimal("100")),
            PositionFactory(market_value=Decimal("900"), perspectives=(ValueIn.PORTFOLIO,)),
        )
        slices = transformer.transform_to_allocation_slices(
            contract, GroupingMode.CATEGORY, ValueIn.BASE
        )
        assert slices[0].value == 100.0

    @pytest.mark.edge_cases
    def test_empty_contract(self, transformer: AllocationTransformer) -> None:
        assert transformer.transform_to_allocation_slices(
            build_contract(), GroupingMode.CATEGORY, ValueIn.PORTFOLIO
        ) == []


@pytest.mark.unit
@pytest.mark.services
class TestApplyFxRate:
    @pytest.fixture
    def slices(
        self, transformer: AllocationTransformer, scenario_contract: HoldingContract
    ) -> list[AllocationSlice]:
        return transformer.transform_to_allocation_slices(
            scenario_contract, GroupingMode.CATEGORY, ValueIn.PORTFOLIO
        )

    def test_rate_of_one_is_identity(
        self, transformer: AllocationTransformer, slices: list[AllocationSlice]
    ) -> None:
        assert transformer.apply_fx_rate(slices, Decimal("1")) == slices

    def test_scales_values_not_percentages(
        self, transformer: AllocationTransformer, slices: list[AllocationSlice]
    ) -> None:
        rescaled = transformer.apply_fx_rate(slices, Decimal("1.35"))

        for before, after in zip(slices, rescaled, strict=True):
            assert after.value == pytest.approx(before.value * 1.35)
            assert after.gain_on_day == pytest.approx(before.gain_on_day * 1.35)
            assert after.percentage == before.percentage
            assert after.key == before.key


@pytest.mark.unit
@pytest.mark.services
class TestManualAssets:
    def test_known_categories_take_report_labels(self, transformer: AllocationTransformer) -> None:
        slices = transformer.manual_assets_to_slices(
            {"RE": Decimal("300000"), "CASH": Decimal("100000")}
        )
        assert [(s.key, s.percentage) for s in slices] == [("Property", 75.0), ("Cash", 25.0)]
        assert slices[0].color == CATEGORY_COLORS["Property"]

    def test_unknown_category_keeps_its_name(self, transformer: AllocationTransformer) -> None:
        slices = transformer.manual_assets_to_slices({"Art": Decimal("5000")})
        assert slices[0].label == "Art"
        assert slices[0].color in FALLBACK_COLORS

    def test_non_positive_values_are_omitted(self, transformer: AllocationTransformer) -> None:
        slices = transformer.manual_assets_to_slices(
            {"CASH": Decimal("0"), "EQUITY": Decimal("-5"), "ETF": Decimal("100")}
        )
        assert [s.key for s in slices] == ["ETF"]

    def test_none_gives_no_slices(self, transformer: AllocationTransformer) -> None:
        assert transformer.manual_assets_to_slices(None) == []

    def test_merge_sums_shared_keys(
        self, transformer: AllocationTransformer, scenario_contract: HoldingContract
    ) -> None:
        position_slices = transformer.transform_to_allocation_slices(
            scenario_contract, GroupingMode.CATEGORY, ValueIn.PORTFOLIO
        )
        manual_slices = transformer.manual_assets_to_slices(
            {"CASH": Decimal("1000"), "RE": Decimal("2000")}
        )

        merged = transformer.merge_allocation_slices(position_slices, manual_slices)

        assert [(s.key, s.value) for s in merged] == [
            ("Equity", 8000.0),
            ("Cash", 2000.0),
            ("Property", 2000.0),
        ]
        assert sum(s.percentage for s in merged) == pytest.approx(100.0)
        assert merged[0].percentage == pytest.approx(8000 / 12000 * 100)

    def test_merge_keeps_category_positive_in_one_source(
        self, transformer: AllocationTransformer
    ) -> None:
        empty_cash = [AllocationSlice("Cash", "Cash", 0.0, 0.0, CATEGORY_COLORS["Cash"])]
        manual = transformer.manual_assets_to_slices({"CASH": Decimal("50")})

        merged = transformer.merge_allocation_slices(empty_cash, manual)

        assert [(s.key, s.value, s.percentage) for s in merged] == [("Cash", 50.0, 100.0)]

    def test_merge_weights_irr(self, transformer: AllocationTransformer) -> None:
        a = [AllocationSlice("Equity", "Equity", 100.0, 100.0, "#000", irr=0.1)]
        b = [AllocationSlice("Equity", "Equity", 300.0, 100.0, "#000", irr=0.0)]
        merged = transformer.merge_allocation_slices(a, b)
        assert merged[0].irr == pytest.approx(0.025)


@pytest.mark.unit
@pytest.mark.services
class TestParseManualAssets:
    def test_json_text(self) -> None:
        assert parse_manual_assets('{"CASH": 1000, "RE": "250000.50"}') == {
            "CASH": Decimal("1000"),
            "RE": Decimal("250000.50"),
        }

    def test_mapping(self) -> None:
        assert parse_manual_assets({"EQUITY": 12.5}) == {"EQUITY": Decimal("12.5")}

    @pytest.mark.edge_cases
    @pytest.mark.parametrize("raw", [None, "", "{not json", "[1, 2]"])
    def test_unusable_input_is_none(self, raw) -> None:
        assert parse_manual_assets(raw) is None

    @pytest.mark.edge_cases
    def test_invalid_values_are_skipped(self) -> None:
        assert parse_manual_assets({"CASH": "lots", "ETF": 10}) == {"ETF": Decimal("10")}

    @pytest.mark.edge_cases
    def test_non_finite_values_are_skipped(self) -> None:
        raw = '{"CASH": NaN, "RE": "Infinity", "EQUITY": "sNaN", "ETF": 10}'
        assert parse_manual_assets(raw) == {"ETF": Decimal("10")}


@pytest.mark.unit
@pytest.mark.services
class TestSliceColor:
    def test_known_category_colour(self) -> None:
        assert slice_color("Cash") == CATEGORY_COLORS["Cash"]

    def test_colour_is_stable_per_key(self) -> None:
        assert slice_color("Technology") == slice_color("Technology")
        assert slice_color("Technology") in FALLBACK_COLORS
