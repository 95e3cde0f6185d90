"""
Tests for the valuation engine facade and package-level helpers.

Tests: holdings/services/valuation/engine.py, holdings/services/valuation/__init__.py
"""

from decimal import Decimal
from unittest.mock import Mock

import pytest

from holdings.domain.money import ValueIn
from holdings.domain.positions import HoldingContract
from holdings.services import valuation
from holdings.services.valuation.engine import ValuationEngine
from holdings.services.valuation.types import (
    GroupBy,
    GroupingMode,
    SortConfig,
    SortDirection,
    SortKey,
)


@pytest.mark.unit
@pytest.mark.services
class TestValuationEngine:
    @pytest.fixture
    def engine(self) -> ValuationEngine:
        return ValuationEngine()

    def test_build_holdings_sorts_every_group(
        self, engine: ValuationEngine, scenario_contract: HoldingContract
    ) -> None:
        holdings = engine.build_holdings(
            scenario_contract,
            hide_empty=False,
            value_in=ValueIn.PORTFOLIO,
            group_by=GroupBy.ASSET_CLASS,
            sort_config=SortConfig(SortKey.MARKET_VALUE, SortDirection.ASC),
        )
        equity = [p.asset.code for p in holdings.holding_groups["Equity"].positions]
        assert equity == ["MSFT", "AAPL"]

    def test_sort_with_none_key_is_identity(
        self, engine: ValuationEngine, scenario_contract: HoldingContract
    ) -> None:
        holdings = engine.calculate_holdings(
            scenario_contract, True, ValueIn.PORTFOLIO, GroupBy.ASSET_CLASS
        )
        assert engine.sort_holdings(holdings, SortConfig(key=None)) is holdings

    def test_build_allocation_rescales_then_merges(
        self, engine: ValuationEngine, scenario_contract: HoldingContract
    ) -> None:
        slices = engine.build_allocation(
            scenario_contract,
            grouping_mode=GroupingMode.CATEGORY,
            value_in=ValueIn.PORTFOLIO,
            fx_rate=Decimal("2"),
            manual_assets={"CASH": Decimal("500")},
        )
        # Manual values are entered in the display currency and are not rescaled
        assert [(s.key, s.value) for s in slices] == [("Equity", 16000.0), ("Cash", 2500.0)]
        assert sum(s.percentage for s in slices) == pytest.approx(100.0)

    def test_uses_injected_collaborators(self, scenario_contract: HoldingContract) -> None:
        calculator = Mock()
        engine = ValuationEngine(calculator=calculator)
        engine.calculate_holdings(scenario_contract, True, ValueIn.BASE, GroupBy.MARKET)
        calculator.calculate_holdings.assert_called_once_with(
            scenario_contract, True, ValueIn.BASE, GroupBy.MARKET
        )


@pytest.mark.unit
@pytest.mark.services
class TestConvenienceFunctions:
    def test_calculate_holdings(self, scenario_contract: HoldingContract) -> None:
        holdings = valuation.calculate_holdings(
            scenario_contract, True, ValueIn.PORTFOLIO, GroupBy.ASSET_CLASS
        )
        assert holdings.totals[ValueIn.PORTFOLIO].market_value == Decimal("9000")

    def test_sort_positions(self, scenario_contract: HoldingContract) -> None:
        holdings = valuation.calculate_holdings(
            scenario_contract, False, ValueIn.PORTFOLIO, GroupBy.MARKET
        )
        group = holdings.holding_groups["NASDAQ"]
        result = valuation.sort_positions(
            group, SortConfig(SortKey.ASSET_NAME, SortDirection.DESC), ValueIn.PORTFOLIO
        )
        assert [p.asset.name for p in result.positions] == ["Microsoft", "Apple"]

    def test_transform_and_rescale(self, scenario_contract: HoldingContract) -> None:
        slices = valuation.transform_to_allocation_slices(
            scenario_contract, GroupingMode.CATEGORY, ValueIn.PORTFOLIO
        )
        rescaled = valuation.apply_fx_rate(slices, 0.5)
        assert [s.value for s in rescaled] == [4000.0, 500.0]
