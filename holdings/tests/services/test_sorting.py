"""
Tests for position ordering.

Tests: holdings/services/valuation/sorting.py
"""

from decimal import Decimal

import pytest

from holdings.domain.holdings import HoldingGroup
from holdings.domain.money import ValueIn
from holdings.services.valuation.sorting import PositionSorter
from holdings.services.valuation.types import SortConfig, SortDirection, SortKey

from ..factories import AssetFactory, PositionFactory, QuantityValuesFactory


def _codes(group: HoldingGroup) -> list[str]:
    return [p.asset.code for p in group.positions]


@pytest.mark.unit
@pytest.mark.services
class TestPositionSorter:
    @pytest.fixture
    def sorter(self) -> PositionSorter:
        return PositionSorter()

    @pytest.fixture
    def mixed_group(self) -> HoldingGroup:
        return HoldingGroup(
            positions=(
                PositionFactory(
                    asset=AssetFactory(cash=True, code="USD"), market_value=Decimal("10000")
                ),
                PositionFactory(
                    asset=AssetFactory(code="AAPL", name="Apple"), market_value=Decimal("5000")
                ),
                PositionFactory(
                    asset=AssetFactory(code="MSFT", name="Microsoft"), market_value=Decimal("3000")
                ),
            )
        )

    def test_market_value_descending_puts_cash_last(
        self, sorter: PositionSorter, mixed_group: HoldingGroup
    ) -> None:
        result = sorter.sort_positions(
            mixed_group, SortConfig(SortKey.MARKET_VALUE, SortDirection.DESC), ValueIn.PORTFOLIO
        )
        assert _codes(result) == ["AAPL", "MSFT", "USD"]

    @pytest.mark.parametrize("key", [k.value for k in SortKey] + ["bogus"])
    @pytest.mark.parametrize("direction", list(SortDirection))
    def test_cash_is_always_last(
        self, sorter: PositionSorter, mixed_group: HoldingGroup, key: str, direction: SortDirection
    ) -> None:
        result = sorter.sort_positions(mixed_group, SortConfig(key, direction), ValueIn.PORTFOLIO)

        flags = [p.asset.is_cash_related for p in result.positions]
        assert flags == sorted(flags)

    def test_none_key_returns_group_unchanged(
        self, sorter: PositionSorter, mixed_group: HoldingGroup
    ) -> None:
        result = sorter.sort_positions(mixed_group, SortConfig(key=None), ValueIn.PORTFOLIO)
        assert result is mixed_group

    def test_asset_name_is_case_insensitive(self, sorter: PositionSorter) -> None:
        group = HoldingGroup(
            positions=(
                PositionFactory(asset=AssetFactory(code="B", name="banana")),
                PositionFactory(asset=AssetFactory(code="A", name="Apple")),
                PositionFactory(asset=AssetFactory(code="C", name="cherry")),
            )
        )
        result = sorter.sort_positions(group, SortConfig(SortKey.ASSET_NAME), ValueIn.PORTFOLIO)
        assert _codes(result) == ["A", "B", "C"]

    def test_unknown_key_orders_by_asset_code(self, sorter: PositionSorter) -> None:
        group = HoldingGroup(
            positions=(
                PositionFactory(asset=AssetFactory(code="msft", name="A")),
                PositionFactory(asset=AssetFactory(code="AAPL", name="Z")),
            )
        )
        result = sorter.sort_positions(group, SortConfig("notAColumn"), ValueIn.PORTFOLIO)
        assert _codes(result) == ["AAPL", "msft"]

    def test_quantity(self, sorter: PositionSorter) -> None:
        group = HoldingGroup(
            positions=(
                PositionFactory(
                    asset=AssetFactory(code="A"),
                    quantity_values=QuantityValuesFactory(total=Decimal("5")),
                ),
                PositionFactory(
                    asset=AssetFactory(code="B"),
                    quantity_values=QuantityValuesFactory(total=Decimal("50")),
                ),
            )
        )
        result = sorter.sort_positions(
            group, SortConfig(SortKey.QUANTITY, SortDirection.DESC), ValueIn.PORTFOLIO
        )
        assert _codes(result) == ["B", "A"]

    def test_unpriced_sorts_as_zero_price(self, sorter: PositionSorter) -> None:
        group = HoldingGroup(
            positions=(
                PositionFactory(asset=AssetFactory(code="PRICED"), price=Decimal("10")),
                PositionFactory(asset=AssetFactory(code="PRIVATE"), priced=False),
            )
        )
        result = sorter.sort_positions(group, SortConfig(SortKey.PRICE), ValueIn.PORTFOLIO)
        assert _codes(result) == ["PRIVATE", "PRICED"]

    def test_reads_requested_perspective(self, sorter: PositionSorter) -> None:
        group = HoldingGroup(
            positions=(
                PositionFactory(asset=AssetFactory(code="A"), irr=Decimal("0.05")),
                PositionFactory(asset=AssetFactory(code="B"), irr=Decimal("0.15")),
                PositionFactory(asset=AssetFactory(code="C"), perspectives=(ValueIn.PORTFOLIO,)),
            )
        )
        result = sorter.sort_positions(
            group, SortConfig(SortKey.IRR, SortDirection.DESC), ValueIn.BASE
        )
        assert _codes(result) == ["B", "A", "C"]

    def test_subtotals_are_carried(self, sorter: PositionSorter, mixed_group: HoldingGroup) -> None:
        result = sorter.sort_positions(mixed_group, SortConfig(), ValueIn.PORTFOLIO)
        assert result.sub_totals is mixed_group.sub_totals
        assert result is not mixed_group
