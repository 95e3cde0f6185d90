"""Main valuation engine using composition."""

from dataclasses import replace
from decimal import Decimal

import structlog

from holdings.domain.holdings import AllocationSlice, Holdings
from holdings.domain.money import ValueIn
from holdings.domain.positions import HoldingContract

from .allocation import AllocationTransformer
from .calculations import HoldingsCalculator
from .sorting import PositionSorter
from .types import GroupBy, GroupingMode, ManualAssets, SortConfig

logger = structlog.get_logger(__name__)


class ValuationEngine:
    """
    Main engine for holdings valuation.

    Uses composition pattern with injected dependencies.
    """

    def __init__(
        self,
        calculator: HoldingsCalculator | None = None,
        sorter: PositionSorter | None = None,
        transformer: AllocationTransformer | None = None,
    ):
        self.calculator = calculator or HoldingsCalculator()
        self.sorter = sorter or PositionSorter()
        self.transformer = transformer or AllocationTransformer()

    def calculate_holdings(
        self,
        contract: HoldingContract,
        hide_empty: bool,
        value_in: ValueIn,
        group_by: GroupBy,
    ) -> Holdings:
        return self.calculator.calculate_holdings(contract, hide_empty, value_in, group_by)

    def sort_holdings(self, holdings: Holdings, sort_config: SortConfig) -> Holdings:
        """Apply ``sort_config`` to every group, keeping group order."""
        if sort_config.key is None:
            return holdings

        groups = {
            key: self.sorter.sort_positions(group, sort_config, holdings.value_in)
            for key, group in holdings.holding_groups.items()
        }
        return replace(holdings, holding_groups=groups)

    def build_holdings(
        self,
        contract: HoldingContract,
        hide_empty: bool,
        value_in: ValueIn,
        group_by: GroupBy,
        sort_config: SortConfig,
    ) -> Holdings:
        """Grouped, totalled and sorted holdings in one pass."""
        holdings = self.calculate_holdings(contract, hide_empty, value_in, group_by)
        return self.sort_holdings(holdings, sort_config)

    def build_allocation(
        self,
        contract: HoldingContract,
        grouping_mode: GroupingMode,
        value_in: ValueIn,
        fx_rate: Decimal | None = None,
        manual_assets: ManualAssets | None = None,
    ) -> list[AllocationSlice]:
        """
        Allocation slices for a contract, optionally rescaled and merged.

        Args:
            contract: Position feed
            grouping_mode: Allocation bucket axis
            value_in: Perspective to read market values from
            fx_rate: Multiplier into the display currency, applied after aggregation
            manual_assets: Manually entered category values to merge in

        Returns:
            Slices sorted by value, largest first
        """
        slices = self.transformer.transform_to_allocation_slices(contract, grouping_mode, value_in)
        if fx_rate is not None and fx_rate != 1:
            slices = self.transformer.apply_fx_rate(slices, fx_rate)

        manual_slices = self.transformer.manual_assets_to_slices(manual_assets)
        if manual_slices:
            slices = self.transformer.merge_allocation_slices(slices, manual_slices)
            logger.debug(
                "manual_assets_merged",
                portfolio=contract.portfolio.code,
                manual_count=len(manual_slices),
                slice_count=len(slices),
            )
        return slices
