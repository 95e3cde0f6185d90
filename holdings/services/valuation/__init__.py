"""
Holdings valuation and aggregation.

Public API:
    - calculate_holdings(contract, hide_empty, value_in, group_by) -> Holdings
    - sort_positions(group, sort_config, value_in) -> HoldingGroup
    - transform_to_allocation_slices(contract, grouping_mode, value_in) -> list[AllocationSlice]
    - parse_holding_contract(payload) -> HoldingContract
"""

from decimal import Decimal

from holdings.domain.holdings import AllocationSlice, HoldingGroup, Holdings
from holdings.domain.money import ValueIn
from holdings.domain.positions import HoldingContract

from .contract_parser import parse_holding_contract
from .types import (
    GroupBy,
    GroupingMode,
    ManualAssets,
    SortConfig,
    SortDirection,
    SortKey,
    ViewMode,
)

__all__ = [
    "GroupBy",
    "GroupingMode",
    "ManualAssets",
    "SortConfig",
    "SortDirection",
    "SortKey",
    "ValueIn",
    "ViewMode",
    "parse_holding_contract",
]


def calculate_holdings(
    contract: HoldingContract,
    hide_empty: bool,
    value_in: ValueIn,
    group_by: GroupBy,
) -> Holdings:
    """Group a contract and accumulate subtotals and totals."""
    from .calculations import HoldingsCalculator

    return HoldingsCalculator().calculate_holdings(contract, hide_empty, value_in, group_by)


def sort_positions(group: HoldingGroup, sort_config: SortConfig, value_in: ValueIn) -> HoldingGroup:
    """Order one group's positions, cash last."""
    from .sorting import PositionSorter

    return PositionSorter().sort_positions(group, sort_config, value_in)


def transform_to_allocation_slices(
    contract: HoldingContract,
    grouping_mode: GroupingMode,
    value_in: ValueIn,
) -> list[AllocationSlice]:
    """Percentage-of-total slices for charts."""
    from .allocation import AllocationTransformer

    return AllocationTransformer().transform_to_allocation_slices(contract, grouping_mode, value_in)


def apply_fx_rate(slices: list[AllocationSlice], rate: Decimal | float) -> list[AllocationSlice]:
    """Rescale slice amounts into a display currency."""
    from .allocation import AllocationTransformer

    return AllocationTransformer().apply_fx_rate(slices, rate)


__all__.extend(
    [
        "apply_fx_rate",
        "calculate_holdings",
        "sort_positions",
        "transform_to_allocation_slices",
    ]
)
