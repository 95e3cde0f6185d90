"""Ordering of positions within a holding group."""

from collections.abc import Callable
from dataclasses import replace
from decimal import Decimal

from holdings.domain.holdings import HoldingGroup
from holdings.domain.money import MoneyValues, ValueIn
from holdings.domain.positions import Position

from .types import SortConfig, SortDirection, SortKey

ZERO = Decimal("0")

type SortValue = Decimal | str


def _money_field(name: str) -> Callable[[Position, ValueIn], SortValue]:
    def getter(position: Position, value_in: ValueIn) -> SortValue:
        money = position.money(value_in)
        if money is None:
            return ZERO
        return getattr(money, name)

    return getter


def _price_field(name: str) -> Callable[[Position, ValueIn], SortValue]:
    def getter(position: Position, value_in: ValueIn) -> SortValue:
        money: MoneyValues | None = position.money(value_in)
        if money is None or money.price_data is None:
            return ZERO
        return getattr(money.price_data, name)

    return getter


def _asset_name(position: Position, value_in: ValueIn) -> SortValue:
    return (position.asset.name or position.asset.code).casefold()


def _asset_code(position: Position, value_in: ValueIn) -> SortValue:
    return position.asset.code.lower()


def _quantity(position: Position, value_in: ValueIn) -> SortValue:
    return position.quantity_values.total


_SORT_VALUE_ACCESSORS: dict[SortKey, Callable[[Position, ValueIn], SortValue]] = {
    SortKey.ASSET_NAME: _asset_name,
    SortKey.PRICE: _price_field("close"),
    SortKey.CHANGE_PERCENT: _price_field("change_percent"),
    SortKey.GAIN_ON_DAY: _money_field("gain_on_day"),
    SortKey.QUANTITY: _quantity,
    SortKey.COST_VALUE: _money_field("cost_value"),
    SortKey.MARKET_VALUE: _money_field("market_value"),
    SortKey.DIVIDENDS: _money_field("dividends"),
    SortKey.UNREALISED_GAIN: _money_field("unrealised_gain"),
    SortKey.REALISED_GAIN: _money_field("realised_gain"),
    SortKey.IRR: _money_field("irr"),
    SortKey.WEIGHT: _money_field("weight"),
    SortKey.TOTAL_GAIN: _money_field("total_gain"),
}


def sort_value_accessor(key: str) -> Callable[[Position, ValueIn], SortValue]:
    """Accessor for a column id; unknown ids order by asset code."""
    try:
        return _SORT_VALUE_ACCESSORS[SortKey(key)]
    except ValueError:
        return _asset_code


class PositionSorter:
    """Orders a group's positions, always placing cash-related assets last."""

    def sort_positions(
        self,
        group: HoldingGroup,
        sort_config: SortConfig,
        value_in: ValueIn,
    ) -> HoldingGroup:
        """
        Return a new group with positions ordered per ``sort_config``.

        Cash-related positions are partitioned after every other position
        before the requested ordering is applied within each partition, so
        direction never moves cash ahead. A None key returns ``group`` as is.
        """
        if sort_config.key is None:
            return group

        accessor = sort_value_accessor(sort_config.key)
        reverse = sort_config.direction == SortDirection.DESC

        def ordered(positions: list[Position]) -> list[Position]:
            return sorted(positions, key=lambda p: accessor(p, value_in), reverse=reverse)

        non_cash = [p for p in group.positions if not p.asset.is_cash_related]
        cash = [p for p in group.positions if p.asset.is_cash_related]

        return replace(group, positions=tuple(ordered(non_cash) + ordered(cash)))
