"""Convert view models into JSON-ready dicts (camelCase keys, numbers as floats)."""

from dataclasses import fields
from decimal import Decimal
from typing import Any

from holdings.domain.holdings import AllocationSlice, HoldingGroup, Holdings
from holdings.domain.money import Currency, MoneyValues
from holdings.domain.positions import Position
from holdings.services.valuation.types import SliceDict

from .holdings_table import HoldingsTableRow
from .holdings_view import HoldingsViewModel, HoldingsViewState


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _currency(currency: Currency | None) -> dict[str, str] | None:
    if currency is None:
        return None
    return {"code": currency.code, "name": currency.name, "symbol": currency.symbol}


def serialize_money(money: MoneyValues) -> dict[str, Any]:
    data: dict[str, Any] = {
        "valueIn": str(money.value_in),
        "currency": _currency(money.currency),
    }
    for f in fields(money):
        value = getattr(money, f.name)
        if isinstance(value, Decimal):
            data[_camel(f.name)] = float(value)
    if money.price_data is not None:
        data["priceData"] = {
            "close": float(money.price_data.close),
            "previousClose": float(money.price_data.previous_close),
            "change": float(money.price_data.change),
            "changePercent": float(money.price_data.change_percent),
            "priceDate": money.price_data.price_date,
        }
    return data


def serialize_position(position: Position) -> dict[str, Any]:
    asset = position.asset
    return {
        "asset": {
            "id": asset.id,
            "code": asset.code,
            "name": asset.name,
            "category": asset.category_id,
            "market": asset.market.code if asset.market else None,
            "isCashRelated": asset.is_cash_related,
        },
        "quantity": float(position.quantity_values.total),
        "moneyValues": {
            str(value_in): serialize_money(money)
            for value_in, money in position.money_values.items()
        },
    }


def serialize_group(group: HoldingGroup) -> dict[str, Any]:
    return {
        "positions": [serialize_position(p) for p in group.positions],
        "subTotals": {
            str(value_in): serialize_money(money) for value_in, money in group.sub_totals.items()
        },
    }


def serialize_holdings(holdings: Holdings) -> dict[str, Any]:
    return {
        "portfolio": {
            "code": holdings.portfolio.code,
            "name": holdings.portfolio.name,
        },
        "valueIn": str(holdings.value_in),
        "currency": _currency(holdings.currency),
        "asAt": holdings.as_at,
        "holdingGroups": {
            key: serialize_group(group) for key, group in holdings.holding_groups.items()
        },
        "totals": {
            str(value_in): serialize_money(money) for value_in, money in holdings.totals.items()
        },
    }


def serialize_slice(allocation_slice: AllocationSlice) -> SliceDict:
    return {
        "key": allocation_slice.key,
        "label": allocation_slice.label,
        "value": allocation_slice.value,
        "percentage": allocation_slice.percentage,
        "color": allocation_slice.color,
        "gainOnDay": allocation_slice.gain_on_day,
        "irr": allocation_slice.irr,
    }


def serialize_row(row: HoldingsTableRow) -> dict[str, Any]:
    """Formatted display strings only; raw values travel in ``holdings``."""
    return {
        _camel(f.name): getattr(row, f.name)
        for f in fields(row)
        if not f.name.endswith("_raw")
    }


def serialize_state(state: HoldingsViewState) -> dict[str, Any]:
    return {
        "viewMode": str(state.view_mode),
        "sort": {
            "key": state.sort_config.key,
            "direction": str(state.sort_config.direction),
        },
        "groupBy": str(state.group_by),
        "valueIn": str(state.value_in),
        "hideEmpty": state.hide_empty,
        "allocationGroupBy": str(state.allocation_grouping),
        "excludedCategories": sorted(state.excluded_categories),
    }


def serialize_view_model(view_model: HoldingsViewModel) -> dict[str, Any]:
    return {
        "state": serialize_state(view_model.state),
        "holdings": serialize_holdings(view_model.holdings),
        "rows": [serialize_row(row) for row in view_model.rows],
        "allocation": [serialize_slice(s) for s in view_model.allocation],
        "visibleAllocation": [serialize_slice(s) for s in view_model.visible_allocation],
        "allocationTotalValue": view_model.allocation_total_value,
        "displayCurrency": view_model.display_currency,
        "fxRate": float(view_model.fx_rate) if view_model.fx_rate is not None else None,
    }
