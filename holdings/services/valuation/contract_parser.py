"""Build domain objects from the valuation service's holding contract JSON."""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

import structlog

from holdings.domain.money import Currency, MoneyValues, PriceData, ValueIn
from holdings.domain.positions import (
    Asset,
    AssetCategory,
    DateValues,
    HoldingContract,
    Market,
    Portfolio,
    Position,
    QuantityValues,
)
from holdings.exceptions import ContractError

logger = structlog.get_logger(__name__)

# camelCase wire name -> MoneyValues field
_MONEY_FIELDS = {
    "marketValue": "market_value",
    "costValue": "cost_value",
    "dividends": "dividends",
    "realisedGain": "realised_gain",
    "unrealisedGain": "unrealised_gain",
    "totalGain": "total_gain",
    "gainOnDay": "gain_on_day",
    "purchases": "purchases",
    "sales": "sales",
    "fees": "fees",
    "tax": "tax",
    "cash": "cash",
    "weight": "weight",
    "irr": "irr",
    "roi": "roi",
}


def _decimal(value: Any, field_name: str) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, bool):
        raise ContractError(f"{field_name} must be a number, got {value!r}")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ContractError(f"{field_name} must be a number, got {value!r}") from None
    if not number.is_finite():
        raise ContractError(f"{field_name} must be a finite number, got {value!r}")
    return number


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _currency(data: Any) -> Currency | None:
    data = _mapping(data)
    if not data.get("code"):
        return None
    return Currency(
        code=str(data["code"]),
        name=data.get("name") or "",
        symbol=data.get("symbol") or "",
    )


def _market(data: Any) -> Market | None:
    data = _mapping(data)
    if not data.get("code"):
        return None
    return Market(
        code=str(data["code"]),
        name=data.get("name") or "",
        currency=_currency(data.get("currency")),
    )


def _asset_category(data: Any) -> AssetCategory | None:
    data = _mapping(data)
    if not data.get("id"):
        return None
    return AssetCategory(id=str(data["id"]), name=data.get("name") or "")


def _asset(data: Any, fallback_code: str) -> Asset:
    data = _mapping(data)
    return Asset(
        code=str(data.get("code") or fallback_code),
        name=data.get("name") or "",
        id=str(data.get("id") or ""),
        asset_category=_asset_category(data.get("assetCategory")),
        market=_market(data.get("market")),
        sector=data.get("sector") or None,
        price_symbol=data.get("priceSymbol") or None,
        effective_report_category=data.get("effectiveReportCategory") or None,
    )


def _price_data(data: Any) -> PriceData | None:
    if not isinstance(data, Mapping):
        return None
    return PriceData(
        close=_decimal(data.get("close"), "priceData.close"),
        previous_close=_decimal(data.get("previousClose"), "priceData.previousClose"),
        change=_decimal(data.get("change"), "priceData.change"),
        change_percent=_decimal(data.get("changePercent"), "priceData.changePercent"),
        price_date=data.get("priceDate") or "",
    )


def _money_values(data: Any, value_in: ValueIn) -> MoneyValues:
    data = _mapping(data)
    amounts = {
        field_name: _decimal(data.get(wire_name), f"moneyValues.{value_in}.{wire_name}")
        for wire_name, field_name in _MONEY_FIELDS.items()
    }
    return MoneyValues(
        value_in=value_in,
        currency=_currency(data.get("currency")),
        price_data=_price_data(data.get("priceData")),
        **amounts,
    )


def _quantity_values(data: Any) -> QuantityValues:
    data = _mapping(data)
    precision = data.get("precision") or 0
    if not isinstance(precision, int) or isinstance(precision, bool):
        raise ContractError(f"quantityValues.precision must be an integer, got {precision!r}")
    return QuantityValues(
        total=_decimal(data.get("total"), "quantityValues.total"),
        purchased=_decimal(data.get("purchased"), "quantityValues.purchased"),
        sold=_decimal(data.get("sold"), "quantityValues.sold"),
        precision=precision,
    )


def _date_values(data: Any) -> DateValues | None:
    if not isinstance(data, Mapping):
        return None
    return DateValues(
        opened=data.get("opened"),
        last=data.get("last"),
        closed=data.get("closed"),
        last_dividend=data.get("lastDividend"),
    )


def _position(key: str, data: Any) -> Position:
    data = _mapping(data)
    raw_money = _mapping(data.get("moneyValues"))
    money_values = {}
    for value_in in ValueIn:
        if value_in.value in raw_money:
            money_values[value_in] = _money_values(raw_money[value_in.value], value_in)
    return Position(
        asset=_asset(data.get("asset"), fallback_code=key),
        money_values=money_values,
        quantity_values=_quantity_values(data.get("quantityValues")),
        date_values=_date_values(data.get("dateValues")),
    )


def parse_holding_contract(payload: Any) -> HoldingContract:
    """
    Parse a holding contract as returned by the valuation service.

    Missing nested objects are tolerated and fall back to empty or zero values,
    since assets are frequently only partially enriched. Numbers are read via
    ``Decimal(str(x))``.

    Args:
        payload: Decoded JSON object

    Returns:
        HoldingContract with positions in payload order

    Raises:
        ContractError: If the payload is not an object, ``positions`` is not
            an object, or a numeric field cannot be read as a number
    """
    if not isinstance(payload, Mapping):
        raise ContractError(f"Holding contract must be an object, got {type(payload).__name__}")

    raw_positions = payload.get("positions") or {}
    if not isinstance(raw_positions, Mapping):
        raise ContractError("Holding contract positions must be an object keyed by position")

    portfolio_data = _mapping(payload.get("portfolio"))
    portfolio = Portfolio(
        code=str(portfolio_data.get("code") or ""),
        name=portfolio_data.get("name") or "",
        id=str(portfolio_data.get("id") or ""),
        currency=_currency(portfolio_data.get("currency")),
        base=_currency(portfolio_data.get("base")),
    )

    positions = {str(key): _position(str(key), data) for key, data in raw_positions.items()}
    is_mixed = payload.get("isMixedCurrencies", payload.get("mixedCurrencies", False))

    contract = HoldingContract(
        portfolio=portfolio,
        positions=positions,
        is_mixed_currencies=bool(is_mixed),
        as_at=payload.get("asAt"),
    )
    logger.debug(
        "holding_contract_parsed",
        portfolio=portfolio.code,
        position_count=len(positions),
        is_mixed_currencies=contract.is_mixed_currencies,
    )
    return contract
