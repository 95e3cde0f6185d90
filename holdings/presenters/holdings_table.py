from dataclasses import dataclass
from decimal import Decimal

from holdings.domain.holdings import Holdings
from holdings.domain.money import Currency, MoneyValues, ValueIn, zero_money_values
from holdings.domain.positions import Position
from holdings.templatetags.holdings_filters import (
    money,
    number,
    percent,
    percentage_of,
    rate_percent,
)

ZERO = Decimal("0")


@dataclass(frozen=True)
class HoldingsTableRow:
    group_key: str
    row_type: str  # 'position', 'subtotal', 'grand_total'
    row_id: str  # Unique ID for collapse toggling
    parent_id: str  # ID of the group row for collapse toggling

    code: str
    name: str
    is_cash_related: bool

    # Price
    price: str
    price_raw: Decimal
    change_percent: str
    change_percent_raw: Decimal

    # Quantity
    quantity: str
    quantity_raw: Decimal

    # Value
    cost_value: str
    cost_value_raw: Decimal
    market_value: str
    market_value_raw: Decimal
    gain_on_day: str
    gain_on_day_raw: Decimal

    # Income and gains
    dividends: str
    dividends_raw: Decimal
    unrealised_gain: str
    unrealised_gain_raw: Decimal
    realised_gain: str
    realised_gain_raw: Decimal
    total_gain: str
    total_gain_raw: Decimal

    # Returns and weighting
    irr: str
    irr_raw: Decimal
    weight: str
    weight_raw: Decimal
    allocation: str
    allocation_raw: Decimal

    is_position: bool = False
    is_subtotal: bool = False
    is_grand_total: bool = False


def _symbol(currency: Currency | None) -> str:
    if currency is None:
        return ""
    return currency.symbol or f"{currency.code} "


class HoldingsTableBuilder:
    """Flattens grouped holdings into display rows: positions, group subtotal, grand total."""

    def build_rows(self, holdings: Holdings) -> list[HoldingsTableRow]:
        value_in = holdings.value_in
        grand_total = holdings.totals.get(value_in) or zero_money_values(
            holdings.currency, value_in
        )

        rows = []
        for group_key, group in holdings.holding_groups.items():
            group_id = f"group-{group_key}"
            for position in group.positions:
                rows.append(
                    self._build_position_row(
                        position, group_key, group_id, value_in, grand_total.market_value
                    )
                )

            sub_total = group.sub_totals.get(value_in) or zero_money_values(None, value_in)
            rows.append(
                self._build_total_row(
                    sub_total,
                    group_key=group_key,
                    row_type="subtotal",
                    row_id=f"{group_id}-subtotal",
                    parent_id=group_id,
                    label=group_key,
                    portfolio_total=grand_total.market_value,
                )
            )

        rows.append(
            self._build_total_row(
                grand_total,
                group_key="",
                row_type="grand_total",
                row_id="grand-total",
                parent_id="",
                label="Total",
                portfolio_total=grand_total.market_value,
            )
        )
        return rows

    def _build_position_row(
        self,
        position: Position,
        group_key: str,
        parent_id: str,
        value_in: ValueIn,
        portfolio_total: Decimal,
    ) -> HoldingsTableRow:
        values = position.money(value_in) or zero_money_values(None, value_in)
        asset = position.asset
        symbol = _symbol(values.currency)

        price = values.price_data.close if values.price_data else ZERO
        change_percent = values.price_data.change_percent if values.price_data else ZERO
        # Unpriced assets have no day gain to show
        gain_on_day = values.gain_on_day if values.has_live_change else ZERO
        quantity = position.quantity_values.total

        return HoldingsTableRow(
            group_key=group_key,
            row_type="position",
            row_id=f"{parent_id}-{asset.code}",
            parent_id=parent_id,
            code=asset.code,
            name=asset.name or asset.code,
            is_cash_related=asset.is_cash_related,
            price=money(price, symbol) if values.is_priced else "",
            price_raw=price,
            change_percent=rate_percent(change_percent) if values.is_priced else "",
            change_percent_raw=change_percent,
            quantity=number(quantity, position.quantity_values.precision),
            quantity_raw=quantity,
            **self._amount_columns(values, symbol, portfolio_total),
            gain_on_day=money(gain_on_day, symbol),
            gain_on_day_raw=gain_on_day,
            is_position=True,
        )

    def _build_total_row(
        self,
        values: MoneyValues,
        group_key: str,
        row_type: str,
        row_id: str,
        parent_id: str,
        label: str,
        portfolio_total: Decimal,
    ) -> HoldingsTableRow:
        symbol = _symbol(values.currency)
        return HoldingsTableRow(
            group_key=group_key,
            row_type=row_type,
            row_id=row_id,
            parent_id=parent_id,
            code="",
            name=label,
            is_cash_related=False,
            price="",
            price_raw=ZERO,
            change_percent="",
            change_percent_raw=ZERO,
            quantity="",
            quantity_raw=ZERO,
            **self._amount_columns(values, symbol, portfolio_total),
            gain_on_day=money(values.gain_on_day, symbol),
            gain_on_day_raw=values.gain_on_day,
            is_subtotal=row_type == "subtotal",
            is_grand_total=row_type == "grand_total",
        )

    def _amount_columns(
        self, values: MoneyValues, symbol: str, portfolio_total: Decimal
    ) -> dict[str, str | Decimal]:
        allocation = percentage_of(values.market_value, portfolio_total)
        return {
            "cost_value": money(values.cost_value, symbol),
            "cost_value_raw": values.cost_value,
            "market_value": money(values.market_value, symbol),
            "market_value_raw": values.market_value,
            "dividends": money(values.dividends, symbol),
            "dividends_raw": values.dividends,
            "unrealised_gain": money(values.unrealised_gain, symbol),
            "unrealised_gain_raw": values.unrealised_gain,
            "realised_gain": money(values.realised_gain, symbol),
            "realised_gain_raw": values.realised_gain,
            "total_gain": money(values.total_gain, symbol),
            "total_gain_raw": values.total_gain,
            "irr": rate_percent(values.irr),
            "irr_raw": values.irr,
            "weight": rate_percent(values.weight),
            "weight_raw": values.weight,
            "allocation": percent(allocation),
            "allocation_raw": allocation,
        }
