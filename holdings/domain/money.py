from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum

ZERO = Decimal("0")


class ValueIn(StrEnum):
    """Currency perspective a position's money values are expressed in.

    PORTFOLIO is the portfolio's reporting currency, BASE the portfolio's base
    currency and TRADE the currency the trade itself was executed in.
    """

    PORTFOLIO = "PORTFOLIO"
    BASE = "BASE"
    TRADE = "TRADE"


@dataclass(frozen=True)
class Currency:
    code: str
    name: str = ""
    symbol: str = ""


@dataclass(frozen=True)
class PriceData:
    """Latest market price snapshot. Absent for unpriced (private/manual) assets."""

    close: Decimal = ZERO
    previous_close: Decimal = ZERO
    change: Decimal = ZERO
    change_percent: Decimal = ZERO
    price_date: str = ""


@dataclass(frozen=True)
class MoneyValues:
    """Monetary snapshot of a position, or an aggregate of positions, in one perspective.

    ``cash`` is never reported by the backend for a single position; it is the
    bucket that cash-related market value accumulates into when positions are
    folded into a total.
    """

    value_in: ValueIn = ValueIn.PORTFOLIO
    currency: Currency | None = None
    market_value: Decimal = ZERO
    cost_value: Decimal = ZERO
    dividends: Decimal = ZERO
    realised_gain: Decimal = ZERO
    unrealised_gain: Decimal = ZERO
    total_gain: Decimal = ZERO
    gain_on_day: Decimal = ZERO
    purchases: Decimal = ZERO
    sales: Decimal = ZERO
    fees: Decimal = ZERO
    tax: Decimal = ZERO
    cash: Decimal = ZERO
    weight: Decimal = ZERO
    irr: Decimal = ZERO
    roi: Decimal = ZERO
    price_data: PriceData | None = None

    @property
    def is_priced(self) -> bool:
        return self.price_data is not None

    @property
    def has_live_change(self) -> bool:
        """True when the price feed reports a day change for this value."""

        return self.price_data is not None and bool(self.price_data.change_percent)


def zero_money_values(currency: Currency | None, value_in: ValueIn) -> MoneyValues:
    """Identity record for accumulation in ``value_in``."""

    return MoneyValues(value_in=value_in, currency=currency)
