"""Money accumulation: folds one position's money values into a running total."""

from dataclasses import replace

from holdings.domain.money import MoneyValues
from holdings.domain.positions import Position

# Fields that sum for every asset, cash-related or not
SUMMED_FIELDS = (
    "market_value",
    "cost_value",
    "dividends",
    "realised_gain",
    "unrealised_gain",
    "total_gain",
    "fees",
    "tax",
    "weight",
)


def accumulate(total: MoneyValues, money: MoneyValues, cash_related: bool) -> MoneyValues:
    """
    Return ``total`` with ``money`` folded in. Neither input is modified.

    Cash-related assets contribute market value to the ``cash`` bucket instead
    of purchases and sales. Day gain is only taken from values with a live
    price change; an unpriced asset contributes nothing rather than zero change.
    IRR and ROI are rates and do not sum.
    """
    changes = {name: getattr(total, name) + getattr(money, name) for name in SUMMED_FIELDS}

    if cash_related:
        changes["cash"] = total.cash + money.market_value
    else:
        changes["purchases"] = total.purchases + money.purchases
        changes["sales"] = total.sales + money.sales

    if money.has_live_change:
        changes["gain_on_day"] = total.gain_on_day + money.gain_on_day

    return replace(total, **changes)


def accumulate_position(total: MoneyValues, position: Position) -> MoneyValues:
    """Fold ``position``'s values for ``total``'s perspective into ``total``.

    A position without that perspective leaves the total unchanged.
    """
    money = position.money(total.value_in)
    if money is None:
        return total
    return accumulate(total, money, position.asset.is_cash_related)
