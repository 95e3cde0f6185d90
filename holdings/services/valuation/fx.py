"""FX rate lookup over rates supplied by the currency-rate service."""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

import structlog

from holdings.domain.money import ValueIn
from holdings.domain.positions import HoldingContract
from holdings.exceptions import FxRateError

from .types import FxPair, FxRate

logger = structlog.get_logger(__name__)

ONE = Decimal("1")


class StaticFxRates:
    """
    FxRateProvider over an already-fetched rate table.

    Rates are keyed ``"FROM:TO"`` as returned by the rate service. Identity
    pairs always resolve to 1; an inverse pair is used when the direct one is
    missing.
    """

    def __init__(self, rates: Mapping[str, Any] | None = None):
        self._rates: dict[str, Decimal] = {}
        for key, value in (rates or {}).items():
            try:
                rate = Decimal(str(value))
            except (InvalidOperation, ValueError, TypeError):
                raise FxRateError(f"Rate for {key} is not a number: {value!r}") from None
            if not rate.is_finite():
                raise FxRateError(f"Rate for {key} is not a finite number: {value!r}")
            self._rates[key.upper()] = rate

    def get_rate(self, pair: FxPair) -> FxRate:
        if pair.is_identity:
            return FxRate(pair=pair, rate=ONE)

        rate = self._rates.get(pair.key.upper())
        if rate is None:
            inverse = self._rates.get(f"{pair.to_code}:{pair.from_code}".upper())
            if inverse:
                rate = ONE / inverse

        if rate is None:
            logger.warning("fx_rate_missing", pair=pair.key)
            raise FxRateError(f"No FX rate available for {pair.key}")
        if rate <= 0:
            raise FxRateError(f"FX rate for {pair.key} must be positive, got {rate}")

        return FxRate(pair=pair, rate=rate)


def native_currency(contract: HoldingContract, value_in: ValueIn) -> str | None:
    """
    Currency code that ``value_in`` amounts of ``contract`` are expressed in.

    TRADE has no single currency for mixed-currency contracts and returns None.
    """
    portfolio = contract.portfolio
    if value_in == ValueIn.PORTFOLIO:
        return portfolio.currency.code if portfolio.currency else None
    if value_in == ValueIn.BASE:
        return portfolio.base.code if portfolio.base else None
    if contract.is_mixed_currencies:
        return None
    for position in contract.positions.values():
        money = position.money(ValueIn.TRADE)
        if money is not None and money.currency is not None:
            return money.currency.code
    return None
