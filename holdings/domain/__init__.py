from __future__ import annotations

from .holdings import AllocationSlice, HoldingGroup, Holdings
from .money import Currency, MoneyValues, PriceData, ValueIn, zero_money_values
from .positions import (
    Asset,
    AssetCategory,
    DateValues,
    HoldingContract,
    Market,
    Portfolio,
    Position,
    QuantityValues,
)

__all__ = [
    "AllocationSlice",
    "Asset",
    "AssetCategory",
    "Currency",
    "DateValues",
    "HoldingContract",
    "HoldingGroup",
    "Holdings",
    "Market",
    "MoneyValues",
    "Portfolio",
    "Position",
    "PriceData",
    "QuantityValues",
    "ValueIn",
    "zero_money_values",
]
