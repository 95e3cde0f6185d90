"""Type definitions for holdings valuation."""

from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import TypedDict

from holdings.domain.money import ValueIn

# Type aliases (Python 3.12+ syntax)
type GroupKey = str
type ManualAssets = dict[str, Decimal]  # {manual_category: entered_value}

UNDEFINED_GROUP: GroupKey = "undefined"
UNCLASSIFIED: GroupKey = "Unclassified"


class GroupBy(StrEnum):
    """Grouping axis for the holdings table.

    Values match the backend's persisted preference values.
    """

    ASSET_CLASS = "ASSET_CLASS"
    SECTOR = "SECTOR"
    MARKET_CURRENCY = "MARKET_CURRENCY"
    MARKET = "MARKET"


class GroupingMode(StrEnum):
    """Grouping axis for allocation charts."""

    CATEGORY = "category"
    SECTOR = "sector"
    ASSET = "asset"
    MARKET = "market"


class ViewMode(StrEnum):
    SUMMARY = "summary"
    TABLE = "table"
    CARDS = "cards"
    HEATMAP = "heatmap"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class SortKey(StrEnum):
    """Sortable position columns. Values match the table's column ids."""

    ASSET_NAME = "assetName"
    PRICE = "price"
    CHANGE_PERCENT = "changePercent"
    GAIN_ON_DAY = "gainOnDay"
    QUANTITY = "quantity"
    COST_VALUE = "costValue"
    MARKET_VALUE = "marketValue"
    DIVIDENDS = "dividends"
    UNREALISED_GAIN = "unrealisedGain"
    REALISED_GAIN = "realisedGain"
    IRR = "irr"
    WEIGHT = "weight"
    TOTAL_GAIN = "totalGain"


@dataclass(frozen=True)
class SortConfig:
    """Requested ordering. ``key`` is a column id; None means "leave as is"."""

    key: str | None = SortKey.ASSET_NAME
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class FxPair:
    from_code: str
    to_code: str

    @property
    def key(self) -> str:
        return f"{self.from_code}:{self.to_code}"

    @property
    def is_identity(self) -> bool:
        return self.from_code == self.to_code


@dataclass(frozen=True)
class FxRate:
    pair: FxPair
    rate: Decimal


class SliceDict(TypedDict):
    """Serialized allocation slice."""

    key: str
    label: str
    value: float
    percentage: float
    color: str
    gainOnDay: float
    irr: float


__all__ = [
    "FxPair",
    "FxRate",
    "GroupBy",
    "GroupKey",
    "GroupingMode",
    "ManualAssets",
    "SliceDict",
    "SortConfig",
    "SortDirection",
    "SortKey",
    "UNCLASSIFIED",
    "UNDEFINED_GROUP",
    "ValueIn",
    "ViewMode",
]
