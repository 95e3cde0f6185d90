"""Typed group-key accessors for positions.

Each supported grouping axis has one accessor function. Accessors return None
when the position does not carry the field; callers map that to their own
sentinel bucket, so partially enriched assets never raise.
"""

from collections.abc import Callable

from holdings.domain.positions import Asset, Position

from .types import UNCLASSIFIED, UNDEFINED_GROUP, GroupBy, GroupingMode

# Report categories consolidate detailed asset categories for display
REPORT_CASH = "Cash"
REPORT_EQUITY = "Equity"
REPORT_ETF = "ETF"
REPORT_MUTUAL_FUND = "Mutual Fund"
REPORT_PROPERTY = "Property"

_REPORT_CATEGORY_MAP: dict[str, str] = {
    "CASH": REPORT_CASH,
    "ACCOUNT": REPORT_CASH,
    "TRADE": REPORT_CASH,
    "BANK ACCOUNT": REPORT_CASH,
    "EQUITY": REPORT_EQUITY,
    "RE": REPORT_PROPERTY,
    "REAL ESTATE": REPORT_PROPERTY,
    "EXCHANGE TRADED FUND": REPORT_ETF,
    "ETF": REPORT_ETF,
    "MUTUAL FUND": REPORT_MUTUAL_FUND,
}


def map_to_report_category(category: str) -> str:
    """Map a detailed category name or id to its report category.

    Unknown categories are returned unchanged.
    """
    return _REPORT_CATEGORY_MAP.get(category.upper(), category)


def report_category(asset: Asset) -> str | None:
    """Backend-computed report category, else one mapped from the asset category."""
    if asset.effective_report_category:
        return asset.effective_report_category
    if asset.asset_category is None:
        return None
    category = asset.asset_category.name or asset.asset_category.id
    if not category:
        return None
    return map_to_report_category(category)


def _sector(asset: Asset) -> str | None:
    return asset.sector or None


def _market_code(asset: Asset) -> str | None:
    if asset.market is None:
        return None
    return asset.market.code or None


def _market_currency(asset: Asset) -> str | None:
    return asset.currency_code


_GROUP_KEY_ACCESSORS: dict[GroupBy, Callable[[Asset], str | None]] = {
    GroupBy.ASSET_CLASS: report_category,
    GroupBy.SECTOR: _sector,
    GroupBy.MARKET_CURRENCY: _market_currency,
    GroupBy.MARKET: _market_code,
}


def resolve_group_key(position: Position, group_by: GroupBy) -> str:
    """Holdings-table group key for ``position``; missing fields give "undefined"."""
    value = _GROUP_KEY_ACCESSORS[group_by](position.asset)
    return value if value else UNDEFINED_GROUP


def allocation_key(position: Position, mode: GroupingMode) -> tuple[str, str]:
    """Return the ``(key, label)`` allocation bucket for ``position``."""
    asset = position.asset
    match mode:
        case GroupingMode.CATEGORY:
            category = report_category(asset) or UNCLASSIFIED
            return category, category
        case GroupingMode.SECTOR:
            sector = _sector(asset) or UNCLASSIFIED
            return sector, sector
        case GroupingMode.ASSET:
            return asset.code, asset.name or asset.code
        case GroupingMode.MARKET:
            market = _market_code(asset) or UNCLASSIFIED
            return market, market
    raise ValueError(f"Unsupported grouping mode: {mode}")


def to_allocation_grouping(group_by: GroupBy) -> GroupingMode:
    """Chart grouping that mirrors the table's grouping axis."""
    match group_by:
        case GroupBy.ASSET_CLASS:
            return GroupingMode.CATEGORY
        case GroupBy.SECTOR:
            return GroupingMode.SECTOR
        case GroupBy.MARKET | GroupBy.MARKET_CURRENCY:
            return GroupingMode.MARKET
    return GroupingMode.CATEGORY
