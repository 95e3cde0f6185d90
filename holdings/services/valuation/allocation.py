"""Allocation slices for chart rendering, using pandas aggregation."""

import json
import zlib
from collections.abc import Iterable, Mapping
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import Any

import pandas as pd
import structlog

from holdings.domain.holdings import AllocationSlice
from holdings.domain.money import ValueIn
from holdings.domain.positions import HoldingContract

from .accessors import (
    REPORT_CASH,
    REPORT_EQUITY,
    REPORT_ETF,
    REPORT_MUTUAL_FUND,
    REPORT_PROPERTY,
    allocation_key,
)
from .types import GroupingMode, ManualAssets

logger = structlog.get_logger(__name__)

CATEGORY_COLORS: dict[str, str] = {
    REPORT_EQUITY: "#3B82F6",  # blue
    REPORT_ETF: "#10B981",  # green
    REPORT_MUTUAL_FUND: "#8B5CF6",  # purple
    REPORT_CASH: "#6B7280",  # gray
    REPORT_PROPERTY: "#F59E0B",  # amber
}

FALLBACK_COLORS = [
    "#3B82F6",  # blue
    "#10B981",  # green
    "#F59E0B",  # amber
    "#EF4444",  # red
    "#8B5CF6",  # purple
    "#EC4899",  # pink
    "#14B8A6",  # teal
    "#6366F1",  # indigo
    "#84CC16",  # lime
    "#F97316",  # orange
]

# Manually tracked asset categories entered on retirement plans
MANUAL_ASSET_LABELS: dict[str, str] = {
    "CASH": REPORT_CASH,
    "EQUITY": REPORT_EQUITY,
    "ETF": REPORT_ETF,
    "MUTUAL_FUND": REPORT_MUTUAL_FUND,
    "RE": REPORT_PROPERTY,
}

_COLUMNS = ["key", "label", "value", "gain_on_day", "weighted_irr", "color"]


def slice_color(key: str) -> str:
    """Display colour for a bucket key; the same key always gets the same colour."""
    if key in CATEGORY_COLORS:
        return CATEGORY_COLORS[key]
    return FALLBACK_COLORS[zlib.crc32(key.encode("utf-8")) % len(FALLBACK_COLORS)]


def parse_manual_assets(raw: Mapping[str, Any] | str | None) -> ManualAssets | None:
    """
    Read a manual-asset map, which the backend stores as JSON text.

    Returns None when nothing usable was supplied.
    """
    if not raw:
        return None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("manual_assets_unparsable", raw_length=len(raw))
            return None
    if not isinstance(raw, Mapping):
        logger.warning("manual_assets_not_a_mapping", type=type(raw).__name__)
        return None

    parsed: ManualAssets = {}
    for category, value in raw.items():
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            amount = None
        if amount is None or not amount.is_finite():
            logger.warning("manual_asset_value_invalid", category=category, value=str(value))
            continue
        parsed[str(category)] = amount
    return parsed


class AllocationTransformer:
    """
    Percentage-of-total slices over a position feed.

    All methods are stateless. Bucket values are aggregated with pandas in
    first-seen order, then non-positive buckets are dropped before
    percentages are computed, so the remaining percentages always sum to 100.
    """

    def transform_to_allocation_slices(
        self,
        contract: HoldingContract,
        grouping_mode: GroupingMode,
        value_in: ValueIn,
    ) -> list[AllocationSlice]:
        """
        Sum market value per bucket for ``value_in`` and compute each bucket's share.

        IRR per slice is weighted by market value. Positions that do not carry
        the requested perspective are skipped.
        """
        records = []
        for position in contract.positions.values():
            money = position.money(value_in)
            if money is None:
                continue
            key, label = allocation_key(position, grouping_mode)
            market_value = float(money.market_value)
            records.append(
                {
                    "key": key,
                    "label": label,
                    "value": market_value,
                    "gain_on_day": float(money.gain_on_day),
                    "weighted_irr": market_value * float(money.irr),
                    "color": slice_color(key),
                }
            )

        slices = self._aggregate(records)
        logger.debug(
            "allocation_slices_built",
            portfolio=contract.portfolio.code,
            grouping_mode=str(grouping_mode),
            value_in=str(value_in),
            slice_count=len(slices),
        )
        return slices

    def apply_fx_rate(
        self, slices: Iterable[AllocationSlice], rate: Decimal | float
    ) -> list[AllocationSlice]:
        """
        Rescale already-aggregated slices into a display currency.

        Only amounts change; shares were computed in the native unit and stay put.
        """
        factor = float(rate)
        return [
            replace(s, value=s.value * factor, gain_on_day=s.gain_on_day * factor)
            for s in slices
        ]

    def manual_assets_to_slices(self, manual_assets: ManualAssets | None) -> list[AllocationSlice]:
        """
        Slices for manually entered category values, using the same percentage rule.

        Known categories take the matching report category label and colour,
        so they line up with position-derived category slices when merged.
        """
        if not manual_assets:
            return []

        records = []
        for category, value in manual_assets.items():
            label = MANUAL_ASSET_LABELS.get(category.upper(), category)
            if value <= 0:
                logger.debug("manual_asset_skipped", category=category, value=str(value))
                continue
            records.append(
                {
                    "key": label,
                    "label": label,
                    "value": float(value),
                    "gain_on_day": 0.0,
                    "weighted_irr": 0.0,
                    "color": slice_color(label),
                }
            )
        return self._aggregate(records)

    def merge_allocation_slices(self, *sources: Iterable[AllocationSlice]) -> list[AllocationSlice]:
        """
        Union slices from independent sources into one breakdown.

        Slices sharing a key become one slice with summed value and day gain,
        so nothing is counted twice. Percentages are recomputed over the merged set.
        """
        records = [
            {
                "key": s.key,
                "label": s.label,
                "value": s.value,
                "gain_on_day": s.gain_on_day,
                "weighted_irr": s.value * s.irr,
                "color": s.color,
            }
            for source in sources
            for s in source
        ]
        return self._aggregate(records)

    def _aggregate(self, records: list[dict[str, Any]]) -> list[AllocationSlice]:
        if not records:
            return []

        df = pd.DataFrame.from_records(records, columns=_COLUMNS)
        by_key = df.groupby("key", sort=False).agg(
            label=("label", "first"),
            color=("color", "first"),
            value=("value", "sum"),
            gain_on_day=("gain_on_day", "sum"),
            weighted_irr=("weighted_irr", "sum"),
        )

        # A zero or negative net bucket contributes no visible slice
        positive = by_key[by_key["value"] > 0]
        if positive.empty:
            return []

        total = positive["value"].sum()
        result = positive.assign(
            percentage=positive["value"] / total * 100,
            irr=positive["weighted_irr"] / positive["value"],
        ).sort_values("value", ascending=False, kind="stable")

        return [
            AllocationSlice(
                key=str(key),
                label=str(row["label"]),
                value=float(row["value"]),
                percentage=float(row["percentage"]),
                color=str(row["color"]),
                gain_on_day=float(row["gain_on_day"]),
                irr=float(row["irr"]),
            )
            for key, row in result.iterrows()
        ]
