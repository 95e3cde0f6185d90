"""View orchestration: composes valuation stages for a holdings page."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any

import structlog

from holdings.domain.holdings import AllocationSlice, Holdings
from holdings.domain.money import ValueIn
from holdings.domain.positions import HoldingContract
from holdings.exceptions import FxRateError
from holdings.services.valuation.accessors import to_allocation_grouping
from holdings.services.valuation.engine import ValuationEngine
from holdings.services.valuation.fx import native_currency
from holdings.services.valuation.protocols import FxRateProvider
from holdings.services.valuation.types import (
    FxPair,
    GroupBy,
    GroupingMode,
    ManualAssets,
    SortConfig,
    SortDirection,
    SortKey,
    ViewMode,
)

from .holdings_table import HoldingsTableBuilder, HoldingsTableRow

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class HoldingsViewState:
    """
    User-selected presentation state for a holdings page.

    Transitions return new instances; the state itself is never mutated.
    """

    view_mode: ViewMode = ViewMode.SUMMARY
    sort_config: SortConfig = field(default_factory=SortConfig)
    group_by: GroupBy = GroupBy.ASSET_CLASS
    value_in: ValueIn = ValueIn.PORTFOLIO
    hide_empty: bool = True
    # None follows group_by
    allocation_group_by: GroupingMode | None = None
    excluded_categories: frozenset[str] = frozenset()

    @classmethod
    def from_defaults(cls, defaults: Mapping[str, Any], **overrides: Any) -> "HoldingsViewState":
        """
        Build a state from configured defaults (``settings.HOLDINGS_DEFAULTS``).

        Keyword overrides win over the defaults.
        """
        state = cls(
            view_mode=ViewMode(defaults.get("view_mode", ViewMode.SUMMARY)),
            sort_config=SortConfig(
                key=defaults.get("sort_key", SortKey.ASSET_NAME),
                direction=SortDirection(defaults.get("sort_direction", SortDirection.ASC)),
            ),
            group_by=GroupBy(defaults.get("group_by", GroupBy.ASSET_CLASS)),
            value_in=ValueIn(defaults.get("value_in", ValueIn.PORTFOLIO)),
            hide_empty=bool(defaults.get("hide_empty", True)),
        )
        return replace(state, **overrides) if overrides else state

    @property
    def allocation_grouping(self) -> GroupingMode:
        if self.allocation_group_by is not None:
            return self.allocation_group_by
        return to_allocation_grouping(self.group_by)

    def with_sort(self, key: str) -> "HoldingsViewState":
        """Re-sorting by the current key flips direction; a new key starts descending."""
        current = self.sort_config
        if current.key == key:
            sort_config = SortConfig(key=key, direction=current.direction.flipped())
        else:
            sort_config = SortConfig(key=key, direction=SortDirection.DESC)
        return replace(self, sort_config=sort_config)

    def with_toggled_category(self, category: str) -> "HoldingsViewState":
        if category in self.excluded_categories:
            excluded = self.excluded_categories - {category}
        else:
            excluded = self.excluded_categories | {category}
        return replace(self, excluded_categories=frozenset(excluded))


@dataclass(frozen=True)
class HoldingsViewModel:
    state: HoldingsViewState
    holdings: Holdings
    rows: list[HoldingsTableRow]
    allocation: list[AllocationSlice] = field(default_factory=list)
    display_currency: str | None = None
    fx_rate: Decimal | None = None

    @property
    def allocation_total_value(self) -> float:
        return sum(s.value for s in self.allocation)

    @property
    def visible_allocation(self) -> list[AllocationSlice]:
        """Slices the chart draws; excluded categories are toggled off, not recomputed."""
        excluded = self.state.excluded_categories
        return [s for s in self.allocation if s.key not in excluded and s.label not in excluded]


class HoldingsViewBuilder:
    """
    Builds the holdings page model.

    The only place valuation stages are composed: holdings are grouped,
    totalled and sorted for every view mode; allocation slices are only
    computed for the summary (chart) view.
    """

    def __init__(
        self,
        engine: ValuationEngine | None = None,
        table_builder: HoldingsTableBuilder | None = None,
        fx_provider: FxRateProvider | None = None,
    ):
        self.engine = engine or ValuationEngine()
        self.table_builder = table_builder or HoldingsTableBuilder()
        self.fx_provider = fx_provider

    def build(
        self,
        contract: HoldingContract,
        state: HoldingsViewState,
        display_currency: str | None = None,
        manual_assets: ManualAssets | None = None,
    ) -> HoldingsViewModel:
        holdings = self.engine.build_holdings(
            contract,
            hide_empty=state.hide_empty,
            value_in=state.value_in,
            group_by=state.group_by,
            sort_config=state.sort_config,
        )
        rows = self.table_builder.build_rows(holdings)

        allocation: list[AllocationSlice] = []
        fx_rate = None
        if state.view_mode == ViewMode.SUMMARY:
            allocation, fx_rate = self.build_allocation(
                contract,
                grouping_mode=state.allocation_grouping,
                value_in=state.value_in,
                display_currency=display_currency,
                manual_assets=manual_assets,
            )

        logger.info(
            "holdings_view_built",
            portfolio=contract.portfolio.code,
            view_mode=str(state.view_mode),
            group_count=len(holdings.holding_groups),
            slice_count=len(allocation),
        )
        return HoldingsViewModel(
            state=state,
            holdings=holdings,
            rows=rows,
            allocation=allocation,
            display_currency=display_currency if fx_rate is not None else None,
            fx_rate=fx_rate,
        )

    def build_allocation(
        self,
        contract: HoldingContract,
        grouping_mode: GroupingMode,
        value_in: ValueIn,
        display_currency: str | None = None,
        manual_assets: ManualAssets | None = None,
    ) -> tuple[list[AllocationSlice], Decimal | None]:
        """
        Allocation slices in ``display_currency`` where a rate is available.

        Manual asset values are entered in the display currency. When the
        position slices cannot be brought into that currency they are left
        out of the merge, so one breakdown never mixes two units.

        Returns:
            Tuple of (slices, rate applied or None)
        """
        fx_rate = self.resolve_fx_rate(contract, value_in, display_currency)
        if (
            manual_assets
            and display_currency
            and fx_rate is None
            and native_currency(contract, value_in) != display_currency
        ):
            logger.warning(
                "manual_assets_skipped",
                reason="display_currency_unavailable",
                portfolio=contract.portfolio.code,
                value_in=str(value_in),
                display_currency=display_currency,
            )
            manual_assets = None

        slices = self.engine.build_allocation(
            contract,
            grouping_mode=grouping_mode,
            value_in=value_in,
            fx_rate=fx_rate,
            manual_assets=manual_assets,
        )
        return slices, fx_rate

    def resolve_fx_rate(
        self,
        contract: HoldingContract,
        value_in: ValueIn,
        display_currency: str | None,
    ) -> Decimal | None:
        """
        Rate from the perspective's native currency into ``display_currency``.

        Returns None when no rescale applies or the rate is unavailable; the
        caller then keeps native values.
        """
        if not display_currency or self.fx_provider is None:
            return None

        native = native_currency(contract, value_in)
        if native is None:
            logger.info(
                "fx_rescale_skipped",
                reason="no_native_currency",
                portfolio=contract.portfolio.code,
                value_in=str(value_in),
            )
            return None

        pair = FxPair(from_code=native, to_code=display_currency)
        if pair.is_identity:
            return None

        try:
            return self.fx_provider.get_rate(pair).rate
        except FxRateError as e:
            logger.warning(
                "fx_rate_unavailable",
                portfolio=contract.portfolio.code,
                pair=pair.key,
                error=str(e),
            )
            return None
