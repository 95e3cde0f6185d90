"""Grouping and total accumulation for holding contracts."""

from dataclasses import dataclass, field

import structlog

from holdings.domain.holdings import HoldingGroup, Holdings
from holdings.domain.money import Currency, MoneyValues, ValueIn, zero_money_values
from holdings.domain.positions import HoldingContract, Position

from .accessors import resolve_group_key
from .accumulator import accumulate_position
from .types import GroupBy

logger = structlog.get_logger(__name__)


@dataclass
class _GroupAccumulator:
    """Working state for one group while the contract is folded."""

    visible: list[Position] = field(default_factory=list)
    sub_totals: dict[ValueIn, MoneyValues] = field(default_factory=dict)

    @classmethod
    def for_position(cls, position: Position) -> "_GroupAccumulator":
        # Subtotal currencies follow the first position assigned to the group
        sub_totals = {}
        for value_in in ValueIn:
            money = position.money(value_in)
            sub_totals[value_in] = zero_money_values(
                money.currency if money is not None else None, value_in
            )
        return cls(sub_totals=sub_totals)

    def fold(self, position: Position) -> None:
        self.sub_totals = {
            value_in: accumulate_position(total, position)
            for value_in, total in self.sub_totals.items()
        }

    def freeze(self) -> HoldingGroup:
        return HoldingGroup(positions=tuple(self.visible), sub_totals=dict(self.sub_totals))


class HoldingsCalculator:
    """
    Groups a contract's positions and accumulates subtotals and grand totals.

    Stateless: every call is a full pass over the contract.
    """

    def calculate_holdings(
        self,
        contract: HoldingContract,
        hide_empty: bool,
        value_in: ValueIn,
        group_by: GroupBy,
    ) -> Holdings:
        """
        Partition positions into groups keyed by ``group_by``.

        Every position is folded into its group's subtotals (all perspectives)
        and into the grand totals, whether or not it is visible. Closed
        positions are only dropped from the visible ``positions`` when
        ``hide_empty`` is set. The TRADE grand total is left at zero for
        mixed-currency contracts.

        Args:
            contract: Position feed from the valuation service
            hide_empty: Hide zero-quantity positions from display
            value_in: Perspective the caller will display
            group_by: Grouping axis

        Returns:
            Holdings with groups in first-seen order
        """
        groups: dict[str, _GroupAccumulator] = {}
        totals = self._initial_totals(contract)
        hidden_count = 0

        for position in contract.positions.values():
            group_key = resolve_group_key(position, group_by)
            group = groups.get(group_key)
            if group is None:
                group = groups[group_key] = _GroupAccumulator.for_position(position)

            group.fold(position)
            totals = self._fold_totals(totals, position, contract.is_mixed_currencies)

            if hide_empty and position.quantity_values.is_closed:
                hidden_count += 1
                continue
            group.visible.append(position)

        logger.debug(
            "holdings_calculated",
            portfolio=contract.portfolio.code,
            position_count=len(contract.positions),
            group_count=len(groups),
            hidden_count=hidden_count,
            group_by=str(group_by),
            value_in=str(value_in),
        )

        return Holdings(
            portfolio=contract.portfolio,
            value_in=value_in,
            holding_groups={key: group.freeze() for key, group in groups.items()},
            totals=totals,
            as_at=contract.as_at,
        )

    def _initial_totals(self, contract: HoldingContract) -> dict[ValueIn, MoneyValues]:
        portfolio = contract.portfolio
        return {
            ValueIn.PORTFOLIO: zero_money_values(portfolio.currency, ValueIn.PORTFOLIO),
            ValueIn.BASE: zero_money_values(portfolio.base, ValueIn.BASE),
            ValueIn.TRADE: zero_money_values(
                None if contract.is_mixed_currencies else self._trade_currency(contract),
                ValueIn.TRADE,
            ),
        }

    def _trade_currency(self, contract: HoldingContract) -> Currency | None:
        for position in contract.positions.values():
            money = position.money(ValueIn.TRADE)
            if money is not None and money.currency is not None:
                return money.currency
        return None

    def _fold_totals(
        self,
        totals: dict[ValueIn, MoneyValues],
        position: Position,
        is_mixed_currencies: bool,
    ) -> dict[ValueIn, MoneyValues]:
        folded = dict(totals)
        folded[ValueIn.PORTFOLIO] = accumulate_position(totals[ValueIn.PORTFOLIO], position)
        folded[ValueIn.BASE] = accumulate_position(totals[ValueIn.BASE], position)
        # Summing amounts in different trade currencies is meaningless
        if not is_mixed_currencies:
            folded[ValueIn.TRADE] = accumulate_position(totals[ValueIn.TRADE], position)
        return folded
