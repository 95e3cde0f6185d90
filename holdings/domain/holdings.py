from __future__ import annotations

from dataclasses import dataclass, field

from holdings.domain.money import Currency, MoneyValues, ValueIn
from holdings.domain.positions import Portfolio, Position


@dataclass(frozen=True)
class HoldingGroup:
    """Positions sharing a group key, with subtotals for every perspective.

    ``sub_totals`` covers every position folded into the group, including the
    ones hidden from ``positions`` by the hide-empty filter.
    """

    positions: tuple[Position, ...] = ()
    sub_totals: dict[ValueIn, MoneyValues] = field(default_factory=dict)


@dataclass(frozen=True)
class Holdings:
    portfolio: Portfolio
    value_in: ValueIn
    holding_groups: dict[str, HoldingGroup] = field(default_factory=dict)
    totals: dict[ValueIn, MoneyValues] = field(default_factory=dict)
    as_at: str | None = None

    @property
    def currency(self) -> Currency | None:
        total = self.totals.get(self.value_in)
        return total.currency if total is not None else None

    @property
    def position_count(self) -> int:
        return sum(len(group.positions) for group in self.holding_groups.values())


@dataclass(frozen=True)
class AllocationSlice:
    """One bucket of a percentage-of-total breakdown.

    Percentages are expressed on a 0-100 scale.
    """

    key: str
    label: str
    value: float
    percentage: float
    color: str
    gain_on_day: float = 0.0
    irr: float = 0.0
