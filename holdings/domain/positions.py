from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from holdings.domain.money import Currency, MoneyValues, ValueIn

CASH_CATEGORY = "CASH"
ACCOUNT_CATEGORY = "ACCOUNT"
REAL_ESTATE_CATEGORY = "RE"
POLICY_CATEGORY = "POLICY"

CASH_RELATED_CATEGORIES = frozenset({CASH_CATEGORY, ACCOUNT_CATEGORY, REAL_ESTATE_CATEGORY})


@dataclass(frozen=True)
class AssetCategory:
    id: str
    name: str = ""


@dataclass(frozen=True)
class Market:
    code: str
    name: str = ""
    currency: Currency | None = None


@dataclass(frozen=True)
class Asset:
    """Identity and classification of a held instrument.

    Every classification field is optional: partially enriched assets from the
    backend must still aggregate.
    """

    code: str
    name: str = ""
    id: str = ""
    asset_category: AssetCategory | None = None
    market: Market | None = None
    sector: str | None = None
    price_symbol: str | None = None
    effective_report_category: str | None = None

    @property
    def category_id(self) -> str | None:
        if self.asset_category is None:
            return None
        return self.asset_category.id.upper()

    @property
    def is_cash(self) -> bool:
        return self.category_id == CASH_CATEGORY

    @property
    def is_account(self) -> bool:
        return self.category_id == ACCOUNT_CATEGORY

    @property
    def is_cash_related(self) -> bool:
        """Currency, bank account or real-estate style holding."""

        return self.category_id in CASH_RELATED_CATEGORIES

    @property
    def currency_code(self) -> str | None:
        """Currency the asset is denominated in, if it can be determined."""

        if self.price_symbol:
            return self.price_symbol
        if self.is_cash and self.code:
            return self.code
        if self.market is not None and self.market.currency is not None:
            return self.market.currency.code or None
        return None


@dataclass(frozen=True)
class QuantityValues:
    total: Decimal = Decimal("0")
    purchased: Decimal = Decimal("0")
    sold: Decimal = Decimal("0")
    precision: int = 0

    @property
    def is_closed(self) -> bool:
        """A zero total signals a fully exited position."""

        return self.total == 0


@dataclass(frozen=True)
class DateValues:
    opened: str | None = None
    last: str | None = None
    closed: str | None = None
    last_dividend: str | None = None


@dataclass(frozen=True)
class Position:
    """One held instrument at a point in time."""

    asset: Asset
    money_values: dict[ValueIn, MoneyValues] = field(default_factory=dict)
    quantity_values: QuantityValues = field(default_factory=QuantityValues)
    date_values: DateValues | None = None

    def money(self, value_in: ValueIn) -> MoneyValues | None:
        return self.money_values.get(value_in)


@dataclass(frozen=True)
class Portfolio:
    code: str
    name: str = ""
    id: str = ""
    currency: Currency | None = None
    base: Currency | None = None


@dataclass(frozen=True)
class HoldingContract:
    """Position feed produced by the valuation service.

    ``is_mixed_currencies`` is true when positions were traded in more than one
    currency, which makes a summed TRADE perspective meaningless.
    """

    portfolio: Portfolio
    positions: dict[str, Position] = field(default_factory=dict)
    is_mixed_currencies: bool = False
    as_at: str | None = None

    def __len__(self) -> int:
        return len(self.positions)
