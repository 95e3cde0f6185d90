"""
Root-level pytest fixtures for the holdings test suite.

Domain objects come from factory_boy factories (tests/factories.py); the
fixtures here assemble them into contracts.
"""

from collections.abc import Callable
from decimal import Decimal

import pytest

from holdings.domain.positions import HoldingContract, Position

from .factories import AssetFactory, HoldingContractFactory, PositionFactory

type ContractBuilder = Callable[..., HoldingContract]


def build_contract(*positions: Position, **kwargs) -> HoldingContract:
    """Contract keyed the way the valuation service keys positions (by asset id)."""
    keyed = {f"{p.asset.id or p.asset.code}:{i}": p for i, p in enumerate(positions)}
    return HoldingContractFactory(positions=keyed, **kwargs)


@pytest.fixture
def make_contract() -> ContractBuilder:
    return build_contract


@pytest.fixture
def cash_position() -> Position:
    return PositionFactory(asset=AssetFactory(cash=True), market_value=Decimal("1000"))


@pytest.fixture
def scenario_contract() -> HoldingContract:
    """One CASH position of 1000 and two EQUITY positions of 5000 and 3000 (closed)."""
    return build_contract(
        PositionFactory(asset=AssetFactory(cash=True), market_value=Decimal("1000")),
        PositionFactory(
            asset=AssetFactory(code="AAPL", name="Apple"), market_value=Decimal("5000")
        ),
        PositionFactory(
            asset=AssetFactory(code="MSFT", name="Microsoft"),
            market_value=Decimal("3000"),
            closed=True,
        ),
    )
