from .holdings_table import HoldingsTableBuilder, HoldingsTableRow
from .holdings_view import HoldingsViewBuilder, HoldingsViewModel, HoldingsViewState

__all__ = [
    "HoldingsTableBuilder",
    "HoldingsTableRow",
    "HoldingsViewBuilder",
    "HoldingsViewModel",
    "HoldingsViewState",
]
