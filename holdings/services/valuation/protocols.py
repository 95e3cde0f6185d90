"""Protocol definitions for valuation collaborators."""

from typing import Protocol

from .types import FxPair, FxRate


class FxRateProvider(Protocol):
    """Protocol for the external currency-rate lookup."""

    def get_rate(self, pair: FxPair) -> FxRate:
        """Return the rate converting one unit of ``pair.from_code`` into ``pair.to_code``.

        Raises:
            FxRateError: If the pair cannot be priced
        """
        ...
