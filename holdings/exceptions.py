class HoldingsError(Exception):
    """Base exception for all holdings valuation errors."""

    pass


class ContractError(HoldingsError):
    """Raised when a holding contract payload cannot be read at all."""

    pass


class FxRateError(HoldingsError):
    """Raised when an FX rate is unavailable or unusable (e.g., non-positive)."""

    pass
