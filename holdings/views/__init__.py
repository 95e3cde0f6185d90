from .allocation import AllocationView
from .holdings import HoldingsView

__all__ = ["AllocationView", "HoldingsView"]
