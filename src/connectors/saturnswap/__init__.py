"""SaturnSwap connector: order placement/cancellation payloads and datum decoding."""

from .config import SaturnSwapConfig
from .dex import SaturnSwap

__all__ = [
    "SaturnSwap",
    "SaturnSwapConfig",
]
