"""
Core math modules

Целочисленные формулы обмена constant-product с гарантированным направлением
округления.
"""

# Swap Math
from src.core.math.swap_math import (
    BPS_DENOMINATOR,
    MAX_FEE_BPS,
    estimated_give,
    estimated_receive,
    fee_bps_from_ratio,
    minimum_receive,
    price_impact_percent,
    validate_fee_bps,
)

__all__ = [
    # Swap Math: Constants
    "BPS_DENOMINATOR",
    "MAX_FEE_BPS",
    # Swap Math: Functions
    "estimated_give",
    "estimated_receive",
    "fee_bps_from_ratio",
    "minimum_receive",
    "price_impact_percent",
    "validate_fee_bps",
]
