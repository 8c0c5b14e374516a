"""
Domain models and value objects.

Contains fundamental domain entities like Asset, LiquidityPool, Order, UTxO.
"""

from src.core.domain.asset import (
    LOVELACE,
    Asset,
    Token,
    same_token,
    token_from_parts,
    token_parts,
)
from src.core.domain.liquidity_pool import LiquidityPool
from src.core.domain.order import Order, OrderState, OutputReference
from src.core.domain.utxo import (
    AddressType,
    AssetBalance,
    PayToAddress,
    Script,
    SpendUTxO,
    SwapFee,
    UTxO,
)

__all__ = [
    # Asset
    "LOVELACE",
    "Asset",
    "Token",
    "same_token",
    "token_from_parts",
    "token_parts",
    # Liquidity pool
    "LiquidityPool",
    # Order
    "Order",
    "OrderState",
    "OutputReference",
    # UTxO / payloads
    "AddressType",
    "AssetBalance",
    "PayToAddress",
    "Script",
    "SpendUTxO",
    "SwapFee",
    "UTxO",
]
