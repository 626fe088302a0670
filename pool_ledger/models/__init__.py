"""Data models for the pool ledger."""

from pool_ledger.models.events import (
    AdminTransferred,
    LedgerEvent,
    LiquidityAdded,
    LiquidityRemoved,
    Paused,
    SwapExecuted,
    Unpaused,
)
from pool_ledger.models.types import (
    Address,
    Asset,
    SwapDirection,
    Uint256,
    is_valid_address,
    normalize_address,
)

__all__ = [
    # Types
    "Address",
    "Asset",
    "SwapDirection",
    "Uint256",
    "is_valid_address",
    "normalize_address",
    # Events
    "AdminTransferred",
    "LedgerEvent",
    "LiquidityAdded",
    "LiquidityRemoved",
    "Paused",
    "SwapExecuted",
    "Unpaused",
]
