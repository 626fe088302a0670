"""Constant-product AMM pool ledger - Python implementation."""

from pool_ledger.config import DEFAULT_POOL_CONFIG, PoolConfig
from pool_ledger.hardened import HardenedPool
from pool_ledger.math.constant_product import Quote
from pool_ledger.models.types import Asset, SwapDirection
from pool_ledger.pool import Pool
from pool_ledger.tokens import Token

__version__ = "0.1.0"
__all__ = [
    "Asset",
    "DEFAULT_POOL_CONFIG",
    "HardenedPool",
    "Pool",
    "PoolConfig",
    "Quote",
    "SwapDirection",
    "Token",
    "__version__",
]
