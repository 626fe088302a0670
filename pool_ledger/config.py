"""Pool configuration."""

import os
from dataclasses import dataclass

from pool_ledger.constants import FEE_DENOMINATOR, FEE_NUMERATOR, PRICE_SCALE


@dataclass(frozen=True)
class PoolConfig:
    """Centralized configuration for pool arithmetic.

    Attributes:
        fee_numerator: Multiplier applied to the raw swap output (default: 997)
        fee_denominator: Divisor applied after the multiplier (default: 1000)
        price_scale: Fixed-point scale for spot prices (default: 1e18)
    """

    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR
    price_scale: int = PRICE_SCALE

    def __post_init__(self) -> None:
        if self.fee_denominator <= 0:
            raise ValueError(f"fee_denominator must be positive: {self.fee_denominator}")
        # A zero fee lets floor division shrink k on every swap
        if not 0 < self.fee_numerator < self.fee_denominator:
            raise ValueError(
                f"fee_numerator must be in (0, {self.fee_denominator}): {self.fee_numerator}"
            )
        if self.price_scale <= 0:
            raise ValueError(f"price_scale must be positive: {self.price_scale}")

    @property
    def fee_bps(self) -> int:
        """Fee retained by the pool in basis points (30 for 997/1000)."""
        return (self.fee_denominator - self.fee_numerator) * 10_000 // self.fee_denominator

    @classmethod
    def from_env(cls) -> "PoolConfig":
        """Build a config from environment variables.

        - POOL_LEDGER_FEE_NUMERATOR (default: 997)
        - POOL_LEDGER_FEE_DENOMINATOR (default: 1000)
        - POOL_LEDGER_PRICE_SCALE (default: 10**18)

        Raises:
            ValueError: If a variable is not an integer or the result is invalid
        """
        return cls(
            fee_numerator=_env_int("POOL_LEDGER_FEE_NUMERATOR", FEE_NUMERATOR),
            fee_denominator=_env_int("POOL_LEDGER_FEE_DENOMINATOR", FEE_DENOMINATOR),
            price_scale=_env_int("POOL_LEDGER_PRICE_SCALE", PRICE_SCALE),
        )


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as err:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from err


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
