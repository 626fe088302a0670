"""Integer math for the constant-product pool."""

from pool_ledger.math.constant_product import (
    Quote,
    initial_shares,
    proportional_shares,
    quote_exact_in,
    redemption_amounts,
    spot_price,
)

__all__ = [
    "Quote",
    "initial_shares",
    "proportional_shares",
    "quote_exact_in",
    "redemption_amounts",
    "spot_price",
]
