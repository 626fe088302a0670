"""Protocol constants for the pool ledger.

Centralizes the fixed fee, price scaling and well-known addresses.
"""

from pool_ledger.models.types import UINT256_MAX as UINT256_MAX
from pool_ledger.models.types import is_valid_address

# Fixed-point scale for spot prices (1e18)
PRICE_SCALE = 10**18

# Swap fee as a multiplier on the raw output: 997/1000 keeps 30 bps in the pool
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000


def _validate_address(name: str, address: str) -> str:
    """Validate and return an address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# The null identity, never a valid admin
NULL_ADDRESS = _validate_address("null", "0x" + "00" * 20)

# Account the pool holds its token balances under when none is given
DEFAULT_POOL_ADDRESS = _validate_address("pool", "0x" + "00" * 19 + "a1")
