"""Shared type definitions for the pool ledger.

These types are used by the ledger, its events and the scenario models.
"""

from enum import Enum
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

# Maximum uint256 value
UINT256_MAX = 2**256 - 1


class Asset(str, Enum):
    """One side of the pool."""

    A = "A"
    B = "B"

    @property
    def other(self) -> "Asset":
        return Asset.B if self is Asset.A else Asset.A


class SwapDirection(str, Enum):
    """Which asset a swap takes in and which it pays out."""

    A_TO_B = "A_TO_B"
    B_TO_A = "B_TO_A"

    @property
    def asset_in(self) -> Asset:
        return Asset.A if self is SwapDirection.A_TO_B else Asset.B

    @property
    def asset_out(self) -> Asset:
        return self.asset_in.other


def validate_uint256(value: Any) -> int:
    """Validate that a value is a uint256, given as int or decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        The value as an int

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a boolean")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return value


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an address to lowercase with a 0x prefix.

    Args:
        address: An address (with or without 0x prefix)
        validate: If True, raises ValueError for invalid addresses.

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is not a valid address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid 20-byte hex address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def _normalize_address_field(value: Any) -> Any:
    if isinstance(value, str):
        return normalize_address(value)
    return value


# 20-byte hex address, normalized to lowercase
Address = Annotated[
    str,
    BeforeValidator(_normalize_address_field),
    Field(pattern=r"^0x[a-f0-9]{40}$"),
]

# 256-bit unsigned integer (int or decimal string on input)
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer"),
]
