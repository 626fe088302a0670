"""Test helpers module for shared test utilities.

- constants: Account and token addresses
- factories: Token and pool factory functions
"""

from tests.helpers.constants import (
    ADMIN,
    ALICE,
    BOB,
    CAROL,
    MALLORY,
    POOL,
    STARTING_BALANCE,
    TOKEN_A,
    TOKEN_B,
)
from tests.helpers.factories import fund, make_pool, make_tokens

__all__ = [
    # Constants
    "ADMIN",
    "ALICE",
    "BOB",
    "CAROL",
    "MALLORY",
    "POOL",
    "STARTING_BALANCE",
    "TOKEN_A",
    "TOKEN_B",
    # Factories
    "fund",
    "make_pool",
    "make_tokens",
]
