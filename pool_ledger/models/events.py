"""Events emitted by pool operations.

Each successful mutating operation appends exactly one event to
``Pool.events``; failed operations append nothing.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict

from pool_ledger.models.types import Address, SwapDirection, Uint256


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class LiquidityAdded(_Event):
    """A provider deposited both assets and received shares."""

    name: Literal["LiquidityAdded"] = "LiquidityAdded"
    provider: Address
    amount_a: Uint256
    amount_b: Uint256
    shares_minted: Uint256


class LiquidityRemoved(_Event):
    """A provider burned shares for a proportional slice of the reserves."""

    name: Literal["LiquidityRemoved"] = "LiquidityRemoved"
    provider: Address
    amount_a: Uint256
    amount_b: Uint256
    shares_burned: Uint256


class SwapExecuted(_Event):
    """An exact-input swap settled."""

    name: Literal["SwapExecuted"] = "SwapExecuted"
    trader: Address
    direction: SwapDirection
    amount_in: Uint256
    amount_out: Uint256


class AdminTransferred(_Event):
    name: Literal["AdminTransferred"] = "AdminTransferred"
    previous_admin: Address
    new_admin: Address


class Paused(_Event):
    name: Literal["Paused"] = "Paused"
    account: Address


class Unpaused(_Event):
    name: Literal["Unpaused"] = "Unpaused"
    account: Address


LedgerEvent = (
    LiquidityAdded | LiquidityRemoved | SwapExecuted | AdminTransferred | Paused | Unpaused
)
