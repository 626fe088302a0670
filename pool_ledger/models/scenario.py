"""Pydantic models for replayable pool scenarios.

A scenario declares two tokens, an admin, starting balances and an ordered
list of steps. Steps are a discriminated union on ``op``; any step may name
the error class it is expected to raise.

Example:
    {
        "name": "first deposit then swap",
        "token_a": {"address": "0x...01", "symbol": "TKA"},
        "token_b": {"address": "0x...02", "symbol": "TKB"},
        "admin": "0x...ad",
        "balances": {"0x...a1": {"a": 1000, "b": 4000}},
        "steps": [
            {"op": "deposit", "caller": "0x...a1", "amount_a": 100, "amount_b": 400},
            {"op": "swap", "caller": "0x...a1", "direction": "A_TO_B", "amount_in": 10}
        ]
    }
"""

from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from pool_ledger.constants import DEFAULT_POOL_ADDRESS
from pool_ledger.models.types import Address, Asset, SwapDirection, Uint256


class TokenSpec(BaseModel):
    address: Address
    symbol: str = Field(min_length=1)


class AccountBalances(BaseModel):
    """Starting balances minted to an account (and approved to the pool)."""

    a: Uint256 = 0
    b: Uint256 = 0


class _Step(BaseModel):
    label: str | None = None
    # Error class name the step must raise, e.g. "SlippageExceeded"
    expect_error: str | None = None


class DepositStep(_Step):
    op: Literal["deposit"]
    caller: Address
    amount_a: Uint256
    amount_b: Uint256


class WithdrawStep(_Step):
    op: Literal["withdraw"]
    caller: Address
    shares: Uint256


class SwapStep(_Step):
    op: Literal["swap"]
    caller: Address
    direction: SwapDirection
    amount_in: Uint256
    min_amount_out: Uint256 = 0


class PriceStep(_Step):
    op: Literal["price"]
    asset: Asset


class PrivilegedWithdrawStep(_Step):
    op: Literal["privileged_withdraw"]
    caller: Address
    asset: Asset
    amount: Uint256


class TransferAdminStep(_Step):
    op: Literal["transfer_admin"]
    caller: Address
    new_admin: Address


class PauseStep(_Step):
    op: Literal["pause"]
    caller: Address


class ResumeStep(_Step):
    op: Literal["resume"]
    caller: Address


Step = Annotated[
    DepositStep
    | WithdrawStep
    | SwapStep
    | PriceStep
    | PrivilegedWithdrawStep
    | TransferAdminStep
    | PauseStep
    | ResumeStep,
    Field(discriminator="op"),
]


class Scenario(BaseModel):
    """A pool setup plus the steps to replay against it."""

    name: str = "scenario"
    token_a: TokenSpec
    token_b: TokenSpec
    admin: Address
    pool_address: Address = DEFAULT_POOL_ADDRESS
    # Replay against HardenedPool instead of the audited Pool
    hardened: bool = False
    fee_numerator: int | None = Field(default=None, gt=0)
    fee_denominator: int | None = Field(default=None, gt=0)
    price_scale: int | None = Field(default=None, gt=0)
    balances: dict[Address, AccountBalances] = Field(default_factory=dict)
    steps: list[Step] = Field(default_factory=list)


def load_scenario(path: Path) -> Scenario:
    """Load and validate a scenario JSON file.

    Raises:
        pydantic.ValidationError: If the file does not describe a valid scenario
    """
    return Scenario.model_validate_json(path.read_text())
