"""Invariant checks over a pool's ledger.

check_invariants() never raises for a broken pool; it reports what it finds
so tests and the replay harness can assert on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pool_ledger.pool import Pool


@dataclass(frozen=True)
class InvariantViolation:
    """A single broken invariant."""

    name: str
    detail: str


def check_invariants(pool: Pool) -> list[InvariantViolation]:
    """Check the ledger invariants of a pool.

    - share_conservation: total_shares equals the sum of share balances
    - reserve_positivity: with shares outstanding, both reserves are positive
    - empty_pool: with no shares outstanding, both reserves are zero
    - reserve_backing: the pool's token balances cover its tracked reserves

    Returns:
        Violations found, empty if the pool is consistent
    """
    violations: list[InvariantViolation] = []
    state = pool.state()

    share_sum = sum(state.share_balances.values())
    if share_sum != state.total_shares:
        violations.append(
            InvariantViolation(
                "share_conservation",
                f"total_shares={state.total_shares} but balances sum to {share_sum}",
            )
        )

    if any(balance < 0 for balance in state.share_balances.values()):
        violations.append(InvariantViolation("share_conservation", "negative share balance"))

    if state.total_shares > 0 and (state.reserve_a <= 0 or state.reserve_b <= 0):
        violations.append(
            InvariantViolation(
                "reserve_positivity",
                f"reserves ({state.reserve_a}, {state.reserve_b}) with "
                f"{state.total_shares} shares outstanding",
            )
        )

    if state.total_shares == 0 and (state.reserve_a != 0 or state.reserve_b != 0):
        violations.append(
            InvariantViolation(
                "empty_pool",
                f"reserves ({state.reserve_a}, {state.reserve_b}) with no shares outstanding",
            )
        )

    for label, token, reserve in (
        ("A", pool.token_a, state.reserve_a),
        ("B", pool.token_b, state.reserve_b),
    ):
        held = token.balance_of(pool.address)
        if held < reserve:
            violations.append(
                InvariantViolation(
                    "reserve_backing",
                    f"asset {label}: pool holds {held} but tracks a reserve of {reserve}",
                )
            )

    return violations
