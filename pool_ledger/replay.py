"""Scenario replay harness.

Builds a pool from a Scenario, applies each step in order and records what
happened: the result or the error raised, the events emitted and any
invariant the step left broken. A step is unexpected when the error it
raised (or didn't) differs from its ``expect_error``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

from pool_ledger.config import DEFAULT_POOL_CONFIG, PoolConfig
from pool_ledger.constants import UINT256_MAX
from pool_ledger.errors import LedgerError
from pool_ledger.hardened import HardenedPool
from pool_ledger.invariants import InvariantViolation, check_invariants
from pool_ledger.models.scenario import (
    DepositStep,
    PauseStep,
    PriceStep,
    PrivilegedWithdrawStep,
    ResumeStep,
    Scenario,
    Step,
    SwapStep,
    TransferAdminStep,
    WithdrawStep,
)
from pool_ledger.pool import Pool, PoolState
from pool_ledger.tokens import Token

logger = structlog.get_logger()


@dataclass
class StepOutcome:
    """What a single replayed step did."""

    index: int
    op: str
    label: str | None
    result: Any = None
    error: str | None = None
    error_detail: str | None = None
    expected_error: str | None = None
    events: list[dict[str, Any]] = field(default_factory=list)
    violations: list[InvariantViolation] = field(default_factory=list)
    state: PoolState | None = None

    @property
    def unexpected(self) -> bool:
        return self.error != self.expected_error

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "op": self.op,
            "label": self.label,
            "result": _jsonable(self.result),
            "error": self.error,
            "error_detail": self.error_detail,
            "expected_error": self.expected_error,
            "unexpected": self.unexpected,
            "events": self.events,
            "violations": [dataclasses.asdict(v) for v in self.violations],
            "state": dataclasses.asdict(self.state) if self.state is not None else None,
        }


@dataclass
class ReplayReport:
    """Outcome of replaying a whole scenario."""

    scenario: str
    outcomes: list[StepOutcome]
    pool: Pool

    @property
    def unexpected_steps(self) -> list[StepOutcome]:
        return [outcome for outcome in self.outcomes if outcome.unexpected]

    @property
    def ok(self) -> bool:
        return not self.unexpected_steps

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenario": self.scenario,
            "ok": self.ok,
            "steps": [outcome.to_dict() for outcome in self.outcomes],
            "final_state": dataclasses.asdict(self.pool.state()),
            "violations": [dataclasses.asdict(v) for v in check_invariants(self.pool)],
        }


def build_pool(scenario: Scenario) -> Pool:
    """Create the tokens, fund the accounts and construct the pool.

    Every funded account approves the pool for the maximum allowance.
    """
    token_a = Token(address=scenario.token_a.address, symbol=scenario.token_a.symbol)
    token_b = Token(address=scenario.token_b.address, symbol=scenario.token_b.symbol)

    for account, balances in scenario.balances.items():
        token_a.mint(account, balances.a)
        token_b.mint(account, balances.b)
        token_a.approve(account, scenario.pool_address, UINT256_MAX)
        token_b.approve(account, scenario.pool_address, UINT256_MAX)

    config = PoolConfig(
        fee_numerator=scenario.fee_numerator or DEFAULT_POOL_CONFIG.fee_numerator,
        fee_denominator=scenario.fee_denominator or DEFAULT_POOL_CONFIG.fee_denominator,
        price_scale=scenario.price_scale or DEFAULT_POOL_CONFIG.price_scale,
    )
    pool_cls = HardenedPool if scenario.hardened else Pool
    return pool_cls(
        token_a,
        token_b,
        scenario.admin,
        address=scenario.pool_address,
        config=config,
    )


_HANDLERS: dict[type, Callable[[Pool, Any], Any]] = {
    DepositStep: lambda pool, s: pool.deposit(s.amount_a, s.amount_b, s.caller),
    WithdrawStep: lambda pool, s: pool.withdraw(s.shares, s.caller),
    SwapStep: lambda pool, s: pool.swap_exact_in(
        s.direction, s.amount_in, s.min_amount_out, s.caller
    ),
    PriceStep: lambda pool, s: pool.price_of(s.asset),
    PrivilegedWithdrawStep: lambda pool, s: pool.privileged_withdraw(s.asset, s.amount, s.caller),
    TransferAdminStep: lambda pool, s: pool.transfer_admin(s.new_admin, s.caller),
    PauseStep: lambda pool, s: pool.pause(s.caller),
    ResumeStep: lambda pool, s: pool.resume(s.caller),
}


def apply_step(pool: Pool, step: Step) -> Any:
    """Run one step against the pool and return the operation's result."""
    return _HANDLERS[type(step)](pool, step)


def replay_scenario(scenario: Scenario, pool: Pool | None = None) -> ReplayReport:
    """Replay every step of a scenario.

    Args:
        scenario: The scenario to replay
        pool: Pool to replay against (built from the scenario if None)

    Returns:
        ReplayReport with one StepOutcome per step
    """
    if pool is None:
        pool = build_pool(scenario)

    outcomes: list[StepOutcome] = []
    for index, step in enumerate(scenario.steps):
        event_count = len(pool.events)
        outcome = StepOutcome(
            index=index,
            op=step.op,
            label=step.label,
            expected_error=step.expect_error,
        )
        try:
            outcome.result = apply_step(pool, step)
        except (LedgerError, ArithmeticError) as exc:
            outcome.error = type(exc).__name__
            outcome.error_detail = str(exc)

        outcome.events = [event.model_dump(mode="json") for event in pool.events[event_count:]]
        outcome.violations = check_invariants(pool)
        outcome.state = pool.state()
        outcomes.append(outcome)

        if outcome.unexpected:
            logger.warning(
                "unexpected_step_outcome",
                scenario=scenario.name,
                index=index,
                op=step.op,
                error=outcome.error,
                expected_error=outcome.expected_error,
            )
        else:
            logger.debug("step_replayed", scenario=scenario.name, index=index, op=step.op)

    return ReplayReport(scenario=scenario.name, outcomes=outcomes, pool=pool)


def _jsonable(value: Any) -> Any:
    if isinstance(value, tuple):
        return list(value)
    return value
