"""In-memory token ledger used as the pool's asset-transfer collaborator.

Token mirrors the subset of ERC20 the pool relies on. Transfers report
failure by returning False (insufficient balance or allowance) and leave
balances untouched when they do.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import structlog

from pool_ledger.constants import UINT256_MAX
from pool_ledger.models.types import normalize_address

logger = structlog.get_logger()


@runtime_checkable
class TransferAgent(Protocol):
    """Protocol for the asset-transfer collaborator the pool talks to."""

    address: str

    def balance_of(self, account: str) -> int: ...

    def transfer(self, sender: str, destination: str, amount: int) -> bool:
        """Move amount from sender to destination; False if sender lacks the balance."""
        ...

    def transfer_from(self, spender: str, owner: str, destination: str, amount: int) -> bool:
        """Move amount from owner to destination on behalf of spender.

        Returns False if owner lacks the balance or spender the allowance.
        """
        ...

    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...


@dataclass
class Token:
    """A fungible token with balances and allowances keyed by address."""

    address: str
    symbol: str
    balances: dict[str, int] = field(default_factory=dict)
    allowances: dict[tuple[str, str], int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.address = normalize_address(self.address, validate=True)

    def balance_of(self, account: str) -> int:
        return self.balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self.allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def mint(self, account: str, amount: int) -> None:
        """Credit amount to account out of thin air (test and scenario setup)."""
        if amount < 0:
            raise ValueError(f"Cannot mint a negative amount: {amount}")
        account = normalize_address(account)
        self.balances[account] = self.balances.get(account, 0) + amount

    def approve(self, owner: str, spender: str, amount: int) -> None:
        if not 0 <= amount <= UINT256_MAX:
            raise ValueError(f"Allowance out of range: {amount}")
        self.allowances[(normalize_address(owner), normalize_address(spender))] = amount

    def transfer(self, sender: str, destination: str, amount: int) -> bool:
        sender = normalize_address(sender)
        if amount < 0 or self.balances.get(sender, 0) < amount:
            logger.debug(
                "token_transfer_rejected",
                token=self.symbol,
                sender=sender,
                amount=amount,
                balance=self.balances.get(sender, 0),
            )
            return False
        self._move(sender, normalize_address(destination), amount)
        return True

    def transfer_from(self, spender: str, owner: str, destination: str, amount: int) -> bool:
        spender = normalize_address(spender)
        owner = normalize_address(owner)
        allowed = self.allowances.get((owner, spender), 0)
        if amount < 0 or allowed < amount or self.balances.get(owner, 0) < amount:
            logger.debug(
                "token_transfer_from_rejected",
                token=self.symbol,
                owner=owner,
                spender=spender,
                amount=amount,
                allowance=allowed,
                balance=self.balances.get(owner, 0),
            )
            return False
        # Infinite approvals are never decremented
        if allowed != UINT256_MAX:
            self.allowances[(owner, spender)] = allowed - amount
        self._move(owner, normalize_address(destination), amount)
        return True

    def _move(self, source: str, destination: str, amount: int) -> None:
        self.balances[source] = self.balances.get(source, 0) - amount
        self.balances[destination] = self.balances.get(destination, 0) + amount

    # --- Transaction participation ---

    def snapshot(self) -> tuple[dict[str, int], dict[tuple[str, str], int]]:
        return dict(self.balances), dict(self.allowances)

    def restore(self, state: tuple[dict[str, int], dict[tuple[str, str], int]]) -> None:
        balances, allowances = state
        self.balances = dict(balances)
        self.allowances = dict(allowances)
