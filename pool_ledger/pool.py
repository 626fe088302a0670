"""Constant-product pool ledger.

The Pool owns two reserve counters, a provider -> share balance mapping and
a total-share counter, and settles deposits, withdrawals and exact-input
swaps against them. Token movements go through the TransferAgent
collaborator; every operation is applied as one indivisible transaction.

This class reproduces the audited contract as-is, including its known
defects:
- swap_exact_in pulls the input before pricing the trade
- withdraw updates the ledger before paying out
- deposits off the reserve ratio are credited only for their weaker side
- privileged_withdraw has no access control and leaves reserves stale

HardenedPool (pool_ledger.hardened) is the remediated variant.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

import structlog

from pool_ledger.access import PauseGate, PauseSwitch
from pool_ledger.config import DEFAULT_POOL_CONFIG, PoolConfig
from pool_ledger.constants import DEFAULT_POOL_ADDRESS, NULL_ADDRESS
from pool_ledger.errors import (
    InsufficientLiquidity,
    InsufficientShares,
    InvalidAddress,
    InvalidAmount,
    InvalidState,
    PoolPaused,
    SlippageExceeded,
    TransferFailed,
    Unauthorized,
    UnknownAsset,
)
from pool_ledger.math.constant_product import (
    Quote,
    initial_shares,
    proportional_shares,
    quote_exact_in,
    redemption_amounts,
    spot_price,
)
from pool_ledger.models.events import (
    AdminTransferred,
    LedgerEvent,
    LiquidityAdded,
    LiquidityRemoved,
    Paused,
    SwapExecuted,
    Unpaused,
)
from pool_ledger.models.types import Asset, SwapDirection, is_valid_address, normalize_address
from pool_ledger.safe_int import S
from pool_ledger.tokens import TransferAgent
from pool_ledger.transaction import atomic

logger = structlog.get_logger()


@dataclass(frozen=True)
class PoolState:
    """Point-in-time copy of the ledger."""

    reserve_a: int
    reserve_b: int
    total_shares: int
    share_balances: dict[str, int] = field(default_factory=dict)
    admin: str = NULL_ADDRESS

    @property
    def k(self) -> int:
        return self.reserve_a * self.reserve_b


class Pool:
    """Two-asset constant-product pool ledger.

    Args:
        token_a: Transfer agent for asset A
        token_b: Transfer agent for asset B
        admin: Address allowed to pause, resume and hand over admin rights
        address: Account the pool holds its token balances under
        config: Fee and price-scale parameters
        pause_gate: Pause collaborator (defaults to an in-memory PauseSwitch)
    """

    def __init__(
        self,
        token_a: TransferAgent,
        token_b: TransferAgent,
        admin: str,
        *,
        address: str = DEFAULT_POOL_ADDRESS,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
        pause_gate: PauseGate | None = None,
    ) -> None:
        if normalize_address(token_a.address) == normalize_address(token_b.address):
            raise ValueError(f"Pool assets must differ, got {token_a.address} twice")

        self.token_a = token_a
        self.token_b = token_b
        self.address = _account(address)
        self.admin = _non_null_account(admin)
        self.config = config
        self.pause_gate: PauseGate = pause_gate if pause_gate is not None else PauseSwitch()

        self.reserve_a = 0
        self.reserve_b = 0
        self.total_shares = 0
        self.share_balances: dict[str, int] = {}
        self.events: list[LedgerEvent] = []

        # Serializes every operation against this pool
        self._lock = threading.RLock()

    # --- Views ---

    @property
    def reserves(self) -> tuple[int, int]:
        return self.reserve_a, self.reserve_b

    def share_balance(self, provider: str) -> int:
        return self.share_balances.get(normalize_address(provider), 0)

    def token(self, asset: Asset | str) -> TransferAgent:
        """Transfer agent for an asset, given as Asset or token address."""
        return self.token_a if self._resolve_asset(asset) is Asset.A else self.token_b

    def is_admin(self, caller: str) -> bool:
        if not isinstance(caller, str) or not is_valid_address(normalize_address(caller)):
            return False
        return normalize_address(caller) == self.admin

    def is_paused(self) -> bool:
        return self.pause_gate.is_paused()

    def state(self) -> PoolState:
        with self._lock:
            return PoolState(
                reserve_a=self.reserve_a,
                reserve_b=self.reserve_b,
                total_shares=self.total_shares,
                share_balances=dict(self.share_balances),
                admin=self.admin,
            )

    def quote(self, direction: SwapDirection | str, amount_in: int) -> Quote:
        """Preview an exact-input swap against the current reserves.

        Raises:
            InvalidAmount: If amount_in is not positive
            InsufficientLiquidity: If either reserve is zero
        """
        direction = SwapDirection(direction)
        with self._lock:
            self._validate_swap(amount_in, 0)
            reserve_in, reserve_out = self._reserves_for(direction)
            return quote_exact_in(amount_in, reserve_in, reserve_out, self.config)

    def price_of(self, asset: Asset | str) -> int:
        """Spot price of asset in units of the other asset, scaled by config.price_scale.

        Raises:
            InsufficientLiquidity: If either reserve is zero
            UnknownAsset: If asset is not one of the pool's tokens
        """
        resolved = self._resolve_asset(asset)
        with self._lock:
            self._require_liquidity()
            if resolved is Asset.A:
                return spot_price(self.reserve_a, self.reserve_b, self.config.price_scale)
            return spot_price(self.reserve_b, self.reserve_a, self.config.price_scale)

    # --- Liquidity ---

    def deposit(self, amount_a: int, amount_b: int, provider: str) -> int:
        """Add both assets to the pool and mint shares to provider.

        The first deposit mints floor(sqrt(a * b)) shares. Later deposits mint
        the smaller of the two per-side ratios; the full amounts are pulled
        either way.

        Returns:
            Number of shares minted

        Raises:
            PoolPaused, InvalidAddress, InvalidAmount, TransferFailed
        """
        with self._lock:
            self._require_not_paused("deposit")
            provider = _account(provider)
            if amount_a <= 0 or amount_b <= 0:
                raise InvalidAmount(
                    f"Deposit amounts must be positive: amount_a={amount_a}, amount_b={amount_b}"
                )

            with atomic(*self._participants(), name="deposit"):
                self._pull(self.token_a, provider, amount_a)
                self._pull(self.token_b, provider, amount_b)

                if self.total_shares == 0:
                    minted = initial_shares(amount_a, amount_b)
                else:
                    minted = proportional_shares(
                        amount_a, amount_b, self.reserve_a, self.reserve_b, self.total_shares
                    )
                self._check_mint(minted, provider)

                self.reserve_a = (S(self.reserve_a) + amount_a).to_uint256()
                self.reserve_b = (S(self.reserve_b) + amount_b).to_uint256()
                self.share_balances[provider] = (
                    S(self.share_balances.get(provider, 0)) + minted
                ).to_uint256()
                self.total_shares = (S(self.total_shares) + minted).to_uint256()

            self._emit(
                LiquidityAdded(
                    provider=provider,
                    amount_a=amount_a,
                    amount_b=amount_b,
                    shares_minted=minted,
                )
            )
            logger.info(
                "liquidity_added",
                provider=provider,
                amount_a=amount_a,
                amount_b=amount_b,
                shares_minted=minted,
                total_shares=self.total_shares,
            )
            return minted

    def withdraw(self, share_amount: int, provider: str) -> tuple[int, int]:
        """Burn shares for a proportional slice of both reserves.

        Ledger state is updated before the outbound transfers run.

        Returns:
            Tuple of (amount_a, amount_b) paid out

        Raises:
            PoolPaused, InvalidAddress, InvalidAmount, InsufficientShares, TransferFailed
            DivisionByZero: If total_shares is zero while provider holds shares
        """
        with self._lock:
            self._require_not_paused("withdraw")
            provider = _account(provider)
            if share_amount <= 0:
                raise InvalidAmount(f"Share amount must be positive: {share_amount}")
            balance = self.share_balances.get(provider, 0)
            if balance < share_amount:
                raise InsufficientShares(
                    f"Provider {provider} holds {balance} shares, requested {share_amount}"
                )

            with atomic(*self._participants(), name="withdraw"):
                amount_a, amount_b = redemption_amounts(
                    share_amount, self.reserve_a, self.reserve_b, self.total_shares
                )

                self.share_balances[provider] = (S(balance) - share_amount).to_uint256()
                self.total_shares = (S(self.total_shares) - share_amount).to_uint256()
                self.reserve_a = (S(self.reserve_a) - amount_a).to_uint256()
                self.reserve_b = (S(self.reserve_b) - amount_b).to_uint256()

                self._push(self.token_a, provider, amount_a)
                self._push(self.token_b, provider, amount_b)

            self._emit(
                LiquidityRemoved(
                    provider=provider,
                    amount_a=amount_a,
                    amount_b=amount_b,
                    shares_burned=share_amount,
                )
            )
            logger.info(
                "liquidity_removed",
                provider=provider,
                amount_a=amount_a,
                amount_b=amount_b,
                shares_burned=share_amount,
                total_shares=self.total_shares,
            )
            return amount_a, amount_b

    # --- Swaps ---

    def swap_exact_in(
        self,
        direction: SwapDirection | str,
        amount_in: int,
        min_amount_out: int,
        trader: str,
    ) -> int:
        """Swap an exact input amount for as much output as the curve gives.

        Returns:
            Output amount paid to trader

        Raises:
            PoolPaused, InvalidAddress, InvalidAmount, InsufficientLiquidity,
            SlippageExceeded, TransferFailed
        """
        direction = SwapDirection(direction)
        with self._lock:
            self._require_not_paused("swap")
            trader = _account(trader)
            self._validate_swap(amount_in, min_amount_out)

            with atomic(*self._participants(), name="swap"):
                quote = self._execute_swap(direction, amount_in, min_amount_out, trader)

            self._emit(
                SwapExecuted(
                    trader=trader,
                    direction=direction,
                    amount_in=amount_in,
                    amount_out=quote.amount_out,
                )
            )
            logger.info(
                "swap_executed",
                trader=trader,
                direction=direction.value,
                amount_in=amount_in,
                amount_out=quote.amount_out,
                fee_retained=quote.fee_retained,
                reserve_a=self.reserve_a,
                reserve_b=self.reserve_b,
            )
            return quote.amount_out

    def _execute_swap(
        self,
        direction: SwapDirection,
        amount_in: int,
        min_amount_out: int,
        trader: str,
    ) -> Quote:
        """Settle a swap: pull input, price it, check slippage, pay out."""
        token_in = self.token(direction.asset_in)
        token_out = self.token(direction.asset_out)

        self._pull(token_in, trader, amount_in)

        reserve_in, reserve_out = self._reserves_for(direction)
        quote = quote_exact_in(amount_in, reserve_in, reserve_out, self.config)
        self._check_slippage(quote, min_amount_out)

        self._apply_swap(direction, quote)
        self._push(token_out, trader, quote.amount_out)
        return quote

    def _apply_swap(self, direction: SwapDirection, quote: Quote) -> None:
        new_in = (S(quote.reserve_in) + quote.amount_in).to_uint256()
        new_out = (S(quote.reserve_out) - quote.amount_out).to_uint256()
        if direction is SwapDirection.A_TO_B:
            self.reserve_a, self.reserve_b = new_in, new_out
        else:
            self.reserve_b, self.reserve_a = new_in, new_out

    def _check_slippage(self, quote: Quote, min_amount_out: int) -> None:
        if quote.amount_out < min_amount_out:
            logger.warning(
                "slippage_exceeded",
                amount_in=quote.amount_in,
                amount_out=quote.amount_out,
                min_amount_out=min_amount_out,
            )
            raise SlippageExceeded(
                f"Output {quote.amount_out} is below the minimum {min_amount_out}"
            )

    # --- Administrative operations ---

    def privileged_withdraw(self, asset: Asset | str, amount: int, caller: str) -> None:
        """Send amount of asset from the pool's balance to caller.

        There is no caller check and the tracked reserves are not touched, so
        anyone can drain the pool and later swaps price against stale reserves.
        No event is emitted.

        Raises:
            InvalidAddress, InvalidAmount, UnknownAsset, TransferFailed
        """
        resolved = self._resolve_asset(asset)
        with self._lock:
            caller = _account(caller)
            if amount <= 0:
                raise InvalidAmount(f"Withdrawal amount must be positive: {amount}")

            with atomic(*self._participants(), name="privileged_withdraw"):
                self._push(self.token(resolved), caller, amount)

            logger.warning(
                "privileged_withdraw",
                asset=resolved.value,
                amount=amount,
                caller=caller,
                caller_is_admin=caller == self.admin,
                tracked_reserve=self.reserve_a if resolved is Asset.A else self.reserve_b,
            )

    def transfer_admin(self, new_admin: str, caller: str) -> None:
        """Hand admin rights to new_admin.

        Raises:
            Unauthorized: If caller is not the current admin
            InvalidAddress: If new_admin is malformed or the null address
        """
        with self._lock:
            self._require_admin(caller, "transfer_admin")
            new_admin = _non_null_account(new_admin)
            previous = self.admin
            self.admin = new_admin

            self._emit(AdminTransferred(previous_admin=previous, new_admin=new_admin))
            logger.info("admin_transferred", previous_admin=previous, new_admin=new_admin)

    def pause(self, caller: str) -> None:
        """Set the pause gate; deposits, withdrawals and swaps are rejected until resume()."""
        with self._lock:
            switch = self._require_switch()
            self._require_admin(caller, "pause")
            if switch.is_paused():
                raise InvalidState("Pool is already paused")
            switch.set_paused(True)
            self._emit(Paused(account=self.admin))
            logger.info("pool_paused", account=self.admin)

    def resume(self, caller: str) -> None:
        with self._lock:
            switch = self._require_switch()
            self._require_admin(caller, "resume")
            if not switch.is_paused():
                raise InvalidState("Pool is not paused")
            switch.set_paused(False)
            self._emit(Unpaused(account=self.admin))
            logger.info("pool_resumed", account=self.admin)

    # --- Transaction participation ---

    def snapshot(self) -> tuple[PoolState, int]:
        return self.state(), len(self.events)

    def restore(self, state: tuple[PoolState, int]) -> None:
        ledger, event_count = state
        self.reserve_a = ledger.reserve_a
        self.reserve_b = ledger.reserve_b
        self.total_shares = ledger.total_shares
        self.share_balances = dict(ledger.share_balances)
        self.admin = ledger.admin
        del self.events[event_count:]

    # --- Internals ---

    def _participants(self) -> tuple:
        return (self, self.token_a, self.token_b)

    def _emit(self, event: LedgerEvent) -> None:
        self.events.append(event)

    def _check_mint(self, minted: int, provider: str) -> None:
        if minted == 0:
            # Deposit is still taken in full
            logger.warning("zero_shares_minted", provider=provider, total_shares=self.total_shares)

    def _pull(self, token: TransferAgent, owner: str, amount: int) -> None:
        if not token.transfer_from(self.address, owner, self.address, amount):
            logger.warning("transfer_in_failed", token=token.address, owner=owner, amount=amount)
            raise TransferFailed(f"transfer_from {owner} of {amount} failed on {token.address}")

    def _push(self, token: TransferAgent, destination: str, amount: int) -> None:
        if not token.transfer(self.address, destination, amount):
            logger.warning(
                "transfer_out_failed", token=token.address, destination=destination, amount=amount
            )
            raise TransferFailed(f"transfer to {destination} of {amount} failed on {token.address}")

    def _reserves_for(self, direction: SwapDirection) -> tuple[int, int]:
        """Reserves ordered as (reserve_in, reserve_out)."""
        if direction is SwapDirection.A_TO_B:
            return self.reserve_a, self.reserve_b
        return self.reserve_b, self.reserve_a

    def _validate_swap(self, amount_in: int, min_amount_out: int) -> None:
        if amount_in <= 0:
            raise InvalidAmount(f"Swap input must be positive: {amount_in}")
        if min_amount_out < 0:
            raise InvalidAmount(f"Minimum output cannot be negative: {min_amount_out}")
        self._require_liquidity()

    def _require_liquidity(self) -> None:
        if self.reserve_a <= 0 or self.reserve_b <= 0:
            raise InsufficientLiquidity(
                f"Pool is not funded: reserve_a={self.reserve_a}, reserve_b={self.reserve_b}"
            )

    def _require_not_paused(self, operation: str) -> None:
        if self.pause_gate.is_paused():
            logger.warning("operation_rejected_paused", operation=operation)
            raise PoolPaused(f"Pool is paused, {operation} rejected")

    def _require_admin(self, caller: str, operation: str) -> None:
        if not self.is_admin(caller):
            logger.warning("unauthorized_caller", operation=operation, caller=caller)
            raise Unauthorized(f"{caller} is not the pool admin")

    def _require_switch(self) -> PauseSwitch:
        if not isinstance(self.pause_gate, PauseSwitch):
            raise InvalidState("Pause gate is managed outside the pool")
        return self.pause_gate

    def _resolve_asset(self, asset: Asset | str) -> Asset:
        if isinstance(asset, Asset):
            return asset
        if isinstance(asset, str):
            if asset in (Asset.A.value, Asset.B.value):
                return Asset(asset)
            address = normalize_address(asset)
            if address == normalize_address(self.token_a.address):
                return Asset.A
            if address == normalize_address(self.token_b.address):
                return Asset.B
        raise UnknownAsset(f"Asset {asset!r} not in pool")


def _account(address: str) -> str:
    """Normalize an account address, raising InvalidAddress if malformed."""
    if not isinstance(address, str):
        raise InvalidAddress(f"Address must be a string, got {type(address).__name__}")
    normalized = normalize_address(address)
    if not is_valid_address(normalized):
        raise InvalidAddress(f"Invalid address: {address}")
    return normalized


def _non_null_account(address: str) -> str:
    normalized = _account(address)
    if normalized == NULL_ADDRESS:
        raise InvalidAddress("The null address cannot hold admin rights")
    return normalized
