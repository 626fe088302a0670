"""Remediated pool variant.

HardenedPool fixes the defects Pool reproduces on purpose. It is a separate
class so the audited behavior stays available for comparison:
- privileged_withdraw is admin-only and limited to tokens the reserves do
  not account for, so tracked reserves stay backed
- swaps are priced and slippage-checked before any token moves
- deposits that would mint zero shares are rejected
"""

from __future__ import annotations

import structlog

from pool_ledger.errors import InsufficientLiquidity, InvalidAmount
from pool_ledger.math.constant_product import Quote, quote_exact_in
from pool_ledger.models.types import Asset, SwapDirection
from pool_ledger.pool import Pool, _account
from pool_ledger.transaction import atomic

logger = structlog.get_logger()


class HardenedPool(Pool):
    """Pool with access control, backed reserves and checks-effects-interactions swaps."""

    def surplus(self, asset: Asset | str) -> int:
        """Token balance held by the pool beyond the tracked reserve."""
        resolved = self._resolve_asset(asset)
        reserve = self.reserve_a if resolved is Asset.A else self.reserve_b
        return max(0, self.token(resolved).balance_of(self.address) - reserve)

    def privileged_withdraw(self, asset: Asset | str, amount: int, caller: str) -> None:
        """Send up to the untracked surplus of asset to the admin.

        Raises:
            Unauthorized: If caller is not the admin
            InsufficientLiquidity: If amount exceeds the surplus
            InvalidAddress, InvalidAmount, UnknownAsset, TransferFailed
        """
        resolved = self._resolve_asset(asset)
        with self._lock:
            caller = _account(caller)
            self._require_admin(caller, "privileged_withdraw")
            if amount <= 0:
                raise InvalidAmount(f"Withdrawal amount must be positive: {amount}")
            available = self.surplus(resolved)
            if amount > available:
                raise InsufficientLiquidity(
                    f"Only {available} of asset {resolved.value} is outside the reserves, "
                    f"requested {amount}"
                )

            with atomic(*self._participants(), name="privileged_withdraw"):
                self._push(self.token(resolved), caller, amount)

            logger.info("surplus_withdrawn", asset=resolved.value, amount=amount, caller=caller)

    def _execute_swap(
        self,
        direction: SwapDirection,
        amount_in: int,
        min_amount_out: int,
        trader: str,
    ) -> Quote:
        reserve_in, reserve_out = self._reserves_for(direction)
        quote = quote_exact_in(amount_in, reserve_in, reserve_out, self.config)
        self._check_slippage(quote, min_amount_out)

        self._pull(self.token(direction.asset_in), trader, amount_in)
        self._apply_swap(direction, quote)
        self._push(self.token(direction.asset_out), trader, quote.amount_out)
        return quote

    def _check_mint(self, minted: int, provider: str) -> None:
        if minted == 0:
            raise InvalidAmount(f"Deposit by {provider} is too small to mint any shares")
