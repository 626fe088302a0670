"""Constant-product pool math.

The pool keeps x * y = k between trades. All functions here are pure and
operate on plain integers; every division is floor division, so rounding
always leaves the remainder in the pool.

Swap formula (exact input, fee taken from the output):
    k        = reserve_in * reserve_out
    raw_out  = reserve_out - k // (reserve_in + amount_in)
    out      = raw_out * 997 // 1000
"""

from __future__ import annotations

from dataclasses import dataclass

from pool_ledger.config import DEFAULT_POOL_CONFIG, PoolConfig
from pool_ledger.safe_int import S


@dataclass(frozen=True)
class Quote:
    """Result of pricing an exact-input swap against a pair of reserves.

    Quotes are ephemeral: they are computed inside a swap (or a preview)
    and never stored on the pool.
    """

    amount_in: int
    amount_out: int
    # Output before the fee is taken
    raw_out: int
    # Reserve product before amount_in is added
    k_before: int
    reserve_in: int
    reserve_out: int

    @property
    def fee_retained(self) -> int:
        """Output units the fee leaves in the pool."""
        return self.raw_out - self.amount_out

    @property
    def k_after(self) -> int:
        """Reserve product once the swap settles."""
        return (self.reserve_in + self.amount_in) * (self.reserve_out - self.amount_out)


def initial_shares(amount_a: int, amount_b: int) -> int:
    """Shares minted for the first deposit: floor(sqrt(a * b))."""
    return (S(amount_a) * S(amount_b)).isqrt().to_uint256()


def proportional_shares(
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> int:
    """Shares minted for a deposit into a funded pool.

    Takes the smaller of the two per-side ratios, so a deposit off the
    reserve ratio is credited only for its weaker side.

    Raises:
        DivisionByZero: If either reserve is zero
    """
    from_a = (S(amount_a) * S(total_shares)) // S(reserve_a)
    from_b = (S(amount_b) * S(total_shares)) // S(reserve_b)
    return from_a.min(from_b).to_uint256()


def redemption_amounts(
    share_amount: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> tuple[int, int]:
    """Amounts of each asset paid out for burning share_amount.

    Raises:
        DivisionByZero: If total_shares is zero
    """
    amount_a = (S(share_amount) * S(reserve_a)) // S(total_shares)
    amount_b = (S(share_amount) * S(reserve_b)) // S(total_shares)
    return amount_a.to_uint256(), amount_b.to_uint256()


def quote_exact_in(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    config: PoolConfig = DEFAULT_POOL_CONFIG,
) -> Quote:
    """Price an exact-input swap.

    Args:
        amount_in: Input token amount
        reserve_in: Reserve of input token before the swap
        reserve_out: Reserve of output token before the swap
        config: Fee parameters

    Returns:
        Quote with the fee-adjusted output

    Raises:
        DivisionByZero: If reserve_in + amount_in is zero
        Underflow: If the product exceeds what reserve_out can cover
    """
    k = S(reserve_in) * S(reserve_out)
    raw_out = S(reserve_out) - k // (S(reserve_in) + S(amount_in))
    amount_out = (raw_out * S(config.fee_numerator)) // S(config.fee_denominator)

    return Quote(
        amount_in=amount_in,
        amount_out=amount_out.to_uint256(),
        raw_out=raw_out.to_uint256(),
        k_before=k.to_uint256(),
        reserve_in=reserve_in,
        reserve_out=reserve_out,
    )


def spot_price(reserve_base: int, reserve_quote: int, price_scale: int) -> int:
    """Price of the base asset in quote units, scaled by price_scale.

    Raises:
        DivisionByZero: If reserve_base is zero
    """
    return ((S(reserve_quote) * S(price_scale)) // S(reserve_base)).to_uint256()
