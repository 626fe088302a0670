"""Tests for constant-product pool math."""

import pytest

from pool_ledger.config import PoolConfig
from pool_ledger.math.constant_product import (
    initial_shares,
    proportional_shares,
    quote_exact_in,
    redemption_amounts,
    spot_price,
)
from pool_ledger.safe_int import DivisionByZero, Uint256Overflow


class TestInitialShares:
    """Tests for the first-deposit share mint."""

    def test_square_product(self):
        """(100, 400) mints sqrt(40000) = 200 shares."""
        assert initial_shares(100, 400) == 200

    def test_floors_non_square(self):
        """sqrt(2 * 5) = 3.16... floors to 3."""
        assert initial_shares(2, 5) == 3

    def test_minimum_deposit(self):
        assert initial_shares(1, 1) == 1

    def test_large_amounts_exact(self):
        """Large deposits use exact integer sqrt."""
        amount = 10**30
        assert initial_shares(amount, amount) == amount


class TestProportionalShares:
    """Tests for shares minted into a funded pool."""

    def test_matching_ratio(self):
        """(50, 200) into 100/400 with 200 shares mints 100 from each side."""
        assert proportional_shares(50, 200, 100, 400, 200) == 100

    def test_takes_weaker_side(self):
        """Excess on one side is not credited."""
        # A side alone would mint 100 * 200 // 100 = 200, B side 200 * 200 // 400 = 100
        assert proportional_shares(100, 200, 100, 400, 200) == 100
        assert proportional_shares(50, 4000, 100, 400, 200) == 100

    def test_floors_each_side(self):
        # 1 * 200 // 3 = 66, 4 * 200 // 12 = 66
        assert proportional_shares(1, 4, 3, 12, 200) == 66

    def test_dust_deposit_mints_zero(self):
        """A deposit too small for one share mints nothing."""
        assert proportional_shares(1, 1, 10**6, 10**6, 10) == 0

    def test_zero_reserve_raises(self):
        with pytest.raises(DivisionByZero):
            proportional_shares(1, 1, 0, 100, 10)


class TestRedemptionAmounts:
    """Tests for proportional withdrawal amounts."""

    def test_full_redemption(self):
        assert redemption_amounts(200, 100, 400, 200) == (100, 400)

    def test_half_redemption(self):
        assert redemption_amounts(100, 150, 600, 300) == (50, 200)

    def test_floors_toward_pool(self):
        # 1 * 100 // 3 = 33, 1 * 401 // 3 = 133
        assert redemption_amounts(1, 100, 401, 3) == (33, 133)

    def test_zero_total_shares_raises(self):
        """Division by zero is the failure mode when no shares exist."""
        with pytest.raises(DivisionByZero):
            redemption_amounts(1, 100, 400, 0)


class TestQuoteExactIn:
    """Tests for the exact-input swap formula."""

    def test_reference_swap(self):
        """10 in against 100/400: k=40000, raw 400 - 363 = 37, out 37 * 997 // 1000 = 36."""
        quote = quote_exact_in(10, 100, 400)

        assert quote.k_before == 40000
        assert quote.raw_out == 37
        assert quote.amount_out == 36
        assert quote.fee_retained == 1

    def test_k_after_not_below_k_before(self):
        quote = quote_exact_in(10, 100, 400)
        assert quote.k_after == 110 * 364
        assert quote.k_after > quote.k_before

    def test_raw_out_rounds_in_pool_favor(self):
        """floor(k / (Rin + in)) is subtracted, so raw_out is never rounded up."""
        # 3 * 7 = 21, 21 // 4 = 5, raw = 7 - 5 = 2 (exact curve gives 1.75)
        quote = quote_exact_in(1, 3, 7)
        assert quote.raw_out == 2
        assert quote.amount_out == 1

    def test_tiny_input_yields_zero(self):
        """Input too small to move the curve returns zero output."""
        assert quote_exact_in(1, 10**6, 10**6).amount_out == 0

    def test_huge_input_never_drains_reserve(self):
        quote = quote_exact_in(10**30, 100, 400)
        assert quote.raw_out == 400
        assert quote.amount_out == 398
        assert quote.amount_out < quote.reserve_out

    def test_custom_fee(self):
        """A 50% fee halves the raw output: 37 * 500 // 1000 = 18."""
        config = PoolConfig(fee_numerator=500, fee_denominator=1000)
        assert quote_exact_in(10, 100, 400, config).amount_out == 18

    def test_k_overflow_raises(self):
        with pytest.raises(Uint256Overflow):
            quote_exact_in(1, 2**200, 2**200)


class TestSpotPrice:
    """Tests for scaled spot prices."""

    def test_price_of_a(self):
        """100 A / 400 B prices A at 4 B."""
        assert spot_price(100, 400, 10**18) == 4 * 10**18

    def test_price_of_b(self):
        assert spot_price(400, 100, 10**18) == 10**18 // 4

    def test_floors(self):
        assert spot_price(3, 1, 10) == 3

    def test_zero_base_raises(self):
        with pytest.raises(DivisionByZero):
            spot_price(0, 100, 10**18)
