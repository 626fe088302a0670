"""Tests for Pool.price_of."""

import pytest

from pool_ledger.config import PoolConfig
from pool_ledger.errors import InsufficientLiquidity, UnknownAsset
from pool_ledger.models.types import Asset
from tests.helpers import ALICE, TOKEN_A, TOKEN_B, make_pool


class TestPriceOf:
    def test_price_of_a(self, seeded_pool):
        """100 A / 400 B: one A is worth 4 B."""
        assert seeded_pool.price_of(Asset.A) == 4 * 10**18

    def test_price_of_b(self, seeded_pool):
        assert seeded_pool.price_of(Asset.B) == 25 * 10**16

    def test_by_token_address(self, seeded_pool):
        assert seeded_pool.price_of(TOKEN_A) == seeded_pool.price_of(Asset.A)
        assert seeded_pool.price_of(TOKEN_B.upper().replace("0X", "0x")) == 25 * 10**16

    def test_by_asset_name(self, seeded_pool):
        assert seeded_pool.price_of("B") == 25 * 10**16

    def test_custom_scale(self):
        pool = make_pool(funded=[ALICE], config=PoolConfig(price_scale=10**6))
        pool.deposit(3, 7, ALICE)
        # 7 * 1e6 // 3
        assert pool.price_of(Asset.A) == 2_333_333

    def test_tracks_swaps(self, seeded_pool):
        seeded_pool.swap_exact_in("A_TO_B", 10, 0, ALICE)
        assert seeded_pool.price_of(Asset.A) == 364 * 10**18 // 110

    def test_read_only(self, seeded_pool):
        before = seeded_pool.state()
        seeded_pool.price_of(Asset.A)
        assert seeded_pool.state() == before
        assert len(seeded_pool.events) == 1

    def test_empty_pool(self, pool):
        with pytest.raises(InsufficientLiquidity):
            pool.price_of(Asset.A)

    def test_unknown_asset(self, seeded_pool):
        with pytest.raises(UnknownAsset):
            seeded_pool.price_of("0x" + "cc" * 20)
        with pytest.raises(ValueError):
            seeded_pool.price_of("C")
