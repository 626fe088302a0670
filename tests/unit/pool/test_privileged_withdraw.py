"""Tests reproducing the unguarded privileged withdrawal."""

import pytest

from pool_ledger.errors import InvalidAmount, TransferFailed, UnknownAsset
from pool_ledger.invariants import check_invariants
from pool_ledger.math.constant_product import quote_exact_in
from pool_ledger.models.types import Asset
from tests.helpers import ADMIN, ALICE, BOB, MALLORY, POOL, STARTING_BALANCE, TOKEN_B


class TestUnguardedWithdrawal:
    def test_any_caller_can_withdraw(self, seeded_pool):
        """A non-admin moves tokens out of the pool."""
        assert not seeded_pool.is_admin(MALLORY)

        seeded_pool.privileged_withdraw(Asset.A, 50, MALLORY)

        assert seeded_pool.token_a.balance_of(MALLORY) == STARTING_BALANCE + 50
        assert seeded_pool.token_a.balance_of(POOL) == 50

    def test_reserves_left_stale(self, seeded_pool):
        seeded_pool.privileged_withdraw(Asset.A, 50, MALLORY)

        assert seeded_pool.reserves == (100, 400)
        assert seeded_pool.total_shares == 200

    def test_emits_no_event(self, seeded_pool):
        seeded_pool.privileged_withdraw(Asset.B, 10, MALLORY)
        assert len(seeded_pool.events) == 1

    def test_by_token_address(self, seeded_pool):
        seeded_pool.privileged_withdraw(TOKEN_B, 10, MALLORY)
        assert seeded_pool.token_b.balance_of(POOL) == 390

    def test_works_while_paused(self, seeded_pool):
        seeded_pool.pause(ADMIN)
        seeded_pool.privileged_withdraw(Asset.A, 100, MALLORY)
        assert seeded_pool.token_a.balance_of(POOL) == 0

    def test_detected_by_reserve_backing_check(self, seeded_pool):
        assert check_invariants(seeded_pool) == []

        seeded_pool.privileged_withdraw(Asset.A, 50, MALLORY)

        violations = check_invariants(seeded_pool)
        assert [v.name for v in violations] == ["reserve_backing"]


class TestStaleReserveSwap:
    def test_swap_priced_against_stale_reserve(self, seeded_pool):
        """After the drain, swaps still price against the tracked 100 A."""
        seeded_pool.privileged_withdraw(Asset.A, 50, MALLORY)

        amount_out = seeded_pool.swap_exact_in("B_TO_A", 40, 0, BOB)

        assert amount_out == quote_exact_in(40, 400, 100).amount_out == 9
        # Against what the pool really holds the trade is worth far less
        assert quote_exact_in(40, 400, 50).amount_out == 4
        assert seeded_pool.reserves == (91, 440)
        assert seeded_pool.token_a.balance_of(POOL) == 41

    def test_lps_absorb_the_loss(self, seeded_pool):
        """Withdrawal math still promises the stale reserves, which can no longer be paid."""
        seeded_pool.privileged_withdraw(Asset.A, 50, MALLORY)

        with pytest.raises(TransferFailed):
            seeded_pool.withdraw(200, ALICE)
        # A partial exit is still paid out of what is left
        assert seeded_pool.withdraw(100, ALICE) == (50, 200)
        assert seeded_pool.token_a.balance_of(POOL) == 0

    def test_fully_drained_side_blocks_swaps(self, seeded_pool):
        seeded_pool.privileged_withdraw(Asset.A, 100, MALLORY)
        before = seeded_pool.state()

        with pytest.raises(TransferFailed):
            seeded_pool.swap_exact_in("B_TO_A", 40, 0, BOB)

        assert seeded_pool.state() == before
        assert seeded_pool.token_b.balance_of(BOB) == STARTING_BALANCE


class TestWithdrawalFailures:
    def test_more_than_held(self, seeded_pool):
        with pytest.raises(TransferFailed):
            seeded_pool.privileged_withdraw(Asset.A, 101, MALLORY)
        assert seeded_pool.token_a.balance_of(POOL) == 100

    @pytest.mark.parametrize("amount", [0, -1])
    def test_non_positive_amount(self, seeded_pool, amount):
        with pytest.raises(InvalidAmount):
            seeded_pool.privileged_withdraw(Asset.A, amount, MALLORY)

    def test_unknown_asset(self, seeded_pool):
        with pytest.raises(UnknownAsset):
            seeded_pool.privileged_withdraw("0x" + "cc" * 20, 1, MALLORY)
