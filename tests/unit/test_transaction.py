"""Tests for the atomic() snapshot/rollback context manager."""

import pytest

from pool_ledger.access import PauseSwitch
from pool_ledger.tokens import Token
from pool_ledger.transaction import atomic
from tests.helpers import ALICE, BOB, TOKEN_A


class TestAtomic:
    def test_commits_on_success(self):
        token = Token(address=TOKEN_A, symbol="TKA")
        token.mint(ALICE, 10)

        with atomic(token):
            token.transfer(ALICE, BOB, 4)

        assert token.balance_of(BOB) == 4

    def test_rolls_back_every_participant(self):
        token = Token(address=TOKEN_A, symbol="TKA")
        token.mint(ALICE, 10)
        switch = PauseSwitch()

        with pytest.raises(RuntimeError, match="boom"):
            with atomic(token, switch, name="test"):
                token.transfer(ALICE, BOB, 4)
                switch.set_paused(True)
                raise RuntimeError("boom")

        assert token.balance_of(ALICE) == 10
        assert token.balance_of(BOB) == 0
        assert switch.is_paused() is False

    def test_propagates_original_exception_type(self):
        switch = PauseSwitch()
        with pytest.raises(ZeroDivisionError):
            with atomic(switch):
                1 // 0
