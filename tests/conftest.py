"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from pool_ledger.hardened import HardenedPool
from pool_ledger.pool import Pool
from tests.helpers import ALICE, BOB, CAROL, MALLORY, make_pool

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return FIXTURES_DIR


@pytest.fixture
def scenarios_dir() -> Path:
    """Return the scenario fixtures directory path."""
    return SCENARIOS_DIR


@pytest.fixture
def pool() -> Pool:
    """An empty pool with ALICE, BOB, CAROL and MALLORY funded and approved."""
    return make_pool(funded=[ALICE, BOB, CAROL, MALLORY])


@pytest.fixture
def seeded_pool(pool: Pool) -> Pool:
    """The pool after ALICE deposits (100, 400): reserves 100/400, 200 shares."""
    pool.deposit(100, 400, ALICE)
    return pool


@pytest.fixture
def deep_pool(pool: Pool) -> Pool:
    """A pool with deep reserves (1e6 / 4e6) seeded by ALICE."""
    pool.token_a.mint(ALICE, 10**6)
    pool.token_b.mint(ALICE, 4 * 10**6)
    pool.deposit(10**6, 4 * 10**6, ALICE)
    return pool


@pytest.fixture
def hardened_pool() -> HardenedPool:
    """An empty HardenedPool with ALICE, BOB, CAROL and MALLORY funded."""
    pool = make_pool(funded=[ALICE, BOB, CAROL, MALLORY], pool_cls=HardenedPool)
    assert isinstance(pool, HardenedPool)
    return pool
