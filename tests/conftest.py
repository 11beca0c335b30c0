"""Pytest configuration and fixtures."""

import pytest

from multipool.manager import PoolManager, reset_default_manager
from tests.helpers import ALICE, ONE, USDC, WETH, make_funded_pool, make_manager


@pytest.fixture
def manager() -> PoolManager:
    """A fresh manager with no pools."""
    return make_manager()


@pytest.fixture
def funded_manager() -> PoolManager:
    """Manager with a WETH/USDC pool seeded by ALICE at (100, 100) * 1e18."""
    manager = make_manager()
    make_funded_pool(manager, WETH, USDC, 100 * ONE, 100 * ONE, ALICE)
    return manager


@pytest.fixture(autouse=True)
def _reset_default_manager():
    """Keep the process-wide manager from leaking between tests."""
    yield
    reset_default_manager()
