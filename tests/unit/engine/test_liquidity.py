"""Tests for adding and removing liquidity."""

import pytest

from multipool.constants import BURN_ADDRESS, MINIMUM_LIQUIDITY
from multipool.errors import (
    IncorrectAmount,
    InsufficientAllowance,
    InsufficientShareBalance,
    LiquidityMustBeNotZero,
    PoolManagerError,
    PoolNotExist,
    ReserveDepleted,
    SeedSharesLocked,
)
from multipool.manager import PoolManager
from multipool.pools import PoolInfo
from tests.helpers import ALICE, BOB, CAROL, DAI, ONE, USDC, WETH, fund, mover_of


@pytest.fixture
def skewed_manager(manager: PoolManager) -> PoolManager:
    """WETH/USDC pool funded by ALICE at (100, 400) * 1e18 in (WETH, USDC) order."""
    fund(manager, ALICE, WETH, USDC)
    manager.initialize_pool(WETH, USDC)
    manager.add_liquidity(ALICE, WETH, USDC, 100 * ONE, 400 * ONE, 0, 0)
    return manager


class TestFirstDeposit:
    """Tests for the first deposit into a fresh pool."""

    def test_mints_floor_sqrt_and_sets_reserves(self, manager: PoolManager) -> None:
        fund(manager, ALICE, WETH, USDC)
        manager.initialize_pool(WETH, USDC)

        liquidity = manager.add_liquidity(ALICE, WETH, USDC, 4 * ONE, 9 * ONE, 0, 0)

        assert liquidity == 6 * ONE
        assert manager.get_pool_info(WETH, USDC) == PoolInfo(True, 4 * ONE, 9 * ONE)
        assert manager.share_balance_of(ALICE, WETH, USDC) == 6 * ONE
        assert manager.get_share_supply(WETH, USDC) == 6 * ONE + MINIMUM_LIQUIDITY

    def test_pulls_exact_amounts(self, manager: PoolManager) -> None:
        fund(manager, ALICE, WETH, USDC, amount=50 * ONE)
        manager.initialize_pool(WETH, USDC)

        manager.add_liquidity(ALICE, WETH, USDC, 20 * ONE, 30 * ONE, 0, 0)

        mover = mover_of(manager)
        pool = manager.config.pool_address
        assert mover.balance_of(WETH, ALICE) == 30 * ONE
        assert mover.balance_of(USDC, ALICE) == 20 * ONE
        assert mover.balance_of(WETH, pool) == 20 * ONE
        assert mover.balance_of(USDC, pool) == 30 * ONE

    def test_bounds_are_not_checked(self, manager: PoolManager) -> None:
        """An empty pool accepts the amounts as given whatever the bounds."""
        fund(manager, ALICE, WETH, USDC)
        manager.initialize_pool(WETH, USDC)

        assert manager.add_liquidity(ALICE, WETH, USDC, ONE, ONE, 0, 0) == ONE

    def test_reversed_order_stores_canonically(self, manager: PoolManager) -> None:
        fund(manager, ALICE, WETH, USDC)
        manager.initialize_pool(USDC, WETH)

        manager.add_liquidity(ALICE, WETH, USDC, 1 * ONE, 2000 * ONE, 0, 0)

        assert manager.get_pool_info(USDC, WETH) == PoolInfo(True, 2000 * ONE, 1 * ONE)

    def test_zero_side_mints_nothing(self, manager: PoolManager) -> None:
        fund(manager, ALICE, WETH, USDC)
        manager.initialize_pool(WETH, USDC)

        with pytest.raises(LiquidityMustBeNotZero):
            manager.add_liquidity(ALICE, WETH, USDC, 0, 10 * ONE, 0, 0)

        assert manager.get_pool_info(WETH, USDC) == PoolInfo(True, 0, 0)

    def test_uninitialized_pool(self, manager: PoolManager) -> None:
        fund(manager, ALICE, WETH, USDC)

        with pytest.raises(PoolNotExist):
            manager.add_liquidity(ALICE, WETH, USDC, ONE, ONE, 0, 0)


class TestSubsequentDeposit:
    """Tests for deposits into a funded pool."""

    def test_balanced_deposit(self, funded_manager: PoolManager) -> None:
        fund(funded_manager, BOB, WETH, USDC)
        supply = funded_manager.get_share_supply(WETH, USDC)

        liquidity = funded_manager.add_liquidity(
            BOB, WETH, USDC, 10 * ONE, 10 * ONE, 10 * ONE, 10 * ONE
        )

        assert liquidity == (10 * ONE * supply) // (100 * ONE)
        assert funded_manager.get_pool_info(WETH, USDC) == PoolInfo(True, 110 * ONE, 110 * ONE)
        assert funded_manager.get_share_supply(WETH, USDC) == supply + liquidity
        assert funded_manager.share_balance_of(BOB, WETH, USDC) == liquidity

    def test_optimal_amount_above_bound_rejected(self, funded_manager: PoolManager) -> None:
        """The *_min bounds cap the optimal amount pulled."""
        fund(funded_manager, BOB, WETH, USDC)

        with pytest.raises(IncorrectAmount):
            funded_manager.add_liquidity(
                BOB, WETH, USDC, 10 * ONE, 10 * ONE, 10 * ONE - 1, 10 * ONE
            )
        with pytest.raises(IncorrectAmount):
            funded_manager.add_liquidity(
                BOB, WETH, USDC, 10 * ONE, 10 * ONE, 10 * ONE, 10 * ONE - 1
            )

        assert funded_manager.get_pool_info(WETH, USDC) == PoolInfo(True, 100 * ONE, 100 * ONE)
        assert funded_manager.share_balance_of(BOB, WETH, USDC) == 0

    def test_skewed_pool_takes_optimal_amounts(self, skewed_manager: PoolManager) -> None:
        """Each side's optimal amount is amount_in * reserve_same / reserve_other."""
        fund(skewed_manager, BOB, WETH, USDC, amount=1000 * ONE)
        supply = skewed_manager.get_share_supply(WETH, USDC)
        assert supply == 200 * ONE + MINIMUM_LIQUIDITY

        liquidity = skewed_manager.add_liquidity(
            BOB, WETH, USDC, 10 * ONE, 40 * ONE, 1000 * ONE, 1000 * ONE
        )

        optimal_weth = 10 * ONE * 100 // 400
        optimal_usdc = 40 * ONE * 400 // 100
        assert liquidity == min(
            optimal_weth * supply // (100 * ONE), optimal_usdc * supply // (400 * ONE)
        )
        assert skewed_manager.get_pool_info(WETH, USDC) == PoolInfo(
            True, 100 * ONE + optimal_weth, 400 * ONE + optimal_usdc
        )
        mover = mover_of(skewed_manager)
        assert mover.balance_of(WETH, BOB) == 1000 * ONE - optimal_weth
        assert mover.balance_of(USDC, BOB) == 1000 * ONE - optimal_usdc

    def test_skewed_pool_bound_on_larger_side(self, skewed_manager: PoolManager) -> None:
        fund(skewed_manager, BOB, WETH, USDC)

        with pytest.raises(IncorrectAmount):
            skewed_manager.add_liquidity(BOB, WETH, USDC, 10 * ONE, 40 * ONE, ONE * 1000, 100 * ONE)

    def test_dust_deposit_rejected(self, skewed_manager: PoolManager) -> None:
        fund(skewed_manager, BOB, WETH, USDC)

        with pytest.raises(LiquidityMustBeNotZero):
            skewed_manager.add_liquidity(BOB, WETH, USDC, 1, 1, 10, 10)

    def test_missing_allowance_rolls_back(self, funded_manager: PoolManager) -> None:
        """A failed second pull undoes the first."""
        mover = mover_of(funded_manager)
        mover.credit(WETH, BOB, 10 * ONE)
        mover.approve(WETH, BOB, 10 * ONE)
        mover.credit(USDC, BOB, 10 * ONE)

        with pytest.raises(InsufficientAllowance):
            funded_manager.add_liquidity(BOB, WETH, USDC, 10 * ONE, 10 * ONE, 10 * ONE, 10 * ONE)

        assert mover.balance_of(WETH, BOB) == 10 * ONE
        assert mover.allowance(WETH, BOB) == 10 * ONE
        assert mover.balance_of(WETH, funded_manager.config.pool_address) == 100 * ONE
        assert funded_manager.share_balance_of(BOB, WETH, USDC) == 0
        assert funded_manager.get_pool_info(WETH, USDC) == PoolInfo(True, 100 * ONE, 100 * ONE)


class TestRemoveLiquidity:
    """Tests for LiquidityEngine.remove_liquidity."""

    def test_full_withdrawal_leaves_seed_reserves(self, funded_manager: PoolManager) -> None:
        shares = funded_manager.share_balance_of(ALICE, WETH, USDC)
        assert shares == 100 * ONE

        amount_weth, amount_usdc = funded_manager.remove_liquidity(
            ALICE, BOB, WETH, USDC, shares
        )

        assert amount_weth == amount_usdc == 100 * ONE - MINIMUM_LIQUIDITY
        assert funded_manager.get_pool_info(WETH, USDC) == PoolInfo(
            True, MINIMUM_LIQUIDITY, MINIMUM_LIQUIDITY
        )
        assert funded_manager.get_share_supply(WETH, USDC) == MINIMUM_LIQUIDITY
        assert funded_manager.share_balance_of(ALICE, WETH, USDC) == 0

    def test_recipient_receives_assets(self, funded_manager: PoolManager) -> None:
        amount_weth, amount_usdc = funded_manager.remove_liquidity(
            ALICE, CAROL, WETH, USDC, 10 * ONE
        )

        mover = mover_of(funded_manager)
        assert mover.balance_of(WETH, CAROL) == amount_weth
        assert mover.balance_of(USDC, CAROL) == amount_usdc

    def test_amounts_follow_caller_order(self, skewed_manager: PoolManager) -> None:
        supply = skewed_manager.get_share_supply(WETH, USDC)

        amount_usdc, amount_weth = skewed_manager.remove_liquidity(
            ALICE, ALICE, USDC, WETH, 50 * ONE
        )

        assert amount_usdc == 50 * ONE * 400 * ONE // supply
        assert amount_weth == 50 * ONE * 100 * ONE // supply
        assert skewed_manager.get_pool_info(USDC, WETH) == PoolInfo(
            True, 400 * ONE - amount_usdc, 100 * ONE - amount_weth
        )

    def test_zero_liquidity_rejected(self, funded_manager: PoolManager) -> None:
        with pytest.raises(LiquidityMustBeNotZero):
            funded_manager.remove_liquidity(ALICE, ALICE, WETH, USDC, 0)

    def test_uninitialized_pool(self, funded_manager: PoolManager) -> None:
        with pytest.raises(PoolNotExist):
            funded_manager.remove_liquidity(ALICE, ALICE, WETH, DAI, 1)

    def test_burning_unowned_shares_rolls_back(self, funded_manager: PoolManager) -> None:
        supply = funded_manager.get_share_supply(WETH, USDC)

        with pytest.raises(InsufficientShareBalance):
            funded_manager.remove_liquidity(BOB, BOB, WETH, USDC, ONE)

        assert funded_manager.get_share_supply(WETH, USDC) == supply
        assert funded_manager.get_pool_info(WETH, USDC) == PoolInfo(True, 100 * ONE, 100 * ONE)
        assert mover_of(funded_manager).balance_of(WETH, BOB) == 0

    def test_seed_shares_cannot_be_withdrawn(self, funded_manager: PoolManager) -> None:
        """Even after every LP exits, the seed keeps reserves above zero."""
        funded_manager.remove_liquidity(ALICE, ALICE, WETH, USDC, 100 * ONE)

        with pytest.raises(InsufficientShareBalance):
            funded_manager.remove_liquidity(ALICE, ALICE, WETH, USDC, MINIMUM_LIQUIDITY)

        info = funded_manager.get_pool_info(WETH, USDC)
        assert info.reserve_a > 0 and info.reserve_b > 0

    def test_burn_address_cannot_withdraw_seed(self, funded_manager: PoolManager) -> None:
        """Naming the burn address as sender does not unlock the seed shares."""
        funded_manager.remove_liquidity(ALICE, ALICE, WETH, USDC, 100 * ONE)
        info = funded_manager.get_pool_info(WETH, USDC)

        with pytest.raises(SeedSharesLocked):
            funded_manager.remove_liquidity(BURN_ADDRESS, CAROL, WETH, USDC, MINIMUM_LIQUIDITY)
        with pytest.raises(SeedSharesLocked):
            funded_manager.remove_liquidity(
                BURN_ADDRESS.upper().replace("0X", "0x"), CAROL, WETH, USDC, 1
            )

        assert funded_manager.get_share_supply(WETH, USDC) == MINIMUM_LIQUIDITY
        assert funded_manager.share_balance_of(BURN_ADDRESS, WETH, USDC) == MINIMUM_LIQUIDITY
        assert funded_manager.get_pool_info(WETH, USDC) == info
        assert mover_of(funded_manager).balance_of(WETH, CAROL) == 0


class TestDepletedReserve:
    """A pool drained to a single zero reserve by a swap into an empty pool."""

    @pytest.fixture
    def drained_manager(self, manager: PoolManager) -> PoolManager:
        fund(manager, ALICE, WETH, USDC)
        manager.initialize_pool(WETH, USDC)
        assert manager.swap(ALICE, WETH, 1, USDC, 0, ALICE) == 0
        assert manager.get_pool_info(WETH, USDC) == PoolInfo(True, 1, 0)
        return manager

    def test_deposit_rejected_with_named_error(self, drained_manager: PoolManager) -> None:
        with pytest.raises(ReserveDepleted) as exc_info:
            drained_manager.add_liquidity(ALICE, WETH, USDC, ONE, ONE, 2 * ONE, 2 * ONE)

        assert isinstance(exc_info.value, PoolManagerError)

    def test_either_order_rejected(self, drained_manager: PoolManager) -> None:
        with pytest.raises(ReserveDepleted):
            drained_manager.add_liquidity(ALICE, USDC, WETH, ONE, ONE, 2 * ONE, 2 * ONE)

    def test_rejection_leaves_state(self, drained_manager: PoolManager) -> None:
        supply = drained_manager.get_share_supply(WETH, USDC)
        balance = mover_of(drained_manager).balance_of(WETH, ALICE)

        with pytest.raises(ReserveDepleted):
            drained_manager.add_liquidity(ALICE, WETH, USDC, ONE, ONE, 2 * ONE, 2 * ONE)

        assert drained_manager.get_pool_info(WETH, USDC) == PoolInfo(True, 1, 0)
        assert drained_manager.get_share_supply(WETH, USDC) == supply
        assert mover_of(drained_manager).balance_of(WETH, ALICE) == balance
        assert drained_manager.share_balance_of(ALICE, WETH, USDC) == 0
