"""Pool manager: the public entry point.

PoolManager hosts every pool in one shared state store and exposes the
pool operations. Each mutating operation:

1. takes the lock of the pool it touches (operations on other pools proceed
   concurrently),
2. runs inside one transaction, so a failure anywhere rolls back every
   state write, share mint/burn and asset transfer it already made,
3. re-raises the failure unchanged to the caller.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

import structlog

from multipool.assets import AssetMover, InMemoryAssetMover
from multipool.config import DEFAULT_CONFIG, PoolManagerConfig
from multipool.engine import LiquidityEngine, PoolContext, PoolLifecycleManager, SwapEngine
from multipool.errors import AssetTransferError, PoolManagerError, ShareLedgerError
from multipool.events import EventLog
from multipool.ledger import InMemoryShareLedger, ShareLedger
from multipool.models.types import AccountId, AssetId
from multipool.pools import PoolInfo, PoolKey, PoolStateStore, pool_key_for, share_class_id
from multipool.safe_int import SafeIntError, require_uint256
from multipool.transaction import atomic

logger = structlog.get_logger()

T = TypeVar("T")

# Failures that abort an operation; anything else is a bug and is logged with traceback
EXPECTED_ERRORS = (PoolManagerError, ShareLedgerError, AssetTransferError, SafeIntError)


class PoolManager:
    """Constant product AMM hosting many token-pair pools.

    Args:
        config: Addresses and seed size. If None, uses DEFAULT_CONFIG.
        ledger: LP share ledger. If None, uses an InMemoryShareLedger.
        mover: Asset mover. If None, uses an InMemoryAssetMover bound to
            config.pool_address.
        events: Notification sink. If None, uses a fresh EventLog.
        store: Pool state store. If None, starts empty.
    """

    def __init__(
        self,
        config: PoolManagerConfig | None = None,
        ledger: ShareLedger | None = None,
        mover: AssetMover | None = None,
        events: EventLog | None = None,
        store: PoolStateStore | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.store = store or PoolStateStore()
        self.ledger = ledger or InMemoryShareLedger()
        self.mover = mover or InMemoryAssetMover(self.config.pool_address)
        self.events = events or EventLog()

        context = PoolContext(
            store=self.store,
            ledger=self.ledger,
            mover=self.mover,
            events=self.events,
            config=self.config,
        )
        self.lifecycle = PoolLifecycleManager(context)
        self.liquidity = LiquidityEngine(context)
        self.swaps = SwapEngine(context)

        self._locks: dict[PoolKey, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    # --- Mutating operations ---

    def initialize_pool(self, asset_a: AssetId, asset_b: AssetId) -> PoolKey:
        """Create the pool for an unordered asset pair.

        Raises:
            PoolAlreadyExists: If the pair already has a pool
            SameAssetNotAllowed: If both assets are the same
        """
        return self._run(
            "initialize_pool",
            asset_a,
            asset_b,
            lambda: self.lifecycle.initialize_pool(asset_a, asset_b),
        )

    def add_liquidity(
        self,
        sender: AccountId,
        asset_a: AssetId,
        asset_b: AssetId,
        amount_a_in: int,
        amount_b_in: int,
        amount_a_in_min: int,
        amount_b_in_min: int,
    ) -> int:
        """Deposit into a pool and mint LP shares to sender.

        See LiquidityEngine.add_liquidity for the amount rules.

        Returns:
            Number of shares minted
        """
        _require_amounts(
            amount_a_in=amount_a_in,
            amount_b_in=amount_b_in,
            amount_a_in_min=amount_a_in_min,
            amount_b_in_min=amount_b_in_min,
        )
        return self._run(
            "add_liquidity",
            asset_a,
            asset_b,
            lambda: self.liquidity.add_liquidity(
                sender,
                asset_a,
                asset_b,
                amount_a_in,
                amount_b_in,
                amount_a_in_min,
                amount_b_in_min,
            ),
        )

    def remove_liquidity(
        self,
        sender: AccountId,
        recipient: AccountId,
        asset_a: AssetId,
        asset_b: AssetId,
        liquidity: int,
    ) -> tuple[int, int]:
        """Burn sender's LP shares and pay the pro-rata reserves to recipient.

        Returns:
            (amount_a_out, amount_b_out) in the caller's asset order
        """
        _require_amounts(liquidity=liquidity)
        return self._run(
            "remove_liquidity",
            asset_a,
            asset_b,
            lambda: self.liquidity.remove_liquidity(sender, recipient, asset_a, asset_b, liquidity),
        )

    def swap(
        self,
        sender: AccountId,
        asset_in: AssetId,
        amount_in: int,
        asset_out: AssetId,
        amount_out_min: int,
        recipient: AccountId,
    ) -> int:
        """Swap an exact input amount through the asset_in/asset_out pool.

        Returns:
            Amount of asset_out sent to recipient
        """
        _require_amounts(amount_in=amount_in, amount_out_min=amount_out_min)
        return self._run(
            "swap",
            asset_in,
            asset_out,
            lambda: self.swaps.swap(
                sender, asset_in, amount_in, asset_out, amount_out_min, recipient
            ),
        )

    # --- Read-only operations ---

    def get_pool_info(self, asset_a: AssetId, asset_b: AssetId) -> PoolInfo:
        """(initialized, reserve_a, reserve_b) with reserves in the caller's order."""
        return self.store.get_pool(asset_a, asset_b)

    def get_pool_key(self, asset_a: AssetId, asset_b: AssetId) -> PoolKey:
        return pool_key_for(asset_a, asset_b)

    def get_share_supply(self, asset_a: AssetId, asset_b: AssetId) -> int:
        """Total outstanding LP shares of a pool, seed shares included."""
        return self.store.get_share_supply(pool_key_for(asset_a, asset_b))

    def share_balance_of(self, holder: AccountId, asset_a: AssetId, asset_b: AssetId) -> int:
        return self.ledger.balance_of(holder, share_class_id(pool_key_for(asset_a, asset_b)))

    def quote_swap(self, asset_in: AssetId, amount_in: int, asset_out: AssetId) -> int:
        """Output swap() would currently produce for amount_in, without executing it."""
        _require_amounts(amount_in=amount_in)
        return self.swaps.quote(asset_in, amount_in, asset_out)

    # --- Internals ---

    @contextmanager
    def _pool_lock(self, key: PoolKey) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
        with lock:
            yield

    def _run(self, operation: str, asset_a: AssetId, asset_b: AssetId, body: Callable[[], T]) -> T:
        """Run body under the pool's lock as one transaction."""
        key = pool_key_for(asset_a, asset_b)
        with self._pool_lock(key):
            try:
                with atomic():
                    return body()
            except EXPECTED_ERRORS as exc:
                logger.warning(
                    "operation_reverted",
                    operation=operation,
                    error=type(exc).__name__,
                    detail=str(exc),
                )
                raise
            except Exception:
                logger.exception("operation_failed", operation=operation)
                raise


def _require_amounts(**amounts: int) -> None:
    """Validate caller-supplied amounts before any lock is taken."""
    for name, value in amounts.items():
        require_uint256(value, name)


_default_manager: PoolManager | None = None
_default_manager_lock = threading.Lock()


def get_default_manager() -> PoolManager:
    """Process-wide manager, created on first use from environment configuration."""
    global _default_manager
    with _default_manager_lock:
        if _default_manager is None:
            config = PoolManagerConfig.from_env()
            logger.info("default_manager_created", pool_address=config.pool_address)
            _default_manager = PoolManager(config=config)
        return _default_manager


def reset_default_manager() -> None:
    """Drop the process-wide manager (tests and restarts)."""
    global _default_manager
    with _default_manager_lock:
        _default_manager = None


__all__ = [
    "PoolManager",
    "get_default_manager",
    "reset_default_manager",
]
