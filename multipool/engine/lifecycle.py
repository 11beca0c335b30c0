"""Pool creation.

A pool is created once per unordered asset pair. Creation mints the seed
shares to the burn address, which fixes a non-zero share price floor: a
first depositor cannot donate assets and then mint a disproportionate
number of shares for a dust deposit.
"""

from __future__ import annotations

import structlog

from multipool.engine.base import BaseEngine
from multipool.errors import PoolAlreadyExists, SameAssetNotAllowed
from multipool.events import PoolInitialized
from multipool.models.types import AssetId, short
from multipool.pools import PoolKey, PoolState, derive_pool_key, share_class_id, sort_assets
from multipool.transaction import on_commit

logger = structlog.get_logger()


class PoolLifecycleManager(BaseEngine):
    """Creates pools."""

    def initialize_pool(self, asset_a: AssetId, asset_b: AssetId) -> PoolKey:
        """Create the pool for an asset pair.

        Args:
            asset_a: One asset of the pair (either order)
            asset_b: The other asset

        Returns:
            The pool key

        Raises:
            PoolAlreadyExists: If the pair already has a pool
            SameAssetNotAllowed: If both assets are the same
        """
        token0, token1 = sort_assets(asset_a, asset_b)
        key = derive_pool_key(token0, token1)
        store = self.ctx.store

        if store.get(key).initialized:
            raise PoolAlreadyExists(f"Pool {short(token0)}/{short(token1)} already exists")
        if token0 == token1:
            raise SameAssetNotAllowed(f"Cannot pair {short(token0)} with itself")

        seed = self.ctx.config.minimum_liquidity
        store.put(key, PoolState(initialized=True, reserve0=0, reserve1=0))
        self.ctx.ledger.mint(self.ctx.config.burn_address, share_class_id(key), seed)
        store.set_share_supply(key, seed)

        event = PoolInitialized(token0=token0, token1=token1, pool_key=key)
        on_commit(lambda: self.ctx.events.emit(event))

        logger.info(
            "pool_initialized",
            token0=short(token0),
            token1=short(token1),
            pool_key=key.hex()[:16],
            seed_shares=seed,
        )
        return key

