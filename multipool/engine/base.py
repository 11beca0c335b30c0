"""Shared wiring for the pool engines."""

from __future__ import annotations

from dataclasses import dataclass

from multipool.amm import ConstantProduct, constant_product
from multipool.assets import AssetMover
from multipool.config import PoolManagerConfig
from multipool.errors import PoolNotExist
from multipool.events import EventLog
from multipool.ledger import ShareLedger
from multipool.models.types import AssetId, short
from multipool.pools import PoolInfo, PoolStateStore


@dataclass
class PoolContext:
    """Everything an engine reads from or writes to.

    Engines assume the caller holds the pool's lock and an open transaction.
    """

    store: PoolStateStore
    ledger: ShareLedger
    mover: AssetMover
    events: EventLog
    config: PoolManagerConfig
    amm: ConstantProduct = constant_product


class BaseEngine:
    """Base class with helpers shared by the lifecycle, liquidity and swap engines."""

    def __init__(self, context: PoolContext) -> None:
        self.ctx = context

    def _require_pool(self, asset_a: AssetId, asset_b: AssetId) -> PoolInfo:
        """Read pool state in caller order, failing if it was never initialized.

        Raises:
            PoolNotExist: If the pool is not initialized
        """
        info = self.ctx.store.get_pool(asset_a, asset_b)
        if not info.initialized:
            raise PoolNotExist(f"No pool for {short(asset_a)}/{short(asset_b)}")
        return info
