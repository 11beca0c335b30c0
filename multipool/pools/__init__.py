"""Pool addressing and storage."""

from multipool.pools.keys import (
    derive_pool_key,
    is_flipped,
    pool_key_for,
    share_class_id,
    sort_assets,
)
from multipool.pools.store import PoolStateStore
from multipool.pools.types import EMPTY_POOL_STATE, PoolInfo, PoolKey, PoolState

__all__ = [
    "EMPTY_POOL_STATE",
    "PoolInfo",
    "PoolKey",
    "PoolState",
    "PoolStateStore",
    "derive_pool_key",
    "is_flipped",
    "pool_key_for",
    "share_class_id",
    "sort_assets",
]
