"""Pool engines: creation, liquidity and swaps."""

from multipool.engine.base import BaseEngine, PoolContext
from multipool.engine.lifecycle import PoolLifecycleManager
from multipool.engine.liquidity import LiquidityEngine
from multipool.engine.swap import SwapEngine

__all__ = [
    "BaseEngine",
    "LiquidityEngine",
    "PoolContext",
    "PoolLifecycleManager",
    "SwapEngine",
]
