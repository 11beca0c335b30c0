"""Pool state records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

# keccak-256 digest of the sorted asset pair
PoolKey = bytes


@dataclass(frozen=True)
class PoolState:
    """Stored state of one pool, reserves in canonical (sorted) asset order.

    reserve0 belongs to the asset with the lower numeric address.
    """

    initialized: bool = False
    reserve0: int = 0
    reserve1: int = 0

    def oriented(self, flipped: bool) -> PoolInfo:
        """View the state in caller order."""
        if flipped:
            return PoolInfo(self.initialized, self.reserve1, self.reserve0)
        return PoolInfo(self.initialized, self.reserve0, self.reserve1)


EMPTY_POOL_STATE = PoolState()


class PoolInfo(NamedTuple):
    """Pool state as seen by a caller, reserves in the order the caller named the assets."""

    initialized: bool
    reserve_a: int
    reserve_b: int

    def canonical(self, flipped: bool) -> PoolState:
        """Convert back to storage order."""
        if flipped:
            return PoolState(self.initialized, self.reserve_b, self.reserve_a)
        return PoolState(self.initialized, self.reserve_a, self.reserve_b)
