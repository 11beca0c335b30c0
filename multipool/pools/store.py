"""Pool state store.

Sparse storage of every pool's state and share supply, addressed by pool key.
This module only stores and retrieves; it does not validate pool rules.
"""

from __future__ import annotations

import threading
from typing import Any

from multipool.models.types import AssetId
from multipool.pools.keys import is_flipped, pool_key_for
from multipool.pools.types import EMPTY_POOL_STATE, PoolInfo, PoolKey, PoolState
from multipool.safe_int import require_uint256
from multipool.transaction import record_undo


class PoolStateStore:
    """Pool key -> PoolState and pool key -> share supply.

    Absent keys read as the zero value (uninitialized, no reserves, no shares).
    Writes are undone if the surrounding transaction rolls back.

    Callers that name assets in non-canonical order use get_pool()/put_pool(),
    which remap reserves to and from the caller's order.
    """

    def __init__(self) -> None:
        self._states: dict[PoolKey, PoolState] = {}
        self._share_supply: dict[PoolKey, int] = {}
        # Guards the dicts themselves; per-pool ordering is the manager's job
        self._lock = threading.Lock()

    def get(self, key: PoolKey) -> PoolState:
        """Get the stored state for a key (zero value if absent)."""
        return self._states.get(key, EMPTY_POOL_STATE)

    def put(self, key: PoolKey, state: PoolState) -> None:
        """Replace the stored state for a key.

        Raises:
            Uint256Overflow: If a reserve is outside the uint256 range
        """
        require_uint256(state.reserve0, "reserve0")
        require_uint256(state.reserve1, "reserve1")
        with self._lock:
            previous = self._states.get(key)
            self._states[key] = state
        record_undo(lambda: self._restore(self._states, key, previous))

    def get_share_supply(self, key: PoolKey) -> int:
        return self._share_supply.get(key, 0)

    def set_share_supply(self, key: PoolKey, amount: int) -> None:
        """Replace the total share supply for a key.

        Raises:
            Uint256Overflow: If amount is outside the uint256 range
        """
        require_uint256(amount, "share supply")
        with self._lock:
            previous = self._share_supply.get(key)
            self._share_supply[key] = amount
        record_undo(lambda: self._restore(self._share_supply, key, previous))

    def get_pool(self, asset_a: AssetId, asset_b: AssetId) -> PoolInfo:
        """Get pool state with reserves in the caller's asset order."""
        return self.get(pool_key_for(asset_a, asset_b)).oriented(is_flipped(asset_a, asset_b))

    def put_pool(self, asset_a: AssetId, asset_b: AssetId, info: PoolInfo) -> None:
        """Store pool state given with reserves in the caller's asset order."""
        self.put(pool_key_for(asset_a, asset_b), info.canonical(is_flipped(asset_a, asset_b)))

    def __len__(self) -> int:
        return len(self._states)

    def _restore(self, table: dict[PoolKey, Any], key: PoolKey, previous: Any) -> None:
        with self._lock:
            if previous is None:
                table.pop(key, None)
            else:
                table[key] = previous
